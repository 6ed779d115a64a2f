"""Entry endpoints: catalog snapshot and the create-entry form."""

from __future__ import annotations

from http import HTTPStatus
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, model_validator

from ...context import AppContext
from ...domain.entrystore import Entry
from ...domain.intake import EntryForm
from ...infra.geocoding.device import ReportedDeviceLocator
from ...infra.logging import get_logger
from ..dependencies import get_app_context
from ..errors import http_error
from .view import ViewResponse, serialize_view

router = APIRouter(prefix="/api/entries", tags=["entries"])
logger = get_logger(__name__)

MAX_FIELD_LENGTH = 2048


class EntryItem(BaseModel):
    link: str
    description: str
    dateTime: str
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    createdAt: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryItem":
        return cls(**entry.to_dict())


class EntryListResponse(BaseModel):
    items: List[EntryItem] = Field(default_factory=list)
    total: int


class DevicePosition(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class FormModel(BaseModel):
    link: str = ""
    description: str = ""
    city: str = ""
    state: str = ""
    use_device_location: bool = False


class EntrySubmitRequest(FormModel):
    link: str = Field(default="", max_length=MAX_FIELD_LENGTH)
    description: str = Field(default="", max_length=MAX_FIELD_LENGTH)
    city: str = Field(default="", max_length=256)
    state: str = Field(default="", max_length=256)
    device_position: Optional[DevicePosition] = Field(
        default=None, description="Fix reported by the browser geolocation API."
    )
    device_error: Optional[Literal["unavailable", "denied", "timeout"]] = Field(
        default=None, description="Why the browser could not produce a fix."
    )

    @model_validator(mode="after")
    def _validate_device_payload(self) -> "EntrySubmitRequest":
        if self.device_position is not None and self.device_error is not None:
            raise ValueError("device_position and device_error are mutually exclusive")
        return self

    def to_form(self) -> EntryForm:
        return EntryForm(
            link=self.link,
            description=self.description,
            city=self.city,
            state=self.state,
            use_device_location=self.use_device_location,
        )

    def device_locator(self) -> Optional[ReportedDeviceLocator]:
        if not self.use_device_location:
            return None
        if self.device_position is None and self.device_error is None:
            return None
        return ReportedDeviceLocator(
            latitude=self.device_position.latitude if self.device_position else None,
            longitude=self.device_position.longitude if self.device_position else None,
            error=self.device_error,
        )


class NoticeModel(BaseModel):
    code: str
    message: str


class EntrySubmitResponse(BaseModel):
    flow_id: str
    state: str
    entry: EntryItem
    warnings: List[NoticeModel] = Field(default_factory=list)
    form: FormModel
    view: ViewResponse


@router.get(
    "",
    response_model=EntryListResponse,
    response_model_exclude_none=True,
    summary="List entries in insertion order",
)
def list_entries(context: AppContext = Depends(get_app_context)) -> EntryListResponse:
    entries = context.store.all()
    return EntryListResponse(
        items=[EntryItem.from_entry(entry) for entry in entries],
        total=len(entries),
    )


@router.post(
    "",
    response_model=EntrySubmitResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the create-entry form",
)
async def submit_entry(
    payload: EntrySubmitRequest,
    context: AppContext = Depends(get_app_context),
) -> EntrySubmitResponse:
    form = payload.to_form()
    outcome = await context.controller.submit(
        form, device_locator=payload.device_locator()
    )
    retained = FormModel(
        link=form.link,
        description=form.description,
        city=form.city,
        state=form.state,
        use_device_location=form.use_device_location,
    )
    if not outcome.ok or outcome.entry is None:
        error = outcome.error
        logger.info(
            "entry_submit_rejected",
            extra={
                "flow_id": outcome.flow.flow_id,
                "error_code": error.code if error else None,
            },
        )
        raise http_error(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            error.code if error else "submission_failed",
            error.user_message if error else "Submission failed.",
            {
                "flow_id": outcome.flow.flow_id,
                "retryable": error.retryable if error else False,
                "form": retained.model_dump(),
            },
        )
    return EntrySubmitResponse(
        flow_id=outcome.flow.flow_id,
        state=outcome.flow.state.value,
        entry=EntryItem.from_entry(outcome.entry),
        warnings=[
            NoticeModel(code=warning.code, message=warning.user_message)
            for warning in outcome.warnings
        ],
        form=retained,
        view=serialize_view(context),
    )
