"""Projection endpoints: the table rows and map markers the page draws."""

from __future__ import annotations

from typing import List, Literal, Tuple

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from ...context import AppContext
from ...domain.projection import SORTABLE_COLUMNS
from ...infra.logging import get_logger
from ..dependencies import get_app_context
from ..errors import http_error

router = APIRouter(prefix="/api/view", tags=["view"])
logger = get_logger(__name__)

MAX_FILTER_LENGTH = 256


class SortStateModel(BaseModel):
    key: str
    direction: Literal["asc", "desc"]


class TableRowModel(BaseModel):
    href: str
    label: str
    dateTime: str
    city: str
    state: str
    latitude: str
    longitude: str


class MarkerModel(BaseModel):
    latitude: float
    longitude: float
    popup: str


class MapStateModel(BaseModel):
    center: Tuple[float, float]
    zoom: int
    tile_url: str
    attribution: str


class ViewResponse(BaseModel):
    sort: SortStateModel
    filter: str = ""
    sortable_columns: List[str] = Field(default_factory=lambda: list(SORTABLE_COLUMNS))
    rows: List[TableRowModel] = Field(default_factory=list)
    markers: List[MarkerModel] = Field(default_factory=list)
    map: MapStateModel
    total_entries: int


class SortRequest(BaseModel):
    column: str = Field(..., min_length=1)


class SearchRequest(BaseModel):
    text: str = Field(default="", max_length=MAX_FILTER_LENGTH)


def serialize_view(context: AppContext) -> ViewResponse:
    """Read the table and map surfaces as last drawn."""

    map_cfg = context.settings.map
    layer = context.map_layer
    with context.view_sync.hold():
        state = context.projector.state
        return ViewResponse(
            sort=SortStateModel(key=state.sort_key, direction=state.sort_direction.value),
            filter=state.filter_text,
            rows=[
                TableRowModel(
                    href=row.href,
                    label=row.label,
                    dateTime=row.date_time,
                    city=row.city,
                    state=row.state,
                    latitude=row.latitude,
                    longitude=row.longitude,
                )
                for row in context.table.rows
            ],
            markers=[
                MarkerModel(latitude=m.latitude, longitude=m.longitude, popup=m.popup)
                for m in layer.markers
            ],
            map=MapStateModel(
                center=layer.center or map_cfg.center,
                zoom=layer.zoom if layer.zoom is not None else map_cfg.zoom,
                tile_url=map_cfg.tile_url,
                attribution=map_cfg.attribution,
            ),
            total_entries=len(context.store),
        )


@router.get("", response_model=ViewResponse, summary="Current table and map view")
def get_view(context: AppContext = Depends(get_app_context)) -> ViewResponse:
    with context.view_sync.hold():
        context.view_sync.refresh()
        return serialize_view(context)


@router.post("/sort", response_model=ViewResponse, summary="Toggle a sort column")
def toggle_sort(
    payload: SortRequest,
    context: AppContext = Depends(get_app_context),
) -> ViewResponse:
    try:
        context.controller.toggle_sort(payload.column)
    except ValueError as exc:
        raise http_error(
            status.HTTP_400_BAD_REQUEST,
            "INVALID-SORT-COLUMN",
            str(exc),
            {"column": payload.column, "allowed": list(SORTABLE_COLUMNS)},
        ) from exc
    logger.info(
        "view_sort_toggled",
        extra={
            "sort_key": context.projector.state.sort_key,
            "sort_direction": context.projector.state.sort_direction.value,
        },
    )
    return serialize_view(context)


@router.post("/search", response_model=ViewResponse, summary="Set the search filter")
def set_search(
    payload: SearchRequest,
    context: AppContext = Depends(get_app_context),
) -> ViewResponse:
    context.controller.search(payload.text)
    return serialize_view(context)
