"""Per-submission entry-creation flow.

Each submission owns one flow object holding a snapshot of the form, so
concurrent submissions never share mutable controller state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple
from uuid import uuid4

from ..entrystore.models import utcnow
from ..errors import CatalogError

__all__ = [
    "EntryCreationFlow",
    "EntryForm",
    "FlowState",
    "FlowTransitionError",
    "FormSnapshot",
]


class FlowState(str, Enum):
    IDLE = "idle"
    AWAITING_LOCATION = "awaiting_location"
    RESOLVED = "resolved"
    AWAITING_DEVICE_FIX = "awaiting_device_fix"
    AWAITING_REVERSE_LOOKUP = "awaiting_reverse_lookup"
    PERSISTED = "persisted"


ALLOWED_TRANSITIONS: Dict[FlowState, FrozenSet[FlowState]] = {
    FlowState.IDLE: frozenset(
        {FlowState.AWAITING_LOCATION, FlowState.AWAITING_DEVICE_FIX}
    ),
    FlowState.AWAITING_LOCATION: frozenset({FlowState.RESOLVED, FlowState.IDLE}),
    FlowState.RESOLVED: frozenset({FlowState.PERSISTED}),
    FlowState.AWAITING_DEVICE_FIX: frozenset(
        {FlowState.AWAITING_REVERSE_LOOKUP, FlowState.PERSISTED, FlowState.IDLE}
    ),
    FlowState.AWAITING_REVERSE_LOOKUP: frozenset({FlowState.PERSISTED}),
    FlowState.PERSISTED: frozenset(),
}


class FlowTransitionError(RuntimeError):
    """Raised on a transition the state machine does not allow."""


@dataclass(frozen=True)
class FormSnapshot:
    link: str
    description: str
    city: str
    state: str
    use_device_location: bool


@dataclass
class EntryForm:
    """The create-entry form as the page holds it."""

    link: str = ""
    description: str = ""
    city: str = ""
    state: str = ""
    use_device_location: bool = False

    def snapshot(self) -> FormSnapshot:
        return FormSnapshot(
            link=self.link,
            description=self.description,
            city=self.city,
            state=self.state,
            use_device_location=self.use_device_location,
        )

    def clear(self) -> None:
        # the location toggle keeps its position, like the page checkbox
        self.link = ""
        self.description = ""
        self.city = ""
        self.state = ""


@dataclass
class EntryCreationFlow:
    form: FormSnapshot
    flow_id: str = field(default_factory=lambda: uuid4().hex)
    state: FlowState = FlowState.IDLE
    error: Optional[CatalogError] = None
    history: List[Tuple[FlowState, datetime]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append((self.state, utcnow()))

    @property
    def is_device_path(self) -> bool:
        return self.form.use_device_location

    def advance(self, target: FlowState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise FlowTransitionError(
                f"flow {self.flow_id}: {self.state.value} -> {target.value} not allowed"
            )
        self.state = target
        self.history.append((target, utcnow()))

    def fail(self, error: CatalogError) -> None:
        """Drop back to idle after a failed resolution."""

        self.error = error
        if self.state is not FlowState.IDLE:
            self.advance(FlowState.IDLE)
