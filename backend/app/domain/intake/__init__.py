"""Entry intake: form handling and the creation flow."""

from .controller import InputController, SubmissionOutcome
from .flow import (
    EntryCreationFlow,
    EntryForm,
    FlowState,
    FlowTransitionError,
    FormSnapshot,
)

__all__ = [
    "EntryCreationFlow",
    "EntryForm",
    "FlowState",
    "FlowTransitionError",
    "FormSnapshot",
    "InputController",
    "SubmissionOutcome",
]
