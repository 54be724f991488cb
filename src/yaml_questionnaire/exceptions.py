"""Exception hierarchy for questionnaire generation and filling."""

from __future__ import annotations


class QuestionnaireError(Exception):
    """Base exception for questionnaire errors."""
    pass


class NotAStruct(QuestionnaireError):
    """The supplied model is not a dataclass or pydantic model type."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"provided model must be a dataclass or pydantic model, got {kind}")


class UnsupportedFieldType(QuestionnaireError):
    """A tagged field has a type with no prompt mapping.

    Raised while building the prompt plan, before any prompt is shown.
    """

    def __init__(self, field_name: str, kind: str):
        self.field_name = field_name
        self.kind = kind
        super().__init__(f"unsupported field type: {kind} (field {field_name})")


class InvalidIntegerInput(QuestionnaireError):
    """Text entered for an integer field is not a base-10 integer."""

    def __init__(self, field_name: str, value: str, cause: Exception):
        self.field_name = field_name
        self.value = value
        self.cause = cause
        super().__init__(f"invalid integer value for {field_name}: {cause}")


class SlotOrderError(QuestionnaireError):
    """A dequeued slot does not belong to the field being filled.

    The fill pass replays the build pass field order; this is raised when the
    two drift apart instead of silently assigning the wrong answer.
    """

    def __init__(self, field_name: str, slot_field: str | None):
        self.field_name = field_name
        self.slot_field = slot_field
        if slot_field is None:
            detail = "no slot left in queue"
        else:
            detail = f"next slot belongs to {slot_field}"
        super().__init__(f"slot order mismatch while filling {field_name}: {detail}")
