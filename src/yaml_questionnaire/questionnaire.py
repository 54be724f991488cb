"""Run a questionnaire for a record type and build the populated record.

The flow is build, run, fill:

1. :func:`~yaml_questionnaire.builder.build_plan` reads the record type and
   creates one prompt per tagged field.
2. The prompts run as a single group; the engine writes each answer into the
   prompt's slot.
3. :func:`fill_values` replays the fields in declaration order, draining the
   text and boolean slot queues, and :func:`materialize` constructs the record
   by field name.

Any failure is terminal. Nothing is retried and no partially filled record
is returned.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Deque, Dict, Optional, Type, TypeVar

from .builder import PromptPlan, build_plan
from .config import QuestionnaireConfig
from .exceptions import InvalidIntegerInput, SlotOrderError
from .prompts import Form, Slot
from .schema import DEFAULT_TAG, FieldKind, FieldSpec, describe_model, materialize

logger = logging.getLogger(__name__)

T = TypeVar("T")

FormRunner = Callable[[Form], None]

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def parse_int(raw: str) -> int:
    """Parse a signed 64-bit base-10 integer.

    Whitespace, underscores, empty text and out-of-range values are rejected.
    """
    if not _INTEGER_RE.fullmatch(raw):
        raise ValueError(f"invalid syntax for base-10 integer: {raw!r}")
    number = int(raw, 10)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError(f"value out of range for 64-bit integer: {raw!r}")
    return number


def _dequeue(queue: Deque[Slot[Any]], spec: FieldSpec) -> Slot[Any]:
    if not queue:
        raise SlotOrderError(spec.name, None)
    slot = queue.popleft()
    if slot.field_name != spec.name:
        raise SlotOrderError(spec.name, slot.field_name)
    return slot


def fill_values(plan: PromptPlan) -> Dict[str, Any]:
    """Collect answered slot values keyed by field name.

    Drains ``plan.text_slots`` and ``plan.bool_slots``; call it once per plan.

    Raises:
        InvalidIntegerInput: If an integer field's text does not parse. Fields
            after it are not processed.
        SlotOrderError: If a slot queue is out of step with the field order.
    """
    values: Dict[str, Any] = {}
    for spec in plan.schema.fields:
        if not spec.tagged:
            continue

        if spec.kind is FieldKind.TEXT:
            raw = _dequeue(plan.text_slots, spec).value
            values[spec.name] = raw if spec.annotation is str else spec.annotation(raw)
        elif spec.kind is FieldKind.INTEGER:
            raw = _dequeue(plan.text_slots, spec).value
            try:
                number = parse_int(raw)
            except ValueError as exc:
                raise InvalidIntegerInput(spec.name, raw, exc) from exc
            values[spec.name] = number if spec.annotation is int else spec.annotation(number)
        elif spec.kind is FieldKind.BOOLEAN:
            values[spec.name] = bool(_dequeue(plan.bool_slots, spec).value)
        logger.debug("Filled %s", spec.name)

    return values


def _run_form(form: Form) -> None:
    form.run()


def run_questionnaire(
    model_type: Type[T],
    *,
    tag_name: str = DEFAULT_TAG,
    config: Optional[QuestionnaireConfig] = None,
    runner: Optional[FormRunner] = None,
) -> T:
    """Prompt for every tagged field of ``model_type`` and return the record.

    Args:
        model_type: Dataclass or pydantic model class.
        tag_name: Metadata key that opts fields in (ignored when ``config``
            is given).
        config: Optional settings.
        runner: Callable that runs the form; defaults to ``Form.run``.

    Returns:
        New instance of ``model_type`` with tagged fields set from the answers
        and untagged fields at their default or zero value.

    Raises:
        NotAStruct: ``model_type`` is not a record type.
        UnsupportedFieldType: A tagged field has no prompt mapping. No prompt
            is shown.
        typer.Abort: The user cancelled. Propagated from the engine as is.
        InvalidIntegerInput: An integer answer did not parse.
    """
    config = config or QuestionnaireConfig(tag_name=tag_name)
    schema = describe_model(model_type, config.tag_name)
    plan = build_plan(schema, config=config)

    form = Form(plan.group())
    try:
        (runner or _run_form)(form)
    except Exception:
        logger.warning("Questionnaire for %s did not complete", schema.model_type.__name__)
        raise

    values = fill_values(plan)
    record = materialize(schema, values)
    logger.info("Questionnaire for %s completed with %d answer(s)", schema.model_type.__name__, len(values))
    return record
