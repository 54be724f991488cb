"""Turn a record schema into a prompt plan."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, List, Tuple

from .config import QuestionnaireConfig
from .exceptions import UnsupportedFieldType
from .prompts import Confirm, Group, PromptField, Slot, TextInput
from .schema import DEFAULT_TAG, FieldKind, ModelSchema, describe_model

logger = logging.getLogger(__name__)

PlanShape = Tuple[Tuple[Tuple[str, str], ...], Tuple[int, int]]


@dataclass
class PromptPlan:
    """Descriptors for every tagged field plus their output slots.

    ``text_slots`` holds one slot per text or integer field and
    ``bool_slots`` one per boolean field, each in field declaration order.
    """

    schema: ModelSchema
    descriptors: List[PromptField] = field(default_factory=list)
    text_slots: Deque[Slot[str]] = field(default_factory=deque)
    bool_slots: Deque[Slot[bool]] = field(default_factory=deque)
    group_title: str | None = None

    def group(self) -> Group:
        return Group(fields=list(self.descriptors), title=self.group_title)

    def shape(self) -> PlanShape:
        """Structural signature: descriptor titles and kinds, slot counts."""
        kinds = tuple((descriptor.title, descriptor.kind) for descriptor in self.descriptors)
        return kinds, (len(self.text_slots), len(self.bool_slots))


def build_plan(model: Any, *, tag_name: str = DEFAULT_TAG, config: QuestionnaireConfig | None = None) -> PromptPlan:
    """Build the prompt plan for a record type.

    Args:
        model: Record type, or a :class:`ModelSchema` already read from one.
        tag_name: Metadata key that opts fields in; ``config.tag_name``
            wins when a config is given.
        config: Optional settings (required text inputs, group title).

    Returns:
        PromptPlan with one descriptor per tagged field

    Raises:
        NotAStruct: If ``model`` is not a record type.
        UnsupportedFieldType: If a tagged field has no prompt mapping.
    """
    config = config or QuestionnaireConfig(tag_name=tag_name)
    schema = model if isinstance(model, ModelSchema) else describe_model(model, config.tag_name)
    plan = PromptPlan(schema=schema, group_title=config.group_title)

    for spec in schema.fields:
        if not spec.tagged:
            logger.debug("Skipping untagged field %s", spec.name)
            continue

        if spec.kind in (FieldKind.TEXT, FieldKind.INTEGER):
            # integers are collected as text and parsed when filling
            text_slot: Slot[str] = Slot(spec.name, "")
            plan.descriptors.append(TextInput(title=spec.name, slot=text_slot, required=config.require_text))
            plan.text_slots.append(text_slot)
        elif spec.kind is FieldKind.BOOLEAN:
            bool_slot: Slot[bool] = Slot(spec.name, False)
            plan.descriptors.append(Confirm(title=spec.name, slot=bool_slot))
            plan.bool_slots.append(bool_slot)
        else:
            raise UnsupportedFieldType(spec.name, spec.type_name)

    logger.debug(
        "Built plan for %s: %d prompt(s), %d text slot(s), %d boolean slot(s)",
        schema.model_type.__name__,
        len(plan.descriptors),
        len(plan.text_slots),
        len(plan.bool_slots),
    )
    return plan
