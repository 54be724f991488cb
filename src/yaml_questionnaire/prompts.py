"""Declarative prompt descriptors and the blocking engine that runs them.

Descriptors are plain objects (title + kind + bound output slot). A
:class:`Form` holds one or more :class:`Group` objects and ``Form.run()``
asks every question in order through ``typer.prompt`` / ``typer.confirm``,
writing each answer into the descriptor's slot.

Cancellation (Ctrl+C or end of input) surfaces as ``typer.Abort`` and is
not caught here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar, Union

import typer
from rich.console import Console

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Slot(Generic[T]):
    """Mutable single-value holder bound to one prompt descriptor."""

    field_name: str
    value: T


@dataclass
class TextInput:
    """Free-text question."""

    title: str
    slot: Slot[str]
    required: bool = False

    kind = "input"

    def run(self) -> None:
        if self.required:
            answer = typer.prompt(self.title, type=str)
        else:
            answer = typer.prompt(self.title, default="", show_default=False, type=str)
        self.slot.value = answer


@dataclass
class Confirm:
    """Yes/no question."""

    title: str
    slot: Slot[bool]
    default: bool = False

    kind = "confirm"

    def run(self) -> None:
        self.slot.value = typer.confirm(self.title, default=self.default)


PromptField = Union[TextInput, Confirm]


@dataclass
class Group:
    """Ordered set of questions shown together."""

    fields: List[PromptField] = field(default_factory=list)
    title: Optional[str] = None

    def __len__(self) -> int:
        return len(self.fields)


class Form:
    """One or more groups run in sequence."""

    def __init__(self, *groups: Group, console: Console | None = None):
        self.groups = list(groups)
        self.console = console or Console()

    def run(self) -> None:
        """Ask every question, filling the bound slots.

        Raises:
            typer.Abort: If the user cancels with Ctrl+C or input ends.
        """
        total = sum(len(group) for group in self.groups)
        logger.debug("Running form with %d group(s), %d question(s)", len(self.groups), total)
        for group in self.groups:
            if group.title:
                self.console.print(f"[bold cyan]{group.title}[/bold cyan]")
            for prompt_field in group.fields:
                prompt_field.run()


__all__ = [
    "Confirm",
    "Form",
    "Group",
    "PromptField",
    "Slot",
    "TextInput",
]
