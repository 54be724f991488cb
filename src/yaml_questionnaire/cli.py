"""``yaml-questionnaire`` command line interface.

Commands:
    yaml-questionnaire run TARGET   -- Prompt for a record and print it as YAML
    yaml-questionnaire plan TARGET  -- Show the prompts a record would produce
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from .builder import build_plan
from .config import ConfigError, QuestionnaireConfig, load_config
from .exceptions import QuestionnaireError
from .output import dump_yaml
from .questionnaire import run_questionnaire
from .schema import FieldKind

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="yaml-questionnaire",
    help="Generate an interactive questionnaire from a tagged dataclass or pydantic model",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


class TargetError(ValueError):
    """Raised when a ``module:Class`` target cannot be resolved."""


def resolve_target(target: str) -> Any:
    """Import ``package.module:ClassName`` and return the attribute."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise TargetError(f"Target must look like 'package.module:ClassName', got {target!r}")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetError(f"Cannot import module {module_name!r}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise TargetError(f"Module {module_name!r} has no attribute {attr_path!r}") from exc
    return obj


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _settings(config_path: Optional[Path], tag: Optional[str], title: Optional[str] = None) -> QuestionnaireConfig:
    return load_config(config_path).merged(tag_name=tag, group_title=title)


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


_PROMPT_TYPES = {
    FieldKind.TEXT: "input",
    FieldKind.INTEGER: "input (integer)",
    FieldKind.BOOLEAN: "confirm",
}


@app.command("run")
def run_command(
    target: str = typer.Argument(..., help="Record type as 'package.module:ClassName'"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the YAML document to this file"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Field tag that opts fields in (default: yaml)"),
    title: Optional[str] = typer.Option(None, "--title", help="Heading shown above the questions"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Prompt for every tagged field and print the result as YAML."""
    _configure_logging(verbose)
    try:
        settings = _settings(config_path, tag, title)
        model_type = resolve_target(target)
        logger.debug("Resolved %s to %r", target, model_type)
        record = run_questionnaire(model_type, config=settings)
    except typer.Abort:
        typer.secho("\nQuestionnaire cancelled", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(1)
    except (QuestionnaireError, ConfigError, TargetError) as exc:
        _fail(str(exc))

    if output is None:
        typer.echo(dump_yaml(record, tag_name=settings.tag_name), nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as handle:
        dump_yaml(record, handle, tag_name=settings.tag_name)
    console.print(f"[green]Wrote[/green] {output}")


@app.command("plan")
def plan_command(
    target: str = typer.Argument(..., help="Record type as 'package.module:ClassName'"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Field tag that opts fields in (default: yaml)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file"),
) -> None:
    """Show the questions a record type produces without asking them."""
    try:
        settings = _settings(config_path, tag)
        plan = build_plan(resolve_target(target), config=settings)
    except (QuestionnaireError, ConfigError, TargetError) as exc:
        _fail(str(exc))

    table = Table(title=f"Questionnaire for {plan.schema.model_type.__name__}", show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Field", style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("Prompt", style="magenta")
    table.add_column("Key")

    for spec in plan.schema.fields:
        if spec.tagged:
            table.add_row(str(spec.index), spec.name, spec.type_name, _PROMPT_TYPES[spec.kind], spec.key)
        else:
            table.add_row(str(spec.index), f"[dim]{spec.name}[/dim]", spec.type_name, "[dim]skipped[/dim]", "")

    console.print(table)
    _, (text_count, bool_count) = plan.shape()
    console.print(f"[dim]{len(plan.descriptors)} prompt(s): {text_count} text, {bool_count} confirm[/dim]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
