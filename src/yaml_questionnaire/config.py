"""Questionnaire settings stored in a YAML file.

The file holds a ``questionnaire:`` section::

    questionnaire:
      tag_name: yaml
      require_text: true
      group_title: Server settings

Unknown keys are ignored so the section can share a file with other tools.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ruamel.yaml import YAML

from .schema import DEFAULT_TAG

logger = logging.getLogger(__name__)

CONFIG_SECTION = "questionnaire"


class ConfigError(RuntimeError):
    """Raised when the settings file cannot be parsed or validated."""


@dataclass(slots=True)
class QuestionnaireConfig:
    """How records are turned into prompts."""

    tag_name: str = DEFAULT_TAG
    require_text: bool = False
    group_title: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, object] | None) -> "QuestionnaireConfig":
        if not isinstance(data, dict):
            return cls()

        tag_name = data.get("tag_name")
        if tag_name is not None and not (isinstance(tag_name, str) and tag_name.strip()):
            raise ConfigError(f"Invalid {CONFIG_SECTION}.tag_name: expected a non-empty string, got {tag_name!r}")

        require_text = data.get("require_text", False)
        if not isinstance(require_text, bool):
            raise ConfigError(f"Invalid {CONFIG_SECTION}.require_text: expected true or false, got {require_text!r}")

        group_title = data.get("group_title")
        return cls(
            tag_name=tag_name.strip() if isinstance(tag_name, str) else DEFAULT_TAG,
            require_text=require_text,
            group_title=str(group_title).strip() if group_title else None,
        )

    def merged(self, *, tag_name: str | None = None, group_title: str | None = None) -> "QuestionnaireConfig":
        """Return a copy with explicitly given values taking precedence."""
        return QuestionnaireConfig(
            tag_name=tag_name or self.tag_name,
            require_text=self.require_text,
            group_title=group_title or self.group_title,
        )


def load_config(path: Path | None) -> QuestionnaireConfig:
    """Load settings from ``path``.

    Args:
        path: YAML file; ``None`` or a missing file yields defaults.

    Returns:
        QuestionnaireConfig instance

    Raises:
        ConfigError: If the file is not valid YAML or a value has the wrong type.
    """
    if path is None:
        return QuestionnaireConfig()
    if not path.exists():
        logger.info("Config file not found: %s", path)
        return QuestionnaireConfig()

    yaml = YAML()
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle) or {}
    except Exception as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc

    section = payload.get(CONFIG_SECTION) if isinstance(payload, dict) else None
    return QuestionnaireConfig.from_dict(section if isinstance(section, dict) else None)
