"""Emit a filled record as a YAML document keyed by its tags."""

from __future__ import annotations

import io
from typing import Any, IO, Optional

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from .schema import DEFAULT_TAG, ModelSchema, describe_model

SKIP_KEY = "-"


def to_mapping(instance: Any, schema: ModelSchema | None = None, *, tag_name: str = DEFAULT_TAG) -> CommentedMap:
    """Return the tagged fields of ``instance`` in declaration order.

    Keys come from each field's tag (``"port,omitempty"`` -> ``"port"``).
    Untagged fields and fields tagged ``"-"`` are left out.
    """
    schema = schema or describe_model(type(instance), tag_name)
    mapping = CommentedMap()
    for spec in schema.tagged_fields():
        if spec.key == SKIP_KEY:
            continue
        mapping[spec.key] = getattr(instance, spec.name)
    return mapping


def dump_yaml(
    instance: Any,
    stream: Optional[IO[str]] = None,
    *,
    schema: ModelSchema | None = None,
    tag_name: str = DEFAULT_TAG,
) -> str | None:
    """Write ``instance`` as YAML.

    Returns:
        The document text when ``stream`` is None, otherwise None.
    """
    yaml = YAML()
    yaml.default_flow_style = False
    mapping = to_mapping(instance, schema, tag_name=tag_name)
    if stream is not None:
        yaml.dump(mapping, stream)
        return None
    buffer = io.StringIO()
    yaml.dump(mapping, buffer)
    return buffer.getvalue()
