"""Read record types into ordered field metadata.

A record is either a ``@dataclass`` or a pydantic ``BaseModel``. A field opts
into the questionnaire by carrying a non-empty tag under the configured tag
name (``"yaml"`` by default)::

    @dataclass
    class ServerConfig:
        host: str = yaml_field("host")
        port: int = yaml_field("port")
        debug: bool = yaml_field("debug")
        notes: str = ""            # untagged, never prompted

For pydantic models the tag lives in ``json_schema_extra``::

    class ServerConfig(BaseModel):
        host: str = Field("", json_schema_extra={"yaml": "host"})
"""

from __future__ import annotations

import builtins
import dataclasses
import inspect
import logging
import sys
import typing
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

from .exceptions import NotAStruct

logger = logging.getLogger(__name__)

DEFAULT_TAG = "yaml"


class FieldKind(Enum):
    """Coarse category a field's type is bucketed into for prompting."""

    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    UNSUPPORTED = "unsupported"


_ZERO_VALUES: dict[FieldKind, Any] = {
    FieldKind.TEXT: "",
    FieldKind.INTEGER: 0,
    FieldKind.BOOLEAN: False,
}


@dataclass(frozen=True)
class FieldSpec:
    """Metadata for one record field, in declaration order."""

    index: int
    name: str
    kind: FieldKind
    annotation: Any
    tag: str = ""
    zero: Any = None
    required: bool = True
    init: bool = True

    @property
    def tagged(self) -> bool:
        return bool(self.tag)

    @property
    def key(self) -> str:
        """Output key from the tag (``"name,omitempty"`` -> ``"name"``)."""
        key = self.tag.split(",", 1)[0].strip()
        return key or self.name

    @property
    def type_name(self) -> str:
        return type_name(self.annotation)


@dataclass(frozen=True)
class ModelSchema:
    """Ordered field metadata for a record type."""

    model_type: type
    tag_name: str
    fields: tuple[FieldSpec, ...]

    @property
    def is_pydantic(self) -> bool:
        return issubclass(self.model_type, BaseModel)

    def tagged_fields(self) -> list[FieldSpec]:
        return [spec for spec in self.fields if spec.tagged]

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)


def yaml_field(tag: str, *, default: Any = dataclasses.MISSING, default_factory: Any = dataclasses.MISSING,
               tag_name: str = DEFAULT_TAG, **kwargs: Any) -> Any:
    """Declare a tagged dataclass field.

    Thin wrapper over :func:`dataclasses.field` that stores ``tag`` in the
    field metadata under ``tag_name``. Without an explicit default the field
    defaults to nothing, so the dataclass constructor requires it.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_name] = tag
    return dataclasses.field(default=default, default_factory=default_factory, metadata=metadata, **kwargs)


def type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def classify(annotation: Any) -> FieldKind:
    """Map a declared field type to its kind-class."""
    if typing.get_origin(annotation) is not None or not isinstance(annotation, type):
        return FieldKind.UNSUPPORTED
    if issubclass(annotation, Enum):
        return FieldKind.UNSUPPORTED
    # bool is an int subclass, so it is checked first
    if issubclass(annotation, bool):
        return FieldKind.BOOLEAN
    if issubclass(annotation, int):
        return FieldKind.INTEGER
    if issubclass(annotation, str):
        return FieldKind.TEXT
    return FieldKind.UNSUPPORTED


def describe_kind(model: Any) -> str:
    """Describe what was supplied in place of a record type."""
    if inspect.isclass(model):
        return f"class {model.__name__}"
    if inspect.isroutine(model):
        return "function"
    if model is None:
        return "None"
    if isinstance(model, (str, bytes, int, float, bool, list, tuple, dict, set)):
        return type(model).__name__
    return f"instance of {type(model).__name__}"


def _tag_from_json_extra(extra: Any, tag_name: str) -> str:
    if isinstance(extra, dict):
        value = extra.get(tag_name)
        return value if isinstance(value, str) else ""
    return ""


def _resolve_annotation(model_type: type, annotation: Any) -> Any:
    # Only bare names are looked up; anything else stays a string and
    # classifies as unsupported.
    if not isinstance(annotation, str):
        return annotation
    module = sys.modules.get(model_type.__module__)
    namespace = vars(module) if module is not None else {}
    resolved = namespace.get(annotation, getattr(builtins, annotation, None))
    return resolved if resolved is not None else annotation


def _field_hints(model_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(model_type)
    except (NameError, TypeError) as exc:
        logger.debug("Cannot resolve all annotations of %s: %s", model_type.__name__, exc)
        return {
            fld.name: _resolve_annotation(model_type, fld.type)
            for fld in dataclasses.fields(model_type)
        }


def _dataclass_specs(model_type: type, tag_name: str) -> list[FieldSpec]:
    hints = _field_hints(model_type)
    specs: list[FieldSpec] = []
    for index, fld in enumerate(dataclasses.fields(model_type)):
        annotation = hints.get(fld.name, fld.type)
        kind = classify(annotation)
        tag = fld.metadata.get(tag_name, "")
        required = fld.default is dataclasses.MISSING and fld.default_factory is dataclasses.MISSING
        specs.append(
            FieldSpec(
                index=index,
                name=fld.name,
                kind=kind,
                annotation=annotation,
                tag=tag if isinstance(tag, str) else "",
                zero=_ZERO_VALUES.get(kind),
                required=required,
                init=fld.init,
            )
        )
    return specs


def _pydantic_specs(model_type: type[BaseModel], tag_name: str) -> list[FieldSpec]:
    specs: list[FieldSpec] = []
    for index, (name, info) in enumerate(model_type.model_fields.items()):
        kind = classify(info.annotation)
        specs.append(
            FieldSpec(
                index=index,
                name=name,
                kind=kind,
                annotation=info.annotation,
                tag=_tag_from_json_extra(info.json_schema_extra, tag_name),
                zero=_ZERO_VALUES.get(kind),
                required=info.is_required(),
            )
        )
    return specs


@lru_cache(maxsize=None)
def _describe_type(model_type: type, tag_name: str) -> ModelSchema:
    if dataclasses.is_dataclass(model_type):
        specs = _dataclass_specs(model_type, tag_name)
    else:
        specs = _pydantic_specs(model_type, tag_name)
    logger.debug(
        "Read %s: %d field(s), %d tagged with %r",
        model_type.__name__,
        len(specs),
        sum(1 for spec in specs if spec.tagged),
        tag_name,
    )
    return ModelSchema(model_type=model_type, tag_name=tag_name, fields=tuple(specs))


def describe_model(model_type: Any, tag_name: str = DEFAULT_TAG) -> ModelSchema:
    """Read a record type into a :class:`ModelSchema`.

    The result is cached per (type, tag name).

    Args:
        model_type: A dataclass type or pydantic model class.
        tag_name: Metadata key that opts a field into the questionnaire.

    Returns:
        Schema with every field (tagged or not) in declaration order.

    Raises:
        NotAStruct: If ``model_type`` is not a record type.
    """
    if not inspect.isclass(model_type):
        raise NotAStruct(describe_kind(model_type))
    if not (dataclasses.is_dataclass(model_type) or issubclass(model_type, BaseModel)):
        raise NotAStruct(describe_kind(model_type))
    return _describe_type(model_type, tag_name)


def zero_instance(schema: ModelSchema) -> Any:
    """Build the record with every field at its default or zero value."""
    return materialize(schema, {})


def materialize(schema: ModelSchema, values: dict[str, Any]) -> Any:
    """Construct the record by field name.

    Fields missing from ``values`` keep their declared default; fields with
    no default get the kind's zero value (``None`` for unsupported kinds).
    """
    kwargs: dict[str, Any] = {}
    late: dict[str, Any] = {}
    late_zeros: dict[str, Any] = {}
    for spec in schema.fields:
        if spec.name in values:
            target = kwargs if spec.init else late
            target[spec.name] = values[spec.name]
        elif spec.required:
            target = kwargs if spec.init else late_zeros
            target[spec.name] = spec.zero
    if schema.is_pydantic:
        return schema.model_type.model_construct(**kwargs)
    instance = schema.model_type(**kwargs)
    for name, value in late_zeros.items():
        # __post_init__ may already have set it
        if not hasattr(instance, name):
            object.__setattr__(instance, name, value)
    for name, value in late.items():
        # init=False fields may live on frozen dataclasses
        object.__setattr__(instance, name, value)
    return instance
