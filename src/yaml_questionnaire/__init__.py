"""Turn tagged configuration records into interactive questionnaires."""

from .builder import PromptPlan, build_plan
from .config import ConfigError, QuestionnaireConfig, load_config
from .exceptions import (
    InvalidIntegerInput,
    NotAStruct,
    QuestionnaireError,
    SlotOrderError,
    UnsupportedFieldType,
)
from .output import dump_yaml, to_mapping
from .prompts import Confirm, Form, Group, Slot, TextInput
from .questionnaire import fill_values, parse_int, run_questionnaire
from .schema import (
    DEFAULT_TAG,
    FieldKind,
    FieldSpec,
    ModelSchema,
    describe_model,
    materialize,
    yaml_field,
    zero_instance,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Confirm",
    "DEFAULT_TAG",
    "FieldKind",
    "FieldSpec",
    "Form",
    "Group",
    "InvalidIntegerInput",
    "ModelSchema",
    "NotAStruct",
    "PromptPlan",
    "QuestionnaireConfig",
    "QuestionnaireError",
    "Slot",
    "SlotOrderError",
    "TextInput",
    "UnsupportedFieldType",
    "build_plan",
    "describe_model",
    "dump_yaml",
    "fill_values",
    "load_config",
    "materialize",
    "parse_int",
    "run_questionnaire",
    "to_mapping",
    "yaml_field",
    "zero_instance",
]
