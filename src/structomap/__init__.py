"""structomap - project records into plain dicts ready for encoding.

Core abstractions:
- Projector: ordered pick/omit/add/convert modifiers + key casing
- FieldAccessor: reads named fields off one family of record types
- ProjectorConfig: process-wide defaults (key casing)
"""

from structomap.casing import KeyCase, to_camel_case, to_pascal_case, to_snake_case
from structomap.config import ProjectorConfig, get_config, reset_config, set_default_case
from structomap.errors import (
    NoSuchFieldError,
    NotASequenceError,
    ProjectionAborted,
    StructomapError,
    UnsupportedTypeError,
)
from structomap.fields import FieldAccessor, register_accessor, reset_accessors
from structomap.projector import Modifier, Projector

__all__ = [
    "FieldAccessor",
    "KeyCase",
    "Modifier",
    "NoSuchFieldError",
    "NotASequenceError",
    "ProjectionAborted",
    "Projector",
    "ProjectorConfig",
    "StructomapError",
    "UnsupportedTypeError",
    "get_config",
    "register_accessor",
    "reset_accessors",
    "reset_config",
    "set_default_case",
    "to_camel_case",
    "to_pascal_case",
    "to_snake_case",
]
