"""Exception hierarchy.

StructomapError covers the recoverable failures a caller is expected to
catch. ProjectionAborted is raised by the fail-fast batch call and is kept
outside that hierarchy so a broad `except StructomapError` does not hide it.
"""

from __future__ import annotations


def _type_name(value: object) -> str:
    return type(value).__qualname__


class StructomapError(Exception):
    """Base class for recoverable projection errors."""


class NoSuchFieldError(StructomapError, LookupError):
    """A field name was requested that the record does not have."""

    def __init__(self, name: str, record: object) -> None:
        self.name = name
        self.record_type = _type_name(record)
        super().__init__(f"{self.record_type} has no field {name!r}")


class UnsupportedTypeError(StructomapError, TypeError):
    """No field accessor can read fields off this value."""

    def __init__(self, record: object) -> None:
        self.record_type = _type_name(record)
        super().__init__(
            f"Cannot read fields from {self.record_type!r}. "
            f"Register a FieldAccessor with register_accessor()."
        )


class NotASequenceError(StructomapError, TypeError):
    """Batch transform was given something other than a sequence of records."""

    def __init__(self, value: object) -> None:
        self.value_type = _type_name(value)
        super().__init__(
            f"transform_batch() expects a sequence of records, got {self.value_type!r}"
        )


class ProjectionAborted(RuntimeError):
    """Raised by must_transform_batch() when the batch cannot be projected."""
