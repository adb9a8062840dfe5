"""Field access: list and read named fields off arbitrary records.

The projector never inspects records itself. It asks the first registered
FieldAccessor that supports the record, so new record families (ORM rows,
attrs classes, protobuf messages) plug in without touching the projector:

    class RowAccessor:
        def supports(self, record): return isinstance(record, Row)
        def field_names(self, record): return list(record.keys())
        def get_field(self, record, name): ...

    register_accessor(RowAccessor())

Built-in accessors, in resolution order: dataclass instances, named tuples,
string-keyed mappings, plain objects with __dict__ / __slots__.
"""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from structomap.errors import NoSuchFieldError, UnsupportedTypeError

# Values that carry attributes but are never records
_NON_RECORD_TYPES = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    str,
    bytes,
    bytearray,
    int,
    float,
    complex,
    bool,
    list,
    tuple,
    set,
    frozenset,
    dict,
)


def _is_public(name: str) -> bool:
    return not name.startswith("_")


@runtime_checkable
class FieldAccessor(Protocol):
    """Strategy: how one family of record types exposes its fields."""

    def supports(self, record: Any) -> bool:
        """Whether this accessor can read fields from the record."""
        ...

    def field_names(self, record: Any) -> list[str]:
        """Public field names, in declaration order."""
        ...

    def get_field(self, record: Any, name: str) -> Any:
        """Read one field. Raises NoSuchFieldError if the record lacks it."""
        ...


class DataclassAccessor:
    """Dataclass instances (not dataclass types)."""

    def supports(self, record: Any) -> bool:
        return dataclasses.is_dataclass(record) and not isinstance(record, type)

    def field_names(self, record: Any) -> list[str]:
        return [f.name for f in dataclasses.fields(record) if _is_public(f.name)]

    def get_field(self, record: Any, name: str) -> Any:
        if name not in {f.name for f in dataclasses.fields(record)}:
            raise NoSuchFieldError(name, record)
        return getattr(record, name)


class NamedTupleAccessor:
    """collections.namedtuple and typing.NamedTuple instances."""

    def supports(self, record: Any) -> bool:
        return isinstance(record, tuple) and hasattr(record, "_fields")

    def field_names(self, record: Any) -> list[str]:
        return [name for name in record._fields if _is_public(name)]

    def get_field(self, record: Any, name: str) -> Any:
        if name not in record._fields:
            raise NoSuchFieldError(name, record)
        return getattr(record, name)


class MappingAccessor:
    """Mappings keyed by field name (dicts, parsed JSON rows, ...)."""

    def supports(self, record: Any) -> bool:
        return isinstance(record, Mapping)

    def field_names(self, record: Any) -> list[str]:
        return [k for k in record if isinstance(k, str) and _is_public(k)]

    def get_field(self, record: Any, name: str) -> Any:
        # membership first: defaultdict and Counter answer every key
        if name not in record:
            raise NoSuchFieldError(name, record)
        return record[name]


class AttributeAccessor:
    """Plain objects: instance __dict__ plus any __slots__ along the MRO."""

    def supports(self, record: Any) -> bool:
        if record is None or isinstance(record, _NON_RECORD_TYPES):
            return False
        return hasattr(record, "__dict__") or bool(self._slot_names(record))

    def field_names(self, record: Any) -> list[str]:
        names: list[str] = []
        for name in self._slot_names(record):
            if _is_public(name) and hasattr(record, name) and name not in names:
                names.append(name)
        for name in getattr(record, "__dict__", {}):
            if _is_public(name) and name not in names:
                names.append(name)
        return names

    def get_field(self, record: Any, name: str) -> Any:
        # Instance state only, never methods, properties or class attributes.
        instance_attrs = getattr(record, "__dict__", {})
        if name in instance_attrs:
            return instance_attrs[name]
        if name in self._slot_names(record) and hasattr(record, name):
            return getattr(record, name)
        raise NoSuchFieldError(name, record)

    @staticmethod
    def _slot_names(record: Any) -> list[str]:
        names: list[str] = []
        for klass in reversed(type(record).__mro__):
            slots = klass.__dict__.get("__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            names.extend(s for s in slots if s not in ("__dict__", "__weakref__"))
        return names


def _default_accessors() -> list[FieldAccessor]:
    return [
        DataclassAccessor(),
        NamedTupleAccessor(),
        MappingAccessor(),
        AttributeAccessor(),
    ]


_accessors: list[FieldAccessor] = _default_accessors()


def register_accessor(accessor: FieldAccessor, *, first: bool = True) -> None:
    """Register a custom accessor, ahead of the built-ins unless first=False."""
    if not isinstance(accessor, FieldAccessor):
        raise TypeError(
            f"{type(accessor).__name__} does not implement the FieldAccessor protocol"
        )
    if first:
        _accessors.insert(0, accessor)
    else:
        _accessors.append(accessor)


def reset_accessors() -> None:
    """Restore the built-in accessors. Use in test fixtures for isolation."""
    _accessors[:] = _default_accessors()


def available_accessors() -> list[str]:
    return [type(a).__name__ for a in _accessors]


def resolve_accessor(record: Any) -> FieldAccessor:
    """Return the first accessor supporting the record."""
    for accessor in _accessors:
        if accessor.supports(record):
            return accessor
    raise UnsupportedTypeError(record)


def field_names(record: Any) -> list[str]:
    return resolve_accessor(record).field_names(record)


def get_field(record: Any, name: str) -> Any:
    return resolve_accessor(record).get_field(record, name)


def to_dict(record: Any) -> dict[str, Any]:
    """Every public field of the record, name -> value as-is."""
    accessor = resolve_accessor(record)
    return {name: accessor.get_field(record, name) for name in accessor.field_names(record)}
