"""Projector: declarative record -> dict projection.

A Projector records an ordered list of modifiers and replays them against a
fresh dict for every record it transforms:

    users = (
        Projector()
        .use_snake_case()
        .pick("ID", "FirstName", "LastName", "Email")
        .pick_with_converter(lambda t: t.isoformat(), "CreatedAt")
        .omit_if(lambda u: u.HideEmail, "Email")
        .add_computed("FullName", lambda u: f"{u.FirstName} {u.LastName}")
    )
    users.transform(user)           # {"id": 1, "first_name": "Foo", ...}
    users.transform_batch([u1, u2]) # [{...}, {...}]

Ordering is the whole contract: later modifiers see (and win over) the output
of earlier ones, so pick("x").omit("x") drops x while omit("x").pick("x")
keeps it. Predicates passed to the *_if variants are called with the record
being transformed, on every transform() call.

Builder methods mutate the projector in place and return it. Subclasses rely
on this to add their own fluent methods on top of the base ones.
"""

from __future__ import annotations

import array
import copy
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Callable

from structomap import fields
from structomap.casing import KeyCase, KeyConverter, key_converter
from structomap.config import ProjectorConfig, get_config
from structomap.errors import NotASequenceError, ProjectionAborted, StructomapError
from structomap.observability import get_logger

Predicate = Callable[[Any], bool]
Converter = Callable[[Any], Any]


def _always(record: Any) -> bool:
    return True


def _identity(value: Any) -> Any:
    return value


def _describe(op: str, *args: str) -> str:
    return f"{op}({', '.join(args)})"


@dataclass(frozen=True)
class Modifier:
    """One registered step: (result, record) -> result."""

    name: str
    apply: Callable[[dict[str, Any], Any], dict[str, Any]]


class Projector:
    """Builds a dict from a record by replaying registered modifiers in order.

    The initial key casing comes from `config`, or from the process-wide
    default (see structomap.config) when no config is given.
    """

    def __init__(self, config: ProjectorConfig | None = None) -> None:
        self._modifiers: list[Modifier] = []
        self._key_converter: KeyConverter | None = key_converter(
            (config if config is not None else get_config()).key_case
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}([{', '.join(self.modifiers)}])"

    @property
    def modifiers(self) -> list[str]:
        """Names of the registered modifiers, in execution order."""
        return [m.name for m in self._modifiers]

    def copy(self) -> Projector:
        """Independent projector with the same modifiers and key casing."""
        clone = copy.copy(self)
        clone._modifiers = list(self._modifiers)
        return clone

    def _register(self, name: str, apply: Callable[[dict[str, Any], Any], dict[str, Any]]) -> Projector:
        self._modifiers.append(Modifier(name=name, apply=apply))
        return self

    # ------------------------------------------------------------------
    # Key casing
    # ------------------------------------------------------------------

    def set_key_casing(self, converter: KeyConverter | None) -> Projector:
        """Apply `converter` to every key of the final mapping. None disables casing."""
        self._key_converter = converter
        return self

    def use_key_case(self, case: KeyCase | str) -> Projector:
        return self.set_key_casing(key_converter(case))

    def use_snake_case(self) -> Projector:
        return self.use_key_case(KeyCase.SNAKE)

    def use_camel_case(self) -> Projector:
        return self.use_key_case(KeyCase.CAMEL)

    def use_pascal_case(self) -> Projector:
        return self.use_key_case(KeyCase.PASCAL)

    # ------------------------------------------------------------------
    # Modifiers
    # ------------------------------------------------------------------

    def pick_all(self) -> Projector:
        """Replace the result with every public field of the record."""

        def apply(result: dict[str, Any], record: Any) -> dict[str, Any]:
            return fields.to_dict(record)

        return self._register("pick_all()", apply)

    def pick(self, *names: str) -> Projector:
        return self.pick_with_converter_if(_always, _identity, *names)

    def pick_if(self, predicate: Predicate, *names: str) -> Projector:
        return self.pick_with_converter_if(predicate, _identity, *names)

    def pick_with_converter(self, converter: Converter, *names: str) -> Projector:
        return self.pick_with_converter_if(_always, converter, *names)

    def pick_with_converter_if(
        self, predicate: Predicate, converter: Converter, *names: str
    ) -> Projector:
        """Store converter(field value) under each field name when predicate(record) holds."""

        def apply(result: dict[str, Any], record: Any) -> dict[str, Any]:
            if predicate(record):
                for name in names:
                    result[name] = converter(fields.get_field(record, name))
            return result

        op = "pick" if converter is _identity else "pick_with_converter"
        if predicate is not _always:
            op += "_if"
        return self._register(_describe(op, *names), apply)

    def omit(self, *names: str) -> Projector:
        return self.omit_if(_always, *names)

    def omit_if(self, predicate: Predicate, *names: str) -> Projector:
        """Remove the named keys when predicate(record) holds. Absent keys are ignored."""

        def apply(result: dict[str, Any], record: Any) -> dict[str, Any]:
            if predicate(record):
                for name in names:
                    result.pop(name, None)
            return result

        op = "omit" if predicate is _always else "omit_if"
        return self._register(_describe(op, *names), apply)

    def add(self, key: str, value: Any) -> Projector:
        return self.add_if(_always, key, value)

    def add_if(self, predicate: Predicate, key: str, value: Any) -> Projector:
        def apply(result: dict[str, Any], record: Any) -> dict[str, Any]:
            if predicate(record):
                result[key] = value
            return result

        op = "add" if predicate is _always else "add_if"
        return self._register(_describe(op, key), apply)

    def add_computed(self, key: str, converter: Converter) -> Projector:
        return self.add_computed_if(_always, key, converter)

    def add_computed_if(self, predicate: Predicate, key: str, converter: Converter) -> Projector:
        """Store converter(record) under `key` when predicate(record) holds."""

        def apply(result: dict[str, Any], record: Any) -> dict[str, Any]:
            if predicate(record):
                result[key] = converter(record)
            return result

        op = "add_computed" if predicate is _always else "add_computed_if"
        return self._register(_describe(op, key), apply)

    def convert(self, name: str, converter: Converter) -> Projector:
        return self.convert_if(_always, name, converter)

    def convert_if(self, predicate: Predicate, name: str, converter: Converter) -> Projector:
        """Store converter(field value) under `name`.

        The value is read from the record, not from the result, so the key is
        set whether or not the field was picked earlier.
        """

        def apply(result: dict[str, Any], record: Any) -> dict[str, Any]:
            if predicate(record):
                result[name] = converter(fields.get_field(record, name))
            return result

        op = "convert" if predicate is _always else "convert_if"
        return self._register(_describe(op, name), apply)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def transform(self, record: Any) -> dict[str, Any]:
        """Project one record.

        Raises:
            NoSuchFieldError: a pick/convert names a field the record lacks.
            UnsupportedTypeError: no field accessor can read the record.
        """
        result: dict[str, Any] = {}
        for modifier in self._modifiers:
            result = modifier.apply(result, record)

        if self._key_converter is not None:
            convert_key = self._key_converter
            result = {convert_key(key): value for key, value in result.items()}

        get_logger(__name__).debug(
            "projector.transform",
            record_type=type(record).__qualname__,
            modifiers=len(self._modifiers),
            keys=len(result),
        )
        return result

    def transform_batch(self, records: Sequence[Any]) -> list[dict[str, Any]]:
        """Project each record of an ordered sequence, preserving order.

        Raises:
            NotASequenceError: `records` is not a list, tuple or other sequence.
                Strings, mappings, sets, iterators and named-tuple records are
                rejected.
        """
        if not _is_record_sequence(records):
            raise NotASequenceError(records)

        results = [self.transform(record) for record in records]
        get_logger(__name__).debug("projector.batch", records=len(results))
        return results

    def must_transform_batch(self, records: Sequence[Any]) -> list[dict[str, Any]]:
        """Like transform_batch(), but any projection failure raises ProjectionAborted."""
        try:
            return self.transform_batch(records)
        except StructomapError as exc:
            get_logger(__name__).error(
                "projector.batch_aborted",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise ProjectionAborted(str(exc)) from exc


def _is_record_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, memoryview)):
        return False
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return False
    return isinstance(value, (Sequence, array.array))
