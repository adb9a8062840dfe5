"""Tests for field accessors and the accessor registry."""

from __future__ import annotations

from collections import Counter, OrderedDict, defaultdict, namedtuple
from dataclasses import dataclass, field
from typing import NamedTuple

import pytest

from structomap import Projector
from structomap.errors import NoSuchFieldError, UnsupportedTypeError
from structomap.fields import (
    AttributeAccessor,
    DataclassAccessor,
    FieldAccessor,
    MappingAccessor,
    NamedTupleAccessor,
    available_accessors,
    field_names,
    get_field,
    register_accessor,
    reset_accessors,
    resolve_accessor,
    to_dict,
)


@dataclass
class Point:
    x: int
    y: int
    _cache: dict = field(default_factory=dict)


class Pair(NamedTuple):
    left: str
    right: str


class Account:
    def __init__(self, owner: str, balance: float) -> None:
        self.owner = owner
        self.balance = balance
        self._secret = "hidden"


class Invoice:
    currency = "EUR"

    def __init__(self, total: float) -> None:
        self.total = total

    @property
    def gross(self) -> float:
        return self.total * 1.2

    def copy(self) -> Invoice:
        return Invoice(self.total)


class Slotted:
    __slots__ = ("name", "size", "_internal")

    def __init__(self, name: str, size: int) -> None:
        self.name = name
        self.size = size
        self._internal = 0


class Row:
    """A record type none of the built-in accessors understand."""

    __slots__ = ()

    def values(self) -> dict:
        return {"id": 7, "label": "seven"}


class RowAccessor:
    def supports(self, record):
        return isinstance(record, Row)

    def field_names(self, record):
        return list(record.values())

    def get_field(self, record, name):
        try:
            return record.values()[name]
        except KeyError:
            raise NoSuchFieldError(name, record) from None


class TestResolution:
    @pytest.mark.parametrize(
        "record,expected",
        [
            (Point(1, 2), DataclassAccessor),
            (Pair("a", "b"), NamedTupleAccessor),
            (namedtuple("P", "a b")(1, 2), NamedTupleAccessor),
            ({"a": 1}, MappingAccessor),
            (OrderedDict(a=1), MappingAccessor),
            (Account("ann", 1.0), AttributeAccessor),
            (Slotted("s", 1), AttributeAccessor),
        ],
    )
    def test_resolve(self, record, expected):
        assert isinstance(resolve_accessor(record), expected)

    @pytest.mark.parametrize(
        "value",
        [None, 1, 1.5, True, "text", b"bytes", [1, 2], (1, 2), {1, 2}, Point, len, pytest],
    )
    def test_unsupported(self, value):
        with pytest.raises(UnsupportedTypeError):
            resolve_accessor(value)

    def test_unsupported_message(self):
        with pytest.raises(UnsupportedTypeError, match="register_accessor") as exc_info:
            field_names(42)
        assert exc_info.value.record_type == "int"


class TestFieldNames:
    def test_dataclass_skips_private(self):
        assert field_names(Point(1, 2)) == ["x", "y"]

    def test_named_tuple(self):
        assert field_names(Pair("a", "b")) == ["left", "right"]

    def test_mapping_keeps_order_and_skips_non_string_keys(self):
        assert field_names({"b": 1, "a": 2, 3: "x", "_p": 0}) == ["b", "a"]

    def test_attributes(self):
        assert field_names(Account("ann", 1.0)) == ["owner", "balance"]

    def test_slots(self):
        assert field_names(Slotted("s", 1)) == ["name", "size"]

    def test_unset_slot_is_skipped(self):
        record = Slotted.__new__(Slotted)
        record.name = "only-name"
        assert field_names(record) == ["name"]


class TestGetField:
    def test_dataclass(self):
        assert get_field(Point(1, 2), "y") == 2

    def test_private_field_can_be_read_explicitly(self):
        assert get_field(Account("ann", 1.0), "_secret") == "hidden"

    @pytest.mark.parametrize(
        "record",
        [
            Point(1, 2),
            Pair("a", "b"),
            {"a": 1},
            defaultdict(int, a=1),
            Counter(a=1),
            Account("ann", 1.0),
            Slotted("s", 1),
        ],
    )
    def test_missing_field(self, record):
        before = dict(record) if isinstance(record, dict) else None
        with pytest.raises(NoSuchFieldError) as exc_info:
            get_field(record, "missing")
        assert exc_info.value.name == "missing"
        if before is not None:
            assert record == before

    @pytest.mark.parametrize("factory", [lambda: defaultdict(int, ID=1), lambda: Counter(ID=1)])
    def test_defaulting_mapping_through_projector(self, factory):
        record = factory()
        with pytest.raises(NoSuchFieldError):
            Projector().pick("ID", "Missing").transform(record)
        with pytest.raises(NoSuchFieldError):
            Projector().convert("Missing", str).transform(record)
        assert dict(record) == {"ID": 1}

    def test_defaulting_mapping_present_key(self):
        assert Projector().pick("ID").transform(defaultdict(int, ID=0)) == {"ID": 0}

    @pytest.mark.parametrize("name", ["copy", "gross", "currency", "__class__"])
    def test_attribute_record_exposes_instance_state_only(self, name):
        with pytest.raises(NoSuchFieldError):
            get_field(Invoice(10.0), name)
        with pytest.raises(NoSuchFieldError):
            Projector().pick(name).transform(Invoice(10.0))

    def test_attribute_record_instance_value(self):
        assert get_field(Invoice(10.0), "total") == 10.0

    def test_unset_slot_is_missing(self):
        record = Slotted.__new__(Slotted)
        with pytest.raises(NoSuchFieldError):
            get_field(record, "size")

    def test_dataclass_method_is_not_a_field(self):
        with pytest.raises(NoSuchFieldError):
            get_field(Point(1, 2), "__init__")

    def test_no_such_field_is_lookup_error(self):
        with pytest.raises(LookupError):
            get_field({"a": 1}, "b")

    def test_to_dict(self):
        assert to_dict(Account("ann", 2.5)) == {"owner": "ann", "balance": 2.5}


class TestRegistry:
    def test_defaults(self):
        assert available_accessors() == [
            "DataclassAccessor",
            "NamedTupleAccessor",
            "MappingAccessor",
            "AttributeAccessor",
        ]

    def test_protocol(self):
        assert isinstance(RowAccessor(), FieldAccessor)
        assert isinstance(DataclassAccessor(), FieldAccessor)

    def test_custom_accessor(self):
        with pytest.raises(UnsupportedTypeError):
            Projector().pick_all().transform(Row())
        register_accessor(RowAccessor())
        assert Projector().pick_all().transform(Row()) == {"id": 7, "label": "seven"}
        assert Projector().pick("label").transform(Row()) == {"label": "seven"}

    def test_register_first_overrides_builtin(self):
        class UpperMappingAccessor(MappingAccessor):
            def get_field(self, record, name):
                return str(super().get_field(record, name)).upper()

        register_accessor(UpperMappingAccessor())
        assert Projector().pick("a").transform({"a": "x"}) == {"a": "X"}

    def test_register_last(self):
        register_accessor(RowAccessor(), first=False)
        assert available_accessors()[-1] == "RowAccessor"

    def test_register_rejects_non_accessor(self):
        with pytest.raises(TypeError, match="FieldAccessor"):
            register_accessor(object())

    def test_reset(self):
        register_accessor(RowAccessor())
        reset_accessors()
        assert "RowAccessor" not in available_accessors()
