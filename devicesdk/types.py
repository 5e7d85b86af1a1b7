"""Data types exchanged between a device and the cluster, and their BSON form."""

from __future__ import annotations

import enum
import math
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class AstarteTypeError(Exception):
    """Base class of the type conversion errors."""


class FloatError(AstarteTypeError):
    """A floating point value is NaN, infinite or subnormal."""

    def __init__(self) -> None:
        super().__init__(
            "forbidden floating point number, Nan, Infinite or subnormals are invalid"
        )


class ConversionError(AstarteTypeError):
    """A value cannot be converted to or from the requested type."""

    def __init__(self) -> None:
        super().__init__("conversion error")


class FromBsonError(AstarteTypeError):
    """A BSON value has no matching type."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"error converting from Bson to AstarteType ({detail})")
        self.detail = detail


class FromBsonArrayError(AstarteTypeError):
    """A BSON array holds elements of different or unsupported types."""

    def __init__(self) -> None:
        super().__init__("type mismatch in bson array from astarte")


class MappingType(enum.Enum):
    """Type declared for a mapping in an interface."""

    DOUBLE = "double"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    LONG_INTEGER = "longinteger"
    STRING = "string"
    BINARY_BLOB = "binaryblob"
    DATE_TIME = "datetime"
    DOUBLE_ARRAY = "doublearray"
    INTEGER_ARRAY = "integerarray"
    BOOLEAN_ARRAY = "booleanarray"
    LONG_INTEGER_ARRAY = "longintegerarray"
    STRING_ARRAY = "stringarray"
    BINARY_BLOB_ARRAY = "binaryblobarray"
    DATE_TIME_ARRAY = "datetimearray"

    @property
    def is_array(self) -> bool:
        return self.value.endswith("array")


class TypeKind(enum.Enum):
    """Kind of value held by an :class:`AstarteType`."""

    DOUBLE = "double"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    LONG_INTEGER = "longinteger"
    STRING = "string"
    BINARY_BLOB = "binaryblob"
    DATE_TIME = "datetime"
    DOUBLE_ARRAY = "doublearray"
    INTEGER_ARRAY = "integerarray"
    BOOLEAN_ARRAY = "booleanarray"
    LONG_INTEGER_ARRAY = "longintegerarray"
    STRING_ARRAY = "stringarray"
    BINARY_BLOB_ARRAY = "binaryblobarray"
    DATE_TIME_ARRAY = "datetimearray"
    # Not part of the protocol: the element type of an empty BSON array is unknown.
    EMPTY_ARRAY = "emptyarray"
    UNSET = "unset"


_ARRAY_OF = {
    TypeKind.DOUBLE: TypeKind.DOUBLE_ARRAY,
    TypeKind.INTEGER: TypeKind.INTEGER_ARRAY,
    TypeKind.BOOLEAN: TypeKind.BOOLEAN_ARRAY,
    TypeKind.LONG_INTEGER: TypeKind.LONG_INTEGER_ARRAY,
    TypeKind.STRING: TypeKind.STRING_ARRAY,
    TypeKind.BINARY_BLOB: TypeKind.BINARY_BLOB_ARRAY,
    TypeKind.DATE_TIME: TypeKind.DATE_TIME_ARRAY,
}
_ELEMENT_OF = {array: scalar for scalar, array in _ARRAY_OF.items()}


class Int64(int):
    """An integer explicitly marked as 64 bit wide (BSON int64, long integer)."""

    def __new__(cls, value: int = 0) -> Int64:
        number = int(value)
        if not _I64_MIN <= number <= _I64_MAX:
            raise ValueError(f"{number} does not fit in 64 bits")
        return super().__new__(cls, number)

    def __repr__(self) -> str:
        return f"Int64({int(self)})"


def _is_forbidden_float(value: float) -> bool:
    return (
        math.isnan(value)
        or math.isinf(value)
        or (value != 0.0 and abs(value) < sys.float_info.min)
    )


def _checked_float(value: float) -> float:
    if _is_forbidden_float(value):
        raise FloatError()
    return float(value)


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_bson_datetime(value: datetime) -> datetime:
    # BSON dates carry millisecond precision.
    value = _to_utc(value)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def _scalar(value: Any) -> tuple[TypeKind, Any]:
    if isinstance(value, bool):
        return TypeKind.BOOLEAN, value
    if isinstance(value, Int64):
        return TypeKind.LONG_INTEGER, int(value)
    if isinstance(value, int):
        if _I32_MIN <= value <= _I32_MAX:
            return TypeKind.INTEGER, value
        if _I64_MIN <= value <= _I64_MAX:
            return TypeKind.LONG_INTEGER, value
        raise ConversionError()
    if isinstance(value, float):
        return TypeKind.DOUBLE, _checked_float(value)
    if isinstance(value, str):
        return TypeKind.STRING, value
    if isinstance(value, (bytes, bytearray)):
        return TypeKind.BINARY_BLOB, bytes(value)
    if isinstance(value, datetime):
        return TypeKind.DATE_TIME, _to_utc(value)
    raise ConversionError()


@dataclass(eq=False)
class AstarteType:
    """A value of one of the types supported by a device."""

    kind: TypeKind
    value: Any = None

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_value(cls, value: Any) -> AstarteType:
        """Build the matching type from a plain Python value."""
        if isinstance(value, AstarteType):
            return value
        if isinstance(value, (list, tuple)):
            return cls._from_sequence(list(value))
        kind, normalized = _scalar(value)
        return cls(kind, normalized)

    @classmethod
    def _from_sequence(cls, values: list[Any]) -> AstarteType:
        if not values:
            return cls(TypeKind.EMPTY_ARRAY)
        items = [_scalar(item) for item in values]
        kinds = {kind for kind, _ in items}
        if kinds == {TypeKind.INTEGER, TypeKind.LONG_INTEGER}:
            kinds = {TypeKind.LONG_INTEGER}
        if len(kinds) != 1:
            raise ConversionError()
        (kind,) = kinds
        return cls(_ARRAY_OF[kind], [normalized for _, normalized in items])

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AstarteType):
            return self.kind is other.kind and self.value == other.value
        if isinstance(other, MappingType):
            return NotImplemented
        try:
            converted = AstarteType.from_value(other)
        except AstarteTypeError:
            return False
        return self.kind is converted.kind and self.value == converted.value

    def matches(self, mapping_type: MappingType) -> bool:
        """Whether this value can be sent on a mapping of the given type."""
        if self.kind is TypeKind.INTEGER and mapping_type in (
            MappingType.LONG_INTEGER,
            MappingType.DOUBLE,
        ):
            return True
        if self.kind is TypeKind.EMPTY_ARRAY:
            return mapping_type.is_array
        return self.kind.value == mapping_type.value

    def to_float(self) -> float:
        """Return the value as a float; integers are widened."""
        if self.kind is TypeKind.DOUBLE:
            return self.value
        if self.kind is TypeKind.INTEGER:
            return float(self.value)
        raise ConversionError()

    def to_long(self) -> int:
        """Return the value as a long integer; integers are widened."""
        if self.kind in (TypeKind.LONG_INTEGER, TypeKind.INTEGER):
            return int(self.value)
        raise ConversionError()

    def unwrap(self, kind: TypeKind) -> Any:
        """Return the held value, provided it is of the given kind."""
        if self.kind is not kind:
            raise ConversionError()
        return self.value

    def to_bson(self) -> Any:
        """Return the BSON form: Python values, with int64 marked by :class:`Int64`."""
        kind, value = self.kind, self.value
        if kind is TypeKind.UNSET:
            return None
        if kind is TypeKind.EMPTY_ARRAY:
            return []
        if kind in _ELEMENT_OF:
            element = _ELEMENT_OF[kind]
            return [_scalar_to_bson(element, item) for item in value]
        return _scalar_to_bson(kind, value)


def _scalar_to_bson(kind: TypeKind, value: Any) -> Any:
    if kind is TypeKind.DOUBLE:
        return float(value)
    if kind is TypeKind.LONG_INTEGER:
        return Int64(value)
    if kind is TypeKind.INTEGER:
        return int(value)
    if kind is TypeKind.BINARY_BLOB:
        return bytes(value)
    if kind is TypeKind.DATE_TIME:
        return _to_bson_datetime(value)
    return value


def from_bson(value: Any) -> AstarteType:
    """Convert a BSON value to an :class:`AstarteType`."""
    if isinstance(value, bool):
        return AstarteType(TypeKind.BOOLEAN, value)
    if isinstance(value, Int64):
        return AstarteType(TypeKind.LONG_INTEGER, int(value))
    if isinstance(value, int):
        if not _I32_MIN <= value <= _I32_MAX:
            raise FromBsonError(f"Can't convert {value!r} to astarte")
        return AstarteType(TypeKind.INTEGER, value)
    if isinstance(value, float):
        return AstarteType(TypeKind.DOUBLE, _checked_float(value))
    if isinstance(value, str):
        return AstarteType(TypeKind.STRING, value)
    if isinstance(value, (bytes, bytearray)):
        return AstarteType(TypeKind.BINARY_BLOB, bytes(value))
    if isinstance(value, datetime):
        return AstarteType(TypeKind.DATE_TIME, _to_utc(value))
    if value is None:
        return AstarteType(TypeKind.UNSET)
    if isinstance(value, list):
        return from_bson_array(value)
    raise FromBsonError(f"Can't convert {value!r} to astarte")


def from_bson_vec(values: list[Any]) -> list[AstarteType]:
    """Convert each BSON value of a list."""
    return [from_bson(value) for value in values]


def _bson_element_kind(value: Any) -> TypeKind | None:
    if isinstance(value, bool):
        return TypeKind.BOOLEAN
    if isinstance(value, Int64):
        return TypeKind.LONG_INTEGER
    if isinstance(value, int):
        return TypeKind.INTEGER if _I32_MIN <= value <= _I32_MAX else None
    if isinstance(value, float):
        return TypeKind.DOUBLE
    if isinstance(value, str):
        return TypeKind.STRING
    if isinstance(value, (bytes, bytearray)):
        return TypeKind.BINARY_BLOB
    if isinstance(value, datetime):
        return TypeKind.DATE_TIME
    return None


def from_bson_array(values: list[Any]) -> AstarteType:
    """Convert a BSON array whose elements all share the type of the first one."""
    if not values:
        return AstarteType(TypeKind.EMPTY_ARRAY)
    kind = _bson_element_kind(values[0])
    if kind is None or any(_bson_element_kind(item) is not kind for item in values):
        raise FromBsonArrayError()
    if kind is TypeKind.DOUBLE:
        items: list[Any] = [_checked_float(item) for item in values]
    elif kind is TypeKind.LONG_INTEGER:
        items = [int(item) for item in values]
    elif kind is TypeKind.BINARY_BLOB:
        items = [bytes(item) for item in values]
    elif kind is TypeKind.DATE_TIME:
        items = [_to_utc(item) for item in values]
    else:
        items = list(values)
    return AstarteType(_ARRAY_OF[kind], items)