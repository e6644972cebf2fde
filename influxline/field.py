"""
Typed field values.

A field value is one of five scalar kinds, each with its own line
protocol rendering:

``` python-console
>>> from influxline import FieldValue
>>> FieldValue.of(42)
<FieldValue integer:42>
>>> FieldValue.uinteger(42).to_line_protocol()
'42u'
>>> FieldValue.of(1.5).to_line_protocol()
'1.5'
```

There is no coercion between kinds, `FieldValue.integer(1)` and
`FieldValue.float(1)` are different values.
"""
from enum import Enum
from math import isfinite

import numpy
from numpy import iinfo

from .errors import InvalidValue

__all__ = ["FieldKind", "FieldValue"]

INT64 = iinfo("int64")
UINT64 = iinfo("uint64")


class FieldKind(Enum):
    STRING = "string"
    FLOAT = "float"
    INTEGER = "integer"
    UINTEGER = "uinteger"
    BOOLEAN = "boolean"


def _is_bool(value):
    return isinstance(value, (bool, numpy.bool_))


def _is_int(value):
    return isinstance(value, (int, numpy.integer)) and not _is_bool(value)


def _check_range(value, bounds, kind):
    if not bounds.min <= value <= bounds.max:
        raise InvalidValue(
            f"{value} out of {kind.value} range [{bounds.min}, {bounds.max}]"
        )
    return value


class FieldValue:
    __slots__ = ("kind", "value")

    def __init__(self, kind, value):
        kind = FieldKind(kind)
        if kind is FieldKind.STRING:
            if not isinstance(value, str):
                raise InvalidValue(f"String field expects a str, got {value!r}")
        elif kind is FieldKind.FLOAT:
            if not (_is_int(value) or isinstance(value, (float, numpy.floating))):
                raise InvalidValue(f"Float field expects a number, got {value!r}")
            value = float(value)
            if not isfinite(value):
                raise InvalidValue(f"Float field must be finite, got {value}")
        elif kind is FieldKind.INTEGER:
            if not _is_int(value):
                raise InvalidValue(f"Integer field expects an int, got {value!r}")
            value = _check_range(int(value), INT64, kind)
        elif kind is FieldKind.UINTEGER:
            if not _is_int(value):
                raise InvalidValue(f"UInteger field expects an int, got {value!r}")
            value = _check_range(int(value), UINT64, kind)
        elif kind is FieldKind.BOOLEAN:
            if not _is_bool(value):
                raise InvalidValue(f"Boolean field expects a bool, got {value!r}")
            value = bool(value)
        else:
            raise InvalidValue(f"Unsupported field kind {kind}")
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", value)

    @classmethod
    def string(cls, value):
        return cls(FieldKind.STRING, value)

    @classmethod
    def float(cls, value):
        return cls(FieldKind.FLOAT, value)

    @classmethod
    def integer(cls, value):
        return cls(FieldKind.INTEGER, value)

    @classmethod
    def uinteger(cls, value):
        return cls(FieldKind.UINTEGER, value)

    @classmethod
    def boolean(cls, value):
        return cls(FieldKind.BOOLEAN, value)

    @classmethod
    def of(cls, value):
        """
        Wrap a python (or numpy) scalar into the matching field value:
        bool -> boolean, unsigned numpy ints -> uinteger, other ints
        -> integer, floats -> float and str -> string.
        """
        if isinstance(value, FieldValue):
            return value
        if _is_bool(value):
            return cls.boolean(value)
        if isinstance(value, numpy.unsignedinteger):
            return cls.uinteger(value)
        if _is_int(value):
            return cls.integer(value)
        if isinstance(value, (float, numpy.floating)):
            return cls.float(value)
        if isinstance(value, str):
            return cls.string(value)
        raise InvalidValue(f"Unsupported field value: {value!r}")

    def to_line_protocol(self):
        from .line_protocol import format_field_value

        return format_field_value(self)

    def __setattr__(self, name, value):
        raise AttributeError("FieldValue is immutable")

    def __eq__(self, other):
        if not isinstance(other, FieldValue):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    def __hash__(self):
        return hash((self.kind, self.value))

    def __repr__(self):
        return f"<FieldValue {self.kind.value}:{self.value!r}>"
