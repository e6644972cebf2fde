"""
The `Measurement` class is the immutable representation of a single
point: a name, ordered tags, ordered typed fields and an optional
timestamp (in nanoseconds since epoch).

Measurements are created through a `MeasurementBuilder`:

``` python
from influxline import Measurement

measurement = (
    Measurement.builder("gps")
    .tag("country", "Spain")
    .tag("city", "Madrid")
    .field("latitude", 40.447992135544304)
    .field("longitude", -3.689346313476562)
    .timestamp_ms(1622888382963)
    .build()
)
print(measurement.to_line_protocol())
# -> gps,country=Spain,city=Madrid latitude=40.447992135544304,longitude=-3.689346313476562 1622888382963000000
```

Validation happens when a `Measurement` is instantiated, so both
`build()` and a direct constructor call raise `EmptyName`,
`NoFields` or `InvalidKey` (see `influxline.errors`). Field values are
converted eagerly by `field()`, so an unsupported value raises
`InvalidValue` right away.

Adding the same tag or field key twice keeps the last value, at the
position of the first insertion.

If no timestamp is given, none is encoded and the server assigns one
on write.
"""
from types import MappingProxyType

from .errors import EmptyName, InvalidKey, InvalidValue, NoFields
from .field import FieldValue
from .utils import datetime_to_ns, now_ns, to_ns

__all__ = ["Measurement", "MeasurementBuilder"]


def validate(name, tags, fields):
    """
    Check name, tags and fields and return them as new dicts (field
    values converted to `FieldValue`). Raises `EmptyName`, then
    `NoFields`, then `InvalidKey`.
    """
    if not name or not isinstance(name, str):
        raise EmptyName()
    tags, fields = dict(tags), dict(fields)
    if not fields:
        raise NoFields(name)
    for kind, keys in (("tag", tags), ("field", fields)):
        for key in keys:
            if not key or not isinstance(key, str):
                raise InvalidKey(kind, key)
    for value in tags.values():
        if not isinstance(value, str):
            raise InvalidValue(f"Tag value must be a str, got {value!r}")
    return tags, {key: FieldValue.of(value) for key, value in fields.items()}


class Measurement:
    __slots__ = ("_name", "_tags", "_fields", "_timestamp")

    def __init__(self, name, tags, fields, timestamp=None):
        tags, fields = validate(name, tags, fields)
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_tags", MappingProxyType(tags))
        object.__setattr__(self, "_fields", MappingProxyType(fields))
        object.__setattr__(self, "_timestamp", timestamp)

    @classmethod
    def builder(cls, name):
        return MeasurementBuilder(name)

    @property
    def name(self):
        return self._name

    @property
    def tags(self):
        return self._tags

    @property
    def fields(self):
        return self._fields

    @property
    def timestamp(self):
        return self._timestamp

    def to_builder(self):
        """
        Return a builder pre-filled with the content of this
        measurement.
        """
        bld = MeasurementBuilder(self._name)
        bld.tags.update(self._tags)
        bld.fields.update(self._fields)
        bld.timestamp = self._timestamp
        return bld

    def to_line_protocol(self):
        from .line_protocol import to_line_protocol

        return to_line_protocol(self)

    def __setattr__(self, name, value):
        raise AttributeError("Measurement is immutable")

    def __eq__(self, other):
        if not isinstance(other, Measurement):
            return NotImplemented
        return (
            self._name == other._name
            and dict(self._tags) == dict(other._tags)
            and dict(self._fields) == dict(other._fields)
            and self._timestamp == other._timestamp
        )

    __hash__ = None

    def __repr__(self):
        return (
            f"<Measurement {self._name} tags={dict(self._tags)} "
            f"fields={dict(self._fields)} timestamp={self._timestamp}>"
        )


class MeasurementBuilder:
    def __init__(self, name):
        self.name = name
        self.tags = {}
        self.fields = {}
        self.timestamp = None

    def tag(self, key, value):
        if not isinstance(value, str):
            raise InvalidValue(f"Tag value must be a str, got {value!r}")
        self.tags[key] = value
        return self

    def field(self, key, value):
        self.fields[key] = FieldValue.of(value)
        return self

    def timestamp_ns(self, value):
        self.timestamp = to_ns(value, "ns")
        return self

    def timestamp_us(self, value):
        self.timestamp = to_ns(value, "us")
        return self

    def timestamp_ms(self, value):
        self.timestamp = to_ns(value, "ms")
        return self

    def timestamp_s(self, value):
        self.timestamp = to_ns(value, "s")
        return self

    def timestamp_dt(self, dt, tz=None):
        """
        Use a datetime as timestamp, naive datetimes are interpreted
        in timezone `tz` (defaults to UTC)
        """
        self.timestamp = datetime_to_ns(dt, tz=tz)
        return self

    def timestamp_now(self):
        self.timestamp = now_ns()
        return self

    def build(self):
        return Measurement(self.name, self.tags, self.fields, self.timestamp)
