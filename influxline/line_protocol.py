"""
Line protocol is the text format used to write points into
InfluxDB. Each measurement takes one line:

```
name[,tag_key=tag_value...] field_key=field_value[,...] [timestamp]
```

`to_line_protocol` and `to_line_protocol_batch` render
measurements, `parse_line_protocol` reads them back:

``` python-console
>>> from influxline import Measurement, to_line_protocol, parse_line_protocol
>>> m = Measurement.builder("m1").tag("t", "v").field("f", 1).timestamp_ns(1000).build()
>>> to_line_protocol(m)
'm1,t=v f=1i 1000'
>>> parse_line_protocol('m1,t=v f=1i 1000') == [m]
True
```

Escaping rules:

- measurement name: `,` and space are prefixed with a backslash
- tag keys, tag values and field keys: `,`, `=` and space are
  prefixed with a backslash
- string field values are double-quoted, inner `"` and `\\` are
  prefixed with a backslash

Newlines and trailing backslashes can not be escaped, a measurement
name, key or tag value containing one raises `IllegalCharacter`, as
does a measurement name starting with `#` (it would read as a
comment).

Floats are rendered in positional notation with the shortest
representation that round-trips (`1.0` gives `1`, `1e21` gives
`1000000000000000000000`), integers get an `i` suffix, unsigned
integers an `u` suffix.
"""
import re

from numpy import format_float_positional

from .errors import EncodeError, IllegalCharacter, MalformedLine, ValidationError
from .field import FieldKind, FieldValue
from .measurement import MeasurementBuilder
from .utils import logger

__all__ = [
    "to_line_protocol",
    "to_line_protocol_batch",
    "parse_line_protocol",
    "format_field_value",
]

NAME_ESCAPES = str.maketrans({",": "\\,", " ": "\\ "})
KEY_ESCAPES = str.maketrans({",": "\\,", "=": "\\=", " ": "\\ "})
STRING_ESCAPES = str.maketrans({'"': '\\"', "\\": "\\\\"})
TRUE = {"t", "T", "true", "True", "TRUE"}
FALSE = {"f", "F", "false", "False", "FALSE"}
COMMENT_MARKER = "#"
INT_RE = re.compile(r"-?[0-9]+")
FLOAT_RE = re.compile(r"[-+]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][-+]?[0-9]+)?")


def _check(text, position):
    if "\n" in text or "\r" in text:
        raise IllegalCharacter(position, text)
    # A trailing backslash would escape the next delimiter
    if text.endswith("\\"):
        raise IllegalCharacter(position, text, "Trailing backslash not allowed")
    return text


def escape_name(name):
    # Lines starting with "#" are comments
    if name.startswith(COMMENT_MARKER):
        raise IllegalCharacter("measurement", name, "Leading \"#\" not allowed")
    return _check(name, "measurement").translate(NAME_ESCAPES)


def escape_key(key, position="tag key"):
    return _check(key, position).translate(KEY_ESCAPES)


def format_float(value):
    return format_float_positional(value, unique=True, trim="-")


def format_field_value(field_value):
    kind = field_value.kind
    value = field_value.value
    if kind is FieldKind.STRING:
        return '"' + value.translate(STRING_ESCAPES) + '"'
    elif kind is FieldKind.FLOAT:
        return format_float(value)
    elif kind is FieldKind.INTEGER:
        return f"{value}i"
    elif kind is FieldKind.UINTEGER:
        return f"{value}u"
    elif kind is FieldKind.BOOLEAN:
        return "true" if value else "false"
    raise EncodeError(f"Unsupported field kind: {kind}")


def to_line_protocol(measurement):
    head = [escape_name(measurement.name)]
    for key, value in measurement.tags.items():
        head.append(f"{escape_key(key)}={escape_key(value, 'tag value')}")
    fields = ",".join(
        f"{escape_key(key, 'field key')}={format_field_value(value)}"
        for key, value in measurement.fields.items()
    )
    line = f"{','.join(head)} {fields}"
    if measurement.timestamp is not None:
        line += f" {measurement.timestamp}"
    return line


def to_line_protocol_batch(measurements):
    """
    Render all measurements, one per line. Lines are joined with
    "\\n", without trailing newline. Any invalid measurement fails
    the whole batch.
    """
    lines = [to_line_protocol(m) for m in measurements]
    logger.debug("ENCODE %s measurement(s)", len(lines))
    return "\n".join(lines)


class Reader:
    """
    Cursor over a line protocol text
    """

    def __init__(self, text):
        self.text = text.replace("\r\n", "\n")
        self.pos = 0
        self.line = 1

    def peek(self):
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def error(self, reason):
        return MalformedLine(self.line, reason)

    def expect(self, char, what):
        if self.peek() != char:
            found = self.peek()
            found = "end of line" if found in (None, "\n") else repr(found)
            raise self.error(f"Expected {what}, found {found}")
        self.pos += 1

    def read_until(self, stops, escapable=""):
        buff = []
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\\" and text[self.pos + 1 : self.pos + 2] in tuple(escapable):
                buff.append(text[self.pos + 1])
                self.pos += 2
                continue
            if char in stops:
                break
            buff.append(char)
            self.pos += 1
        return "".join(buff)

    def read_string(self):
        self.expect('"', "opening quote")
        buff = []
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\\" and text[self.pos + 1 : self.pos + 2] in ('"', "\\"):
                buff.append(text[self.pos + 1])
                self.pos += 2
                continue
            self.pos += 1
            if char == '"':
                return "".join(buff)
            if char == "\n":
                self.line += 1
            buff.append(char)
        raise self.error("Unterminated string field value")

    def skip_line(self):
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end < 0 else end


def parse_value(token):
    if token in TRUE:
        return FieldValue.boolean(True)
    if token in FALSE:
        return FieldValue.boolean(False)
    if token.endswith("i") and INT_RE.fullmatch(token[:-1]):
        return FieldValue.integer(int(token[:-1]))
    if token.endswith("u") and INT_RE.fullmatch(token[:-1]):
        return FieldValue.uinteger(int(token[:-1]))
    if FLOAT_RE.fullmatch(token):
        return FieldValue.float(float(token))
    raise ValueError(f"Invalid field value: {token!r}")


def parse_record(reader):
    line = reader.line
    name = reader.read_until(", \n", escapable=", ")
    bld = MeasurementBuilder(name)
    while reader.peek() == ",":
        reader.pos += 1
        key = reader.read_until(",= \n", escapable=",= ")
        reader.expect("=", "'=' after tag key")
        bld.tag(key, reader.read_until(", \n", escapable=",= "))
    reader.expect(" ", "space before fields")

    while True:
        key = reader.read_until(",= \n", escapable=",= ")
        reader.expect("=", "'=' after field key")
        if reader.peek() == '"':
            value = FieldValue.string(reader.read_string())
        else:
            token = reader.read_until(", \n")
            try:
                value = parse_value(token)
            except ValueError as exc:
                raise MalformedLine(line, str(exc)) from exc
        bld.field(key, value)
        if reader.peek() != ",":
            break
        reader.pos += 1

    if reader.peek() == " ":
        reader.pos += 1
        token = reader.read_until("\n").strip()
        if token:
            if not INT_RE.fullmatch(token):
                raise MalformedLine(line, f"Invalid timestamp: {token!r}")
            bld.timestamp_ns(int(token))
    if reader.peek() not in (None, "\n"):
        raise reader.error(f"Unexpected character {reader.peek()!r}")

    try:
        return bld.build()
    except ValidationError as exc:
        raise MalformedLine(line, str(exc)) from exc


def parse_line_protocol(text):
    """
    Parse a block of line protocol into a list of measurements. Blank
    lines and comments (lines starting with "#") are ignored.
    """
    reader = Reader(text)
    measurements = []
    while reader.peek() is not None:
        char = reader.peek()
        if char == "\n":
            reader.pos += 1
            reader.line += 1
            continue
        end = reader.text.find("\n", reader.pos)
        rest = reader.text[reader.pos : end if end >= 0 else None]
        if not rest.strip() or rest.lstrip().startswith(COMMENT_MARKER):
            reader.skip_line()
            continue
        measurements.append(parse_record(reader))
    logger.debug("DECODE %s measurement(s)", len(measurements))
    return measurements
