"""
Exceptions raised by influxline.

All of them derive from `InfluxLineError`. Validation, encoding and
parsing errors are also `ValueError` subclasses, so callers that
already guard against bad input with `except ValueError` keep working.
"""

__all__ = [
    "InfluxLineError",
    "ValidationError",
    "EmptyName",
    "NoFields",
    "InvalidKey",
    "InvalidValue",
    "EncodeError",
    "IllegalCharacter",
    "ParseError",
    "MalformedRow",
    "MalformedHeader",
    "MalformedLine",
    "TransportError",
]


class InfluxLineError(Exception):
    pass


class ValidationError(InfluxLineError, ValueError):
    pass


class EmptyName(ValidationError):
    def __init__(self):
        super().__init__("Measurement name cannot be empty")


class NoFields(ValidationError):
    def __init__(self, name):
        super().__init__(f'Measurement "{name}" has no fields')
        self.name = name


class InvalidKey(ValidationError):
    def __init__(self, kind, key):
        super().__init__(f"Invalid {kind} key: {key!r}")
        self.kind = kind
        self.key = key


class InvalidValue(ValidationError):
    pass


class EncodeError(InfluxLineError, ValueError):
    pass


class IllegalCharacter(EncodeError):
    def __init__(self, position, text, reason="Newline not allowed"):
        super().__init__(f"{reason} in {position}: {text!r}")
        self.position = position
        self.text = text


class ParseError(InfluxLineError, ValueError):
    pass


class MalformedRow(ParseError):
    def __init__(self, table, row, line, expected, actual):
        super().__init__(
            f"Table {table}, row {row} (line {line}): "
            f"expected {expected} values, got {actual}"
        )
        self.table = table
        self.row = row
        self.line = line
        self.expected = expected
        self.actual = actual


class MalformedHeader(ParseError):
    def __init__(self, table, line, reason):
        super().__init__(f"Table {table} (line {line}): {reason}")
        self.table = table
        self.line = line
        self.reason = reason


class MalformedLine(ParseError):
    def __init__(self, line, reason):
        super().__init__(f"Line {line}: {reason}")
        self.line = line
        self.reason = reason


class TransportError(InfluxLineError):
    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
