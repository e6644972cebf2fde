"""
Decoder for the CSV responses of the query endpoint.

A response contains one or more tables separated by blank lines. Each
table starts with optional annotation rows (their first cell starts
with `#`), then a header row, then zero or more data rows:

```
#datatype,string,long,dateTime:RFC3339,double,string
#group,false,false,false,false,true
#default,_result,,,,
,result,table,_time,_value,_field
,,0,2020-10-10T09:00:00Z,21.5,temperature
,,0,2020-10-10T10:00:00Z,22.1,temperature

#datatype,string,long,string
...
```

`parse` returns one dict per data row, all tables concatenated in the
order they appear. The unnamed first column of annotated responses is
dropped and all values are kept as strings:

``` python-console
>>> from influxline import parse
>>> parse("a,b\\n1,2")
[{'a': '1', 'b': '2'}]
```

`parse_tables` gives access to each table with its annotations.

A line that is empty or holds only whitespace separates tables, so in
a single-column table an empty (or whitespace-only) value can not be
represented: it reads as a separator and closes the table.
"""
import csv
from dataclasses import dataclass, field
from enum import Enum
from io import StringIO

from .errors import MalformedHeader, MalformedRow, ParseError
from .utils import logger

__all__ = ["Table", "parse", "parse_tables"]

ANNOTATION_MARKER = "#"

# Values can exceed the default limit of 128KiB (C long on all platforms)
csv.field_size_limit(2**31 - 1)


class State(Enum):
    EXPECT_HEADER = "expect-header"
    IN_TABLE = "in-table"


@dataclass
class Table:
    index: int
    columns: list
    annotations: dict = field(default_factory=dict)
    records: list = field(default_factory=list)

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


def is_blank(row):
    # csv yields [] for an empty line, [" "] for a whitespace-only one
    return not row or (len(row) == 1 and not row[0].strip())


def is_annotation(row):
    return bool(row) and row[0].startswith(ANNOTATION_MARKER)


class Decoder:
    def __init__(self):
        self.state = State.EXPECT_HEADER
        self.tables = []
        self.annotations = []
        self.header = None
        self.table = None

    def feed(self, row, line):
        if self.state is State.EXPECT_HEADER:
            self.expect_header(row, line)
        else:
            self.in_table(row, line)

    def expect_header(self, row, line):
        if is_blank(row):
            if self.annotations:
                raise MalformedHeader(
                    len(self.tables), line, "Missing header after annotations"
                )
            return
        if is_annotation(row):
            self.annotations.append(row)
            return
        self.open_table(row, line)

    def in_table(self, row, line):
        if is_blank(row):
            self.close_table()
            return
        if is_annotation(row):
            raise MalformedHeader(
                self.table.index, line, f"Unexpected annotation {row[0]!r} in table"
            )
        if len(row) != len(self.header):
            raise MalformedRow(
                self.table.index, len(self.table), line, len(self.header), len(row)
            )
        record = {name: value for name, value in zip(self.header, row) if name}
        self.table.records.append(record)

    def open_table(self, header, line):
        index = len(self.tables)
        names = [name for name in header if name]
        if len(set(names)) != len(names):
            raise MalformedHeader(index, line, "Duplicate column name")

        annotations = {}
        for row in self.annotations:
            if len(row) != len(header):
                raise MalformedHeader(
                    index, line, f"Annotation {row[0]!r} does not match header"
                )
            key = row[0][len(ANNOTATION_MARKER) :]
            annotations[key] = {
                name: value for name, value in zip(header, row) if name
            }

        self.header = header
        self.table = Table(index, names, annotations)
        self.annotations = []
        self.state = State.IN_TABLE

    def close_table(self):
        self.tables.append(self.table)
        self.header = None
        self.table = None
        self.state = State.EXPECT_HEADER

    def finish(self, line):
        if self.state is State.IN_TABLE:
            self.close_table()
        elif self.annotations:
            raise MalformedHeader(
                len(self.tables), line, "Missing header after annotations"
            )
        return self.tables


def parse_tables(response_text):
    """
    Parse `response_text` into a list of `Table`
    """
    decoder = Decoder()
    reader = csv.reader(StringIO(response_text), strict=True)
    try:
        for row in reader:
            decoder.feed(row, reader.line_num)
    except csv.Error as exc:
        raise ParseError(f"Line {reader.line_num}: {exc}") from exc
    tables = decoder.finish(reader.line_num)
    logger.debug(
        "DECODE %s table(s), %s record(s)",
        len(tables),
        sum(len(t) for t in tables),
    )
    return tables


def parse(response_text):
    """
    Parse `response_text` into a flat list of records (dicts of column
    name to string value)
    """
    return [record for table in parse_tables(response_text) for record in table]
