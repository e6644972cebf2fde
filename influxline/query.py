"""
Queries are opaque strings, `Query` only helps to compose them line
by line:

``` python-console
>>> from influxline import Query
>>> q = Query('from(bucket: "server")').then("range(start: -1h)")
>>> print(q)
from(bucket: "server")
 |> range(start: -1h)
```

No validation of the query language is done, the text is sent as-is
to the server.
"""

__all__ = ["Query"]

PIPE = "|>"


class Query:
    def __init__(self, *lines):
        self.lines = tuple(lines)

    @classmethod
    def raw(cls, text):
        """
        Build a query from a multi-line string, leading pipe operators
        are stripped from each line.
        """
        lines = []
        for line in text.splitlines():
            line = line.strip()
            if line.startswith(PIPE):
                line = line[len(PIPE) :].strip()
            lines.append(line)
        return cls(*lines)

    def then(self, line):
        return Query(*self.lines, line)

    def __str__(self):
        return f"\n {PIPE} ".join(self.lines)

    def __eq__(self, other):
        if not isinstance(other, Query):
            return NotImplemented
        return self.lines == other.lines

    def __repr__(self):
        return f"<Query {str(self)!r}>"
