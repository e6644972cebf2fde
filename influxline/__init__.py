"""
# Influxline

Influxline provides typed measurements for InfluxDB and converts them
to and from the two wire formats of the database: line protocol for
writes and annotated CSV for query results.


## Quickstart

Install with `pip install influxline`

You can then run:

``` python
from influxline import Measurement, parse, to_line_protocol_batch

points = [
    Measurement.builder("temperature")
    .tag("city", "Brussels")
    .field("value", 21.5)
    .timestamp_s(1602321877)
    .build(),
    Measurement.builder("temperature")
    .tag("city", "Madrid")
    .field("value", 28.0)
    .timestamp_s(1602321877)
    .build(),
]
print(to_line_protocol_batch(points))
# ->
# temperature,city=Brussels value=21.5 1602321877000000000
# temperature,city=Madrid value=28 1602321877000000000

records = parse("city,value\\nBrussels,21.5\\nMadrid,28\\n")
print(records)
# -> [{'city': 'Brussels', 'value': '21.5'}, {'city': 'Madrid', 'value': '28'}]
```

See `influxline.measurement` and `influxline.field` on how to build
measurements, `influxline.line_protocol` and `influxline.tabular` for
the details of both formats.

`influxline.client` sends the encoded payloads to a server, and the
`influxline` command line tool wraps all of the above.
"""

from .client import *
from .errors import *
from .field import *
from .line_protocol import *
from .measurement import *
from .query import *
from .tabular import *

__version__ = "0.1.0"
