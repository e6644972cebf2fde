"""
# Example usage

Validate and normalize line protocol:

```shell
$ cat points.txt
temperature,city=Brussels value=21.5,count=3i 1602321877000000000
temperature,city=Madrid value=28.0 1602321877000000000
$ cat points.txt | influxline encode
temperature,city=Brussels value=21.5,count=3i 1602321877000000000
temperature,city=Madrid value=28 1602321877000000000
```

Decode a query response:

```shell
$ cat response.csv | influxline -P decode
_time                 _value  city
--------------------  ------  --------
2020-10-10T09:00:00Z    21.5  Brussels
2020-10-10T10:00:00Z    22.1  Brussels
```

Talk to a server (url, token and org default to the INFLUX_URL,
INFLUX_TOKEN and INFLUX_ORG environment variables):

```shell
$ cat points.txt | influxline -u http://localhost:8086 write my-bucket
$ influxline -P query 'from(bucket: "my-bucket")' 'range(start: -1h)'
```

Most sub commands come with extra doc:
```
$ influxline help decode
```
"""
import argparse
import csv
import os
import sys
from itertools import groupby

from tabulate import tabulate

from . import __version__
from .client import Client
from .errors import InfluxLineError
from .line_protocol import parse_line_protocol, to_line_protocol_batch
from .query import Query
from .tabular import parse
from .utils import logger, settings, timeit

default_url = os.environ.get("INFLUX_URL", "http://localhost:8086")


def get_client(args):
    return Client(args.url, args.token or "", args.org or "")


def print_records(records, pretty=False):
    # Consecutive records with the same columns belong to the same table
    first = True
    for columns, group in groupby(records, key=lambda r: tuple(r)):
        rows = [list(r.values()) for r in group]
        if not first:
            print()
        first = False
        if pretty:
            print(tabulate(rows, headers=columns))
        else:
            writer = csv.writer(sys.stdout)
            writer.writerow(columns)
            writer.writerows(rows)


def encode(args):
    """
    Read line protocol on stdin, validate it and write it back in
    canonical form
    ```
    $ cat points.txt | influxline encode
    ```
    """
    measurements = parse_line_protocol(sys.stdin.read())
    logger.info("%s measurement(s) read", len(measurements))
    if measurements:
        print(to_line_protocol_batch(measurements))


def decode(args):
    """
    Read a query response (annotated csv) on stdin and print the
    records
    ```
    $ cat response.csv | influxline decode
    $ cat response.csv | influxline -P decode
    ```
    """
    records = parse(sys.stdin.read())
    logger.info("%s record(s) read", len(records))
    print_records(records, pretty=args.pretty)


def write(args):
    """
    Write is done through stdin
    ```
    $ cat points.txt | influxline write my-bucket
    ```
    """
    measurements = parse_line_protocol(sys.stdin.read())
    client = get_client(args)
    client.write(args.bucket, measurements)
    logger.info("%s measurement(s) written to %s", len(measurements), args.bucket)


def query(args):
    """
    Run a query, each argument is a line of the query, lines are
    joined with the pipe operator
    ```
    $ influxline query 'from(bucket: "my-bucket")' 'range(start: -1h)'
    ```
    """
    client = get_client(args)
    records = client.query(Query(*args.lines))
    print_records(records, pretty=args.pretty)


def print_help(parser, args):
    cmd = args.help_cmd and globals().get(args.help_cmd)
    if cmd and cmd.__doc__:
        print(cmd.__doc__)
    parser.parse_args([args.help_cmd, "-h"] if args.help_cmd else ["-h"])


def run(argv=None):

    # top-level parser
    parser = argparse.ArgumentParser(
        prog="influxline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--url", "-u", default=default_url, help=f"Server url (default: {default_url})"
    )
    parser.add_argument(
        "--token", "-k", default=os.environ.get("INFLUX_TOKEN"), help="API token"
    )
    parser.add_argument(
        "--org", "-o", default=os.environ.get("INFLUX_ORG"), help="Organization"
    )
    parser.add_argument(
        "--no-verify", action="store_true", help="Disable ssl verification"
    )
    parser.add_argument("--timing", "-t", action="store_true", help="Enable timing")
    parser.add_argument("--pretty", "-P", action="store_true", help="Tabulate output")
    parser.add_argument(
        "--verbose", "-v", action="count", help="Increase verbosity", default=0
    )
    subparsers = parser.add_subparsers(dest="command")

    # Add encode command
    parser_encode = subparsers.add_parser("encode")
    parser_encode.set_defaults(func=encode)

    # Add decode command
    parser_decode = subparsers.add_parser("decode")
    parser_decode.set_defaults(func=decode)

    # Add write command
    parser_write = subparsers.add_parser("write")
    parser_write.add_argument("bucket")
    parser_write.set_defaults(func=write)

    # Add query command
    parser_query = subparsers.add_parser("query")
    parser_query.add_argument("lines", nargs="+")
    parser_query.set_defaults(func=query)

    # Add help command
    parser_help = subparsers.add_parser("help")
    parser_help.add_argument("help_cmd", nargs="?")
    parser_help.set_defaults(func=lambda args: print_help(parser, args))

    # Add version command
    parser_version = subparsers.add_parser("version")
    parser_version.set_defaults(func=lambda *a: print(__version__))

    # Parse args
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return
    # Enable logging
    if args.verbose == 1:
        logger.setLevel("INFO")
    elif args.verbose > 1:
        logger.setLevel("DEBUG")
    if args.no_verify:
        settings.verify_ssl = False

    # Execute command
    try:
        if args.timing:
            with timeit(f"Timing ({args.command}):"):
                args.func(args)
        else:
            args.func(args)

    except InfluxLineError as exc:
        sys.exit(f"{exc.__class__.__name__}: {exc}")
    except (BrokenPipeError, KeyboardInterrupt):
        pass
