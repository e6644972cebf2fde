import bisect
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from time import perf_counter, time_ns

import pytz

fmt = "%(levelname)s:%(asctime).19s: %(message)s"
logging.basicConfig(format=fmt)
logger = logging.getLogger("influxline")

# Number of nanoseconds in each supported timestamp unit
NS_PER_UNIT = {
    "ns": 1,
    "us": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
}
EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)


# Global settings
@dataclass
class Settings:
    verify_ssl: bool = True
    timeout: int = 30  # Max duration of an http request (in seconds)


settings = Settings()


def to_ns(value, unit="ns"):
    """
    Normalize an integer timestamp expressed in `unit` to
    nanoseconds since epoch
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Timestamp must be an integer, got {value!r}")
    try:
        factor = NS_PER_UNIT[unit]
    except KeyError:
        raise ValueError(f'Unsupported timestamp unit "{unit}"')
    return value * factor


def datetime_to_ns(dt, tz=None):
    """
    Convert `dt` to nanoseconds since epoch. Naive datetimes are
    localized in `tz` (UTC by default).
    """
    if dt.tzinfo is None:
        dt = pytz.timezone(tz or "UTC").localize(dt)
    delta = dt - EPOCH
    seconds = delta.days * 86_400 + delta.seconds
    return seconds * NS_PER_UNIT["s"] + delta.microseconds * NS_PER_UNIT["us"]


def now_ns():
    return time_ns()


def pretty_nb(number):
    prefixes = "yzafpnum_kMGTPEZY"
    factors = [1000 ** i for i in range(-8, 8)]
    if number == 0:
        return 0
    if number < 0:
        return "-" + pretty_nb(-number)
    idx = bisect.bisect_right(factors, number) - 1
    prefix = prefixes[idx]
    return "%.2f%s" % (number / factors[idx], "" if prefix == "_" else prefix)


@contextmanager
def timeit(title=""):
    start = perf_counter()
    yield
    delta = perf_counter() - start
    print(title, pretty_nb(delta) + "s", file=sys.stderr)
