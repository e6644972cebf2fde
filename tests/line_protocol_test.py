import pytest

from influxline import (
    EncodeError,
    FieldValue,
    IllegalCharacter,
    MalformedLine,
    Measurement,
    ParseError,
    parse_line_protocol,
    to_line_protocol,
    to_line_protocol_batch,
)


def point(name="m1", tags=None, fields=None, ts=None):
    bld = Measurement.builder(name)
    for key, value in (tags or {}).items():
        bld.tag(key, value)
    for key, value in (fields or {"f": 1}).items():
        bld.field(key, value)
    if ts is not None:
        bld.timestamp_ns(ts)
    return bld.build()


def test_simple():
    m = point(tags={"t": "v"}, ts=1000)
    assert to_line_protocol(m) == "m1,t=v f=1i 1000"
    assert to_line_protocol(point(fields={"f": 1.5})) == "m1 f=1.5"
    assert to_line_protocol(point(fields={"f": True}, ts=0)) == "m1 f=true 0"


def test_field_types():
    m = point(
        fields={
            "i": 42,
            "u": FieldValue.uinteger(42),
            "b": True,
            "fl": 1.5,
            "s": "txt",
        }
    )
    assert to_line_protocol(m) == 'm1 i=42i,u=42u,b=true,fl=1.5,s="txt"'


def test_insertion_order():
    m = point(tags={"z": "1", "a": "2"}, fields={"y": 1, "b": 2})
    assert to_line_protocol(m) == "m1,z=1,a=2 y=1i,b=2i"


def test_escaping():
    m = point(
        name="weather station,1",
        tags={"device id": "rack=1,slot 2"},
        fields={"path": r"C:\Temp", "status": 'ok "quoted"'},
        ts=42,
    )
    assert to_line_protocol(m) == (
        'weather\\ station\\,1,device\\ id=rack\\=1\\,slot\\ 2 '
        'path="C:\\\\Temp",status="ok \\"quoted\\"" 42'
    )

    m = (
        Measurement.builder("example_measurement")
        .tag("agent", "KHTML, like Gecko")
        .field("count", 1.0)
        .timestamp_ms(1602321877560)
        .build()
    )
    assert to_line_protocol(m) == (
        r"example_measurement,agent=KHTML\,\ like\ Gecko count=1 1602321877560000000"
    )

    # Equal sign is not escaped in measurement names
    assert to_line_protocol(point(name="a=b")) == "a=b f=1i"
    # Field keys follow tag key rules
    assert to_line_protocol(point(fields={"my field=": 1})) == "m1 my\\ field\\==1i"


def test_string_value_escaping():
    line = to_line_protocol(point(fields={"s": 'say "hi" \\o/'}))
    assert line == 'm1 s="say \\"hi\\" \\\\o/"'
    # The value is still wrapped in matching quotes
    value = line.split("=", 1)[1]
    assert value.startswith('"') and value.endswith('"')


@pytest.mark.parametrize(
    "kwargs,position",
    [
        ({"name": "m\n1"}, "measurement"),
        ({"name": "m\r1"}, "measurement"),
        ({"tags": {"t\n": "v"}}, "tag key"),
        ({"tags": {"t": "v\nw"}}, "tag value"),
        ({"fields": {"f\n": 1}}, "field key"),
        # Leading "#" would turn the line into a comment
        ({"name": "#cpu"}, "measurement"),
        # Trailing backslash would escape the following delimiter
        ({"name": "cpu\\"}, "measurement"),
        ({"tags": {"t\\": "v"}}, "tag key"),
        ({"tags": {"t": "v\\"}}, "tag value"),
        ({"tags": {"t": "v\\", "u": "w"}}, "tag value"),
        ({"fields": {"k\\": 1}}, "field key"),
    ],
)
def test_illegal_character(kwargs, position):
    m = point(**kwargs)
    with pytest.raises(IllegalCharacter) as exc_info:
        to_line_protocol(m)
    assert exc_info.value.position == position
    assert isinstance(exc_info.value, EncodeError)


def test_inner_backslash_and_hash():
    m = point(name="cpu#1", tags={"path": "C:\\Temp"}, fields={"a\\b": 1})
    line = to_line_protocol(m)
    assert line == "cpu#1,path=C:\\Temp a\\b=1i"
    assert parse_line_protocol(line) == [m]


def test_newline_in_string_value():
    m = point(fields={"s": "multi\nline"})
    assert to_line_protocol(m) == 'm1 s="multi\nline"'


def test_batch():
    ms = [point(name="a", ts=1), point(name="b", ts=2)]
    assert to_line_protocol_batch(ms) == "a f=1i 1\nb f=1i 2"
    assert to_line_protocol_batch([]) == ""
    assert to_line_protocol_batch(iter(ms)) == "a f=1i 1\nb f=1i 2"


def test_batch_all_or_nothing():
    ms = [point(name="a"), point(name="b\n"), point(name="c")]
    with pytest.raises(IllegalCharacter):
        to_line_protocol_batch(ms)


def test_round_trip():
    ms = [
        point(tags={"t": "v"}, ts=1000),
        point(
            name="weather station,1",
            tags={"device id": "rack=1,slot 2", "empty": ""},
            fields={
                "path": r"C:\Temp",
                "status": 'ok "quoted"',
                "multi": "line\none",
                "comma, space=": "a,b c=d",
                "unicode": "température",
            },
            ts=42,
        ),
        point(
            fields={
                "i": -(2 ** 63),
                "u": FieldValue.uinteger(2 ** 64 - 1),
                "b": False,
                "fl": 0.1,
                "big": 1e21,
                "tiny": 5e-324,
                "neg": -1.5,
            },
            ts=-5,
        ),
        point(name="no_ts"),
    ]
    text = to_line_protocol_batch(ms)
    assert parse_line_protocol(text) == ms
    # Types are preserved
    res = parse_line_protocol(text)
    assert res[2].fields["u"] == FieldValue.uinteger(2 ** 64 - 1)
    assert res[2].fields["big"] == FieldValue.float(1e21)
    assert res[3].timestamp is None


def test_parse():
    text = """
# A comment
m1,host=a value=1,ok=t,flag=FALSE,count=3i,n=7u,msg="hi" 1600000000000000000

m2 value=-2.5e3
"""
    first, second = parse_line_protocol(text)
    assert first.name == "m1"
    assert dict(first.tags) == {"host": "a"}
    assert dict(first.fields) == {
        "value": FieldValue.float(1),
        "ok": FieldValue.boolean(True),
        "flag": FieldValue.boolean(False),
        "count": FieldValue.integer(3),
        "n": FieldValue.uinteger(7),
        "msg": FieldValue.string("hi"),
    }
    assert first.timestamp == 1600000000000000000
    assert second.fields["value"] == FieldValue.float(-2500.0)
    assert second.timestamp is None

    assert parse_line_protocol("") == []
    assert parse_line_protocol("\n  \n# only comments\n") == []
    assert parse_line_protocol("m f=1i 5\r\nm f=2i 6\r\n") == [
        point(name="m", ts=5),
        point(name="m", fields={"f": 2}, ts=6),
    ]


@pytest.mark.parametrize(
    "text",
    [
        "m1",
        "m1 ",
        "m1 f",
        "m1 f=",
        "m1 f=abc",
        "m1 f=1x",
        "m1 f=nan",
        "m1 f=1i x",
        "m1 f=1i 10 extra",
        'm1 f="abc',
        "m1,t f=1",
        "m1,=v f=1",
        " f=1",
        "m1 f=99999999999999999999i",
    ],
)
def test_parse_errors(text):
    with pytest.raises(MalformedLine) as exc_info:
        parse_line_protocol(text)
    assert exc_info.value.line == 1
    assert isinstance(exc_info.value, ParseError)


def test_parse_error_line_number():
    text = 'm1 f=1\n\n# comment\nm2 s="a\nb"\nm3 f=oops'
    with pytest.raises(MalformedLine) as exc_info:
        parse_line_protocol(text)
    assert exc_info.value.line == 6
