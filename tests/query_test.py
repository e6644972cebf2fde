from influxline import Query


def test_then():
    q = Query('from(bucket: "example_bucket")')
    q2 = q.then('filter(fn: (r) => r["_measurement"] == "example_measurement")')
    assert str(q2) == (
        'from(bucket: "example_bucket")\n'
        ' |> filter(fn: (r) => r["_measurement"] == "example_measurement")'
    )
    # then returns a new query
    assert str(q) == 'from(bucket: "example_bucket")'


def test_raw():
    q = Query.raw(
        """from(bucket: "server")
        |> range(start: v.timeRangeStart, stop: v.timeRangeStop)
        |> keys()"""
    )
    assert q.lines == (
        'from(bucket: "server")',
        "range(start: v.timeRangeStart, stop: v.timeRangeStop)",
        "keys()",
    )
    assert q == Query(*q.lines)
    assert Query.raw(str(q)) == q


def test_opaque():
    # No validation whatsoever
    q = Query("not flux at all")
    assert str(q) == "not flux at all"
