import io

import pytest

from mixramp.config import DB_LADDER
from mixramp.streaming.emitter import emit, format_ramp, parse_ramp, render_tags
from mixramp.streaming.ramp_extractor import RampPoint, RampResult


def _table(*rows):
    table = list(rows) + [None] * (len(DB_LADDER) - len(rows))
    return table


def test_format_skips_unset_and_repeated_rows():
    table = _table(
        None,
        RampPoint(-50.0, 1.0),
        RampPoint(-50.0, 1.0),
        RampPoint(-20.0, 2.5),
        None,
        RampPoint(-20.0, 2.5),
    )
    assert format_ramp(table) == "-50.00 1.00;-20.00 2.50;"


def test_format_only_suppresses_exact_repeats():
    table = _table(RampPoint(-5.0, 1.0), RampPoint(-5.0, 1.1), RampPoint(-4.0, 1.1))
    assert format_ramp(table) == "-5.00 1.00;-5.00 1.10;-4.00 1.10;"


def test_format_rounds_to_two_decimals():
    table = _table(RampPoint(-3.14159, 12.3456), RampPoint(6.789, 0.0))
    assert format_ramp(table) == "-3.14 12.35;6.79 0.00;"


def test_empty_table():
    assert format_ramp([None] * len(DB_LADDER)) == ""


def test_parse_round_trip_is_stable():
    body = "-64.82 0.00;-12.30 3.40;2.00 7.10;"
    points = parse_ramp(body)
    assert points == [RampPoint(-64.82, 0.0), RampPoint(-12.3, 3.4), RampPoint(2.0, 7.1)]
    assert format_ramp(points) == body


def test_parse_empty_body():
    assert parse_ramp("") == []


def test_parse_rejects_garbage():
    with pytest.raises(ValueError):
        parse_ramp("-3.00;")
    with pytest.raises(ValueError):
        parse_ramp("loud 1.00;")


def test_render_tags_without_data():
    empty = RampResult(start=[None] * 15, end=[None] * 15, ladder=DB_LADDER)
    assert render_tags(empty) == ["MIXRAMP_REF=89.00", "MIXRAMP_START=", "MIXRAMP_END="]


def test_emit_writes_three_lines_in_order():
    result = RampResult(
        start=_table(RampPoint(-10.0, 0.5)),
        end=_table(RampPoint(-10.0, 4.25), RampPoint(1.0, 2.0)),
        ladder=DB_LADDER,
    )
    out = io.StringIO()
    emit(result, out)
    assert out.getvalue() == (
        "MIXRAMP_REF=89.00\n"
        "MIXRAMP_START=-10.00 0.50;\n"
        "MIXRAMP_END=-10.00 4.25;1.00 2.00;\n"
    )
