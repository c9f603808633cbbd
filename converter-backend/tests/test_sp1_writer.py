import math

import pytest

from sp1.model import SP1Data, SP1Header, SP1Point
from sp1.reader import parse_sp1
from sp1.writer import generate_sp1, format_point

DEMO = """# Test survey
Version: 1.0
Survey: Demo
Datum: WGS84

P1 100.123456 200.654321 50.25
P2 150.0 250.0
"""


def test_write_demo():
    text = generate_sp1(parse_sp1(DEMO))
    assert text == (
        "# Test survey\n"
        "Version: 1.0\n"
        "Survey: Demo\n"
        "Datum: WGS84\n"
        "\n"
        "P1\t100.123456\t200.654321\t50.250\n"
        "P2\t150.000000\t250.000000\n"
    )


def test_header_fixed_order_and_absent_fields_omitted():
    hdr = SP1Header(projection="UTM 32N", version="2", survey="")
    text = generate_sp1(SP1Data(header=hdr, points=[]))
    assert text == "Version: 2\nProjection: UTM 32N\n\n"


def test_attributes_in_insertion_order():
    p = SP1Point("S1", 1.5, -2.25, 0.0, {"b": "2", "a": "1"})
    assert format_point(p) == "S1\t1.500000\t-2.250000\t0.000\t2\t1"


def test_non_finite_coordinates():
    p = SP1Point("S1", math.nan, math.inf, None)
    assert format_point(p) == "S1\tNaN\tInfinity"


def test_round_trip_preserves_ids_and_values_up_to_rounding():
    src = "# c\nDatum: ED50\n\nA 1.1234567 2.7654321 3.14159 x y\nB 5 6\nA 7 8 9\n"
    first = parse_sp1(src)
    second = parse_sp1(generate_sp1(first))

    assert len(second.points) == len(first.points)
    assert second.header.datum == "ED50"
    assert second.header.comments == ["c"]
    for a, b in zip(first.points, second.points):
        assert a.id == b.id
        assert b.x == pytest.approx(a.x, abs=5e-7)
        assert b.y == pytest.approx(a.y, abs=5e-7)
        if a.elevation is None:
            assert b.elevation is None
        else:
            assert b.elevation == pytest.approx(a.elevation, abs=5e-4)
        assert b.attributes == a.attributes
