import math

from sp1.numeric import format_fixed, format_plain, parse_finite, parse_number


def test_parse_number_prefix_semantics():
    assert parse_number("12.5") == 12.5
    assert parse_number("  -3e2xyz") == -300.0
    assert parse_number(".5") == 0.5
    assert parse_number("7.") == 7.0
    assert parse_number("12.5m") == 12.5
    assert parse_number("-Infinity") == -math.inf
    assert math.isnan(parse_number("abc"))
    assert math.isnan(parse_number(""))
    assert math.isnan(parse_number(None))
    # Python-only spellings are not numbers here
    assert math.isnan(parse_number("nan"))


def test_parse_finite():
    assert parse_finite("50.25") == 50.25
    assert parse_finite("Infinity") is None
    assert parse_finite("n/a") is None


def test_format_fixed_and_plain():
    assert format_fixed(50.25, 3) == "50.250"
    assert format_fixed(150.0, 6) == "150.000000"
    assert format_fixed(math.nan, 6) == "NaN"
    assert format_plain(150.0) == "150"
    assert format_plain(-0.0) == "0"
    assert format_plain(100.123456) == "100.123456"
    assert format_plain(0.1 + 0.2) == "0.30000000000000004"
    assert format_plain(-math.inf) == "-Infinity"


def test_format_fixed_rounds_exact_ties_away_from_zero():
    # 2.0625 is exactly representable, so this is a true tie
    assert format_fixed(2.0625, 3) == "2.063"
    assert format_fixed(-2.0625, 3) == "-2.063"
    assert format_fixed(0.5, 0) == "1"
    # 1.005 is stored just below the tie
    assert format_fixed(1.005, 2) == "1.00"


def test_format_plain_switches_to_exponent_only_at_the_extremes():
    assert format_plain(0.00005) == "0.00005"
    assert format_plain(0.000001) == "0.000001"
    assert format_plain(1e-7) == "1e-7"
    assert format_plain(1.5e-7) == "1.5e-7"
    assert format_plain(1e20) == "100000000000000000000"
    assert format_plain(1e21) == "1e+21"
    assert format_plain(-1.25e22) == "-1.25e+22"


def test_parse_number_accepts_ascii_digits_only():
    assert math.isnan(parse_number("١٢"))
    assert math.isnan(parse_number("１２"))
    assert parse_finite("١٢") is None
    assert parse_number("12١") == 12.0
