import math

import pytest

from gis.csv_table import attribute_columns, parse_csv, to_csv
from sp1.errors import CoordinateParseError, EmptyInputError, MissingColumnsError
from sp1.model import SP1Data, SP1Header, SP1Point


def sample_data():
    return SP1Data(
        header=SP1Header(),
        points=[
            SP1Point("P1", 10.0, 20.0, 5.5, {"Zone": "North"}),
            SP1Point("P2", 1.5, 2.0, None, {"Block": "B7"}),
            SP1Point("P3", -3.0, 0.25, 0.0),
        ],
    )


def test_export_sorted_union_of_attribute_columns():
    csv = to_csv(sample_data())
    lines = csv.split("\n")
    assert lines[0] == "ID,X,Y,Elevation,Block,Zone"
    assert lines[1] == "P1,10,20,5.5,,North"
    assert lines[2] == "P2,1.5,2,,B7,"
    assert lines[3] == "P3,-3,0.25,0,,"
    assert csv.endswith("\n")


def test_export_without_attributes():
    data = SP1Data(points=[SP1Point("A", 1.0, 2.0)])
    assert to_csv(data) == "ID,X,Y,Elevation\nA,1,2,\n"
    assert attribute_columns(data) == []


def test_import_extra_column_becomes_named_attribute():
    data = parse_csv("ID,X,Y,Zone\nP1,10,20,North")
    assert len(data.points) == 1
    p = data.points[0]
    assert (p.id, p.x, p.y) == ("P1", 10.0, 20.0)
    assert p.elevation is None
    assert p.attributes == {"Zone": "North"}


def test_import_missing_columns():
    with pytest.raises(MissingColumnsError) as ei:
        parse_csv("Name,Lat,Lon\nA,1,2")
    assert ei.value.missing == ["ID", "X", "Y"]

    with pytest.raises(MissingColumnsError) as ei:
        parse_csv("id,x,Northing\nA,1,2")
    assert ei.value.missing == ["Y"]


def test_import_empty_input():
    for content in ("", "   \n\n \t\n"):
        with pytest.raises(EmptyInputError):
            parse_csv(content)


def test_import_case_insensitive_columns_and_z():
    data = parse_csv(" Id , x , Y , z \nA,1,2,3\nB,4,5,abc\n")
    a, b = data.points
    assert a.elevation == 3.0
    assert b.elevation is None
    # the elevation column never turns into an attribute
    assert b.attributes is None


def test_import_skips_short_rows_and_empty_cells():
    data = parse_csv("ID,X,Y,Zone,Block\nP1,2\nP2,1,2,,B7\nP3,3,4\n")
    assert [p.id for p in data.points] == ["P2", "P3"]
    assert data.points[0].attributes == {"Block": "B7"}
    assert data.points[1].attributes is None


def test_import_first_matching_elevation_column_wins():
    data = parse_csv("ID,X,Y,Elevation,Z\nP1,1,2,10,11\n")
    p = data.points[0]
    assert p.elevation == 10.0
    assert p.attributes == {"Z": "11"}


def test_import_attaches_header_verbatim():
    hdr = SP1Header(version="1.0", survey="Converted from CSV", datum="WGS84")
    data = parse_csv("ID,X,Y\nP1,1,2", header=hdr)
    assert data.header is hdr

    data = parse_csv("ID,X,Y\nP1,1,2")
    assert data.header == SP1Header()


def test_import_bad_coordinates_lenient_and_strict():
    data = parse_csv("ID,X,Y\nP1,abc,2\n")
    assert math.isnan(data.points[0].x)

    with pytest.raises(CoordinateParseError) as ei:
        parse_csv("ID,X,Y\nP0,1,1\nP1,abc,2\n", strict=True)
    assert ei.value.line_no == 3
    assert ei.value.axis == "x"


def test_export_then_import_keeps_order_and_values():
    back = parse_csv(to_csv(sample_data()))
    assert [p.id for p in back.points] == ["P1", "P2", "P3"]
    assert back.points[0].attributes == {"Zone": "North"}
    assert back.points[2].elevation == 0.0
