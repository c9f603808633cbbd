import json

import pytest

from app.conversions import (
    check_extension,
    csv_to_sp1,
    default_csv_header,
    sp1_output_name,
    sp1_to_csv,
    sp1_to_geojson,
)
from sp1.errors import MissingColumnsError, UnsupportedFormatError

SP1_TEXT = "# demo\nProjection: EPSG:32631\n\nP1 1 2 3 north\nP2 4 5\n"


def test_sp1_to_geojson_result():
    res = sp1_to_geojson(SP1_TEXT, source_name="survey.SP1")
    assert res.filename == "converted.geojson"
    assert res.mime_type == "application/geo+json"
    assert res.point_count == 2
    assert res.data["crs"]["properties"]["name"] == "EPSG:32631"
    parsed = json.loads(res.as_text())
    assert parsed["features"][1]["geometry"]["coordinates"] == [4, 5, 0]


def test_sp1_to_csv_result():
    res = sp1_to_csv(SP1_TEXT, source_name="survey.txt")
    assert res.filename == "converted.csv"
    assert res.mime_type == "text/csv"
    assert res.as_text() == "ID,X,Y,Elevation,attr1\nP1,1,2,3,north\nP2,4,5,,\n"


def test_csv_to_sp1_uses_default_header_and_renames():
    res = csv_to_sp1("ID,X,Y,Zone\nP1,10,20,North\n", source_name="points.csv")
    assert res.filename == "points.sp1"
    assert res.mime_type == "text/plain"
    assert res.point_count == 1
    assert res.data == (
        "Version: 1.0\n"
        "Survey: Converted from CSV\n"
        "Datum: WGS84\n"
        "\n"
        "P1\t10.000000\t20.000000\tNorth\n"
    )


def test_csv_to_sp1_custom_header():
    hdr = default_csv_header(version="2.0", survey="Block A", datum="ED50", projection="UTM 31N")
    res = csv_to_sp1("id,x,y,z\nA,1,2,3\n", source_name="a.csv", header=hdr)
    assert res.data.startswith("Version: 2.0\nSurvey: Block A\nDatum: ED50\nProjection: UTM 31N\n\n")
    assert "A\t1.000000\t2.000000\t3.000\n" in res.data


def test_csv_errors_propagate():
    with pytest.raises(MissingColumnsError):
        csv_to_sp1("Name,Lat,Lon\nA,1,2", source_name="bad.csv")


def test_extension_checks():
    check_extension("a.sp1", [".sp1", ".txt"])
    check_extension(None, [".csv"])
    with pytest.raises(UnsupportedFormatError):
        check_extension("a.xlsx", [".csv"])
    with pytest.raises(UnsupportedFormatError):
        sp1_to_geojson(SP1_TEXT, source_name="survey.csv")


def test_sp1_output_name():
    assert sp1_output_name("points.csv") == "points.sp1"
    assert sp1_output_name("archive.v2.csv") == "archive.v2.sp1"
    assert sp1_output_name("noext") == "noext"
    assert sp1_output_name(None) == "converted.sp1"
