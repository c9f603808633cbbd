"""Upload-to-download conversions shared by the HTTP routes and the batch CLI.

Each conversion takes the raw text of one input file and returns a
ConversionResult carrying exactly what a download needs: payload, filename
and MIME type, plus the point count for the user-facing summary.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from gis.csv_table import parse_csv, to_csv
from gis.geojson import dumps_geojson, to_geojson
from sp1.errors import UnsupportedFormatError
from sp1.model import SP1Header
from sp1.reader import parse_sp1
from sp1.writer import generate_sp1

logger = logging.getLogger(__name__)

SP1_EXTENSIONS = [".sp1", ".txt"]
CSV_EXTENSIONS = [".csv"]

GEOJSON_MIME = "application/geo+json"
CSV_MIME = "text/csv"
SP1_MIME = "text/plain"

_LAST_EXT_RE = re.compile(r"\.[^/.]+$")


@dataclass
class ConversionResult:
    data: Any  # str, or a dict for GeoJSON
    filename: str
    mime_type: str
    point_count: int

    def as_text(self) -> str:
        if isinstance(self.data, str):
            return self.data
        return dumps_geojson(self.data)


def check_extension(filename: Optional[str], accepted: List[str]) -> None:
    """Reject names whose extension is not accepted; unnamed input passes."""
    if not filename:
        return
    ext = os.path.splitext(filename)[1].lower()
    if ext not in accepted:
        raise UnsupportedFormatError(filename, accepted)


def sp1_output_name(source_name: Optional[str]) -> str:
    # Replace the last extension only; names without one are kept as-is
    if not source_name:
        return "converted.sp1"
    return _LAST_EXT_RE.sub(".sp1", source_name)


def default_csv_header(version: str = "1.0", survey: str = "Converted from CSV", datum: str = "WGS84",
                       projection: Optional[str] = None) -> SP1Header:
    return SP1Header(version=version, survey=survey, datum=datum, projection=projection)


def log_conversion(kind: str, output: str, count: int, cached: bool = False) -> None:
    logger.info("conversion.done", extra={"kind": kind, "output": output, "points": count, "cached": cached})


def sp1_to_geojson(content: str, strict: bool = False, source_name: Optional[str] = None) -> ConversionResult:
    check_extension(source_name, SP1_EXTENSIONS)
    data = parse_sp1(content, strict=strict)
    res = ConversionResult(to_geojson(data), "converted.geojson", GEOJSON_MIME, len(data.points))
    log_conversion("sp1_to_geojson", res.filename, res.point_count)
    return res


def sp1_to_csv(content: str, strict: bool = False, source_name: Optional[str] = None) -> ConversionResult:
    check_extension(source_name, SP1_EXTENSIONS)
    data = parse_sp1(content, strict=strict)
    res = ConversionResult(to_csv(data), "converted.csv", CSV_MIME, len(data.points))
    log_conversion("sp1_to_csv", res.filename, res.point_count)
    return res


def csv_to_sp1(
    content: str,
    source_name: Optional[str] = None,
    header: Optional[SP1Header] = None,
    strict: bool = False,
) -> ConversionResult:
    check_extension(source_name, CSV_EXTENSIONS)
    hdr = header if header is not None else default_csv_header()
    data = parse_csv(content, header=hdr, strict=strict)
    res = ConversionResult(generate_sp1(data), sp1_output_name(source_name), SP1_MIME, len(data.points))
    log_conversion("csv_to_sp1", res.filename, res.point_count)
    return res


__all__ = [
    "ConversionResult",
    "sp1_to_geojson",
    "sp1_to_csv",
    "csv_to_sp1",
    "check_extension",
    "sp1_output_name",
    "default_csv_header",
    "log_conversion",
    "SP1_EXTENSIONS",
    "CSV_EXTENSIONS",
]
