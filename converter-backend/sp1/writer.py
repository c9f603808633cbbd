from __future__ import annotations

from typing import List

from sp1.model import SP1Data, SP1Point
from sp1.numeric import format_fixed

# Fixed output order and casing for header fields
HEADER_FIELDS = (
    ("Version", "version"),
    ("Survey", "survey"),
    ("Datum", "datum"),
    ("Projection", "projection"),
)


def format_point(point: SP1Point) -> str:
    parts = [point.id, format_fixed(point.x, 6), format_fixed(point.y, 6)]
    if point.elevation is not None:
        parts.append(format_fixed(point.elevation, 3))
    if point.attributes:
        parts.extend(str(v) for v in point.attributes.values())
    return "\t".join(parts)


def generate_sp1(data: SP1Data) -> str:
    """Serialize SP1Data to SP1 text: comments, header fields, blank line, points.

    Not byte-identical to the parsed source: unknown header keys are gone and
    numbers are normalized to 6 (x/y) and 3 (elevation) decimals.
    """
    out: List[str] = []
    for comment in data.header.comments or []:
        out.append(f"# {comment}")
    for label, attr in HEADER_FIELDS:
        value = getattr(data.header, attr)
        if value:
            out.append(f"{label}: {value}")
    out.append("")
    for point in data.points:
        out.append(format_point(point))
    return "\n".join(out) + "\n"


__all__ = ["generate_sp1", "format_point", "HEADER_FIELDS"]
