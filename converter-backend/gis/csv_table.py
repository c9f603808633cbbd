"""Plain comma-separated point tables.

No quoting or escaping in either direction: cells are split on every comma.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Dict, List, Optional

from sp1.errors import CoordinateParseError, EmptyInputError, MissingColumnsError
from sp1.model import SP1Data, SP1Header, SP1Point
from sp1.numeric import format_plain, parse_finite, parse_number

logger = logging.getLogger(__name__)

FIXED_COLUMNS = ("ID", "X", "Y", "Elevation")

ID_RE = re.compile(r"^id$", re.IGNORECASE)
X_RE = re.compile(r"^x$", re.IGNORECASE)
Y_RE = re.compile(r"^y$", re.IGNORECASE)
ELEV_RE = re.compile(r"^(elevation|z)$", re.IGNORECASE)


def attribute_columns(data: SP1Data) -> List[str]:
    keys = set()
    for p in data.points:
        if p.attributes:
            keys.update(p.attributes.keys())
    return sorted(keys)


def to_csv(data: SP1Data) -> str:
    """Render points as CSV: ID,X,Y,Elevation plus the sorted union of attribute keys."""
    attr_keys = attribute_columns(data)
    rows = [",".join(list(FIXED_COLUMNS) + attr_keys)]
    for p in data.points:
        cells = [
            p.id,
            format_plain(p.x),
            format_plain(p.y),
            format_plain(p.elevation) if p.elevation is not None else "",
        ]
        attrs = p.attributes or {}
        cells.extend(str(attrs.get(k, "")) for k in attr_keys)
        rows.append(",".join(cells))
    return "\n".join(rows) + "\n"


def _find_column(columns: List[str], pattern: re.Pattern) -> Optional[int]:
    for i, col in enumerate(columns):
        if pattern.match(col):
            return i
    return None


def _cell(values: List[str], idx: int) -> str:
    return values[idx] if idx < len(values) else ""


def _coordinate(raw: str, axis: str, line_no: int, strict: bool) -> float:
    v = parse_number(raw)
    if strict and not math.isfinite(v):
        raise CoordinateParseError(line_no, axis, raw)
    return v


def parse_csv(content: str, header: Optional[SP1Header] = None, strict: bool = False) -> SP1Data:
    """Parse a CSV point table into SP1Data.

    The first non-blank line names the columns. ID, X and Y are required
    (case-insensitive); an ``elevation`` or ``z`` column is optional. Every
    other non-empty cell becomes an attribute keyed by its column name. The
    CSV has no header metadata of its own, so ``header`` is attached as given.

    Raises EmptyInputError when there are no non-blank lines and
    MissingColumnsError when ID, X or Y is absent.
    """
    lines = []
    for i, raw in enumerate((content or "").split("\n"), start=1):
        s = raw.strip()
        if s:
            lines.append((i, s))
    if not lines:
        raise EmptyInputError()

    columns = [c.strip() for c in lines[0][1].split(",")]
    id_idx = _find_column(columns, ID_RE)
    x_idx = _find_column(columns, X_RE)
    y_idx = _find_column(columns, Y_RE)
    elev_idx = _find_column(columns, ELEV_RE)

    missing = [name for name, idx in (("ID", id_idx), ("X", x_idx), ("Y", y_idx)) if idx is None]
    if missing:
        raise MissingColumnsError(missing)

    reserved = {id_idx, x_idx, y_idx, elev_idx}
    points: List[SP1Point] = []
    skipped = 0
    for line_no, line in lines[1:]:
        values = [v.strip() for v in line.split(",")]
        if len(values) < 3:
            skipped += 1
            continue

        point = SP1Point(
            id=_cell(values, id_idx),
            x=_coordinate(_cell(values, x_idx), "x", line_no, strict),
            y=_coordinate(_cell(values, y_idx), "y", line_no, strict),
        )
        if elev_idx is not None:
            point.elevation = parse_finite(_cell(values, elev_idx))

        attrs: Dict[str, str] = {}
        for j, col in enumerate(columns):
            if j in reserved:
                continue
            val = _cell(values, j)
            if val:
                attrs[col] = val
        if attrs:
            point.attributes = attrs
        points.append(point)

    if skipped:
        logger.debug("csv reader skipped %d short row(s)", skipped)
    return SP1Data(header=header if header is not None else SP1Header(), points=points)


__all__ = ["to_csv", "parse_csv", "attribute_columns", "FIXED_COLUMNS"]
