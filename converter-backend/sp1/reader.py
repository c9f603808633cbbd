"""SP1 text reader.

Lines are trimmed and blank lines dropped. Parsing runs as a two-state
machine: HEADER accepts ``Key: value`` lines, and the first non-comment line
without a colon switches to DATA for the rest of the input. Comment lines
(``#``) are collected in either state.
"""
from __future__ import annotations

import enum
import logging
import math
import re
from typing import Dict, List, Optional, Tuple

from sp1.errors import CoordinateParseError
from sp1.model import SP1Data, SP1Header, SP1Point
from sp1.numeric import parse_finite, parse_number

logger = logging.getLogger(__name__)

HEADER_KEYS = ("version", "survey", "datum", "projection")

WS_RE = re.compile(r"\s+")


class ParseMode(enum.Enum):
    HEADER = "header"
    DATA = "data"


def _split_lines(content: str) -> List[Tuple[int, str]]:
    """Trimmed non-blank lines paired with their 1-based source line number."""
    out: List[Tuple[int, str]] = []
    for i, raw in enumerate((content or "").split("\n"), start=1):
        ln = raw.strip()
        if ln:
            out.append((i, ln))
    return out


def _apply_header_line(header: SP1Header, line: str) -> None:
    key, _, value = line.partition(":")
    key = key.strip().lower()
    if key in HEADER_KEYS:
        setattr(header, key, value.strip())


def _coordinate(token: str, axis: str, line_no: int, strict: bool) -> float:
    v = parse_number(token)
    if strict and not math.isfinite(v):
        raise CoordinateParseError(line_no, axis, token)
    return v


def parse_point_tokens(tokens: List[str], line_no: int = 0, strict: bool = False) -> Optional[SP1Point]:
    """Build a point from whitespace-split tokens; None when fewer than 3."""
    if len(tokens) < 3:
        return None
    point = SP1Point(
        id=tokens[0],
        x=_coordinate(tokens[1], "x", line_no, strict),
        y=_coordinate(tokens[2], "y", line_no, strict),
    )
    if len(tokens) > 3:
        point.elevation = parse_finite(tokens[3])
    if len(tokens) > 4:
        attrs: Dict[str, str] = {}
        for i in range(4, len(tokens)):
            attrs[f"attr{i - 3}"] = tokens[i]
        point.attributes = attrs
    return point


def parse_sp1(content: str, strict: bool = False) -> SP1Data:
    """Parse SP1 text into an SP1Data.

    Never raises unless ``strict`` is set, in which case an unparsable x or y
    raises CoordinateParseError. Data lines with fewer than three tokens and
    unknown header keys are dropped silently.
    """
    header = SP1Header()
    points: List[SP1Point] = []
    mode = ParseMode.HEADER
    dropped = 0

    for line_no, line in _split_lines(content):
        if line.startswith("#"):
            header.comments.append(line[1:].strip())
            continue

        if mode is ParseMode.HEADER:
            if ":" in line:
                _apply_header_line(header, line)
                continue
            mode = ParseMode.DATA

        point = parse_point_tokens(WS_RE.split(line), line_no, strict)
        if point is None:
            dropped += 1
            continue
        points.append(point)

    if dropped:
        logger.debug("sp1.reader dropped %d short data line(s)", dropped)
    return SP1Data(header=header, points=points)


__all__ = ["ParseMode", "parse_sp1", "parse_point_tokens", "HEADER_KEYS"]
