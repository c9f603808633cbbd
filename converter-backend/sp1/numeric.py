from __future__ import annotations

import math
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

# Leading numeric prefix, e.g. "12.5m" -> "12.5", "-3e2x" -> "-3e2"; ASCII digits only
_NUM_PREFIX_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


def parse_number(text: Optional[str]) -> float:
    """Parse the longest leading numeric prefix of ``text``; NaN when there is none."""
    if text is None:
        return math.nan
    m = _NUM_PREFIX_RE.match(text.lstrip())
    if not m:
        return math.nan
    tok = m.group(0)
    if tok.endswith("Infinity"):
        return -math.inf if tok.startswith("-") else math.inf
    return float(tok)


def parse_finite(text: Optional[str]) -> Optional[float]:
    v = parse_number(text)
    return v if math.isfinite(v) else None


def _non_finite(value: float) -> Optional[str]:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return None


def format_fixed(value: float, digits: int) -> str:
    """Fixed-point text; exact ties round away from zero."""
    special = _non_finite(value)
    if special is not None:
        return special
    if abs(value) >= 1e21:
        return format_plain(value)
    q = Decimal(abs(float(value))).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    text = f"{q:f}"
    return "-" + text if value < 0 else text


def format_plain(value: float) -> str:
    """Shortest round-trip digits; exponent form only outside 1e-6 <= |v| < 1e21."""
    special = _non_finite(value)
    if special is not None:
        return special
    if value == 0:
        return "0"
    sign, digit_tuple, exp = Decimal(repr(abs(float(value)))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exp += len(digit_tuple) - len(digits)
    k = len(digits)
    n = k + exp  # position of the decimal point relative to the digits
    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return "-" + text if value < 0 else text
