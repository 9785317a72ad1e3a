from __future__ import annotations

import math
import re
from typing import Any

from .config import DEFAULT_RECOMMENDER_CONFIG

_DECIMAL_RE = re.compile(r"(\d+)[,.](\d+)")
_INTEGER_RE = re.compile(r"(\d+)")


def _finite(value: float) -> float:
    # Digit runs too long for a float overflow to inf
    return value if math.isfinite(value) and value > 0 else 0.0


def parse_price(text: Any) -> float:
    """
    Extract a numeric amount from a price string such as ``"119,40 MAD"``.

    The first ``digits[,.]digits`` group wins; failing that the first run of
    digits is read as a whole amount. Anything unparseable, negative or too
    large to represent yields ``0.0``.
    """
    if text is None or isinstance(text, bool):
        return 0.0
    if isinstance(text, (int, float)):
        try:
            return _finite(float(text))
        except OverflowError:
            return 0.0
    if not isinstance(text, str):
        return 0.0

    match = _DECIMAL_RE.search(text)
    if match:
        return _finite(float(f"{match.group(1)}.{match.group(2)}"))

    match = _INTEGER_RE.search(text)
    return _finite(float(match.group(1))) if match else 0.0


def format_price(value: float, currency: str = DEFAULT_RECOMMENDER_CONFIG.currency) -> str:
    """Format ``value`` as ``"110,00 MAD"``."""
    return f"{value:.2f}".replace(".", ",") + f" {currency}"


def to_cents(value: float) -> int:
    return int(round(value * 100))


def from_cents(cents: int) -> float:
    return cents / 100
