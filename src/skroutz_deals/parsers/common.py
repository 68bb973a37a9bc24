from __future__ import annotations

import re
from urllib.parse import urljoin

from ..errors import DivisionByZeroError, PriceParseError


# Greek listings use "1.234,56 €": the comma is the only decimal separator.
_NON_PRICE_CHARS_RE = re.compile(r"[^0-9,]")
_LEADING_NOISE_RE = re.compile(r"^[^0-9]+")


def strip_leading_noise(text: str) -> str:
    return _LEADING_NOISE_RE.sub("", text or "")


def parse_price(text: str) -> float:
    cleaned = _NON_PRICE_CHARS_RE.sub("", text or "").replace(",", ".")
    try:
        return float(cleaned)
    except ValueError as exc:
        raise PriceParseError(text) from exc


def compute_discount(original: float, discounted: float) -> float:
    if original == 0:
        raise DivisionByZeroError(original, discounted)
    return 100.0 * (original - discounted) / original


def absolute_url(origin: str, href: str) -> str:
    return urljoin(origin.rstrip("/") + "/", href.strip())
