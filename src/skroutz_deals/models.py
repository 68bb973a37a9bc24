from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RawCard:
    title: str | None
    original_price: str | None
    discounted_price: str | None
    href: str | None = None


@dataclass(frozen=True)
class ProductRecord:
    title: str
    original_price: str
    discounted_price: str
    discount_percent: float | None = None
    link: str | None = None
    url: str | None = None
