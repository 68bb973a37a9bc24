from __future__ import annotations

from typing import Callable, Iterator

from bs4 import BeautifulSoup, Tag

from ..models import ProductRecord, RawCard
from ..variants import SiteVariant
from .common import absolute_url, compute_discount, parse_price, strip_leading_noise
from .document import element_attr, element_text, rescope, select, select_first


LinkDecorator = Callable[[str, str], str]

LINK_TEXT = "Link"


def _info_elements(card: Tag, variant: SiteVariant) -> list[Tag]:
    scoped = rescope(card)
    if variant.info_multiple:
        return select(scoped, variant.info_selector)
    first = select_first(scoped, variant.info_selector)
    return [first] if first is not None else []


def extract_card_fields(info: Tag, variant: SiteVariant) -> RawCard:
    scoped = rescope(info)
    original_el = select_first(scoped, variant.original_price_selector)
    anchor = select_first(scoped, variant.anchor_selector)

    original_price = element_text(original_el).strip() if original_el is not None else None
    discounted_price = None
    title = None
    href = None
    if anchor is not None:
        discounted_price = strip_leading_noise(element_text(anchor).strip())
        title = element_attr(anchor, "title")
        if title is not None:
            title = title.strip()
        href = element_attr(anchor, "href")
        if href is not None:
            href = href.strip()

    return RawCard(
        title=title,
        original_price=original_price,
        discounted_price=discounted_price,
        href=href,
    )


def extract_cards(document: BeautifulSoup | Tag, variant: SiteVariant) -> Iterator[RawCard]:
    """Yield one RawCard per info element, in document order."""
    for card in select(document, variant.card_selector):
        for info in _info_elements(card, variant):
            yield extract_card_fields(info, variant)


def assemble_record(raw: RawCard, variant: SiteVariant, decorate_link: LinkDecorator) -> ProductRecord | None:
    """
    Build a ProductRecord, or return None when a required field is missing.

    Price parse failures and a zero original price are raised, not skipped.
    """
    if not raw.title or raw.original_price is None or raw.discounted_price is None:
        return None
    if variant.with_links and not raw.href:
        return None

    discount = None
    if variant.with_discount:
        discount = compute_discount(parse_price(raw.original_price), parse_price(raw.discounted_price))

    link = None
    url = None
    if variant.with_links and raw.href:
        url = absolute_url(variant.origin, raw.href)
        link = decorate_link(url, LINK_TEXT)

    return ProductRecord(
        title=raw.title,
        original_price=raw.original_price,
        discounted_price=raw.discounted_price,
        discount_percent=discount,
        link=link,
        url=url,
    )


def parse_records(document: BeautifulSoup | Tag, variant: SiteVariant, decorate_link: LinkDecorator) -> list[ProductRecord]:
    records: list[ProductRecord] = []
    for raw in extract_cards(document, variant):
        record = assemble_record(raw, variant, decorate_link)
        if record is not None:
            records.append(record)
    return records
