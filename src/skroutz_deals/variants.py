from __future__ import annotations

from dataclasses import dataclass


COL_NAME = "Name"
COL_OLD_PRICE = "Old price"
COL_NEW_PRICE = "New price"
COL_DISCOUNT = "% Discount"
COL_LINK = "Link"


@dataclass(frozen=True)
class SiteVariant:
    """
    One configured flavour of the scrape: where to fetch, which selectors to
    apply and which columns end up in the table.

    ``url_template`` is formatted with ``order`` and ``page``; templates
    without placeholders ignore both.
    """

    name: str
    url_template: str
    origin: str
    card_selector: str
    info_selector: str
    original_price_selector: str
    anchor_selector: str
    info_multiple: bool = True
    with_discount: bool = True
    with_links: bool = True
    shuffle_before_truncate: bool = False
    default_order: str = "popularity"

    @property
    def columns(self) -> tuple[str, ...]:
        cols = [COL_NAME, COL_OLD_PRICE, COL_NEW_PRICE]
        if self.with_discount:
            cols.append(COL_DISCOUNT)
        if self.with_links:
            cols.append(COL_LINK)
        return tuple(cols)

    @property
    def paginated(self) -> bool:
        return "{page}" in self.url_template

    def page_url(self, *, page: int, order: str | None = None) -> str:
        return self.url_template.format(order=order or self.default_order, page=page)


PRICE_DROPS = SiteVariant(
    name="price-drops",
    url_template="https://www.skroutz.gr/price-drops?order_by={order}&page={page}",
    origin="https://skroutz.gr",
    card_selector=".sku-card.js-sku",
    info_selector=".sku-card-info",
    original_price_selector="del",
    anchor_selector="p.sku-card-price a",
)

# First page only, no derived columns.
CLASSIC = SiteVariant(
    name="classic",
    url_template="https://www.skroutz.gr/price-drops",
    origin="https://skroutz.gr",
    card_selector=".sku-card.js-sku",
    info_selector=".sku-card-info",
    original_price_selector="del",
    anchor_selector="p.sku-card-price a",
    with_discount=False,
    with_links=False,
    shuffle_before_truncate=True,
)

VARIANTS: dict[str, SiteVariant] = {v.name: v for v in (PRICE_DROPS, CLASSIC)}
DEFAULT_VARIANT = PRICE_DROPS.name


def get_variant(name: str) -> SiteVariant:
    try:
        return VARIANTS[name.lower()]
    except KeyError:
        raise KeyError(f"unknown variant {name!r}; expected one of {', '.join(sorted(VARIANTS))}") from None
