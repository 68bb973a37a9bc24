from __future__ import annotations

from functools import lru_cache

import soupsieve
from bs4 import BeautifulSoup, Tag

from ..errors import SelectorSyntaxError


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


@lru_cache(maxsize=64)
def compile_selector(selector: str) -> soupsieve.SoupSieve:
    try:
        return soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as exc:
        raise SelectorSyntaxError(selector, str(exc).splitlines()[0]) from exc


def select(root: BeautifulSoup | Tag, selector: str) -> list[Tag]:
    return compile_selector(selector).select(root)


def select_first(root: BeautifulSoup | Tag, selector: str) -> Tag | None:
    return compile_selector(selector).select_one(root)


def rescope(element: Tag) -> BeautifulSoup:
    """
    Re-parse an element's markup as its own document.

    Queries against the result only see the element and its descendants, so a
    descendant combinator such as ``p.price a`` can never be satisfied by an
    ancestor that sits outside the element.
    """
    return parse_html(str(element))


def element_text(element: Tag) -> str:
    return "".join(element.strings)


def element_attr(element: Tag, name: str) -> str | None:
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)
