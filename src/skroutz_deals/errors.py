from __future__ import annotations


class ScrapeError(Exception):
    """Base class for everything that terminates a pipeline run."""


class TransportError(ScrapeError):
    def __init__(self, url: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{message} while fetching {url}")
        self.url = url
        self.status_code = status_code


class SelectorSyntaxError(ScrapeError):
    def __init__(self, selector: str, message: str) -> None:
        super().__init__(f"invalid selector {selector!r}: {message}")
        self.selector = selector


class PriceParseError(ScrapeError, ValueError):
    def __init__(self, text: str) -> None:
        super().__init__(f"cannot parse price from {text!r}")
        self.text = text


class DivisionByZeroError(ScrapeError, ZeroDivisionError):
    def __init__(self, original: float, discounted: float) -> None:
        super().__init__(f"original price is zero (discounted={discounted})")
        self.original = original
        self.discounted = discounted
