from __future__ import annotations

import enum
import os
import random
import sys
import time
from typing import Protocol, Sequence, TypeVar

from .errors import TransportError
from .http_client import FetchResult
from .links import plain_link
from .models import ProductRecord
from .parsers.document import parse_html
from .parsers.skroutz import LinkDecorator, parse_records
from .variants import SiteVariant


T = TypeVar("T")


class PipelineState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    PARSING = "parsing"
    EXTRACTING = "extracting"
    POST_PROCESSING = "post_processing"
    DONE = "done"
    FAILED = "failed"


class Fetcher(Protocol):
    def fetch_text(self, url: str) -> FetchResult: ...


class Shuffler(Protocol):
    def shuffle(self, items: Sequence[T]) -> list[T]: ...


class RandomShuffler:
    """Uniform permutation backed by a random.Random; the input is never mutated."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def shuffle(self, items: Sequence[T]) -> list[T]:
        out = list(items)
        self._rng.shuffle(out)
        return out


def _log_enabled() -> bool:
    return os.getenv("DEALS_LOG", "0").strip() not in ("", "0")


def _log(msg: str) -> None:
    if _log_enabled():
        print(f"[pipeline] {msg}", file=sys.stderr, flush=True)


def truncate(items: Sequence[T], limit: int) -> list[T]:
    if limit < 0:
        raise ValueError("limit must be >= 0")
    return list(items[:limit])


class Pipeline:
    """
    Fetch, parse and extract one or more listing pages, then sample the result.

    Pages are fetched one after the other. Any failure (transport, price
    parsing, zero original price) ends the run in the FAILED state and is
    re-raised; nothing partial is returned.
    """

    def __init__(
        self,
        client: Fetcher,
        variant: SiteVariant,
        *,
        shuffler: Shuffler | None = None,
        decorate_link: LinkDecorator = plain_link,
    ) -> None:
        self._client = client
        self._variant = variant
        self._shuffler = shuffler or RandomShuffler()
        self._decorate_link = decorate_link
        self.state = PipelineState.IDLE

    @property
    def variant(self) -> SiteVariant:
        return self._variant

    def _transition(self, state: PipelineState, detail: str = "") -> None:
        self.state = state
        _log(f"{state.value} {detail}".rstrip())

    def run(self, items: int, *, pages: int = 1, order: str | None = None) -> list[ProductRecord]:
        if items < 1 or pages < 1:
            raise ValueError("items and pages must be positive")

        if not self._variant.paginated:
            pages = 1

        started = time.perf_counter()
        try:
            records: list[ProductRecord] = []
            for page in range(1, pages + 1):
                records.extend(self._scrape_page(page, order=order))

            self._transition(PipelineState.POST_PROCESSING, f"records={len(records)} items={items}")
            result = self._post_process(records, items)
        except Exception as exc:
            self._transition(PipelineState.FAILED, f":: {exc}")
            raise

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        self._transition(PipelineState.DONE, f"records={len(result)} {elapsed_ms}ms")
        return result

    def _scrape_page(self, page: int, *, order: str | None) -> list[ProductRecord]:
        url = self._variant.page_url(page=page, order=order)
        self._transition(PipelineState.FETCHING, url)
        fetch = self._client.fetch_text(url)
        if not fetch.ok or fetch.text is None:
            raise TransportError(url, fetch.error or "fetch failed", status_code=fetch.status_code)

        self._transition(PipelineState.PARSING, f"{len(fetch.text)} chars {fetch.elapsed_ms}ms")
        document = parse_html(fetch.text)

        self._transition(PipelineState.EXTRACTING, f"page={page}")
        records = parse_records(document, self._variant, self._decorate_link)
        _log(f"page={page} records={len(records)}")
        return records

    def _post_process(self, records: list[ProductRecord], items: int) -> list[ProductRecord]:
        if self._variant.shuffle_before_truncate:
            return truncate(self._shuffler.shuffle(records), items)
        return self._shuffler.shuffle(truncate(records, items))
