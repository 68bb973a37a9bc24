from __future__ import annotations

import io
import os
import random
import unittest
from contextlib import redirect_stderr
from collections import Counter
from typing import Sequence, TypeVar
from unittest import mock

from skroutz_deals.errors import PriceParseError, TransportError
from skroutz_deals.links import plain_link
from skroutz_deals.pipeline import Pipeline, PipelineState, RandomShuffler, truncate
from skroutz_deals.variants import CLASSIC, PRICE_DROPS

from tests._fixtures import FakeHttpClient, card_html, fail, ok, page_html


T = TypeVar("T")

PAGE_1 = PRICE_DROPS.page_url(page=1)
PAGE_2 = PRICE_DROPS.page_url(page=2)


class _IdentityShuffler:
    def __init__(self) -> None:
        self.seen: list[list] = []

    def shuffle(self, items: Sequence[T]) -> list[T]:
        self.seen.append(list(items))
        return list(items)


def _twelve_cards() -> str:
    return page_html(*(card_html(title=f"Product {i}", href=f"/p/{i}") for i in range(12)))


class TestTruncateAndShuffle(unittest.TestCase):
    def test_truncate_saturates(self) -> None:
        self.assertEqual(truncate([1, 2, 3], 10), [1, 2, 3])
        self.assertEqual(truncate([1, 2, 3], 2), [1, 2])
        self.assertEqual(truncate([], 5), [])

    def test_random_shuffler_is_a_permutation(self) -> None:
        items = list(range(50))
        shuffled = RandomShuffler(random.Random(7)).shuffle(items)
        self.assertEqual(sorted(shuffled), items)
        self.assertEqual(items, list(range(50)))

    def test_seeded_shuffler_is_deterministic(self) -> None:
        items = list(range(20))
        a = RandomShuffler(random.Random(42)).shuffle(items)
        b = RandomShuffler(random.Random(42)).shuffle(items)
        self.assertEqual(a, b)


class TestPipeline(unittest.TestCase):
    def test_five_of_twelve(self) -> None:
        client = FakeHttpClient({PAGE_1: ok(PAGE_1, _twelve_cards())})
        pipeline = Pipeline(client, PRICE_DROPS, shuffler=RandomShuffler(random.Random(1)), decorate_link=plain_link)

        records = pipeline.run(5)

        self.assertEqual(len(records), 5)
        all_titles = {f"Product {i}" for i in range(12)}
        for r in records:
            self.assertIn(r.title, all_titles)
        self.assertEqual(pipeline.state, PipelineState.DONE)
        self.assertEqual(client.calls, [PAGE_1])

    def test_truncates_in_document_order_before_shuffling(self) -> None:
        client = FakeHttpClient({PAGE_1: ok(PAGE_1, _twelve_cards())})
        shuffler = _IdentityShuffler()
        records = Pipeline(client, PRICE_DROPS, shuffler=shuffler).run(3)
        self.assertEqual([r.title for r in records], ["Product 0", "Product 1", "Product 2"])
        self.assertEqual(len(shuffler.seen), 1)
        self.assertEqual(len(shuffler.seen[0]), 3)

    def test_shuffle_is_permutation_of_truncated_collection(self) -> None:
        client = FakeHttpClient({PAGE_1: ok(PAGE_1, _twelve_cards())})
        expected = Pipeline(FakeHttpClient({PAGE_1: ok(PAGE_1, _twelve_cards())}), PRICE_DROPS, shuffler=_IdentityShuffler()).run(8)
        shuffled = Pipeline(client, PRICE_DROPS, shuffler=RandomShuffler(random.Random(3))).run(8)
        self.assertEqual(Counter(shuffled), Counter(expected))

    def test_requesting_more_than_available_returns_everything(self) -> None:
        client = FakeHttpClient({PAGE_1: ok(PAGE_1, _twelve_cards())})
        records = Pipeline(client, PRICE_DROPS, shuffler=_IdentityShuffler()).run(100)
        self.assertEqual(len(records), 12)

    def test_pages_are_fetched_sequentially_and_accumulated(self) -> None:
        client = FakeHttpClient(
            {
                PAGE_1: ok(PAGE_1, page_html(card_html(title="One", href="/p/1"))),
                PAGE_2: ok(PAGE_2, page_html(card_html(title="Two", href="/p/2"))),
            }
        )
        records = Pipeline(client, PRICE_DROPS, shuffler=_IdentityShuffler()).run(10, pages=2)
        self.assertEqual(client.calls, [PAGE_1, PAGE_2])
        self.assertEqual([r.title for r in records], ["One", "Two"])

    def test_order_is_embedded_in_url(self) -> None:
        url = PRICE_DROPS.page_url(page=1, order="pricedrop")
        self.assertIn("order_by=pricedrop", url)
        self.assertIn("page=1", url)
        client = FakeHttpClient({url: ok(url, _twelve_cards())})
        Pipeline(client, PRICE_DROPS, shuffler=_IdentityShuffler()).run(1, order="pricedrop")
        self.assertEqual(client.calls, [url])

    def test_non_success_status_raises_transport_error(self) -> None:
        client = FakeHttpClient({PAGE_1: fail(PAGE_1, 503)})
        pipeline = Pipeline(client, PRICE_DROPS, shuffler=_IdentityShuffler())
        with self.assertRaises(TransportError) as ctx:
            pipeline.run(5)
        self.assertEqual(ctx.exception.status_code, 503)
        self.assertEqual(ctx.exception.url, PAGE_1)
        self.assertEqual(pipeline.state, PipelineState.FAILED)

    def test_failure_on_later_page_returns_nothing(self) -> None:
        client = FakeHttpClient({PAGE_1: ok(PAGE_1, _twelve_cards()), PAGE_2: fail(PAGE_2, 500)})
        with self.assertRaises(TransportError):
            Pipeline(client, PRICE_DROPS, shuffler=_IdentityShuffler()).run(5, pages=2)

    def test_malformed_price_fails_the_run(self) -> None:
        html = page_html(card_html(), card_html(original="—"))
        client = FakeHttpClient({PAGE_1: ok(PAGE_1, html)})
        pipeline = Pipeline(client, PRICE_DROPS, shuffler=_IdentityShuffler())
        with self.assertRaises(PriceParseError):
            pipeline.run(5)
        self.assertEqual(pipeline.state, PipelineState.FAILED)

    def test_classic_variant_fetches_single_page_and_samples(self) -> None:
        url = CLASSIC.page_url(page=1)
        client = FakeHttpClient({url: ok(url, _twelve_cards())})
        shuffler = _IdentityShuffler()
        records = Pipeline(client, CLASSIC, shuffler=shuffler).run(4, pages=3)
        self.assertEqual(client.calls, [url])
        self.assertEqual(len(shuffler.seen[0]), 12)
        self.assertEqual(len(records), 4)
        self.assertIsNone(records[0].discount_percent)
        self.assertIsNone(records[0].link)

    def test_rejects_non_positive_counts(self) -> None:
        pipeline = Pipeline(FakeHttpClient({}), PRICE_DROPS)
        with self.assertRaises(ValueError):
            pipeline.run(0)
        with self.assertRaises(ValueError):
            pipeline.run(1, pages=0)

    def test_logs_transitions_when_enabled(self) -> None:
        client = FakeHttpClient({PAGE_1: ok(PAGE_1, _twelve_cards())})
        buf = io.StringIO()
        with mock.patch.dict(os.environ, {"DEALS_LOG": "1"}):
            with redirect_stderr(buf):
                Pipeline(client, PRICE_DROPS, shuffler=_IdentityShuffler()).run(2)
        out = buf.getvalue()
        self.assertIn(f"[pipeline] fetching {PAGE_1}", out)
        self.assertIn("[pipeline] extracting page=1", out)
        self.assertIn("[pipeline] done records=2", out)

    def test_silent_by_default(self) -> None:
        client = FakeHttpClient({PAGE_1: ok(PAGE_1, _twelve_cards())})
        buf = io.StringIO()
        with mock.patch.dict(os.environ, {"DEALS_LOG": "0"}):
            with redirect_stderr(buf):
                Pipeline(client, PRICE_DROPS, shuffler=_IdentityShuffler()).run(2)
        self.assertEqual(buf.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
