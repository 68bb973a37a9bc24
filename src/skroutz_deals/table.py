from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import ProductRecord
from .variants import COL_DISCOUNT, COL_LINK, COL_NAME, COL_NEW_PRICE, COL_OLD_PRICE


NAME_WIDTH = 50
HEADER_STYLE = "bold black on green"
ATTRIBUTION = "Prices and links from skroutz.gr"


def _cell(record: ProductRecord, column: str) -> Text:
    if column == COL_NAME:
        return Text(record.title)
    if column == COL_OLD_PRICE:
        return Text(record.original_price)
    if column == COL_NEW_PRICE:
        return Text(record.discounted_price)
    if column == COL_DISCOUNT:
        return Text("" if record.discount_percent is None else f"{record.discount_percent:.2f}")
    if column == COL_LINK:
        # from_ansi turns OSC 8 sequences into rich link styles.
        return Text.from_ansi(record.link or "")
    raise ValueError(f"unknown column {column!r}")


def build_table(records: list[ProductRecord], columns: tuple[str, ...]) -> Table:
    table = Table(box=box.SQUARE, header_style=HEADER_STYLE)
    for col in columns:
        if col == COL_NAME:
            table.add_column(col, max_width=NAME_WIDTH, overflow="fold")
        elif col == COL_DISCOUNT:
            table.add_column(col, justify="right", no_wrap=True)
        else:
            table.add_column(col, no_wrap=True)
    for record in records:
        table.add_row(*(_cell(record, col) for col in columns))
    return table


def render_table(
    records: list[ProductRecord],
    columns: tuple[str, ...],
    *,
    console: Console | None = None,
    elapsed_seconds: float | None = None,
) -> None:
    console = console or Console()
    console.print(build_table(records, columns))
    console.print(ATTRIBUTION, style="dim")
    if elapsed_seconds is not None:
        console.print(f"Finished in {elapsed_seconds:.2f}s", style="dim")
