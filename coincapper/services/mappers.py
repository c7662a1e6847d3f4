"""Row-to-record mapping for market, historical and listing tables."""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

from bs4.element import Tag

from coincapper.schemas.market import HistoricalDay, Listing, MarketPair
from coincapper.services.extraction import row_cells
from coincapper.utils.parsing import DISPLAY_DATE_FORMAT, parse_amount, parse_date, parse_int

_ROW_ID = re.compile(r"id-(.+)")

MARKET_PAIR_COLUMNS = 7
HISTORICAL_COLUMNS = 7


def _text(cell: Tag) -> str:
    return cell.get_text(" ", strip=True)


def _cell(cells: list[Tag], index: int) -> Optional[Tag]:
    return cells[index] if index < len(cells) else None


def _cell_text(cells: list[Tag], index: int) -> str:
    cell = _cell(cells, index)
    return _text(cell) if cell is not None else ""


def _attr(node: Optional[Tag], name: str) -> Optional[str]:
    if node is None:
        return None
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value


def _select(node: Optional[Tag], selector: str) -> Optional[Tag]:
    if node is None:
        return None
    return node.select_one(selector)


def map_market_pair(cells: list[Tag]) -> MarketPair:
    # col 0 is the rank, the layout is positional
    return MarketPair(
        source=_cell_text(cells, 1),
        pair=_cell_text(cells, 2),
        volume_usd=parse_amount(_cell_text(cells, 3)),
        price_usd=parse_amount(_cell_text(cells, 4)),
        volume_percentage=parse_amount(_cell_text(cells, 5)),
        last_updated=_cell_text(cells, 6),
    )


def map_historical_day(cells: list[Tag]) -> HistoricalDay:
    return HistoricalDay(
        date=parse_date(_cell_text(cells, 0), DISPLAY_DATE_FORMAT),
        open=parse_amount(_cell_text(cells, 1)),
        high=parse_amount(_cell_text(cells, 2)),
        low=parse_amount(_cell_text(cells, 3)),
        close=parse_amount(_cell_text(cells, 4)),
        volume=parse_amount(_cell_text(cells, 5)),
        market_cap=parse_amount(_cell_text(cells, 6)),
    )


class _ListingBuilder:
    """Collects only the fields the page actually carries."""

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}

    def text(self, name: str, value: Optional[str]) -> "_ListingBuilder":
        if value:
            self._fields[name] = value
        return self

    def value(self, name: str, value: Any) -> "_ListingBuilder":
        self._fields[name] = value
        return self

    def amount(self, name: str, raw: Optional[str]) -> "_ListingBuilder":
        if raw is not None:
            self._fields[name] = parse_amount(raw)
        return self

    def build(self) -> Listing:
        return Listing(**self._fields)


def _map_listing_row(row: Tag, label_field: str) -> Listing:
    cells = row_cells(row)
    builder = _ListingBuilder()

    row_id = _attr(row, "id")
    match = _ROW_ID.search(row_id) if row_id else None
    builder.text("id", match.group(1) if match else None)

    builder.value("rank", parse_int(_text(cells[0])))

    name = _select(cells[1], "a.currency-name-container")
    builder.text("name", _text(name) if name is not None else None)
    builder.text(label_field, _cell_text(cells, 2))

    market_cap = _cell(cells, 3)
    builder.amount("market_cap_usd", _attr(market_cap, "data-usd"))
    builder.amount("market_cap_btc", _attr(market_cap, "data-btc"))

    price = _select(_cell(cells, 4), "a.price")
    builder.amount("price_usd", _attr(price, "data-usd"))
    builder.amount("price_btc", _attr(price, "data-btc"))

    supply = _select(_cell(cells, 5), "a[data-supply], span[data-supply]")
    builder.amount("circulating_supply", _attr(supply, "data-supply"))

    volume = _select(_cell(cells, 6), "a")
    builder.amount("volume_usd_24h", _attr(volume, "data-usd"))
    builder.amount("volume_btc_24h", _attr(volume, "data-btc"))

    builder.amount("percent_change_1h", _attr(_cell(cells, 7), "data-usd"))
    builder.amount("percent_change_24h", _attr(_cell(cells, 8), "data-usd"))
    builder.amount("percent_change_7d", _attr(_cell(cells, 9), "data-usd"))

    return builder.build()


def map_coin_row(row: Tag) -> Listing:
    return _map_listing_row(row, "symbol")


def map_token_row(row: Tag) -> Listing:
    return _map_listing_row(row, "platform")


LISTING_MAPPERS: dict[str, Callable[[Tag], Listing]] = {
    "coins": map_coin_row,
    "tokens": map_token_row,
}
