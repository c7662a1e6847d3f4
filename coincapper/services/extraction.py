"""Table row extraction for the three page layouts we read."""

from __future__ import annotations

from bs4 import BeautifulSoup
from bs4.element import Tag

MARKETS_ROW_SELECTOR = "table#markets-table tbody tr"
HISTORICAL_ROW_SELECTOR = "#historical-data table tbody tr"
LISTING_ROW_SELECTOR = "table#currencies-all tbody tr, table#assets-all tbody tr"


def parse_document(body: str) -> BeautifulSoup:
    return BeautifulSoup(body or "", "html.parser")


def extract_row_elements(document: BeautifulSoup, row_selector: str) -> list[Tag]:
    """Return the rows matched by ``row_selector`` in document order."""
    return document.select(row_selector)


def row_cells(row: Tag) -> list[Tag]:
    return row.find_all("td", recursive=False)


def extract_rows(document: BeautifulSoup, row_selector: str) -> list[list[Tag]]:
    """
    Return the ``td`` cells of every matched row.

    An empty list means the selector matched nothing; callers decide what
    that signals.
    """
    return [row_cells(row) for row in extract_row_elements(document, row_selector)]
