from __future__ import annotations

from datetime import date

import pytest

from coincapper.utils.parsing import (
    DISPLAY_DATE_FORMAT,
    QUERY_DATE_FORMAT,
    parse_amount,
    parse_date,
    parse_int,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$97,152,900.00", 97152900.0),
        ("$4.13", 4.13),
        ("38.17%", 38.17),
        ("  1,224,330  ", 1224330.0),
        ("-10.83", -10.83),
        ("0.00104433", 0.00104433),
        ("1.5e3", 1500.0),
    ],
)
def test_parse_amount_strips_formatting(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "?", "Low Vol", "$", "%", None, "nan", "inf"])
def test_parse_amount_degrades_to_zero(text):
    assert parse_amount(text) == 0.0


def test_parse_amount_reads_leading_number_only():
    assert parse_amount("$25,802 *") == 25802.0
    assert parse_amount("12.5 BTC") == 12.5


def test_parse_amount_is_idempotent_on_clean_values():
    once = parse_amount("$7,311.91")
    assert parse_amount(once) == once
    assert parse_amount(str(once)) == once
    assert parse_amount(3) == 3.0
    assert parse_amount(float("nan")) == 0.0


def test_parse_int_truncates():
    assert parse_int("1") == 1
    assert parse_int("1,500") == 1500
    assert parse_int("?") == 0


@pytest.mark.parametrize(
    "text",
    ["2018-01-07", "Jan 07, 2018", "January 7, 2018", "7 Jan 2018", "20180107", "  Jan  07,   2018 "],
)
def test_parse_date_accepts_common_forms(text):
    assert parse_date(text) == date(2018, 1, 7)
    assert parse_date(text, DISPLAY_DATE_FORMAT) == "2018-01-07"
    assert parse_date(text, QUERY_DATE_FORMAT) == "20180107"


@pytest.mark.parametrize("text", ["not-a-date", "invalid", "", "2018-13-40", None, "Recently"])
def test_parse_date_returns_none_on_failure(text):
    assert parse_date(text) is None
    assert parse_date(text, QUERY_DATE_FORMAT) is None
