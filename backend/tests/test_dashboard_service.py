"""
Tests for dashboard paging and assembly
"""
import sys
from decimal import Decimal

import pytest

from tipsplit.services.calculation_service import SortDirection, SortKey
from tipsplit.services.dashboard_service import (PAGE_SIZE, build_dashboard,
                                                 normalize_page, page_offset,
                                                 total_pages)


@pytest.mark.parametrize("raw, expected", [
    (None, 1),
    ("", 1),
    ("abc", 1),
    ("0", 1),
    ("-1", 1),
    (-7, 1),
    ("3", 3),
    (2, 2),
])
def test_normalize_page(raw, expected):
    assert normalize_page(raw) == expected


@pytest.mark.parametrize("count, pages", [(0, 0), (1, 1), (20, 1), (21, 2), (25, 2), (40, 2), (41, 3)])
def test_total_pages(count, pages):
    assert total_pages(count) == pages


def test_page_offset():
    assert page_offset(1) == 0
    assert page_offset(3) == 2 * PAGE_SIZE


def test_empty_dashboard(db):
    view = build_dashboard(db)

    assert view.calculations == []
    assert view.total_count == 0
    assert view.total_pages == 0
    assert view.current_page == 1
    assert view.statistics.total_calculations == 0
    assert not view.has_previous
    assert not view.has_next


def test_pages_split_at_twenty(db, make_calculation):
    for i in range(25):
        make_calculation(bill_amount=str(10 + i))

    first = build_dashboard(db, page=1)
    second = build_dashboard(db, page="2")

    assert len(first.calculations) == 20
    assert first.total_pages == 2
    assert first.has_next and not first.has_previous
    assert len(second.calculations) == 5
    assert second.has_previous and not second.has_next
    assert {c.id for c in first.calculations}.isdisjoint({c.id for c in second.calculations})


def test_page_past_the_end_is_empty(db, make_calculation):
    make_calculation()

    view = build_dashboard(db, page=5)

    assert view.calculations == []
    assert view.current_page == 5
    assert view.total_pages == 1


def test_statistics_cover_all_pages(db, make_calculation):
    for _ in range(25):
        make_calculation(bill_amount="10.00", tip_percentage="10")

    view = build_dashboard(db, page=2)

    assert view.statistics.total_calculations == 25
    assert view.statistics.total_tips_collected == Decimal("25.00")


def test_sort_parameters_are_parsed(db, make_calculation):
    make_calculation(bill_amount="30.00")
    make_calculation(bill_amount="10.00")
    make_calculation(bill_amount="20.00")

    view = build_dashboard(db, sort="bill_amount", direction="asc")

    assert view.sort_key is SortKey.BILL_AMOUNT
    assert view.direction is SortDirection.ASC
    assert [c.bill_amount for c in view.calculations] == [
        Decimal("10.00"), Decimal("20.00"), Decimal("30.00")
    ]


def test_unknown_sort_parameters_fall_back(db):
    view = build_dashboard(db, sort="bogus", direction="bogus")

    assert view.sort_key is SortKey.DATE
    assert view.direction is SortDirection.DESC


def test_normalize_page_caps_huge_values():
    assert normalize_page("99999999999999999999") == sys.maxsize // PAGE_SIZE
    assert page_offset(normalize_page(10 ** 30)) <= sys.maxsize


def test_huge_page_is_empty_not_an_error(db, make_calculation):
    make_calculation()

    view = build_dashboard(db, page="99999999999999999999")

    assert view.calculations == []
    assert view.total_pages == 1
    assert not view.has_next
