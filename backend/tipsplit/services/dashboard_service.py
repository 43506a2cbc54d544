"""
Admin dashboard view: one page of sorted calculations plus statistics
"""
import math
import sys
from dataclasses import dataclass
from typing import Any, List

from sqlalchemy.orm import Session

from tipsplit.models.calculation import Calculation
from tipsplit.services.calculation_service import (CalculationService,
                                                   CalculationStatistics,
                                                   SortDirection, SortKey)

PAGE_SIZE = 20


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard template renders"""
    calculations: List[Calculation]
    current_page: int
    total_pages: int
    total_count: int
    sort_key: SortKey
    direction: SortDirection
    statistics: CalculationStatistics

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def normalize_page(raw: Any, page_size: int = PAGE_SIZE) -> int:
    """Turn a requested page into a 1-indexed page number; bad or missing values mean 1

    The upper end is capped so the row offset still fits a 64-bit integer.
    """
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    return min(max(page, 1), sys.maxsize // page_size)


def page_offset(page: int, page_size: int = PAGE_SIZE) -> int:
    return (page - 1) * page_size


def total_pages(total_count: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages needed for total_count rows; zero rows means zero pages"""
    return math.ceil(total_count / page_size)


def build_dashboard(
    db: Session,
    page: Any = 1,
    sort: Any = None,
    direction: Any = None,
    page_size: int = PAGE_SIZE
) -> DashboardView:
    """
    Assemble the dashboard for the requested page and ordering

    Args:
        db: Database session
        page: Requested page (clamped to >= 1)
        sort: Requested sort key (unknown values fall back to date)
        direction: Requested direction (unknown values fall back to desc)
        page_size: Rows per page

    Returns:
        DashboardView
    """
    service = CalculationService(db)
    current_page = normalize_page(page, page_size)
    sort_key = SortKey.parse(sort)
    sort_direction = SortDirection.parse(direction)
    count = service.count()

    calculations = service.list(
        sort_key=sort_key,
        direction=sort_direction,
        offset=page_offset(current_page, page_size),
        limit=page_size,
    )

    return DashboardView(
        calculations=calculations,
        current_page=current_page,
        total_pages=total_pages(count, page_size),
        total_count=count,
        sort_key=sort_key,
        direction=sort_direction,
        statistics=service.aggregate(),
    )
