"""
Time-window filtering and per-category totals for the expense screen.

Windows are half-open date intervals ``[start, end)`` computed from the host's
local calendar. No timezone conversion is applied to the reference instant.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from models import DATE_FORMAT, ExpenseRecord

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

Window = Tuple[date, date]


class TimeFilter(str, Enum):
    ALL = "ALL"
    WEEK = "WEEK"
    MONTH = "MONTH"

    @property
    def label(self) -> str:
        return {
            TimeFilter.ALL: "All Time",
            TimeFilter.WEEK: "This Week",
            TimeFilter.MONTH: "This Month",
        }[self]


def _as_date(reference: date | datetime | None) -> date:
    if reference is None:
        reference = datetime.now()
    if isinstance(reference, datetime):
        return reference.date()
    return reference


def week_bounds(reference: date | datetime | None = None) -> Window:
    """Monday of the reference week through the following Monday."""
    today = _as_date(reference)
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=7)


def month_bounds(reference: date | datetime | None = None) -> Window:
    """First day of the reference month through the first day of the next one."""
    today = _as_date(reference)
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def resolve_window(selector: TimeFilter | str, reference: date | datetime | None = None) -> Optional[Window]:
    selector = TimeFilter(selector)
    if selector is TimeFilter.WEEK:
        return week_bounds(reference)
    if selector is TimeFilter.MONTH:
        return month_bounds(reference)
    return None


def filter_expenses(records: Iterable[ExpenseRecord], window: Optional[Window]) -> List[ExpenseRecord]:
    """
    Keep the records whose date falls inside ``window``, preserving order.

    A ``None`` window keeps everything. Unparseable dates never match a window.
    """
    records = list(records)
    if window is None or not records:
        return records

    start, end = window
    dates = pd.to_datetime(
        pd.Series([r.date for r in records], dtype=object),
        format=DATE_FORMAT,
        errors="coerce",
    )
    unparsed = int(dates.isna().sum())
    if unparsed:
        logger.debug(f"Excluding {unparsed} expense(s) with unparseable dates from {start}..{end}")

    # NaT compares False on both sides, so malformed dates fall out here
    in_window = (dates >= pd.Timestamp(start)) & (dates < pd.Timestamp(end))
    return [r for r, keep in zip(records, in_window) if keep]


def _prep(records: List[ExpenseRecord]) -> pd.DataFrame:
    df = pd.DataFrame({
        "Category": pd.Series([r.category for r in records], dtype=object),
        "Amount": pd.Series([r.amount for r in records], dtype=object),
    })
    # Missing or non-numeric amounts contribute nothing
    df["Amount"] = pd.to_numeric(df["Amount"], errors="coerce").fillna(0.0).astype(float)
    # Labels are kept as stored; only blank ones are grouped
    blank = df["Category"].fillna("").astype(str).str.strip() == ""
    df["Category"] = df["Category"].where(~blank, UNCATEGORIZED).astype(str)
    return df


def totals_by_category(records: Iterable[ExpenseRecord]) -> Dict[str, float]:
    """Sum of amounts per category, in order of first appearance."""
    records = list(records)
    if not records:
        return {}
    by_cat = _prep(records).groupby("Category", sort=False)["Amount"].sum()
    return {str(cat): float(total) for cat, total in by_cat.items()}


def overall_total(records: Iterable[ExpenseRecord]) -> float:
    records = list(records)
    if not records:
        return 0.0
    return float(_prep(records)["Amount"].sum())


@dataclass(frozen=True)
class ExpenseSummary:
    selector: TimeFilter
    expenses: List[ExpenseRecord] = field(default_factory=list)
    totals_by_category: Dict[str, float] = field(default_factory=dict)
    overall_total: float = 0.0

    @property
    def label(self) -> str:
        return self.selector.label


def summarize(
    records: Iterable[ExpenseRecord],
    selector: TimeFilter | str = TimeFilter.ALL,
    reference: date | datetime | None = None,
) -> ExpenseSummary:
    selector = TimeFilter(selector)
    filtered = filter_expenses(records, resolve_window(selector, reference))
    return ExpenseSummary(
        selector=selector,
        expenses=filtered,
        totals_by_category=totals_by_category(filtered),
        overall_total=overall_total(filtered),
    )
