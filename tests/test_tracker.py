from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from aggregation import TimeFilter
from database import ExpenseRepository, PersistenceError
from models import ExpenseRecord
from tracker import ExpenseTracker


def test_add_reloads_cached_list(tracker):
    expense_id = tracker.add_expense("12.5", " Food ", "", "2024-01-16")
    assert [r.id for r in tracker.expenses] == [expense_id]
    record = tracker.expenses[0]
    assert (record.amount, record.category, record.note, record.date) == (12.5, "Food", None, "2024-01-16")


def test_add_defaults_date_to_today(tracker):
    tracker.add_expense("3", "Transit")
    assert tracker.expenses[0].date == date.today().isoformat()


@pytest.mark.parametrize("amount, category", [("-5", "Food"), ("5", "   "), ("abc", "Food"), ("0", "Food")])
def test_invalid_add_leaves_store_unchanged(tracker, repository, amount, category):
    tracker.add_expense("1", "Food", "", "2024-01-16")
    before = repository.select_all()
    assert tracker.add_expense(amount, category) is None
    assert repository.select_all() == before
    assert tracker.expenses == before


def test_rejected_add_makes_no_store_call():
    repo = MagicMock(spec=ExpenseRepository)
    tracker = ExpenseTracker(repo)
    assert tracker.add_expense("-5", "Food") is None
    repo.insert.assert_not_called()
    repo.select_all.assert_not_called()


def test_edit_replaces_fields(tracker):
    tracker.add_expense("10", "Food", "lunch", "2024-01-16")
    form = tracker.start_edit(tracker.expenses[0])
    assert form.amount == "10.0"
    assert tracker.save_edit("11", "Books", "", "2024-01-02") is True
    assert tracker.editing is None
    record = tracker.expenses[0]
    assert (record.amount, record.category, record.note, record.date) == (11.0, "Books", None, "2024-01-02")


@pytest.mark.parametrize("amount, category, when", [
    ("-1", "Food", "2024-01-16"),
    ("abc", "Food", "2024-01-16"),
    ("5", "  ", "2024-01-16"),
    ("5", "Food", ""),
    ("5", "Food", "2024-13-01"),
])
def test_invalid_edit_leaves_stored_fields_unchanged(tracker, repository, amount, category, when):
    tracker.add_expense("10", "Food", "lunch", "2024-01-16")
    before = repository.select_all()
    tracker.start_edit(tracker.expenses[0])
    assert tracker.save_edit(amount, category, "x", when) is False
    assert repository.select_all() == before
    # Panel stays open with the rejected values for correction
    assert tracker.editing is not None
    assert tracker.editing.amount == amount


def test_save_without_edit_in_progress(tracker):
    assert tracker.save_edit("5", "Food", "", "2024-01-16") is False


def test_cancel_edit(tracker):
    tracker.add_expense("10", "Food", "", "2024-01-16")
    tracker.start_edit(tracker.expenses[0])
    tracker.cancel_edit()
    assert tracker.editing is None


def test_delete(tracker):
    keep = tracker.add_expense("10", "Food", "", "2024-01-16")
    gone = tracker.add_expense("5", "Food", "", "2024-01-16")
    tracker.start_edit(tracker.expenses[0])
    tracker.delete_expense(gone)
    assert [r.id for r in tracker.expenses] == [keep]
    assert tracker.editing is None


def test_delete_nonexistent_id_is_noop(tracker):
    tracker.add_expense("10", "Food", "", "2024-01-16")
    before = list(tracker.expenses)
    tracker.delete_expense(12345)
    assert tracker.expenses == before


def test_summary_uses_filter_and_clock(tracker):
    # clock is Wednesday 2024-01-17
    tracker.add_expense("10", "Food", "", "2024-01-05")
    tracker.add_expense("20", "Food", "", "2024-01-16")
    tracker.add_expense("5", "Transit", "", "2024-02-01")

    assert tracker.summary().overall_total == 35

    tracker.set_filter("MONTH")
    summary = tracker.summary()
    assert summary.totals_by_category == {"Food": 30}
    assert summary.label == "This Month"

    tracker.set_filter(TimeFilter.WEEK)
    assert [r.date for r in tracker.summary().expenses] == ["2024-01-16"]

    tracker.set_filter(TimeFilter.ALL)
    assert len(tracker.summary().expenses) == 3


def test_chart_series_for_empty_window(tracker):
    tracker.add_expense("5", "Transit", "", "2024-02-01")
    tracker.set_filter(TimeFilter.WEEK)
    (segment,) = tracker.chart_series()
    assert segment.name == "No Data"
    assert segment.value == 1


def test_store_failure_keeps_previous_list():
    cached = [ExpenseRecord(1, 10.0, "Food", None, "2024-01-16")]
    repo = MagicMock(spec=ExpenseRepository)
    repo.select_all.return_value = cached
    tracker = ExpenseTracker(repo, clock=lambda: datetime(2024, 1, 17))
    tracker.setup()

    repo.insert.side_effect = PersistenceError("database is locked")
    with pytest.raises(PersistenceError):
        tracker.add_expense("5", "Food")
    repo.delete.side_effect = PersistenceError("database is locked")
    with pytest.raises(PersistenceError):
        tracker.delete_expense(1)

    assert tracker.expenses == cached
    assert repo.select_all.call_count == 1


def test_rejected_edit_with_missing_amount_shows_blank(tracker):
    tracker.add_expense("10", "Food", "lunch", "2024-01-16")
    tracker.start_edit(tracker.expenses[0])
    assert tracker.save_edit(None, "Food", "", "2024-01-16") is False
    assert tracker.editing.amount == ""
