"""
State owner for the expense screen.

The cached expense list is a read replica of the store: it is only ever
replaced wholesale by ``reload()`` after a mutation succeeds, never patched.
If a store call raises, the previous list stays in place.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from aggregation import ExpenseSummary, TimeFilter, summarize
from dashboard import ChartSegment, chart_series
from database import ExpenseRepository
from models import EditForm, ExpenseRecord, parse_draft

logger = logging.getLogger(__name__)


class ExpenseTracker:
    def __init__(self, repository: ExpenseRepository, clock: Callable[[], datetime] = datetime.now):
        self.repository = repository
        self.clock = clock
        self.filter = TimeFilter.ALL
        self.expenses: List[ExpenseRecord] = []
        self.editing: Optional[EditForm] = None

    def setup(self):
        self.repository.create_table_if_missing()
        self.reload()

    def reload(self):
        self.expenses = self.repository.select_all()

    def set_filter(self, selector: TimeFilter | str):
        self.filter = TimeFilter(selector)

    # --- Mutations ---

    def add_expense(self, amount, category, note="", date: Optional[str] = None) -> Optional[int]:
        """Insert a new expense dated today unless ``date`` is given. Returns None if rejected."""
        draft = parse_draft(amount, category, note, date)
        if draft is None:
            return None
        expense_id = self.repository.insert(draft.amount, draft.category, draft.note, draft.date)
        self.reload()
        return expense_id

    def start_edit(self, record: ExpenseRecord) -> EditForm:
        self.editing = EditForm.from_record(record)
        return self.editing

    def cancel_edit(self):
        self.editing = None

    def save_edit(self, amount, category, note, date) -> bool:
        if self.editing is None:
            return False
        draft = parse_draft(amount, category, note, date)
        if draft is None or not (date or "").strip():
            # Keep the panel open with what the user typed
            self.editing.amount = "" if amount is None else str(amount)
            self.editing.category = category or ""
            self.editing.note = note or ""
            self.editing.date = date or ""
            return False
        self.repository.update(self.editing.expense_id, draft.amount, draft.category, draft.note, draft.date)
        self.cancel_edit()
        self.reload()
        return True

    def delete_expense(self, expense_id: int):
        self.repository.delete(expense_id)
        if self.editing is not None and self.editing.expense_id == expense_id:
            self.cancel_edit()
        self.reload()

    # --- Derived views ---

    def summary(self) -> ExpenseSummary:
        return summarize(self.expenses, self.filter, self.clock())

    def chart_series(self) -> List[ChartSegment]:
        return chart_series(self.summary().totals_by_category)
