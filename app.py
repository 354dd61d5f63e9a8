import streamlit as st
from pathlib import Path
import logging
import sys

# Add current directory to path
sys.path.append(str(Path(__file__).parent))

from config import configure_logging
from database import SessionLocal, ExpenseRepository, PersistenceError
from aggregation import TimeFilter
from dashboard import category_pie, expense_row_html, format_currency
from tracker import ExpenseTracker

# --- Configuration ---
st.set_page_config(page_title="Expense Tracker", layout="centered", page_icon="💸")
configure_logging()
logger = logging.getLogger("app")

ADD_FIELDS = ("add_amount", "add_category", "add_note")
EDIT_FIELDS = ("edit_amount", "edit_category", "edit_note", "edit_date")


def get_tracker() -> ExpenseTracker:
    if "tracker" not in st.session_state:
        tracker = ExpenseTracker(ExpenseRepository(SessionLocal()))
        tracker.setup()
        st.session_state.tracker = tracker
    return st.session_state.tracker


def report_failure(action: str, exc: PersistenceError):
    logger.error(f"{action} failed: {exc}")
    st.session_state["flash_error"] = f"{action} failed. Your previous data is still shown. ({exc})"


# --- Callbacks (run before the next rerun, so widget values can be reset here) ---

def on_add():
    tracker = get_tracker()
    try:
        added = tracker.add_expense(
            st.session_state["add_amount"],
            st.session_state["add_category"],
            st.session_state["add_note"],
        )
    except PersistenceError as e:
        report_failure("Adding the expense", e)
        return
    if added is not None:
        for key in ADD_FIELDS:
            st.session_state[key] = ""


def on_start_edit(record):
    form = get_tracker().start_edit(record)
    st.session_state["edit_amount"] = form.amount
    st.session_state["edit_category"] = form.category
    st.session_state["edit_note"] = form.note
    st.session_state["edit_date"] = form.date


def on_cancel_edit():
    get_tracker().cancel_edit()
    for key in EDIT_FIELDS:
        st.session_state[key] = ""


def on_save_edit():
    tracker = get_tracker()
    try:
        saved = tracker.save_edit(*(st.session_state[key] for key in EDIT_FIELDS))
    except PersistenceError as e:
        report_failure("Saving the expense", e)
        return
    if saved:
        for key in EDIT_FIELDS:
            st.session_state[key] = ""


def on_delete(expense_id: int):
    try:
        get_tracker().delete_expense(expense_id)
    except PersistenceError as e:
        report_failure("Deleting the expense", e)


def on_filter_change():
    get_tracker().set_filter(st.session_state["filter"])


# --- Styling ---
st.markdown("""
<style>
    .stApp { background: #111827 !important; color: #f9fafb; }
    h1, h2, h3, label, .stMarkdown p { color: #f9fafb !important; }
    .summary-card {
        background: #1f2937;
        border-radius: 8px;
        padding: 12px;
        margin-bottom: 8px;
    }
    .summary-title { color: #d1d5db; font-size: 14px; margin-bottom: 4px; }
    .summary-amount { color: #fbbf24; font-size: 18px; font-weight: 700; }
    .expense-amount { color: #fbbf24; font-size: 18px; font-weight: 700; }
    .expense-category { color: #e5e7eb; font-size: 14px; }
    .expense-note { color: #9ca3af; font-size: 12px; }
    .expense-date { color: #6b7280; font-size: 11px; margin-top: 2px; }
    .empty { color: #9ca3af; text-align: center; margin-top: 12px; }
</style>
""", unsafe_allow_html=True)

# --- Main App ---
try:
    tracker = get_tracker()
except PersistenceError as e:
    st.error(f"Could not open the expense database: {e}")
    st.stop()

st.title("Advanced Student Expense Tracker")

flash = st.session_state.pop("flash_error", None)
if flash:
    st.error(flash)

# Filter
st.radio(
    "Time window",
    options=list(TimeFilter),
    format_func=lambda f: f.label,
    index=list(TimeFilter).index(tracker.filter),
    horizontal=True,
    key="filter",
    on_change=on_filter_change,
    label_visibility="collapsed",
)

summary = tracker.summary()

# Totals
st.markdown(f"""
<div class="summary-card">
    <div class="summary-title">Total Spending ({summary.label})</div>
    <div class="summary-amount">{format_currency(summary.overall_total)}</div>
</div>
""", unsafe_allow_html=True)

# Pie Chart
st.plotly_chart(category_pie(tracker.chart_series()), width="stretch")

# Add Expense Form
with st.container(border=True):
    st.subheader("Add New Expense")
    st.text_input("Amount", key="add_amount", placeholder="Amount")
    st.text_input("Category", key="add_category", placeholder="Category")
    st.text_input("Note", key="add_note", placeholder="Note")
    st.button("Add Expense", on_click=on_add, type="primary", width="stretch")

# Edit Panel
if tracker.editing is not None:
    with st.container(border=True):
        st.subheader("Edit Expense")
        st.text_input("Amount", key="edit_amount", placeholder="Amount")
        st.text_input("Category", key="edit_category", placeholder="Category")
        st.text_input("Note", key="edit_note", placeholder="Note")
        st.text_input("Date", key="edit_date", placeholder="Date (YYYY-MM-DD)")
        col_save, col_cancel = st.columns(2)
        col_save.button("Save", on_click=on_save_edit, type="primary", width="stretch")
        col_cancel.button("Cancel", on_click=on_cancel_edit, width="stretch")

# Expense List
if not summary.expenses:
    st.markdown('<p class="empty">No expenses yet.</p>', unsafe_allow_html=True)

for expense in summary.expenses:
    with st.container(border=True):
        col_info, col_edit, col_delete = st.columns([6, 1, 1])
        col_info.markdown(expense_row_html(expense), unsafe_allow_html=True)
        col_edit.button("Edit", key=f"edit_{expense.id}", on_click=on_start_edit, args=(expense,))
        col_delete.button("✕", key=f"delete_{expense.id}", on_click=on_delete, args=(expense.id,))
