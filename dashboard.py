# dashboard.py: category totals -> pie chart series + plotly figure, expense row markup

import html
from dataclasses import dataclass
from typing import Dict, List

import pandas as pd
import plotly.graph_objects as go

from models import ExpenseRecord

PALETTE = ["#f87171", "#60a5fa", "#fbbf24", "#34d399", "#a78bfa", "#f472b6"]
LEGEND_FONT_COLOR = "#f9fafb"
LEGEND_FONT_SIZE = 12

NO_DATA_LABEL = "No Data"
NO_DATA_COLOR = "#374151"
NO_DATA_LEGEND_COLOR = "#9ca3af"

CARD_BACKGROUND = "#1f2937"


@dataclass(frozen=True)
class ChartSegment:
    name: str
    value: float
    color: str
    legend_font_color: str = LEGEND_FONT_COLOR
    legend_font_size: int = LEGEND_FONT_SIZE


def color_for(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


def chart_series(totals: Dict[str, float]) -> List[ChartSegment]:
    """
    One segment per category, colored by position.

    An empty mapping yields a single "No Data" slice so the chart always has
    something to draw.
    """
    if not totals:
        return [ChartSegment(NO_DATA_LABEL, 1, NO_DATA_COLOR, legend_font_color=NO_DATA_LEGEND_COLOR)]
    return [
        ChartSegment(name, value, color_for(idx))
        for idx, (name, value) in enumerate(totals.items())
    ]


def category_pie(series: List[ChartSegment]) -> go.Figure:
    """
    Donut chart of spending by category, drawn in series order.
    """
    is_placeholder = len(series) == 1 and series[0].name == NO_DATA_LABEL
    fig = go.Figure(go.Pie(
        labels=[s.name for s in series],
        values=[s.value for s in series],
        marker=dict(colors=[s.color for s in series]),
        hole=0.4,
        sort=False,
        direction="clockwise",
        textinfo="none" if is_placeholder else "value",
        texttemplate=None if is_placeholder else "$%{value:,.2f}",
        hoverinfo="skip" if is_placeholder else "label+value+percent",
    ))
    legend_font = dict(color=series[0].legend_font_color, size=series[0].legend_font_size)
    fig.update_layout(
        height=260,
        margin=dict(t=10, b=10, l=10, r=10),
        paper_bgcolor=CARD_BACKGROUND,
        plot_bgcolor=CARD_BACKGROUND,
        legend=dict(font=legend_font),
    )
    return fig


def format_currency(value) -> str:
    # Legacy rows can hold text in the amount column; show those as zero like the totals do
    amount = pd.to_numeric(pd.Series([value], dtype=object), errors="coerce").fillna(0.0).iloc[0]
    return f"${float(amount):,.2f}"


def expense_row_html(expense: ExpenseRecord) -> str:
    """Markup for one row of the expense list. Every stored value is escaped."""
    note_html = f'<div class="expense-note">{html.escape(str(expense.note))}</div>' if expense.note else ""
    return f"""
    <div class="expense-amount">{format_currency(expense.amount)}</div>
    <div class="expense-category">{html.escape(str(expense.category or ""))}</div>
    {note_html}
    <div class="expense-date">{html.escape(str(expense.date or ""))}</div>
    """
