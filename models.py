"""Record and form types shared by the store, the aggregation code and the UI."""
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}")


def today_iso() -> str:
    """Host-local calendar day as YYYY-MM-DD."""
    return date.today().isoformat()


@dataclass(frozen=True)
class ExpenseRecord:
    id: int
    amount: float
    category: str
    note: Optional[str]
    date: str  # YYYY-MM-DD


class ExpenseDraft(BaseModel):
    """
    Validated values for an add or edit.

    Anything that fails here never reaches the store.
    """
    amount: float = Field(gt=0, allow_inf_nan=False)
    category: str
    note: Optional[str] = None
    date: str = Field(default_factory=today_iso)

    @field_validator("amount", mode="before")
    @classmethod
    def _strip_amount(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("category")
    @classmethod
    def _category_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("category must not be blank")
        return value

    @field_validator("note")
    @classmethod
    def _blank_note_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("date")
    @classmethod
    def _calendar_date(cls, value: str) -> str:
        value = value.strip()
        if not _DATE_SHAPE.fullmatch(value):
            raise ValueError("date must look like YYYY-MM-DD")
        datetime.strptime(value, DATE_FORMAT)  # raises ValueError for e.g. 2024-02-30
        return value


def parse_draft(amount, category, note=None, date: Optional[str] = None) -> Optional[ExpenseDraft]:
    """Build a draft from raw form values, or return None if any field is invalid."""
    fields = {"amount": amount, "category": category, "note": note}
    if date is not None:
        fields["date"] = date
    try:
        return ExpenseDraft.model_validate(fields)
    except ValidationError as e:
        logger.debug(f"Rejected expense input {fields}: {e.error_count()} error(s)")
        return None


@dataclass
class EditForm:
    """Text values of the edit panel, prefilled from the record being edited."""
    expense_id: int
    amount: str
    category: str
    note: str
    date: str

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "EditForm":
        return cls(
            expense_id=record.id,
            amount=str(record.amount),
            category=record.category or "",
            note=record.note or "",
            date=record.date or today_iso(),
        )
