import logging
from typing import List, Optional

from sqlalchemy import create_engine, Column, Integer, String, Float, Text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from config import DATABASE_URL, SQL_ECHO
from models import ExpenseRecord

logger = logging.getLogger(__name__)

engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class PersistenceError(Exception):
    """A store operation failed; the session has been rolled back."""


# --- Models ---

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Float, nullable=False)
    category = Column(String, nullable=False)
    note = Column(Text, nullable=True)
    # Kept as YYYY-MM-DD text; rows with a malformed value are skipped by the window filter
    date = Column(String, nullable=False, index=True)

    def to_record(self) -> ExpenseRecord:
        return ExpenseRecord(
            id=self.id,
            amount=self.amount,
            category=self.category,
            note=self.note,
            date=self.date,
        )


# --- Repository ---

class ExpenseRepository:
    """Single-table store behind the expense screen."""

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str, exc: SQLAlchemyError):
        self.db.rollback()
        logger.exception(f"Database error while trying to {action}")
        raise PersistenceError(f"Could not {action}: {exc}") from exc

    def create_table_if_missing(self):
        try:
            Base.metadata.create_all(bind=self.db.get_bind(), tables=[Expense.__table__])
        except SQLAlchemyError as e:
            self._fail("create the expenses table", e)

    def insert(self, amount: float, category: str, note: Optional[str], date: str) -> int:
        expense = Expense(amount=amount, category=category, note=note, date=date)
        try:
            self.db.add(expense)
            self.db.commit()
            self.db.refresh(expense)
        except SQLAlchemyError as e:
            self._fail("save the expense", e)
        logger.info(f"Added expense #{expense.id}: {amount:.2f} in '{category}' on {date}")
        return expense.id

    def select_all(self) -> List[ExpenseRecord]:
        try:
            rows = (
                self.db.query(Expense)
                .order_by(Expense.date.desc(), Expense.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self._fail("load expenses", e)
        return [row.to_record() for row in rows]

    def update(self, expense_id: int, amount: float, category: str, note: Optional[str], date: str):
        try:
            count = (
                self.db.query(Expense)
                .filter(Expense.id == expense_id)
                .update({"amount": amount, "category": category, "note": note, "date": date})
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail(f"update expense #{expense_id}", e)
        if count:
            logger.info(f"Updated expense #{expense_id}")
        else:
            logger.debug(f"No expense #{expense_id} to update")

    def delete(self, expense_id: int):
        try:
            count = self.db.query(Expense).filter(Expense.id == expense_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail(f"delete expense #{expense_id}", e)
        if count:
            logger.info(f"Deleted expense #{expense_id}")
        else:
            logger.debug(f"No expense #{expense_id} to delete")
