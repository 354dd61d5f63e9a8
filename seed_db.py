import logging
from datetime import date, timedelta

from config import configure_logging
from database import SessionLocal, ExpenseRepository

logger = logging.getLogger(__name__)

# (days ago, amount, category, note)
SAMPLE_EXPENSES = [
    (0, 12.50, "Food", "Lunch"),
    (1, 3.20, "Transit", "Bus pass top-up"),
    (3, 45.00, "Books", None),
    (9, 18.75, "Food", "Groceries"),
    (16, 60.00, "Utilities", "Phone bill"),
    (40, 25.00, "Entertainment", "Concert ticket"),
]


def seed_expenses(repository: ExpenseRepository, today: date | None = None) -> int:
    repository.create_table_if_missing()

    # Check if expenses exist
    if repository.select_all():
        logger.info("Expenses already exist. Skipping seed.")
        return 0

    today = today or date.today()
    for days_ago, amount, category, note in SAMPLE_EXPENSES:
        day = today - timedelta(days=days_ago)
        repository.insert(amount, category, note, day.isoformat())
    logger.info(f"Database initialized with {len(SAMPLE_EXPENSES)} sample expenses.")
    return len(SAMPLE_EXPENSES)


if __name__ == "__main__":
    configure_logging()
    db = SessionLocal()
    try:
        seed_expenses(ExpenseRepository(db))
    finally:
        db.close()
