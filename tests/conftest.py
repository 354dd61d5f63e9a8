from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import ExpenseRepository
from models import ExpenseRecord
from tracker import ExpenseTracker


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def repository(session):
    repo = ExpenseRepository(session)
    repo.create_table_if_missing()
    return repo


@pytest.fixture
def tracker(repository):
    t = ExpenseTracker(repository, clock=lambda: datetime(2024, 1, 17, 15, 30))
    t.setup()
    return t


@pytest.fixture
def january_records():
    return [
        ExpenseRecord(1, 10, "Food", None, "2024-01-05"),
        ExpenseRecord(2, 20, "Food", "dinner", "2024-01-20"),
        ExpenseRecord(3, 5, "Transit", None, "2024-02-01"),
    ]
