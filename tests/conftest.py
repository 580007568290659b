import itertools
from datetime import date, datetime, timezone

import pytest

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from services.category_service import CategoryService

FIXED_NOW = datetime(2024, 3, 10, 8, 30, tzinfo=timezone.utc)
TODAY = date(2024, 3, 10)


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def tx_dao(db, id_factory, clock):
    return TransactionDAO(db, id_factory=id_factory, clock=clock)


@pytest.fixture
def categories():
    return CategoryService()


def make_tx(
    id="t1",
    type="expense",
    amount=10.0,
    category_id="food",
    note="",
    date="2024-03-05",
    created_at="2024-03-05T12:00:00.000Z",
) -> Transaction:
    return Transaction(
        id=id,
        type=type,
        amount=amount,
        category_id=category_id,
        note=note,
        date=date,
        created_at=created_at,
    )
