import pytest

from conftest import make_tx
from services.transaction_service import TransactionService


@pytest.fixture
def tx_svc(tx_dao, categories):
    return TransactionService(tx_dao, categories)


def test_create_normalizes_date_and_note(tx_svc):
    tx = tx_svc.create("expense", "12.5", "food", "2024/3/1", "  lunch ")

    assert tx.date == "2024-03-01"
    assert tx.amount == 12.5
    assert tx.note == "lunch"


@pytest.mark.parametrize(
    "type_, amount, category_id, date",
    [
        ("transfer", 1, "food", "2024-03-01"),
        ("expense", 0, "food", "2024-03-01"),
        ("expense", -5, "food", "2024-03-01"),
        ("expense", float("nan"), "food", "2024-03-01"),
        ("expense", float("inf"), "food", "2024-03-01"),
        ("income", float("-inf"), "salary", "2024-03-01"),
        ("expense", 1, "food", "March 1st"),
        ("expense", 1, "nope", "2024-03-01"),
        ("expense", 1, "salary", "2024-03-01"),
    ],
)
def test_create_rejects_invalid_input(tx_svc, tx_dao, type_, amount, category_id, date):
    with pytest.raises(ValueError):
        tx_svc.create(type_, amount, category_id, date)
    assert tx_dao.get_all() == []


def test_update_validates_merged_record(tx_svc):
    tx = tx_svc.create("expense", 10, "food", "2024-03-01")

    with pytest.raises(ValueError):
        tx_svc.update(tx.id, type="income")

    updated = tx_svc.update(tx.id, type="income", category_id="salary", amount="20")
    assert (updated.type, updated.category_id, updated.amount) == ("income", "salary", 20.0)
    assert updated.created_at == tx.created_at

    with pytest.raises(ValueError):
        tx_svc.update(tx.id, amount=float("nan"))
    assert tx_svc.get(tx.id).amount == 20.0


def test_update_missing_is_noop(tx_svc):
    assert tx_svc.update("missing", amount=5) is None


def test_get_sorted_and_delete(tx_svc, tx_dao):
    tx_dao.replace_all([
        make_tx(id="old", date="2024-01-01"),
        make_tx(id="new", date="2024-02-01"),
    ])

    assert [t.id for t in tx_svc.get_sorted()] == ["new", "old"]

    tx_svc.delete("new")
    assert tx_svc.get("new") is None
    assert tx_svc.get("old") is not None

    tx_svc.clear()
    assert tx_svc.get_sorted() == []
