import math

from models.transaction import Transaction, TransactionDraft
from database.transaction_dao import TransactionDAO
from services.category_service import CategoryService
from services.report_service import sort_transactions
from utils.constants import TRANSACTION_TYPES
from utils.date_helpers import format_date, parse_date


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO, category_service: CategoryService):
        self._dao = tx_dao
        self._categories = category_service

    def get_sorted(self) -> list[Transaction]:
        return sort_transactions(self._dao.get_all())

    def get(self, tx_id: str) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def create(
        self,
        type_: str,
        amount: float,
        category_id: str,
        date: str,
        note: str = "",
    ) -> Transaction:
        date = self._validate(type_, amount, category_id, date)
        return self._dao.create(TransactionDraft(
            type=type_,
            amount=float(amount),
            category_id=category_id,
            date=date,
            note=note.strip(),
        ))

    def update(self, tx_id: str, **fields) -> Transaction | None:
        current = self._dao.get_by_id(tx_id)
        if current is None:
            return None
        merged = {
            "type_": fields.get("type", current.type),
            "amount": fields.get("amount", current.amount),
            "category_id": fields.get("category_id", current.category_id),
            "date": fields.get("date", current.date),
        }
        date = self._validate(**merged)
        if "date" in fields:
            fields["date"] = date
        if "amount" in fields:
            fields["amount"] = float(fields["amount"])
        return self._dao.update(tx_id, **fields)

    def delete(self, tx_id: str):
        self._dao.delete(tx_id)

    def clear(self):
        self._dao.clear()

    def _validate(self, type_: str, amount: float, category_id: str, date: str) -> str:
        """Raise ValueError on bad input; return the date normalized to YYYY-MM-DD."""
        if type_ not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid type: {type_}")
        if amount is None or not math.isfinite(float(amount)) or float(amount) <= 0:
            raise ValueError("Amount must be a positive number.")
        parsed = parse_date(date)
        if not parsed:
            raise ValueError("Invalid date format. Use YYYY-MM-DD.")
        category = self._categories.get_by_id(category_id)
        if category is None:
            raise ValueError(f"Unknown category: {category_id}")
        if category.type != type_:
            raise ValueError(f"Category '{category.name}' is not a {type_} category.")
        return format_date(parsed)
