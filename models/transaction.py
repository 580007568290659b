import math
from dataclasses import dataclass, asdict

# Persisted / exported key for each field. Files written by earlier versions
# of the app use these camelCase names.
_FIELD_KEYS = {
    "id": "id",
    "type": "type",
    "amount": "amount",
    "category_id": "categoryId",
    "note": "note",
    "date": "date",
    "created_at": "createdAt",
}

EDITABLE_FIELDS = ("type", "amount", "category_id", "note", "date")


@dataclass
class Transaction:
    id: str
    type: str               # 'income' | 'expense'
    amount: float
    category_id: str
    note: str
    date: str               # 'YYYY-MM-DD'
    created_at: str         # ISO timestamp, e.g. '2024-01-15T12:00:00.000Z'

    def to_dict(self) -> dict:
        values = asdict(self)
        return {key: values[attr] for attr, key in _FIELD_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Build from a persisted/exported dict.

        Missing keys raise KeyError; wrongly typed values raise TypeError and a
        non-finite amount raises ValueError.
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        values = {attr: data[key] for attr, key in _FIELD_KEYS.items()}
        amount = values["amount"]
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise TypeError(f"amount must be a number, got {amount!r}")
        if not math.isfinite(amount):
            raise ValueError(f"amount must be finite, got {amount!r}")
        for attr, value in values.items():
            if attr != "amount" and not isinstance(value, str):
                raise TypeError(f"{_FIELD_KEYS[attr]} must be a string, got {value!r}")
        values["amount"] = float(amount)
        return cls(**values)


@dataclass
class TransactionDraft:
    """Caller-supplied fields of a new transaction (no id / created_at yet)."""
    type: str
    amount: float
    category_id: str
    date: str
    note: str = ""
