import json
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from database.db_manager import DatabaseManager
from models.transaction import Transaction, TransactionDraft, EDITABLE_FIELDS
from utils.constants import STORAGE_KEY
from utils.date_helpers import format_timestamp, now_utc
from utils.logger import get_logger

logger = get_logger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


class TransactionDAO:
    """Owns the canonical transaction list.

    The list is read once from the key-value store at construction and written
    back in full after every mutation. Order of the in-memory list is insertion
    order (newest first for create); callers that display records sort them.
    """

    def __init__(
        self,
        db: DatabaseManager,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._db = db
        self._new_id = id_factory or new_id
        self._clock = clock or now_utc
        self._transactions: list[Transaction] = self._load()

    # ── Persistence ───────────────────────────────────────────────────────────

    def _load(self) -> list[Transaction]:
        """Absent or corrupt state yields an empty list, never an exception."""
        raw = self._db.get_setting(STORAGE_KEY)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("stored value is not a list")
            transactions = [Transaction.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Stored transactions are unreadable (%s); starting empty", e)
            return []
        logger.debug("Loaded %d transactions", len(transactions))
        return transactions

    def _save(self):
        payload = json.dumps(
            [t.to_dict() for t in self._transactions], ensure_ascii=False
        )
        self._db.set_setting(STORAGE_KEY, payload)

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get_all(self) -> list[Transaction]:
        return list(self._transactions)

    def get_by_id(self, tx_id: str) -> Optional[Transaction]:
        return next((t for t in self._transactions if t.id == tx_id), None)

    def ids(self) -> set[str]:
        return {t.id for t in self._transactions}

    # ── Mutations ─────────────────────────────────────────────────────────────

    def create(self, draft: TransactionDraft) -> Transaction:
        tx = Transaction(
            id=self._new_id(),
            type=draft.type,
            amount=draft.amount,
            category_id=draft.category_id,
            note=draft.note,
            date=draft.date,
            created_at=format_timestamp(self._clock()),
        )
        self._transactions.insert(0, tx)
        self._save()
        logger.info("Created transaction %s (%s %.2f on %s)", tx.id, tx.type, tx.amount, tx.date)
        return tx

    def update(self, tx_id: str, **fields) -> Optional[Transaction]:
        """Merge fields into the record; id and created_at never change.
        Returns the updated record, or None when tx_id is unknown."""
        bad = set(fields) - set(EDITABLE_FIELDS)
        if bad:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(bad))}")
        for i, tx in enumerate(self._transactions):
            if tx.id == tx_id:
                updated = replace(tx, **fields)
                self._transactions[i] = updated
                self._save()
                logger.info("Updated transaction %s", tx_id)
                return updated
        return None

    def delete(self, tx_id: str):
        remaining = [t for t in self._transactions if t.id != tx_id]
        if len(remaining) == len(self._transactions):
            return
        self._transactions = remaining
        self._save()
        logger.info("Deleted transaction %s", tx_id)

    def replace_all(self, transactions: Iterable[Transaction]):
        self._transactions = list(transactions)
        self._save()
        logger.info("Replaced ledger with %d transactions", len(self._transactions))

    def merge(self, transactions: Iterable[Transaction]) -> int:
        """Append records whose id is not yet present. Returns the number added."""
        seen = self.ids()
        added = []
        for tx in transactions:
            if tx.id in seen:
                continue
            seen.add(tx.id)
            added.append(tx)
        if added:
            self._transactions.extend(added)
            self._save()
        logger.info("Merged %d new transactions", len(added))
        return len(added)

    def clear(self):
        self.replace_all([])
