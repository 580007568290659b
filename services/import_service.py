"""Parse exported JSON / CSV back into transactions.

File-level problems (unknown extension, undecodable or non-list JSON, a CSV
without data rows) raise ImportFailed subclasses and abort the import.
Field-level problems never raise: a bad amount becomes 0, a bad timestamp
becomes "now", a short CSV row is skipped.
"""
import csv
import json
import math
import os
from datetime import date, datetime
from typing import Callable, Optional

from database.transaction_dao import new_id
from models.transaction import Transaction
from services.category_service import CategoryService
from utils.constants import (
    CSV_BOM,
    CSV_WEEKDAY_HEADER,
    IMPORT_EXTENSIONS,
    TYPE_LABELS,
)
from utils.date_helpers import (
    format_date,
    format_timestamp,
    now_utc,
    parse_date,
    parse_timestamp,
    to_local,
)
from utils.logger import get_logger

logger = get_logger(__name__)


class ImportFailed(ValueError):
    """An import that cannot proceed. The message is shown to the user."""


class InvalidFormatError(ImportFailed):
    pass


class EmptyDataError(ImportFailed):
    pass


# Column positions per CSV layout. The legacy export had no weekday column.
_CURRENT_LAYOUT = {"date": 0, "type": 2, "category": 3, "amount": 4, "note": 5, "created_at": 6}
_LEGACY_LAYOUT = {"date": 0, "type": 1, "category": 2, "amount": 3, "note": 4, "created_at": 5}

# Rows shorter than this are skipped; missing trailing cells read as empty.
MIN_CSV_COLUMNS = 4


def detect_format(filename: str) -> str:
    """'json' or 'csv' from the file extension; InvalidFormatError otherwise."""
    ext = os.path.splitext(filename)[1].lower()
    if ext not in IMPORT_EXTENSIONS:
        raise InvalidFormatError(
            f"Unsupported file type '{ext or filename}'. Use a .json or .csv export."
        )
    return ext[1:]


class ImportService:
    def __init__(
        self,
        category_service: CategoryService,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._categories = category_service
        self._new_id = id_factory or new_id
        self._clock = clock or now_utc

    def parse(self, text: str, fmt: str) -> list[Transaction]:
        if fmt == "json":
            return self.parse_json(text)
        if fmt == "csv":
            return self.parse_csv(text)
        raise InvalidFormatError(f"Unsupported import format: {fmt}")

    # ── JSON ──────────────────────────────────────────────────────────────────

    def parse_json(self, text: str) -> list[Transaction]:
        try:
            data = json.loads(text.lstrip(CSV_BOM))
        except ValueError as e:
            raise InvalidFormatError(f"File is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise InvalidFormatError("Incorrect file format: expected a list of transactions.")

        result = []
        for item in data:
            if not isinstance(item, dict):
                logger.debug("Skipping non-object JSON entry: %r", item)
                continue
            result.append(self._from_json_record(item))
        logger.info("Parsed %d transactions from JSON", len(result))
        return result

    def _from_json_record(self, item: dict) -> Transaction:
        """Keep the record as exported; only fill what is missing."""
        tx_id = item.get("id")
        created_at = item.get("createdAt")
        return Transaction(
            id=str(tx_id) if tx_id else self._new_id(),
            type=str(item.get("type") or "expense"),
            amount=_to_amount(item.get("amount")),
            category_id=str(item.get("categoryId") or ""),
            note=str(item.get("note") or ""),
            date=str(item.get("date") or ""),
            created_at=str(created_at) if created_at else format_timestamp(self._clock()),
        )

    # ── CSV ───────────────────────────────────────────────────────────────────

    def parse_csv(self, text: str) -> list[Transaction]:
        if text.startswith(CSV_BOM):
            text = text[len(CSV_BOM):]
        lines = [line.rstrip("\r") for line in text.split("\n") if line.strip()]
        if len(lines) < 2:
            raise EmptyDataError("CSV file is empty.")

        # one reader per line so an unbalanced quote cannot swallow later rows
        rows = [next(csv.reader([line])) for line in lines]
        header = [cell.strip() for cell in rows[0]]
        if CSV_WEEKDAY_HEADER in header:
            layout = _CURRENT_LAYOUT
        else:
            layout = _LEGACY_LAYOUT
            logger.info("CSV has no weekday column; reading legacy layout")

        result = []
        for line_no, cols in enumerate(rows[1:], start=2):
            if len(cols) < MIN_CSV_COLUMNS:
                logger.debug("Skipping CSV line %d: %d columns", line_no, len(cols))
                continue
            result.append(self._from_csv_row(cols, layout))

        if not result:
            raise EmptyDataError("No valid data found in CSV file.")
        logger.info("Parsed %d transactions from CSV", len(result))
        return result

    def _from_csv_row(self, cols: list[str], layout: dict) -> Transaction:
        def col(name: str) -> str:
            i = layout[name]
            return cols[i].strip() if i < len(cols) else ""

        # csv.reader has already unquoted the note; stray quotes elsewhere are noise
        def bare(name: str) -> str:
            return col(name).replace('"', "")

        type_ = "income" if TYPE_LABELS["income"] in col("type") else "expense"
        created = self._parse_created(bare("created_at"))
        return Transaction(
            id=self._new_id(),
            type=type_,
            amount=_to_amount(bare("amount")),
            category_id=self._categories.resolve_id(bare("category"), type_),
            note=col("note"),
            date=self._parse_day(bare("date"), created),
            created_at=format_timestamp(created),
        )

    def _parse_created(self, raw: str) -> datetime:
        dt = parse_timestamp(raw)
        if dt is None:
            if raw:
                logger.debug("Unparseable created-at %r; using now", raw)
            return self._clock()
        return dt

    def _parse_day(self, raw: str, created: datetime) -> str:
        """YYYY-MM-DD; falls back to the local day of the created-at stamp."""
        d: Optional[date] = parse_date(raw.replace("/", "-"))
        if d is None:
            logger.debug("Unparseable date %r; using created-at day", raw)
            d = to_local(created).date()
        return format_date(d)


def _to_amount(value) -> float:
    """float(value), or 0.0 when missing / unparseable / not finite."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0
