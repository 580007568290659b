"""Export the ledger to files and import files back into it.

Formatting and parsing live in ExportService / ImportService; this layer only
deals with paths, encodings and merging into the store.
"""
import os
from dataclasses import dataclass

from database.transaction_dao import TransactionDAO
from services.export_service import ExportService
from services.import_service import ImportService, detect_format
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ImportResult:
    parsed: int     # records read from the file
    added: int      # records new to the ledger (the rest shared an id)

    @property
    def skipped(self) -> int:
        return self.parsed - self.added


class DataService:
    def __init__(
        self,
        tx_dao: TransactionDAO,
        export_service: ExportService,
        import_service: ImportService,
    ):
        self._tx_dao = tx_dao
        self._export_svc = export_service
        self._import_svc = import_service

    # ── Export ────────────────────────────────────────────────────────────────

    def export_text(self, fmt: str) -> str:
        """Render the whole ledger (not month-filtered) in the given format."""
        return self._export_svc.render(fmt, self._tx_dao.get_all())

    def export_to_file(self, fmt: str, path: str) -> str:
        """Write an export. If path is a directory, a timestamped filename is
        chosen inside it. Returns the path written."""
        content = self.export_text(fmt)
        if os.path.isdir(path):
            path = os.path.join(path, self._export_svc.suggested_filename(fmt))
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.info("Exported %d transactions as %s to %s",
                    len(self._tx_dao.get_all()), fmt, path)
        return path

    # ── Import ────────────────────────────────────────────────────────────────

    def import_text(self, text: str, fmt: str) -> ImportResult:
        transactions = self._import_svc.parse(text, fmt)
        added = self._tx_dao.merge(transactions)
        result = ImportResult(parsed=len(transactions), added=added)
        logger.info("Imported %s: %d parsed, %d new", fmt, result.parsed, result.added)
        return result

    def import_file(self, path: str) -> ImportResult:
        """Format comes from the extension; ImportFailed on unusable files."""
        fmt = detect_format(path)
        with open(path, "r", encoding="utf-8-sig") as f:
            text = f.read()
        return self.import_text(text, fmt)

    def clear(self):
        self._tx_dao.clear()
