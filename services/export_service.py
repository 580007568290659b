"""Render the full transaction list as JSON, CSV or a plain-text report."""
import json
from datetime import datetime
from typing import Callable, Iterable

from models.transaction import Transaction
from services.category_service import CategoryService
from services.report_service import group_by_date, summarize
from utils.constants import (
    APP_NAME,
    CSV_BOM,
    CSV_HEADERS,
    EXPORT_FILE_PREFIX,
    EXPORT_FORMATS,
    TYPE_LABELS,
)
from utils.currency import format_currency, format_signed
from utils.date_helpers import parse_date, parse_timestamp, to_local, weekday_name

_RULE = "═" * 64
_NOTE_WIDTH = 20


class ExportService:
    def __init__(
        self,
        category_service: CategoryService,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._categories = category_service
        self._clock = clock

    def render(self, fmt: str, transactions: Iterable[Transaction]) -> str:
        if fmt == "json":
            return self.to_json(transactions)
        if fmt == "csv":
            return self.to_csv(transactions)
        if fmt == "txt":
            return self.to_txt(transactions)
        raise ValueError(f"Unsupported export format: {fmt}. Choose one of {', '.join(EXPORT_FORMATS)}.")

    def suggested_filename(self, fmt: str) -> str:
        """e.g. '小账本_2024-01-15_1230.csv'."""
        return f"{EXPORT_FILE_PREFIX}_{self._clock().strftime('%Y-%m-%d_%H%M')}.{fmt}"

    # ── JSON ──────────────────────────────────────────────────────────────────

    def to_json(self, transactions: Iterable[Transaction]) -> str:
        return json.dumps(
            [t.to_dict() for t in transactions], ensure_ascii=False, indent=2
        )

    # ── CSV ───────────────────────────────────────────────────────────────────

    def to_csv(self, transactions: Iterable[Transaction]) -> str:
        """Header + one row per record, BOM-prefixed so spreadsheet apps pick UTF-8.

        Only the note is quoted; the layout is read back by ImportService,
        which splits on bare commas.
        """
        lines = [",".join(CSV_HEADERS)]
        for tx in transactions:
            lines.append(",".join(self._csv_row(tx)))
        return CSV_BOM + "\n".join(lines)

    def _csv_row(self, tx: Transaction) -> list[str]:
        d = parse_date(tx.date)
        created = parse_timestamp(tx.created_at)
        note = (tx.note or "").replace('"', '""')
        return [
            d.strftime("%Y/%m/%d") if d else tx.date,
            weekday_name(d) if d else "",
            TYPE_LABELS.get(tx.type, TYPE_LABELS["expense"]),
            self._categories.name_for(tx.category_id),
            f"{tx.amount:.2f}",
            f'"{note}"',
            to_local(created).strftime("%Y/%m/%d %H:%M") if created else tx.created_at,
        ]

    # ── TXT ───────────────────────────────────────────────────────────────────

    def to_txt(self, transactions: Iterable[Transaction]) -> str:
        transactions = list(transactions)
        overview = summarize(transactions)
        trend_icon = "📈" if overview.balance >= 0 else "📉"

        out = [
            _RULE,
            f"{APP_NAME} 报表".center(60),
            f"导出时间: {self._clock().strftime('%Y-%m-%d %H:%M')}".center(60),
            _RULE,
            "",
            "【数据概览】",
            f"  📊 总记录数: {len(transactions):>8} 笔",
            f"  💰 累计收入: {self._money(overview.income):>14}",
            f"  💸 累计支出: {self._money(overview.expense):>14}",
            f"  {trend_icon} 累计结余: {self._money(overview.balance):>14}",
            "",
        ]

        for day, day_txs in group_by_date(transactions).items():
            day_total = summarize(day_txs)
            out.append("─" * 64)
            out.append(f"📅 {day}")
            out.append(
                f"   收入: {self._money(day_total.income):>12}"
                f"    支出: {self._money(day_total.expense):>12}"
            )
            for tx in day_txs:
                out.append(self._txt_line(tx))
            out.append("")

        out.append(_RULE)
        out.append(f"✨ {APP_NAME} - 轻松记录每一笔 ✨".center(60))
        out.append(_RULE)
        return "\n".join(out) + "\n"

    @staticmethod
    def _money(amount: float) -> str:
        return format_currency(amount, grouped=False)

    def _txt_line(self, tx: Transaction) -> str:
        icon = self._categories.icon_for(tx.category_id)
        name = self._categories.name_for(tx.category_id).ljust(6)
        amount = format_signed(tx.amount, tx.type).rjust(12)
        note = f"  {tx.note[:_NOTE_WIDTH]}" if tx.note else ""
        return f"  {icon} {name} {amount}{note}"
