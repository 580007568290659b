"""Aggregations over a transaction snapshot.

The module-level functions are pure: they take a list of transactions and an
explicit reference date and never touch storage. ReportService binds them to
the live store and the category table for callers that just want "now".
"""
from datetime import date
from typing import Callable, Iterable

from database.transaction_dao import TransactionDAO
from models.report import CategoryStats, DayGroup, MonthlyStats, MonthSummary
from models.transaction import Transaction
from services.category_service import CategoryService
from utils.constants import TREND_MONTHS
from utils.date_helpers import (
    add_months,
    format_month,
    friendly_date,
    month_bounds,
    parse_date,
    parse_month,
    short_month_label,
    timestamp_sort_key,
    today,
)


def sort_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Most recent first: date descending, then created_at descending."""
    return sorted(
        transactions,
        key=lambda t: (t.date, timestamp_sort_key(t.created_at)),
        reverse=True,
    )


def group_by_date(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    """date -> transactions, keys in first-seen order of the sorted list."""
    groups: dict[str, list[Transaction]] = {}
    for tx in sort_transactions(transactions):
        groups.setdefault(tx.date, []).append(tx)
    return groups


def summarize(transactions: Iterable[Transaction]) -> MonthSummary:
    summary = MonthSummary()
    for tx in transactions:
        if tx.type == "income":
            summary.income += tx.amount
        elif tx.type == "expense":
            summary.expense += tx.amount
        summary.count += 1
    return summary


def month_transactions(transactions: Iterable[Transaction], ref: date) -> list[Transaction]:
    """Transactions dated within the calendar month containing ref (inclusive)."""
    first, last = month_bounds(ref)
    result = []
    for tx in transactions:
        d = parse_date(tx.date)
        if d is not None and first <= d <= last:
            result.append(tx)
    return result


def month_summary(transactions: Iterable[Transaction], ref: date | None = None) -> MonthSummary:
    return summarize(month_transactions(transactions, ref or today()))


def category_stats(
    transactions: Iterable[Transaction],
    type_: str,
    categories: CategoryService,
    ref: date | None = None,
) -> list[CategoryStats]:
    """Per-category totals for one type in the month containing ref.

    Transactions whose category_id is not in the category table are left out
    of the breakdown (they still count in month_summary). Percentages are of
    the resolved total, so they add up to 100.
    """
    buckets: dict[str, list] = {}
    for tx in month_transactions(transactions, ref or today()):
        if tx.type != type_:
            continue
        bucket = buckets.setdefault(tx.category_id, [0.0, 0])
        bucket[0] += tx.amount
        bucket[1] += 1

    resolved = [
        (categories.get_by_id(cat_id), amount, count)
        for cat_id, (amount, count) in buckets.items()
    ]
    resolved = [r for r in resolved if r[0] is not None]
    total = sum(amount for _, amount, _ in resolved)

    stats = [
        CategoryStats(
            category_id=cat.id,
            category_name=cat.name,
            icon=cat.icon,
            color=cat.color,
            amount=amount,
            percentage=(amount / total * 100) if total > 0 else 0.0,
            count=count,
        )
        for cat, amount, count in resolved
    ]
    stats.sort(key=lambda s: s.amount, reverse=True)
    return stats


def monthly_trend(
    transactions: Iterable[Transaction],
    ref: date | None = None,
    months: int = TREND_MONTHS,
) -> list[MonthlyStats]:
    """One point per month, oldest first, ending with the month containing ref."""
    ref = ref or today()
    transactions = list(transactions)
    result = []
    for offset in range(months - 1, -1, -1):
        target = add_months(ref.replace(day=1), -offset)
        summary = summarize(month_transactions(transactions, target))
        result.append(MonthlyStats(
            month=short_month_label(target),
            period=format_month(target),
            income=summary.income,
            expense=summary.expense,
        ))
    return result


def day_groups(transactions: Iterable[Transaction], ref: date | None = None) -> list[DayGroup]:
    """group_by_date with a heading and per-day income/expense."""
    ref = ref or today()
    result = []
    for day, txs in group_by_date(transactions).items():
        summary = summarize(txs)
        result.append(DayGroup(
            date=day,
            label=friendly_date(day, ref),
            transactions=txs,
            income=summary.income,
            expense=summary.expense,
        ))
    return result


class ReportService:
    def __init__(
        self,
        tx_dao: TransactionDAO,
        category_service: CategoryService,
        today_fn: Callable[[], date] = today,
    ):
        self._tx_dao = tx_dao
        self._categories = category_service
        self._today = today_fn

    def _ref(self, month: str | None) -> date:
        if month is None:
            return self._today()
        d = parse_month(month)
        if d is None:
            raise ValueError(f"Invalid month: {month}. Use YYYY-MM.")
        return d

    def get_summary(self, month: str | None = None) -> MonthSummary:
        """Income/expense/balance/count for a YYYY-MM month (default: current)."""
        return month_summary(self._tx_dao.get_all(), self._ref(month))

    def get_overview(self) -> MonthSummary:
        """All-time totals."""
        return summarize(self._tx_dao.get_all())

    def get_category_breakdown(self, type_: str, month: str | None = None) -> list[CategoryStats]:
        return category_stats(self._tx_dao.get_all(), type_, self._categories, self._ref(month))

    def get_monthly_chart_data(self, months: int = TREND_MONTHS) -> list[MonthlyStats]:
        return monthly_trend(self._tx_dao.get_all(), self._today(), months)

    def get_day_groups(self) -> list[DayGroup]:
        return day_groups(self._tx_dao.get_all(), self._today())
