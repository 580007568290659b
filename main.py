import os
import sys
from dataclasses import dataclass
from typing import Optional

import typer

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO

from services.category_service import CategoryService
from services.data_service import DataService
from services.export_service import ExportService
from services.import_service import ImportService
from services.report_service import ReportService
from services.transaction_service import TransactionService

from utils.app_config import (
    get_db_folder, get_log_level, load_config, set_db_folder, set_log_level,
)
from utils.constants import APP_NAME, EXPORT_FORMATS, TYPE_LABELS
from utils.currency import format_currency, format_signed
from utils.date_helpers import parse_timestamp, to_local, today_str
from utils.logger import configure_logging


@dataclass
class Services:
    db: DatabaseManager
    categories: CategoryService
    transactions: TransactionService
    reports: ReportService
    data: DataService


def build_services(db_folder: str | None = None) -> Services:
    # ── Storage ──────────────────────────────────────────────────────────────
    db = DatabaseManager.open_default(db_folder=db_folder or get_db_folder())
    tx_dao = TransactionDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    category_svc = CategoryService()
    tx_svc = TransactionService(tx_dao, category_svc)
    report_svc = ReportService(tx_dao, category_svc)
    data_svc = DataService(tx_dao, ExportService(category_svc), ImportService(category_svc))
    return Services(db, category_svc, tx_svc, report_svc, data_svc)


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=f"{APP_NAME}: a personal income/expense ledger.",
)


def _svc(ctx: typer.Context) -> Services:
    return ctx.obj


def _local_time(created_at: str) -> str:
    dt = parse_timestamp(created_at)
    return to_local(dt).strftime("%H:%M") if dt else "--:--"


def _fail(message: str):
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


@app.callback()
def _root(
    ctx: typer.Context,
    db_folder: Optional[str] = typer.Option(
        None, "--db-folder", help="Folder holding ledger.db (default: configured folder or CWD)."
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default: POCKET_LEDGER_LOG_LEVEL or config)."
    ),
) -> None:
    """Open the ledger and wire services before any subcommand runs."""
    configure_logging(log_level or get_log_level())
    services = build_services(db_folder)
    ctx.obj = services
    ctx.call_on_close(services.db.close)


# ── Records ───────────────────────────────────────────────────────────────────

@app.command("add")
def add_cmd(
    ctx: typer.Context,
    type_: str = typer.Argument(..., metavar="TYPE", help="income or expense"),
    amount: float = typer.Argument(...),
    category: str = typer.Argument(..., help="Category id or display name, e.g. food / 餐饮"),
    date: Optional[str] = typer.Option(None, help="YYYY-MM-DD (default: today)"),
    note: str = typer.Option("", help="Free-text note"),
) -> None:
    """Record a transaction."""
    svc = _svc(ctx)
    found = svc.categories.get_by_id(category) or svc.categories.find_by_name(category, type_)
    try:
        tx = svc.transactions.create(
            type_, amount, found.id if found else category, date or today_str(), note
        )
    except ValueError as e:
        _fail(str(e))
    typer.echo(f"Added {tx.id}: {format_signed(tx.amount, tx.type)} "
               f"{svc.categories.name_for(tx.category_id)} on {tx.date}")


@app.command("delete")
def delete_cmd(ctx: typer.Context, tx_id: str = typer.Argument(..., metavar="ID")) -> None:
    """Delete a transaction by id (no-op if it does not exist)."""
    svc = _svc(ctx)
    if svc.transactions.get(tx_id) is None:
        typer.echo(f"No transaction {tx_id}; nothing deleted.")
        return
    svc.transactions.delete(tx_id)
    typer.echo(f"Deleted {tx_id}")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    days: int = typer.Option(0, help="Show only the N most recent days (0 = all)"),
) -> None:
    """Show transactions grouped by day, most recent first."""
    svc = _svc(ctx)
    groups = svc.reports.get_day_groups()
    if days > 0:
        groups = groups[:days]
    if not groups:
        typer.echo("No transactions yet.")
        return
    for group in groups:
        typer.echo(f"{group.label}  ({group.date})  "
                   f"收入 {format_currency(group.income)}  支出 {format_currency(group.expense)}")
        for tx in group.transactions:
            name = svc.categories.name_for(tx.category_id)
            icon = svc.categories.icon_for(tx.category_id)
            time_part = _local_time(tx.created_at)
            note = f"  {tx.note}" if tx.note else ""
            typer.echo(f"  {icon} {name:<4} {format_signed(tx.amount, tx.type):>12}  "
                       f"{time_part}  [{tx.id}]{note}")


@app.command("categories")
def categories_cmd(ctx: typer.Context) -> None:
    """List the available categories."""
    for c in _svc(ctx).categories.get_all():
        typer.echo(f"{c.icon} {c.id:<14} {c.name:<4} {TYPE_LABELS[c.type]}")


# ── Statistics ────────────────────────────────────────────────────────────────

@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    month: Optional[str] = typer.Option(None, help="YYYY-MM (default: current month)"),
) -> None:
    """Income, expense and balance for a month."""
    svc = _svc(ctx)
    try:
        s = svc.reports.get_summary(month)
    except ValueError as e:
        _fail(str(e))
    typer.echo(f"收入 {format_currency(s.income)}")
    typer.echo(f"支出 {format_currency(s.expense)}")
    typer.echo(f"结余 {format_currency(s.balance)}")
    typer.echo(f"笔数 {s.count}")
    total = svc.reports.get_overview()
    typer.echo(f"累计结余 {format_currency(total.balance)}  (共 {total.count} 笔)")


@app.command("stats")
def stats_cmd(
    ctx: typer.Context,
    type_: str = typer.Option("expense", "--type", help="income or expense"),
    month: Optional[str] = typer.Option(None, help="YYYY-MM (default: current month)"),
) -> None:
    """Per-category breakdown for a month."""
    try:
        stats = _svc(ctx).reports.get_category_breakdown(type_, month)
    except ValueError as e:
        _fail(str(e))
    if not stats:
        typer.echo("No data for this month.")
        return
    for s in stats:
        typer.echo(f"{s.icon} {s.category_name:<4} {format_currency(s.amount):>14} "
                   f"{s.percentage:5.1f}%  {s.count} 笔")


@app.command("trend")
def trend_cmd(ctx: typer.Context) -> None:
    """Income/expense for the last six months."""
    for point in _svc(ctx).reports.get_monthly_chart_data():
        typer.echo(f"{point.month:>4}  收入 {format_currency(point.income):>12}  "
                   f"支出 {format_currency(point.expense):>12}  "
                   f"结余 {format_currency(point.balance):>12}")


# ── Data ──────────────────────────────────────────────────────────────────────

@app.command("export")
def export_cmd(
    ctx: typer.Context,
    fmt: str = typer.Argument(..., metavar="FORMAT", help=" / ".join(EXPORT_FORMATS)),
    out: str = typer.Option(".", help="Output file, or a directory for a timestamped name"),
) -> None:
    """Export every transaction as JSON, CSV or a text report."""
    try:
        path = _svc(ctx).data.export_to_file(fmt, out)
    except (ValueError, OSError) as e:
        _fail(str(e))
    typer.echo(f"Exported to {path}")


@app.command("import")
def import_cmd(ctx: typer.Context, path: str = typer.Argument(...)) -> None:
    """Import a .json or .csv export, skipping records already present."""
    try:
        result = _svc(ctx).data.import_file(path)
    except (ValueError, OSError) as e:
        _fail(f"Import failed: {e}")
    typer.echo(f"Imported {result.added} of {result.parsed} records.")


@app.command("clear")
def clear_cmd(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", help="Confirm deleting every record"),
) -> None:
    """Delete all transactions. Cannot be undone."""
    if not yes:
        _fail("Refusing to clear without --yes.")
    _svc(ctx).data.clear()
    typer.echo("All transactions deleted.")


@app.command("config")
def config_cmd(
    db_folder: Optional[str] = typer.Option(None, "--set-db-folder", help="Persist the ledger folder"),
    log_level: Optional[str] = typer.Option(None, "--set-log-level", help="Persist the logging level"),
) -> None:
    """Show or update the saved preferences."""
    try:
        if db_folder is not None:
            set_db_folder(db_folder or None)
        if log_level is not None:
            set_log_level(log_level or None)
    except OSError as e:
        _fail(f"Could not save config: {e}")
    config = load_config()
    typer.echo(f"db_folder: {config.get('db_folder') or '(current directory)'}")
    typer.echo(f"log_level: {get_log_level()}")


def main():
    app()


if __name__ == "__main__":
    main()
