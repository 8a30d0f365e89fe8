"""Period closing and period-end adjustment entries.

Closing produces two entries that are appended together:

1. the zeroing entry brings every result account with a period balance
   to zero against the income summary account,
2. the transfer entry moves the income summary balance to retained earnings.

Undoing the closing removes the closing entries permanently,
the period is open again and net income is reconciled on the fly.
"""

import datetime
import logging
from decimal import Decimal
from typing import Iterable

from .balances import period_raw_balances
from .base import EPSILON, ClosingError, EntryError, Numeric, Side
from .chart import Account, Chart
from .config import Settings, settings as default_settings
from .entry import Entry, JournalEntry, Posting, check_entry, is_closed, live
from .income import derive_income_statement

logger = logging.getLogger(__name__)

DEPRECIATION_PREFIX = "Depreciation for"
COST_OF_SALES_PREFIX = "Cost of sales for"


def closing_date(fiscal_year_start: datetime.date) -> datetime.date:
    """Closing entries are dated the last day of the fiscal year."""
    return datetime.date(fiscal_year_start.year, 12, 31)


def required_account(chart: Chart, code: str, name: str) -> Account:
    account = chart.by_code(code)
    if account is None:
        raise ClosingError(f"{name} account {code} not found in the chart.")
    return account


def zeroing_postings(chart: Chart, raw: dict[str, Decimal]) -> list[Posting]:
    postings = []
    for account in chart.analytic():
        if not account.nature.is_result:
            continue
        balance = raw.get(account.id, Decimal(0))
        if balance == 0:
            continue
        side = Side.Credit if balance > 0 else Side.Debit
        postings.append(Posting(account_id=account.id, side=side, amount=abs(balance)))
    return postings


def close_period(
    chart: Chart,
    entries: Iterable[JournalEntry],
    fiscal_year_start: datetime.date,
    settings: Settings | None = None,
) -> tuple[JournalEntry, JournalEntry]:
    """Return zeroing and transfer entries that close the current period.

    Raises `ClosingError` if the period is already closed, if there is no
    net income to close or if the income summary or retained earnings
    account is missing.
    """
    settings = settings or default_settings
    entries = live(entries)
    if is_closed(entries):
        raise ClosingError(
            "Period is already closed, undo the closing before closing again."
        )
    raw = period_raw_balances(chart, entries)
    net_income = derive_income_statement(chart, raw).net_income
    if abs(net_income) < EPSILON:
        raise ClosingError(
            "No result to close, there are no revenue or expense balances in the period."
        )
    income_summary = required_account(
        chart, settings.income_summary_code, "Income summary"
    )
    retained_earnings = required_account(
        chart, settings.retained_earnings_code, "Retained earnings"
    )
    postings = zeroing_postings(chart, raw)
    if not postings:
        raise ClosingError("No result account with a balance found for closing.")
    profit = net_income > 0
    amount = abs(net_income)
    postings.append(
        Posting(
            account_id=income_summary.id,
            side=Side.Credit if profit else Side.Debit,
            amount=amount,
        )
    )
    on = closing_date(fiscal_year_start)
    zeroing = JournalEntry(
        date=on,
        description=f"Closing of result accounts for {on.year}",
        postings=tuple(postings),
        is_closing_entry=True,
    )
    transfer_entry = Entry("Transfer of net income to retained earnings")
    if profit:
        transfer_entry.double(income_summary.id, retained_earnings.id, amount)
    else:
        transfer_entry.double(retained_earnings.id, income_summary.id, amount)
    try:
        transfer = transfer_entry.to_journal_entry(on, is_closing_entry=True)
        check_entry(chart, zeroing)
        check_entry(chart, transfer)
    except EntryError as e:
        raise ClosingError(
            f"Cannot close the period: {e} Check diagnostics for unclassified result accounts."
        ) from e
    logger.info("Closing period %s with net income %s", on.year, net_income)
    return zeroing, transfer


def undo_closing(entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    """Return entries without closing entries, raise `ClosingError` if not closed."""
    entries = list(entries)
    if not is_closed(entries):
        raise ClosingError("Period is not closed, there is nothing to undo.")
    kept = [e for e in entries if not e.is_closing_entry]
    logger.info("Removed %d closing entries", len(entries) - len(kept))
    return kept


def has_adjustment(
    entries: Iterable[JournalEntry], on: datetime.date, prefix: str
) -> bool:
    """Return True if an adjustment with *prefix* exists in the month of *on*."""
    return any(
        (e.date.year, e.date.month) == (on.year, on.month)
        and e.description.startswith(prefix)
        for e in live(entries)
    )


def adjustment_entry(
    chart: Chart,
    entries: Iterable[JournalEntry],
    on: datetime.date,
    amount: Numeric,
    prefix: str,
    debit_code: str,
    credit_code: str,
    allow_duplicate: bool = False,
) -> JournalEntry:
    value = Decimal(str(amount))
    if value <= 0:
        raise EntryError(f"Adjustment amount must be positive, got {amount}.")
    if not allow_duplicate and has_adjustment(entries, on, prefix):
        raise EntryError(
            f"Entry '{prefix}' already exists for {on:%m/%Y}, "
            "use allow_duplicate to post another one."
        )
    debit_account = chart.by_code(debit_code)
    credit_account = chart.by_code(credit_code)
    if debit_account is None or credit_account is None:
        raise EntryError(
            f"Debit account {debit_code} or credit account {credit_code} not found."
        )
    entry = (
        Entry(f"{prefix} {on:%B %Y}")
        .double(debit_account.id, credit_account.id, value)
        .to_journal_entry(on)
    )
    check_entry(chart, entry)
    return entry


def depreciation_entry(
    chart: Chart,
    entries: Iterable[JournalEntry],
    on: datetime.date,
    amount: Numeric,
    allow_duplicate: bool = False,
    settings: Settings | None = None,
) -> JournalEntry:
    """Debit depreciation expense and credit accumulated depreciation."""
    settings = settings or default_settings
    return adjustment_entry(
        chart,
        entries,
        on,
        amount,
        DEPRECIATION_PREFIX,
        settings.depreciation_expense_code,
        settings.accumulated_depreciation_code,
        allow_duplicate,
    )


def cost_of_sales_entry(
    chart: Chart,
    entries: Iterable[JournalEntry],
    on: datetime.date,
    amount: Numeric,
    allow_duplicate: bool = False,
    settings: Settings | None = None,
) -> JournalEntry:
    """Debit cost of sales and credit inventory."""
    settings = settings or default_settings
    return adjustment_entry(
        chart,
        entries,
        on,
        amount,
        COST_OF_SALES_PREFIX,
        settings.cost_of_sales_code,
        settings.inventory_account_code,
        allow_duplicate,
    )
