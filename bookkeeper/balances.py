"""Balance aggregation from journal entries.

Two kinds of balances are computed:

- raw balance: sum of debits minus sum of credits, does not depend on
  account nature, synthetic accounts always hold zero;
- presentation balance: raw balance of analytic accounts with sign adjusted
  to the natural side, including current net income in retained earnings
  while the period is open, and rolled up to synthetic accounts.

Presentation balances are computed in explicit steps:

1. `raw_balances` over all non-deleted entries,
2. `signed_balances` flips credit-nature accounts that are not contra accounts,
3. `reconcile_open_period` adds period net income to retained earnings
   when no closing entries exist,
4. `roll_up` adds every account to its parent, deepest accounts first.

The functions do not change the chart or the entries they receive.
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from .base import Side
from .chart import UNRESOLVED, Account, Chart
from .config import Settings, settings as default_settings
from .entry import JournalEntry, is_closed, live, period
from .income import derive_income_statement

Balances = dict[str, Decimal]


def raw_balances(chart: Chart, entries: Iterable[JournalEntry]) -> Balances:
    """Debit minus credit for every account over pre-filtered entries."""
    balances = {account.id: Decimal(0) for account in chart}
    postable = chart.postable_ids()
    for entry in entries:
        for posting in entry.postings:
            if posting.account_id in postable:
                balances[posting.account_id] += posting.signed_amount
    return balances


def period_raw_balances(chart: Chart, entries: Iterable[JournalEntry]) -> Balances:
    """Raw balances over entries of the current exercise."""
    return raw_balances(chart, period(entries))


def signed_balances(chart: Chart, raw: Balances) -> Balances:
    balances = {}
    for account in chart:
        if account.is_analytic:
            balances[account.id] = raw.get(account.id, Decimal(0)) * account.presentation_sign
        else:
            balances[account.id] = Decimal(0)
    return balances


def reconcile_open_period(
    chart: Chart,
    entries: Iterable[JournalEntry],
    balances: Balances,
    settings: Settings | None = None,
) -> Balances:
    """Add period net income to retained earnings if the period is not closed.

    Before closing entries exist net income still sits in result accounts.
    Adding it to retained earnings makes assets equal liabilities plus equity.
    """
    settings = settings or default_settings
    entries = live(entries)
    if is_closed(entries):
        return dict(balances)
    retained_earnings = chart.by_code(settings.retained_earnings_code)
    if retained_earnings is None:
        return dict(balances)
    net_income = derive_income_statement(
        chart, period_raw_balances(chart, entries)
    ).net_income
    result = dict(balances)
    result[retained_earnings.id] = result.get(retained_earnings.id, Decimal(0)) + net_income
    return result


def roll_up(chart: Chart, balances: Balances) -> Balances:
    """Add each account balance to its parent, deepest accounts first.

    Accounts with a circular ancestor chain do not contribute to parents.
    An account with a missing parent is a root.
    """
    depths = chart.depths()
    index = chart.index
    result = {account.id: balances.get(account.id, Decimal(0)) for account in chart}
    for account in sorted(chart, key=lambda a: depths[a.id], reverse=True):
        if depths[account.id] == UNRESOLVED:
            continue
        if account.parent_id in index:
            result[account.parent_id] += result[account.id]
    return result


def presentation_balances(
    chart: Chart, entries: Iterable[JournalEntry], settings: Settings | None = None
) -> Balances:
    """Balances as shown on statements, for every account in the chart."""
    entries = live(entries)
    balances = signed_balances(chart, raw_balances(chart, entries))
    balances = reconcile_open_period(chart, entries, balances, settings)
    return roll_up(chart, balances)


@dataclass
class Movement:
    total_debits: Decimal = Decimal(0)
    total_credits: Decimal = Decimal(0)

    @property
    def net_change(self) -> Decimal:
        """Debit minus credit."""
        return self.total_debits - self.total_credits


def account_movement(
    chart: Chart, entries: Iterable[JournalEntry], account_id: str
) -> Movement:
    """Debits and credits posted to an account and all accounts below it."""
    chart.get(account_id)
    index = chart.index
    account_ids = {i for i in chart.descendants(account_id) if index[i].is_analytic}
    movement = Movement()
    for entry in live(entries):
        for posting in entry.postings:
            if posting.account_id not in account_ids:
                continue
            if posting.side is Side.Debit:
                movement.total_debits += posting.amount
            else:
                movement.total_credits += posting.amount
    return movement


@dataclass
class StatementLine:
    entry_id: str
    date: datetime.date
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass
class AccountStatement:
    """Ledger of a single account with a running balance."""

    account: Account
    lines: list[StatementLine] = field(default_factory=list)

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal(0))

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal(0))

    @property
    def final_balance(self) -> Decimal:
        """Balance on the natural side of the account."""
        return (self.total_debits - self.total_credits) * self.account.natural_side.sign


def account_statement(
    chart: Chart, entries: Iterable[JournalEntry], account_id: str
) -> AccountStatement:
    account = chart.get(account_id)
    sign = account.natural_side.sign
    statement = AccountStatement(account)
    running = Decimal(0)
    touching = [e for e in live(entries) if e.touches([account_id])]
    for entry in sorted(touching, key=lambda e: (e.date, e.id)):
        postings = [p for p in entry.postings if p.account_id == account_id]
        debit = sum((p.amount for p in postings if p.side is Side.Debit), Decimal(0))
        credit = sum((p.amount for p in postings if p.side is Side.Credit), Decimal(0))
        running += (debit - credit) * sign
        statement.lines.append(
            StatementLine(entry.id, entry.date, entry.description, debit, credit, running)
        )
    return statement
