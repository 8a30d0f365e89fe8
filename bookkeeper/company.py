"""User-facing Company class: a chart of accounts with its journal.

`Company` is an immutable snapshot. Every change is validated first
and returns a new snapshot, an invalid change raises and leaves
the current snapshot as it was.

    company = Company.new("Acme", date(2024, 1, 1))
    cash, sales = company.code("1.1.1.01"), company.code("4.1.01")
    company = company.post(Entry("Sold goods").double(cash, sales, 1000), date(2024, 3, 1))
    company.income_statement().net_income  # Decimal("1000")
"""

import datetime
import logging
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .balances import (
    AccountStatement,
    Balances,
    Movement,
    account_movement,
    account_statement,
    period_raw_balances,
    presentation_balances,
)
from .base import AccountError, EntryError, Numeric, SaveLoadMixin
from .cashflow import CashFlowStatement, derive_cash_flow_statement
from .chart import Account, Chart, check_account, check_deletion, new_id
from .closing import close_period, cost_of_sales_entry, depreciation_entry, undo_closing
from .config import Settings
from .default_chart import default_chart
from .diagnostics import Issue, diagnose
from .entry import Entry, JournalEntry, check_entry, is_closed, period
from .income import IncomeStatement, derive_income_statement
from .ratios import FinancialRatios, derive_ratios
from .reports import BalanceSheet, EquityChanges, derive_balance_sheet, derive_equity_changes

logger = logging.getLogger(__name__)


class Company(BaseModel, SaveLoadMixin):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    fiscal_year_start: datetime.date
    chart: Chart = Chart()
    entries: tuple[JournalEntry, ...] = ()

    @classmethod
    def new(
        cls, name: str, fiscal_year_start: datetime.date, chart: Chart | None = None
    ) -> "Company":
        """Create company with standard chart of accounts if no chart is given."""
        if chart is None:
            chart = default_chart()
        return cls(name=name, fiscal_year_start=fiscal_year_start, chart=chart)

    def code(self, code: str) -> str:
        """Return account id by account code."""
        account = self.chart.by_code(code)
        if account is None:
            raise AccountError(f"Account with code {code} not found.")
        return account.id

    def entry(self, entry_id: str) -> JournalEntry:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise EntryError(f"Entry {entry_id} not found.")

    @property
    def is_closed(self) -> bool:
        return is_closed(self.entries)

    def _with(self, **changes) -> "Company":
        return self.model_copy(update=changes)

    # Chart of accounts

    def add_account(self, account: Account) -> "Company":
        if account.id in self.chart:
            raise AccountError(f"Account {account.id} already exists.")
        check_account(self.chart, account)
        logger.debug("Adding account %s to %s", account.label, self.name)
        return self._with(chart=self.chart.add(account))

    def update_account(self, account: Account) -> "Company":
        current = self.chart.get(account.id)
        if account.nature is not current.nature:
            raise AccountError(
                f"Nature of account {current.code} is fixed at creation."
            )
        check_account(self.chart, account)
        used = any(e.touches([account.id]) for e in self.entries)
        if used and current.is_analytic and account.is_synthetic:
            raise AccountError(
                f"Account {account.code} has postings and cannot become synthetic."
            )
        if used and account.parent_id != current.parent_id:
            raise AccountError(
                f"Account {account.code} has postings and cannot change its parent."
            )
        logger.debug("Updating account %s in %s", account.label, self.name)
        return self._with(chart=self.chart.replace(account))

    def delete_account(self, account_id: str) -> "Company":
        check_deletion(self.chart, self.entries, account_id)
        logger.debug("Deleting account %s from %s", account_id, self.name)
        return self._with(chart=self.chart.remove(account_id))

    def replace_chart(self, chart: Chart) -> "Company":
        """Use new chart of accounts, existing entries are removed."""
        logger.warning(
            "Replacing chart of %s, %d entries removed", self.name, len(self.entries)
        )
        return self._with(chart=chart, entries=())

    # Journal

    def post(
        self, entry: JournalEntry | Entry, on: datetime.date | None = None
    ) -> "Company":
        """Add entry to journal, an `Entry` needs a date *on*."""
        if isinstance(entry, Entry):
            if on is None:
                raise EntryError(f"Date is required to post entry '{entry.title}'.")
            entry = entry.to_journal_entry(on)
        check_entry(self.chart, entry)
        EntryError.must_not_exist([e.id for e in self.entries], entry.id, "Entry")
        return self._with(entries=self.entries + (entry,))

    def post_many(self, entries, on: datetime.date | None = None) -> "Company":
        company = self
        for entry in entries:
            company = company.post(entry, on)
        return company

    def update_entry(self, entry: JournalEntry) -> "Company":
        current = self.entry(entry.id)
        if current.is_closing_entry:
            raise EntryError("Closing entries cannot be edited, undo the closing instead.")
        check_entry(self.chart, entry)
        return self._replace_entry(entry)

    def _open_entry(self, entry_id: str) -> JournalEntry:
        entry = self.entry(entry_id)
        if entry.is_closing_entry:
            raise EntryError(
                "Closing entries cannot be deleted or restored, undo the closing instead."
            )
        return entry

    def _replace_entry(self, entry: JournalEntry) -> "Company":
        entries = tuple(entry if e.id == entry.id else e for e in self.entries)
        return self._with(entries=entries)

    def delete_entry(self, entry_id: str) -> "Company":
        """Mark entry as deleted, deleted entries are kept in the journal."""
        entry = self._open_entry(entry_id)
        logger.debug("Deleting entry '%s'", entry.description)
        return self._replace_entry(entry.model_copy(update=dict(is_deleted=True)))

    def restore_entry(self, entry_id: str) -> "Company":
        entry = self._open_entry(entry_id)
        return self._replace_entry(entry.model_copy(update=dict(is_deleted=False)))

    # Period end

    def close_period(self, settings: Settings | None = None) -> "Company":
        zeroing, transfer = close_period(
            self.chart, self.entries, self.fiscal_year_start, settings
        )
        logger.info("Closed period for %s", self.name)
        return self._with(entries=self.entries + (zeroing, transfer))

    def undo_closing(self) -> "Company":
        entries = undo_closing(self.entries)
        logger.info("Undone closing for %s", self.name)
        return self._with(entries=tuple(entries))

    def post_depreciation(
        self,
        on: datetime.date,
        amount: Numeric,
        allow_duplicate: bool = False,
        settings: Settings | None = None,
    ) -> "Company":
        entry = depreciation_entry(
            self.chart, self.entries, on, amount, allow_duplicate, settings
        )
        return self._with(entries=self.entries + (entry,))

    def post_cost_of_sales(
        self,
        on: datetime.date,
        amount: Numeric,
        allow_duplicate: bool = False,
        settings: Settings | None = None,
    ) -> "Company":
        entry = cost_of_sales_entry(
            self.chart, self.entries, on, amount, allow_duplicate, settings
        )
        return self._with(entries=self.entries + (entry,))

    # Reports

    def balances(self, settings: Settings | None = None) -> Balances:
        return presentation_balances(self.chart, self.entries, settings)

    def income_statement(self) -> IncomeStatement:
        raw = period_raw_balances(self.chart, self.entries)
        return derive_income_statement(self.chart, raw)

    def balance_sheet(self, settings: Settings | None = None) -> BalanceSheet:
        return derive_balance_sheet(self.chart, self.balances(settings), settings)

    def cash_flow(self, settings: Settings | None = None) -> CashFlowStatement:
        return derive_cash_flow_statement(
            self.chart, self.entries, self.balances(settings), settings
        )

    def equity_changes(self, settings: Settings | None = None) -> EquityChanges:
        return derive_equity_changes(
            self.chart,
            period(self.entries),
            self.balances(settings),
            self.income_statement().net_income,
            settings,
        )

    def ratios(self, settings: Settings | None = None) -> FinancialRatios:
        return derive_ratios(
            self.chart,
            self.income_statement(),
            self.balances(settings),
            period_raw_balances(self.chart, self.entries),
            settings,
        )

    def diagnose(self, settings: Settings | None = None) -> list[Issue]:
        return diagnose(self.chart, self.entries, settings)

    def account_statement(self, account_id: str) -> AccountStatement:
        return account_statement(self.chart, self.entries, account_id)

    def account_movement(self, account_id: str) -> Movement:
        return account_movement(self.chart, period(self.entries), account_id)

    def balance(self, code: str, settings: Settings | None = None) -> Decimal:
        """Presentation balance of account with *code*."""
        return self.balances(settings)[self.code(code)]
