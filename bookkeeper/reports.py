"""Balance sheet and statement of changes in equity.

Both reports read presentation balances (lifetime to date, rolled up).
The statement of changes in equity has no stored history: opening balances
are closing balances less the movements of the period, assuming equity
changes only by capital contributions and net income.
"""

from decimal import Decimal
from typing import Iterable

from pydantic import BaseModel, ConfigDict, computed_field

from .balances import Balances, account_movement
from .base import EPSILON, Report
from .chart import Chart
from .config import Settings, settings as default_settings
from .entry import JournalEntry


class Line(BaseModel):
    """Report line for an account."""

    model_config = ConfigDict(frozen=True)

    account_id: str
    code: str
    name: str
    level: int
    is_synthetic: bool
    balance: Decimal


def section_lines(chart: Chart, balances: Balances, root_id: str | None) -> list[Line]:
    """Lines for accounts below *root_id* ordered as a tree.

    Accounts with a balance below rounding noise are skipped together
    with their subtree.
    """
    if root_id is None:
        return []
    lines = []
    visited = {root_id}
    stack = [(child, 1) for child in reversed(chart.children(root_id))]
    while stack:
        account, level = stack.pop()
        if account.id in visited:
            continue
        visited.add(account.id)
        balance = balances.get(account.id, Decimal(0))
        if abs(balance) < EPSILON:
            continue
        lines.append(
            Line(
                account_id=account.id,
                code=account.code,
                name=account.name,
                level=level,
                is_synthetic=account.is_synthetic,
                balance=balance,
            )
        )
        stack.extend((child, level + 1) for child in reversed(chart.children(account.id)))
    return lines


class BalanceSheet(Report):
    assets: Decimal
    liabilities: Decimal
    equity: Decimal
    asset_lines: tuple[Line, ...] = ()
    liability_lines: tuple[Line, ...] = ()
    equity_lines: tuple[Line, ...] = ()

    @computed_field  # type: ignore[misc]
    @property
    def liabilities_and_equity(self) -> Decimal:
        return self.liabilities + self.equity

    @computed_field  # type: ignore[misc]
    @property
    def difference(self) -> Decimal:
        return self.assets - self.liabilities_and_equity

    def is_balanced(self) -> bool:
        """Return True if assets equal liabilities plus equity."""
        return abs(self.difference) <= EPSILON


def root_balance(
    chart: Chart, balances: Balances, code: str
) -> tuple[str | None, Decimal]:
    account = chart.by_code(code)
    if account is None:
        return None, Decimal(0)
    return account.id, balances.get(account.id, Decimal(0))


def derive_balance_sheet(
    chart: Chart, balances: Balances, settings: Settings | None = None
) -> BalanceSheet:
    """Create balance sheet from presentation balances."""
    settings = settings or default_settings
    assets_id, assets = root_balance(chart, balances, settings.assets_code)
    liabilities_id, liabilities = root_balance(chart, balances, settings.liabilities_code)
    equity_id, equity = root_balance(chart, balances, settings.equity_code)
    return BalanceSheet(
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        asset_lines=tuple(section_lines(chart, balances, assets_id)),
        liability_lines=tuple(section_lines(chart, balances, liabilities_id)),
        equity_lines=tuple(section_lines(chart, balances, equity_id)),
    )


class EquityChanges(Report):
    capital_opening: Decimal
    capital_increase: Decimal
    capital_closing: Decimal
    retained_opening: Decimal
    net_income: Decimal
    retained_closing: Decimal

    @computed_field  # type: ignore[misc]
    @property
    def opening_total(self) -> Decimal:
        return self.capital_opening + self.retained_opening

    @computed_field  # type: ignore[misc]
    @property
    def closing_total(self) -> Decimal:
        return self.capital_closing + self.retained_closing


def derive_equity_changes(
    chart: Chart,
    period_entries: Iterable[JournalEntry],
    balances: Balances,
    net_income: Decimal,
    settings: Settings | None = None,
) -> EquityChanges:
    """Roll equity forward from inferred opening balances to closing balances.

    Capital increase is credit minus debit movement of the capital account
    in the period. Dividends and other equity movements are not modeled.
    """
    settings = settings or default_settings
    capital_increase = Decimal(0)
    capital_closing = Decimal(0)
    capital = chart.by_code(settings.capital_code)
    if capital is not None:
        movement = account_movement(chart, period_entries, capital.id)
        capital_increase = movement.total_credits - movement.total_debits
        capital_closing = balances.get(capital.id, Decimal(0))
    retained_closing = Decimal(0)
    retained_earnings = chart.by_code(settings.retained_earnings_code)
    if retained_earnings is not None:
        retained_closing = balances.get(retained_earnings.id, Decimal(0))
    return EquityChanges(
        capital_opening=capital_closing - capital_increase,
        capital_increase=capital_increase,
        capital_closing=capital_closing,
        retained_opening=retained_closing - net_income,
        net_income=net_income,
        retained_closing=retained_closing,
    )
