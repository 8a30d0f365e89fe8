"""Cash flow statement, indirect method.

Net movements of balance sheet accounts in the period are classified by the
account cash flow class:

- operating: an increase of a debit balance uses cash, so cash effect is
  minus the net change (debit minus credit);
- investing and financing: credits bring cash in, debits take cash out,
  so cash effect is credits minus debits.

Operating cash flow starts from net income, adds back depreciation and
the operating adjustments. Opening cash is never stored, it is closing cash
from the balance sheet less the net cash change of the period.
"""

from decimal import Decimal
from typing import Iterable

from pydantic import BaseModel, ConfigDict, computed_field

from .balances import Balances, Movement, presentation_balances, raw_balances
from .base import CashFlowClass, Report, Side, is_material
from .chart import Account, Chart
from .config import Settings, settings as default_settings
from .entry import JournalEntry, period
from .income import derive_income_statement


class CashFlowLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: str
    code: str
    name: str
    amount: Decimal


class CashFlowMovements(Report):
    """Cash effects of balance sheet account movements by activity."""

    operating_lines: tuple[CashFlowLine, ...] = ()
    investing_lines: tuple[CashFlowLine, ...] = ()
    financing_lines: tuple[CashFlowLine, ...] = ()

    @computed_field  # type: ignore[misc]
    @property
    def operating(self) -> Decimal:
        return sum((line.amount for line in self.operating_lines), Decimal(0))

    @computed_field  # type: ignore[misc]
    @property
    def investing(self) -> Decimal:
        return sum((line.amount for line in self.investing_lines), Decimal(0))

    @computed_field  # type: ignore[misc]
    @property
    def financing(self) -> Decimal:
        return sum((line.amount for line in self.financing_lines), Decimal(0))


def cash_effect(account: Account, movement: Movement) -> Decimal:
    match account.cash_flow_class:
        case CashFlowClass.Operating:
            return -movement.net_change
        case CashFlowClass.Investing | CashFlowClass.Financing:
            return movement.total_credits - movement.total_debits
        case CashFlowClass.NotApplicable:
            return Decimal(0)


def movements_by_account(entries: Iterable[JournalEntry]) -> dict[str, Movement]:
    result: dict[str, Movement] = {}
    for entry in entries:
        for posting in entry.postings:
            movement = result.setdefault(posting.account_id, Movement())
            if posting.side is Side.Debit:
                movement.total_debits += posting.amount
            else:
                movement.total_credits += posting.amount
    return result


def derive_cash_flow(
    chart: Chart, period_entries: Iterable[JournalEntry]
) -> CashFlowMovements:
    """Classify period movements of analytic balance sheet accounts."""
    by_account = movements_by_account(period_entries)
    lines: dict[CashFlowClass, list[CashFlowLine]] = {c: [] for c in CashFlowClass}
    for account in chart.analytic():
        if not account.nature.is_patrimonial:
            continue
        if account.cash_flow_class is CashFlowClass.NotApplicable:
            continue
        amount = cash_effect(account, by_account.get(account.id, Movement()))
        if is_material(amount):
            lines[account.cash_flow_class].append(
                CashFlowLine(
                    account_id=account.id,
                    code=account.code,
                    name=account.name,
                    amount=amount,
                )
            )
    return CashFlowMovements(
        operating_lines=tuple(lines[CashFlowClass.Operating]),
        investing_lines=tuple(lines[CashFlowClass.Investing]),
        financing_lines=tuple(lines[CashFlowClass.Financing]),
    )


def depreciation_expense(chart: Chart, raw_period_balances: Balances) -> Decimal:
    """Period raw balance of accounts tagged as depreciation."""
    return sum(
        (
            raw_period_balances.get(account.id, Decimal(0))
            for account in chart.analytic()
            if account.depreciation
        ),
        Decimal(0),
    )


class CashFlowStatement(Report):
    net_income: Decimal
    depreciation: Decimal
    movements: CashFlowMovements
    closing_cash: Decimal

    @computed_field  # type: ignore[misc]
    @property
    def operating(self) -> Decimal:
        return self.net_income + self.depreciation + self.movements.operating

    @computed_field  # type: ignore[misc]
    @property
    def investing(self) -> Decimal:
        return self.movements.investing

    @computed_field  # type: ignore[misc]
    @property
    def financing(self) -> Decimal:
        return self.movements.financing

    @computed_field  # type: ignore[misc]
    @property
    def net_cash_change(self) -> Decimal:
        return self.operating + self.investing + self.financing

    @computed_field  # type: ignore[misc]
    @property
    def opening_cash(self) -> Decimal:
        return self.closing_cash - self.net_cash_change


def derive_cash_flow_statement(
    chart: Chart,
    entries: Iterable[JournalEntry],
    balances: Balances | None = None,
    settings: Settings | None = None,
) -> CashFlowStatement:
    """Compose the full cash flow statement for the current exercise."""
    settings = settings or default_settings
    entries = list(entries)
    period_entries = period(entries)
    raw_period = raw_balances(chart, period_entries)
    if balances is None:
        balances = presentation_balances(chart, entries, settings)
    cash = chart.by_code(settings.cash_code)
    closing_cash = balances.get(cash.id, Decimal(0)) if cash else Decimal(0)
    return CashFlowStatement(
        net_income=derive_income_statement(chart, raw_period).net_income,
        depreciation=depreciation_expense(chart, raw_period),
        movements=derive_cash_flow(chart, period_entries),
        closing_cash=closing_cash,
    )
