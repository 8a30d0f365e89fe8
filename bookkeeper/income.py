"""Income statement derived from period movements of result accounts."""

from decimal import Decimal

from pydantic import computed_field

from .base import IncomeStatementClass, Nature, Report
from .chart import Chart


def bucket(income_statement_class: IncomeStatementClass) -> str:
    """Name of the income statement line for an account classification."""
    match income_statement_class:
        case IncomeStatementClass.GrossRevenue:
            return "gross_revenue"
        case IncomeStatementClass.RevenueDeduction:
            return "revenue_deductions"
        case IncomeStatementClass.CostOfSales:
            return "cost_of_sales"
        case IncomeStatementClass.OperatingExpense:
            return "operating_expenses"
        case IncomeStatementClass.FinancialRevenue:
            return "financial_revenue"
        case IncomeStatementClass.FinancialExpense:
            return "financial_expenses"
        case IncomeStatementClass.OtherRevenue:
            return "other_revenue"
        case IncomeStatementClass.OtherExpense:
            return "other_expenses"
        case IncomeStatementClass.IncomeTax:
            return "income_tax"


class IncomeStatement(Report):
    gross_revenue: Decimal = Decimal(0)
    revenue_deductions: Decimal = Decimal(0)
    cost_of_sales: Decimal = Decimal(0)
    operating_expenses: Decimal = Decimal(0)
    financial_revenue: Decimal = Decimal(0)
    financial_expenses: Decimal = Decimal(0)
    other_revenue: Decimal = Decimal(0)
    other_expenses: Decimal = Decimal(0)
    income_tax: Decimal = Decimal(0)

    @computed_field  # type: ignore[misc]
    @property
    def net_revenue(self) -> Decimal:
        return self.gross_revenue - self.revenue_deductions

    @computed_field  # type: ignore[misc]
    @property
    def gross_profit(self) -> Decimal:
        return self.net_revenue - self.cost_of_sales

    @computed_field  # type: ignore[misc]
    @property
    def operating_result(self) -> Decimal:
        return self.gross_profit - self.operating_expenses

    @computed_field  # type: ignore[misc]
    @property
    def pretax_result(self) -> Decimal:
        return (
            self.operating_result
            + self.financial_revenue
            - self.financial_expenses
            + self.other_revenue
            - self.other_expenses
        )

    @computed_field  # type: ignore[misc]
    @property
    def net_income(self) -> Decimal:
        return self.pretax_result - self.income_tax


def derive_income_statement(
    chart: Chart, raw_period_balances: dict[str, Decimal]
) -> IncomeStatement:
    """Create income statement from raw (debit minus credit) period balances.

    Revenue accounts carry negative raw balances and are negated to show
    as positive amounts, contra revenue accounts (deductions) are not.
    Result accounts without classification do not contribute.
    """
    lines = {bucket(c): Decimal(0) for c in IncomeStatementClass}
    for account in chart:
        if not account.is_analytic or not account.nature.is_result:
            continue
        if account.income_statement_class is None:
            continue
        value = raw_period_balances.get(account.id, Decimal(0))
        if account.nature is Nature.Revenue and not account.is_contra:
            value = -value
        lines[bucket(account.income_statement_class)] += value
    return IncomeStatement(**lines)
