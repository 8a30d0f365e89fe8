"""Financial ratios from the income statement and balance sheet.

Income statement figures come from period movements, balance sheet figures
from presentation balances of conventional account codes.
Liquidity and net debt to EBITDA are infinite when undefined,
other ratios are zero when undefined.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, computed_field

from .balances import Balances
from .base import Report
from .cashflow import depreciation_expense
from .chart import Chart
from .config import Settings, settings as default_settings
from .income import IncomeStatement

INFINITY = Decimal("Infinity")
ZERO = Decimal(0)


def divide(
    numerator: Decimal,
    denominator: Decimal,
    undefined: Decimal = ZERO,
    positive_only: bool = True,
) -> Decimal:
    if denominator > 0 or (not positive_only and denominator != 0):
        return numerator / denominator
    return undefined


class DuPont(BaseModel):
    model_config = ConfigDict(frozen=True)

    net_margin: Decimal
    asset_turnover: Decimal
    financial_leverage: Decimal

    @computed_field  # type: ignore[misc]
    @property
    def roe(self) -> Decimal:
        return self.net_margin * self.asset_turnover * self.financial_leverage


class FinancialRatios(Report):
    ebitda: Decimal
    # liquidity
    current_ratio: Decimal
    quick_ratio: Decimal
    # profitability
    roa: Decimal
    roe: Decimal
    gross_margin: Decimal
    net_margin: Decimal
    ebitda_margin: Decimal
    # efficiency
    asset_turnover: Decimal
    days_sales_outstanding: Decimal
    days_payables_outstanding: Decimal
    days_inventory_outstanding: Decimal
    cash_conversion_cycle: Decimal
    # debt
    net_debt: Decimal
    net_debt_to_ebitda: Decimal
    financial_leverage: Decimal
    dupont: DuPont


def derive_ratios(
    chart: Chart,
    income_statement: IncomeStatement,
    balances: Balances,
    raw_period_balances: Balances,
    settings: Settings | None = None,
) -> FinancialRatios:
    settings = settings or default_settings

    def balance(code: str) -> Decimal:
        account = chart.by_code(code)
        return balances.get(account.id, ZERO) if account else ZERO

    total_assets = balance(settings.assets_code)
    equity = balance(settings.equity_code)
    current_assets = balance(settings.current_assets_code)
    current_liabilities = balance(settings.current_liabilities_code)
    inventory = balance(settings.inventory_code)
    receivables = balance(settings.receivables_code)
    suppliers = balance(settings.suppliers_code)
    cash = balance(settings.cash_code)
    non_current_liabilities = balance(settings.non_current_liabilities_code)

    net_income = income_statement.net_income
    net_revenue = income_statement.net_revenue
    cost_of_sales = income_statement.cost_of_sales
    days = Decimal(settings.days_in_year)

    ebitda = income_statement.operating_result + depreciation_expense(
        chart, raw_period_balances
    )
    dso = divide(receivables * days, net_revenue)
    dpo = divide(suppliers * days, cost_of_sales)
    dio = divide(inventory * days, cost_of_sales)
    net_debt = current_liabilities + non_current_liabilities - cash
    net_margin = divide(net_income, net_revenue)
    asset_turnover = divide(net_revenue, total_assets)
    financial_leverage = divide(total_assets, equity)

    return FinancialRatios(
        ebitda=ebitda,
        current_ratio=divide(current_assets, current_liabilities, INFINITY),
        quick_ratio=divide(current_assets - inventory, current_liabilities, INFINITY),
        roa=divide(net_income, total_assets),
        roe=divide(net_income, equity),
        gross_margin=divide(income_statement.gross_profit, net_revenue),
        net_margin=net_margin,
        ebitda_margin=divide(ebitda, net_revenue, positive_only=False),
        asset_turnover=asset_turnover,
        days_sales_outstanding=dso,
        days_payables_outstanding=dpo,
        days_inventory_outstanding=dio,
        cash_conversion_cycle=dio + dso - dpo,
        net_debt=net_debt,
        net_debt_to_ebitda=divide(net_debt, ebitda, INFINITY, positive_only=False),
        financial_leverage=financial_leverage,
        dupont=DuPont(
            net_margin=net_margin,
            asset_turnover=asset_turnover,
            financial_leverage=financial_leverage,
        ),
    )
