from decimal import Decimal

import pytest

from bookkeeper import Chart, IncomeStatementClass, Nature
from bookkeeper.income import IncomeStatement, derive_income_statement

from conftest import account

IS = IncomeStatementClass


@pytest.fixture
def result_chart():
    return Chart(
        accounts=(
            account("4.1", Nature.Revenue, income_statement_class=IS.GrossRevenue),
            account("4.2", Nature.Revenue, is_contra=True, income_statement_class=IS.RevenueDeduction),
            account("6.1", Nature.Cost, income_statement_class=IS.CostOfSales),
            account("5.1", Nature.Expense, income_statement_class=IS.OperatingExpense),
            account("4.3", Nature.Revenue, income_statement_class=IS.FinancialRevenue),
            account("5.3", Nature.Expense, income_statement_class=IS.FinancialExpense),
            account("5.5", Nature.Expense, income_statement_class=IS.IncomeTax),
            account("5.9", Nature.Expense),
            account("1.1", Nature.Asset),
        )
    )


def test_waterfall():
    statement = IncomeStatement(
        gross_revenue=Decimal(1000),
        revenue_deductions=Decimal(100),
        cost_of_sales=Decimal(300),
        operating_expenses=Decimal(200),
        financial_revenue=Decimal(50),
        financial_expenses=Decimal(20),
        income_tax=Decimal(80),
    )
    assert statement.net_revenue == 900
    assert statement.gross_profit == 600
    assert statement.operating_result == 400
    assert statement.pretax_result == 430
    assert statement.net_income == 350


@pytest.mark.report
def test_derive_income_statement_from_raw_balances(result_chart):
    raw = {
        "4.1": Decimal(-1000),
        "4.2": Decimal(100),
        "6.1": Decimal(300),
        "5.1": Decimal(200),
        "4.3": Decimal(-50),
        "5.3": Decimal(20),
        "5.5": Decimal(80),
        "1.1": Decimal(99),
    }
    statement = derive_income_statement(result_chart, raw)
    assert statement.gross_revenue == 1000
    assert statement.revenue_deductions == 100
    assert statement.financial_revenue == 50
    assert statement.net_income == 350


@pytest.mark.report
def test_unclassified_result_account_is_left_out(result_chart):
    statement = derive_income_statement(result_chart, {"5.9": Decimal(70)})
    assert statement.net_income == 0


@pytest.mark.report
def test_income_statement_dump_has_computed_lines():
    dump = IncomeStatement(gross_revenue=Decimal(10)).model_dump()
    assert dump["net_income"] == 10
