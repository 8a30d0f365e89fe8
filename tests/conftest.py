from datetime import date

import pytest

from bookkeeper import (
    Account,
    CashFlowClass,
    Chart,
    Company,
    Entry,
    IncomeStatementClass,
    Kind,
    Nature,
)


def account(code, nature, parent=None, kind=Kind.Analytic, **kwargs):
    """Account with id equal to code."""
    return Account(id=code, code=code, name=code, nature=nature, kind=kind, parent_id=parent, **kwargs)


@pytest.fixture
def scenario_chart() -> Chart:
    return Chart(
        accounts=(
            account("1", Nature.Asset, kind=Kind.Synthetic),
            account("1.1", Nature.Asset, "1", cash_flow_class=CashFlowClass.Operating),
            account("2", Nature.Liability, kind=Kind.Synthetic),
            account("2.1", Nature.Liability, "2"),
            account("3", Nature.Equity, kind=Kind.Synthetic),
            account("3.2.1.01", Nature.Equity, "3"),
            account(
                "4.1",
                Nature.Revenue,
                income_statement_class=IncomeStatementClass.GrossRevenue,
            ),
        )
    )


@pytest.fixture
def scenario_entries():
    return [Entry("Sale").double("1.1", "4.1", 1000).to_journal_entry(date(2024, 3, 1))]


@pytest.fixture
def company() -> Company:
    """Company with standard chart and one quarter of operations."""
    c = Company.new("Acme", date(2024, 1, 1))
    entries = [
        Entry("Shareholder investment").double(c.code("1.1.1.01"), c.code("3.1.01"), 10_000),
        Entry("Bank loan").double(c.code("1.1.1.02"), c.code("2.2.1.01"), 10_000),
        Entry("Bought machinery").double(c.code("1.2.1.01"), c.code("1.1.1.02"), 8000),
        Entry("Bought goods on credit").double(c.code("1.1.3.01"), c.code("2.1.1.01"), 3000),
        Entry("Sold goods on credit").double(c.code("1.1.2.01"), c.code("4.1.01"), 6000),
        Entry("Paid salaries").double(c.code("5.2.1.01"), c.code("1.1.1.01"), 1500),
        Entry("Collected receivables").double(c.code("1.1.1.01"), c.code("1.1.2.01"), 4000),
    ]
    c = c.post_many(entries, on=date(2024, 3, 15))
    c = c.post_cost_of_sales(date(2024, 3, 31), 2000)
    return c.post_depreciation(date(2024, 3, 31), 500)
