"""Standard chart of accounts for a new company.

Parents are found by dotted code prefix. The chart contains every account
code used by default settings: balance sheet roots, cash, receivables,
inventory, suppliers, capital, retained earnings, income summary,
depreciation and cost of sales.
"""

from .base import CashFlowClass as CF
from .base import IncomeStatementClass as IS
from .base import Kind, Nature
from .chart import Account, Chart, parent_code

S = Kind.Synthetic

STANDARD_ACCOUNTS: list[tuple[str, str, Nature, dict]] = [
    ("1", "Assets", Nature.Asset, dict(kind=S)),
    ("1.1", "Current assets", Nature.Asset, dict(kind=S)),
    ("1.1.1", "Cash and cash equivalents", Nature.Asset, dict(kind=S)),
    ("1.1.1.01", "Cash", Nature.Asset, {}),
    ("1.1.1.02", "Bank accounts", Nature.Asset, {}),
    ("1.1.2", "Receivables", Nature.Asset, dict(kind=S)),
    ("1.1.2.01", "Trade receivables", Nature.Asset, dict(cash_flow_class=CF.Operating)),
    ("1.1.3", "Inventory", Nature.Asset, dict(kind=S)),
    ("1.1.3.01", "Merchandise", Nature.Asset, dict(cash_flow_class=CF.Operating)),
    ("1.2", "Non-current assets", Nature.Asset, dict(kind=S)),
    ("1.2.1", "Property, plant and equipment", Nature.Asset, dict(kind=S)),
    ("1.2.1.01", "Machinery and equipment", Nature.Asset, dict(cash_flow_class=CF.Investing)),
    ("1.2.1.02", "Vehicles", Nature.Asset, dict(cash_flow_class=CF.Investing)),
    ("1.2.1.09", "Accumulated depreciation", Nature.Asset, dict(is_contra=True)),
    ("2", "Liabilities", Nature.Liability, dict(kind=S)),
    ("2.1", "Current liabilities", Nature.Liability, dict(kind=S)),
    ("2.1.1", "Suppliers", Nature.Liability, dict(kind=S)),
    ("2.1.1.01", "Trade payables", Nature.Liability, dict(cash_flow_class=CF.Operating)),
    ("2.1.2", "Taxes and payroll", Nature.Liability, dict(kind=S)),
    ("2.1.2.01", "Taxes payable", Nature.Liability, dict(cash_flow_class=CF.Operating)),
    ("2.1.2.02", "Salaries payable", Nature.Liability, dict(cash_flow_class=CF.Operating)),
    ("2.2", "Non-current liabilities", Nature.Liability, dict(kind=S)),
    ("2.2.1", "Long-term debt", Nature.Liability, dict(kind=S)),
    ("2.2.1.01", "Bank loans", Nature.Liability, dict(cash_flow_class=CF.Financing)),
    ("3", "Equity", Nature.Equity, dict(kind=S)),
    ("3.1", "Share capital", Nature.Equity, dict(kind=S)),
    ("3.1.01", "Subscribed capital", Nature.Equity, dict(cash_flow_class=CF.Financing)),
    ("3.2", "Reserves", Nature.Equity, dict(kind=S)),
    ("3.2.1", "Retained earnings", Nature.Equity, dict(kind=S)),
    ("3.2.1.01", "Retained earnings", Nature.Equity, {}),
    ("4", "Revenue", Nature.Revenue, dict(kind=S)),
    ("4.1", "Operating revenue", Nature.Revenue, dict(kind=S)),
    ("4.1.01", "Sales of goods", Nature.Revenue, dict(income_statement_class=IS.GrossRevenue)),
    ("4.1.02", "Services", Nature.Revenue, dict(income_statement_class=IS.GrossRevenue)),
    ("4.2", "Revenue deductions", Nature.Revenue, dict(kind=S)),
    (
        "4.2.01",
        "Sales returns",
        Nature.Revenue,
        dict(is_contra=True, income_statement_class=IS.RevenueDeduction),
    ),
    (
        "4.2.02",
        "Taxes on sales",
        Nature.Revenue,
        dict(is_contra=True, income_statement_class=IS.RevenueDeduction),
    ),
    ("4.3", "Financial revenue", Nature.Revenue, dict(kind=S)),
    ("4.3.01", "Interest income", Nature.Revenue, dict(income_statement_class=IS.FinancialRevenue)),
    ("4.4", "Other revenue", Nature.Revenue, dict(kind=S)),
    ("4.4.01", "Gain on sale of assets", Nature.Revenue, dict(income_statement_class=IS.OtherRevenue)),
    ("5", "Expenses", Nature.Expense, dict(kind=S)),
    ("5.1", "Selling expenses", Nature.Expense, dict(kind=S)),
    ("5.1.01", "Sales commissions", Nature.Expense, dict(income_statement_class=IS.OperatingExpense)),
    ("5.1.02", "Advertising", Nature.Expense, dict(income_statement_class=IS.OperatingExpense)),
    ("5.2", "Administrative expenses", Nature.Expense, dict(kind=S)),
    ("5.2.1", "Personnel", Nature.Expense, dict(kind=S)),
    ("5.2.1.01", "Salaries", Nature.Expense, dict(income_statement_class=IS.OperatingExpense)),
    ("5.2.2", "General expenses", Nature.Expense, dict(kind=S)),
    ("5.2.2.01", "Rent", Nature.Expense, dict(income_statement_class=IS.OperatingExpense)),
    ("5.2.2.02", "Utilities", Nature.Expense, dict(income_statement_class=IS.OperatingExpense)),
    ("5.2.3", "Depreciation", Nature.Expense, dict(kind=S)),
    (
        "5.2.3.01",
        "Depreciation expense",
        Nature.Expense,
        dict(income_statement_class=IS.OperatingExpense, depreciation=True),
    ),
    ("5.3", "Financial expenses", Nature.Expense, dict(kind=S)),
    ("5.3.01", "Interest expense", Nature.Expense, dict(income_statement_class=IS.FinancialExpense)),
    ("5.3.02", "Bank fees", Nature.Expense, dict(income_statement_class=IS.FinancialExpense)),
    ("5.4", "Other expenses", Nature.Expense, dict(kind=S)),
    ("5.4.01", "Loss on sale of assets", Nature.Expense, dict(income_statement_class=IS.OtherExpense)),
    ("5.5", "Income tax", Nature.Expense, dict(kind=S)),
    ("5.5.01", "Income tax expense", Nature.Expense, dict(income_statement_class=IS.IncomeTax)),
    ("6", "Costs", Nature.Cost, dict(kind=S)),
    ("6.1", "Cost of sales", Nature.Cost, dict(kind=S)),
    ("6.1.1", "Cost of goods sold", Nature.Cost, dict(kind=S)),
    ("6.1.1.01", "Cost of goods sold", Nature.Cost, dict(income_statement_class=IS.CostOfSales)),
    ("7", "Closing", Nature.Equity, dict(kind=S)),
    ("7.1", "Result of the period", Nature.Equity, dict(kind=S)),
    ("7.1.1", "Income summary", Nature.Equity, dict(kind=S)),
    ("7.1.1.01", "Income summary", Nature.Equity, {}),
]


def default_chart() -> Chart:
    """Create standard chart of accounts with new account ids."""
    ids: dict[str, str] = {}
    accounts = []
    for code, name, nature, extra in STANDARD_ACCOUNTS:
        parent = parent_code(code, ids.keys())
        account = Account(
            code=code,
            name=name,
            nature=nature,
            parent_id=ids[parent] if parent else None,
            **extra,
        )
        ids[code] = account.id
        accounts.append(account)
    return Chart(accounts=tuple(accounts))
