from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ConfigDict

Amount = Decimal
Numeric = int | float | Decimal

EPSILON = Decimal("0.01")
CENT = Decimal("0.01")


class BookkeeperError(Exception):
    """Custom error for the bookkeeper project."""

    @classmethod
    def must_exist(cls, collection: Iterable[str], key: str, what: str = "Account"):
        if key not in collection:
            raise cls(f"{what} {key} not found.")

    @classmethod
    def must_not_exist(
        cls, collection: Iterable[str], key: str, what: str = "Account"
    ):
        if key in collection:
            raise cls(f"{what} {key} already exists.")


class AccountError(BookkeeperError):
    """Chart of accounts change violates a tree, nature or classification rule."""


class EntryError(BookkeeperError):
    """Journal entry cannot be accepted to the ledger."""


class ClosingError(BookkeeperError):
    """Period closing cannot be performed or undone."""


class Nature(Enum):
    Asset = "asset"
    Liability = "liability"
    Equity = "equity"
    Revenue = "revenue"
    Expense = "expense"
    Cost = "cost"

    def __repr__(self):
        return self.value.capitalize()

    @property
    def is_debit(self) -> bool:
        """Return True if accounts of this nature increase on debit side."""
        return self in (Nature.Asset, Nature.Expense, Nature.Cost)

    @property
    def is_result(self) -> bool:
        """Return True for income statement natures."""
        return self in (Nature.Revenue, Nature.Expense, Nature.Cost)

    @property
    def is_patrimonial(self) -> bool:
        """Return True for balance sheet natures."""
        return not self.is_result


class Kind(Enum):
    Synthetic = "synthetic"
    Analytic = "analytic"


class Side(Enum):
    Debit = "debit"
    Credit = "credit"

    @property
    def sign(self) -> int:
        return 1 if self is Side.Debit else -1

    def opposite(self) -> "Side":
        return Side.Credit if self is Side.Debit else Side.Debit


class IncomeStatementClass(Enum):
    GrossRevenue = "gross_revenue"
    RevenueDeduction = "revenue_deduction"
    CostOfSales = "cost_of_sales"
    OperatingExpense = "operating_expense"
    FinancialRevenue = "financial_revenue"
    FinancialExpense = "financial_expense"
    OtherRevenue = "other_revenue"
    OtherExpense = "other_expense"
    IncomeTax = "income_tax"


class CashFlowClass(Enum):
    Operating = "operating"
    Investing = "investing"
    Financing = "financing"
    NotApplicable = "not_applicable"


def is_material(value: Decimal) -> bool:
    """Return True if *value* is above rounding noise."""
    return abs(value) > EPSILON


def to_cents(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT)


class SaveLoadMixin:
    """A mix-in class for loading and saving pydantic models to files."""

    @classmethod
    def load(cls, filename: str | Path):
        return cls.model_validate_json(Path(filename).read_text())  # type: ignore

    def save(self, filename: str | Path, allow_overwrite: bool = False):
        if not allow_overwrite and Path(filename).exists():
            raise FileExistsError(f"File already exists: {filename}")
        content = self.model_dump_json(indent=2, warnings=False)  # type: ignore
        Path(filename).write_text(content)  # type: ignore


class Report(BaseModel, SaveLoadMixin):
    """Base class for financial reports."""

    model_config = ConfigDict(frozen=True)
