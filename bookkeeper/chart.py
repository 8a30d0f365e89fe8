"""Chart of accounts and the rules for changing it.

Accounts form a forest: every account may refer to a parent account by id.
Synthetic accounts aggregate their children, analytic accounts receive postings.
The chart is an immutable snapshot, a change produces a new chart.

Validation functions `check_*` raise `AccountError` with a readable reason.
They are used by `Company` before accepting a change and by the chart importer.
"""

import re
import uuid
from typing import TYPE_CHECKING, Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from .base import AccountError, CashFlowClass, IncomeStatementClass, Kind, Nature, Side

if TYPE_CHECKING:
    from .entry import JournalEntry

UNRESOLVED = -1


def new_id() -> str:
    return uuid.uuid4().hex


def code_key(code: str) -> tuple:
    """Sort key that orders `1.2` before `1.10`."""
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in re.split(r"[.-]", code)
    )


class Account(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    code: str
    name: str
    nature: Nature
    kind: Kind = Kind.Analytic
    parent_id: str | None = None
    description: str = ""
    is_contra: bool = False
    income_statement_class: IncomeStatementClass | None = None
    cash_flow_class: CashFlowClass = CashFlowClass.NotApplicable
    depreciation: bool = False

    @property
    def is_analytic(self) -> bool:
        return self.kind is Kind.Analytic

    @property
    def is_synthetic(self) -> bool:
        return self.kind is Kind.Synthetic

    @property
    def natural_side(self) -> Side:
        """Side on which the account balance increases, contra accounts invert it."""
        is_debit = self.nature.is_debit != self.is_contra
        return Side.Debit if is_debit else Side.Credit

    @property
    def presentation_sign(self) -> int:
        """Multiplier from raw (debit minus credit) to presentation balance.

        Credit-nature accounts are flipped, contra accounts keep the raw sign.
        """
        if not self.nature.is_debit and not self.is_contra:
            return -1
        return 1

    @property
    def label(self) -> str:
        return f"{self.code} {self.name}"


class Chart(BaseModel):
    """Chart of accounts as an arena of accounts keyed by id."""

    model_config = ConfigDict(frozen=True)

    accounts: tuple[Account, ...] = ()

    def __iter__(self) -> Iterator[Account]:  # type: ignore
        return iter(self.accounts)

    def __len__(self) -> int:
        return len(self.accounts)

    def __contains__(self, account_id: str) -> bool:
        return account_id in self.index

    @property
    def index(self) -> dict[str, Account]:
        return {account.id: account for account in self.accounts}

    @property
    def ids(self) -> list[str]:
        return [account.id for account in self.accounts]

    def find(self, account_id: str | None) -> Account | None:
        if account_id is None:
            return None
        return self.index.get(account_id)

    def get(self, account_id: str) -> Account:
        """Return account by id or raise `AccountError`."""
        account = self.find(account_id)
        if account is None:
            raise AccountError(f"Account {account_id} not found.")
        return account

    def by_code(self, code: str) -> Account | None:
        for account in self.accounts:
            if account.code == code:
                return account
        return None

    def sorted(self) -> list[Account]:
        """Accounts ordered by code."""
        return sorted(self.accounts, key=lambda a: code_key(a.code))

    def children(self, account_id: str) -> list[Account]:
        return sorted(
            (a for a in self.accounts if a.parent_id == account_id),
            key=lambda a: code_key(a.code),
        )

    def has_children(self, account_id: str) -> bool:
        return any(a.parent_id == account_id for a in self.accounts)

    def analytic(self) -> list[Account]:
        return [a for a in self.sorted() if a.is_analytic]

    def postable_ids(self) -> set[str]:
        return {a.id for a in self.accounts if a.is_analytic}

    def descendants(self, account_id: str) -> list[str]:
        """Ids of the account and all accounts below it."""
        found: list[str] = []
        to_visit = [account_id]
        visited: set[str] = set()
        while to_visit:
            current = to_visit.pop()
            if current in visited:
                continue
            visited.add(current)
            found.append(current)
            to_visit.extend(a.id for a in self.accounts if a.parent_id == current)
        return found

    def depths(self) -> dict[str, int]:
        """Distance of every account from its root.

        An account whose parent is not in the chart counts as a root.
        An account with a circular ancestor chain gets `UNRESOLVED` depth.
        """
        index = self.index
        result = {}
        for account in self.accounts:
            depth = 0
            visited = {account.id}
            current = account
            while current.parent_id is not None and current.parent_id in index:
                if current.parent_id in visited:
                    depth = UNRESOLVED
                    break
                visited.add(current.parent_id)
                current = index[current.parent_id]
                depth += 1
            result[account.id] = depth
        return result

    def add(self, account: Account) -> "Chart":
        return Chart(accounts=self.accounts + (account,))

    def replace(self, account: Account) -> "Chart":
        self.get(account.id)
        return Chart(
            accounts=tuple(account if a.id == account.id else a for a in self.accounts)
        )

    def remove(self, account_id: str) -> "Chart":
        self.get(account_id)
        return Chart(accounts=tuple(a for a in self.accounts if a.id != account_id))


def check_code(chart: Chart, account: Account):
    """Account code must be unique in the chart."""
    for other in chart:
        if other.code == account.code and other.id != account.id:
            raise AccountError(f"Account code {account.code} already exists.")


def check_cycle(chart: Chart, account: Account):
    """Account cannot be its own ancestor."""
    if account.parent_id is None:
        return
    if account.parent_id == account.id:
        raise AccountError(f"Account {account.code} cannot be its own parent.")
    visited = set()
    current = chart.find(account.parent_id)
    while current is not None and current.id not in visited:
        if current.id == account.id:
            raise AccountError(
                f"Circular parentage: account {account.code} cannot be placed "
                "under one of its descendants."
            )
        visited.add(current.id)
        current = chart.find(current.parent_id)


def check_parent(chart: Chart, account: Account):
    """Parent must exist, be synthetic and share the account nature."""
    if account.parent_id is None:
        if account.is_analytic:
            raise AccountError(
                f"Analytic account {account.code} must belong to a synthetic account."
            )
        return
    parent = chart.find(account.parent_id)
    if parent is None:
        raise AccountError(f"Parent account {account.parent_id} not found.")
    if parent.is_analytic:
        raise AccountError(
            f"Analytic account {parent.code} cannot be a parent of {account.code}."
        )
    if parent.nature is not account.nature:
        raise AccountError(
            f"Account nature {account.nature.value} must match "
            f"parent {parent.code} nature {parent.nature.value}."
        )


def check_kind(chart: Chart, account: Account):
    """Account with children must stay synthetic."""
    if account.is_analytic and chart.has_children(account.id):
        raise AccountError(
            f"Account {account.code} has child accounts and cannot be analytic."
        )


def check_children(chart: Chart, account: Account):
    """Existing child accounts must keep the account nature."""
    for child in chart.children(account.id):
        if child.nature is not account.nature:
            raise AccountError(
                f"Account {account.code} nature {account.nature.value} must match "
                f"child {child.code} nature {child.nature.value}."
            )


def check_classification(account: Account):
    """Income statement class is required exactly for analytic result accounts."""
    needs_class = account.is_analytic and account.nature.is_result
    if needs_class and account.income_statement_class is None:
        raise AccountError(
            f"Result account {account.code} must have an income statement class."
        )
    if not needs_class and account.income_statement_class is not None:
        raise AccountError(
            f"Only analytic result accounts can have an income statement class, "
            f"{account.code} cannot."
        )
    if account.depreciation and not (
        account.is_analytic and account.nature in (Nature.Expense, Nature.Cost)
    ):
        raise AccountError(
            f"Only analytic expense or cost accounts can be marked as depreciation, "
            f"{account.code} cannot."
        )


def check_account(chart: Chart, account: Account):
    """Raise `AccountError` if adding or updating *account* breaks the chart."""
    check_code(chart, account)
    check_cycle(chart, account)
    check_parent(chart, account)
    check_kind(chart, account)
    check_children(chart, account)
    check_classification(account)


def check_deletion(chart: Chart, entries: Iterable["JournalEntry"], account_id: str):
    """Account can be deleted only if it is a leaf and was never posted to."""
    account = chart.get(account_id)
    if chart.has_children(account_id):
        raise AccountError(f"Account {account.code} has child accounts.")
    for entry in entries:
        if any(p.account_id == account_id for p in entry.postings):
            raise AccountError(
                f"Account {account.code} is used in entry {entry.id} and cannot be deleted."
            )


def parent_code(code: str, known_codes: Iterable[str]) -> str | None:
    """Longest dotted prefix of *code* found among *known_codes*."""
    known = set(known_codes)
    parts = code.split(".")
    for i in range(len(parts) - 1, 0, -1):
        candidate = ".".join(parts[:i])
        if candidate in known:
            return candidate
    return None
