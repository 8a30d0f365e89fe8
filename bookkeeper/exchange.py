"""Export and import of chart of accounts and journal entries as JSON.

Exported documents refer to accounts by code, not by id, so that they can
be moved between companies. Importers never raise on bad input, they
collect readable errors and warnings:

- chart import rebuilds the tree from `parent_code` or from dotted codes,
  accounts with children become synthetic, nature is inherited from the
  parent or inferred from the first digit of a root account code;
- entry import keeps valid entries and reports every rejected one.
"""

import datetime
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable

import simplejson as json  # type: ignore

from .base import AccountError, CashFlowClass, IncomeStatementClass, Kind, Nature, Side
from .chart import (
    Account,
    Chart,
    check_classification,
    check_cycle,
    check_kind,
    check_parent,
    code_key,
    parent_code,
)
from .entry import JournalEntry, Posting

logger = logging.getLogger(__name__)

NATURE_BY_DIGIT = {
    "1": Nature.Asset,
    "2": Nature.Liability,
    "3": Nature.Equity,
    "4": Nature.Revenue,
    "5": Nature.Expense,
    "6": Nature.Cost,
}


def dumps(data) -> str:
    return json.dumps(data, indent=2, use_decimal=True)


def export_chart(chart: Chart) -> str:
    """Chart of accounts as JSON list with parent codes."""
    codes = {account.id: account.code for account in chart}
    return dumps(
        [
            dict(
                code=account.code,
                name=account.name,
                nature=account.nature.value,
                kind=account.kind.value,
                parent_code=codes.get(account.parent_id or ""),
                description=account.description,
                is_contra=account.is_contra,
                income_statement_class=(
                    account.income_statement_class.value
                    if account.income_statement_class
                    else None
                ),
                cash_flow_class=account.cash_flow_class.value,
                depreciation=account.depreciation,
            )
            for account in chart.sorted()
        ]
    )


def export_entries(chart: Chart, entries: Iterable[JournalEntry]) -> str:
    """Journal entries as JSON list with account codes, deleted entries excluded."""
    codes = {account.id: account.code for account in chart}
    return dumps(
        [
            dict(
                date=entry.date.isoformat(),
                description=entry.description,
                postings=[
                    dict(
                        account_code=codes.get(p.account_id, p.account_id),
                        side=p.side.value,
                        amount=p.amount,
                    )
                    for p in entry.postings
                ],
            )
            for entry in entries
            if not entry.is_deleted
        ]
    )


def parse_list(text: str, what: str) -> list:
    """Accept a JSON list or an object holding a list."""
    data = json.loads(text, use_decimal=True)
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for value in data.values():
            if isinstance(value, list):
                return value
        raise ValueError(f"JSON object does not contain a list of {what}.")
    raise ValueError("JSON document must be a list or an object.")


@dataclass
class ChartImport:
    chart: Chart = field(default_factory=Chart)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class AccountRow:
    code: str
    name: str
    item: dict
    parent: str | None = None
    has_children: bool = False


def enum_value(enum, value, default=None):
    if value is None:
        return default
    return enum(value)


def read_account_rows(items: list, result: ChartImport) -> list[AccountRow]:
    rows = []
    seen = set()
    for i, item in enumerate(items, 1):
        if not isinstance(item, dict):
            result.errors.append(f"Account #{i}: expected an object.")
            continue
        code, name = item.get("code"), item.get("name")
        if not code or not name:
            result.errors.append(f"Account #{i}: code and name are required.")
            continue
        code = str(code)
        if code in seen:
            result.errors.append(f"Account #{i}: code {code} is duplicated in the file.")
            continue
        seen.add(code)
        rows.append(AccountRow(code=code, name=str(name), item=item))
    return sorted(rows, key=lambda row: code_key(row.code))


def link_parents(rows: list[AccountRow], result: ChartImport):
    by_code = {row.code: row for row in rows}
    for row in rows:
        explicit = row.item.get("parent_code")
        if explicit:
            if explicit in by_code:
                row.parent = explicit
            else:
                result.warnings.append(
                    f"Account {row.code}: parent {explicit} not found, "
                    "account is imported as a root."
                )
        else:
            row.parent = parent_code(row.code, by_code.keys())
            if row.parent is None and "." in row.code:
                result.warnings.append(
                    f"Account {row.code}: no parent found by code, "
                    "account is imported as a root."
                )
        if row.parent is not None:
            by_code[row.parent].has_children = True


def root_nature(row: AccountRow, result: ChartImport) -> Nature:
    if row.item.get("nature"):
        return Nature(row.item["nature"])
    nature = NATURE_BY_DIGIT.get(row.code[0])
    if nature is None:
        result.warnings.append(
            f"Account {row.code}: cannot infer nature from code, assuming expense."
        )
        return Nature.Expense
    return nature


def build_accounts(rows: list[AccountRow], result: ChartImport) -> list[Account]:
    accounts: dict[str, Account] = {}
    # parents may come after children when linked by explicit parent code
    pending = list(rows)
    while pending:
        progressed = False
        for row in list(pending):
            if row.parent is not None and row.parent not in accounts:
                continue
            pending.remove(row)
            progressed = True
            item = row.item
            parent = accounts.get(row.parent) if row.parent else None
            try:
                if parent is not None:
                    nature = parent.nature
                    if item.get("nature") and Nature(item["nature"]) is not nature:
                        result.warnings.append(
                            f"Account {row.code}: nature inherited from parent {parent.code}."
                        )
                else:
                    nature = root_nature(row, result)
                kind = enum_value(Kind, item.get("kind"), Kind.Analytic)
                if row.has_children:
                    kind = Kind.Synthetic
                accounts[row.code] = Account(
                    code=row.code,
                    name=row.name,
                    nature=nature,
                    kind=kind,
                    parent_id=parent.id if parent else None,
                    description=item.get("description") or "",
                    is_contra=bool(item.get("is_contra", False)),
                    income_statement_class=enum_value(
                        IncomeStatementClass, item.get("income_statement_class")
                    ),
                    cash_flow_class=enum_value(
                        CashFlowClass,
                        item.get("cash_flow_class"),
                        CashFlowClass.NotApplicable,
                    ),
                    depreciation=bool(item.get("depreciation", False)),
                )
            except ValueError as e:
                result.errors.append(f"Account {row.code}: {e}")
        if not progressed:
            for row in pending:
                result.errors.append(f"Account {row.code}: circular parent codes.")
            break
    return list(accounts.values())


def validate_accounts(chart: Chart, result: ChartImport):
    for account in chart.sorted():
        needs_class = account.is_analytic and account.nature.is_result
        if needs_class and account.income_statement_class is None:
            result.warnings.append(
                f"Result account {account.code} has no income statement class."
            )
        try:
            check_cycle(chart, account)
            if account.parent_id is not None:
                check_parent(chart, account)
            check_kind(chart, account)
            if not (needs_class and account.income_statement_class is None):
                check_classification(account)
        except AccountError as e:
            result.errors.append(str(e))


def import_chart(text: str) -> ChartImport:
    """Read chart of accounts from JSON, the chart is empty if there are errors."""
    result = ChartImport()
    try:
        items = parse_list(text, "accounts")
    except ValueError as e:
        result.errors.append(f"Cannot read JSON: {e}")
        return result
    rows = read_account_rows(items, result)
    if result.errors:
        return result
    link_parents(rows, result)
    chart = Chart(accounts=tuple(build_accounts(rows, result)))
    validate_accounts(chart, result)
    if result.ok:
        result.chart = chart
    logger.info(
        "Chart import: %d accounts, %d errors, %d warnings",
        len(result.chart),
        len(result.errors),
        len(result.warnings),
    )
    return result


@dataclass
class EntryImport:
    entries: list[JournalEntry] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def read_entry(chart: Chart, item, n: int, errors: list[str]) -> JournalEntry | None:
    if not isinstance(item, dict) or not item.get("date") or not item.get("description"):
        errors.append(f"Entry #{n}: date, description and postings are required.")
        return None
    if not isinstance(item.get("postings"), list):
        errors.append(f"Entry #{n}: date, description and postings are required.")
        return None
    try:
        on = datetime.date.fromisoformat(str(item["date"]))
    except ValueError:
        errors.append(f"Entry #{n}: invalid date {item['date']}.")
        return None
    postings = []
    is_valid = True
    for p in item["postings"]:
        if not isinstance(p, dict):
            errors.append(f"Entry #{n}: posting must be an object.")
            is_valid = False
            continue
        code = str(p.get("account_code"))
        account = chart.by_code(code)
        if account is None:
            errors.append(f"Entry #{n}: account code {code} not found in the chart.")
            is_valid = False
            continue
        if account.is_synthetic:
            errors.append(
                f"Entry #{n}: account {account.label} is synthetic "
                "and cannot receive postings."
            )
            is_valid = False
            continue
        try:
            side = Side(p.get("side"))
            amount = Decimal(str(p.get("amount")))
            if not amount.is_finite():
                raise InvalidOperation(amount)
        except (ValueError, InvalidOperation):
            errors.append(f"Entry #{n}: invalid side or amount for account {code}.")
            is_valid = False
            continue
        if not amount > 0:
            errors.append(f"Entry #{n}: amount for account {code} must be positive.")
            is_valid = False
            continue
        postings.append(Posting(account_id=account.id, side=side, amount=amount))
    if not is_valid:
        return None
    entry = JournalEntry(
        date=on, description=str(item["description"]), postings=tuple(postings)
    )
    if len(postings) < 2:
        errors.append(f"Entry #{n}: at least two postings are required.")
        return None
    if not entry.is_balanced():
        errors.append(
            f"Entry #{n}: not balanced "
            f"(debits {entry.total_debits}, credits {entry.total_credits})."
        )
        return None
    return entry


def import_entries(chart: Chart, text: str) -> EntryImport:
    """Read journal entries from JSON, invalid entries are skipped and reported."""
    result = EntryImport()
    try:
        items = parse_list(text, "entries")
    except ValueError as e:
        result.errors.append(f"Cannot read JSON: {e}")
        return result
    for n, item in enumerate(items, 1):
        entry = read_entry(chart, item, n, result.errors)
        if entry is not None:
            result.entries.append(entry)
    logger.info(
        "Entry import: %d entries accepted, %d errors",
        len(result.entries),
        len(result.errors),
    )
    return result
