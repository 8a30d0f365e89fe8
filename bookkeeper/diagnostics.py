"""Consistency checks over a chart and journal.

Checks never raise and never block reports, they return `Issue` records.
"""

import logging
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict

from .balances import period_raw_balances, presentation_balances
from .base import EPSILON
from .chart import UNRESOLVED, Chart
from .config import Settings, settings as default_settings
from .entry import JournalEntry, live
from .reports import derive_balance_sheet

logger = logging.getLogger(__name__)


class Severity(Enum):
    Error = "error"
    Warning = "warning"


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    severity: Severity = Severity.Error
    account_id: str | None = None
    entry_id: str | None = None


def unclassified_result_accounts(
    chart: Chart, entries: list[JournalEntry]
) -> list[Issue]:
    raw = period_raw_balances(chart, entries)
    return [
        Issue(
            id=f"unclassified_result_{account.id}",
            title="Result account without income statement class",
            description=(
                f"Account {account.label} has a balance in the period but no "
                "income statement class, it is left out of net income."
            ),
            account_id=account.id,
        )
        for account in chart.analytic()
        if account.nature.is_result
        and account.income_statement_class is None
        and raw.get(account.id, 0) != 0
    ]


def orphan_accounts(chart: Chart) -> list[Issue]:
    issues = []
    index = chart.index
    for account in chart.sorted():
        if account.is_analytic and account.parent_id is None:
            issues.append(
                Issue(
                    id=f"no_parent_{account.id}",
                    title="Analytic account without parent",
                    description=(
                        f"Analytic account {account.label} does not belong "
                        "to any synthetic account."
                    ),
                    account_id=account.id,
                )
            )
        elif account.parent_id is not None and account.parent_id not in index:
            issues.append(
                Issue(
                    id=f"missing_parent_{account.id}",
                    title="Parent account not found",
                    description=(
                        f"Account {account.label} refers to parent "
                        f"{account.parent_id} that is not in the chart."
                    ),
                    account_id=account.id,
                )
            )
    return issues


def circular_accounts(chart: Chart) -> list[Issue]:
    depths = chart.depths()
    return [
        Issue(
            id=f"circular_parent_{account.id}",
            title="Circular parentage",
            description=(
                f"Account {account.label} is its own ancestor, "
                "its balance is not rolled up."
            ),
            account_id=account.id,
        )
        for account in chart.sorted()
        if depths[account.id] == UNRESOLVED
    ]


def unbalanced_entries(entries: list[JournalEntry]) -> list[Issue]:
    return [
        Issue(
            id=f"unbalanced_entry_{entry.id}",
            title="Unbalanced entry",
            description=(
                f"Entry of {entry.date} '{entry.description}' is not balanced. "
                f"Debits: {entry.total_debits}, credits: {entry.total_credits}."
            ),
            entry_id=entry.id,
        )
        for entry in entries
        if abs(entry.total_debits - entry.total_credits) > EPSILON
    ]


def invalid_postings(chart: Chart, entries: list[JournalEntry]) -> list[Issue]:
    issues = []
    index = chart.index
    for entry in entries:
        for posting in entry.postings:
            account = index.get(posting.account_id)
            if account is None:
                reason = f"unknown account {posting.account_id}"
            elif account.is_synthetic:
                reason = f"synthetic account {account.label}"
            else:
                continue
            issues.append(
                Issue(
                    id=f"invalid_posting_{entry.id}_{posting.account_id}",
                    title="Posting to an account that cannot receive postings",
                    description=(
                        f"Entry '{entry.description}' posts to {reason}, "
                        "the amount is ignored in balances."
                    ),
                    account_id=posting.account_id,
                    entry_id=entry.id,
                )
            )
    return issues


def unbalanced_balance_sheet(
    chart: Chart, entries: list[JournalEntry], settings: Settings
) -> list[Issue]:
    balances = presentation_balances(chart, entries, settings)
    sheet = derive_balance_sheet(chart, balances, settings)
    if sheet.is_balanced():
        return []
    return [
        Issue(
            id="unbalanced_balance_sheet",
            title="Balance sheet is not balanced",
            description=(
                f"Assets ({sheet.assets}) are not equal to liabilities and "
                f"equity ({sheet.liabilities_and_equity}). "
                f"The difference is {sheet.difference}."
            ),
        )
    ]


def diagnose(
    chart: Chart,
    entries: Iterable[JournalEntry],
    settings: Settings | None = None,
) -> list[Issue]:
    """Run all consistency checks and return found issues."""
    settings = settings or default_settings
    entries = live(entries)
    issues = [
        *unclassified_result_accounts(chart, entries),
        *orphan_accounts(chart),
        *circular_accounts(chart),
        *unbalanced_entries(entries),
        *invalid_postings(chart, entries),
        *unbalanced_balance_sheet(chart, entries, settings),
    ]
    logger.info(
        "Diagnostics found %d issues for %d accounts and %d entries",
        len(issues),
        len(chart),
        len(entries),
    )
    return issues
