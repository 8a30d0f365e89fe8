"""Boundary to an external service that suggests entries.

The service is any object with `suggest` and `read_document` methods,
for example a client of a language model. Its replies are not trusted:
account ids must belong to postable accounts and amounts must be positive.
Service errors never propagate, they become `SuggestionFailure`.
"""

import datetime
import logging
from decimal import Decimal
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from .base import EntryError, Numeric
from .chart import Account, Chart
from .entry import Entry, JournalEntry

logger = logging.getLogger(__name__)


class SuggestionOracle(Protocol):
    def suggest(self, text: str, accounts: list[Account]) -> Any:
        """Return mapping with `debit_account_id` and `credit_account_id`."""
        ...

    def read_document(
        self, content: bytes, mime_type: str, accounts: list[Account]
    ) -> Any:
        """Return mapping with account ids and `date`, `description`, `amount`."""
        ...


class Suggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    debit_account_id: str
    credit_account_id: str
    date: datetime.date | None = None
    description: str | None = None
    amount: Decimal | None = None


class SuggestionFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str


class DocumentSuggestion(Suggestion):
    date: datetime.date
    description: str
    amount: Decimal


def accept(
    reply: Any, chart: Chart, model: type[Suggestion]
) -> Suggestion | SuggestionFailure:
    try:
        suggestion = model.model_validate(reply)
    except ValidationError as e:
        logger.warning("Malformed suggestion reply: %s", e)
        return SuggestionFailure(reason="Suggestion service returned a malformed reply.")
    postable = chart.postable_ids()
    if not {suggestion.debit_account_id, suggestion.credit_account_id} <= postable:
        return SuggestionFailure(
            reason="Suggestion service returned accounts that are not in the chart."
        )
    if suggestion.amount is not None and not suggestion.amount > 0:
        return SuggestionFailure(reason="Suggested amount must be positive.")
    return suggestion


def request_suggestion(
    oracle: SuggestionOracle, chart: Chart, text: str
) -> Suggestion | SuggestionFailure:
    """Ask for debit and credit accounts matching entry description *text*."""
    if not text.strip():
        return SuggestionFailure(reason="Entry description cannot be empty.")
    try:
        reply = oracle.suggest(text, chart.analytic())
    except Exception:
        logger.exception("Suggestion service failed")
        return SuggestionFailure(
            reason="Cannot get a suggestion, check the service configuration and try again."
        )
    return accept(reply, chart, Suggestion)


def request_document_suggestion(
    oracle: SuggestionOracle, chart: Chart, content: bytes, mime_type: str
) -> Suggestion | SuggestionFailure:
    """Ask for a complete entry read from a receipt or invoice."""
    if not content or not mime_type:
        return SuggestionFailure(reason="Document is empty or has no type.")
    try:
        reply = oracle.read_document(content, mime_type, chart.analytic())
    except Exception:
        logger.exception("Document reading service failed")
        return SuggestionFailure(
            reason="Cannot read the document, check the service configuration and try again."
        )
    return accept(reply, chart, DocumentSuggestion)


def suggestion_to_entry(
    suggestion: Suggestion,
    on: datetime.date | None = None,
    amount: Numeric | None = None,
    description: str | None = None,
) -> JournalEntry:
    """Create journal entry from suggestion, explicit arguments take precedence."""
    on = on or suggestion.date
    amount = amount if amount is not None else suggestion.amount
    description = description or suggestion.description
    if on is None or amount is None or not description:
        raise EntryError("Date, amount and description are required for an entry.")
    return (
        Entry(description)
        .double(suggestion.debit_account_id, suggestion.credit_account_id, amount)
        .to_journal_entry(on)
    )
