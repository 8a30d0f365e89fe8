from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from bookkeeper import EntryError, JournalEntry, Posting, Side
from bookkeeper.entry import Entry, check_entry, is_closed, live, period


def posting(account_id, side, amount):
    return Posting(account_id=account_id, side=side, amount=Decimal(amount))


@pytest.mark.entry
def test_entry_builder_with_amount():
    entry = Entry("Sale").amount(100).debit("1.1").credit("4.1")
    assert list(entry) == [
        posting("1.1", Side.Debit, 100),
        posting("4.1", Side.Credit, 100),
    ]


@pytest.mark.entry
def test_entry_builder_multiple():
    entry = Entry("Sale with tax").debit("1.1", 120).credit("4.1", 100).credit("2.1", 20)
    journal_entry = entry.to_journal_entry(date(2024, 1, 1))
    assert journal_entry.total_debits == journal_entry.total_credits == 120


@pytest.mark.entry
def test_entry_builder_without_amount_raises():
    with pytest.raises(EntryError):
        Entry("No amount").debit("1.1")


@pytest.mark.entry
def test_unbalanced_entry_raises():
    with pytest.raises(EntryError, match="not balanced"):
        Entry("Bad").debit("1.1", 100).credit("4.1", 99).to_journal_entry(date(2024, 1, 1))


@pytest.mark.entry
def test_posting_amount_must_be_positive():
    with pytest.raises(ValidationError):
        posting("1.1", Side.Debit, 0)


@pytest.mark.entry
def test_balance_is_checked_to_the_cent():
    entry = JournalEntry(
        date=date(2024, 1, 1),
        description="Rounding",
        postings=(
            posting("1.1", Side.Debit, "100.001"),
            posting("4.1", Side.Credit, "100.004"),
        ),
    )
    assert entry.is_balanced()


@pytest.mark.entry
def test_check_entry_accepts_valid_entry(scenario_chart, scenario_entries):
    check_entry(scenario_chart, scenario_entries[0])


@pytest.mark.entry
def test_check_entry_rejects_synthetic_account(scenario_chart):
    entry = Entry("To root").double("1", "4.1", 10).to_journal_entry(date(2024, 1, 1))
    with pytest.raises(EntryError, match="synthetic"):
        check_entry(scenario_chart, entry)


@pytest.mark.entry
def test_check_entry_rejects_unknown_account(scenario_chart):
    entry = Entry("Unknown").double("9.9", "4.1", 10).to_journal_entry(date(2024, 1, 1))
    with pytest.raises(EntryError, match="not found"):
        check_entry(scenario_chart, entry)


@pytest.mark.entry
def test_check_entry_rejects_single_posting(scenario_chart):
    entry = JournalEntry(
        date=date(2024, 1, 1),
        description="Lonely",
        postings=(posting("1.1", Side.Debit, 10),),
    )
    with pytest.raises(EntryError, match="two postings"):
        check_entry(scenario_chart, entry)


@pytest.mark.entry
def test_entry_filters(scenario_entries):
    sale = scenario_entries[0]
    deleted = sale.model_copy(update=dict(id="deleted", is_deleted=True))
    closing = sale.model_copy(update=dict(id="closing", is_closing_entry=True))
    entries = [sale, deleted, closing]
    assert live(entries) == [sale, closing]
    assert period(entries) == [sale]
    assert is_closed(entries)
    assert not is_closed([sale, deleted])
