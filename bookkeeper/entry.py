import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from .base import Amount, EntryError, Numeric, Side, to_cents
from .chart import Chart, new_id


class Posting(BaseModel):
    """Debit or credit of a positive amount to an analytic account."""

    model_config = ConfigDict(frozen=True)

    account_id: str
    side: Side
    amount: Decimal = Field(gt=0)

    @property
    def signed_amount(self) -> Decimal:
        """Amount with debit positive and credit negative."""
        return self.amount * self.side.sign


class JournalEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    date: datetime.date
    description: str
    postings: tuple[Posting, ...]
    is_deleted: bool = False
    is_closing_entry: bool = False

    def __iter__(self) -> Iterator[Posting]:  # type: ignore
        return iter(self.postings)

    @property
    def total_debits(self) -> Decimal:
        return sum((p.amount for p in self.postings if p.side is Side.Debit), Decimal(0))

    @property
    def total_credits(self) -> Decimal:
        return sum((p.amount for p in self.postings if p.side is Side.Credit), Decimal(0))

    def is_balanced(self) -> bool:
        """Return True if debits equal credits to the cent."""
        return to_cents(self.total_debits) == to_cents(self.total_credits)

    def touches(self, account_ids: Iterable[str]) -> bool:
        ids = set(account_ids)
        return any(p.account_id in ids for p in self.postings)


def live(entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    """Entries that are not soft-deleted."""
    return [e for e in entries if not e.is_deleted]


def period(entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    """Entries of the current exercise: not deleted and not closing entries."""
    return [e for e in entries if not e.is_deleted and not e.is_closing_entry]


def is_closed(entries: Iterable[JournalEntry]) -> bool:
    """Return True if the current exercise already has closing entries."""
    return any(e.is_closing_entry for e in live(entries))


def check_entry(chart: Chart, entry: JournalEntry):
    """Raise `EntryError` if *entry* cannot be posted to the ledger."""
    if len(entry.postings) < 2:
        raise EntryError(f"Entry '{entry.description}' must have at least two postings.")
    for posting in entry.postings:
        account = chart.find(posting.account_id)
        if account is None:
            raise EntryError(f"Account {posting.account_id} not found.")
        if not account.is_analytic:
            raise EntryError(
                f"Account {account.label} is synthetic and cannot receive postings."
            )
    if not entry.is_balanced():
        raise EntryError(
            f"Debits {entry.total_debits} and credits {entry.total_credits} "
            f"are not balanced for entry '{entry.description}'."
        )


@dataclass
class Entry:
    """User interface for creating a double or multiple entry."""

    title: str
    debits: list[tuple[str, Amount]] = field(default_factory=list)
    credits: list[tuple[str, Amount]] = field(default_factory=list)
    _amount: Amount | None = None

    def amount(self, amount: Numeric):
        """Set amount for the entry."""
        self._amount = Decimal(str(amount))
        return self

    def get_amount(self, amount: Numeric | None = None) -> Amount:
        """Use provided amount, default amount or raise error if no data about amount."""
        if amount is None:
            if self._amount:
                return self._amount
            raise EntryError("Amount is not set.")
        return Decimal(str(amount))

    def debit(self, account_id: str, amount: Numeric | None = None):
        self.debits.append((account_id, self.get_amount(amount)))
        return self

    def credit(self, account_id: str, amount: Numeric | None = None):
        self.credits.append((account_id, self.get_amount(amount)))
        return self

    def double(self, debit: str, credit: str, amount: Numeric):
        self.debit(debit, amount)
        self.credit(credit, amount)
        return self

    def __iter__(self) -> Iterator[Posting]:
        for account_id, amount in self.debits:
            yield Posting(account_id=account_id, side=Side.Debit, amount=amount)
        for account_id, amount in self.credits:
            yield Posting(account_id=account_id, side=Side.Credit, amount=amount)

    def to_journal_entry(
        self, on: datetime.date, is_closing_entry: bool = False
    ) -> JournalEntry:
        entry = JournalEntry(
            date=on,
            description=self.title,
            postings=tuple(self),
            is_closing_entry=is_closing_entry,
        )
        if not entry.is_balanced():
            raise EntryError(
                f"Debits {entry.total_debits} and credits {entry.total_credits} "
                f"are not balanced for entry '{self.title}'."
            )
        return entry
