from .base import (
    AccountError,
    BookkeeperError,
    CashFlowClass,
    ClosingError,
    EntryError,
    IncomeStatementClass,
    Kind,
    Nature,
    Side,
)
from .chart import Account, Chart
from .company import Company
from .config import Settings
from .default_chart import default_chart
from .entry import Entry, JournalEntry, Posting
from .store import JsonFileRepository
