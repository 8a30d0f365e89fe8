from datetime import date
from decimal import Decimal

import pytest

from bookkeeper import ClosingError, Company, Entry, EntryError
from bookkeeper.closing import close_period, has_adjustment, undo_closing


@pytest.mark.closing
def test_close_period_creates_two_closing_entries(company):
    zeroing, transfer = close_period(company.chart, company.entries, company.fiscal_year_start)
    assert zeroing.is_closing_entry and transfer.is_closing_entry
    assert zeroing.date == transfer.date == date(2024, 12, 31)
    assert zeroing.is_balanced() and transfer.is_balanced()
    assert transfer.total_debits == 2000


@pytest.mark.closing
def test_closing_zeroes_result_accounts(company):
    closed = company.close_period()
    balances = closed.balances()
    for code in ["4.1.01", "5.2.1.01", "5.2.3.01", "6.1.1.01", "7.1.1.01", "4", "5", "6"]:
        assert balances[closed.code(code)] == 0
    assert balances[closed.code("3.2.1.01")] == 2000
    assert closed.is_closed


@pytest.mark.closing
def test_reports_survive_closing(company):
    closed = company.close_period()
    assert closed.income_statement() == company.income_statement()
    assert closed.balance_sheet().equity == company.balance_sheet().equity


@pytest.mark.closing
def test_second_closing_is_rejected(company):
    closed = company.close_period()
    with pytest.raises(ClosingError, match="already closed"):
        closed.close_period()
    assert len(closed.entries) == len(company.entries) + 2


@pytest.mark.closing
def test_undo_closing_round_trip(company):
    closed = company.close_period()
    reopened = closed.undo_closing()
    assert reopened.balances() == company.balances()
    assert not reopened.is_closed
    assert reopened.close_period().balances() == closed.balances()


@pytest.mark.closing
def test_undo_closing_of_open_period_is_rejected(company):
    with pytest.raises(ClosingError, match="not closed"):
        undo_closing(company.entries)


@pytest.mark.closing
def test_closing_a_loss():
    c = Company.new("Loss", date(2023, 1, 1))
    c = c.post(Entry("Rent").double(c.code("5.2.2.01"), c.code("1.1.1.01"), 400), date(2023, 2, 1))
    closed = c.close_period()
    assert closed.balances()[c.code("3.2.1.01")] == -400
    assert closed.entries[-1].date == date(2023, 12, 31)
    sheet = closed.balance_sheet()
    assert sheet.is_balanced()


@pytest.mark.closing
def test_nothing_to_close():
    c = Company.new("Idle", date(2024, 1, 1))
    with pytest.raises(ClosingError, match="No result"):
        c.close_period()


@pytest.mark.closing
def test_closing_requires_income_summary_account(company):
    chart = company.chart.remove(company.code("7.1.1.01"))
    with pytest.raises(ClosingError, match="Income summary"):
        close_period(chart, company.entries, company.fiscal_year_start)


@pytest.mark.closing
def test_depreciation_entry(company):
    depreciation = company.entries[-1]
    assert depreciation.description == "Depreciation for March 2024"
    assert company.income_statement().operating_expenses == 2000


@pytest.mark.closing
def test_duplicate_adjustment_in_same_month_is_rejected(company):
    with pytest.raises(EntryError, match="already exists"):
        company.post_depreciation(date(2024, 3, 1), 100)
    company.post_depreciation(date(2024, 3, 1), 100, allow_duplicate=True)
    company.post_depreciation(date(2024, 4, 30), 100)


@pytest.mark.closing
def test_deleted_adjustment_does_not_count(company):
    entry_id = company.entries[-2].id
    assert company.entries[-2].description.startswith("Cost of sales for")
    company = company.delete_entry(entry_id)
    assert not has_adjustment(company.entries, date(2024, 3, 1), "Cost of sales for")
    company.post_cost_of_sales(date(2024, 3, 1), 100)


@pytest.mark.closing
def test_adjustment_amount_must_be_positive(company):
    with pytest.raises(EntryError, match="positive"):
        company.post_cost_of_sales(date(2024, 5, 1), 0)


@pytest.mark.closing
def test_closing_zeroes_one_cent_balance():
    c = Company.new("Fees", date(2024, 1, 1))
    cash = c.code("1.1.1.02")
    c = c.post_many(
        [
            Entry("Sale").double(cash, c.code("4.1.01"), 1000),
            Entry("Bank fee").double(c.code("5.3.02"), cash, Decimal("0.01")),
        ],
        on=date(2024, 2, 1),
    )
    closed = c.close_period()
    balances = closed.balances()
    assert balances[c.code("5.3.02")] == 0
    assert balances[c.code("3.2.1.01")] == Decimal("999.99")
