from datetime import date
from decimal import Decimal

import pytest

from bookkeeper import Entry
from bookkeeper.balances import presentation_balances
from bookkeeper.reports import derive_balance_sheet, section_lines


@pytest.mark.report
def test_balance_sheet(company):
    sheet = company.balance_sheet()
    assert sheet.assets == 25_000
    assert sheet.liabilities == 13_000
    assert sheet.equity == 12_000
    assert sheet.difference == 0
    assert sheet.is_balanced()


@pytest.mark.report
def test_balance_sheet_lines_are_ordered_by_code(company):
    sheet = company.balance_sheet()
    codes = [line.code for line in sheet.asset_lines]
    assert codes == [
        "1.1",
        "1.1.1",
        "1.1.1.01",
        "1.1.1.02",
        "1.1.2",
        "1.1.2.01",
        "1.1.3",
        "1.1.3.01",
        "1.2",
        "1.2.1",
        "1.2.1.01",
        "1.2.1.09",
    ]
    assert sheet.asset_lines[0].level == 1
    assert sheet.asset_lines[-1].balance == -500


@pytest.mark.report
def test_zero_balances_are_not_listed(scenario_chart):
    balances = presentation_balances(scenario_chart, [])
    assert section_lines(scenario_chart, balances, "1") == []


@pytest.mark.report
def test_scenario_balance_sheet(scenario_chart, scenario_entries):
    balances = presentation_balances(scenario_chart, scenario_entries)
    sheet = derive_balance_sheet(scenario_chart, balances)
    assert (sheet.assets, sheet.liabilities, sheet.equity) == (1000, 0, 1000)


@pytest.mark.report
def test_balance_sheet_save_and_load(company, tmp_path):
    sheet = company.balance_sheet()
    path = tmp_path / "balance_sheet.json"
    sheet.save(path)
    assert type(sheet).load(path) == sheet
    with pytest.raises(FileExistsError):
        sheet.save(path)


@pytest.mark.report
def test_equity_changes(company):
    changes = company.equity_changes()
    assert changes.capital_opening == 0
    assert changes.capital_increase == 10_000
    assert changes.capital_closing == 10_000
    assert changes.retained_opening == 0
    assert changes.net_income == 2000
    assert changes.retained_closing == 2000
    assert changes.closing_total == company.balance_sheet().equity


@pytest.mark.report
def test_equity_changes_infer_opening_balances(company):
    # a second capital contribution and a loss keep the roll-forward consistent
    company = company.post(
        Entry("Capital call").double(company.code("1.1.1.01"), company.code("3.1.01"), 2500),
        date(2024, 6, 1),
    )
    company = company.post(
        Entry("Fine").double(company.code("5.4.01"), company.code("1.1.1.01"), Decimal(3000)),
        date(2024, 6, 2),
    )
    changes = company.equity_changes()
    assert changes.capital_increase == 12_500
    assert changes.net_income == -1000
    assert changes.opening_total + changes.capital_increase + changes.net_income == changes.closing_total
