from datetime import date
from decimal import Decimal

import pytest

from bookkeeper import Chart, Entry, Kind, Nature
from bookkeeper.balances import (
    account_movement,
    account_statement,
    presentation_balances,
    raw_balances,
    reconcile_open_period,
    roll_up,
    signed_balances,
)

from conftest import account


@pytest.fixture
def three_levels():
    return [
        account("1", Nature.Asset, kind=Kind.Synthetic),
        account("1.1", Nature.Asset, "1", kind=Kind.Synthetic),
        account("1.1.01", Nature.Asset, "1.1"),
        account("1.1.02", Nature.Asset, "1.1"),
        account("1.1.03", Nature.Asset, "1.1"),
    ]


@pytest.mark.balances
@pytest.mark.parametrize("reverse", [False, True])
def test_roll_up_sums_children(three_levels, reverse):
    accounts = list(reversed(three_levels)) if reverse else three_levels
    chart = Chart(accounts=tuple(accounts))
    balances = {"1.1.01": Decimal(100), "1.1.02": Decimal(-40), "1.1.03": Decimal(25)}
    result = roll_up(chart, balances)
    assert result["1.1"] == 85
    assert result["1"] == 85
    assert result["1.1.02"] == -40


@pytest.mark.balances
def test_roll_up_skips_circular_accounts():
    chart = Chart(
        accounts=(
            account("1", Nature.Asset, kind=Kind.Synthetic),
            account("a", Nature.Asset, "b", kind=Kind.Synthetic),
            account("b", Nature.Asset, "a", kind=Kind.Synthetic),
            account("b.1", Nature.Asset, "b"),
            account("1.1", Nature.Asset, "1"),
        )
    )
    result = roll_up(chart, {"b.1": Decimal(10), "1.1": Decimal(5)})
    assert result["1"] == 5
    assert result["b.1"] == 10


@pytest.mark.balances
def test_contra_account_sign():
    chart = Chart(
        accounts=(
            account("1.2.1.09", Nature.Asset, is_contra=True),
            account("2.1", Nature.Liability),
        )
    )
    raw = {"1.2.1.09": Decimal(-500), "2.1": Decimal(-500)}
    signed = signed_balances(chart, raw)
    assert signed["1.2.1.09"] == -500
    assert signed["2.1"] == 500


@pytest.mark.balances
def test_raw_balances_ignore_synthetic_accounts(scenario_chart, scenario_entries):
    raw = raw_balances(scenario_chart, scenario_entries)
    assert raw == {
        "1": 0,
        "1.1": 1000,
        "2": 0,
        "2.1": 0,
        "3": 0,
        "3.2.1.01": 0,
        "4.1": -1000,
    }


@pytest.mark.balances
def test_scenario(scenario_chart, scenario_entries):
    balances = presentation_balances(scenario_chart, scenario_entries)
    assert balances["1"] == 1000
    assert balances["2"] == 0
    assert balances["3"] == 1000
    assert balances["3.2.1.01"] == 1000
    assert balances["1"] == balances["2"] + balances["3"]


@pytest.mark.balances
def test_reconciliation_is_skipped_for_closed_period(scenario_chart, scenario_entries):
    closing = scenario_entries[0].model_copy(update=dict(id="c", is_closing_entry=True))
    balances = {a.id: Decimal(0) for a in scenario_chart}
    assert reconcile_open_period(scenario_chart, [closing], balances) == balances


@pytest.mark.balances
def test_deleted_entries_are_ignored(scenario_chart, scenario_entries):
    deleted = scenario_entries[0].model_copy(update=dict(is_deleted=True))
    balances = presentation_balances(scenario_chart, [deleted])
    assert all(value == 0 for value in balances.values())


@pytest.mark.balances
def test_balance_invariant_open_and_closed(company):
    for c in [company, company.close_period()]:
        balances = c.balances()
        assert balances[c.code("1")] == balances[c.code("2")] + balances[c.code("3")]


@pytest.mark.balances
def test_presentation_balances_do_not_change_inputs(scenario_chart, scenario_entries):
    before = (scenario_chart.model_dump(), [e.model_dump() for e in scenario_entries])
    presentation_balances(scenario_chart, scenario_entries)
    assert before == (scenario_chart.model_dump(), [e.model_dump() for e in scenario_entries])


@pytest.mark.balances
def test_account_movement_over_subtree(company):
    movement = account_movement(company.chart, company.entries, company.code("1.1.1"))
    assert movement.total_debits == 24_000
    assert movement.total_credits == 9500
    assert movement.net_change == 14_500


@pytest.mark.balances
def test_account_statement_running_balance(company):
    cash = company.code("1.1.1.01")
    statement = account_statement(company.chart, company.entries, cash)
    assert len(statement.lines) == 3
    assert statement.lines[-1].balance == 12_500
    assert statement.total_debits == 14_000
    assert statement.total_credits == 1500
    assert statement.final_balance == 12_500


@pytest.mark.balances
def test_account_statement_of_contra_account(company):
    statement = company.account_statement(company.code("1.2.1.09"))
    assert statement.final_balance == 500


@pytest.mark.balances
def test_account_statement_is_sorted_by_date(scenario_chart):
    entries = [
        Entry("Later").double("1.1", "4.1", 10).to_journal_entry(date(2024, 5, 1)),
        Entry("Earlier").double("1.1", "4.1", 20).to_journal_entry(date(2024, 1, 1)),
    ]
    statement = account_statement(scenario_chart, entries, "1.1")
    assert [line.description for line in statement.lines] == ["Earlier", "Later"]
    assert [line.balance for line in statement.lines] == [20, 30]
