# tests/test_portfolio.py

import pytest

from salesbi.calculator.clients import HISTORICAL_TOP_CLIENTS, AggregateHistory, TopClient, YearlyHistory
from salesbi.calculator.engine import (AnalyticsConfig, ClientStatus, classify_client, classify_portfolio,
                                       estimate_opportunity_cost, growth_pct, pareto_curve)
from salesbi.calculator.state import apply_projection_edit, build_skeleton

TOLERANCE = 0.01


def _history(value_2025, earlier=100):
    return YearlyHistory({2021: earlier, 2022: earlier, 2023: earlier, 2024: earlier, 2025: value_2025})


@pytest.fixture
def cohort():
    """Small cohort with one client per classification outcome."""
    return (
        TopClient('a', 'ALPHA', _history(100)),
        TopClient('b', 'BRAVO', _history(500)),
        TopClient('c', 'CHARLIE', _history(100)),
        TopClient('d', 'DELTA', _history(100)),
        TopClient('e', 'ECHO', _history(0, earlier=0)),
    )


@pytest.fixture
def cohort_snapshot(cohort):
    snapshot = build_skeleton(cohort)
    apply_projection_edit(snapshot, 'a', '2026', '130')   # +30% -> star
    apply_projection_edit(snapshot, 'b', '2026', '0')     # was 500 -> churn
    apply_projection_edit(snapshot, 'c', '2026', '70')    # -30% -> decrease
    apply_projection_edit(snapshot, 'd', '2026', '100')   # flat -> stable
    return snapshot


def test_classification_precedence_and_thresholds():
    config = AnalyticsConfig()
    assert classify_client(0, 500, config) == ClientStatus.CHURN
    assert classify_client(130, 100, config) == ClientStatus.STAR
    assert classify_client(120, 100, config) == ClientStatus.STABLE
    assert classify_client(70, 100, config) == ClientStatus.DECREASE
    assert classify_client(80, 100, config) == ClientStatus.STABLE
    assert classify_client(0, 0, config) == ClientStatus.STABLE
    assert classify_client(50, 0, config) == ClientStatus.STAR


def test_thresholds_are_configurable():
    strict = AnalyticsConfig(star_growth_multiplier=1.3, decline_multiplier=0.7)
    assert classify_client(125, 100, strict) == ClientStatus.STABLE
    assert classify_client(75, 100, strict) == ClientStatus.STABLE
    assert classify_client(69, 100, strict) == ClientStatus.DECREASE


def test_growth_percentage():
    assert abs(growth_pct(130, 100) - 30.0) < TOLERANCE
    assert growth_pct(130, 0) == 0.0


def test_portfolio_rows_are_sorted_and_classified(cohort, cohort_snapshot):
    portfolio = classify_portfolio(cohort_snapshot, '2026', clients=cohort)
    assert portfolio.prior_year == '2025'
    assert [r.client_id for r in portfolio.rows] == ['a', 'd', 'c', 'b', 'e']

    statuses = {r.client_id: r.status for r in portfolio.rows}
    assert statuses == {'a': 'star', 'b': 'churn', 'c': 'decrease', 'd': 'stable', 'e': 'stable'}

    alpha = portfolio.rows[0]
    assert alpha.prior == 100 and abs(alpha.growth_pct - 30.0) < TOLERANCE
    assert abs(alpha.share_pct - 130 / 300 * 100) < TOLERANCE


def test_pareto_example():
    clients = (
        TopClient('x', 'X', _history(0)),
        TopClient('y', 'Y', _history(0)),
        TopClient('z', 'Z', _history(0)),
    )
    snapshot = build_skeleton(clients)
    apply_projection_edit(snapshot, 'x', '2026', '100')
    apply_projection_edit(snapshot, 'y', '2026', '600')
    apply_projection_edit(snapshot, 'z', '2026', '300')

    portfolio = classify_portfolio(snapshot, '2026', clients=clients)
    assert [r.client_id for r in portfolio.rows] == ['y', 'z', 'x']
    assert portfolio.pareto == pytest.approx([60.0, 90.0, 100.0])
    assert portfolio.pareto[-1] == 100.0


def test_pareto_curve_properties():
    curve = pareto_curve([786692, 284869, 143580, 123748, 57016, 44211, 13353, 0])
    assert curve == sorted(curve)
    assert all(0 <= v <= 100 for v in curve)
    assert curve[-1] == 100.0


def test_pareto_curve_of_zero_total_is_all_zero():
    assert pareto_curve([0, 0, 0]) == [0.0, 0.0, 0.0]
    assert pareto_curve([]) == []


def test_aggregate_history_compares_against_average():
    clients = (TopClient('agg', 'AGGREGATED', AggregateHistory(500)),)
    snapshot = build_skeleton(clients)
    apply_projection_edit(snapshot, 'agg', '2026', '150')

    row = classify_portfolio(snapshot, '2026', clients=clients).rows[0]
    assert row.prior == 100.0
    assert row.status == 'star'
    assert abs(row.growth_pct - 50.0) < TOLERANCE


def test_prior_year_inside_the_planning_horizon(cohort):
    snapshot = build_skeleton(cohort)
    apply_projection_edit(snapshot, 'a', '2026', '1000')
    apply_projection_edit(snapshot, 'a', '2027', '500')

    portfolio = classify_portfolio(snapshot, '2027', clients=cohort)
    alpha = next(r for r in portfolio.rows if r.client_id == 'a')
    assert portfolio.prior_year == '2026'
    assert alpha.prior == 1000 and alpha.status == 'decrease'


def test_historical_year_as_current(snapshot):
    portfolio = classify_portfolio(snapshot, 2025, 2024)
    assert portfolio.rows[0].name == 'FERTIPAR BANDEIRANTES LTDA'
    assert portfolio.rows[0].current == 786692
    statuses = {r.client_id: r.status for r in portfolio.rows}
    assert statuses['c10'] == 'stable'      # 0 in both years
    assert statuses['c19'] == 'churn'       # 12736 -> 0
    assert statuses['c9'] == 'star'         # 0 -> 13258


def test_opportunity_cost_example():
    clients = (
        TopClient('idle', 'IDLE CO', YearlyHistory({2021: 100, 2022: 100, 2023: 100, 2024: 100, 2025: 100})),
        TopClient('busy', 'BUSY CO', YearlyHistory({2021: 200, 2022: 200, 2023: 200, 2024: 200, 2025: 200})),
    )
    snapshot = build_skeleton(clients)
    apply_projection_edit(snapshot, 'busy', '2026', '300')

    summary = estimate_opportunity_cost(snapshot, '2026', clients=clients)
    rows = {r.client_id: r for r in summary.rows}
    assert rows['idle'].is_idle and rows['idle'].opportunity_cost == 100.0
    assert not rows['busy'].is_idle and rows['busy'].opportunity_cost == 0.0
    assert abs(rows['busy'].performance_vs_history - 50.0) < TOLERANCE
    assert rows['idle'].performance_vs_history == -100.0
    assert summary.total_opportunity_cost == 100.0
    assert [r.client_id for r in summary.idle_clients] == ['idle']
    assert [r.client_id for r in summary.rows] == ['busy', 'idle']


def test_opportunity_cost_over_the_real_cohort(snapshot):
    apply_projection_edit(snapshot, 'c2', '2026', '900.000')
    summary = estimate_opportunity_cost(snapshot, '2026')

    assert all(r.opportunity_cost >= 0 for r in summary.rows)
    assert next(r for r in summary.rows if r.client_id == 'c2').opportunity_cost == 0.0
    expected = sum(c.history.average() for c in HISTORICAL_TOP_CLIENTS if c.id != 'c2')
    assert abs(summary.total_opportunity_cost - expected) < TOLERANCE


def test_aggregate_history_average():
    history = AggregateHistory(1000)
    assert history.average() == 200.0
    assert history.value_for(2023) is None
    assert YearlyHistory({2021: 5}).value_for(2030) is None


def test_negative_projection_keeps_the_curve_within_bounds(cohort):
    assert pareto_curve([100.0, 0.0, -50.0]) == [100.0, 100.0, 100.0]

    snapshot = build_skeleton(cohort)
    apply_projection_edit(snapshot, 'a', '2026', '300')
    apply_projection_edit(snapshot, 'b', '2026', '100')
    apply_projection_edit(snapshot, 'c', '2026', '-50')

    portfolio = classify_portfolio(snapshot, '2026', clients=cohort)
    assert portfolio.pareto == sorted(portfolio.pareto)
    assert all(0 <= v <= 100 for v in portfolio.pareto)
    assert portfolio.pareto[-1] == 100.0
    assert portfolio.grand_total == 400.0
    charlie = next(r for r in portfolio.rows if r.client_id == 'c')
    assert charlie.current == -50.0 and charlie.share_pct == 0.0


def test_aggregate_history_in_a_historical_year_uses_the_average():
    clients = (TopClient('agg', 'AGGREGATED', AggregateHistory(500)),)
    snapshot = build_skeleton(clients)

    row = classify_portfolio(snapshot, 2025, 2024, clients=clients).rows[0]
    assert row.current == 100.0 and row.prior == 100.0
    assert row.status == 'stable'

    summary = estimate_opportunity_cost(snapshot, 2025, clients=clients)
    assert summary.idle_clients == []
    assert summary.total_opportunity_cost == 0.0
