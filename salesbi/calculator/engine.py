# ==============================================================================
# salesbi/calculator/engine.py
# ------------------------------------------------------------------------------
# Derivation engine: revenue vs target rollups, seller attainment, client
# portfolio classification, idle-client opportunity cost and operational
# efficiency. Every function here is a pure read of the snapshot.
# ==============================================================================

import logging
from dataclasses import dataclass, field
from enum import Enum

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from salesbi import db
from salesbi.models import AppSetting
from .clients import HISTORICAL_TOP_CLIENTS
from .schema import (GOODS_FIELD, LOGISTICS_FIELDS, MONTHS, PLANNING_YEARS, QUARTERS, SELLERS,
                     TARGETS_BY_MONTH, seller_target)

# --- Configuration Loader Class ---

class AnalyticsConfig:
    """
    Named thresholds used by the engine. Build it directly with keyword
    overrides, or call AnalyticsConfig.load() for the instance backed by the
    AppSetting table (cached until _instance is reset). An unreadable
    settings table yields the defaults, uncached, so the next call retries.
    """
    _instance = None

    DEFAULTS = {
        'annual_target': 2180000.0,
        'star_growth_multiplier': 1.2,
        'decline_multiplier': 0.8,
        'logistics_warning_pct': 10.0,
        'goods_warning_pct': 50.0,
    }

    SETTING_KEYS = {
        'ANNUAL_TARGET': 'annual_target',
        'STAR_GROWTH_MULTIPLIER': 'star_growth_multiplier',
        'DECLINE_MULTIPLIER': 'decline_multiplier',
        'LOGISTICS_WARNING_PCT': 'logistics_warning_pct',
        'GOODS_WARNING_PCT': 'goods_warning_pct',
    }

    def __init__(self, **overrides):
        unknown = set(overrides) - set(self.DEFAULTS)
        if unknown:
            raise TypeError(f"Unknown analytics settings: {sorted(unknown)}")
        for name, default in self.DEFAULTS.items():
            setattr(self, name, float(overrides.get(name, default)))

    @classmethod
    def load(cls):
        if cls._instance is None:
            logging.info("Creating and loading AnalyticsConfig instance...")
            try:
                settings_dict = {s.key: s.get_value() for s in AppSetting.query.all()}
            except SQLAlchemyError as e:
                logging.error(f"Could not load analytics settings from database, using defaults. Error: {e}")
                db.session.rollback()
                return cls()
            overrides = {attr: settings_dict[key] for key, attr in cls.SETTING_KEYS.items() if key in settings_dict}
            cls._instance = cls(**overrides)
            logging.info("AnalyticsConfig loaded successfully.")
        return cls._instance

    def as_dict(self):
        return {name: getattr(self, name) for name in self.DEFAULTS}


def _pct(part, whole):
    return (part / whole) * 100 if whole > 0 else 0.0


# --- Revenue & Target Aggregator ---

@dataclass
class MonthlyPoint:
    month: str
    meta: float
    realized: float
    percentage: float
    cumulative_real: float
    cumulative_meta: float
    sellers: dict = field(default_factory=dict)
    obs: str = ''


@dataclass
class QuarterPoint:
    quarter: str
    months: tuple
    meta: float
    realized: float
    percentage: float


@dataclass
class RevenueSummary:
    year: str
    monthly: list
    quarterly: list
    total_realized: float
    total_target: float
    attainment: float


def _revenue_frame(snapshot, year):
    year_revenue = snapshot.revenue[str(year)]
    rows = []
    for month in MONTHS:
        row = {'month': month, 'meta': float(TARGETS_BY_MONTH[month].total)}
        for seller in SELLERS:
            row[seller.value] = float(year_revenue[month][seller.value])
        rows.append(row)
    df = pd.DataFrame(rows)
    seller_cols = [s.value for s in SELLERS]
    df['realized'] = df[seller_cols].sum(axis=1)
    return df


def aggregate_revenue(snapshot, year, config=None):
    """
    Monthly, quarterly and annual realized-vs-target for one year. The
    cumulative columns walk the calendar January to December.
    """
    config = config or AnalyticsConfig()
    df = _revenue_frame(snapshot, year)
    df['cumulative_real'] = df['realized'].cumsum()
    df['cumulative_meta'] = df['meta'].cumsum()

    monthly = []
    for _, row in df.iterrows():
        monthly.append(MonthlyPoint(
            month=row['month'],
            meta=float(row['meta']),
            realized=float(row['realized']),
            percentage=_pct(float(row['realized']), float(row['meta'])),
            cumulative_real=float(row['cumulative_real']),
            cumulative_meta=float(row['cumulative_meta']),
            sellers={s.value: float(row[s.value]) for s in SELLERS},
            obs=TARGETS_BY_MONTH[row['month']].obs,
        ))

    quarter_of = {m: q for q, months in QUARTERS.items() for m in months}
    grouped = df.groupby(df['month'].map(quarter_of), sort=False)[['realized', 'meta']].sum()
    quarterly = []
    for quarter, months in QUARTERS.items():
        realized = float(grouped.loc[quarter, 'realized'])
        meta = float(grouped.loc[quarter, 'meta'])
        quarterly.append(QuarterPoint(quarter=quarter, months=months, meta=meta,
                                      realized=realized, percentage=_pct(realized, meta)))

    total_realized = monthly[-1].cumulative_real
    total_target = monthly[-1].cumulative_meta
    attainment = _pct(total_realized, config.annual_target)
    logging.info(f"Revenue {year}: realized={total_realized:,.0f} target={total_target:,.0f} attainment={attainment:.1f}%")

    return RevenueSummary(year=str(year), monthly=monthly, quarterly=quarterly,
                          total_realized=total_realized, total_target=total_target,
                          attainment=attainment)


# --- Seller Performance Evaluator ---

@dataclass
class SellerPerformance:
    seller: str
    label: str
    meta: float
    realized: float
    attainment: float


def seller_attainment(realized, meta):
    """A seller without a target who still sold something counts as 100%."""
    if meta > 0:
        return (realized / meta) * 100
    return 100.0 if realized > 0 else 0.0


def evaluate_sellers(snapshot, year, month):
    goal = TARGETS_BY_MONTH[month]
    results = []
    for seller in SELLERS:
        meta = float(seller_target(goal, seller))
        realized = float(snapshot.seller_amount(year, month, seller))
        results.append(SellerPerformance(seller=seller.value, label=seller.label, meta=meta,
                                         realized=realized, attainment=seller_attainment(realized, meta)))
    return results


def evaluate_sellers_annual(snapshot, year):
    """Ratio of yearly sums, not an average of monthly ratios."""
    results = []
    for seller in SELLERS:
        meta = sum(float(seller_target(TARGETS_BY_MONTH[m], seller)) for m in MONTHS)
        realized = sum(float(snapshot.seller_amount(year, m, seller)) for m in MONTHS)
        results.append(SellerPerformance(seller=seller.value, label=seller.label, meta=meta,
                                         realized=realized, attainment=seller_attainment(realized, meta)))
    return results


def best_seller(performances):
    """
    Highest realized value; the first seller in canonical order wins ties.
    None when nobody sold anything.
    """
    best = None
    for perf in performances:
        if perf.realized > 0 and (best is None or perf.realized > best.realized):
            best = perf
    return best


# --- Client Portfolio Classifier ---

class ClientStatus(str, Enum):
    CHURN = 'churn'
    STAR = 'star'
    DECREASE = 'decrease'
    STABLE = 'stable'


@dataclass
class ClientPortfolioRow:
    client_id: str
    name: str
    current: float
    prior: float
    growth_pct: float
    status: str
    share_pct: float = 0.0
    cumulative_pct: float = 0.0


@dataclass
class PortfolioSummary:
    current_year: str
    prior_year: str
    rows: list
    grand_total: float

    @property
    def pareto(self):
        return [row.cumulative_pct for row in self.rows]


def client_value(snapshot, client, year):
    """
    Value of a client for a year: the snapshot projection inside the planning
    horizon, the recorded history before it. None when the history shape
    cannot answer for a single year.
    """
    if str(year) in PLANNING_YEARS:
        return float(snapshot.projection(client.id, year))
    return client.history.value_for(year)


def classify_client(current, prior, config):
    if current == 0 and prior > 0:
        return ClientStatus.CHURN
    if current > prior * config.star_growth_multiplier:
        return ClientStatus.STAR
    if current < prior * config.decline_multiplier:
        return ClientStatus.DECREASE
    return ClientStatus.STABLE


def growth_pct(current, prior):
    return ((current - prior) / prior) * 100 if prior > 0 else 0.0


def pareto_curve(values):
    """
    Cumulative share (%) of an already sorted sequence; all zeros when the
    total is 0. Negative values contribute nothing to the share.
    """
    if not len(values):
        return []
    cumulative = pd.Series(values, dtype='float64').clip(lower=0).cumsum()
    grand_total = float(cumulative.iloc[-1])
    if grand_total <= 0:
        return [0.0] * len(values)
    return [float(v) for v in (cumulative / grand_total * 100)]


def classify_portfolio(snapshot, current_year, prior_year=None, config=None, clients=HISTORICAL_TOP_CLIENTS):
    """
    Sorts the cohort by its current-year value, classifies each client and
    builds the Pareto concentration curve.
    """
    config = config or AnalyticsConfig()
    prior_year = prior_year if prior_year is not None else int(current_year) - 1

    rows = []
    for client in clients:
        # Aggregate-only histories cannot answer for one year: use their average
        current = client_value(snapshot, client, current_year)
        if current is None:
            current = client.history.average()
        prior = client_value(snapshot, client, prior_year)
        if prior is None:
            prior = client.history.average()
        status = classify_client(current, prior, config)
        rows.append(ClientPortfolioRow(client_id=client.id, name=client.name, current=current, prior=prior,
                                       growth_pct=growth_pct(current, prior), status=status.value))

    rows.sort(key=lambda r: r.current, reverse=True)
    curve = pareto_curve([r.current for r in rows])
    grand_total = sum(max(r.current, 0.0) for r in rows)
    for row, cumulative in zip(rows, curve):
        row.cumulative_pct = cumulative
        row.share_pct = _pct(max(row.current, 0.0), grand_total)

    status_counts = {s.value: sum(1 for r in rows if r.status == s.value) for s in ClientStatus}
    logging.info(f"Portfolio {current_year} vs {prior_year}: total={grand_total:,.0f} statuses={status_counts}")
    return PortfolioSummary(current_year=str(current_year), prior_year=str(prior_year),
                            rows=rows, grand_total=grand_total)


# --- Opportunity Cost Estimator ---

@dataclass
class OpportunityRow:
    client_id: str
    name: str
    historical_total: float
    historical_average: float
    value: float
    is_idle: bool
    opportunity_cost: float
    performance_vs_history: float


@dataclass
class OpportunitySummary:
    year: str
    rows: list
    total_opportunity_cost: float

    @property
    def idle_clients(self):
        return [row for row in self.rows if row.is_idle]


def estimate_opportunity_cost(snapshot, year, clients=HISTORICAL_TOP_CLIENTS):
    """
    An idle client (exactly 0 in the year) is charged one year of its
    historical average revenue.
    """
    rows = []
    for client in clients:
        average = client.history.average()
        value = client_value(snapshot, client, year)
        if value is None:
            value = average
        is_idle = value == 0
        rows.append(OpportunityRow(
            client_id=client.id,
            name=client.name,
            historical_total=client.history.total(),
            historical_average=average,
            value=value,
            is_idle=is_idle,
            opportunity_cost=average if is_idle else 0.0,
            performance_vs_history=((value / average) - 1) * 100 if average > 0 else 0.0,
        ))

    rows.sort(key=lambda r: r.historical_total, reverse=True)
    total = sum(r.opportunity_cost for r in rows)
    logging.info(f"Opportunity cost {year}: {sum(1 for r in rows if r.is_idle)} idle clients, total={total:,.0f}")
    return OpportunitySummary(year=str(year), rows=rows, total_opportunity_cost=total)


# --- Operational Efficiency Calculator ---

@dataclass
class EfficiencyPoint:
    month: str
    realized: float
    logistics: float
    goods: float
    total_cost: float
    margin: float
    logistics_ratio: float
    goods_ratio: float
    cost_ratio: float
    warning: bool


@dataclass
class EfficiencySummary:
    year: str
    monthly: list
    total_realized: float
    total_logistics: float
    total_goods: float
    total_cost: float
    gross_margin: float
    cost_ratio: float
    warning_months: list


def evaluate_efficiency(snapshot, year, config=None):
    config = config or AnalyticsConfig()
    year_revenue = snapshot.revenue[str(year)]
    year_costs = snapshot.operational[str(year)]

    monthly = []
    for month in MONTHS:
        realized = sum(float(year_revenue[month][s.value]) for s in SELLERS)
        costs = year_costs[month]
        logistics = sum(float(costs[f.value]) for f in LOGISTICS_FIELDS)
        goods = float(costs[GOODS_FIELD.value])
        total_cost = logistics + goods
        logistics_ratio = _pct(logistics, realized)
        goods_ratio = _pct(goods, realized)
        warning = logistics_ratio > config.logistics_warning_pct or goods_ratio > config.goods_warning_pct
        if warning:
            logging.debug(f"Efficiency warning {year}/{month}: logistics={logistics_ratio:.1f}% goods={goods_ratio:.1f}%")
        monthly.append(EfficiencyPoint(
            month=month, realized=realized, logistics=logistics, goods=goods,
            total_cost=total_cost, margin=realized - total_cost,
            logistics_ratio=logistics_ratio, goods_ratio=goods_ratio,
            cost_ratio=_pct(total_cost, realized), warning=warning,
        ))

    total_realized = sum(p.realized for p in monthly)
    total_logistics = sum(p.logistics for p in monthly)
    total_goods = sum(p.goods for p in monthly)
    total_cost = total_logistics + total_goods
    return EfficiencySummary(
        year=str(year), monthly=monthly,
        total_realized=total_realized, total_logistics=total_logistics, total_goods=total_goods,
        total_cost=total_cost, gross_margin=total_realized - total_cost,
        cost_ratio=_pct(total_cost, total_realized),
        warning_months=[p.month for p in monthly if p.warning],
    )


# --- Main Orchestrator ---

def build_dashboard(snapshot, year, month=None, config=None):
    """Runs every view on the same snapshot read. month defaults to January."""
    config = config or AnalyticsConfig()
    month = month or MONTHS[0]
    logging.info(f"--- Building dashboard for {year}/{month} ---")

    seller_month = evaluate_sellers(snapshot, year, month)
    seller_year = evaluate_sellers_annual(snapshot, year)
    return {
        'year': str(year),
        'month': month,
        'revenue': aggregate_revenue(snapshot, year, config),
        'sellers': {
            'month': seller_month,
            'annual': seller_year,
            'best_of_month': best_seller(seller_month),
            'best_of_year': best_seller(seller_year),
        },
        'portfolio': classify_portfolio(snapshot, year, config=config),
        'opportunity': estimate_opportunity_cost(snapshot, year),
        'efficiency': evaluate_efficiency(snapshot, year, config),
        'config': config.as_dict(),
    }
