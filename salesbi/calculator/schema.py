# ==============================================================================
# salesbi/calculator/schema.py
# ------------------------------------------------------------------------------
# Fixed reference tables: the calendar, the enumerated sellers and cost
# fields, and the monthly target schedule. Nothing here is user-editable.
# This module is the single source of truth for the hydrator and validator.
# ==============================================================================

from dataclasses import dataclass, field
from enum import Enum

MONTHS = (
    'Jan', 'Fev', 'Mar', 'Abr', 'Mai', 'Jun',
    'Jul', 'Ago', 'Set', 'Out', 'Nov', 'Dez'
)

PLANNING_YEARS = ('2026', '2027', '2028', '2029', '2030')
HISTORICAL_YEARS = (2021, 2022, 2023, 2024, 2025)

QUARTERS = {
    'Q1': MONTHS[0:3],
    'Q2': MONTHS[3:6],
    'Q3': MONTHS[6:9],
    'Q4': MONTHS[9:12],
}

SNAPSHOT_SECTIONS = ('revenue', 'operational', 'projections')


class Seller(str, Enum):
    SYLLAS = 'syllas'
    V1 = 'v1'
    V2 = 'v2'
    V3 = 'v3'

    @property
    def label(self):
        return SELLER_LABELS[self]


SELLER_LABELS = {
    Seller.SYLLAS: 'Syllas (Dir.)',
    Seller.V1: 'Vendedora 01',
    Seller.V2: 'Vendedora 02',
    Seller.V3: 'Vendedor 03',
}

# Canonical seller ordering; ties in rankings resolve to the earlier entry.
SELLERS = tuple(Seller)


class CostField(str, Enum):
    ZM = 'zm'
    TERCEIRO = 'terceiro'
    CORREIOS = 'correios'
    MERCADORIA = 'mercadoria'


LOGISTICS_FIELDS = (CostField.ZM, CostField.TERCEIRO, CostField.CORREIOS)
GOODS_FIELD = CostField.MERCADORIA
COST_FIELDS = tuple(CostField)


@dataclass(frozen=True)
class MonthlyTarget:
    month: str
    targets: dict = field(default_factory=dict)  # Seller -> amount
    total: float = 0.0
    obs: str = ''


def seller_target(goal, seller):
    """Target of one seller in a month; every Seller has an entry."""
    return goal.targets[Seller(seller)]


def _goal(month, syllas, v1, v2, v3, total, obs):
    targets = {Seller.SYLLAS: syllas, Seller.V1: v1, Seller.V2: v2, Seller.V3: v3}
    return MonthlyTarget(month=month, targets=targets, total=total, obs=obs)


TARGET_GOALS = (
    _goal('Jan', 118500, 24000, 0, 0, 142500, 'Ramp-up inicial da V1 (90%)'),
    _goal('Fev', 138000, 28000, 26000, 0, 192000, 'Entrada da V2 + V1 estabiliza em 30k'),
    _goal('Mar', 100000, 42000, 26000, 0, 168000, 'V1 sobe para 50k'),
    _goal('Abr', 98000, 43000, 27000, 0, 168000, 'Consolidação dos fluxos'),
    _goal('Mai', 94000, 44000, 27000, 0, 165000, 'Foco em cadências + CRM'),
    _goal('Jun', 89000, 44000, 27000, 0, 160000, 'Mês historicamente de menor giro'),
    _goal('Jul', 103000, 42000, 42000, 0, 187000, 'V2 atinge 50k'),
    _goal('Ago', 116000, 40000, 40000, 0, 196000, 'Estabilização'),
    _goal('Set', 128000, 39000, 39000, 0, 206000, 'Mês-chave para meta anual'),
    _goal('Out', 136000, 38000, 38000, 0, 212000, 'Início do pico anual'),
    _goal('Nov', 144000, 37000, 37000, 0, 218000, 'Força máxima da indústria'),
    _goal('Dez', 125000, 40000, 40000, 0, 205000, 'Fechamento fiscal + projetos'),
)

TARGETS_BY_MONTH = {goal.month: goal for goal in TARGET_GOALS}
