# ==============================================================================
# salesbi/calculator/state.py
# ------------------------------------------------------------------------------
# The in-memory snapshot (revenue, operational costs, client projections),
# its zero-filled skeleton, hydration from a persisted payload and the
# single edit path that writes user-entered text into it.
# ==============================================================================

import copy
import json
import logging

from .clients import HISTORICAL_TOP_CLIENTS
from .normalizer import normalize_amount
from .schema import COST_FIELDS, MONTHS, PLANNING_YEARS, SELLERS, SNAPSHOT_SECTIONS, CostField, Seller


class Snapshot:
    """
    Root object of the application state. Every planning year, every month,
    every seller / cost field and every tracked client is always present.
    """

    def __init__(self, revenue, operational, projections):
        self.revenue = revenue
        self.operational = operational
        self.projections = projections

    def to_dict(self):
        return {
            'revenue': copy.deepcopy(self.revenue),
            'operational': copy.deepcopy(self.operational),
            'projections': copy.deepcopy(self.projections),
        }

    def to_json(self):
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def seller_amount(self, year, month, seller):
        return self.revenue[str(year)][month][Seller(seller).value]

    def cost_amount(self, year, month, cost_field):
        return self.operational[str(year)][month][CostField(cost_field).value]

    def projection(self, client_id, year):
        return self.projections[client_id][str(year)]


def build_skeleton(clients=HISTORICAL_TOP_CLIENTS):
    """Zero-filled snapshot covering the whole planning horizon."""
    revenue = {}
    operational = {}
    for year in PLANNING_YEARS:
        revenue[year] = {m: {s.value: 0.0 for s in SELLERS} for m in MONTHS}
        operational[year] = {m: {f.value: 0.0 for f in COST_FIELDS} for m in MONTHS}
    projections = {c.id: {year: 0.0 for year in PLANNING_YEARS} for c in clients}
    return Snapshot(revenue, operational, projections)


def _merge(skeleton_node, loaded_node, path):
    """
    Recursive merge down to the leaf. Skeleton keys always survive; a leaf
    present in the loaded payload wins and is coerced to a number.
    """
    if not isinstance(skeleton_node, dict):
        return normalize_amount(loaded_node)
    if not isinstance(loaded_node, dict):
        logging.debug(f"Ignoring non-object value at '{path}'; keeping skeleton defaults.")
        return skeleton_node

    merged = {}
    for key, default in skeleton_node.items():
        if key in loaded_node:
            merged[key] = _merge(default, loaded_node[key], f"{path}/{key}")
        else:
            merged[key] = default
    extra = [key for key in loaded_node if key not in skeleton_node]
    if extra:
        logging.debug(f"Dropping unknown keys at '{path}': {extra}")
    return merged


def hydrate(raw, clients=HISTORICAL_TOP_CLIENTS):
    """
    Builds the snapshot from a persisted payload (JSON text, bytes, an already
    decoded dict or None). Absent or corrupt payloads yield the skeleton; the
    failure is logged, never raised.
    """
    skeleton = build_skeleton(clients)
    if raw is None or raw == '' or raw == b'':
        logging.info("No persisted snapshot found. Starting from the zero-filled skeleton.")
        return skeleton

    payload = raw
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            payload = json.loads(raw)
        except (ValueError, TypeError) as e:
            logging.warning(f"Persisted snapshot is not valid JSON; using skeleton. Error: {e}")
            return skeleton

    if not isinstance(payload, dict):
        logging.warning(f"Persisted snapshot has unexpected type {type(payload).__name__}; using skeleton.")
        return skeleton

    sections = {}
    for section in SNAPSHOT_SECTIONS:
        default = getattr(skeleton, section)
        if section in payload:
            sections[section] = _merge(default, payload[section], section)
        else:
            logging.info(f"Section '{section}' missing from persisted snapshot; using skeleton defaults.")
            sections[section] = default

    logging.info("Persisted snapshot hydrated.")
    return Snapshot(**sections)


# --- Edit path (single writer) ---

def apply_revenue_edit(snapshot, year, month, seller, raw_value):
    amount = normalize_amount(raw_value)
    snapshot.revenue[str(year)][month][Seller(seller).value] = amount
    logging.debug(f"Revenue edit: {year}/{month}/{seller} = {amount:,.2f}")
    return amount


def apply_operational_edit(snapshot, year, month, cost_field, raw_value):
    amount = normalize_amount(raw_value)
    snapshot.operational[str(year)][month][CostField(cost_field).value] = amount
    logging.debug(f"Operational edit: {year}/{month}/{cost_field} = {amount:,.2f}")
    return amount


def apply_projection_edit(snapshot, client_id, year, raw_value):
    amount = normalize_amount(raw_value)
    snapshot.projections[client_id][str(year)] = amount
    logging.debug(f"Projection edit: {client_id}/{year} = {amount:,.2f}")
    return amount
