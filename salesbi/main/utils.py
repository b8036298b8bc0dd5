# ==============================================================================
# salesbi/main/utils.py
# ------------------------------------------------------------------------------
# Glue between the web layer and the engine: the live snapshot held by the
# application, edit dispatch and JSON-friendly conversion of the views.
# ==============================================================================
import dataclasses
import logging

from flask import current_app

from salesbi.calculator.state import (apply_operational_edit, apply_projection_edit,
                                      apply_revenue_edit, hydrate)
from salesbi.storage import load_payload

SNAPSHOT_EXTENSION = 'salesbi.snapshot'

def get_live_snapshot():
    """
    The application's in-memory snapshot, hydrated from storage on first use.
    Edits mutate it in place; nothing is persisted until save.
    """
    snapshot = current_app.extensions.get(SNAPSHOT_EXTENSION)
    if snapshot is None:
        raw = load_payload(current_app.config['SNAPSHOT_STORAGE_KEY'])
        snapshot = hydrate(raw)
        current_app.extensions[SNAPSHOT_EXTENSION] = snapshot
    return snapshot

def reset_live_snapshot():
    """Forgets the in-memory snapshot so the next read rehydrates from storage."""
    current_app.extensions.pop(SNAPSHOT_EXTENSION, None)

def apply_edit(snapshot, kind, edit):
    """Routes a validated edit to the matching writer and returns the stored amount."""
    if kind == 'revenue':
        return apply_revenue_edit(snapshot, edit['year'], edit['month'], edit['seller'], edit.get('value'))
    if kind == 'operational':
        return apply_operational_edit(snapshot, edit['year'], edit['month'], edit['field'], edit.get('value'))
    if kind == 'projections':
        return apply_projection_edit(snapshot, edit['client_id'], edit['year'], edit.get('value'))
    raise ValueError(f"Unknown edit type '{kind}'")

def _to_primitive(value):
    if dataclasses.is_dataclass(value):
        return {f.name: _to_primitive(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _to_primitive(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_primitive(v) for v in value]
    return value

def prepare_dashboard_payload(dashboard):
    """
    Transforms the engine views into plain dicts/lists for jsonify, adding
    the derived lists (Pareto curve, idle clients) the frontend charts use.
    """
    payload = _to_primitive(dashboard)
    payload['portfolio']['pareto'] = dashboard['portfolio'].pareto
    payload['opportunity']['idle_clients'] = [row.client_id for row in dashboard['opportunity'].idle_clients]
    logging.debug(f"Dashboard payload prepared for {dashboard['year']}/{dashboard['month']}")
    return payload
