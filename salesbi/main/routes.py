# ==============================================================================
# salesbi/main/routes.py
# ------------------------------------------------------------------------------
# Defines the JSON routes of the main blueprint: dashboard views, edits,
# saving the snapshot, advisory commentary and analytics settings.
# ==============================================================================

import json
from flask import request, jsonify, current_app
from flask_wtf.csrf import generate_csrf, validate_csrf
from wtforms.validators import ValidationError

from salesbi import db
from salesbi.main import bp
from salesbi.models import AppSetting
from salesbi.advisory import build_advisory_context, request_advisory
from salesbi.calculator.engine import AnalyticsConfig, build_dashboard
from salesbi.calculator.schema import MONTHS, PLANNING_YEARS
from salesbi.calculator.validator import validate_edit
from salesbi.main.forms import (AppSettingForm, OperationalEntryForm, ProjectionEntryForm,
                                RevenueEntryForm)
from salesbi.main.utils import apply_edit, get_live_snapshot, prepare_dashboard_payload
from salesbi.storage import save_payload

EDIT_FORMS = {
    'revenue': RevenueEntryForm,
    'operational': OperationalEntryForm,
    'projections': ProjectionEntryForm,
}

# --- Helper Functions ---

def _selected_period(source):
    """Reads year/month from a mapping, falling back to the defaults."""
    year = str(source.get('year') or current_app.config['DEFAULT_YEAR'])
    month = source.get('month') or MONTHS[0]
    errors = []
    if year not in PLANNING_YEARS:
        errors.append(f"Year '{year}' is outside the planning horizon.")
    if month not in MONTHS:
        errors.append(f"Month '{month}' is not a valid month.")
    return year, month, errors

def _dashboard_response(year, month, **extra):
    dashboard = build_dashboard(get_live_snapshot(), year, month, AnalyticsConfig.load())
    body = {'dashboard': prepare_dashboard_payload(dashboard)}
    body.update(extra)
    return jsonify(body)

# --- Dashboard ---

@bp.route('/api/csrf-token')
def csrf_token():
    """Token the presentation layer sends back with every edit form."""
    return jsonify({'csrf_token': generate_csrf()})

@bp.route('/api/dashboard')
def dashboard():
    """Every view for the selected year and month, recomputed from the live snapshot."""
    year, month, errors = _selected_period(request.args)
    if errors:
        return jsonify({'errors': errors}), 400
    return _dashboard_response(year, month)

# --- Edits ---

def _handle_edit(kind):
    form = EDIT_FORMS[kind]()
    if not form.validate_on_submit():
        current_app.logger.info(f"Rejected {kind} edit: {form.errors}")
        return jsonify({'errors': form.errors}), 400

    edit = {name: value for name, value in form.data.items() if name not in ('submit', 'csrf_token')}
    amount = apply_edit(get_live_snapshot(), kind, edit)
    current_app.logger.info(f"Applied {kind} edit {edit} -> {amount:,.2f}")

    month = edit.get('month') or request.values.get('month') or MONTHS[0]
    return _dashboard_response(edit['year'], month if month in MONTHS else MONTHS[0], stored_value=amount)

@bp.route('/api/revenue', methods=['POST'])
def edit_revenue():
    return _handle_edit('revenue')

@bp.route('/api/operational', methods=['POST'])
def edit_operational():
    return _handle_edit('operational')

@bp.route('/api/projections', methods=['POST'])
def edit_projection():
    return _handle_edit('projections')

@bp.route('/api/import', methods=['POST'])
def import_edits():
    """
    Bulk entry: a JSON list of {'kind': ..., <keys>, 'value': ...}. Valid rows
    are applied, invalid ones are reported by position and skipped. The
    body is not a form, so the CSRF token travels in the X-CSRFToken header.
    """
    if current_app.config.get('WTF_CSRF_ENABLED', True):
        try:
            validate_csrf(request.headers.get('X-CSRFToken'))
        except ValidationError as e:
            current_app.logger.info(f"Rejected bulk import: {e}")
            return jsonify({'errors': [str(e)]}), 400

    rows = request.get_json(silent=True)
    if not isinstance(rows, list):
        return jsonify({'errors': ['Expected a JSON list of edits.']}), 400

    snapshot = get_live_snapshot()
    applied, errors = 0, []
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            errors.append(f"Row {index}: expected an object.")
            continue
        edit, row_errors = validate_edit(row.get('kind'), row)
        if row_errors:
            errors.extend(f"Row {index}: {message}" for message in row_errors)
            continue
        apply_edit(snapshot, row['kind'], edit)
        applied += 1

    current_app.logger.info(f"Bulk import: {applied} applied, {len(errors)} errors.")
    return jsonify({'applied': applied, 'errors': errors})

# --- Persistence ---

@bp.route('/api/save', methods=['POST'])
def save_snapshot():
    """Serializes the live snapshot into the key-value store."""
    snapshot = get_live_snapshot()
    saved = save_payload(current_app.config['SNAPSHOT_STORAGE_KEY'], snapshot.to_json())
    if not saved:
        return jsonify({'saved': False, 'error': 'The snapshot could not be persisted. Check the server log.'}), 503
    return jsonify({'saved': True})

# --- Advisory ---

@bp.route('/api/advisory', methods=['POST'])
def advisory():
    """Sends a short summary of the dashboard to the advisory service."""
    source = request.get_json(silent=True) or request.values
    year, month, errors = _selected_period(source)
    if errors:
        return jsonify({'errors': errors}), 400

    dashboard = build_dashboard(get_live_snapshot(), year, month, AnalyticsConfig.load())
    context = build_advisory_context(dashboard)
    result, error = request_advisory(
        context,
        current_app.config.get('OPENAI_API_KEY'),
        model=current_app.config['ADVISORY_MODEL'],
        max_tokens=current_app.config['ADVISORY_MAX_TOKENS'],
    )
    if error:
        current_app.logger.warning(f"Advisory unavailable: {error}")
        return jsonify({'context': context, 'error': error}), 502
    return jsonify({'context': context, 'text': result.text, 'sources': result.sources})

# --- Analytics Settings ---

@bp.route('/settings', methods=['GET'])
def list_settings():
    settings = AppSetting.query.order_by(AppSetting.key).all()
    return jsonify([
        {'id': s.id, 'key': s.key, 'value': s.get_value(), 'description': s.description}
        for s in settings
    ])

@bp.route('/settings/<int:setting_id>', methods=['POST'])
def edit_setting(setting_id):
    setting = db.get_or_404(AppSetting, setting_id)
    form = AppSettingForm()
    if not form.validate_on_submit():
        return jsonify({'errors': form.errors}), 400

    new_value = form.value.data.strip()
    try:
        if setting.value_type == 'json':
            new_value = json.dumps(json.loads(new_value), ensure_ascii=False)
        elif setting.value_type == 'float':
            float(new_value)
        elif setting.value_type == 'int':
            int(new_value)
    except ValueError:
        return jsonify({'errors': {'value': [f"'{new_value}' is not a valid {setting.value_type}."]}}), 400

    setting.value = new_value
    db.session.commit()
    AnalyticsConfig._instance = None
    current_app.logger.info(f'Setting "{setting.key}" updated to {new_value}; analytics config cache cleared.')
    return jsonify({'id': setting.id, 'key': setting.key, 'value': setting.get_value()})
