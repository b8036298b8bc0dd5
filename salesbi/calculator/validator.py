# ==============================================================================
# salesbi/calculator/validator.py
# ------------------------------------------------------------------------------
# Checks the keys of an inbound edit (year, month, seller / cost field /
# client) against the fixed reference tables. The value itself is never
# validated: the normalizer turns anything unreadable into 0.
# ==============================================================================

from .clients import HISTORICAL_TOP_CLIENTS
from .schema import COST_FIELDS, MONTHS, PLANNING_YEARS, SELLERS

EDIT_KINDS = {
    'revenue': ('year', 'month', 'seller'),
    'operational': ('year', 'month', 'field'),
    'projections': ('client_id', 'year'),
}

def validate_edit(kind, data, clients=HISTORICAL_TOP_CLIENTS):
    """
    Validates the key fields of an edit.

    Args:
        kind (str): One of 'revenue', 'operational', 'projections'.
        data (dict): Raw fields, e.g. {'year': '2026', 'month': 'Jan', 'seller': 'v1', 'value': '1.000'}.

    Returns:
        tuple: A tuple containing:
            - dict: The cleaned edit (keys as strings plus the raw 'value') if valid.
            - list: A list of human-readable error messages if validation fails.
    """
    if kind not in EDIT_KINDS:
        return None, [f"Unknown edit type '{kind}'."]

    errors = []
    edit = {}
    for name in EDIT_KINDS[kind]:
        value = data.get(name)
        value = str(value).strip() if value is not None else ''
        if not value:
            errors.append(f"Field '{name}' is required.")
            continue
        edit[name] = value

    if errors:
        return None, errors

    if 'year' in edit and edit['year'] not in PLANNING_YEARS:
        errors.append(f"Year '{edit['year']}' is outside the planning horizon ({', '.join(PLANNING_YEARS)}).")
    if 'month' in edit and edit['month'] not in MONTHS:
        errors.append(f"Month '{edit['month']}' is not one of {', '.join(MONTHS)}.")
    if 'seller' in edit and edit['seller'] not in [s.value for s in SELLERS]:
        errors.append(f"Unknown seller '{edit['seller']}'.")
    if 'field' in edit and edit['field'] not in [f.value for f in COST_FIELDS]:
        errors.append(f"Unknown cost field '{edit['field']}'.")
    if 'client_id' in edit and edit['client_id'] not in [c.id for c in clients]:
        errors.append(f"Unknown client '{edit['client_id']}'.")

    if errors:
        return None, errors

    edit['value'] = data.get('value')
    return edit, []
