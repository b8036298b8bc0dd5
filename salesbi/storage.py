# ==============================================================================
# salesbi/storage.py
# ------------------------------------------------------------------------------
# Key-value persistence of the serialized snapshot. Reads and writes never
# raise: a failed read means "nothing saved", a failed write is reported.
# ==============================================================================

import logging
from sqlalchemy.exc import SQLAlchemyError

from salesbi import db
from salesbi.models import KeyValueEntry

def load_payload(key):
    """Returns the stored text for key, or None if absent or unreadable."""
    try:
        entry = KeyValueEntry.query.filter_by(key=key).first()
    except SQLAlchemyError as e:
        logging.warning(f"Could not read persisted snapshot '{key}'. Error: {e}")
        db.session.rollback()
        return None
    return entry.value if entry else None

def save_payload(key, value):
    """Upserts the stored text for key. Returns True on success."""
    try:
        entry = KeyValueEntry.query.filter_by(key=key).first()
        if entry is None:
            entry = KeyValueEntry(key=key)
            db.session.add(entry)
        entry.value = value
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logging.error(f"Could not persist snapshot '{key}'. Error: {e}", exc_info=True)
        return False
    logging.info(f"Snapshot persisted under '{key}' ({len(value)} bytes).")
    return True
