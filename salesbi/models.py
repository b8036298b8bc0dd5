# ==============================================================================
# salesbi/models.py
# ------------------------------------------------------------------------------
# Defines the database schema using SQLAlchemy ORM models.
# ==============================================================================

from datetime import datetime
from salesbi import db
import json

class KeyValueEntry(db.Model):
    """
    Opaque key-value storage. The serialized snapshot lives here under the
    configured storage key; the table knows nothing about its shape.
    """
    __tablename__ = 'key_value_entry'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), unique=True, nullable=False, index=True)
    value = db.Column(db.Text, nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<KeyValueEntry {self.key}>'


class AppSetting(db.Model):
    """
    Stores key-value pairs for the analytics thresholds (growth/decline
    multipliers, cost warning ceilings, annual target). Editable through the
    settings routes without touching the code.
    """
    __tablename__ = 'app_setting'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), unique=True, nullable=False, index=True)
    value = db.Column(db.String(256), nullable=False)
    description = db.Column(db.String(512)) # For hints in the settings screen
    value_type = db.Column(db.String(32), default='string') # e.g., 'float', 'int', 'string', 'json'

    def __repr__(self):
        return f'<AppSetting {self.key}: {self.value}>'

    def get_value(self):
        """Casts the string value to its correct Python type."""
        if self.value_type == 'float':
            return float(self.value)
        if self.value_type == 'int':
            return int(self.value)
        if self.value_type == 'json':
            return json.loads(self.value)
        return self.value
