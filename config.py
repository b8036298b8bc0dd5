# ==============================================================================
# config.py
# ------------------------------------------------------------------------------
# Configuration settings for the Flask application.
# Uses environment variables for sensitive data to keep them out of version control.
# ==============================================================================

import os
from dotenv import load_dotenv

# Determine the absolute path of the project directory
basedir = os.path.abspath(os.path.dirname(__file__))

# Load environment variables from a .env file located in the project root
load_dotenv(os.path.join(basedir, '.env'))

class Config:
    """
    Base configuration class. Contains default settings that can be overridden
    by environment-specific configurations.
    """
    # --- Security ---
    # Needed for session signing and CSRF protection of the edit forms.
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-should-really-set-a-secret-key-in-your-env-file'

    # --- Database Configuration ---
    # SQLite file in the 'instance' folder unless DATABASE_URL points elsewhere.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance/app.db')

    # Disable an SQLAlchemy feature that is not needed and adds overhead.
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Snapshot Persistence ---
    # Key under which the serialized snapshot is stored in the key-value table.
    SNAPSHOT_STORAGE_KEY = os.environ.get('SNAPSHOT_STORAGE_KEY') or 'SKG_BI_INDUSTRIAL_V24_SECURE'

    # Year shown when the dashboard is requested without one.
    DEFAULT_YEAR = os.environ.get('DEFAULT_YEAR') or '2026'

    # --- Advisory Service ---
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY')
    ADVISORY_MODEL = os.environ.get('ADVISORY_MODEL') or 'gpt-4o-mini'
    ADVISORY_MAX_TOKENS = int(os.environ.get('ADVISORY_MAX_TOKENS') or 400)
