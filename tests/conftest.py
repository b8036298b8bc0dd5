# tests/conftest.py

import pytest

from config import Config


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    OPENAI_API_KEY = None
    SNAPSHOT_STORAGE_KEY = "TEST_SNAPSHOT"


@pytest.fixture
def app_with_db():
    """
    Creates a new app instance with an in-memory database seeded with the
    default settings, and yields the app within an application context.
    """
    from salesbi import create_app, db
    from salesbi.seed import seed_data
    from salesbi.calculator.engine import AnalyticsConfig

    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        seed_data()
        AnalyticsConfig._instance = None
        yield app  # The tests will run here
        AnalyticsConfig._instance = None
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app_with_db):
    return app_with_db.test_client()


@pytest.fixture
def snapshot():
    """A fresh zero-filled snapshot; no database needed."""
    from salesbi.calculator.state import build_skeleton
    return build_skeleton()


@pytest.fixture
def unseeded_app():
    """App whose database has no tables yet, as before the first `flask seed`."""
    from salesbi import create_app, db
    from salesbi.calculator.engine import AnalyticsConfig

    app = create_app(TestConfig)

    with app.app_context():
        AnalyticsConfig._instance = None
        yield app
        AnalyticsConfig._instance = None
        db.session.remove()


class CsrfTestConfig(TestConfig):
    WTF_CSRF_ENABLED = True


@pytest.fixture
def csrf_client():
    """Test client of an app that enforces CSRF tokens."""
    from salesbi import create_app, db
    from salesbi.seed import seed_data
    from salesbi.calculator.engine import AnalyticsConfig

    app = create_app(CsrfTestConfig)

    with app.app_context():
        db.create_all()
        seed_data()
        AnalyticsConfig._instance = None
        yield app.test_client()
        AnalyticsConfig._instance = None
        db.session.remove()
        db.drop_all()
