"""
tests/conftest.py
Pytest configuration and fixtures
"""

import warnings
import pytest
import sys

from auditlog.db import DatabaseManager
from tests import SampleLogger, make_memory_engine


def pytest_configure(config):
    """Configure pytest with custom settings"""
    # Suppress warnings raised inside third-party libraries (werkzeug, flasgger)
    warnings.filterwarnings("ignore", category=ResourceWarning)
    warnings.filterwarnings("ignore", category=DeprecationWarning)

    config.addinivalue_line("filterwarnings", "ignore::ResourceWarning")
    config.addinivalue_line("filterwarnings", "ignore::DeprecationWarning")


# Ignore "unclosed database" unraisables from SQLite connections closed by GC
_original_hook = sys.unraisablehook


def custom_unraisable_hook(unraisable_msg):
    """Custom hook that ignores ResourceWarning unraisable exceptions"""
    if "unclosed database" not in str(unraisable_msg.exc_value):
        _original_hook(unraisable_msg)


sys.unraisablehook = custom_unraisable_hook


@pytest.fixture
def engine():
    """History engine on in-memory stores"""
    return make_memory_engine()


@pytest.fixture
def producer(engine):
    """SampleLogger registered on the in-memory engine"""
    return engine.register(SampleLogger)


@pytest.fixture
def db_manager():
    """DatabaseManager on an in-memory SQLite database with tables created"""
    manager = DatabaseManager("sqlite:///:memory:")
    manager.init_db()
    yield manager
    manager.close()


@pytest.fixture
def reset_globals():
    """Clear the process-wide database manager and history engine"""
    import auditlog.db
    import auditlog.history

    auditlog.db._db_manager = None
    auditlog.history._engine = None
    yield
    auditlog.db._db_manager = None
    auditlog.history._engine = None
