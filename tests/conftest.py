"""
Test configuration and fixtures for the pricing engine
"""

import os
from unittest.mock import patch

import pytest

from builders import NOW, make_coupon
from src.domain.entities.address import Address
from src.domain.entities.coupon import ApplicableTo, DiscountType
from src.infrastructure.configuration.config import Settings, reset_config
from src.infrastructure.database.operations import DatabaseManager


# Mock environment variables for testing
@pytest.fixture(autouse=True)
def mock_env():
    """Mock environment variables for testing"""
    test_env = {
        "DATABASE_URL": "sqlite:///:memory:",
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, test_env, clear=True):
        reset_config()
        yield test_env
    reset_config()


@pytest.fixture
def now():
    """Fixed clock for coupon windows"""
    return NOW


@pytest.fixture
def address():
    """Default delivery address with coordinates"""
    return Address(id="a1", latitude=19.0760, longitude=72.8777, is_default=True)


@pytest.fixture
def scoped_coupon():
    """Flat coupon restricted to vendor v2"""
    return make_coupon(
        "V2ONLY", DiscountType.FLAT, 50, applicable_to=ApplicableTo.VENDOR, applicable_id="v2"
    )


@pytest.fixture
def test_settings():
    """Settings bound to an in-memory database"""
    return Settings(_env_file=None, database_url="sqlite:///:memory:", environment="test")


@pytest.fixture
def db_manager(test_settings):
    """Database manager with freshly created tables"""
    manager = DatabaseManager(test_settings)
    manager.create_tables()
    yield manager
    manager.close()
