"""
Infrastructure Tests - configuration, caching, logging and database management
"""

import json
import logging
from unittest.mock import AsyncMock, MagicMock

import pydantic
import pytest

from builders import NOW, make_coupon
from src.infrastructure.cache.cache_manager import CachedCouponRepository, InMemoryCache
from src.infrastructure.configuration.config import Settings, get_config, reset_config
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.logging.logging_config import (
    PerformanceLogger,
    ProductionLogger,
    get_structured_logger,
)
from src.infrastructure.utilities.exceptions import (
    BusinessLogicError,
    CouponRejectedError,
    DataFetchError,
    DatabaseError,
    PricingEngineError,
    ValidationError,
    validate_and_raise,
)
from src.infrastructure.utilities.helpers import ensure_aware, format_price, haversine_km


class FakeClock:
    """Manually advanced clock"""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestConfig:
    """Test settings loading"""

    def test_defaults(self):
        """Test default pricing settings"""
        settings = Settings(_env_file=None)
        assert settings.currency == "INR"
        assert settings.free_delivery_minimum == 499.0
        assert settings.default_delivery_fee == 30.0
        assert settings.fee_strategy == "flat"
        assert settings.coupon_cache_ttl_seconds == 300

    def test_environment_overrides(self, monkeypatch):
        """Test values come from the environment"""
        monkeypatch.setenv("FEE_STRATEGY", "DISTANCE")
        monkeypatch.setenv("FREE_DELIVERY_MINIMUM", "999")
        reset_config()

        config = get_config()
        assert config.fee_strategy == "distance"
        assert config.free_delivery_minimum == 999.0
        assert get_config() is config

    def test_invalid_strategy(self):
        """Test unknown fee strategies are rejected"""
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, fee_strategy="surge")

    def test_negative_minimum(self):
        """Test negative amounts are rejected"""
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, free_delivery_minimum=-1)


class TestInMemoryCache:
    """Test the TTL cache"""

    def test_expiry(self):
        """Test entries expire after their TTL"""
        clock = FakeClock()
        cache = InMemoryCache(default_ttl=60, clock=clock)
        cache.set("key", "value")

        assert cache.get("key") == "value"
        clock.now += 61
        assert cache.get("key") is None

        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1

    def test_cleanup_and_delete(self):
        """Test explicit deletion and expired cleanup"""
        clock = FakeClock()
        cache = InMemoryCache(default_ttl=10, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2, ttl=100)

        assert cache.delete("b")
        assert not cache.delete("b")
        clock.now += 11
        assert cache.cleanup_expired() == 1


class TestCachedCouponRepository:
    """Test the coupon catalog cache"""

    @pytest.mark.asyncio
    async def test_catalog_cached_within_ttl(self):
        """Test the catalog is fetched once per TTL"""
        clock = FakeClock()
        inner = MagicMock()
        inner.find_active = AsyncMock(return_value=[make_coupon()])
        repository = CachedCouponRepository(inner, InMemoryCache(default_ttl=300, clock=clock))

        await repository.find_active(NOW)
        await repository.find_active(NOW)
        assert inner.find_active.await_count == 1

        clock.now += 301
        await repository.find_active(NOW)
        assert inner.find_active.await_count == 2

    @pytest.mark.asyncio
    async def test_window_rechecked_on_read(self):
        """Test cached coupons still drop out when their window ends"""
        coupon = make_coupon()
        inner = MagicMock()
        inner.find_active = AsyncMock(return_value=[coupon])
        repository = CachedCouponRepository(inner)

        assert await repository.find_active(NOW) == [coupon]
        assert await repository.find_active(coupon.end_date.replace(year=coupon.end_date.year + 1)) == []

    @pytest.mark.asyncio
    async def test_lookups_bypass_cache(self):
        """Test code lookups and usage counts always hit the store"""
        inner = MagicMock()
        inner.find_by_code = AsyncMock(return_value=None)
        inner.count_customer_usage = AsyncMock(return_value=1)
        repository = CachedCouponRepository(inner)

        await repository.find_by_code("X")
        await repository.find_by_code("X")
        assert inner.find_by_code.await_count == 2
        assert await repository.count_customer_usage("c1", "cust-1") == 1

    @pytest.mark.asyncio
    async def test_invalidate(self):
        """Test invalidation forces a refetch"""
        inner = MagicMock()
        inner.find_active = AsyncMock(return_value=[])
        repository = CachedCouponRepository(inner)

        await repository.find_active(NOW)
        repository.invalidate()
        await repository.find_active(NOW)
        assert inner.find_active.await_count == 2


class TestExceptions:
    """Test the error hierarchy"""

    def test_retryable_flags(self):
        """Test only fetch failures are retryable"""
        assert DataFetchError("x").retryable
        assert DatabaseError("x").retryable
        assert not CouponRejectedError("A", "nope").retryable
        assert not ValidationError("bad").retryable

    def test_hierarchy(self):
        """Test exceptions share the base class"""
        assert isinstance(CouponRejectedError("A", "nope"), BusinessLogicError)
        assert isinstance(DatabaseError("x"), PricingEngineError)

    def test_validate_and_raise(self):
        """Test the validation helper"""
        validate_and_raise(True, ValidationError, "fine")
        with pytest.raises(ValidationError):
            validate_and_raise(False, ValidationError, "bad", field="quantity")


class TestHelpers:
    """Test utility helpers"""

    def test_format_price(self):
        """Test currency formatting"""
        assert format_price(50) == "₹50"
        assert format_price(12.5) == "₹12.50"
        assert format_price(3, "USD") == "3.00 USD"

    def test_haversine(self):
        """Test great-circle distance"""
        assert haversine_km(19.0, 72.8, 19.0, 72.8) == 0
        assert 110 < haversine_km(0, 0, 1, 0) < 112

    def test_ensure_aware(self):
        """Test naive datetimes are treated as UTC"""
        naive = NOW.replace(tzinfo=None)
        assert ensure_aware(naive) == NOW
        assert ensure_aware(NOW) is NOW


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers after logging setup"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLogging:
    """Test logging configuration"""

    def test_setup_creates_json_logs(self, tmp_path, restore_root_logger):
        """Test rotating JSON files are created"""
        settings = Settings(_env_file=None, log_dir=str(tmp_path), environment="production")
        ProductionLogger.setup_logging(settings)

        logging.getLogger("pricing.test").info("Hello", extra={"customer_id": "cust-1"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = (tmp_path / "pricing.log").read_text(encoding="utf-8").strip().splitlines()
        record = json.loads(lines[-1])
        assert record["message"] == "Hello"
        assert record["customer_id"] == "cust-1"
        assert record["level"] == "INFO"
        assert (tmp_path / "errors.log").exists()

    def test_structured_events_reach_json_log(self, tmp_path, restore_root_logger):
        """Test structlog events are rendered into the JSON log"""
        settings = Settings(_env_file=None, log_dir=str(tmp_path), environment="production")
        ProductionLogger.setup_logging(settings)

        get_structured_logger("coupon_audit").info("coupon_applied", code="PCT20")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = (tmp_path / "pricing.log").read_text(encoding="utf-8").strip().splitlines()
        event = json.loads(json.loads(lines[-1])["message"])
        assert event["event"] == "coupon_applied"
        assert event["code"] == "PCT20"

    def test_performance_logger(self, caplog):
        """Test timings are recorded"""
        with caplog.at_level(logging.INFO):
            with PerformanceLogger("price_cart") as perf:
                pass

        assert perf.duration_ms is not None
        assert "Completed operation: price_cart" in caplog.text

    def test_performance_logger_failure(self, caplog):
        """Test failures are logged and propagated"""
        with pytest.raises(RuntimeError):
            with PerformanceLogger("price_cart"):
                raise RuntimeError("boom")
        assert "Failed operation: price_cart" in caplog.text


class TestDatabaseManager:
    """Test database management"""

    def test_create_tables_and_health(self, test_settings):
        """Test an in-memory database comes up healthy"""
        manager = DatabaseManager(test_settings)
        manager.create_tables()

        assert manager.health_check()
        manager.close()
