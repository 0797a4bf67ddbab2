"""Tests for environment settings and collector wiring."""

import analytics.upstream as upstream
import pytest
from analytics.collection import build_collector, get_collector, set_collector
from analytics.collection.cache import ResultCache
from analytics.collection.collector import OrderCollector
from analytics.config import Settings
from analytics.errors import ConfigurationError
from analytics.upstream import build_source, set_source
from analytics.upstream.fake_adapter import FakeOrderSource
from analytics.utils.logging import get_log_level

_ENV_VARS = (
    "ORDER_SOURCE",
    "SHOP_NAME",
    "ACCESS_TOKEN",
    "SHOPIFY_API_VERSION",
    "ALLOWED_ORIGINS",
    "CACHE_TTL_SECONDS",
    "PAGE_DELAY_SECONDS",
    "UPSTREAM_TIMEOUT_SECONDS",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()
        assert settings.order_source == "fake"
        assert settings.api_version == "2024-01"
        assert settings.allowed_origins == ("http://localhost:3000",)
        assert settings.cache_ttl_seconds == 300.0
        assert settings.page_delay_seconds == 0.5

    def test_overrides(self, clean_env):
        clean_env.setenv("ORDER_SOURCE", "Shopify")
        clean_env.setenv("SHOP_NAME", "hearsound")
        clean_env.setenv("ACCESS_TOKEN", "shpat_x")
        clean_env.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com")
        clean_env.setenv("CACHE_TTL_SECONDS", "60")

        settings = Settings.from_env()

        assert settings.order_source == "shopify"
        assert settings.shop_name == "hearsound"
        assert settings.allowed_origins == ("https://a.example.com", "https://b.example.com")
        assert settings.cache_ttl_seconds == 60.0
        settings.require_shopify_credentials()

    def test_token_is_not_in_repr(self, clean_env):
        clean_env.setenv("ACCESS_TOKEN", "shpat_secret")
        assert "shpat_secret" not in repr(Settings.from_env())

    def test_bad_number(self, clean_env):
        clean_env.setenv("PAGE_DELAY_SECONDS", "soon")
        with pytest.raises(ConfigurationError, match="PAGE_DELAY_SECONDS"):
            Settings.from_env()

    def test_missing_credentials_listed(self):
        with pytest.raises(ConfigurationError, match="SHOP_NAME, ACCESS_TOKEN"):
            Settings(order_source="shopify").require_shopify_credentials()


class TestCollectorWiring:
    def test_build_collector_uses_settings(self):
        source = FakeOrderSource()
        set_source(source)

        collector = build_collector(Settings(cache_ttl_seconds=42, page_delay_seconds=0.1))

        assert collector.source is source
        assert isinstance(collector.cache, ResultCache)
        assert collector.cache.ttl_seconds == 42
        assert collector.page_delay == 0.1

    def test_get_collector_is_process_wide(self):
        assert get_collector() is get_collector()

    def test_set_collector_overrides(self):
        collector = OrderCollector(FakeOrderSource(), ResultCache())
        set_collector(collector)
        assert get_collector() is collector


class RecordingLogger:
    def __init__(self):
        self.warnings = []

    def warning(self, event, **fields):
        self.warnings.append((event, fields))


class TestEnvironment:
    def test_environment_comes_from_protean_env(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "production")
        assert Settings.from_env().environment == "production"

    def test_log_level_follows_environment(self, clean_env):
        clean_env.delenv("LOG_LEVEL", raising=False)
        clean_env.setenv("PROTEAN_ENV", "production")
        assert get_log_level() == "INFO"

    def test_explicit_log_level_wins(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "production")
        clean_env.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"


class TestFakeSourceWarning:
    @pytest.fixture()
    def recorder(self, monkeypatch):
        recorder = RecordingLogger()
        monkeypatch.setattr(upstream, "logger", recorder)
        return recorder

    def test_fake_source_in_production_is_reported(self, recorder):
        source = build_source(Settings(order_source="fake", environment="production"))

        assert isinstance(source, FakeOrderSource)
        assert recorder.warnings == [("fake_order_source_selected", {"environment": "production"})]

    @pytest.mark.parametrize("environment", ["test", "development"])
    def test_fake_source_in_dev_and_test_is_silent(self, recorder, environment):
        build_source(Settings(order_source="fake", environment=environment))
        assert recorder.warnings == []
