"""Tests for configuration, logging setup and tracing."""

from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from parts_admin.config import Settings
from parts_admin.utils.logging import AuditLogger, setup_logging
from parts_admin.utils.tracing import OperationTracer


def test_settings_defaults() -> None:
    """Test the default back-office configuration."""
    settings = Settings(_env_file=None)

    assert settings.tzinfo == ZoneInfo("Africa/Tunis")
    assert settings.currency == "TND"
    assert settings.page_size == 12
    assert settings.bulk_fetch_limit == 1000
    assert settings.vip_threshold == Decimal("1000")
    assert settings.inactive_after_days == 90


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test environment variables override the defaults."""
    monkeypatch.setenv("ORDER_STORE_BACKEND", "memory")
    monkeypatch.setenv("VIP_THRESHOLD", "2500.50")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.order_store_backend == "memory"
    assert settings.vip_threshold == Decimal("2500.50")
    assert settings.log_level == "DEBUG"


def test_settings_validation() -> None:
    """Test invalid log levels and timezones are rejected."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="LOUD")

    with pytest.raises(ValidationError):
        Settings(_env_file=None, timezone="Mars/Olympus")

    with pytest.raises(ValidationError):
        Settings(_env_file=None, order_store_backend="redis")


@pytest.mark.parametrize("log_format", ["json", "text"])
def test_setup_logging(log_format: str) -> None:
    """Test logging can be configured in both formats."""
    setup_logging(Settings(_env_file=None, log_format=log_format))

    AuditLogger("test").log_status_change(
        order_id="1",
        from_status="PENDING",
        to_status="CONFIRMED",
        actor="admin",
    )


def test_tracer_summary() -> None:
    """Test per-operation counts and failures."""
    tracer = OperationTracer("order_store", max_events=3)

    with tracer.trace_operation("get_order"):
        pass
    with pytest.raises(RuntimeError):
        with tracer.trace_operation("get_order"):
            raise RuntimeError("boom")
    tracer.add_event("list_orders", duration_ms=5.0)

    summary = tracer.get_trace_summary()
    assert summary["total_events"] == 3
    assert summary["operations"]["get_order"]["count"] == 2
    assert summary["operations"]["get_order"]["failures"] == 1
    assert summary["operations"]["list_orders"]["avg_duration_ms"] == 5.0

    # Oldest events are dropped past max_events
    tracer.add_event("list_orders", duration_ms=1.0)
    assert tracer.get_trace_summary()["operations"]["get_order"]["count"] == 1
