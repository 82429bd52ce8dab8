import pytest

prometheus_client = pytest.importorskip("prometheus_client")

from jwtmanager import create_manager
from jwtmanager.monitoring import MetricsRegistry, instrument

pytestmark = pytest.mark.asyncio

SECRET = "test-secret-key-that-is-long-enough-for-hs256"


async def test_counters_follow_lifecycle():
    collector = prometheus_client.CollectorRegistry()
    metrics = MetricsRegistry(registry=collector)
    manager = create_manager(lambda: "user-42", secret_or_public_key=SECRET)
    assert instrument(manager, metrics) is metrics

    token = await manager.generate()
    await manager.verify(token)
    await manager.invalidate(token)
    await manager.verify(token)

    assert collector.get_sample_value("jwtmanager_tokens_generated_total") == 1
    assert collector.get_sample_value("jwtmanager_tokens_verified_total") == 1
    assert collector.get_sample_value("jwtmanager_tokens_invalidated_total") == 1
    assert collector.get_sample_value("jwtmanager_errors_total", {"error": "UntrustedTokenError"}) == 1
