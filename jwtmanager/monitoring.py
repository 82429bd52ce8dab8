"""Optional Prometheus metrics for a JWT manager.

Counters are registered only if the `prometheus_client` package is
installed; otherwise the registry is disabled and instrumenting a manager
does nothing.
"""
from __future__ import annotations

from typing import Any, Optional

try:  # pragma: no cover
    from prometheus_client import REGISTRY, Counter
except Exception:  # pragma: no cover
    REGISTRY = None  # type: ignore
    Counter = None  # type: ignore


class MetricsRegistry:
    def __init__(self, registry: Any = None):
        self.enabled = Counter is not None
        if self.enabled:
            registry = registry if registry is not None else REGISTRY
            self.generated = Counter("jwtmanager_tokens_generated_total", "Tokens issued", registry=registry)  # type: ignore
            self.verified = Counter("jwtmanager_tokens_verified_total", "Tokens that passed verification", registry=registry)  # type: ignore
            self.invalidated = Counter("jwtmanager_tokens_invalidated_total", "Token identifiers revoked", registry=registry)  # type: ignore
            self.errors = Counter("jwtmanager_errors_total", "Errors routed to on_error", ["error"], registry=registry)  # type: ignore
        else:
            self.generated = None
            self.verified = None
            self.invalidated = None
            self.errors = None

    def on_generate(self, claims) -> None:
        self.generated.inc()  # type: ignore

    def on_verify(self, claims) -> None:
        self.verified.inc()  # type: ignore

    def on_invalidate(self, claims) -> None:
        self.invalidated.inc()  # type: ignore

    def on_error(self, error: Exception, claims=None) -> None:
        self.errors.labels(error=type(error).__name__).inc()  # type: ignore

    def instrument(self, manager) -> None:
        """Subscribe the counters to ``manager``'s signals."""
        if not self.enabled:
            return
        manager.on_generate.add(self.on_generate)
        manager.on_verify.add(self.on_verify)
        manager.on_invalidate.add(self.on_invalidate)
        manager.on_error.add(self.on_error)


_registry: Optional[MetricsRegistry] = None


def get_registry() -> MetricsRegistry:
    global _registry
    if _registry is None:
        _registry = MetricsRegistry()
    return _registry


def instrument(manager, registry: Optional[MetricsRegistry] = None) -> MetricsRegistry:
    registry = registry or get_registry()
    registry.instrument(manager)
    return registry


__all__ = ["MetricsRegistry", "get_registry", "instrument"]
