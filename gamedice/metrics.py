"""
Prometheus metrics for the dice generators.

This module defines counters and histograms for the roll pipeline:
  • rolls             — completed rolls per generator kind
  • fallbacks         — generator malfunctions that forced the default backend
  • sampler_rejections — raw words discarded by the unbiased sampler
  • reseeds           — reseeds per seed source (value / large / system / time)
  • network_fetch_seconds — latency of random.org requests

Label cardinality is bounded: `kind` ranges over the GeneratorKind values and
`source` over a four-word vocabulary.

Usage
-----
    from gamedice.metrics import METRICS

    METRICS.record_roll("mersenne")
    with METRICS.network_timer():
        fetch(...)

If you need a custom Prometheus registry or different namespace/subsystem,
construct your own `Metrics` instance.
"""

from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Iterable

from prometheus_client import REGISTRY, Counter, Histogram

_SEED_SOURCES = (
    "value",    # bounded integer seed
    "large",    # arbitrary-precision seed
    "system",   # OS entropy device
    "time",     # clock fallback
)

_NETWORK_BUCKETS = (
    0.05, 0.1, 0.25, 0.5,
    1.0, 2.5, 5.0, 10.0,
)


class Metrics:
    """
    Container for all dice generator Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem.
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "gamedice",
        subsystem: str = "rng",
        registry=REGISTRY,
        network_buckets: Iterable[float] = _NETWORK_BUCKETS,
    ) -> None:
        self.rolls_total = Counter(
            "rolls_total",
            "Number of dice rolls produced, labeled by generator kind.",
            labelnames=("kind",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.fallbacks_total = Counter(
            "fallbacks_total",
            "Rolls retried on the default generator after a malfunction, labeled by failing kind.",
            labelnames=("kind",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.sampler_rejections_total = Counter(
            "sampler_rejections_total",
            "Raw words discarded by the unbiased sampler, labeled by generator kind.",
            labelnames=("kind",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.reseeds_total = Counter(
            "reseeds_total",
            "Number of reseeds, labeled by seed source.",
            labelnames=("source",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.network_fetch_seconds = Histogram(
            "network_fetch_seconds",
            "Time spent fetching dice from the network entropy service (seconds).",
            buckets=tuple(network_buckets),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    # ----- Recording helpers -------------------------------------------------

    def record_roll(self, kind: str) -> None:
        self.rolls_total.labels(kind=kind).inc()

    def record_fallback(self, kind: str) -> None:
        self.fallbacks_total.labels(kind=kind).inc()

    def record_rejection(self, kind: str) -> None:
        self.sampler_rejections_total.labels(kind=kind).inc()

    def record_reseed(self, source: str) -> None:
        """Valid sources: one of _SEED_SOURCES; anything else counts as 'value'."""
        if source not in _SEED_SOURCES:
            source = "value"
        self.reseeds_total.labels(source=source).inc()

    @contextmanager
    def network_timer(self):
        start = perf_counter()
        try:
            yield
        finally:
            self.network_fetch_seconds.observe(perf_counter() - start)


# Singleton used by most components
METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
    "_SEED_SOURCES",
]
