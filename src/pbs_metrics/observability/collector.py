# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Unified metrics collector supporting both dict-based and Prometheus metrics.

This module provides the UnifiedMetricsCollector class, the low-level sink
that CollectorMetricsEngine writes every recorded event to.

Features:
    1. Thread-safe counter/histogram operations
    2. Automatic Prometheus metric registration when available
    3. Dict-based fallback for JSON export and tests
    4. Label cardinality protection (max combinations per metric)
    5. Optional HTTP server for Prometheus scraping

Usage:
    >>> from pbs_metrics.observability.collector import UnifiedMetricsCollector
    >>> collector = UnifiedMetricsCollector(enable_prometheus=False)
    >>> collector.inc_counter('pbs_requests_total', labels={'source': 'web'})
    >>> collector.get_counter('pbs_requests_total', {'source': 'web'})
    1

Thread Safety:
    All operations are thread-safe. Uses RLock for reentrant locking.

Prometheus Integration:
    When prometheus_client is installed, metrics are registered with the
    given registry (default: the global Prometheus registry). The HTTP
    server can be started with collector.start_http_server().
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
)

from ..exceptions import MetricRegistrationError
from .constants import (
    ACCOUNT_REQUESTS_TOTAL,
    ADAPTER_BIDS_RECEIVED_TOTAL,
    ADAPTER_COOKIE_SYNC_TOTAL,
    ADAPTER_ERRORS_TOTAL,
    ADAPTER_LABEL_NAMES,
    ADAPTER_LATENCY_BUCKETS,
    ADAPTER_PANICS_TOTAL,
    ADAPTER_PRICE,
    ADAPTER_REQUEST_TIME_SECONDS,
    ADAPTER_REQUESTS_TOTAL,
    CONNECTIONS_ACCEPTED_TOTAL,
    CONNECTIONS_CLOSED_TOTAL,
    COOKIE_SYNC_REQUESTS_TOTAL,
    IMPS_REQUESTED_TOTAL,
    LABEL_ACCOUNT,
    LABEL_ACTION,
    LABEL_ADAPTER,
    LABEL_ADAPTER_ERROR,
    LABEL_AUDIO,
    LABEL_BANNER,
    LABEL_CACHE_RESULT,
    LABEL_GDPR_BLOCKED,
    LABEL_MARKUP,
    LABEL_MEDIA_TYPE,
    LABEL_NATIVE,
    LABEL_SUCCESS,
    LABEL_VIDEO,
    LATENCY_BUCKETS,
    LEGACY_IMPS_REQUESTED_TOTAL,
    METRIC_PREFIX,
    PREBID_CACHE_REQUEST_TIME_SECONDS,
    PRICE_BUCKETS,
    REQUEST_LABEL_NAMES,
    REQUEST_TIME_SECONDS,
    REQUESTS_TOTAL,
    STORED_IMP_CACHE_TOTAL,
    STORED_REQUEST_CACHE_TOTAL,
    USERID_SET_TOTAL,
    metric_name,
)

logger = logging.getLogger(__name__)

# Type declarations for optional prometheus_client imports
if TYPE_CHECKING:
    from prometheus_client import (
        CollectorRegistry as CollectorRegistryType,
        Counter as CounterType,
        Histogram as HistogramType,
    )
else:
    CounterType = object
    HistogramType = object
    CollectorRegistryType = object

# Check Prometheus availability with aliased imports to avoid no-redef
try:
    from prometheus_client import (
        REGISTRY as _REGISTRY,
        Counter as _Counter,
        Histogram as _Histogram,
        start_http_server as _start_http_server,
    )

    Counter: type[CounterType] | None = _Counter
    Histogram: type[HistogramType] | None = _Histogram
    REGISTRY: CollectorRegistryType | None = _REGISTRY
    start_http_server: Callable[..., Any] | None = _start_http_server
    PROMETHEUS_AVAILABLE = True
except ImportError:
    Counter = None
    Histogram = None
    REGISTRY = None
    start_http_server = None
    PROMETHEUS_AVAILABLE = False


@dataclass(frozen=True)
class MetricDefinition:
    """
    Definition for a metric that can be instantiated.

    This dataclass defines the schema for metrics, including their type,
    description, labels, and histogram buckets.
    """

    name: str
    metric_type: str  # 'counter', 'histogram'
    description: str
    label_names: tuple[str, ...] = ()
    buckets: tuple[float, ...] | None = None


def build_metric_definitions(
    namespace: str = METRIC_PREFIX,
) -> dict[str, MetricDefinition]:
    """
    Build the pre-defined metrics for the library under a namespace.

    Returns:
        Mapping of exported metric name to its definition
    """

    def counter(base: str, description: str, *label_names: str) -> MetricDefinition:
        return MetricDefinition(
            metric_name(base, namespace), "counter", description, label_names
        )

    def histogram(
        base: str, description: str, buckets: list[float], *label_names: str
    ) -> MetricDefinition:
        return MetricDefinition(
            metric_name(base, namespace),
            "histogram",
            description,
            label_names,
            buckets=tuple(buckets),
        )

    definitions = [
        # === Per-request group ===
        counter(
            CONNECTIONS_ACCEPTED_TOTAL, "Total connection accepts", LABEL_SUCCESS
        ),
        counter(CONNECTIONS_CLOSED_TOTAL, "Total connection closes", LABEL_SUCCESS),
        counter(REQUESTS_TOTAL, "Total inbound requests", *REQUEST_LABEL_NAMES),
        histogram(
            REQUEST_TIME_SECONDS,
            "Inbound request duration",
            LATENCY_BUCKETS,
            *REQUEST_LABEL_NAMES,
        ),
        counter(
            IMPS_REQUESTED_TOTAL,
            "Total impressions requested by media type flags",
            LABEL_BANNER,
            LABEL_VIDEO,
            LABEL_AUDIO,
            LABEL_NATIVE,
        ),
        counter(
            LEGACY_IMPS_REQUESTED_TOTAL,
            "Total impressions requested on the legacy endpoint",
            *REQUEST_LABEL_NAMES,
        ),
        counter(
            ACCOUNT_REQUESTS_TOTAL, "Total inbound requests per account", LABEL_ACCOUNT
        ),
        # === Per-adapter group ===
        counter(
            ADAPTER_REQUESTS_TOTAL, "Total adapter requests", *ADAPTER_LABEL_NAMES
        ),
        counter(
            ADAPTER_ERRORS_TOTAL,
            "Total adapter errors",
            LABEL_ADAPTER,
            LABEL_ADAPTER_ERROR,
        ),
        counter(ADAPTER_PANICS_TOTAL, "Total recovered adapter panics", LABEL_ADAPTER),
        counter(
            ADAPTER_BIDS_RECEIVED_TOTAL,
            "Total bids received",
            LABEL_ADAPTER,
            LABEL_MEDIA_TYPE,
            LABEL_MARKUP,
        ),
        histogram(ADAPTER_PRICE, "Bid CPM", PRICE_BUCKETS, LABEL_ADAPTER),
        histogram(
            ADAPTER_REQUEST_TIME_SECONDS,
            "Adapter request duration",
            ADAPTER_LATENCY_BUCKETS,
            LABEL_ADAPTER,
        ),
        # === Cookie sync ===
        counter(COOKIE_SYNC_REQUESTS_TOTAL, "Total cookie sync requests"),
        counter(
            ADAPTER_COOKIE_SYNC_TOTAL,
            "Total adapter cookie syncs",
            LABEL_ADAPTER,
            LABEL_GDPR_BLOCKED,
        ),
        counter(
            USERID_SET_TOTAL, "Total setuid requests", LABEL_ADAPTER, LABEL_ACTION
        ),
        # === Cache ===
        counter(
            STORED_REQUEST_CACHE_TOTAL,
            "Stored request cache lookups",
            LABEL_CACHE_RESULT,
        ),
        counter(
            STORED_IMP_CACHE_TOTAL, "Stored imp cache lookups", LABEL_CACHE_RESULT
        ),
        histogram(
            PREBID_CACHE_REQUEST_TIME_SECONDS,
            "Prebid cache request duration",
            LATENCY_BUCKETS,
            LABEL_SUCCESS,
        ),
    ]
    return {defn.name: defn for defn in definitions}


METRIC_DEFINITIONS: dict[str, MetricDefinition] = build_metric_definitions()
"""Pre-defined metrics under the default namespace."""


class UnifiedMetricsCollector:
    """
    Unified metrics collector supporting both dict-based and Prometheus metrics.

    This class provides:
    1. Thread-safe counter/histogram operations
    2. Automatic Prometheus metric registration when available
    3. Dict-based fallback for JSON export
    4. Label cardinality protection
    5. Optional HTTP server for Prometheus scraping

    Thread Safety:
        All operations use RLock for thread-safe access. The lock is reentrant
        to allow nested calls from callbacks.

    Cardinality Protection:
        To prevent unbounded memory growth, at most ``max_label_combinations``
        unique label combinations are tracked per metric. Further
        combinations are dropped with a warning. Metrics given a larger
        limit through ``set_label_limit`` (closed label domains) use it instead.

    Example:
        >>> collector = UnifiedMetricsCollector(enable_prometheus=False)
        >>> collector.inc_counter('pbs_requests_total',
        ...                       labels={'request_type': 'amp'})
        >>> metrics = collector.get_metrics()
    """

    # Default unique label combinations per metric
    MAX_LABEL_COMBINATIONS: ClassVar[int] = 1000

    # Observations kept per histogram series for the dict export
    MAX_HISTOGRAM_OBSERVATIONS: ClassVar[int] = 10000

    def __init__(
        self,
        enable_prometheus: bool = True,
        registry: Any | None = None,
        definitions: dict[str, MetricDefinition] | None = None,
        max_label_combinations: int | None = None,
    ) -> None:
        """
        Initialize the metrics collector.

        Args:
            enable_prometheus: Whether to enable Prometheus metrics (if available)
            registry: Optional Prometheus CollectorRegistry for testing
            definitions: Metric definitions (default: METRIC_DEFINITIONS)
            max_label_combinations: Per-metric cardinality cap
                (default: MAX_LABEL_COMBINATIONS)
        """
        self._enable_prometheus = enable_prometheus and PROMETHEUS_AVAILABLE
        self._registry = (
            registry if registry else (REGISTRY if PROMETHEUS_AVAILABLE else None)
        )
        self._definitions: dict[str, MetricDefinition] = dict(
            definitions if definitions is not None else METRIC_DEFINITIONS
        )
        self._max_label_combinations = (
            max_label_combinations
            if max_label_combinations is not None
            else self.MAX_LABEL_COMBINATIONS
        )

        # Dict-based metrics (always available)
        self._counters: dict[str, dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self._histograms: dict[str, dict[str, list[float]]] = defaultdict(
            lambda: defaultdict(list)
        )

        # Thread safety
        self._lock = threading.RLock()
        self._prom_lock = threading.Lock()

        # Prometheus metric instances (lazy initialized)
        self._prom_counters: dict[str, Any] = {}
        self._prom_histograms: dict[str, Any] = {}

        # Label cardinality tracking
        self._label_combinations: dict[str, set[str]] = defaultdict(set)
        # Per-metric limits above the default cap (closed label domains)
        self._metric_limits: dict[str, int] = {}

        # HTTP server state
        self._server_running = False

        logger.debug(
            f"UnifiedMetricsCollector initialized "
            f"(prometheus={'enabled' if self._enable_prometheus else 'disabled'}, "
            f"definitions={len(self._definitions)})"
        )

    # === Definitions ===

    @property
    def definitions(self) -> dict[str, MetricDefinition]:
        """Copy of the metric definitions known to this collector."""
        return dict(self._definitions)

    def register(self, definition: MetricDefinition) -> None:
        """
        Add a metric definition.

        Re-registering an identical definition is a no-op.

        Raises:
            MetricRegistrationError: If a different definition already uses the name
        """
        with self._lock:
            existing = self._definitions.get(definition.name)
            if existing is not None and existing != definition:
                raise MetricRegistrationError(
                    f"Metric {definition.name} is already defined as "
                    f"{existing.metric_type} with labels {existing.label_names}",
                    metric_name=definition.name,
                )
            self._definitions[definition.name] = definition

    @property
    def max_label_combinations(self) -> int:
        """Default per-metric cap on unique label combinations."""
        return self._max_label_combinations

    def set_label_limit(self, name: str, limit: int) -> None:
        """
        Allow at least ``limit`` label combinations for one metric.

        Used for metrics whose labels have a known, finite domain so the
        default cap never drops a legal series. Limits only grow and
        survive :meth:`reset`.
        """
        with self._lock:
            self._metric_limits[name] = max(limit, self._metric_limits.get(name, 0))

    def _labels_to_key(self, labels: dict[str, str] | None) -> str:
        """Convert labels dict to a stable string key."""
        if not labels:
            return ""
        return ",".join(f"{k}={v}" for k, v in sorted(labels.items()))

    def _check_cardinality(self, name: str, label_key: str) -> bool:
        """
        Check if adding this label combination would exceed cardinality limit.

        Returns:
            True if the label combination is allowed, False otherwise
        """
        if label_key in self._label_combinations[name]:
            return True
        limit = max(self._max_label_combinations, self._metric_limits.get(name, 0))
        if len(self._label_combinations[name]) >= limit:
            logger.warning(
                f"Cardinality limit ({limit}) reached "
                f"for metric {name}. Dropping label combination: {label_key}"
            )
            return False
        self._label_combinations[name].add(label_key)
        return True

    def _get_or_create_prom_metric(self, name: str, metric_type: str) -> Any | None:
        """Get or create a Prometheus counter or histogram."""
        if not self._enable_prometheus:
            return None

        cache = (
            self._prom_counters if metric_type == "counter" else self._prom_histograms
        )
        if name in cache:
            return cache[name]

        with self._prom_lock:
            if name in cache:
                return cache[name]

            defn = self._definitions.get(name)
            if defn is not None and defn.metric_type != metric_type:
                logger.warning(
                    f"Metric {name} is defined as {defn.metric_type}, "
                    f"not {metric_type}"
                )
                return None
            description = defn.description if defn else f"Dynamic {metric_type}: {name}"
            label_names = list(defn.label_names) if defn else []

            try:
                if metric_type == "counter" and Counter is not None:
                    cache[name] = Counter(
                        name, description, label_names, registry=self._registry
                    )
                elif metric_type == "histogram" and Histogram is not None:
                    buckets = defn.buckets if defn and defn.buckets else LATENCY_BUCKETS
                    cache[name] = Histogram(
                        name,
                        description,
                        label_names,
                        buckets=buckets,
                        registry=self._registry,
                    )
            except Exception as e:
                logger.warning(f"Failed to create Prometheus {metric_type} {name}: {e}")
                return None

        return cache.get(name)

    # === Counter Operations ===

    def inc_counter(
        self,
        name: str,
        value: int = 1,
        labels: dict[str, str] | None = None,
    ) -> None:
        """
        Increment a counter metric.

        An increment of 0 creates the series without counting anything,
        which is how backends pre-register zero-valued series.

        Args:
            name: Metric name (should follow Prometheus naming convention)
            value: Value to increment by (must be non-negative)
            labels: Optional labels dict

        Raises:
            ValueError: If value is negative
        """
        if value < 0:
            raise ValueError("Counter increment must be non-negative")

        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._counters[name][label_key] += value

        prom_counter = self._get_or_create_prom_metric(name, "counter")
        if prom_counter:
            try:
                child = prom_counter.labels(**labels) if labels else prom_counter
                child.inc(value)
            except Exception as e:
                logger.debug(f"Prometheus counter update failed for {name}: {e}")

    # === Histogram Operations ===

    def observe_histogram(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Record an observation in a histogram."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            observations = self._histograms[name][label_key]
            observations.append(value)
            # Keep only recent observations to prevent memory growth
            if len(observations) > self.MAX_HISTOGRAM_OBSERVATIONS:
                del observations[: -self.MAX_HISTOGRAM_OBSERVATIONS // 2]

        prom_histogram = self._get_or_create_prom_metric(name, "histogram")
        if prom_histogram:
            try:
                child = prom_histogram.labels(**labels) if labels else prom_histogram
                child.observe(value)
            except Exception as e:
                logger.debug(f"Prometheus histogram observe failed for {name}: {e}")

    # === Snapshot Operations ===

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        """Return the current value of one counter series (0 if never recorded)."""
        label_key = self._labels_to_key(labels)
        with self._lock:
            series = self._counters.get(name)
            return series.get(label_key, 0) if series else 0

    def get_counter_total(self, name: str) -> int:
        """Return the sum of a counter across all of its label combinations."""
        with self._lock:
            series = self._counters.get(name)
            return sum(series.values()) if series else 0

    def get_observations(
        self, name: str, labels: dict[str, str] | None = None
    ) -> list[float]:
        """Return the retained observations of one histogram series."""
        label_key = self._labels_to_key(labels)
        with self._lock:
            series = self._histograms.get(name)
            return list(series.get(label_key, [])) if series else []

    def get_metrics(self) -> dict[str, Any]:
        """
        Get a snapshot of all metrics.

        Returns a dict suitable for JSON serialization with structure:
        {
            "counters": {"metric_name": {"label_key": value, ...}, ...},
            "histograms": {"metric_name": {"label_key": {...}, ...}, ...}
        }
        """
        with self._lock:
            counters = {
                name: dict(label_values)
                for name, label_values in self._counters.items()
            }

            # Compute histogram summaries
            histograms: dict[str, dict[str, dict[str, Any]]] = {}
            for name, label_values in self._histograms.items():
                histograms[name] = {}
                for label_key, observations in label_values.items():
                    if observations:
                        histograms[name][label_key] = {
                            "count": len(observations),
                            "sum": sum(observations),
                            "avg": sum(observations) / len(observations),
                            "min": min(observations),
                            "max": max(observations),
                        }

        return {
            "counters": counters,
            "histograms": histograms,
        }

    def get_flat_metrics(self) -> dict[str, Any]:
        """
        Get counters in a flat dict format.

        Returns:
            Dict with metric names as keys and counts as values.
            For labeled metrics, uses format "metric_name{label=value,...}".
        """
        result: dict[str, Any] = {}

        with self._lock:
            for name, label_values in self._counters.items():
                for label_key, value in label_values.items():
                    if label_key:
                        result[f"{name}{{{label_key}}}"] = value
                    else:
                        result[name] = value

        return result

    # === Lifecycle ===

    def reset(self) -> None:
        """Reset all metrics to zero."""
        with self._lock:
            self._counters.clear()
            self._histograms.clear()
            self._label_combinations.clear()

        logger.debug("Metrics collector reset")

    # === Prometheus HTTP Server ===

    def start_http_server(self, host: str = "127.0.0.1", port: int = 9090) -> bool:
        """
        Start the Prometheus HTTP server for metrics scraping.

        Args:
            host: Host to bind to (default: 127.0.0.1 for localhost only).
                  Use "0.0.0.0" for external access in containerized environments.
            port: Port to bind to

        Returns:
            True if server started successfully, False otherwise
        """
        if not PROMETHEUS_AVAILABLE or start_http_server is None:
            logger.warning(
                "Cannot start Prometheus server: prometheus_client not installed"
            )
            return False

        if self._server_running:
            logger.warning("Prometheus server already running")
            return True

        try:
            # start_http_server runs in a daemon thread
            if self._registry is not None:
                start_http_server(port, addr=host, registry=self._registry)
            else:
                start_http_server(port, addr=host)
            self._server_running = True
            logger.info(f"Prometheus metrics server started on {host}:{port}")
            return True
        except Exception as e:
            logger.error(f"Failed to start Prometheus server: {e}")
            return False

    @property
    def prometheus_available(self) -> bool:
        """Check if Prometheus is available."""
        return PROMETHEUS_AVAILABLE

    @property
    def prometheus_enabled(self) -> bool:
        """Check if Prometheus metrics are enabled."""
        return self._enable_prometheus

    @property
    def server_running(self) -> bool:
        """Check if the Prometheus HTTP server is running."""
        return self._server_running


# =============================================================================
# Singleton Pattern
# =============================================================================

_global_collector: UnifiedMetricsCollector | None = None
_collector_lock = threading.Lock()


def get_metrics_collector(
    enable_prometheus: bool = True,
    definitions: dict[str, MetricDefinition] | None = None,
    max_label_combinations: int | None = None,
) -> UnifiedMetricsCollector:
    """
    Get or create the global metrics collector singleton.

    The global Prometheus registry accepts each metric name once per
    process, so engines that export to it share this collector.

    Args:
        enable_prometheus: Whether to enable Prometheus metrics
            (only used on first call)
        definitions: Metric definitions (only used on first call)
        max_label_combinations: Per-metric cardinality cap
            (only used on first call)

    Returns:
        The UnifiedMetricsCollector singleton
    """
    global _global_collector

    if _global_collector is None:
        with _collector_lock:
            if _global_collector is None:
                _global_collector = UnifiedMetricsCollector(
                    enable_prometheus=enable_prometheus,
                    definitions=definitions,
                    max_label_combinations=max_label_combinations,
                )

    return _global_collector


def reset_metrics_collector() -> None:
    """
    Reset the global metrics collector singleton (mainly for testing).

    Warning:
        Prometheus metrics already registered with the global registry
        stay registered; a new singleton will log warnings when it tries
        to register them again.
    """
    global _global_collector
    with _collector_lock:
        if _global_collector:
            _global_collector.reset()
        _global_collector = None


__all__ = [
    "METRIC_DEFINITIONS",
    "PROMETHEUS_AVAILABLE",
    "MetricDefinition",
    "UnifiedMetricsCollector",
    "build_metric_definitions",
    "get_metrics_collector",
    "reset_metrics_collector",
]
