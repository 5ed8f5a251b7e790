# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Recording contract and metrics backends.

Classes:
    CollectorMetricsEngine: Engine that records into a metrics collector.
    NoOpMetricsEngine: Engine that discards everything.
    MultiMetricsEngine: Engine that forwards to several engines.
    UnifiedMetricsCollector: Thread-safe collector supporting dict and Prometheus.

Protocols:
    MetricsEngineProtocol: The recording contract used by the serving pipeline.
    MetricsCollectorProtocol: Protocol for low-level metrics sinks.

Functions:
    build_metric_definitions: Build metric definitions under a namespace.
    get_metrics_collector: Get the global metrics collector singleton.
    reset_metrics_collector: Reset the global metrics collector singleton.

Constants:
    PROMETHEUS_AVAILABLE: Whether prometheus_client is available.
    Metric and label name constants from the constants module.
"""

from .collector import (
    METRIC_DEFINITIONS,
    PROMETHEUS_AVAILABLE,
    MetricDefinition,
    UnifiedMetricsCollector,
    build_metric_definitions,
    get_metrics_collector,
    reset_metrics_collector,
)
from .constants import (
    # Per-request
    ACCOUNT_REQUESTS_TOTAL,
    # Per-adapter
    ADAPTER_BIDS_RECEIVED_TOTAL,
    # Cookie sync
    ADAPTER_COOKIE_SYNC_TOTAL,
    ADAPTER_ERRORS_TOTAL,
    # Buckets
    ADAPTER_LATENCY_BUCKETS,
    ADAPTER_PANICS_TOTAL,
    ADAPTER_PRICE,
    ADAPTER_REQUEST_TIME_SECONDS,
    ADAPTER_REQUESTS_TOTAL,
    CONNECTIONS_ACCEPTED_TOTAL,
    CONNECTIONS_CLOSED_TOTAL,
    COOKIE_SYNC_REQUESTS_TOTAL,
    IMPS_REQUESTED_TOTAL,
    LATENCY_BUCKETS,
    LEGACY_IMPS_REQUESTED_TOTAL,
    METRIC_PREFIX,
    # Cache
    PREBID_CACHE_REQUEST_TIME_SECONDS,
    PRICE_BUCKETS,
    REQUEST_TIME_SECONDS,
    REQUESTS_TOTAL,
    STORED_IMP_CACHE_TOTAL,
    STORED_REQUEST_CACHE_TOTAL,
    UNKNOWN_ADAPTER,
    USERID_SET_TOTAL,
    metric_name,
)
from .engine import CollectorMetricsEngine, MultiMetricsEngine, NoOpMetricsEngine
from .protocols import MetricsCollectorProtocol, MetricsEngineProtocol

__all__ = [
    "ACCOUNT_REQUESTS_TOTAL",
    "ADAPTER_BIDS_RECEIVED_TOTAL",
    "ADAPTER_COOKIE_SYNC_TOTAL",
    "ADAPTER_ERRORS_TOTAL",
    "ADAPTER_LATENCY_BUCKETS",
    "ADAPTER_PANICS_TOTAL",
    "ADAPTER_PRICE",
    "ADAPTER_REQUESTS_TOTAL",
    "ADAPTER_REQUEST_TIME_SECONDS",
    "CONNECTIONS_ACCEPTED_TOTAL",
    "CONNECTIONS_CLOSED_TOTAL",
    "COOKIE_SYNC_REQUESTS_TOTAL",
    "IMPS_REQUESTED_TOTAL",
    "LATENCY_BUCKETS",
    "LEGACY_IMPS_REQUESTED_TOTAL",
    "METRIC_DEFINITIONS",
    "METRIC_PREFIX",
    "PREBID_CACHE_REQUEST_TIME_SECONDS",
    "PRICE_BUCKETS",
    # Constants
    "PROMETHEUS_AVAILABLE",
    "REQUESTS_TOTAL",
    "REQUEST_TIME_SECONDS",
    "STORED_IMP_CACHE_TOTAL",
    "STORED_REQUEST_CACHE_TOTAL",
    "UNKNOWN_ADAPTER",
    "USERID_SET_TOTAL",
    # Engines
    "CollectorMetricsEngine",
    "MetricDefinition",
    # Protocols
    "MetricsCollectorProtocol",
    "MetricsEngineProtocol",
    "MultiMetricsEngine",
    "NoOpMetricsEngine",
    # Collector
    "UnifiedMetricsCollector",
    "build_metric_definitions",
    "get_metrics_collector",
    "metric_name",
    "reset_metrics_collector",
]
