# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""pbs-metrics - Bounded metrics taxonomy and recording contract for bid servers.

This library defines a closed vocabulary of low-cardinality label
dimensions and a single recording interface that every call site in a
bid-request-serving pipeline uses to emit counters and timers.

Key Features:
    - Enumerated label dimensions with listing functions for pre-registration
    - Frozen label bundles constructed per event
    - Protocol-based recording contract (MetricsEngineProtocol)
    - Thread-safe collector with optional Prometheus export
    - Cardinality protection and best-effort recording

Quick Start:
    >>> from pbs_metrics import (
    ...     Browser, CookieFlag, DemandSource, Labels, MetricsConfig,
    ...     RequestStatus, RequestType, create_metrics_engine,
    ... )
    >>>
    >>> engine = create_metrics_engine(
    ...     MetricsConfig(known_bidders={"appnexus"}, enable_prometheus=False)
    ... )
    >>> labels = Labels(
    ...     source=DemandSource.WEB,
    ...     rtype=RequestType.ORTB2_WEB,
    ...     browser=Browser.OTHER,
    ...     cookie_flag=CookieFlag.YES,
    ...     request_status=RequestStatus.OK,
    ... )
    >>> engine.record_request(labels)
    >>> engine.record_request_time(labels, 0.120)

Note: Prometheus export requires the 'prometheus' extra. Install with:
    pip install pbs-metrics[prometheus]

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import MetricsConfig
from .exceptions import ConfigurationError, MetricRegistrationError, MetricsError
from .factory import create_metrics_engine
from .observability import (
    CollectorMetricsEngine,
    MetricsCollectorProtocol,
    MetricsEngineProtocol,
    MultiMetricsEngine,
    NoOpMetricsEngine,
    UnifiedMetricsCollector,
)
from .types import (
    PUBLISHER_UNKNOWN,
    AdapterBid,
    AdapterError,
    AdapterLabels,
    BidderName,
    Browser,
    CacheResult,
    CookieFlag,
    DemandSource,
    ImpLabels,
    ImpMediaType,
    Labels,
    RequestAction,
    RequestLabels,
    RequestStatus,
    RequestType,
    UserLabels,
    adapter_bids,
    adapter_errors,
    browser_types,
    cache_results,
    cookie_types,
    demand_types,
    imp_types,
    request_actions,
    request_statuses,
    request_types,
)

__all__ = [
    "PUBLISHER_UNKNOWN",
    # Dimensions
    "AdapterBid",
    "AdapterError",
    # Label bundles
    "AdapterLabels",
    "BidderName",
    "Browser",
    "CacheResult",
    # Engines
    "CollectorMetricsEngine",
    # Exceptions
    "ConfigurationError",
    "CookieFlag",
    "DemandSource",
    "ImpLabels",
    "ImpMediaType",
    "Labels",
    "MetricRegistrationError",
    # Protocols
    "MetricsCollectorProtocol",
    # Configuration
    "MetricsConfig",
    "MetricsEngineProtocol",
    "MetricsError",
    "MultiMetricsEngine",
    "NoOpMetricsEngine",
    "RequestAction",
    "RequestLabels",
    "RequestStatus",
    "RequestType",
    "UnifiedMetricsCollector",
    "UserLabels",
    # Listing functions
    "adapter_bids",
    "adapter_errors",
    "browser_types",
    "cache_results",
    "cookie_types",
    "create_metrics_engine",
    "demand_types",
    "imp_types",
    "request_actions",
    "request_statuses",
    "request_types",
]
