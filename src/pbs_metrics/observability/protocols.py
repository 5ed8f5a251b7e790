# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for metrics recording.

This module defines the two seams of the library:

- MetricsEngineProtocol: the recording contract every call site in the
  serving pipeline uses. One method per measurable event, parameterized
  by a label bundle.
- MetricsCollectorProtocol: the low-level counter/histogram sink that
  a concrete engine writes to (in-memory dicts, Prometheus, StatsD, ...).

Design Goals:
    1. Protocol-based - Allow duck typing and custom implementations
    2. Best-effort - Recording never raises into the caller
    3. Thread-safe - Called concurrently from every request and adapter call
    4. Minimal footprint - No heavy operations in hot paths
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..types.dimensions import BidderName, CacheResult, ImpMediaType
    from ..types.labels import AdapterLabels, ImpLabels, Labels, UserLabels


@runtime_checkable
class MetricsEngineProtocol(Protocol):
    """
    Generic interface to record bid server metrics into the desired backend.

    The first group of operations fires once per incoming request, so their
    totals equal the number of incoming requests. The adapter group fires
    once per outgoing request to a bidder adapter, so it records several
    hits per incoming request. The two groups are consistent within
    themselves, but comparing numbers between groups is not meaningful.

    No operation returns a value, and no operation may raise into the
    caller. Durations are in seconds.
    """

    # === Per-request group ===

    def record_connection_accept(self, success: bool) -> None:
        """Record an accepted connection (False for e.g. a failed handshake)."""
        ...

    def record_connection_close(self, success: bool) -> None:
        """Record a closed connection (False when the close errored)."""
        ...

    def record_request(self, labels: Labels) -> None:
        """Record one inbound request."""
        ...

    def record_imps(self, labels: ImpLabels) -> None:
        """Record an impression classified by media type presence flags."""
        ...

    def record_legacy_imps(self, labels: Labels, num_imps: int) -> None:
        """Record impressions for the legacy endpoint, which only knows a count."""
        ...

    def record_request_time(self, labels: Labels, length: float) -> None:
        """Record time spent serving one inbound request."""
        ...

    # === Per-adapter group ===

    def record_adapter_request(self, labels: AdapterLabels) -> None:
        """
        Record one request to a bidder adapter.

        Each element of ``labels.adapter_errors`` counts as its own error.
        """
        ...

    def record_adapter_panic(self, labels: AdapterLabels) -> None:
        """Record an adapter fault that the pipeline recovered from."""
        ...

    def record_adapter_bid_received(
        self, labels: AdapterLabels, bid_type: ImpMediaType, has_adm: bool
    ) -> None:
        """
        Record whether a bid of a particular type uses inline markup (adm)
        or a fetch URL (nurl).

        The legacy endpoint has no bid type, so this only counts bids from
        OpenRTB and AMP.
        """
        ...

    def record_adapter_price(self, labels: AdapterLabels, cpm: float) -> None:
        """Record the CPM of a bid."""
        ...

    def record_adapter_time(self, labels: AdapterLabels, length: float) -> None:
        """Record the duration of one adapter request."""
        ...

    # === Cookie sync / identity ===

    def record_cookie_sync(self) -> None:
        """Record one /cookie_sync request."""
        ...

    def record_adapter_cookie_sync(
        self, adapter: BidderName, gdpr_blocked: bool
    ) -> None:
        """Record a cookie sync for an adapter."""
        ...

    def record_user_id_set(self, user_labels: UserLabels) -> None:
        """
        Record a /setuid request.

        The bidder name may come from client input. Implementations must
        verify it against the configured bidders and attribute unknown
        names to an "unknown" bucket.
        """
        ...

    # === Cache ===

    def record_stored_req_cache_result(
        self, cache_result: CacheResult, inc: int
    ) -> None:
        """Record a batch of stored request cache lookups."""
        ...

    def record_stored_imp_cache_result(
        self, cache_result: CacheResult, inc: int
    ) -> None:
        """Record a batch of stored impression cache lookups."""
        ...

    def record_prebid_cache_request_time(self, success: bool, length: float) -> None:
        """Record the duration of a request to prebid cache."""
        ...


@runtime_checkable
class MetricsCollectorProtocol(Protocol):
    """
    Protocol for the low-level sink a metrics engine writes to.

    Implementations can use in-memory dicts, Prometheus, StatsD,
    OpenTelemetry, or any other metrics backend.

    This protocol defines the core operations for:
    - Counters: Monotonically increasing values (requests, errors)
    - Histograms: Distribution of values (latencies, prices)

    Example:
        >>> class MyCollector:
        ...     def inc_counter(self, name, value=1, labels=None): pass
        ...     def observe_histogram(self, name, value, labels=None): pass
        ...     def get_metrics(self): return {}
        ...     def reset(self): pass
        >>>
        >>> isinstance(MyCollector(), MetricsCollectorProtocol)
        True
    """

    def inc_counter(
        self,
        name: str,
        value: int = 1,
        labels: dict[str, str] | None = None,
    ) -> None:
        """
        Increment a counter metric.

        Args:
            name: Metric name (should follow Prometheus naming convention)
            value: Value to increment by (must be >= 0; 0 creates the series)
            labels: Optional labels dict for dimensional metrics

        Raises:
            ValueError: If value is negative
        """
        ...

    def observe_histogram(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Record an observation in a histogram."""
        ...

    def get_metrics(self) -> dict[str, Any]:
        """
        Get a snapshot of all metrics.

        Returns:
            Dictionary with structure:
            {
                "counters": {"metric_name": {"label_key": value, ...}, ...},
                "histograms": {"metric_name": {"label_key": {...}, ...}, ...}
            }
        """
        ...

    def reset(self) -> None:
        """Reset all metrics to zero."""
        ...


__all__ = [
    "MetricsCollectorProtocol",
    "MetricsEngineProtocol",
]
