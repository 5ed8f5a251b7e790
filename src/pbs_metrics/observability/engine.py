# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metrics engines implementing MetricsEngineProtocol.

This module provides the concrete backends behind the recording contract:

1. CollectorMetricsEngine - Translates label bundles into series on a
   MetricsCollectorProtocol (UnifiedMetricsCollector by default)
2. NoOpMetricsEngine - Zero-overhead engine used when metrics are disabled
3. MultiMetricsEngine - Fans every call out to several engines

Best-effort Recording:
    Recording must never fail the request path. Every ``record_*`` call
    absorbs backend errors and logs them at debug level.

Usage:
    >>> from pbs_metrics.observability.engine import CollectorMetricsEngine
    >>> from pbs_metrics.types import (
    ...     Browser, CookieFlag, DemandSource, Labels, RequestStatus, RequestType
    ... )
    >>> engine = CollectorMetricsEngine(known_bidders={"appnexus"})
    >>> engine.record_request(Labels(
    ...     source=DemandSource.WEB,
    ...     rtype=RequestType.ORTB2_WEB,
    ...     browser=Browser.OTHER,
    ...     cookie_flag=CookieFlag.YES,
    ...     request_status=RequestStatus.OK,
    ... ))
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from ..exceptions import ConfigurationError
from ..types.dimensions import (
    BOOL_VALUES,
    DIMENSION_DOMAINS,
    BidderName,
    CacheResult,
    ImpMediaType,
    bool_label,
)
from ..types.labels import AdapterLabels, ImpLabels, Labels, UserLabels
from .collector import (
    MetricDefinition,
    UnifiedMetricsCollector,
    build_metric_definitions,
)
from .constants import (
    ACCOUNT_REQUESTS_TOTAL,
    ADAPTER_BIDS_RECEIVED_TOTAL,
    ADAPTER_COOKIE_SYNC_TOTAL,
    ADAPTER_ERRORS_TOTAL,
    ADAPTER_PANICS_TOTAL,
    ADAPTER_PRICE,
    ADAPTER_REQUEST_TIME_SECONDS,
    ADAPTER_REQUESTS_TOTAL,
    BOOL_LABELS,
    CONNECTIONS_ACCEPTED_TOTAL,
    CONNECTIONS_CLOSED_TOTAL,
    COOKIE_SYNC_REQUESTS_TOTAL,
    IMPS_REQUESTED_TOTAL,
    LABEL_ACCOUNT,
    LABEL_ACTION,
    LABEL_ADAPTER,
    LABEL_ADAPTER_BID,
    LABEL_ADAPTER_ERROR,
    LABEL_AUDIO,
    LABEL_BANNER,
    LABEL_BROWSER,
    LABEL_CACHE_RESULT,
    LABEL_COOKIE,
    LABEL_GDPR_BLOCKED,
    LABEL_MARKUP,
    LABEL_MEDIA_TYPE,
    LABEL_NATIVE,
    LABEL_REQUEST_STATUS,
    LABEL_REQUEST_TYPE,
    LABEL_SOURCE,
    LABEL_SUCCESS,
    LABEL_VIDEO,
    LEGACY_IMPS_REQUESTED_TOTAL,
    MARKUP_ADM,
    MARKUP_NURL,
    MARKUP_VALUES,
    METRIC_PREFIX,
    PREBID_CACHE_REQUEST_TIME_SECONDS,
    REQUEST_TIME_SECONDS,
    REQUESTS_TOTAL,
    STORED_IMP_CACHE_TOTAL,
    STORED_REQUEST_CACHE_TOTAL,
    UNKNOWN_ADAPTER,
    USERID_SET_TOTAL,
    metric_name,
)
from .protocols import MetricsCollectorProtocol, MetricsEngineProtocol

logger = logging.getLogger(__name__)


def _label_value(value: Any) -> str:
    """Render a dimension value as a label string (enums by value)."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def request_labels(labels: Labels) -> dict[str, str]:
    """Series labels for a ``Labels`` bundle. Publisher ID is not a label."""
    return {
        LABEL_SOURCE: _label_value(labels.source),
        LABEL_REQUEST_TYPE: _label_value(labels.rtype),
        LABEL_BROWSER: _label_value(labels.browser),
        LABEL_COOKIE: _label_value(labels.cookie_flag),
        LABEL_REQUEST_STATUS: _label_value(labels.request_status),
    }


def adapter_labels(labels: AdapterLabels) -> dict[str, str]:
    """Series labels for an ``AdapterLabels`` bundle, errors excluded."""
    return {
        LABEL_ADAPTER: _label_value(labels.adapter),
        LABEL_SOURCE: _label_value(labels.source),
        LABEL_REQUEST_TYPE: _label_value(labels.rtype),
        LABEL_BROWSER: _label_value(labels.browser),
        LABEL_COOKIE: _label_value(labels.cookie_flag),
        LABEL_ADAPTER_BID: _label_value(labels.adapter_bids),
    }


class CollectorMetricsEngine:
    """
    Metrics engine that records into a MetricsCollectorProtocol.

    Each ``record_*`` operation converts its label bundle into a labels
    dict and updates one or more series on the collector.

    Thread Safety:
        The engine holds no mutable state of its own; thread safety comes
        from the collector.

    Bidder Validation:
        ``record_user_id_set`` receives bidder names that may come from
        client input. Names outside ``known_bidders`` are recorded under
        the ``unknown`` adapter. Other adapter operations trust the
        pipeline to pass configured bidder names.

    Example:
        >>> engine = CollectorMetricsEngine(known_bidders={"appnexus"})
        >>> engine.record_cookie_sync()
        >>> engine.collector.get_counter("pbs_cookie_sync_requests_total")
        1
    """

    def __init__(
        self,
        collector: MetricsCollectorProtocol | None = None,
        known_bidders: Iterable[BidderName] = (),
        namespace: str = METRIC_PREFIX,
        account_metrics_enabled: bool = False,
    ) -> None:
        """
        Initialize the engine.

        Args:
            collector: Sink for recorded series. Defaults to a private
                UnifiedMetricsCollector with Prometheus disabled.
            known_bidders: Configured bidder names
            namespace: Prefix for exported metric names
            account_metrics_enabled: Also count requests per publisher ID

        Raises:
            ConfigurationError: If collector does not satisfy MetricsCollectorProtocol
        """
        if collector is None:
            collector = UnifiedMetricsCollector(
                enable_prometheus=False,
                definitions=build_metric_definitions(namespace),
            )
        elif not isinstance(collector, MetricsCollectorProtocol):
            raise ConfigurationError(
                f"{type(collector).__name__} does not implement "
                "MetricsCollectorProtocol"
            )

        self._collector = collector
        self._known_bidders = frozenset(known_bidders)
        self._namespace = namespace
        self._account_metrics_enabled = account_metrics_enabled

        # Closed-domain metrics must never lose a legal series to the cap
        if isinstance(collector, UnifiedMetricsCollector):
            for name, size in self.closed_domain_sizes().items():
                collector.set_label_limit(name, size)

    @property
    def collector(self) -> MetricsCollectorProtocol:
        return self._collector

    @property
    def known_bidders(self) -> frozenset[BidderName]:
        return self._known_bidders

    @property
    def namespace(self) -> str:
        return self._namespace

    def name(self, base: str) -> str:
        """Exported name for a base metric name under this engine's namespace."""
        return metric_name(base, self._namespace)

    # === Internal helpers ===

    def _inc(
        self, base: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        try:
            self._collector.inc_counter(self.name(base), value, labels)
        except Exception as e:
            logger.debug(f"Failed to record {base}: {e}")

    def _observe(
        self, base: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        try:
            self._collector.observe_histogram(self.name(base), value, labels)
        except Exception as e:
            logger.debug(f"Failed to record {base}: {e}")

    # === Per-request group ===

    def record_connection_accept(self, success: bool) -> None:
        self._inc(
            CONNECTIONS_ACCEPTED_TOTAL, labels={LABEL_SUCCESS: bool_label(success)}
        )

    def record_connection_close(self, success: bool) -> None:
        self._inc(CONNECTIONS_CLOSED_TOTAL, labels={LABEL_SUCCESS: bool_label(success)})

    def record_request(self, labels: Labels) -> None:
        try:
            series = request_labels(labels)
        except Exception as e:
            logger.debug(f"Failed to record {REQUESTS_TOTAL}: {e}")
            return
        self._inc(REQUESTS_TOTAL, labels=series)
        if self._account_metrics_enabled:
            self._inc(ACCOUNT_REQUESTS_TOTAL, labels={LABEL_ACCOUNT: labels.pubid})

    def record_imps(self, labels: ImpLabels) -> None:
        try:
            series = {
                LABEL_BANNER: bool_label(labels.banner_imps),
                LABEL_VIDEO: bool_label(labels.video_imps),
                LABEL_AUDIO: bool_label(labels.audio_imps),
                LABEL_NATIVE: bool_label(labels.native_imps),
            }
        except Exception as e:
            logger.debug(f"Failed to record {IMPS_REQUESTED_TOTAL}: {e}")
            return
        self._inc(IMPS_REQUESTED_TOTAL, labels=series)

    def record_legacy_imps(self, labels: Labels, num_imps: int) -> None:
        try:
            series = request_labels(labels)
        except Exception as e:
            logger.debug(f"Failed to record {LEGACY_IMPS_REQUESTED_TOTAL}: {e}")
            return
        self._inc(LEGACY_IMPS_REQUESTED_TOTAL, num_imps, series)

    def record_request_time(self, labels: Labels, length: float) -> None:
        try:
            series = request_labels(labels)
        except Exception as e:
            logger.debug(f"Failed to record {REQUEST_TIME_SECONDS}: {e}")
            return
        self._observe(REQUEST_TIME_SECONDS, length, series)

    # === Per-adapter group ===

    def record_adapter_request(self, labels: AdapterLabels) -> None:
        try:
            series = adapter_labels(labels)
            errors = sorted(_label_value(err) for err in labels.adapter_errors)
        except Exception as e:
            logger.debug(f"Failed to record {ADAPTER_REQUESTS_TOTAL}: {e}")
            return
        self._inc(ADAPTER_REQUESTS_TOTAL, labels=series)
        # One increment per distinct error, not one per call
        for error in errors:
            self._inc(
                ADAPTER_ERRORS_TOTAL,
                labels={
                    LABEL_ADAPTER: series[LABEL_ADAPTER],
                    LABEL_ADAPTER_ERROR: error,
                },
            )

    def record_adapter_panic(self, labels: AdapterLabels) -> None:
        try:
            series = {LABEL_ADAPTER: _label_value(labels.adapter)}
        except Exception as e:
            logger.debug(f"Failed to record {ADAPTER_PANICS_TOTAL}: {e}")
            return
        self._inc(ADAPTER_PANICS_TOTAL, labels=series)

    def record_adapter_bid_received(
        self, labels: AdapterLabels, bid_type: ImpMediaType, has_adm: bool
    ) -> None:
        try:
            series = {
                LABEL_ADAPTER: _label_value(labels.adapter),
                LABEL_MEDIA_TYPE: _label_value(bid_type),
                LABEL_MARKUP: MARKUP_ADM if has_adm else MARKUP_NURL,
            }
        except Exception as e:
            logger.debug(f"Failed to record {ADAPTER_BIDS_RECEIVED_TOTAL}: {e}")
            return
        self._inc(ADAPTER_BIDS_RECEIVED_TOTAL, labels=series)

    def record_adapter_price(self, labels: AdapterLabels, cpm: float) -> None:
        try:
            series = {LABEL_ADAPTER: _label_value(labels.adapter)}
        except Exception as e:
            logger.debug(f"Failed to record {ADAPTER_PRICE}: {e}")
            return
        self._observe(ADAPTER_PRICE, cpm, series)

    def record_adapter_time(self, labels: AdapterLabels, length: float) -> None:
        try:
            series = {LABEL_ADAPTER: _label_value(labels.adapter)}
        except Exception as e:
            logger.debug(f"Failed to record {ADAPTER_REQUEST_TIME_SECONDS}: {e}")
            return
        self._observe(ADAPTER_REQUEST_TIME_SECONDS, length, series)

    # === Cookie sync / identity ===

    def record_cookie_sync(self) -> None:
        self._inc(COOKIE_SYNC_REQUESTS_TOTAL)

    def record_adapter_cookie_sync(
        self, adapter: BidderName, gdpr_blocked: bool
    ) -> None:
        self._inc(
            ADAPTER_COOKIE_SYNC_TOTAL,
            labels={
                LABEL_ADAPTER: _label_value(adapter),
                LABEL_GDPR_BLOCKED: bool_label(gdpr_blocked),
            },
        )

    def record_user_id_set(self, user_labels: UserLabels) -> None:
        try:
            bidder = _label_value(user_labels.bidder)
            action = _label_value(user_labels.action)
        except Exception as e:
            logger.debug(f"Failed to record {USERID_SET_TOTAL}: {e}")
            return
        if bidder not in self._known_bidders:
            logger.debug(
                f"setuid for unrecognized bidder {bidder!r} recorded as unknown"
            )
            bidder = UNKNOWN_ADAPTER
        self._inc(
            USERID_SET_TOTAL, labels={LABEL_ADAPTER: bidder, LABEL_ACTION: action}
        )

    # === Cache ===

    def record_stored_req_cache_result(
        self, cache_result: CacheResult, inc: int
    ) -> None:
        self._inc(
            STORED_REQUEST_CACHE_TOTAL,
            inc,
            {LABEL_CACHE_RESULT: _label_value(cache_result)},
        )

    def record_stored_imp_cache_result(
        self, cache_result: CacheResult, inc: int
    ) -> None:
        self._inc(
            STORED_IMP_CACHE_TOTAL,
            inc,
            {LABEL_CACHE_RESULT: _label_value(cache_result)},
        )

    def record_prebid_cache_request_time(self, success: bool, length: float) -> None:
        self._observe(
            PREBID_CACHE_REQUEST_TIME_SECONDS,
            length,
            {LABEL_SUCCESS: bool_label(success)},
        )

    # === Pre-registration ===

    def _label_domain(self, metric: str, label: str) -> Sequence[str] | None:
        """Every legal value of a label, or None if the domain is open."""
        if label in DIMENSION_DOMAINS:
            return DIMENSION_DOMAINS[label]
        if label in BOOL_LABELS:
            return BOOL_VALUES
        if label == LABEL_MARKUP:
            return MARKUP_VALUES
        if label == LABEL_ADAPTER and self._known_bidders:
            bidders = sorted(self._known_bidders)
            if metric == USERID_SET_TOTAL:
                bidders.append(UNKNOWN_ADAPTER)
            return bidders
        return None

    def _closed_domains(self, defn: MetricDefinition) -> list[Sequence[str]] | None:
        """Per-label domains of a metric, or None if any label is open."""
        base = defn.name[len(self._namespace) + 1 :]
        domains: list[Sequence[str]] = []
        for label in defn.label_names:
            domain = self._label_domain(base, label)
            if domain is None:
                return None
            domains.append(domain)
        return domains

    def closed_domain_sizes(self) -> dict[str, int]:
        """
        Number of legal label combinations for each closed-domain metric.

        Metrics with an open label (``account``, or ``adapter`` with no
        configured bidders) are left out.
        """
        sizes: dict[str, int] = {}
        for defn in build_metric_definitions(self._namespace).values():
            domains = self._closed_domains(defn)
            if domains is None:
                continue
            size = 1
            for domain in domains:
                size *= len(domain)
            sizes[defn.name] = size
        return sizes

    def preregister(
        self,
        max_series_per_metric: int = UnifiedMetricsCollector.MAX_LABEL_COMBINATIONS,
    ) -> int:
        """
        Create a zero-valued series for every closed-domain label combination.

        Only counters are pre-registered. Counters with an open label
        (``account``, or ``adapter`` with no configured bidders) are
        skipped, as is any counter whose full product would exceed
        ``max_series_per_metric``.

        Returns:
            Number of series created
        """
        created = 0
        for defn in build_metric_definitions(self._namespace).values():
            if defn.metric_type != "counter":
                continue
            domains = self._closed_domains(defn)
            if domains is None:
                logger.debug(
                    f"Skipping pre-registration of {defn.name}: open label domain"
                )
                continue

            size = 1
            for domain in domains:
                size *= len(domain)
            if size > max_series_per_metric:
                logger.warning(
                    f"Skipping pre-registration of {defn.name}: {size} series "
                    f"exceeds limit of {max_series_per_metric}"
                )
                continue

            base = defn.name[len(self._namespace) + 1 :]
            for values in itertools.product(*domains):
                self._inc(base, 0, dict(zip(defn.label_names, values)))
                created += 1

        logger.debug(f"Pre-registered {created} series")
        return created


class NoOpMetricsEngine:
    """
    No-operation metrics engine.

    Default implementation when metrics are disabled. All methods are
    no-ops, ensuring no performance impact.
    """

    def record_connection_accept(self, success: bool) -> None:
        pass

    def record_connection_close(self, success: bool) -> None:
        pass

    def record_request(self, labels: Labels) -> None:
        pass

    def record_imps(self, labels: ImpLabels) -> None:
        pass

    def record_legacy_imps(self, labels: Labels, num_imps: int) -> None:
        pass

    def record_request_time(self, labels: Labels, length: float) -> None:
        pass

    def record_adapter_request(self, labels: AdapterLabels) -> None:
        pass

    def record_adapter_panic(self, labels: AdapterLabels) -> None:
        pass

    def record_adapter_bid_received(
        self, labels: AdapterLabels, bid_type: ImpMediaType, has_adm: bool
    ) -> None:
        pass

    def record_adapter_price(self, labels: AdapterLabels, cpm: float) -> None:
        pass

    def record_adapter_time(self, labels: AdapterLabels, length: float) -> None:
        pass

    def record_cookie_sync(self) -> None:
        pass

    def record_adapter_cookie_sync(
        self, adapter: BidderName, gdpr_blocked: bool
    ) -> None:
        pass

    def record_user_id_set(self, user_labels: UserLabels) -> None:
        pass

    def record_stored_req_cache_result(
        self, cache_result: CacheResult, inc: int
    ) -> None:
        pass

    def record_stored_imp_cache_result(
        self, cache_result: CacheResult, inc: int
    ) -> None:
        pass

    def record_prebid_cache_request_time(self, success: bool, length: float) -> None:
        pass


class MultiMetricsEngine:
    """
    Metrics engine that forwards every call to several engines.

    A failure in one engine is logged and does not stop the call from
    reaching the others.

    Example:
        >>> engine = MultiMetricsEngine([prometheus_engine, debug_engine])
        >>> engine.record_cookie_sync()  # recorded by both
    """

    def __init__(self, engines: Iterable[MetricsEngineProtocol]) -> None:
        self._engines: tuple[MetricsEngineProtocol, ...] = tuple(engines)
        for engine in self._engines:
            if not isinstance(engine, MetricsEngineProtocol):
                raise ConfigurationError(
                    f"{type(engine).__name__} does not implement MetricsEngineProtocol"
                )

    @property
    def engines(self) -> tuple[MetricsEngineProtocol, ...]:
        return self._engines

    def _fan_out(self, operation: str, *args: Any) -> None:
        for engine in self._engines:
            try:
                getattr(engine, operation)(*args)
            except Exception as e:
                logger.debug(f"{type(engine).__name__}.{operation} failed: {e}")

    def record_connection_accept(self, success: bool) -> None:
        self._fan_out("record_connection_accept", success)

    def record_connection_close(self, success: bool) -> None:
        self._fan_out("record_connection_close", success)

    def record_request(self, labels: Labels) -> None:
        self._fan_out("record_request", labels)

    def record_imps(self, labels: ImpLabels) -> None:
        self._fan_out("record_imps", labels)

    def record_legacy_imps(self, labels: Labels, num_imps: int) -> None:
        self._fan_out("record_legacy_imps", labels, num_imps)

    def record_request_time(self, labels: Labels, length: float) -> None:
        self._fan_out("record_request_time", labels, length)

    def record_adapter_request(self, labels: AdapterLabels) -> None:
        self._fan_out("record_adapter_request", labels)

    def record_adapter_panic(self, labels: AdapterLabels) -> None:
        self._fan_out("record_adapter_panic", labels)

    def record_adapter_bid_received(
        self, labels: AdapterLabels, bid_type: ImpMediaType, has_adm: bool
    ) -> None:
        self._fan_out("record_adapter_bid_received", labels, bid_type, has_adm)

    def record_adapter_price(self, labels: AdapterLabels, cpm: float) -> None:
        self._fan_out("record_adapter_price", labels, cpm)

    def record_adapter_time(self, labels: AdapterLabels, length: float) -> None:
        self._fan_out("record_adapter_time", labels, length)

    def record_cookie_sync(self) -> None:
        self._fan_out("record_cookie_sync")

    def record_adapter_cookie_sync(
        self, adapter: BidderName, gdpr_blocked: bool
    ) -> None:
        self._fan_out("record_adapter_cookie_sync", adapter, gdpr_blocked)

    def record_user_id_set(self, user_labels: UserLabels) -> None:
        self._fan_out("record_user_id_set", user_labels)

    def record_stored_req_cache_result(
        self, cache_result: CacheResult, inc: int
    ) -> None:
        self._fan_out("record_stored_req_cache_result", cache_result, inc)

    def record_stored_imp_cache_result(
        self, cache_result: CacheResult, inc: int
    ) -> None:
        self._fan_out("record_stored_imp_cache_result", cache_result, inc)

    def record_prebid_cache_request_time(self, success: bool, length: float) -> None:
        self._fan_out("record_prebid_cache_request_time", success, length)


__all__ = [
    "CollectorMetricsEngine",
    "MultiMetricsEngine",
    "NoOpMetricsEngine",
    "adapter_labels",
    "request_labels",
]
