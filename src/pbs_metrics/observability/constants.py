# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name and label name constants following Prometheus naming conventions.

Metric names here are base names. The exported name is
``{namespace}_{base}`` (``pbs_requests_total`` with the default namespace);
use ``metric_name()`` to build it.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`

Label Best Practices:
    Every label below has a closed domain (see
    ``pbs_metrics.types.dimensions``) except:
    - `adapter` - bounded by the configured bidder set
    - `account` - publisher ID, unbounded; only used by the opt-in
      account counter and capped by the collector

Group Warning:
    Metrics in the per-request group fire once per inbound request.
    Metrics in the per-adapter group fire once per adapter call, so their
    totals are larger by the number of adapters per request. Do not
    compute ratios across the two groups.

Usage:
    >>> from pbs_metrics.observability.constants import REQUESTS_TOTAL, metric_name
    >>> metric_name(REQUESTS_TOTAL)
    'pbs_requests_total'
"""


# =============================================================================
# Global Prefix
# =============================================================================

METRIC_PREFIX = "pbs"
"""Default namespace for all Prometheus metrics in this library."""


def metric_name(base: str, namespace: str = METRIC_PREFIX) -> str:
    """
    Build the exported metric name.

    Example:
        >>> metric_name("requests_total", "auction")
        'auction_requests_total'
    """
    return f"{namespace}_{base}"


# =============================================================================
# Label Names
# =============================================================================

LABEL_SOURCE = "source"
LABEL_REQUEST_TYPE = "request_type"
LABEL_BROWSER = "browser"
LABEL_COOKIE = "cookie"
LABEL_REQUEST_STATUS = "request_status"
LABEL_ADAPTER = "adapter"
LABEL_ADAPTER_BID = "adapter_bid"
LABEL_ADAPTER_ERROR = "adapter_error"
LABEL_MEDIA_TYPE = "media_type"
LABEL_MARKUP = "markup"
LABEL_CACHE_RESULT = "cache_result"
LABEL_ACTION = "action"
LABEL_SUCCESS = "success"
LABEL_GDPR_BLOCKED = "gdpr_blocked"
LABEL_ACCOUNT = "account"
LABEL_BANNER = "banner"
LABEL_VIDEO = "video"
LABEL_AUDIO = "audio"
LABEL_NATIVE = "native"

BOOL_LABELS = frozenset(
    {
        LABEL_SUCCESS,
        LABEL_GDPR_BLOCKED,
        LABEL_BANNER,
        LABEL_VIDEO,
        LABEL_AUDIO,
        LABEL_NATIVE,
    }
)
"""Labels whose value is a boolean rendered as 'true'/'false'."""

MARKUP_ADM = "adm"
MARKUP_NURL = "nurl"
MARKUP_VALUES = (MARKUP_ADM, MARKUP_NURL)
"""Bid delivered inline creative markup (adm) or a fetch URL only (nurl)."""

UNKNOWN_ADAPTER = "unknown"
"""Bucket for adapter names that are not in the configured bidder set."""

REQUEST_LABEL_NAMES: tuple[str, ...] = (
    LABEL_SOURCE,
    LABEL_REQUEST_TYPE,
    LABEL_BROWSER,
    LABEL_COOKIE,
    LABEL_REQUEST_STATUS,
)
"""Labels derived from a ``Labels`` bundle (publisher ID excluded)."""

ADAPTER_LABEL_NAMES: tuple[str, ...] = (
    LABEL_ADAPTER,
    LABEL_SOURCE,
    LABEL_REQUEST_TYPE,
    LABEL_BROWSER,
    LABEL_COOKIE,
    LABEL_ADAPTER_BID,
)
"""Labels derived from an ``AdapterLabels`` bundle, without errors or publisher ID."""


# =============================================================================
# Per-Request Metrics (fire once per inbound request)
# =============================================================================

CONNECTIONS_ACCEPTED_TOTAL = "connections_accepted_total"
"""Total inbound connection accept attempts, by success."""

CONNECTIONS_CLOSED_TOTAL = "connections_closed_total"
"""Total connection closes, by success."""

REQUESTS_TOTAL = "requests_total"
"""Total inbound requests."""

REQUEST_TIME_SECONDS = "request_time_seconds"
"""Time to serve an inbound request (histogram)."""

IMPS_REQUESTED_TOTAL = "imps_requested_total"
"""Total impressions requested, by media type presence flags."""

LEGACY_IMPS_REQUESTED_TOTAL = "legacy_imps_requested_total"
"""Total impressions requested on the legacy endpoint."""

ACCOUNT_REQUESTS_TOTAL = "account_requests_total"
"""Total inbound requests per publisher account (opt-in)."""


# =============================================================================
# Per-Adapter Metrics (fire once per adapter call)
# =============================================================================

ADAPTER_REQUESTS_TOTAL = "adapter_requests_total"
"""Total requests sent to bidder adapters."""

ADAPTER_ERRORS_TOTAL = "adapter_errors_total"
"""Total adapter errors, one increment per error in the bundle."""

ADAPTER_PANICS_TOTAL = "adapter_panics_total"
"""Total recovered adapter faults."""

ADAPTER_BIDS_RECEIVED_TOTAL = "adapter_bids_received_total"
"""Total bids received, by media type and markup delivery."""

ADAPTER_PRICE = "adapter_price"
"""CPM of bids received (histogram)."""

ADAPTER_REQUEST_TIME_SECONDS = "adapter_request_time_seconds"
"""Adapter request duration (histogram)."""


# =============================================================================
# Cookie Sync / Identity Metrics
# =============================================================================

COOKIE_SYNC_REQUESTS_TOTAL = "cookie_sync_requests_total"
"""Total /cookie_sync requests."""

ADAPTER_COOKIE_SYNC_TOTAL = "adapter_cookie_sync_total"
"""Total cookie syncs per adapter, by GDPR blocking."""

USERID_SET_TOTAL = "setuid_requests_total"
"""Total /setuid requests, by action and validated adapter."""


# =============================================================================
# Cache Metrics
# =============================================================================

STORED_REQUEST_CACHE_TOTAL = "stored_request_cache_total"
"""Stored request cache lookups, by hit/miss."""

STORED_IMP_CACHE_TOTAL = "stored_imp_cache_total"
"""Stored impression cache lookups, by hit/miss."""

PREBID_CACHE_REQUEST_TIME_SECONDS = "prebid_cache_request_time_seconds"
"""Prebid cache request duration (histogram)."""


# =============================================================================
# Histogram Buckets
# =============================================================================

LATENCY_BUCKETS: list[float] = [
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
]
"""Default latency buckets for request duration histograms (in seconds)."""

ADAPTER_LATENCY_BUCKETS: list[float] = [
    0.01,
    0.025,
    0.05,
    0.1,
    0.2,
    0.3,
    0.5,
    0.75,
    1.0,
    2.0,
]
"""Adapter call buckets, tighter around typical auction timeouts (in seconds)."""

PRICE_BUCKETS: list[float] = [
    0.25,
    0.5,
    1.0,
    2.0,
    5.0,
    10.0,
    20.0,
    50.0,
]
"""CPM buckets for bid price histograms."""


__all__ = [
    "ACCOUNT_REQUESTS_TOTAL",
    "ADAPTER_BIDS_RECEIVED_TOTAL",
    "ADAPTER_COOKIE_SYNC_TOTAL",
    "ADAPTER_ERRORS_TOTAL",
    "ADAPTER_LABEL_NAMES",
    "ADAPTER_LATENCY_BUCKETS",
    "ADAPTER_PANICS_TOTAL",
    "ADAPTER_PRICE",
    "ADAPTER_REQUESTS_TOTAL",
    "ADAPTER_REQUEST_TIME_SECONDS",
    "BOOL_LABELS",
    "CONNECTIONS_ACCEPTED_TOTAL",
    "CONNECTIONS_CLOSED_TOTAL",
    "COOKIE_SYNC_REQUESTS_TOTAL",
    "IMPS_REQUESTED_TOTAL",
    "LABEL_ACCOUNT",
    "LABEL_ACTION",
    "LABEL_ADAPTER",
    "LABEL_ADAPTER_BID",
    "LABEL_ADAPTER_ERROR",
    "LABEL_AUDIO",
    "LABEL_BANNER",
    "LABEL_BROWSER",
    "LABEL_CACHE_RESULT",
    "LABEL_COOKIE",
    "LABEL_GDPR_BLOCKED",
    "LABEL_MARKUP",
    "LABEL_MEDIA_TYPE",
    "LABEL_NATIVE",
    "LABEL_REQUEST_STATUS",
    "LABEL_REQUEST_TYPE",
    "LABEL_SOURCE",
    "LABEL_SUCCESS",
    "LABEL_VIDEO",
    "LATENCY_BUCKETS",
    "LEGACY_IMPS_REQUESTED_TOTAL",
    "MARKUP_ADM",
    "MARKUP_NURL",
    "MARKUP_VALUES",
    "METRIC_PREFIX",
    "PREBID_CACHE_REQUEST_TIME_SECONDS",
    "PRICE_BUCKETS",
    "REQUESTS_TOTAL",
    "REQUEST_LABEL_NAMES",
    "REQUEST_TIME_SECONDS",
    "STORED_IMP_CACHE_TOTAL",
    "STORED_REQUEST_CACHE_TOTAL",
    "UNKNOWN_ADAPTER",
    "USERID_SET_TOTAL",
    "metric_name",
]
