# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Label dimensions and label bundles."""

from .dimensions import (
    BOOL_VALUES,
    DIMENSION_DOMAINS,
    PUBLISHER_UNKNOWN,
    AdapterBid,
    AdapterError,
    BidderName,
    Browser,
    CacheResult,
    CookieFlag,
    DemandSource,
    ImpMediaType,
    RequestAction,
    RequestStatus,
    RequestType,
    adapter_bids,
    adapter_errors,
    bool_label,
    browser_types,
    cache_results,
    cookie_types,
    demand_types,
    imp_types,
    request_actions,
    request_statuses,
    request_types,
)
from .labels import AdapterLabels, ImpLabels, Labels, RequestLabels, UserLabels

__all__ = [
    "BOOL_VALUES",
    "DIMENSION_DOMAINS",
    "PUBLISHER_UNKNOWN",
    "AdapterBid",
    "AdapterError",
    # Bundles
    "AdapterLabels",
    "BidderName",
    "Browser",
    "CacheResult",
    "CookieFlag",
    # Dimensions
    "DemandSource",
    "ImpLabels",
    "ImpMediaType",
    "Labels",
    "RequestAction",
    "RequestLabels",
    "RequestStatus",
    "RequestType",
    "UserLabels",
    # Listing functions
    "adapter_bids",
    "adapter_errors",
    "bool_label",
    "browser_types",
    "cache_results",
    "cookie_types",
    "demand_types",
    "imp_types",
    "request_actions",
    "request_statuses",
    "request_types",
]
