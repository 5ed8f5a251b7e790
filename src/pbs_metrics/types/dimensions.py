# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Restricted-domain label dimensions.

Every label value attached to a metric comes from one of the closed
enumerations below. Publisher ID is the only free-text dimension and is
kept as a plain string (see ``PUBLISHER_UNKNOWN``).

Each enumeration has a matching listing function that returns every legal
value in a stable order. Backends use these to pre-register series; tests
use them to check that the listing and the enum stay in sync.

Values are not validated here. Passing a value outside a dimension's
domain is a caller bug.

Example:
    >>> from pbs_metrics.types.dimensions import DemandSource, demand_types
    >>> DemandSource.WEB.value
    'web'
    >>> [d.value for d in demand_types()]
    ['web', 'app', 'unknown']
"""

from enum import Enum
from types import MappingProxyType

# Adapter identities come from configuration, not from this module
BidderName = str  # Type alias for clarity

PUBLISHER_UNKNOWN = "unknown"
"""Default value for ``Labels.pubid`` when the publisher cannot be resolved."""


class DemandSource(str, Enum):
    """Where the inbound request originated."""

    WEB = "web"
    APP = "app"
    UNKNOWN = "unknown"


class RequestType(str, Enum):
    """Endpoint that received the request."""

    LEGACY = "legacy"
    ORTB2_WEB = "openrtb2-web"
    ORTB2_APP = "openrtb2-app"
    AMP = "amp"
    VIDEO = "video"


class ImpMediaType(str, Enum):
    """Media type described in an impression (also used as the bid type)."""

    BANNER = "banner"
    VIDEO = "video"
    AUDIO = "audio"
    NATIVE = "native"


class Browser(str, Enum):
    """Browser class. Only Safari is singled out."""

    SAFARI = "safari"
    OTHER = "other"


class CookieFlag(str, Enum):
    """Whether the user ID cookie was present."""

    YES = "exists"
    NO = "no"
    UNKNOWN = "unknown"


class RequestStatus(str, Enum):
    """Outcome of a request."""

    OK = "ok"
    BAD_INPUT = "badinput"
    ERR = "err"
    NETWORK_ERR = "networkerr"
    BLACKLISTED = "blacklisted-account-or-app"


class AdapterBid(str, Enum):
    """Whether the adapter returned any bids."""

    PRESENT = "bid"
    NONE = "nobid"


class AdapterError(str, Enum):
    """Errors which may occur during an adapter's execution."""

    BAD_INPUT = "badinput"
    BAD_SERVER_RESPONSE = "badserverresponse"
    TIMEOUT = "timeout"
    FAILED_TO_REQUEST_BIDS = "failedtorequestbid"
    UNKNOWN = "unknown"


class CacheResult(str, Enum):
    """
    Outcome of a stored request/imp cache lookup.

    HIT means the key was found in the cache. MISS means it was not and had
    to be fetched from the backing store.
    """

    HIT = "hit"
    MISS = "miss"


class RequestAction(str, Enum):
    """Result of a /setuid request."""

    SET = "set"
    OPT_OUT = "opt_out"
    GDPR = "gdpr"
    ERR = "err"


# =============================================================================
# Listing functions
# =============================================================================


def demand_types() -> list[DemandSource]:
    return [
        DemandSource.WEB,
        DemandSource.APP,
        DemandSource.UNKNOWN,
    ]


def request_types() -> list[RequestType]:
    return [
        RequestType.LEGACY,
        RequestType.ORTB2_WEB,
        RequestType.ORTB2_APP,
        RequestType.AMP,
        RequestType.VIDEO,
    ]


def imp_types() -> list[ImpMediaType]:
    return [
        ImpMediaType.BANNER,
        ImpMediaType.VIDEO,
        ImpMediaType.AUDIO,
        ImpMediaType.NATIVE,
    ]


def browser_types() -> list[Browser]:
    return [
        Browser.SAFARI,
        Browser.OTHER,
    ]


def cookie_types() -> list[CookieFlag]:
    return [
        CookieFlag.YES,
        CookieFlag.NO,
        CookieFlag.UNKNOWN,
    ]


def request_statuses() -> list[RequestStatus]:
    return [
        RequestStatus.OK,
        RequestStatus.BAD_INPUT,
        RequestStatus.ERR,
        RequestStatus.NETWORK_ERR,
        RequestStatus.BLACKLISTED,
    ]


def adapter_bids() -> list[AdapterBid]:
    return [
        AdapterBid.PRESENT,
        AdapterBid.NONE,
    ]


def adapter_errors() -> list[AdapterError]:
    return [
        AdapterError.BAD_INPUT,
        AdapterError.BAD_SERVER_RESPONSE,
        AdapterError.TIMEOUT,
        AdapterError.FAILED_TO_REQUEST_BIDS,
        AdapterError.UNKNOWN,
    ]


def cache_results() -> list[CacheResult]:
    """Return the possible cache results, i.e. hit or miss."""
    return [
        CacheResult.HIT,
        CacheResult.MISS,
    ]


def request_actions() -> list[RequestAction]:
    """Return the possible /setuid action labels."""
    return [
        RequestAction.SET,
        RequestAction.OPT_OUT,
        RequestAction.GDPR,
        RequestAction.ERR,
    ]


BOOL_VALUES: tuple[str, ...] = ("true", "false")
"""Booleans are exported as lowercase strings."""


def bool_label(value: bool) -> str:
    """Render a boolean as a label value."""
    return "true" if value else "false"


# Label name -> every legal string value, for backend pre-registration.
# "adapter" and "account" are absent: their domains are not known here.
DIMENSION_DOMAINS = MappingProxyType(
    {
        "source": tuple(d.value for d in demand_types()),
        "request_type": tuple(r.value for r in request_types()),
        "media_type": tuple(m.value for m in imp_types()),
        "browser": tuple(b.value for b in browser_types()),
        "cookie": tuple(c.value for c in cookie_types()),
        "request_status": tuple(s.value for s in request_statuses()),
        "adapter_bid": tuple(b.value for b in adapter_bids()),
        "adapter_error": tuple(e.value for e in adapter_errors()),
        "cache_result": tuple(c.value for c in cache_results()),
        "action": tuple(a.value for a in request_actions()),
    }
)


__all__ = [
    "BOOL_VALUES",
    "DIMENSION_DOMAINS",
    "PUBLISHER_UNKNOWN",
    "AdapterBid",
    "AdapterError",
    "BidderName",
    "Browser",
    "CacheResult",
    "CookieFlag",
    "DemandSource",
    "ImpMediaType",
    "RequestAction",
    "RequestStatus",
    "RequestType",
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
