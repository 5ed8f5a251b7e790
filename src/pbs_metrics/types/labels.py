# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Label bundles attached to recorded metrics.

A bundle is built fresh for each event from resolved request context and
handed to exactly one recording call. Bundles are frozen and compare by
value.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .dimensions import (
    PUBLISHER_UNKNOWN,
    AdapterBid,
    AdapterError,
    BidderName,
    Browser,
    CookieFlag,
    DemandSource,
    ImpMediaType,
    RequestAction,
    RequestStatus,
    RequestType,
)


def _resolve_pubid(pubid: str | None) -> str:
    return pubid if pubid else PUBLISHER_UNKNOWN


@dataclass(frozen=True)
class Labels:
    """
    Labels attached to per-request metrics.

    Attributes:
        source: Demand source of the request
        rtype: Endpoint that received the request
        pubid: Exchange specific publisher ID. Unbounded, so values cannot
            be enumerated. Empty or None resolves to ``PUBLISHER_UNKNOWN``.
        browser: Browser class
        cookie_flag: Whether the user ID cookie was present
        request_status: Outcome of the request
    """

    source: DemandSource
    rtype: RequestType
    browser: Browser
    cookie_flag: CookieFlag
    request_status: RequestStatus
    pubid: str = PUBLISHER_UNKNOWN

    def __post_init__(self) -> None:
        object.__setattr__(self, "pubid", _resolve_pubid(self.pubid))


@dataclass(frozen=True)
class AdapterLabels:
    """
    Labels attached to per-adapter metrics.

    ``adapter_errors`` is a set: one adapter call may fail for several
    independent reasons, and a backend emits one error increment per
    element. Any iterable is accepted and normalised to a frozenset.

    Attributes:
        source: Demand source of the request
        rtype: Endpoint that received the request
        adapter: Configured bidder name
        browser: Browser class
        cookie_flag: Whether the user ID cookie was present
        adapter_bids: Whether the adapter returned bids
        pubid: Exchange specific publisher ID (see ``Labels.pubid``)
        adapter_errors: Errors that occurred during the adapter call
    """

    source: DemandSource
    rtype: RequestType
    adapter: BidderName
    browser: Browser
    cookie_flag: CookieFlag
    adapter_bids: AdapterBid
    pubid: str = PUBLISHER_UNKNOWN
    adapter_errors: frozenset[AdapterError] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pubid", _resolve_pubid(self.pubid))
        if not isinstance(self.adapter_errors, frozenset):
            errors: Iterable[AdapterError] = self.adapter_errors or ()
            object.__setattr__(self, "adapter_errors", frozenset(errors))


@dataclass(frozen=True)
class ImpLabels:
    """
    Presence flags for the media types an impression is eligible for.

    An impression may carry several media types at once, so this is four
    independent booleans rather than a single ImpMediaType.
    """

    banner_imps: bool = False
    video_imps: bool = False
    audio_imps: bool = False
    native_imps: bool = False

    def media_types(self) -> list[ImpMediaType]:
        """Return the media types whose flag is set, in listing order."""
        flags = {
            ImpMediaType.BANNER: self.banner_imps,
            ImpMediaType.VIDEO: self.video_imps,
            ImpMediaType.AUDIO: self.audio_imps,
            ImpMediaType.NATIVE: self.native_imps,
        }
        return [media_type for media_type, present in flags.items() if present]


@dataclass(frozen=True)
class RequestLabels:
    """Result of a lower-level network request."""

    request_status: RequestStatus


@dataclass(frozen=True)
class UserLabels:
    """
    Labels for the /setuid endpoint.

    ``bidder`` may originate from unauthenticated client input; backends
    must check it against the configured bidders before using it.
    """

    action: RequestAction
    bidder: BidderName


__all__ = [
    "AdapterLabels",
    "ImpLabels",
    "Labels",
    "RequestLabels",
    "UserLabels",
]
