# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Shared fixtures for pbs-metrics tests.

Label bundle factories build the context a serving pipeline would resolve
for one request or one adapter call. Each test overrides only the fields
it cares about.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from pbs_metrics.observability.collector import (
    UnifiedMetricsCollector,
    reset_metrics_collector,
)
from pbs_metrics.observability.engine import CollectorMetricsEngine
from pbs_metrics.types import (
    AdapterBid,
    AdapterLabels,
    Browser,
    CookieFlag,
    DemandSource,
    Labels,
    RequestStatus,
    RequestType,
)

KNOWN_BIDDERS = frozenset({"appnexus", "rubicon"})


@pytest.fixture(autouse=True)
def _reset_global_collector() -> Iterator[None]:
    yield
    reset_metrics_collector()


@pytest.fixture
def make_labels() -> Callable[..., Labels]:
    def factory(**overrides: Any) -> Labels:
        kwargs: dict[str, Any] = {
            "source": DemandSource.WEB,
            "rtype": RequestType.ORTB2_WEB,
            "browser": Browser.OTHER,
            "cookie_flag": CookieFlag.YES,
            "request_status": RequestStatus.OK,
        }
        kwargs.update(overrides)
        return Labels(**kwargs)

    return factory


@pytest.fixture
def make_adapter_labels() -> Callable[..., AdapterLabels]:
    def factory(**overrides: Any) -> AdapterLabels:
        kwargs: dict[str, Any] = {
            "source": DemandSource.WEB,
            "rtype": RequestType.ORTB2_WEB,
            "adapter": "appnexus",
            "browser": Browser.OTHER,
            "cookie_flag": CookieFlag.YES,
            "adapter_bids": AdapterBid.PRESENT,
        }
        kwargs.update(overrides)
        return AdapterLabels(**kwargs)

    return factory


@pytest.fixture
def collector() -> UnifiedMetricsCollector:
    """Fresh collector without Prometheus."""
    return UnifiedMetricsCollector(enable_prometheus=False)


@pytest.fixture
def engine(collector: UnifiedMetricsCollector) -> CollectorMetricsEngine:
    """Engine over the ``collector`` fixture with the default bidder set."""
    return CollectorMetricsEngine(collector, known_bidders=KNOWN_BIDDERS)
