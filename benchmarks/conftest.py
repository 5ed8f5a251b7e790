"""
Shared fixtures for benchmark tests.
"""

import pytest

from pbs_metrics.observability.collector import UnifiedMetricsCollector
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

BENCHMARK_BIDDERS = ["appnexus", "rubicon", "openx", "pubmatic", "ix"]


@pytest.fixture
def benchmark_collector():
    """Dict-only collector so timings measure the library, not prometheus_client."""
    return UnifiedMetricsCollector(enable_prometheus=False)


@pytest.fixture
def benchmark_engine(benchmark_collector):
    return CollectorMetricsEngine(
        benchmark_collector, known_bidders=BENCHMARK_BIDDERS
    )


@pytest.fixture
def request_bundle():
    return Labels(
        source=DemandSource.WEB,
        rtype=RequestType.ORTB2_WEB,
        browser=Browser.OTHER,
        cookie_flag=CookieFlag.YES,
        request_status=RequestStatus.OK,
    )


@pytest.fixture
def adapter_bundles():
    return [
        AdapterLabels(
            source=DemandSource.WEB,
            rtype=RequestType.ORTB2_WEB,
            adapter=bidder,
            browser=Browser.OTHER,
            cookie_flag=CookieFlag.YES,
            adapter_bids=AdapterBid.PRESENT,
        )
        for bidder in BENCHMARK_BIDDERS
    ]
