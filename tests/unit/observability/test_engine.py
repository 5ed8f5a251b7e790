# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Tests for the metrics engines.

Covers:
- Series produced by each CollectorMetricsEngine operation
- Per-request vs per-adapter group separation
- Adapter error set fidelity and cache result commutativity
- /setuid bidder validation
- Best-effort recording
- Pre-registration
- NoOpMetricsEngine and MultiMetricsEngine
"""

import threading
from unittest.mock import MagicMock

import pytest

from pbs_metrics.exceptions import ConfigurationError
from pbs_metrics.observability.collector import (
    PROMETHEUS_AVAILABLE,
    UnifiedMetricsCollector,
)
from pbs_metrics.observability.engine import (
    CollectorMetricsEngine,
    MultiMetricsEngine,
    NoOpMetricsEngine,
    adapter_labels,
    request_labels,
)
from pbs_metrics.observability.protocols import MetricsEngineProtocol
from pbs_metrics.types import (
    AdapterBid,
    AdapterError,
    Browser,
    CacheResult,
    CookieFlag,
    DemandSource,
    ImpLabels,
    ImpMediaType,
    RequestAction,
    RequestStatus,
    RequestType,
    UserLabels,
    request_statuses,
)

WEB_SERIES = {
    "source": "web",
    "request_type": "openrtb2-web",
    "browser": "other",
    "cookie": "exists",
    "request_status": "ok",
}


# =============================================================================
# Label Conversion Tests
# =============================================================================


class TestLabelConversion:
    """Test bundle to series label conversion."""

    def test_request_labels(self, make_labels) -> None:
        assert request_labels(make_labels(pubid="1234")) == WEB_SERIES

    def test_request_labels_exclude_pubid(self, make_labels) -> None:
        assert "pubid" not in request_labels(make_labels(pubid="1234"))
        assert "account" not in request_labels(make_labels(pubid="1234"))

    def test_adapter_labels(self, make_adapter_labels) -> None:
        labels = make_adapter_labels(
            source=DemandSource.APP,
            rtype=RequestType.AMP,
            browser=Browser.SAFARI,
            cookie_flag=CookieFlag.UNKNOWN,
            adapter_bids=AdapterBid.NONE,
            adapter_errors={AdapterError.TIMEOUT},
        )
        assert adapter_labels(labels) == {
            "adapter": "appnexus",
            "source": "app",
            "request_type": "amp",
            "browser": "safari",
            "cookie": "unknown",
            "adapter_bid": "nobid",
        }


# =============================================================================
# Construction Tests
# =============================================================================


class TestConstruction:
    """Test CollectorMetricsEngine construction."""

    def test_default_collector(self) -> None:
        engine = CollectorMetricsEngine()
        assert isinstance(engine.collector, UnifiedMetricsCollector)
        assert engine.collector.prometheus_enabled is False
        assert engine.known_bidders == frozenset()

    def test_namespace(self) -> None:
        engine = CollectorMetricsEngine(namespace="auction")
        engine.record_cookie_sync()
        assert engine.name("requests_total") == "auction_requests_total"
        assert engine.collector.get_counter("auction_cookie_sync_requests_total") == 1

    def test_invalid_collector_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="MetricsCollectorProtocol"):
            CollectorMetricsEngine(object())  # type: ignore[arg-type]

    def test_known_bidders_frozen(self) -> None:
        engine = CollectorMetricsEngine(known_bidders=["appnexus", "appnexus"])
        assert engine.known_bidders == frozenset({"appnexus"})

    @pytest.mark.parametrize(
        "engine_cls", [CollectorMetricsEngine, NoOpMetricsEngine]
    )
    def test_implements_protocol(self, engine_cls) -> None:
        assert isinstance(engine_cls(), MetricsEngineProtocol)

    def test_multi_implements_protocol(self) -> None:
        assert isinstance(MultiMetricsEngine([]), MetricsEngineProtocol)


# =============================================================================
# Per-Request Group Tests
# =============================================================================


class TestPerRequestOperations:
    """Test per-request recording operations."""

    def test_request_scenario(self, engine, collector, make_labels) -> None:
        """One request and a 120ms timing land under the same label set."""
        labels = make_labels(pubid="unknown")

        engine.record_request(labels)
        engine.record_request_time(labels, 0.120)

        assert collector.get_counter("pbs_requests_total", WEB_SERIES) == 1
        assert collector.get_counter_total("pbs_requests_total") == 1
        assert collector.get_observations("pbs_request_time_seconds", WEB_SERIES) == [
            0.120
        ]

    def test_distinct_label_sets(self, engine, collector, make_labels) -> None:
        engine.record_request(make_labels())
        engine.record_request(make_labels(request_status=RequestStatus.BLACKLISTED))
        blacklisted = dict(WEB_SERIES, request_status="blacklisted-account-or-app")
        assert collector.get_counter("pbs_requests_total", WEB_SERIES) == 1
        assert collector.get_counter("pbs_requests_total", blacklisted) == 1

    def test_connection_accept(self, engine, collector) -> None:
        engine.record_connection_accept(True)
        engine.record_connection_accept(False)
        engine.record_connection_accept(False)
        name = "pbs_connections_accepted_total"
        assert collector.get_counter(name, {"success": "true"}) == 1
        assert collector.get_counter(name, {"success": "false"}) == 2

    def test_connection_close(self, engine, collector) -> None:
        engine.record_connection_close(True)
        assert (
            collector.get_counter("pbs_connections_closed_total", {"success": "true"})
            == 1
        )

    def test_imps(self, engine, collector) -> None:
        engine.record_imps(ImpLabels(banner_imps=True, native_imps=True))
        assert (
            collector.get_counter(
                "pbs_imps_requested_total",
                {
                    "banner": "true",
                    "video": "false",
                    "audio": "false",
                    "native": "true",
                },
            )
            == 1
        )

    def test_legacy_imps(self, engine, collector, make_labels) -> None:
        labels = make_labels(rtype=RequestType.LEGACY)
        engine.record_legacy_imps(labels, 3)
        engine.record_legacy_imps(labels, 2)
        series = dict(WEB_SERIES, request_type="legacy")
        assert collector.get_counter("pbs_legacy_imps_requested_total", series) == 5

    def test_account_metrics_disabled_by_default(
        self, engine, collector, make_labels
    ) -> None:
        engine.record_request(make_labels(pubid="1234"))
        assert collector.get_counter_total("pbs_account_requests_total") == 0

    def test_account_metrics_enabled(self, collector, make_labels) -> None:
        engine = CollectorMetricsEngine(collector, account_metrics_enabled=True)
        engine.record_request(make_labels(pubid="1234"))
        engine.record_request(make_labels())
        name = "pbs_account_requests_total"
        assert collector.get_counter(name, {"account": "1234"}) == 1
        assert collector.get_counter(name, {"account": "unknown"}) == 1


# =============================================================================
# Per-Adapter Group Tests
# =============================================================================


class TestPerAdapterOperations:
    """Test per-adapter recording operations."""

    def test_adapter_request(self, engine, collector, make_adapter_labels) -> None:
        labels = make_adapter_labels()
        engine.record_adapter_request(labels)
        assert (
            collector.get_counter("pbs_adapter_requests_total", adapter_labels(labels))
            == 1
        )
        assert collector.get_counter_total("pbs_adapter_errors_total") == 0

    def test_error_set_counts_each_error(
        self, engine, collector, make_adapter_labels
    ) -> None:
        """An adapter call with k errors produces k error increments."""
        errors = {AdapterError.TIMEOUT, AdapterError.BAD_INPUT, AdapterError.UNKNOWN}
        engine.record_adapter_request(
            make_adapter_labels(adapter_errors=errors, adapter_bids=AdapterBid.NONE)
        )

        name = "pbs_adapter_errors_total"
        assert collector.get_counter_total("pbs_adapter_requests_total") == 1
        assert collector.get_counter_total(name) == 3
        for error in ("timeout", "badinput", "unknown"):
            assert (
                collector.get_counter(
                    name, {"adapter": "appnexus", "adapter_error": error}
                )
                == 1
            )

    def test_adapter_panic(self, engine, collector, make_adapter_labels) -> None:
        engine.record_adapter_panic(make_adapter_labels(adapter="rubicon"))
        assert (
            collector.get_counter("pbs_adapter_panics_total", {"adapter": "rubicon"})
            == 1
        )

    def test_bid_received(self, engine, collector, make_adapter_labels) -> None:
        labels = make_adapter_labels()
        engine.record_adapter_bid_received(labels, ImpMediaType.VIDEO, False)
        engine.record_adapter_bid_received(labels, ImpMediaType.BANNER, True)
        name = "pbs_adapter_bids_received_total"
        assert (
            collector.get_counter(
                name, {"adapter": "appnexus", "media_type": "video", "markup": "nurl"}
            )
            == 1
        )
        assert (
            collector.get_counter(
                name, {"adapter": "appnexus", "media_type": "banner", "markup": "adm"}
            )
            == 1
        )

    def test_price_and_time(self, engine, collector, make_adapter_labels) -> None:
        labels = make_adapter_labels()
        engine.record_adapter_price(labels, 2.5)
        engine.record_adapter_time(labels, 0.08)
        series = {"adapter": "appnexus"}
        assert collector.get_observations("pbs_adapter_price", series) == [2.5]
        assert collector.get_observations(
            "pbs_adapter_request_time_seconds", series
        ) == [0.08]


class TestGroupSeparation:
    """Per-request and per-adapter counts differ by adapters per request."""

    @pytest.mark.parametrize(("requests", "adapters"), [(10, 3), (7, 1), (4, 5)])
    def test_factor_of_adapters(
        self, engine, collector, make_labels, make_adapter_labels, requests, adapters
    ) -> None:
        for _ in range(requests):
            engine.record_request(make_labels())
            for i in range(adapters):
                engine.record_adapter_request(make_adapter_labels(adapter=f"b{i}"))

        per_request = collector.get_counter_total("pbs_requests_total")
        per_adapter = collector.get_counter_total("pbs_adapter_requests_total")
        assert per_request == requests
        assert per_adapter == requests * adapters


# =============================================================================
# Cookie Sync / Identity Tests
# =============================================================================


class TestCookieSync:
    """Test cookie sync and /setuid operations."""

    def test_cookie_sync(self, engine, collector) -> None:
        engine.record_cookie_sync()
        engine.record_cookie_sync()
        assert collector.get_counter("pbs_cookie_sync_requests_total") == 2

    def test_adapter_cookie_sync(self, engine, collector) -> None:
        engine.record_adapter_cookie_sync("rubicon", True)
        assert (
            collector.get_counter(
                "pbs_adapter_cookie_sync_total",
                {"adapter": "rubicon", "gdpr_blocked": "true"},
            )
            == 1
        )

    def test_user_id_set_known_bidder(self, engine, collector) -> None:
        engine.record_user_id_set(UserLabels(RequestAction.SET, "appnexus"))
        assert (
            collector.get_counter(
                "pbs_setuid_requests_total", {"adapter": "appnexus", "action": "set"}
            )
            == 1
        )

    def test_user_id_set_unknown_bidder_rerouted(self, engine, collector) -> None:
        """Client-supplied bidder names never become label values."""
        engine.record_user_id_set(UserLabels(RequestAction.OPT_OUT, "evil<script>"))
        engine.record_user_id_set(UserLabels(RequestAction.OPT_OUT, "x" * 500))

        name = "pbs_setuid_requests_total"
        series = {"adapter": "unknown", "action": "opt_out"}
        assert collector.get_counter(name, series) == 2
        assert collector.get_counter_total(name) == 2

    def test_user_id_set_without_bidders(self, collector) -> None:
        engine = CollectorMetricsEngine(collector)
        engine.record_user_id_set(UserLabels(RequestAction.GDPR, "appnexus"))
        assert (
            collector.get_counter(
                "pbs_setuid_requests_total", {"adapter": "unknown", "action": "gdpr"}
            )
            == 1
        )


# =============================================================================
# Cache Tests
# =============================================================================


class TestCacheOperations:
    """Test stored request/imp cache operations."""

    def test_hit_and_miss_counts(self, engine, collector) -> None:
        engine.record_stored_req_cache_result(CacheResult.HIT, 5)
        engine.record_stored_req_cache_result(CacheResult.MISS, 2)
        name = "pbs_stored_request_cache_total"
        assert collector.get_counter(name, {"cache_result": "hit"}) == 5
        assert collector.get_counter(name, {"cache_result": "miss"}) == 2

    def test_order_independent(self) -> None:
        forward = CollectorMetricsEngine()
        forward.record_stored_req_cache_result(CacheResult.HIT, 5)
        forward.record_stored_req_cache_result(CacheResult.MISS, 2)

        backward = CollectorMetricsEngine()
        backward.record_stored_req_cache_result(CacheResult.MISS, 2)
        backward.record_stored_req_cache_result(CacheResult.HIT, 5)

        assert forward.collector.get_metrics() == backward.collector.get_metrics()

    def test_imp_cache_separate_from_request_cache(self, engine, collector) -> None:
        engine.record_stored_imp_cache_result(CacheResult.HIT, 4)
        assert (
            collector.get_counter("pbs_stored_imp_cache_total", {"cache_result": "hit"})
            == 4
        )
        assert collector.get_counter_total("pbs_stored_request_cache_total") == 0

    def test_zero_increment(self, engine, collector) -> None:
        engine.record_stored_imp_cache_result(CacheResult.MISS, 0)
        assert collector.get_metrics()["counters"]["pbs_stored_imp_cache_total"] == {
            "cache_result=miss": 0
        }

    def test_prebid_cache_time(self, engine, collector) -> None:
        engine.record_prebid_cache_request_time(False, 0.25)
        assert collector.get_observations(
            "pbs_prebid_cache_request_time_seconds", {"success": "false"}
        ) == [0.25]


# =============================================================================
# Best-Effort Recording Tests
# =============================================================================


class TestBestEffort:
    """Recording never raises into the caller."""

    @pytest.fixture
    def failing_collector(self) -> MagicMock:
        collector = MagicMock(spec=UnifiedMetricsCollector)
        collector.inc_counter.side_effect = RuntimeError("backend down")
        collector.observe_histogram.side_effect = RuntimeError("backend down")
        return collector

    def test_failing_collector_absorbed(
        self, failing_collector, make_labels, make_adapter_labels
    ) -> None:
        engine = CollectorMetricsEngine(failing_collector, known_bidders={"appnexus"})
        labels = make_labels()
        adapter = make_adapter_labels(adapter_errors={AdapterError.TIMEOUT})

        engine.record_connection_accept(True)
        engine.record_request(labels)
        engine.record_request_time(labels, 0.1)
        engine.record_adapter_request(adapter)
        engine.record_adapter_price(adapter, 1.0)
        engine.record_user_id_set(UserLabels(RequestAction.SET, "appnexus"))
        engine.record_prebid_cache_request_time(True, 0.1)

        assert failing_collector.inc_counter.call_count == 5
        assert failing_collector.observe_histogram.call_count == 3

    def test_failure_logged_at_debug(
        self, failing_collector, caplog: pytest.LogCaptureFixture
    ) -> None:
        engine = CollectorMetricsEngine(failing_collector)
        with caplog.at_level("DEBUG", logger="pbs_metrics.observability.engine"):
            engine.record_cookie_sync()
        assert "backend down" in caplog.text

    def test_negative_count_dropped(self, engine, collector, make_labels) -> None:
        engine.record_legacy_imps(make_labels(), -1)
        engine.record_stored_req_cache_result(CacheResult.HIT, -3)
        assert collector.get_counter_total("pbs_legacy_imps_requested_total") == 0
        assert collector.get_counter_total("pbs_stored_request_cache_total") == 0

    def test_malformed_bundle_dropped(self, engine, collector) -> None:
        engine.record_request(None)  # type: ignore[arg-type]
        engine.record_adapter_request(None)  # type: ignore[arg-type]
        engine.record_imps(None)  # type: ignore[arg-type]
        assert collector.get_metrics()["counters"] == {}

    def test_cardinality_cap_drops_silently(self, make_labels) -> None:
        collector = UnifiedMetricsCollector(
            enable_prometheus=False, max_label_combinations=2
        )
        engine = CollectorMetricsEngine(collector, account_metrics_enabled=True)
        for pubid in ("a", "b", "c", "d"):
            engine.record_request(make_labels(pubid=pubid))

        assert collector.get_counter_total("pbs_account_requests_total") == 2
        assert collector.get_counter_total("pbs_requests_total") == 4

    def test_closed_domain_metric_not_capped(self, make_labels) -> None:
        collector = UnifiedMetricsCollector(
            enable_prometheus=False, max_label_combinations=2
        )
        engine = CollectorMetricsEngine(collector)
        for status in request_statuses():
            engine.record_request(make_labels(request_status=status))

        assert collector.get_counter_total("pbs_requests_total") == len(
            request_statuses()
        )


class TestConcurrency:
    """Concurrent recording from many threads."""

    def test_concurrent_requests(self, engine, collector, make_labels) -> None:
        labels = make_labels()

        def worker() -> None:
            for _ in range(500):
                engine.record_request(labels)
                engine.record_request_time(labels, 0.01)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert collector.get_counter("pbs_requests_total", WEB_SERIES) == 4000
        assert (
            len(collector.get_observations("pbs_request_time_seconds", WEB_SERIES))
            == 4000
        )


# =============================================================================
# Pre-registration Tests
# =============================================================================


class TestPreregister:
    """Test zero-valued series pre-registration."""

    def test_counts_with_bidders(self, engine, collector) -> None:
        # connections 2+2, requests 450, imps 16, legacy 450, adapter requests
        # 360, errors 10, panics 2, bids 16, cookie sync 1, adapter cookie
        # sync 4, setuid 12, stored caches 2+2
        assert engine.preregister() == 1329

    def test_counts_without_bidders(self, collector) -> None:
        engine = CollectorMetricsEngine(collector)
        assert engine.preregister() == 925
        assert "pbs_adapter_requests_total" not in collector.get_metrics()["counters"]

    def test_series_start_at_zero(self, engine, collector) -> None:
        engine.preregister()
        counters = collector.get_metrics()["counters"]
        web_key = collector._labels_to_key(WEB_SERIES)
        assert counters["pbs_requests_total"][web_key] == 0
        assert len(counters["pbs_requests_total"]) == 450
        assert all(v == 0 for series in counters.values() for v in series.values())

    def test_setuid_includes_unknown_adapter(self, engine, collector) -> None:
        engine.preregister()
        series = collector.get_metrics()["counters"]["pbs_setuid_requests_total"]
        assert "action=set,adapter=unknown" in series
        assert len(series) == 12

    def test_account_counter_skipped(self, collector) -> None:
        engine = CollectorMetricsEngine(collector, account_metrics_enabled=True)
        engine.preregister()
        assert "pbs_account_requests_total" not in collector.get_metrics()["counters"]

    def test_histograms_skipped(self, engine, collector) -> None:
        engine.preregister()
        assert collector.get_metrics()["histograms"] == {}

    def test_oversized_metrics_skipped(
        self, collector, caplog: pytest.LogCaptureFixture
    ) -> None:
        engine = CollectorMetricsEngine(collector)
        with caplog.at_level("WARNING"):
            created = engine.preregister(max_series_per_metric=100)
        assert created == 25
        assert "pbs_requests_total" in caplog.text

    def test_recording_after_preregister(self, engine, collector, make_labels) -> None:
        engine.preregister()
        engine.record_request(make_labels())
        assert collector.get_counter("pbs_requests_total", WEB_SERIES) == 1

    def test_idempotent(self, engine, collector) -> None:
        first = engine.preregister()
        engine.preregister()
        assert first == 1329
        assert collector.get_counter_total("pbs_requests_total") == 0


# =============================================================================
# NoOp and Multi Engine Tests
# =============================================================================


class TestNoOpMetricsEngine:
    """Test the no-op engine."""

    def test_all_operations_accept_calls(
        self, make_labels, make_adapter_labels
    ) -> None:
        engine = NoOpMetricsEngine()
        labels = make_labels()
        adapter = make_adapter_labels()
        engine.record_connection_accept(True)
        engine.record_connection_close(False)
        engine.record_request(labels)
        engine.record_imps(ImpLabels())
        engine.record_legacy_imps(labels, 1)
        engine.record_request_time(labels, 0.1)
        engine.record_adapter_request(adapter)
        engine.record_adapter_panic(adapter)
        engine.record_adapter_bid_received(adapter, ImpMediaType.AUDIO, True)
        engine.record_adapter_price(adapter, 1.0)
        engine.record_adapter_time(adapter, 0.1)
        engine.record_cookie_sync()
        engine.record_adapter_cookie_sync("appnexus", False)
        engine.record_user_id_set(UserLabels(RequestAction.ERR, "appnexus"))
        engine.record_stored_req_cache_result(CacheResult.HIT, 1)
        engine.record_stored_imp_cache_result(CacheResult.MISS, 1)
        engine.record_prebid_cache_request_time(True, 0.1)


class _FailingEngine(NoOpMetricsEngine):
    def record_cookie_sync(self) -> None:
        raise RuntimeError("sink unavailable")


class TestMultiMetricsEngine:
    """Test fan-out to several engines."""

    def test_forwards_to_all(self, make_labels) -> None:
        first = CollectorMetricsEngine()
        second = CollectorMetricsEngine()
        multi = MultiMetricsEngine([first, second])

        multi.record_request(make_labels())
        multi.record_request_time(make_labels(), 0.12)

        for child in (first, second):
            assert child.collector.get_counter("pbs_requests_total", WEB_SERIES) == 1
            assert child.collector.get_observations(
                "pbs_request_time_seconds", WEB_SERIES
            ) == [0.12]

    def test_forwards_arguments(self, make_adapter_labels) -> None:
        child = MagicMock(spec=CollectorMetricsEngine)
        multi = MultiMetricsEngine([child])
        labels = make_adapter_labels()

        multi.record_adapter_bid_received(labels, ImpMediaType.NATIVE, True)
        multi.record_stored_imp_cache_result(CacheResult.HIT, 3)

        child.record_adapter_bid_received.assert_called_once_with(
            labels, ImpMediaType.NATIVE, True
        )
        child.record_stored_imp_cache_result.assert_called_once_with(
            CacheResult.HIT, 3
        )

    def test_failure_isolated(self) -> None:
        healthy = CollectorMetricsEngine()
        multi = MultiMetricsEngine([_FailingEngine(), healthy])

        multi.record_cookie_sync()

        assert healthy.collector.get_counter("pbs_cookie_sync_requests_total") == 1

    def test_engines_property(self) -> None:
        engines = [NoOpMetricsEngine(), CollectorMetricsEngine()]
        assert MultiMetricsEngine(engines).engines == tuple(engines)

    def test_rejects_non_engine(self) -> None:
        with pytest.raises(ConfigurationError, match="MetricsEngineProtocol"):
            MultiMetricsEngine([object()])  # type: ignore[list-item]


# =============================================================================
# Prometheus-backed Engine Tests
# =============================================================================


@pytest.mark.skipif(not PROMETHEUS_AVAILABLE, reason="prometheus_client not installed")
class TestPrometheusExport:
    """Engine output as seen by a Prometheus scrape."""

    @pytest.fixture
    def registry(self):
        from prometheus_client import CollectorRegistry

        return CollectorRegistry()

    @pytest.fixture
    def prom_engine(self, registry) -> CollectorMetricsEngine:
        collector = UnifiedMetricsCollector(enable_prometheus=True, registry=registry)
        return CollectorMetricsEngine(collector, known_bidders={"appnexus"})

    def test_request_scenario_exported(
        self, prom_engine, registry, make_labels
    ) -> None:
        labels = make_labels()
        prom_engine.record_request(labels)
        prom_engine.record_request_time(labels, 0.120)

        assert registry.get_sample_value("pbs_requests_total", WEB_SERIES) == 1.0
        assert (
            registry.get_sample_value("pbs_request_time_seconds_count", WEB_SERIES)
            == 1.0
        )
        assert registry.get_sample_value(
            "pbs_request_time_seconds_sum", WEB_SERIES
        ) == pytest.approx(0.120)

    def test_preregistered_series_exported(self, prom_engine, registry) -> None:
        prom_engine.preregister()
        assert (
            registry.get_sample_value(
                "pbs_stored_request_cache_total", {"cache_result": "miss"}
            )
            == 0.0
        )

    def test_error_increments_exported(
        self, prom_engine, registry, make_adapter_labels
    ) -> None:
        prom_engine.record_adapter_request(
            make_adapter_labels(
                adapter_errors={AdapterError.TIMEOUT, AdapterError.BAD_SERVER_RESPONSE}
            )
        )
        for error in ("timeout", "badserverresponse"):
            assert (
                registry.get_sample_value(
                    "pbs_adapter_errors_total",
                    {"adapter": "appnexus", "adapter_error": error},
                )
                == 1.0
            )
