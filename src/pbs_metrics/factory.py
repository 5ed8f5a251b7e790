# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Factory for building a metrics engine from MetricsConfig.

Process wiring stays with the caller: this module only turns a config into
a ready MetricsEngineProtocol.
"""

import logging
from typing import Any

from .config import MetricsConfig
from .exceptions import ConfigurationError
from .observability.collector import (
    PROMETHEUS_AVAILABLE,
    UnifiedMetricsCollector,
    build_metric_definitions,
    get_metrics_collector,
)
from .observability.engine import CollectorMetricsEngine, NoOpMetricsEngine
from .observability.protocols import MetricsCollectorProtocol, MetricsEngineProtocol

logger = logging.getLogger(__name__)


def create_metrics_engine(
    config: MetricsConfig | None = None,
    collector: MetricsCollectorProtocol | None = None,
    registry: Any | None = None,
) -> MetricsEngineProtocol:
    """
    Create a metrics engine.

    Args:
        config: Metrics configuration (default: MetricsConfig())
        collector: Collector to record into. If omitted, a collector is
            built from the config: a private one when ``registry`` is given
            or Prometheus is disabled, otherwise the process-wide singleton
            bound to the global Prometheus registry.
        registry: Optional Prometheus CollectorRegistry

    Returns:
        A NoOpMetricsEngine when metrics are disabled, otherwise a
        CollectorMetricsEngine

    Raises:
        ConfigurationError: If the HTTP server is requested but cannot be
            started, or the shared collector has a different cardinality cap
        MetricRegistrationError: If the namespace's metric names clash with
            different definitions already on the shared collector

    Example:
        >>> config = MetricsConfig(known_bidders={"appnexus", "rubicon"})
        >>> engine = create_metrics_engine(config)
        >>> engine.record_cookie_sync()
    """
    config = config or MetricsConfig()

    if not config.enabled:
        logger.debug("Metrics disabled, using NoOpMetricsEngine")
        return NoOpMetricsEngine()

    if collector is None:
        definitions = build_metric_definitions(config.namespace)
        if registry is not None or not config.enable_prometheus:
            collector = UnifiedMetricsCollector(
                enable_prometheus=config.enable_prometheus,
                registry=registry,
                definitions=definitions,
                max_label_combinations=config.max_label_combinations,
            )
        else:
            collector = get_metrics_collector(
                enable_prometheus=True,
                definitions=definitions,
                max_label_combinations=config.max_label_combinations,
            )
            # The singleton keeps its first arguments; reconcile with this config
            if collector.max_label_combinations != config.max_label_combinations:
                raise ConfigurationError(
                    f"Shared collector cap is {collector.max_label_combinations}, "
                    f"config asks for {config.max_label_combinations}; pass a "
                    "registry to use a separate collector"
                )
            for definition in definitions.values():
                collector.register(definition)

    engine = CollectorMetricsEngine(
        collector,
        known_bidders=config.known_bidders,
        namespace=config.namespace,
        account_metrics_enabled=config.account_metrics_enabled,
    )

    if config.preregister:
        engine.preregister(config.max_label_combinations)

    if config.start_http_server:
        if not PROMETHEUS_AVAILABLE:
            raise ConfigurationError(
                "start_http_server requires prometheus_client. "
                "Install with: pip install pbs-metrics[prometheus]"
            )
        if not isinstance(collector, UnifiedMetricsCollector):
            raise ConfigurationError(
                f"{type(collector).__name__} cannot serve Prometheus metrics"
            )
        if not collector.start_http_server(
            config.prometheus_host, config.prometheus_port
        ):
            raise ConfigurationError(
                f"Failed to start Prometheus server on "
                f"{config.prometheus_host}:{config.prometheus_port}"
            )

    logger.info(
        f"Metrics engine created (namespace={config.namespace}, "
        f"bidders={len(config.known_bidders)})"
    )
    return engine


__all__ = ["create_metrics_engine"]
