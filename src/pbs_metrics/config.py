# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metrics Configuration for pbs-metrics

This module provides the configuration class used by create_metrics_engine()
to build a metrics backend: namespace, Prometheus export, the configured
bidder set, and cardinality settings.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from .observability.constants import METRIC_PREFIX

_NAMESPACE_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


@dataclass
class MetricsConfig:
    """
    Configuration for a metrics backend.

    The bidder set is external, configuration-driven data: it bounds the
    ``adapter`` label and is the reference for validating /setuid bidders.
    """

    # === Core ===

    enabled: bool = True
    """Enable metrics recording. When False a no-op engine is used."""

    namespace: str = METRIC_PREFIX
    """Prefix for every exported metric name."""

    known_bidders: Iterable[str] = field(default_factory=frozenset)
    """Configured bidder names. Normalised to a frozenset."""

    # === Cardinality ===

    account_metrics_enabled: bool = False
    """Record a per-publisher request counter. Publisher IDs are unbounded."""

    max_label_combinations: int = 1000
    """Maximum unique label combinations tracked per open-domain metric.

    Metrics whose labels are all closed (including ``adapter`` when
    ``known_bidders`` is set) always accept their full domain product.
    """

    preregister: bool = True
    """Pre-create zero-valued series for every closed-domain label combination."""

    # === Prometheus ===

    enable_prometheus: bool = True
    """Register metrics with prometheus_client when it is installed."""

    start_http_server: bool = False
    """Start the Prometheus scrape endpoint when the engine is created."""

    prometheus_host: str = "127.0.0.1"
    """Prometheus metrics host."""

    prometheus_port: int = 9090
    """Prometheus metrics port."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not _NAMESPACE_PATTERN.match(self.namespace or ""):
            raise ValueError(
                f"namespace must be a valid metric name prefix, got {self.namespace!r}"
            )
        if self.max_label_combinations < 1:
            raise ValueError("max_label_combinations must be at least 1")
        if not 0 < self.prometheus_port <= 65535:
            raise ValueError("prometheus_port must be between 1 and 65535")
        if isinstance(self.known_bidders, str):
            raise ValueError("known_bidders must be a collection of names, not a str")
        bidders = frozenset(self.known_bidders)
        for bidder in bidders:
            if not isinstance(bidder, str) or not bidder:
                raise ValueError(f"Invalid bidder name: {bidder!r}")
        self.known_bidders = bidders


__all__ = ["MetricsConfig"]
