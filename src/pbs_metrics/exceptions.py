# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the pbs-metrics library.

All exceptions inherit from MetricsError. None of them are raised from a
``record_*`` call: recording is best-effort and absorbs backend failures.
They surface only while configuring or constructing a backend.
"""


class MetricsError(Exception):
    """Base exception for all pbs-metrics errors.

    Example:
        try:
            engine = create_metrics_engine(config)
        except MetricsError as e:
            logger.error(f"Metrics setup failed: {e}")
    """

    pass


class ConfigurationError(MetricsError):
    """Raised when a backend cannot be built from the given configuration.

    Common causes include:
    - Requesting the Prometheus HTTP server without prometheus_client installed
    - Passing a collector that does not satisfy MetricsCollectorProtocol
    """

    pass


class MetricRegistrationError(MetricsError):
    """Raised when a metric cannot be registered with the backend.

    Attributes:
        metric_name: Name of the metric that failed to register.
    """

    def __init__(self, message: str, metric_name: str | None = None):
        super().__init__(message)
        self.metric_name = metric_name
