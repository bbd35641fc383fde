# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Factory functions for creating metrics collectors."""

import os

from .base import MetricsCollector


def create_metrics_collector(metrics_type: str | None = None, **kwargs) -> MetricsCollector:
    """Create a metrics collector.

    Args:
        metrics_type: "noop" or "prometheus". Defaults to METRICS_TYPE env or "noop".
        **kwargs: Driver-specific arguments (e.g. ``namespace``, ``registry``)

    Returns:
        MetricsCollector instance

    Raises:
        ValueError: If metrics_type is unknown
    """
    metrics_type = (metrics_type or os.getenv("METRICS_TYPE") or "noop").lower()

    if metrics_type == "noop":
        from .noop_metrics import NoOpMetricsCollector
        return NoOpMetricsCollector(**kwargs)
    elif metrics_type == "prometheus":
        from .prometheus_metrics import PrometheusMetricsCollector
        return PrometheusMetricsCollector(**kwargs)
    else:
        raise ValueError(f"Unknown metrics_type: {metrics_type}. Must be one of: noop, prometheus")
