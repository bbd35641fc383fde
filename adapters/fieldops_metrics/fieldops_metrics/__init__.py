# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""FieldOps Metrics Adapter.

A shared library for metrics collection across FieldOps services.
"""

__version__ = "0.1.0"

from .base import MetricsCollector
from .factory import create_metrics_collector
from .noop_metrics import NoOpMetricsCollector
from .prometheus_metrics import PrometheusMetricsCollector

__all__ = [
    "__version__",
    "MetricsCollector",
    "NoOpMetricsCollector",
    "PrometheusMetricsCollector",
    "create_metrics_collector",
]
