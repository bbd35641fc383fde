# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""No-op metrics collector for testing and local development."""

import logging

from .base import MetricsCollector

logger = logging.getLogger(__name__)

_Sample = tuple[str, float, dict[str, str] | None]


class NoOpMetricsCollector(MetricsCollector):
    """Metrics collector that records calls in memory for inspection in tests."""

    def __init__(self, **kwargs):
        self.counters: list[_Sample] = []
        self.observations: list[_Sample] = []
        self.gauges: list[_Sample] = []

    def increment(self, name: str, value: float = 1.0, tags: dict[str, str] | None = None) -> None:
        self.counters.append((name, value, tags))
        logger.debug("NoOpMetricsCollector: increment %s by %s with tags %s", name, value, tags)

    def observe(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.observations.append((name, value, tags))
        logger.debug("NoOpMetricsCollector: observe %s value %s with tags %s", name, value, tags)

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.gauges.append((name, value, tags))
        logger.debug("NoOpMetricsCollector: gauge %s set to %s with tags %s", name, value, tags)

    def clear_metrics(self) -> None:
        """Clear all stored metrics (useful for testing)."""
        self.counters.clear()
        self.observations.clear()
        self.gauges.clear()

    def get_counter_total(self, name: str, tags: dict[str, str] | None = None) -> float:
        """Sum a counter's increments.

        Args:
            name: Name of the counter metric
            tags: If given, only increments whose tags include these pairs are summed

        Returns:
            Total increment value
        """
        total = 0.0
        for counter_name, value, counter_tags in self.counters:
            if counter_name != name:
                continue
            if tags and not all((counter_tags or {}).get(k) == v for k, v in tags.items()):
                continue
            total += value
        return total

    def get_observations(self, name: str) -> list[float]:
        """Get all observed values for a histogram metric."""
        return [value for obs_name, value, _ in self.observations if obs_name == name]
