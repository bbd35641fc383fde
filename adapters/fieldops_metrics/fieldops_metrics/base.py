# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Metrics collector contract."""

from abc import ABC, abstractmethod

Tags = dict[str, str] | None


class MetricsCollector(ABC):
    """Backend-neutral counters, histograms and gauges.

    ``tags`` become labels on backends that support them. A given metric name
    should always be used with the same tag keys.
    """

    @abstractmethod
    def increment(self, name: str, value: float = 1.0, tags: Tags = None) -> None:
        """Add ``value`` to the counter ``name``."""

    @abstractmethod
    def observe(self, name: str, value: float, tags: Tags = None) -> None:
        """Record one sample, typically a duration in seconds, in ``name``."""

    @abstractmethod
    def gauge(self, name: str, value: float, tags: Tags = None) -> None:
        """Set ``name`` to ``value``."""

    def exposition(self) -> tuple[bytes, str] | None:
        """Scrape payload and content type, or None for push-less backends."""
        return None
