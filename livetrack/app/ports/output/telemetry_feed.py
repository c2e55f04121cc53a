from __future__ import annotations

from abc import ABC, abstractmethod


class ITelemetryFeed(ABC):
    """Port for the message bus delivering vehicle telemetry."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def start(self) -> None:
        """Connect and subscribe. Raises TelemetryFeedError if unreachable."""

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError
