from __future__ import annotations

import logging
from dataclasses import dataclass

from livetrack.app.services.telemetry_store import TelemetryStore
from livetrack.domain.models import TelemetryField

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TopicScheme:
    """TeslaMate topic naming: `<namespace>/cars/<car_id>/<field>`."""

    namespace: str = "teslamate"
    car_id: str = "1"

    def topic(self, field: TelemetryField) -> str:
        return f"{self.namespace}/cars/{self.car_id}/{field.value}"


class TelemetryDispatcher:
    """Routes bus messages to the telemetry store by exact topic match.

    Fields are merged independently and last-write-wins; a late message for
    a field overwrites a newer one for the same field.
    """

    def __init__(self, store: TelemetryStore, scheme: TopicScheme | None = None) -> None:
        self._store = store
        self._scheme = scheme or TopicScheme()
        self._fields_by_topic: dict[str, TelemetryField] = {
            self._scheme.topic(field): field for field in TelemetryField
        }

    @property
    def topics(self) -> tuple[str, ...]:
        return tuple(self._fields_by_topic)

    def dispatch(self, topic: str, payload: bytes | str) -> bool:
        """Apply one message. Returns True if the store accepted it."""

        field = self._fields_by_topic.get(topic)
        if field is None:
            logger.debug("Ignoring message on unknown topic %s", topic)
            return False

        if isinstance(payload, bytes):
            try:
                text = payload.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("Dropping non-UTF-8 payload on %s", topic)
                return False
        else:
            text = payload

        return self._store.apply_update(field, text)
