from __future__ import annotations

import logging
import threading

from livetrack.domain.models import RuntimeConfig

logger = logging.getLogger(__name__)


class ConfigStore:
    """Holds the live RuntimeConfig.

    Reads hand out the frozen record itself; `replace` swaps the whole
    record. Concurrent replacements are last-writer-wins.
    """

    def __init__(self, initial: RuntimeConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._config = initial if initial is not None else RuntimeConfig()

    def read(self) -> RuntimeConfig:
        with self._lock:
            return self._config

    def replace(self, new_config: RuntimeConfig) -> RuntimeConfig:
        with self._lock:
            self._config = new_config
        logger.info(
            "Runtime config replaced map_enabled=%s overlay_enabled=%s show_route=%s",
            new_config.map_enabled,
            new_config.overlay_enabled,
            new_config.show_route,
        )
        return new_config
