from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Dict, Optional

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)


class QtScheduler(QObject):
    """Keyed single-shot timers on the Qt event loop.

    Scheduling a key that is still pending stops the stale timer first, so at
    most one task per key is ever in flight.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._timers: Dict[str, QTimer] = {}

    def schedule(self, key: str, delay_ms: int, callback: Callable[[], None]) -> None:
        self.cancel(key)
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(partial(self._fire, key, timer, callback))
        self._timers[key] = timer
        timer.start(max(0, int(delay_ms)))
        logger.debug("scheduled %s in %d ms", key, max(0, int(delay_ms)))

    def cancel(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()
            logger.debug("cancelled %s", key)

    def cancel_all(self) -> None:
        for key in list(self._timers):
            self.cancel(key)

    def pending(self, key: str) -> bool:
        return key in self._timers

    def _fire(self, key: str, timer: QTimer, callback: Callable[[], None]) -> None:
        if self._timers.get(key) is not timer:
            return
        del self._timers[key]
        timer.deleteLater()
        callback()
