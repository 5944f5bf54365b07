from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, QElapsedTimer, Qt, Slot

from sofarotator.config import FRAME_INTERVAL_MS
from sofarotator.model.state import FrameClock
from sofarotator.app.state import Store

logger = logging.getLogger(__name__)


class AnimationDriver(QObject):
    """
    Per-frame callback for the visualization (the desktop stand-in for a display link).

    A precise ~60 Hz QTimer reads a monotonic QElapsedTimer, turns it into a
    clamped frame time and ticks the store. Stopping the timer is all the
    cancellation there is: no frame work is ever left half done.
    """
    def __init__(self, store: Store, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.store = store
        self._clock = FrameClock()
        self._elapsed = QElapsedTimer()

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(FRAME_INTERVAL_MS)
        self._timer.timeout.connect(self._on_frame)

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if self._timer.isActive():
            return
        self._clock.reset()
        self._elapsed.start()
        self._timer.start()
        logger.debug("Animation started.")

    def stop(self) -> None:
        self._timer.stop()
        logger.debug("Animation stopped.")

    @Slot()
    def _on_frame(self) -> None:
        now = self._elapsed.nsecsElapsed() / 1e9
        self.store.tick(self._clock.tick(now))
