from __future__ import annotations

import logging
import math

from PySide6.QtCore import QObject, Slot
from PySide6.QtSensors import QGyroscope

from sofarotator.app.state import Store

logger = logging.getLogger(__name__)


class MotionSource(QObject):
    """
    Feeds gyroscope samples into the store while motion control is enabled.

    Qt reports angular velocity in degrees per second; the model expects rad/s.
    On machines without a gyroscope backend `start()` returns False and the
    source stays idle.
    """
    def __init__(self, store: Store, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.store = store
        self._sensor = QGyroscope(self)
        self._sensor.readingChanged.connect(self._on_reading)

    def is_available(self) -> bool:
        return self._sensor.connectToBackend()

    def start(self) -> bool:
        if self._sensor.isActive():
            return True
        if not self.is_available():
            logger.info("No gyroscope available, motion control disabled.")
            return False
        ok = self._sensor.start()
        logger.info("Gyroscope %s.", "started" if ok else "failed to start")
        return ok

    def stop(self) -> None:
        self._sensor.stop()

    @Slot()
    def _on_reading(self) -> None:
        reading = self._sensor.reading()
        if reading is None:
            return
        self.store.apply_motion_sample(
            math.radians(reading.x()),
            math.radians(reading.y()),
            math.radians(reading.z()),
        )
