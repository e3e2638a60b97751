# -*- coding: utf-8 -*-
"""
Playback Pump

Drives the media output from the Qt event loop: a QTimer calls poll() at a
fixed interval, so progress, end-of-media and failure notifications reach the
player on the same thread as user commands and never interleave with them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from PyQt6.QtCore import QObject, QTimer

if TYPE_CHECKING:
    from core.ports.audio import IMediaOutput

logger = logging.getLogger(__name__)


class PlaybackPump(QObject):
    """Polls one media output on the Qt thread.

    Usage Example:
        pump = PlaybackPump(container.media_output, interval_ms=250)
        pump.start()
    """

    DEFAULT_INTERVAL_MS = 250

    def __init__(
        self,
        media_output: "IMediaOutput",
        interval_ms: int = DEFAULT_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._output = media_output

        self._timer = QTimer(self)
        self._timer.setInterval(max(10, int(interval_ms)))
        self._timer.timeout.connect(self._tick)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def _tick(self) -> None:
        try:
            self._output.poll()
        except Exception as e:
            logger.error("Media output poll failed: %s", e)
