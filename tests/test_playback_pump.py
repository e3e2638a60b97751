"""
PlaybackPump tests (QTimer-driven polling)
"""

import time

import pytest

pytest.importorskip("PyQt6")

from PyQt6.QtCore import QCoreApplication  # noqa: E402

from conftest import FakeMediaOutput  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


class _CountingOutput(FakeMediaOutput):
    def __init__(self):
        super().__init__()
        self.polls = 0

    def poll(self):
        self.polls += 1
        super().poll()


class _BrokenOutput(FakeMediaOutput):
    def poll(self):
        raise RuntimeError("device gone")


def _process_for(app, ms):
    deadline = time.monotonic() + ms / 1000
    while time.monotonic() < deadline:
        app.processEvents()
        time.sleep(0.005)


def test_interval_has_a_floor(qapp):
    from app.playback_pump import PlaybackPump

    assert PlaybackPump(FakeMediaOutput(), interval_ms=1).interval_ms == 10
    assert PlaybackPump(FakeMediaOutput()).interval_ms == 250


def test_start_and_stop(qapp):
    from app.playback_pump import PlaybackPump

    pump = PlaybackPump(FakeMediaOutput(), interval_ms=20)
    pump.start()
    assert pump.is_active()

    pump.stop()
    assert not pump.is_active()


def test_polls_while_running(qapp):
    from app.playback_pump import PlaybackPump

    output = _CountingOutput()
    pump = PlaybackPump(output, interval_ms=10)
    pump.start()
    _process_for(qapp, 200)
    pump.stop()

    assert output.polls > 0


def test_poll_error_does_not_stop_timer(qapp):
    from app.playback_pump import PlaybackPump

    pump = PlaybackPump(_BrokenOutput(), interval_ms=10)
    pump.start()
    _process_for(qapp, 50)

    assert pump.is_active()
    pump.stop()
