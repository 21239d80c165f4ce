"""Pytest configuration and shared fixtures."""

import os

import numpy as np
import pytest

# Qt must not need a display for the canvas tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class FakeSignal:
    """Minimal stand-in for QTimer.timeout."""

    def __init__(self):
        self.callbacks = []

    def connect(self, callback):
        self.callbacks.append(callback)

    def emit(self):
        for callback in self.callbacks:
            callback()


class FakeTimer:
    """Records start/stop calls instead of scheduling anything."""

    def __init__(self):
        self.timeout = FakeSignal()
        self.interval = None
        self.starts = 0
        self._active = False

    def start(self, interval):
        self.interval = interval
        self.starts += 1
        self._active = True

    def stop(self):
        self._active = False

    def isActive(self):
        return self._active

    def fire(self, times=1):
        for _ in range(times):
            if self._active:
                self.timeout.emit()


class FakeSource:
    """FrequencySource and AudioSourceControl backed by a fixed snapshot."""

    def __init__(self, snapshot=None, fail_connect=False):
        self.snapshot = snapshot if snapshot is not None else np.zeros(1024, dtype=np.uint8)
        self.fail_connect = fail_connect
        self.suspended = False
        self.connected = False
        self.calls = []
        self.on_ended = None
        self.on_notice = None

    def connect(self):
        from lounge_visualizer.errors import SetupFailure

        self.calls.append("connect")
        if self.fail_connect:
            raise SetupFailure("no input device")
        self.connected = True

    def suspend(self):
        self.calls.append("suspend")
        self.suspended = True

    def resume(self):
        self.calls.append("resume")
        self.suspended = False

    def disconnect(self):
        self.calls.append("disconnect")
        self.connected = False
        self.suspended = False

    def reconnect(self):
        self.calls.append("reconnect")
        self.connect()

    def get_snapshot(self):
        self.calls.append("get_snapshot")
        return self.snapshot


class RecordingSurface:
    """DrawingSurface that records every primitive call."""

    def __init__(self, width=600, height=400):
        self.width = width
        self.height = height
        self.calls = []
        self.fill_style = None
        self.shadow = None
        self.font = None
        self.text_align = None
        self.text_baseline = None

    def _record(self, name, *args):
        self.calls.append((name,) + args)

    def begin(self):
        self._record("begin")

    def end(self):
        self._record("end")

    def clear(self, width, height):
        self._record("clear", width, height)

    def save(self):
        self._record("save")

    def restore(self):
        self._record("restore")

    def translate(self, x, y):
        self._record("translate", x, y)

    def rotate(self, radians):
        self._record("rotate", radians)

    def fill_rect(self, x, y, w, h):
        self._record("fill_rect", x, y, w, h)

    def fill_text(self, text, x, y):
        self._record("fill_text", text, x, y, self.text_baseline, self.font)

    def set_fill_gradient(self, x0, y0, x1, y1, stops):
        self.fill_style = (x0, y0, x1, y1, list(stops))

    def set_shadow(self, blur, color):
        self.shadow = (blur, color)

    def set_font(self, font):
        self.font = tuple(font)

    def set_text_align(self, align):
        self.text_align = align

    def set_text_baseline(self, baseline):
        self.text_baseline = baseline

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def ramp_snapshot() -> np.ndarray:
    """1024 bins whose value equals index modulo 256."""
    return (np.arange(1024) % 256).astype(np.uint8)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def source(ramp_snapshot) -> FakeSource:
    return FakeSource(ramp_snapshot)


@pytest.fixture
def timers():
    """Collects every FakeTimer the engine creates."""
    created = []

    def factory():
        timer = FakeTimer()
        created.append(timer)
        return timer

    factory.created = created
    return factory


@pytest.fixture
def qapp():
    """A QApplication on the offscreen platform."""
    from PyQt5 import QtWidgets

    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app


@pytest.fixture
def sine_block() -> np.ndarray:
    """2048 samples of a 1 kHz sine at 44.1 kHz."""
    sr = 44100
    t = np.arange(2048) / sr
    return (0.5 * np.sin(2 * np.pi * 1000.0 * t)).astype(np.float32)
