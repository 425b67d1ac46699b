"""Shared fixtures: mock GPIO pins, a captured diagnostics sink, a fake engine."""

import pytest
from gpiozero.pins.mock import MockFactory, MockPin

from alarm_light.core.command import RecognitionResult
from alarm_light.core.state import RecognitionStatus
from alarm_light.utils.gpio import GpioPin, GpioProvider

LIGHT_PIN = 5


class Records(list):
    """Diagnostics sink that keeps every message."""

    def __call__(self, message, icon=""):
        self.append(message)

    def text(self):
        return "\n".join(self)


class LatchingPin(MockPin):
    """MockPin that claims the output line already at its initial level, the way
    RPi.GPIO `setup(..., initial=)` does, and logs (function, state) on every
    function change."""

    def __init__(self, factory, info):
        self.function_changes = []
        super().__init__(factory, info)

    def _set_function(self, value):
        super()._set_function(value)
        self.function_changes.append((value, self._state))

    def output_with_state(self, state):
        self._state = bool(state)
        self._set_function("output")


class FakeEngine:
    """Stands in for VoskRecognitionEngine: no model, no microphone."""

    def __init__(self, status=RecognitionStatus.SUCCESS, start_error=None, events=None):
        self.status = status
        self.start_error = start_error
        self.events = events if events is not None else []
        self.on_result = None
        self.on_state_changed = None
        self.on_stop = None   # hook run inside stop(), before it returns

    def compile(self):
        self.events.append("compile")
        return self.status

    def start(self, on_result):
        self.events.append("start")
        if self.start_error is not None:
            raise self.start_error
        self.on_result = on_result

    def stop(self):
        self.events.append("stop")
        if self.on_stop is not None:
            self.on_stop()

    def close(self):
        self.events.append("close")

    def deliver(self, properties=None, text=""):
        """Push one result through the registered handler, like the worker does."""
        return self.on_result(RecognitionResult(text=text, properties=properties or {}))


@pytest.fixture
def records():
    return Records()


@pytest.fixture
def factory():
    f = MockFactory()
    yield f
    f.reset()


@pytest.fixture
def latching_factory():
    f = MockFactory(pin_class=LatchingPin)
    yield f
    f.reset()


@pytest.fixture
def gpio(factory):
    return GpioProvider(factory)


@pytest.fixture
def mock_pin(factory):
    return factory.pin(LIGHT_PIN)


@pytest.fixture
def writes(monkeypatch):
    """Every PinLevel written through GpioPin.write, in order.

    The level a pin is configured at (GpioPin.set_output) is not a write."""
    recorded = []
    original = GpioPin.write

    def _spy(self, level):
        recorded.append(level)
        original(self, level)

    monkeypatch.setattr(GpioPin, "write", _spy)
    return recorded


@pytest.fixture
def engine():
    return FakeEngine()
