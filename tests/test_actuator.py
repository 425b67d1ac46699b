"""Tests for core/actuator.py and utils/gpio.py: polarity, idempotence, release."""

import pytest
from gpiozero import Device, GPIOPinInUse

from alarm_light.core.actuator import Actuator, ActuatorReleasedError
from alarm_light.core.state import LOGICAL_TO_LEVEL, LogicalState, PinLevel
from alarm_light.utils.gpio import GpioProvider
from tests.conftest import LIGHT_PIN


@pytest.fixture
def actuator(gpio, records):
    return Actuator(gpio.open_pin(LIGHT_PIN), report=records)


class TestPolarity:
    def test_low_switching_mapping(self):
        assert LOGICAL_TO_LEVEL[LogicalState.ON] is PinLevel.LOW
        assert LOGICAL_TO_LEVEL[LogicalState.OFF] is PinLevel.HIGH

    def test_on_drives_pin_low(self, actuator, mock_pin):
        actuator.configure()
        actuator.set(LogicalState.ON)
        assert actuator.state is LogicalState.ON
        assert actuator.level is PinLevel.LOW
        assert not mock_pin.state

    def test_off_drives_pin_high(self, actuator, mock_pin):
        actuator.configure()
        actuator.set(LogicalState.ON)
        actuator.set(LogicalState.OFF)
        assert actuator.state is LogicalState.OFF
        assert mock_pin.state


class TestConfigure:
    def test_safe_default_is_off_high(self, actuator, mock_pin, writes):
        actuator.configure()
        assert actuator.state is LogicalState.OFF
        assert actuator.level is PinLevel.HIGH
        assert mock_pin.function == "output"
        assert mock_pin.state
        assert writes == []

    def test_set_before_configure_configures_first(self, actuator, mock_pin, writes):
        actuator.set(LogicalState.ON)
        assert mock_pin.function == "output"
        assert mock_pin.state is False
        assert writes == [PinLevel.LOW]

    def test_pin_never_output_at_low(self, latching_factory, records):
        gpio = GpioProvider(latching_factory)
        Actuator(gpio.open_pin(LIGHT_PIN), report=records).configure()
        assert latching_factory.pin(LIGHT_PIN).function_changes == [("output", True)]

    def test_configure_uses_output_with_state(self, actuator, mock_pin, monkeypatch):
        calls = []
        monkeypatch.setattr(mock_pin, "output_with_state", calls.append)
        actuator.configure()
        assert calls == [PinLevel.HIGH.value]


class TestIdempotence:
    def test_set_on_twice(self, actuator, writes):
        actuator.configure()
        actuator.set(LogicalState.ON)
        actuator.set(LogicalState.ON)
        assert actuator.state is LogicalState.ON
        assert writes == [PinLevel.LOW, PinLevel.LOW]


class TestRelease:
    def test_release_frees_pin(self, actuator, gpio):
        actuator.configure()
        actuator.release()
        assert actuator.released
        assert not gpio.is_open(LIGHT_PIN)

    def test_release_twice_is_noop(self, actuator):
        actuator.configure()
        actuator.release()
        actuator.release()
        assert actuator.released

    def test_set_after_release_raises(self, actuator, writes):
        actuator.configure()
        actuator.release()
        with pytest.raises(ActuatorReleasedError):
            actuator.set(LogicalState.ON)
        assert writes == []

    def test_configure_after_release_raises(self, actuator):
        actuator.release()
        with pytest.raises(ActuatorReleasedError):
            actuator.configure()


class TestGpioProvider:
    def test_default_factory_is_device_pin_factory(self, factory, monkeypatch):
        monkeypatch.setattr(Device, "pin_factory", factory)
        assert GpioProvider().factory is factory

    def test_single_owner(self, gpio):
        gpio.open_pin(LIGHT_PIN)
        with pytest.raises(GPIOPinInUse):
            gpio.open_pin(LIGHT_PIN)

    def test_reopen_after_close(self, gpio):
        pin = gpio.open_pin(LIGHT_PIN)
        pin.close()
        assert pin.closed
        again = gpio.open_pin(LIGHT_PIN)
        assert again.number == LIGHT_PIN

    def test_write_records_level(self, gpio):
        pin = gpio.open_pin(LIGHT_PIN)
        pin.set_output(PinLevel.HIGH)
        assert pin.level is PinLevel.HIGH
        pin.write(PinLevel.LOW)
        assert pin.level is PinLevel.LOW
