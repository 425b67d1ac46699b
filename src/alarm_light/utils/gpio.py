"""
utils/gpio.py - GPIO Provider (gpiozero pin factory)
=====================================================
The narrow hardware contract the actuator depends on:

    GpioProvider.open_pin(number) → GpioPin
    GpioPin.set_output(level)     (output mode and initial level together)
    GpioPin.write(level)          (PinLevel.HIGH / PinLevel.LOW)
    GpioPin.close()

Backed by a gpiozero pin factory.  On a Raspberry Pi the default factory
(lgpio / RPi.GPIO) drives the real header; anywhere else set
GPIOZERO_PIN_FACTORY=mock, or pass gpiozero.pins.mock.MockFactory() in.

A pin can only be opened once per provider, so there is never a second
owner writing to the relay.
"""

import threading

from gpiozero import Device, GPIOPinInUse

from alarm_light.core.state import PinLevel


class GpioPin:
    """One opened output pin.  Only the Actuator should hold this."""

    def __init__(self, provider: "GpioProvider", number: int, pin) -> None:
        self._provider = provider
        self._pin      = pin
        self.number    = number
        self.level: PinLevel | None = None

    def set_output(self, level: PinLevel) -> None:
        # drivers that support it (RPi.GPIO) claim the line already at this level
        self._pin.output_with_state(level.value)
        self.level = level

    def write(self, level: PinLevel) -> None:
        self._pin.state = level.value
        self.level = level

    def close(self) -> None:
        if self._pin is None:
            return
        try:
            self._pin.close()
        finally:
            self._pin = None
            self._provider._forget(self.number)

    @property
    def closed(self) -> bool:
        return self._pin is None


class GpioProvider:
    def __init__(self, factory=None) -> None:
        self._factory = factory
        self._open: dict[int, GpioPin] = {}
        self._lock = threading.Lock()

    @property
    def factory(self):
        if self._factory is None:
            Device.ensure_pin_factory()
            self._factory = Device.pin_factory
        return self._factory

    def open_pin(self, number: int) -> GpioPin:
        with self._lock:
            if number in self._open:
                raise GPIOPinInUse(f"pin {number} is already open")
            pin = GpioPin(self, number, self.factory.pin(number))
            self._open[number] = pin
            return pin

    def is_open(self, number: int) -> bool:
        with self._lock:
            return number in self._open

    def _forget(self, number: int) -> None:
        with self._lock:
            self._open.pop(number, None)
