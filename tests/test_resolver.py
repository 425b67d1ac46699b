"""Tests for core/resolver.py: device/target rules and default-deny."""

import pytest

from alarm_light.core.command import Actionable, Ignore, SemanticCommand
from alarm_light.core.resolver import (
    UNKNOWN_DEVICE, UNKNOWN_TARGET, UNSUPPORTED_DEVICE, resolve,
)
from alarm_light.core.state import CommandState, DeviceKind, LogicalState


class TestUnknownDevice:
    def test_absent_device(self):
        assert resolve(SemanticCommand()) == Ignore(UNKNOWN_DEVICE)

    def test_unknown_device_word(self):
        cmd = SemanticCommand(target="ALARM", cmd=CommandState.ON, device=DeviceKind.UNKNOWN)
        assert resolve(cmd) == Ignore(UNKNOWN_DEVICE)


class TestLed:
    @pytest.mark.parametrize("state", [CommandState.ON, CommandState.OFF, CommandState.UNKNOWN, None])
    @pytest.mark.parametrize("target", ["ALARM", "KITCHEN", None])
    def test_led_is_always_ignored(self, state, target):
        cmd = SemanticCommand(target=target, cmd=state, device=DeviceKind.LED)
        assert resolve(cmd) == Ignore(UNSUPPORTED_DEVICE)


class TestLight:
    def test_alarm_on(self):
        cmd = SemanticCommand(target="ALARM", cmd=CommandState.ON, device=DeviceKind.LIGHT)
        assert resolve(cmd) == Actionable(DeviceKind.LIGHT, "ALARM", LogicalState.ON)

    @pytest.mark.parametrize("state", [CommandState.OFF, CommandState.UNKNOWN, None])
    def test_anything_but_on_is_off(self, state):
        cmd = SemanticCommand(target="ALARM", cmd=state, device=DeviceKind.LIGHT)
        assert resolve(cmd) == Actionable(DeviceKind.LIGHT, "ALARM", LogicalState.OFF)

    @pytest.mark.parametrize("target", ["KITCHEN", "alarm", "", None])
    def test_other_targets_ignored(self, target):
        cmd = SemanticCommand(target=target, cmd=CommandState.ON, device=DeviceKind.LIGHT)
        assert resolve(cmd) == Ignore(UNKNOWN_TARGET)
