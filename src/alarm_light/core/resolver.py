"""
core/resolver.py - Command Resolver
====================================
Decides whether a SemanticCommand may touch the hardware.

Rules (first match wins):
    1. device absent / not LED or LIGHT  → Ignore("unknown device")
    2. device == LED                     → Ignore("unsupported device")
    3. device == LIGHT, target != ALARM  → Ignore("unknown target")
    4. otherwise                         → Actionable(LIGHT, target, ON|OFF)

Rule 4 is default-deny: only the literal ON command turns the light on;
OFF, an unknown word or no command at all all resolve to OFF.
"""

from alarm_light.core.command import Actionable, Ignore, ResolvedAction, SemanticCommand
from alarm_light.core.state import CommandState, DeviceKind, LogicalState
from alarm_light.utils.constants import KNOWN_DEVICES, KNOWN_TARGETS

UNKNOWN_DEVICE     = "unknown device"
UNSUPPORTED_DEVICE = "unsupported device"
UNKNOWN_TARGET     = "unknown target"


def resolve(command: SemanticCommand) -> ResolvedAction:
    device = command.device
    if device is None or device.value not in KNOWN_DEVICES:
        return Ignore(UNKNOWN_DEVICE)

    # LED is accepted by the grammar but has no output wired to it yet.
    if device is DeviceKind.LED:
        return Ignore(UNSUPPORTED_DEVICE)

    if command.target not in KNOWN_TARGETS:
        return Ignore(UNKNOWN_TARGET)

    state = LogicalState.ON if command.cmd is CommandState.ON else LogicalState.OFF
    return Actionable(device=DeviceKind.LIGHT, target=command.target, state=state)
