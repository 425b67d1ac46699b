"""
core/state.py - Command, Hardware and Session State Definitions
================================================================
Every enum the pipeline passes around lives here so the extractor,
resolver, actuator and lifecycle agree on one vocabulary.
"""

from enum import Enum, auto


class CommandState(Enum):
    ON      = "ON"
    OFF     = "OFF"
    UNKNOWN = "UNKNOWN"   # tag present but not a recognised command word


class DeviceKind(Enum):
    LED     = "LED"
    LIGHT   = "LIGHT"
    UNKNOWN = "UNKNOWN"   # tag present but not a recognised device word


class LogicalState(Enum):
    """What the light is doing, independent of relay wiring."""
    ON  = "ON"
    OFF = "OFF"


class PinLevel(Enum):
    """Electrical level written to the GPIO pin."""
    HIGH = 1
    LOW  = 0


# The relay is low-switching: pulling the pin LOW energises the light.
LOGICAL_TO_LEVEL = {
    LogicalState.ON:  PinLevel.LOW,
    LogicalState.OFF: PinLevel.HIGH,
}


class SessionState(Enum):
    UNINITIALIZED = auto()   # nothing acquired (also after a failed start)
    LISTENING     = auto()   # pin configured, continuous recognition running
    STOPPING      = auto()   # teardown in progress; dispatcher already halted
    DISPOSED      = auto()   # everything released; cannot be restarted


class DispatcherState(Enum):
    READY  = auto()
    HALTED = auto()


class RecognitionStatus(Enum):
    SUCCESS                     = auto()
    GRAMMAR_COMPILATION_FAILURE = auto()
    MICROPHONE_UNAVAILABLE      = auto()
    LOW_CONFIDENCE              = auto()
    UNKNOWN                     = auto()


class RecognizerState(Enum):
    IDLE       = auto()
    CAPTURING  = auto()
    PROCESSING = auto()
    STOPPED    = auto()
