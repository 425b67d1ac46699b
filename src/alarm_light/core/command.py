"""
core/command.py - Values Passed Through the Command Pipeline
=============================================================
    RecognitionResult  one final utterance from the recognizer
    SemanticCommand    tags pulled out of a result (extractor output)
    Actionable/Ignore  what the resolver decided (dispatcher input)

`None` on a SemanticCommand field means the tag was not present at all;
an empty or unrecognised value is present and maps to UNKNOWN.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from alarm_light.core.state import (
    CommandState, DeviceKind, LogicalState, RecognitionStatus,
)


@dataclass(frozen=True)
class RecognitionResult:
    status: RecognitionStatus = RecognitionStatus.SUCCESS
    text: str = ""
    # tag name → ordered values; only the first value is significant
    properties: dict = field(default_factory=dict)
    constraint_tag: str = ""
    confidence: Optional[float] = None


@dataclass(frozen=True)
class SemanticCommand:
    target: Optional[str] = None
    cmd: Optional[CommandState] = None
    device: Optional[DeviceKind] = None
    # raw tag strings, kept for diagnostics only
    raw_cmd: Optional[str] = None
    raw_device: Optional[str] = None

    def describe(self) -> str:
        return (
            f"Target: {_show(self.target)}, "
            f"Command: {_show(self.raw_cmd)}, "
            f"Device: {_show(self.raw_device)}"
        )


@dataclass(frozen=True)
class Actionable:
    device: DeviceKind
    target: str
    state: LogicalState


@dataclass(frozen=True)
class Ignore:
    reason: str


ResolvedAction = Union[Actionable, Ignore]


def _show(value: Optional[str]) -> str:
    return "<none>" if value is None else repr(value)
