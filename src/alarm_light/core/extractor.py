"""
core/extractor.py - Semantic Tag Extractor
===========================================
Pulls the three command tags (target / cmd / device) out of a recognition
result.  Only the FIRST value of each tag is used.  Vocabulary checks stop
at mapping words onto enums; deciding what is actionable is resolver.py's job.

This never fails: a result without a usable semantic interpretation simply
yields a SemanticCommand with every field set to None.
"""

from typing import Optional

from alarm_light.core.command import RecognitionResult, SemanticCommand
from alarm_light.core.diagnostics import Reporter, guarded, report as _default_report
from alarm_light.core.state import CommandState, DeviceKind
from alarm_light.utils.constants import TAG_CMD, TAG_DEVICE, TAG_TARGET

_CMD_WORDS    = {s.value: s for s in CommandState if s is not CommandState.UNKNOWN}
_DEVICE_WORDS = {d.value: d for d in DeviceKind if d is not DeviceKind.UNKNOWN}


def first_value(properties, tag: str) -> Optional[str]:
    """First string value of `tag`, or None when the tag is absent/unusable."""
    if not hasattr(properties, "get"):
        return None
    values = properties.get(tag)
    if isinstance(values, str) or not isinstance(values, (list, tuple)):
        return None
    if not values or not isinstance(values[0], str):
        return None
    return values[0]


def extract_command(result: RecognitionResult,
                    report: Reporter = _default_report) -> SemanticCommand:
    """Build a SemanticCommand from `result` and report what was heard."""
    report = guarded(report)
    properties = getattr(result, "properties", None)

    target     = first_value(properties, TAG_TARGET)
    raw_cmd    = first_value(properties, TAG_CMD)
    raw_device = first_value(properties, TAG_DEVICE)

    command = SemanticCommand(
        target=target,
        cmd=None if raw_cmd is None else _CMD_WORDS.get(raw_cmd, CommandState.UNKNOWN),
        device=None if raw_device is None else _DEVICE_WORDS.get(raw_device, DeviceKind.UNKNOWN),
        raw_cmd=raw_cmd,
        raw_device=raw_device,
    )

    count = len(properties) if hasattr(properties, "__len__") else 0
    status = getattr(result, "status", None)
    report(
        f"Heard: {getattr(result, 'text', '')!r} | "
        f"Status: {getattr(status, 'name', status)} | "
        f"Count: {count} | "
        f"Tag: {getattr(result, 'constraint_tag', '')!r}",
        icon="👂",
    )
    report(command.describe(), icon="🏷️")
    return command
