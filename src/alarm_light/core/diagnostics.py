"""
core/diagnostics.py - Diagnostics Sink
=======================================
Every component reports what it saw and did through a `report` callable.
The default sink prints to the console (as the rest of the assistant does)
and mirrors the record to the "alarm_light" logger.

A diagnostics failure must NEVER reach the caller: the command pipeline and
the relay keep working even if stdout is gone.

Usage:
    from alarm_light.core.diagnostics import report
    report("Unknown Device", icon="❓")
"""

import logging
from typing import Callable

logger = logging.getLogger("alarm_light")

Reporter = Callable[..., None]


def report(message: str, icon: str = "") -> None:
    """Print and log one diagnostic record. Never raises."""
    try:
        line = f"{icon} {message}" if icon else message
        print(line)
        logger.debug(message)
    except Exception:
        pass


def guarded(sink: Reporter) -> Reporter:
    """Wrap a caller-supplied sink so its failures are dropped, not raised."""
    if sink is report:
        return sink

    def _safe(message: str, icon: str = "") -> None:
        try:
            sink(message, icon=icon)
        except Exception as exc:
            logger.debug("diagnostics sink failed: %s", exc)

    return _safe
