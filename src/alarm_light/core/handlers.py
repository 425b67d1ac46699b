"""
core/handlers.py - Recognition Result Handlers
===============================================
All business logic for turning a recognized utterance into a relay write
lives behind these two functions.  recognizer.py only delivers results;
lifecycle.py only decides whether the pipeline is live.

Exported functions:
    interpret(result)                 → Actionable | Ignore   (no hardware)
    handle_result(result, dispatcher) → bool                  (True = pin written)
"""

from alarm_light.core.command import RecognitionResult, ResolvedAction
from alarm_light.core.diagnostics import Reporter, report as _default_report
from alarm_light.core.dispatcher import ActuationDispatcher
from alarm_light.core.extractor import extract_command
from alarm_light.core.resolver import resolve


def interpret(result: RecognitionResult,
              report: Reporter = _default_report) -> ResolvedAction:
    """Extract tags and resolve them.  Touches nothing but diagnostics."""
    return resolve(extract_command(result, report=report))


def handle_result(result: RecognitionResult,
                  dispatcher: ActuationDispatcher,
                  report: Reporter = _default_report) -> bool:
    return dispatcher.dispatch(interpret(result, report=report))
