"""
core/lifecycle.py - Session Lifecycle Manager
==============================================
Brackets the pipeline's active window.

State machine:
    UNINITIALIZED → start()  → LISTENING
    LISTENING     → stop()   → STOPPING → DISPOSED

start() order:   open + configure pin (light OFF)  →  compile grammar
                 →  begin continuous recognition
stop() order:    halt dispatcher  →  engine.stop() (blocks until the worker
                 exits)  →  release pin  →  close engine

The stop order is what makes "relay written after the pin was released"
impossible: halt() waits for any in-flight dispatch, and every later
result sees the HALTED dispatcher.

A failed start (pin, grammar, model or microphone) is reported, frees the pin
and leaves the manager UNINITIALIZED so the host can retry.  stop() outside
LISTENING does nothing.  A session is single-use: DISPOSED never restarts.
"""

import threading
from typing import Optional

from alarm_light.core.actuator import Actuator
from alarm_light.core.command import RecognitionResult
from alarm_light.core.diagnostics import Reporter, guarded, report as _default_report
from alarm_light.core.dispatcher import HALTED_REASON, ActuationDispatcher
from alarm_light.core.handlers import handle_result
from alarm_light.core.recognizer import RecognitionError
from alarm_light.core.state import RecognitionStatus, RecognizerState, SessionState
from alarm_light.utils.constants import LIGHT_PIN


class SessionLifecycleManager:
    def __init__(self, engine, gpio, pin_number: int = LIGHT_PIN,
                 report: Reporter = _default_report) -> None:
        self.engine     = engine
        self.gpio       = gpio
        self.pin_number = pin_number
        self._report    = guarded(report)

        self.actuator: Optional[Actuator] = None
        self.dispatcher: Optional[ActuationDispatcher] = None
        self.last_status: Optional[RecognitionStatus] = None

        self._state = SessionState.UNINITIALIZED
        self._lock  = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # Start-up
    # ─────────────────────────────────────────────────────────────────────────

    def start(self) -> SessionState:
        with self._lock:
            if self._state is not SessionState.UNINITIALIZED:
                self._report(f"start() ignored in state {self._state.name}", icon="ℹ️")
                return self._state

            # 1. Pin first, so there is always an actuator to route results to.
            try:
                pin = self.gpio.open_pin(self.pin_number)
            except Exception as exc:
                self.last_status = RecognitionStatus.UNKNOWN
                self._report(f"Startup failed: GPIO {self.pin_number} unavailable ({exc!r})", icon="❌")
                return self._state
            actuator = Actuator(pin, report=self._report)
            try:
                actuator.configure()
            except Exception as exc:
                actuator.release()
                self.last_status = RecognitionStatus.UNKNOWN
                self._report(f"Startup failed: GPIO {self.pin_number} not configured ({exc!r})", icon="❌")
                return self._state
            dispatcher = ActuationDispatcher(actuator, report=self._report)
            self.actuator, self.dispatcher = actuator, dispatcher

            # 2. Grammar.
            status = self.engine.compile()
            self.last_status = status
            self._report(f"Status: {status.name}", icon="📋")
            if status is not RecognitionStatus.SUCCESS:
                return self._abort_start(f"grammar compilation failed ({status.name})")

            # 3. Continuous recognition.
            self.engine.on_state_changed = self.on_state_changed
            try:
                self.engine.start(self.on_result)
            except RecognitionError as exc:
                self.last_status = exc.status
                return self._abort_start(str(exc))
            except Exception as exc:
                self.last_status = RecognitionStatus.UNKNOWN
                return self._abort_start(f"recognizer did not start ({exc!r})")

            self._state = SessionState.LISTENING
            self._report(f"Listening for commands (GPIO {self.pin_number})", icon="🎧")
            return self._state

    def _abort_start(self, why: str) -> SessionState:
        self._report(f"Startup failed: {why}", icon="❌")
        self.dispatcher.halt()
        self.actuator.release()
        self.actuator = None
        self.dispatcher = None
        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # Shutdown
    # ─────────────────────────────────────────────────────────────────────────

    def stop(self) -> SessionState:
        with self._lock:
            if self._state is not SessionState.LISTENING:
                return self._state
            self._state = SessionState.STOPPING

        self._report("Stopping recognition...", icon="🛑")
        self.dispatcher.halt()
        try:
            self.engine.stop()
        except Exception as exc:
            self._report(f"Recognizer stop failed: {exc!r}", icon="⚠️")
        finally:
            self.actuator.release()
            try:
                self.engine.close()
            finally:
                with self._lock:
                    self._state = SessionState.DISPOSED
        self._report("Session disposed", icon="🙏")
        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # Engine callbacks (run on the recognizer worker thread)
    # ─────────────────────────────────────────────────────────────────────────

    def on_result(self, result: RecognitionResult) -> bool:
        dispatcher = self.dispatcher
        if dispatcher is None:
            self._report(f"Result {result.text!r} dropped: {HALTED_REASON}", icon="🛑")
            return False
        return handle_result(result, dispatcher, report=self._report)

    def on_state_changed(self, state: RecognizerState) -> None:
        self._report(f"Speech recognizer state: {state.name}", icon="🎙️")

    # ─────────────────────────────────────────────────────────────────────────
    # Context manager
    # ─────────────────────────────────────────────────────────────────────────

    def __enter__(self) -> "SessionLifecycleManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
