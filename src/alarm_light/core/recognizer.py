"""
core/recognizer.py - Vosk Continuous Recognition Engine
========================================================
Offline, grammar-constrained speech recognition for the alarm light.

    compile()          load the grammar + Vosk model, build the recognizer
    start(on_result)   open the microphone and begin continuous recognition
    stop()             stop the microphone, wait for the worker to exit
    close()            drop the model / recognizer

Threading
---------
sounddevice calls `_audio_callback` on its own audio thread.  That callback
only copies the block into a queue.  A single daemon thread
("RecognizerWorker") feeds Vosk and calls `on_result` for each final
utterance, one at a time, so results are never handled in parallel.

stop() is blocking: it returns only after the worker thread has exited
(or STOP_TIMEOUT elapsed), which is the acknowledgement lifecycle.py waits
for before it releases the GPIO pin.
"""

import json
import os
import queue
import threading
from typing import Callable, Optional

from vosk import KaldiRecognizer, Model

from alarm_light.core.command import RecognitionResult
from alarm_light.core.diagnostics import Reporter, guarded, report as _default_report
from alarm_light.core.state import RecognitionStatus, RecognizerState
from alarm_light.utils.constants import (
    ASR_CONFIDENCE_THRESHOLD, BLOCK_SIZE, GRAMMAR_PATH, MODEL_PATH,
    SAMPLE_RATE, STOP_TIMEOUT,
)
from alarm_light.utils.grammar import Grammar, GrammarError, load_grammar

_UNKNOWN = "[unk]"
_STOP    = None   # queue sentinel


class RecognitionError(RuntimeError):
    """The session could not be started (not compiled, no microphone...)."""

    def __init__(self, message: str,
                 status: RecognitionStatus = RecognitionStatus.UNKNOWN) -> None:
        super().__init__(message)
        self.status = status


class VoskRecognitionEngine:
    def __init__(self,
                 model_path: str = MODEL_PATH,
                 grammar_path: str = GRAMMAR_PATH,
                 sample_rate: int = SAMPLE_RATE,
                 block_size: int = BLOCK_SIZE,
                 min_confidence: float = ASR_CONFIDENCE_THRESHOLD,
                 report: Reporter = _default_report) -> None:
        self.model_path     = model_path
        self.grammar_path   = grammar_path
        self.sample_rate    = sample_rate
        self.block_size     = block_size
        self.min_confidence = min_confidence
        self._report        = guarded(report)

        self.grammar: Optional[Grammar] = None
        self._model      = None
        self._recognizer = None
        self._stream     = None
        self._worker: Optional[threading.Thread] = None
        self._audio: queue.Queue = queue.Queue()
        self._stopping   = threading.Event()
        self._stopped    = threading.Event()
        self._stopped.set()

        self._on_result: Optional[Callable[[RecognitionResult], None]] = None
        self.on_state_changed: Optional[Callable[[RecognizerState], None]] = None
        self._state = RecognizerState.IDLE

    # ─────────────────────────────────────────────────────────────────────────
    # Grammar compilation
    # ─────────────────────────────────────────────────────────────────────────

    def compile(self) -> RecognitionStatus:
        """
        Load the grammar and the model and build the constrained recognizer.
        Failures are reported and returned as a status, never raised.
        """
        try:
            self.grammar = load_grammar(self.grammar_path)
        except GrammarError as exc:
            self._report(f"Grammar compilation failed: {exc}", icon="❌")
            return RecognitionStatus.GRAMMAR_COMPILATION_FAILURE

        if not os.path.isdir(self.model_path):
            self._report(f"Vosk model not found: {self.model_path}", icon="❌")
            return RecognitionStatus.GRAMMAR_COMPILATION_FAILURE

        self._report("Loading Vosk model...", icon="⏳")
        try:
            self._model = Model(self.model_path)
            self._recognizer = KaldiRecognizer(
                self._model, self.sample_rate, json.dumps(self.grammar.vocabulary())
            )
            self._recognizer.SetWords(True)
        except Exception as exc:
            # vosk raises a bare Exception for an unusable model folder
            self._report(f"Vosk model load failed ({self.model_path}): {exc}", icon="❌")
            self._model = None
            self._recognizer = None
            return RecognitionStatus.GRAMMAR_COMPILATION_FAILURE

        self._report(
            f"Grammar '{self.grammar.tag}' compiled: {len(self.grammar.phrases)} phrases",
            icon="✅",
        )
        self._set_state(RecognizerState.IDLE)
        return RecognitionStatus.SUCCESS

    # ─────────────────────────────────────────────────────────────────────────
    # Session control
    # ─────────────────────────────────────────────────────────────────────────

    def start(self, on_result: Callable[[RecognitionResult], None]) -> None:
        if self._recognizer is None:
            raise RecognitionError("start() called before a successful compile()")
        if self._worker is not None and self._worker.is_alive():
            raise RecognitionError("continuous recognition already running")

        self._on_result = on_result
        self._stopping.clear()
        self._stopped.clear()
        self._audio = queue.Queue()

        self._worker = threading.Thread(
            target=self._run_worker, daemon=True, name="RecognizerWorker"
        )
        self._worker.start()

        try:
            import sounddevice as sd

            self._stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                blocksize=self.block_size,
                dtype="int16",
                channels=1,
                callback=self._audio_callback,
            )
            self._stream.start()
        except Exception as exc:
            self._stream = None
            self._halt_worker(STOP_TIMEOUT)
            raise RecognitionError(
                f"microphone unavailable: {exc}",
                status=RecognitionStatus.MICROPHONE_UNAVAILABLE,
            ) from exc

        self._set_state(RecognizerState.CAPTURING)

    def stop(self, timeout: float = STOP_TIMEOUT) -> None:
        """Stop capturing and block until the worker thread has exited."""
        if self._stopped.is_set():
            return

        stream, self._stream = self._stream, None
        if stream is not None:
            try:
                stream.stop()
                stream.close()
            except Exception as exc:
                self._report(f"Audio stream close failed: {exc}", icon="⚠️")

        self._halt_worker(timeout)
        self._set_state(RecognizerState.STOPPED)

    def close(self) -> None:
        self._on_result  = None
        self._recognizer = None
        self._model      = None

    @property
    def stopped(self) -> threading.Event:
        """Set once the worker has exited (the stop acknowledgement)."""
        return self._stopped

    # ─────────────────────────────────────────────────────────────────────────
    # Result parsing
    # ─────────────────────────────────────────────────────────────────────────

    def parse_final(self, raw: str) -> Optional[RecognitionResult]:
        """
        Turn one Vosk final-result JSON string into a RecognitionResult.

        Returns None for silence (empty text).  "[unk]", phrases outside the
        grammar and low-confidence utterances come back with no tags, so
        they resolve to "unknown device" downstream.
        """
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return None
        if not isinstance(data, dict):
            return None

        text = str(data.get("text", "")).strip()
        if not text:
            return None

        tag = self.grammar.tag if self.grammar else ""
        words = [w for w in data.get("result") or [] if isinstance(w, dict)]
        confidence = None
        if words:
            confidence = sum(float(w.get("conf", 1.0)) for w in words) / len(words)

        if text == _UNKNOWN:
            return RecognitionResult(RecognitionStatus.SUCCESS, text, {}, tag, confidence)

        if confidence is not None and self.min_confidence > 0.0 and confidence < self.min_confidence:
            self._report(
                f"Low confidence ({confidence:.2f} < {self.min_confidence}), ignored: '{text}'",
                icon="🔇",
            )
            return RecognitionResult(RecognitionStatus.LOW_CONFIDENCE, text, {}, tag, confidence)

        properties = self.grammar.lookup(text) if self.grammar else {}
        return RecognitionResult(RecognitionStatus.SUCCESS, text, properties, tag, confidence)

    # ─────────────────────────────────────────────────────────────────────────
    # Threads
    # ─────────────────────────────────────────────────────────────────────────

    def _audio_callback(self, indata, frames, time_info, status) -> None:
        """sounddevice RawInputStream callback: hand the block to the worker."""
        if status:
            self._report(f"Audio status: {status}", icon="⚠️")
        if not self._stopping.is_set():
            self._audio.put(bytes(indata))

    def _run_worker(self) -> None:
        try:
            while not self._stopping.is_set():
                block = self._audio.get()
                if block is _STOP or self._stopping.is_set():
                    break
                self._feed(block)
        finally:
            self._stopped.set()

    def _feed(self, block: bytes) -> None:
        recognizer = self._recognizer
        if recognizer is None or not recognizer.AcceptWaveform(block):
            return   # partial result, wait for more audio

        result = self.parse_final(recognizer.Result())
        if result is None:
            return

        handler = self._on_result
        if handler is None:
            return

        self._set_state(RecognizerState.PROCESSING)
        try:
            handler(result)
        except Exception as exc:
            self._report(f"Result handler failed: {exc!r}", icon="💥")
        finally:
            self._set_state(RecognizerState.CAPTURING)

    def _halt_worker(self, timeout: float) -> None:
        self._stopping.set()
        self._audio.put(_STOP)
        worker = self._worker
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout=timeout)
            if worker.is_alive():
                self._report(f"Recognizer worker still busy after {timeout:.1f}s", icon="⚠️")
        self._worker = None
        self._stopped.set()

    def _set_state(self, state: RecognizerState) -> None:
        if state is self._state:
            return
        self._state = state
        callback = self.on_state_changed
        if callback is not None:
            try:
                callback(state)
            except Exception as exc:
                self._report(f"State change handler failed: {exc!r}", icon="⚠️")
