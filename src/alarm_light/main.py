"""
main.py - Offline Voice-Controlled Alarm Light
===============================================
Say "turn on the alarm light" / "turn off the alarm light" and the relay on
LIGHT_PIN follows.

Session:
    UNINITIALIZED → start() → LISTENING → Ctrl+C → stop() → DISPOSED

Run:
    alarm-light                        (installed console script)
    python -m alarm_light.main
    GPIOZERO_PIN_FACTORY=mock alarm-light   (no Raspberry Pi attached)
"""

import logging
import os
import time
from datetime import datetime

from alarm_light.core.lifecycle import SessionLifecycleManager
from alarm_light.core.recognizer import VoskRecognitionEngine
from alarm_light.core.state import SessionState
from alarm_light.utils.constants import GRAMMAR_PATH, LIGHT_PIN, MODEL_PATH
from alarm_light.utils.gpio import GpioProvider


def main() -> int:
    logging.basicConfig(
        level=os.environ.get("ALARM_LIGHT_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 60)
    print("🚨 Alarm Light: Offline Voice Control")
    print("=" * 60)
    print(f"   Model      : {MODEL_PATH}")
    print(f"   Grammar    : {os.path.normpath(GRAMMAR_PATH)}")
    print(f"   Light pin  : GPIO {LIGHT_PIN} (low-switching relay)")
    print(f"   Time       : {datetime.now().strftime('%H:%M:%S')}")
    print("─" * 60)
    print("   Commands   : 'turn on the alarm light'")
    print("                'turn off the alarm light'")
    print("=" * 60)
    print()

    manager = SessionLifecycleManager(
        engine=VoskRecognitionEngine(),
        gpio=GpioProvider(),
        pin_number=LIGHT_PIN,
    )

    if manager.start() is not SessionState.LISTENING:
        print("❌ Could not start listening. Check the GPIO pin, the model path and the microphone.")
        return 1

    try:
        while True:
            time.sleep(0.1)
    except KeyboardInterrupt:
        print("\n🙏 Shutting down...")
    finally:
        manager.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
