import os

# ── Vosk Model ────────────────────────────────────────────────────────────────
# Any small English Vosk model works; the grammar below restricts decoding.
MODEL_PATH  = os.environ.get(
    "ALARM_LIGHT_MODEL",
    os.path.join("models", "vosk-model-small-en-us-0.15"),
)
SAMPLE_RATE = 16000
BLOCK_SIZE  = 8000   # frames per RawInputStream callback (0.5 s at 16 kHz)

# ── Grammar ───────────────────────────────────────────────────────────────────
# Phrase templates + slot words -> semantic tags (see utils/grammar.py).
GRAMMAR_PATH = os.environ.get(
    "ALARM_LIGHT_GRAMMAR",
    os.path.join(os.path.dirname(__file__), "..", "grammar", "alarm_light.json"),
)

# ── GPIO ──────────────────────────────────────────────────────────────────────
# BCM number of the pin driving the alarm light relay.
LIGHT_PIN = int(os.environ.get("ALARM_LIGHT_PIN", "5"))

# ── Semantic tags ─────────────────────────────────────────────────────────────
TAG_TARGET = "target"
TAG_CMD    = "cmd"
TAG_DEVICE = "device"

# ── Tag values ────────────────────────────────────────────────────────────────
STATE_ON     = "ON"
STATE_OFF    = "OFF"
DEVICE_LED   = "LED"
DEVICE_LIGHT = "LIGHT"
TARGET_ALARM = "ALARM"

KNOWN_DEVICES = (DEVICE_LED, DEVICE_LIGHT)
KNOWN_TARGETS = (TARGET_ALARM,)

# ── ASR Quality Filter ────────────────────────────────────────────────────────
# Minimum average per-word confidence (0.0 – 1.0) reported by Vosk.
# Utterances below this are delivered with LOW_CONFIDENCE status and no tags,
# so they can never actuate the light.  Set to 0.0 to disable the gate.
ASR_CONFIDENCE_THRESHOLD = float(os.environ.get("ALARM_LIGHT_MIN_CONFIDENCE", "0.5"))

# ── Shutdown ──────────────────────────────────────────────────────────────────
STOP_TIMEOUT = 5.0   # seconds to wait for the recognizer worker to exit
