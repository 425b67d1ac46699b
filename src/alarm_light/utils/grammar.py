"""
utils/grammar.py - Command Grammar Loader
==========================================
Loads the packaged JSON grammar and expands it into the closed phrase list
the recognizer is constrained to, plus a phrase -> semantic tags table.

Grammar file format:
    {
      "tag":   "alarm-light",                       # constraint tag id
      "slots": {"cmd": {"on": "ON", "off": "OFF"},  # spoken word -> tag value
                ...},
      "rules": ["turn {cmd} the {target} {device}", ...]
    }

Every rule is expanded over all words of the slots it references, so
"turn {cmd} the {target} {device}" yields "turn on the alarm light" with
tags {"cmd": ["ON"], "target": ["ALARM"], "device": ["LIGHT"]}.

Public API:
    load_grammar(path)   → Grammar
    Grammar.lookup(text) → dict[str, list[str]]   ({} for unknown phrases)
"""

import itertools
import json
import re
from dataclasses import dataclass, field

_SLOT_RE = re.compile(r"\{(\w+)\}")


class GrammarError(ValueError):
    """The grammar file is missing, malformed or expands to nothing."""


@dataclass
class Grammar:
    tag: str
    phrases: dict[str, dict[str, list[str]]] = field(default_factory=dict)

    def lookup(self, text: str) -> dict[str, list[str]]:
        tags = self.phrases.get(" ".join(text.lower().split()))
        if tags is None:
            return {}
        return {name: list(values) for name, values in tags.items()}

    def vocabulary(self) -> list[str]:
        """Phrase list in the form KaldiRecognizer expects (plus "[unk]")."""
        return sorted(self.phrases) + ["[unk]"]


# ─────────────────────────────────────────────────────────────────────────────
# Expansion
# ─────────────────────────────────────────────────────────────────────────────

def _expand_rule(rule: str, slots: dict) -> dict[str, dict[str, list[str]]]:
    names = _SLOT_RE.findall(rule)
    for name in names:
        if name not in slots:
            raise GrammarError(f"rule {rule!r} references unknown slot {name!r}")
        if not isinstance(slots[name], dict):
            raise GrammarError(f"slot {name!r} must map spoken words to tag values")

    expanded = {}
    choices = [list(slots[name].items()) for name in names]
    for combo in itertools.product(*choices):
        words = iter(word for word, _ in combo)
        phrase = _SLOT_RE.sub(lambda _m: next(words), rule)
        phrase = " ".join(phrase.lower().split())
        expanded[phrase] = {
            name: [value] for name, (_, value) in zip(names, combo)
        }
    return expanded


def load_grammar(path: str) -> Grammar:
    """
    Read and expand the grammar at `path`.

    Raises GrammarError on a missing/unreadable file, invalid JSON, a rule
    that references an undefined slot, or a grammar with no phrases.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as exc:
        raise GrammarError(f"cannot read grammar {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise GrammarError(f"invalid grammar JSON in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise GrammarError(f"grammar {path} must be a JSON object")

    slots = raw.get("slots") or {}
    rules = raw.get("rules") or []
    if not isinstance(slots, dict) or not isinstance(rules, list):
        raise GrammarError(f"grammar {path}: 'slots' must be an object, 'rules' a list")

    phrases: dict[str, dict[str, list[str]]] = {}
    for rule in rules:
        for phrase, tags in _expand_rule(str(rule), slots).items():
            # earlier rules win on duplicate phrases
            phrases.setdefault(phrase, tags)

    if not phrases:
        raise GrammarError(f"grammar {path} expands to no phrases")

    return Grammar(tag=str(raw.get("tag", "")), phrases=phrases)
