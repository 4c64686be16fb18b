# settings.py
import os
from dataclasses import dataclass, asdict
from typing import Dict, Any, Tuple
from PySide6.QtCore import QSettings


# App identity for QSettings (macOS -> ~/Library/Preferences/<org>.<app>.plist)
ORG_NAME = "Topository"
APP_NAME = "PinyinCards"

# Point at an INI file instead of the native store (handy for tests and kiosks)
SETTINGS_PATH_ENV = "PINYIN_CARDS_SETTINGS"

@dataclass(frozen=True)
class Defaults:
    wpm: int = 60                 # slow on purpose: the learner is a child
    autoplay_delay: int = 500     # ms after opening a card
    message_hide: int = 3000      # ms an encouragement stays visible
    encourage_chance: int = 30    # % chance on "next"
    tile_stagger: int = 50        # ms between grid tile entrances
    voice: str = ""               # empty -> first Mandarin voice found

# Keys used in the settings store (avoid typos; one place to change)
KEYS = {
    "wpm": "tts/wpm",
    "voice": "tts/voice",
    "autoplay_delay": "delays/autoplay",
    "message_hide": "delays/message_hide",
    "tile_stagger": "delays/tile_stagger",
    "encourage_chance": "encourage/chance",
}

def _qs() -> QSettings:
    path = os.environ.get(SETTINGS_PATH_ENV)
    if path:
        return QSettings(path, QSettings.IniFormat)
    return QSettings(ORG_NAME, APP_NAME)

def _clamp(name: str, value: int) -> int:
    lo, hi = bounds()[name]
    return max(lo, min(hi, int(value)))

def load_all() -> Dict[str, Any]:
    """Return a dict of current values, falling back to defaults."""
    d = Defaults()
    s = _qs()
    current = {
        "wpm": _clamp("wpm", s.value(KEYS["wpm"], d.wpm, type=int)),
        "voice": s.value(KEYS["voice"], d.voice, type=str).strip(),
        "autoplay_delay": _clamp("autoplay_delay", s.value(KEYS["autoplay_delay"], d.autoplay_delay, type=int)),
        "message_hide": _clamp("message_hide", s.value(KEYS["message_hide"], d.message_hide, type=int)),
        "tile_stagger": _clamp("tile_stagger", s.value(KEYS["tile_stagger"], d.tile_stagger, type=int)),
        "encourage_chance": _clamp("encourage_chance",
                                   s.value(KEYS["encourage_chance"], d.encourage_chance, type=int)),
    }
    return current

def reset_all() -> Dict[str, Any]:
    """Reset everything to Defaults and return the fresh dict."""
    d = Defaults()
    s = _qs()
    for k, v in asdict(d).items():
        s.setValue(KEYS[k], v)
    s.sync()
    return load_all()

def bounds() -> Dict[str, Tuple[int, int]]:
    """(min, max) for each numeric setting."""
    return {
        "wpm": (40, 220),
        "autoplay_delay": (0, 5000),
        "message_hide": (500, 10000),
        "tile_stagger": (0, 500),
        "encourage_chance": (0, 100),
    }
