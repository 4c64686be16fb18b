"""
Shared fixtures: in-memory fakes for the surface, speech backend and timers.
"""

import os

# Must be set before any QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import random

import pytest

from pinyin_cards.controller import PinyinController
from pinyin_cards.pinyin_data import PinyinItem
from pinyin_cards.speech import Voice


class FakeSurface:
    """Records what the controller asked to render."""

    def __init__(self):
        self.view = None
        self.title = None
        self.tiles = []
        self.card = None
        self.card_animations = 0
        self.pulses = 0
        self.messages = {}
        self.calls = []

    def show_view(self, view):
        self.view = view
        self.calls.append(("show_view", view))

    def set_title(self, text):
        self.title = text

    def clear_tiles(self):
        self.tiles = []

    def add_tile(self, index, label, delay_ms):
        self.tiles.append((index, label, delay_ms))

    def set_card(self, char, emoji, word_html):
        self.card = (char, emoji, word_html)

    def replay_card_animation(self):
        self.card_animations += 1

    def pulse_card(self):
        self.pulses += 1

    def show_message(self, persona, text):
        self.messages[persona] = text

    def hide_message(self, persona):
        self.messages.pop(persona, None)


class FakeSpeech:
    def __init__(self, voices=None):
        self._voices = list(voices or [])
        self.spoken = []
        self.cancels = 0
        self.speaking = False

    def voices(self):
        return self._voices

    def is_speaking(self):
        return self.speaking

    def cancel(self):
        self.cancels += 1
        self.speaking = False

    def speak(self, text, voice=None, lang="zh-CN", rate=None):
        self.spoken.append((text, voice, lang, rate))
        self.speaking = True


class ManualScheduler:
    """Keyed timers driven by `advance(ms)` instead of an event loop."""

    def __init__(self):
        self.now = 0
        self.tasks = {}

    def schedule(self, key, delay_ms, callback):
        self.tasks[key] = (self.now + max(0, int(delay_ms)), callback)

    def cancel(self, key):
        self.tasks.pop(key, None)

    def pending(self, key):
        return key in self.tasks

    def advance(self, ms):
        self.now += ms
        due = sorted((when, key) for key, (when, _) in self.tasks.items() if when <= self.now)
        for _, key in due:
            task = self.tasks.pop(key, None)
            if task is not None:
                task[1]()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def table():
    return {
        "initials": (
            PinyinItem("b", "🎈", "bàba", "玻"),
            PinyinItem("p", "🍇", "pútao", "坡"),
            PinyinItem("m", "🐴", "mǎ"),
        ),
        "finals": (
            PinyinItem("a", "🌸", "huā", "啊"),
            PinyinItem("ü", "🟢", "lǜsè", "迂"),
        ),
        "overall": (
            PinyinItem("zhi", "🕷️", "zhīzhū", "知"),
        ),
    }


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def speech():
    return FakeSpeech([
        Voice("Alex", "en_US", "Most people recognize me by my voice."),
        Voice("Sinji", "zh_HK", "您好！我叫善怡。"),
        Voice("Tingting", "zh_CN", "你好！我叫婷婷。"),
    ])


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def controller(table, surface, speech, scheduler):
    return PinyinController(table, surface, speech, scheduler, rng=random.Random(7))
