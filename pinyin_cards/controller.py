from __future__ import annotations

import logging
import random
from dataclasses import asdict
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from pinyin_cards.encouragement import Encouragement, pick_encouragement, should_encourage
from pinyin_cards.navigation import (NavigationState, View, select_category, select_index, step,
                                     switch_view)
from pinyin_cards.pinyin_data import CATEGORY_TITLES, PinyinItem
from pinyin_cards.settings import Defaults
from pinyin_cards.speech import MANDARIN_LANG, Voice, pick_mandarin_voice
from pinyin_cards.utils import highlight_word

logger = logging.getLogger(__name__)

AUTOPLAY = "autoplay"


def _hide_key(persona: str) -> str:
    return "hide:" + persona


class Surface(Protocol):
    def show_view(self, view: View) -> None: ...
    def set_title(self, text: str) -> None: ...
    def clear_tiles(self) -> None: ...
    def add_tile(self, index: int, label: str, delay_ms: int) -> None: ...
    def set_card(self, char: str, emoji: str, word_html: str) -> None: ...
    def replay_card_animation(self) -> None: ...
    def pulse_card(self) -> None: ...
    def show_message(self, persona: str, text: str) -> None: ...
    def hide_message(self, persona: str) -> None: ...


class Speech(Protocol):
    def speak(self, text: str, voice: Optional[str] = None, lang: str = MANDARIN_LANG,
              rate: Optional[int] = None) -> None: ...
    def cancel(self) -> None: ...
    def is_speaking(self) -> bool: ...
    def voices(self) -> List[Voice]: ...


class Scheduler(Protocol):
    def schedule(self, key: str, delay_ms: int, callback: Callable[[], None]) -> None: ...
    def cancel(self, key: str) -> None: ...


class PinyinController:
    """Drives the three views from a NavigationState.

    The surface, speech backend and scheduler are injected so the whole flow
    runs without a display; `rng` makes the encouragement rolls repeatable.
    """

    def __init__(self,
                 table: Mapping[str, Sequence[PinyinItem]],
                 surface: Surface,
                 speech: Speech,
                 scheduler: Scheduler,
                 settings: Optional[Dict[str, Any]] = None,
                 rng: Optional[random.Random] = None) -> None:
        self.table = table
        self.surface = surface
        self.speech = speech
        self.scheduler = scheduler
        self.settings = dict(asdict(Defaults()), **(settings or {}))
        self.rng = rng if rng is not None else random.Random()
        self.state = NavigationState()

    # --- commands ---
    def show_category(self, category: str) -> None:
        self.scheduler.cancel(AUTOPLAY)
        self.state = select_category(self.state, self.table, category)
        self.surface.set_title(CATEGORY_TITLES.get(category, category))
        self._render_grid()
        self.surface.show_view(self.state.view)
        self.show_encouragement()

    def show_detail(self, index: int) -> None:
        self.state = select_index(self.state, index)
        self._update_detail_card()
        self.surface.show_view(self.state.view)
        self.scheduler.schedule(AUTOPLAY, self.settings["autoplay_delay"], self.play_audio)

    def next_card(self) -> None:
        if not self.state.items:
            return
        self.state = step(self.state, +1)
        self._update_detail_card()
        self.play_audio()
        # TODO: confirm with the parents whether "previous" should cheer too
        if should_encourage(self.rng, self.settings["encourage_chance"]):
            self.show_encouragement()

    def prev_card(self) -> None:
        if not self.state.items:
            return
        self.state = step(self.state, -1)
        self._update_detail_card()
        self.play_audio()

    def go_home(self) -> None:
        self._switch(View.HOME)

    def go_back_to_grid(self) -> None:
        self._switch(View.GRID)

    def play_audio(self) -> None:
        self.scheduler.cancel(AUTOPLAY)
        item = self.state.current_item()
        if item is None:
            return
        if self.speech.is_speaking():
            self.speech.cancel()
        voice = pick_mandarin_voice(self.speech.voices(), self.settings.get("voice") or None)
        logger.debug("Play index=%s char='%s' text='%s' voice=%s", self.state.index, item.char,
                     item.speech_text, voice.name if voice else None)
        self.speech.speak(item.speech_text, voice.name if voice else None, MANDARIN_LANG,
                          self.settings["wpm"])
        self.surface.pulse_card()

    def show_encouragement(self) -> Encouragement:
        enc = pick_encouragement(self.rng)
        logger.debug("Encouragement from %s: %s", enc.persona, enc.message)
        self.surface.show_message(enc.persona, enc.message)
        self.scheduler.schedule(_hide_key(enc.persona), self.settings["message_hide"],
                                partial(self.surface.hide_message, enc.persona))
        return enc

    # --- rendering ---
    def _switch(self, view: View) -> None:
        self.scheduler.cancel(AUTOPLAY)
        self.state = switch_view(self.state, view)
        self.surface.show_view(view)

    def _render_grid(self) -> None:
        self.surface.clear_tiles()
        stagger = self.settings["tile_stagger"]
        for index, item in enumerate(self.state.items):
            self.surface.add_tile(index, item.char, index * stagger)

    def _update_detail_card(self) -> None:
        item = self.state.current_item()
        if item is None:
            return
        self.surface.set_card(item.char, item.emoji, highlight_word(item.word, item.char))
        self.surface.replay_card_animation()
