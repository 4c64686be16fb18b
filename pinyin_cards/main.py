import argparse
import logging
import os
import sys

import yaml

from PySide6.QtWidgets import (
    QApplication, QWidget, QLabel, QPushButton, QFrame, QStackedWidget, QGridLayout,
    QGraphicsOpacityEffect, QGraphicsColorizeEffect,
)
from PySide6.QtUiTools import QUiLoader
from PySide6.QtCore import (QFile, QIODevice, Qt, QPoint, QPropertyAnimation, QSequentialAnimationGroup,
                            QEasingCurve, QAbstractAnimation)
from PySide6.QtGui import QColor, QKeySequence, QShortcut

from pinyin_cards.controller import PinyinController
from pinyin_cards.encouragement import DAD, MOM
from pinyin_cards.navigation import View
from pinyin_cards.pinyin_data import CATEGORIES, CATEGORY_TITLES, DEFAULT_DATA_PATH, load_pinyin_yaml
from pinyin_cards.settings import load_all, reset_all
from pinyin_cards.speech import SaySpeech
from pinyin_cards.timers import QtScheduler

logger = logging.getLogger(__name__)

UI_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "ui", "form.ui")
GRID_COLUMNS = 4
TILE_FADE_MS = 500
CARD_POP_MS = 400
CARD_PULSE_MS = 400
BOUNCE_MS = 300
BOUNCE_PX = 20


def load_ui(path: str, parent=None):
    # Convert relative path to absolute path
    abs_path = os.path.abspath(path)
    ui_file = QFile(abs_path)
    if not ui_file.open(QIODevice.ReadOnly):
        raise FileNotFoundError("Cannot open UI file: {}".format(abs_path))
    try:
        loader = QUiLoader()
        window = loader.load(ui_file, parent)
    finally:
        ui_file.close()
    if window is None:
        raise RuntimeError("Failed to load UI from: {}".format(abs_path))
    return window


class PinyinWindow:
    """Qt rendering surface for PinyinController, built from ui/form.ui.

    Every method the controller calls is purely presentational; all state
    lives in `controller.state`.
    """

    def __init__(self, table, speech=None, scheduler=None, settings=None, rng=None, ui_path=UI_PATH):
        self.window = load_ui(ui_path)
        self.speech = speech if speech is not None else SaySpeech(self.window)
        self.scheduler = scheduler if scheduler is not None else QtScheduler(self.window)
        self.controller = PinyinController(table, self, self.speech, self.scheduler,
                                           settings=settings, rng=rng)

        self.stacked = self._child(QStackedWidget, "stackedViews")
        self.pages = {
            View.HOME: self._child(QWidget, "pageHome"),
            View.GRID: self._child(QWidget, "pageGrid"),
            View.DETAIL: self._child(QWidget, "pageDetail"),
        }
        self.label_title = self._child(QLabel, "labelCategoryTitle")
        self.tiles_layout = self._child(QGridLayout, "layoutTiles")
        self.frame_card = self._child(QFrame, "frameCard")
        self.label_char = self._child(QLabel, "labelChar")
        self.label_emoji = self._child(QLabel, "labelEmoji")
        self.label_word = self._child(QLabel, "labelWord")
        self.label_word.setTextFormat(Qt.RichText)
        self.messages = {
            DAD: self._child(QLabel, "labelMessageDad"),
            MOM: self._child(QLabel, "labelMessageMom"),
        }
        self.persona_frames = {
            DAD: self._child(QFrame, "frameDad"),
            MOM: self._child(QFrame, "frameMom"),
        }
        for label in self.messages.values():
            label.hide()

        self._setup_animations()
        self._wire()
        self.show_view(self.controller.state.view)

    def _child(self, cls, name):
        w = self.window.findChild(cls, name)
        if w is None:
            raise RuntimeError("{} '{}' not found in {}".format(cls.__name__, name, os.path.basename(UI_PATH)))
        return w

    # --- wiring ---
    def _wire(self):
        for category, name in zip(CATEGORIES, ("btnInitials", "btnFinals", "btnOverall")):
            btn = self._child(QPushButton, name)
            btn.setText(CATEGORY_TITLES[category])
            btn.clicked.connect(lambda _checked=False, c=category: self.controller.show_category(c))

        c = self.controller
        self._child(QPushButton, "btnHome").clicked.connect(lambda _checked=False: c.go_home())
        self._child(QPushButton, "btnBack").clicked.connect(lambda _checked=False: c.go_back_to_grid())
        self._child(QPushButton, "btnPrev").clicked.connect(lambda _checked=False: c.prev_card())
        self._child(QPushButton, "btnNext").clicked.connect(lambda _checked=False: c.next_card())
        self._child(QPushButton, "btnPlay").clicked.connect(lambda _checked=False: c.play_audio())

        # Buttons never take keyboard focus, so Space and the arrows reach the shortcuts
        for btn in self.window.findChildren(QPushButton):
            btn.setFocusPolicy(Qt.NoFocus)

        self._shortcuts = []
        for key, fn in ((Qt.Key_Right, self._on_right), (Qt.Key_Left, self._on_left),
                        (Qt.Key_Space, self._on_space), (Qt.Key_Escape, self._on_escape)):
            sc = QShortcut(QKeySequence(key), self.window)
            sc.activated.connect(fn)
            self._shortcuts.append(sc)
        logger.debug("Buttons and %d shortcuts wired", len(self._shortcuts))

    def _on_right(self):
        if self.controller.state.view is View.DETAIL:
            self.controller.next_card()

    def _on_left(self):
        if self.controller.state.view is View.DETAIL:
            self.controller.prev_card()

    def _on_space(self):
        if self.controller.state.view is View.DETAIL:
            self.controller.play_audio()

    def _on_escape(self):
        view = self.controller.state.view
        if view is View.DETAIL:
            self.controller.go_back_to_grid()
        elif view is View.GRID:
            self.controller.go_home()

    def _setup_animations(self):
        # Card pop: fade the whole card in; restarted on every card update
        self._card_opacity = QGraphicsOpacityEffect(self.frame_card)
        self._card_opacity.setOpacity(1.0)
        self.frame_card.setGraphicsEffect(self._card_opacity)
        self._pop = QPropertyAnimation(self._card_opacity, b"opacity", self.frame_card)
        self._pop.setDuration(CARD_POP_MS)
        self._pop.setStartValue(0.0)
        self._pop.setEndValue(1.0)
        self._pop.setEasingCurve(QEasingCurve.OutCubic)

        # Pulse while speaking: tint the symbol and let it fade back
        self._char_tint = QGraphicsColorizeEffect(self.label_char)
        self._char_tint.setColor(QColor("#ff6b6b"))
        self._char_tint.setStrength(0.0)
        self.label_char.setGraphicsEffect(self._char_tint)
        self._pulse = QPropertyAnimation(self._char_tint, b"strength", self.label_char)
        self._pulse.setDuration(CARD_PULSE_MS)
        self._pulse.setStartValue(0.0)
        self._pulse.setKeyValueAt(0.5, 0.8)
        self._pulse.setEndValue(0.0)

        self._bounces = {}
        self._bounce_base = {}
        for persona, frame in self.persona_frames.items():
            anim = QPropertyAnimation(frame, b"pos", frame)
            anim.setDuration(BOUNCE_MS)
            anim.setEasingCurve(QEasingCurve.OutQuad)
            self._bounces[persona] = anim

    # --- surface API used by the controller ---
    def show_view(self, view):
        self.stacked.setCurrentWidget(self.pages[view])
        logger.debug("View -> %s", view.value)

    def set_title(self, text):
        self.label_title.setText(text)

    def clear_tiles(self):
        while self.tiles_layout.count():
            item = self.tiles_layout.takeAt(0)
            w = item.widget()
            if w is not None:
                w.deleteLater()

    def add_tile(self, index, label, delay_ms):
        tile = QPushButton(label)
        tile.setObjectName("tile_{}".format(index))
        tile.setMinimumSize(96, 96)
        tile.setFocusPolicy(Qt.NoFocus)
        tile.setStyleSheet("font-size: 32pt; font-weight: bold; background: #a8dadc;")
        tile.clicked.connect(lambda _checked=False, i=index: self.controller.show_detail(i))
        self.tiles_layout.addWidget(tile, index // GRID_COLUMNS, index % GRID_COLUMNS)

        # Staggered entrance: wait, then fade in
        effect = QGraphicsOpacityEffect(tile)
        effect.setOpacity(0.0)
        tile.setGraphicsEffect(effect)
        group = QSequentialAnimationGroup(tile)
        group.addPause(max(0, int(delay_ms)))
        fade = QPropertyAnimation(effect, b"opacity")
        fade.setDuration(TILE_FADE_MS)
        fade.setStartValue(0.0)
        fade.setEndValue(1.0)
        fade.setEasingCurve(QEasingCurve.OutCubic)
        group.addAnimation(fade)
        group.start(QAbstractAnimation.DeleteWhenStopped)

    def set_card(self, char, emoji, word_html):
        self.label_char.setText(char)
        self.label_emoji.setText(emoji)
        self.label_word.setText(word_html)

    def replay_card_animation(self):
        self._pop.stop()
        self._pop.start()

    def pulse_card(self):
        self._pulse.stop()
        self._pulse.start()

    def show_message(self, persona, text):
        label = self.messages[persona]
        label.setText(text)
        label.show()

        frame = self.persona_frames[persona]
        anim = self._bounces[persona]
        if anim.state() == QAbstractAnimation.Running:
            anim.stop()
        else:
            self._bounce_base[persona] = frame.pos()
        base = self._bounce_base.get(persona, frame.pos())
        anim.setStartValue(base)
        anim.setKeyValueAt(0.5, base - QPoint(0, BOUNCE_PX))
        anim.setEndValue(base)
        anim.start()

    def hide_message(self, persona):
        self.messages[persona].hide()

    def show(self):
        self.window.show()


def main(argv=None):
    parser = argparse.ArgumentParser(prog="pinyin-cards",
                                     description="Pinyin flashcards with pronunciation for young learners.")
    parser.add_argument("--data", default=DEFAULT_DATA_PATH, help="path to the pinyin YAML table")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--reset-settings", action="store_true", help="restore default settings before starting")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(levelname)s:%(name)s:%(message)s")

    app = QApplication.instance() or QApplication(sys.argv[:1])

    settings = reset_all() if args.reset_settings else load_all()
    logger.debug("Settings: %s", settings)

    try:
        table = load_pinyin_yaml(args.data)
    except (IOError, ValueError, yaml.YAMLError) as e:
        logger.error("Cannot load pinyin data: %s", e)
        return 1

    window = PinyinWindow(table, settings=settings)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
