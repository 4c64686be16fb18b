"""System text-to-speech through the macOS `say` command.

The controller only needs four things from a speech backend: speak, cancel,
is-speaking and the list of voices (each tagged with a locale). `SaySpeech`
provides them by driving `/usr/bin/say` with QProcess so nothing blocks the
event loop.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
from typing import Iterable, List, NamedTuple, Optional

from PySide6.QtCore import QObject, QProcess

logger = logging.getLogger(__name__)

SAY_PATH = "/usr/bin/say"
MANDARIN_LANG = "zh-CN"

# Example lines from `say -v '?'`:
#   "Tingting            zh_CN    # 你好！我叫婷婷。"
#   "Eddy (Chinese (China mainland)) zh_CN    # 你好！我叫Eddy。"
_VOICE_LINE_RE = re.compile(r"^(?P<name>.+?)\s+(?P<lang>[a-z]{2,3}[_-][A-Za-z0-9]+)\s+#\s?(?P<sample>.*)$")


class Voice(NamedTuple):
    name: str
    lang: str
    sample: str = ""


def _norm_lang(lang: str) -> str:
    return (lang or "").replace("-", "_")


def parse_say_voices(text: str) -> List[Voice]:
    """Parse the `say -v '?'` listing into Voice records (unparseable lines skipped)."""
    voices = []
    for line in (text or "").splitlines():
        m = _VOICE_LINE_RE.match(line.strip())
        if m:
            voices.append(Voice(m.group("name").strip(), _norm_lang(m.group("lang")), m.group("sample").strip()))
    return voices


def pick_mandarin_voice(voices: Iterable[Voice], preferred: Optional[str] = None) -> Optional[Voice]:
    """Choose a voice for Mandarin, or None to let the system default speak.

    A configured `preferred` name wins when installed. Otherwise prefer
    zh_CN, then zh_TW, then any other Chinese locale (Cantonese last).
    """
    voices = list(voices)
    if preferred:
        for v in voices:
            if v.name.lower() == preferred.lower():
                return v
        logger.debug("Preferred voice %r not installed; falling back to discovery", preferred)
    for locale in ("zh_CN", "zh_TW"):
        for v in voices:
            if v.lang == locale:
                return v
    zh_any = [v for v in voices if v.lang.startswith("zh") or v.lang.endswith("CN")]
    zh_any.sort(key=lambda v: v.lang == "zh_HK")
    return zh_any[0] if zh_any else None


def build_say_args(text: str, voice: Optional[str] = None, rate: Optional[int] = None) -> List[str]:
    args = []
    if voice:
        args += ["-v", voice]
    if isinstance(rate, int) and rate > 0:
        args += ["-r", str(rate)]
    args += ["--", text]
    return args


class SaySpeech(QObject):
    """Speech backend over `say`. One utterance at a time; `cancel` kills it."""

    def __init__(self, parent: Optional[QObject] = None, say_path: str = SAY_PATH) -> None:
        super().__init__(parent)
        self._say_path = say_path
        self._proc: Optional[QProcess] = None
        self._voices: Optional[List[Voice]] = None
        self._warned = False

    def available(self) -> bool:
        return os.access(self._say_path, os.X_OK)

    def voices(self) -> List[Voice]:
        """Installed voices, detected once per session."""
        if self._voices is not None:
            return self._voices
        self._voices = []
        if not self.available():
            return self._voices
        try:
            proc = QProcess(self)
            proc.setProgram(self._say_path)
            proc.setArguments(["-v", "?"])
            proc.setProcessChannelMode(QProcess.MergedChannels)
            proc.start()
            proc.waitForFinished(3000)
            out = bytes(proc.readAllStandardOutput()).decode("utf-8", "ignore")
            self._voices = parse_say_voices(out)
        except Exception as e:
            logger.warning("Voice detection failed: %s", e)
        logger.debug("Detected voices: %d", len(self._voices))
        return self._voices

    def is_speaking(self) -> bool:
        return self._proc is not None and self._proc.state() != QProcess.NotRunning

    def cancel(self) -> None:
        proc = self._proc
        if proc is None:
            return
        self._proc = None
        if proc.state() != QProcess.NotRunning:
            logger.debug("Cancelling current utterance")
            proc.kill()
            proc.waitForFinished(500)

    def speak(self, text: str, voice: Optional[str] = None, lang: str = MANDARIN_LANG,
              rate: Optional[int] = None) -> None:
        if not text:
            return
        if not self.available():
            if not self._warned:
                logger.warning("No speech backend at %s; pronunciation is disabled", self._say_path)
                self._warned = True
            return
        args = build_say_args(text, voice, rate)
        logger.debug("Speak (%s) via say -> %s %s", lang, self._say_path, " ".join(shlex.quote(a) for a in args))
        proc = QProcess(self)
        proc.setProgram(self._say_path)
        proc.setArguments(args)
        proc.setProcessChannelMode(QProcess.MergedChannels)

        def _after(code, status):
            logger.debug("say finished code=%s status=%s", code, status)
            if self._proc is proc:
                self._proc = None
            proc.deleteLater()

        def _failed(err):
            logger.warning("say failed to run: %s", err)

        proc.finished.connect(_after)
        proc.errorOccurred.connect(_failed)
        self._proc = proc
        proc.start()
