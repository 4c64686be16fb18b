"""Static pinyin table: item records and the YAML loader.

Expected YAML structure (order inside each category is display order):

    initials:
      - {char: b, emoji: "🎈", word: bàba, pronounce: 玻}
    finals:
      - ...
    overall:
      - ...

``pronounce`` is optional; when missing, speech falls back to ``char``.
"""

import io
import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
DEFAULT_DATA_PATH = os.path.join(DATA_DIR, "pinyin.yaml")

CATEGORIES = ("initials", "finals", "overall")

CATEGORY_TITLES = {
    "initials": "声母 (Initials)",
    "finals": "韵母 (Finals)",
    "overall": "整体认读 (Syllables)",
}


@dataclass(frozen=True)
class PinyinItem:
    char: str
    emoji: str
    word: str
    pronounce: Optional[str] = None

    @property
    def speech_text(self) -> str:
        return self.pronounce or self.char


PinyinTable = Dict[str, Tuple[PinyinItem, ...]]


def _coerce_item(raw, category, position):
    """Turn one YAML entry into a PinyinItem, or None when it has no symbol."""
    if isinstance(raw, str):
        raw = {"char": raw}
    if not isinstance(raw, dict):
        logger.warning("%s[%d]: expected a mapping, got %s; skipped", category, position, type(raw).__name__)
        return None
    char = str(raw.get("char") or "").strip()
    if not char:
        logger.warning("%s[%d]: entry without 'char'; skipped", category, position)
        return None
    pronounce = raw.get("pronounce")
    pronounce = str(pronounce).strip() if pronounce is not None else None
    return PinyinItem(
        char=char,
        emoji=str(raw.get("emoji") or ""),
        word=str(raw.get("word") or ""),
        pronounce=pronounce or None,
    )


def load_pinyin_yaml(path=DEFAULT_DATA_PATH) -> PinyinTable:
    """Load the category table from a YAML file.

    Returns: { category: (PinyinItem, ...) } preserving file order. Unknown
    category keys are kept as-is; known ones missing from the file map to an
    empty tuple.
    """
    if not os.path.exists(path):
        raise IOError("pinyin.yaml not found at: {}".format(os.path.abspath(path)))
    with io.open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh.read()) or {}
    if not isinstance(data, dict):
        raise ValueError("{}: top level must be a mapping of category -> items".format(path))

    table = {}
    for category, entries in data.items():
        key = str(category).strip()
        items = []
        if entries is None:
            entries = []
        elif not isinstance(entries, list):
            logger.warning("%s: expected a list of items, got %s; skipped",
                           key, type(entries).__name__)
            entries = []
        for position, raw in enumerate(entries):
            item = _coerce_item(raw, key, position)
            if item is not None:
                items.append(item)
        table[key] = tuple(items)
    for category in CATEGORIES:
        table.setdefault(category, ())

    logger.debug("Loaded pinyin table from %s: %s", path,
                 {k: len(v) for k, v in table.items()})
    return table
