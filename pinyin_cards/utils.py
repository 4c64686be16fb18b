"""Small text helpers for the flashcards.

1) a tone map: plain vowel -> character class of all its toned forms,
2) tone-insensitive highlighting of a pinyin symbol inside an example word.

All helpers are pure and have no side effects.
"""

import html
import re
import unicodedata
from functools import lru_cache


# ----------------------------
# 1) Tone map
# ----------------------------
# "v" is the ASCII stand-in for "ü" on keyboards without it.
TONE_MAP = {
    "a": "aāáǎà",
    "o": "oōóǒò",
    "e": "eēéěè",
    "i": "iīíǐì",
    "u": "uūúǔù",
    "ü": "üǖǘǚǜv",
    "v": "üǖǘǚǜv",
}

HIGHLIGHT_TEMPLATE = '<span style="color:#ff6b6b; font-weight:bold;">{}</span>'


def tone_pattern(target: str) -> str:
    """Regex source matching `target` with any tone mark on its vowels.

    Vowels become a bracketed class of their toned variants; everything else
    is escaped so symbols like "+" or "." match literally.
    """
    parts = []
    for ch in unicodedata.normalize("NFC", target):
        variants = TONE_MAP.get(ch.lower())
        if variants:
            parts.append("[" + variants + "]")
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


@lru_cache(maxsize=256)
def _compiled(target: str):
    return re.compile("(" + tone_pattern(target) + ")", re.IGNORECASE)


# ----------------------------
# 2) Highlighting
# ----------------------------
def highlight_word(word: str, target: str, template: str = HIGHLIGHT_TEMPLATE) -> str:
    """Return `word` as rich text with every occurrence of `target` wrapped.

    >>> highlight_word("bàba", "b", "[{}]")
    '[b]à[b]a'
    >>> highlight_word("LǙSÈ", "ü", "[{}]")
    'L[Ǚ]SÈ'
    """
    word = unicodedata.normalize("NFC", word or "")
    if not target:
        return html.escape(word)

    out = []
    pos = 0
    for m in _compiled(target).finditer(word):
        out.append(html.escape(word[pos:m.start()]))
        out.append(template.format(html.escape(m.group(1))))
        pos = m.end()
    out.append(html.escape(word[pos:]))
    return "".join(out)
