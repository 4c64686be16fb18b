"""
Tests for tone-insensitive word highlighting.
"""

import re

from hypothesis import given, strategies as st

from pinyin_cards.utils import TONE_MAP, highlight_word, tone_pattern

MARK = "[{}]"


def test_initial_without_vowel_marks_every_occurrence():
    """Test "b" in "bàba" is wrapped twice."""
    assert highlight_word("bàba", "b", MARK) == "[b]à[b]a"


def test_default_template_is_a_span():
    result = highlight_word("bàba", "b")
    assert result.count("<span") == 2
    assert result.endswith("a")


def test_vowel_matches_toned_forms():
    """Test a plain vowel target matches all four tones."""
    assert highlight_word("māmámǎmà", "a", MARK) == "m[ā]m[á]m[ǎ]m[à]"


def test_case_insensitive():
    assert highlight_word("BÀBA", "b", MARK) == "[B]À[B]A"
    assert highlight_word("ĀI", "ai", MARK) == "[ĀI]"


def test_multi_letter_final_with_tone_in_middle():
    assert highlight_word("xīngxing", "ing", MARK) == "x[īng]x[ing]"


def test_u_umlaut_matches_v():
    """Test "ü" also matches the ASCII fallback "v"."""
    assert highlight_word("lǜsè", "ü", MARK) == "l[ǜ]sè"
    assert highlight_word("lvse", "ü", MARK) == "l[v]se"


def test_v_target_matches_u_umlaut():
    assert highlight_word("nǚ", "v", MARK) == "n[ǚ]"


def test_plain_u_does_not_match_u_umlaut():
    assert highlight_word("lǜ", "u", MARK) == "lǜ"


def test_no_match_leaves_word_alone():
    assert highlight_word("māo", "zh", MARK) == "māo"


def test_empty_target_returns_word():
    assert highlight_word("bàba", "", MARK) == "bàba"


def test_metacharacters_match_literally():
    assert highlight_word("a+b a.b", "+", MARK) == "a[+]b a.b"
    assert highlight_word("a.b axb", ".", MARK) == "a[.]b axb"
    assert highlight_word("(x)", "(", MARK) == "[(]x)"


def test_rich_text_is_escaped():
    assert highlight_word("<b>&", "b", MARK) == "&lt;[b]&gt;&amp;"


def test_decomposed_input_is_normalized():
    decomposed = "ba\u0300ba"
    assert highlight_word(decomposed, "a", MARK) == "b[à]b[a]"


def test_tone_pattern_escapes_consonants_only():
    assert tone_pattern("zh") == "zh"
    assert tone_pattern("an") == "[aāáǎà]n"
    assert tone_pattern("a*") == "[aāáǎà]\\*"


@given(st.sampled_from(sorted(TONE_MAP["a"])), st.booleans())
def test_any_tone_of_a_is_highlighted(ch, upper):
    ch = ch.upper() if upper else ch
    assert highlight_word("b" + ch, "a", MARK) == "b[" + ch + "]"


@given(st.text(alphabet="bpmfdtaeiouāáǎàēéěèīíǐìōóǒòūúǔù", max_size=20))
def test_stripping_marks_gives_back_the_word(word):
    """Test highlighting only adds markers, never changes the text."""
    result = highlight_word(word, "a", MARK)
    assert re.sub(r"[\[\]]", "", result) == word
