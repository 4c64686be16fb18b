"""
Tests for voice discovery and `say` argument building.
"""

import pytest

from pinyin_cards.speech import SaySpeech, Voice, build_say_args, parse_say_voices, pick_mandarin_voice

SAY_LISTING = """\
Alex                en_US    # Most people recognize me by my voice.
Eddy (Chinese (China mainland)) zh_CN    # 你好！我叫Eddy。
Meijia              zh_TW    # 你好，我叫美佳。
Sinji               zh_HK    # 您好！我叫善怡。
Tingting            zh_CN    # 你好！我叫婷婷。
this line is not a voice
"""


def test_parse_say_voices():
    voices = parse_say_voices(SAY_LISTING)
    assert [v.name for v in voices] == [
        "Alex", "Eddy (Chinese (China mainland))", "Meijia", "Sinji", "Tingting"]
    assert voices[2] == Voice("Meijia", "zh_TW", "你好，我叫美佳。")


def test_parse_empty_listing():
    assert parse_say_voices("") == []


def test_prefers_mainland_voice():
    voices = parse_say_voices(SAY_LISTING)
    assert pick_mandarin_voice(voices).name == "Eddy (Chinese (China mainland))"


def test_taiwan_before_cantonese():
    voices = [Voice("Sinji", "zh_HK"), Voice("Meijia", "zh_TW")]
    assert pick_mandarin_voice(voices).name == "Meijia"


def test_cantonese_as_last_resort():
    voices = [Voice("Alex", "en_US"), Voice("Sinji", "zh_HK")]
    assert pick_mandarin_voice(voices).name == "Sinji"


def test_no_chinese_voice_returns_none():
    assert pick_mandarin_voice([Voice("Alex", "en_US")]) is None
    assert pick_mandarin_voice([]) is None


def test_preferred_voice_wins_case_insensitive():
    voices = parse_say_voices(SAY_LISTING)
    assert pick_mandarin_voice(voices, preferred="meijia").name == "Meijia"


def test_missing_preferred_voice_falls_back():
    voices = parse_say_voices(SAY_LISTING)
    assert pick_mandarin_voice(voices, preferred="Nobody").lang == "zh_CN"


def test_hyphenated_locale_is_normalized():
    voices = parse_say_voices("Lili  zh-CN  # hi")
    assert voices == [Voice("Lili", "zh_CN", "hi")]


@pytest.mark.parametrize("voice, rate, expected", [
    (None, None, ["--", "玻"]),
    ("Tingting", None, ["-v", "Tingting", "--", "玻"]),
    ("Tingting", 60, ["-v", "Tingting", "-r", "60", "--", "玻"]),
    (None, 0, ["--", "玻"]),
])
def test_build_say_args(voice, rate, expected):
    assert build_say_args("玻", voice, rate) == expected


def test_missing_backend_is_silent(tmp_path, caplog):
    speech = SaySpeech(say_path=str(tmp_path / "no-say"))
    assert not speech.available()
    assert speech.voices() == []
    speech.speak("玻")
    speech.speak("坡")
    assert not speech.is_speaking()
    speech.cancel()
    assert sum("pronunciation is disabled" in r.message for r in caplog.records) == 1
