"""Pinyin flashcards for young learners."""

__version__ = "0.1.0"
