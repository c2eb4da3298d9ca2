"""
Keyword-frequency language detection for incoming user messages.
"""
import re

from models.chat_models import LanguageTag
from utils.constants import ENGLISH_MARKERS, SPANISH_MARKERS

_WORD_PATTERN = re.compile(r"[^\W\d_]+")


class LanguageDetector:
    """
    Classifies text as English or Spanish by counting marker words.
    Spanish wins ties, including empty input.
    """

    def __init__(self, english_markers=ENGLISH_MARKERS, spanish_markers=SPANISH_MARKERS):
        self.english_markers = frozenset(word.lower() for word in english_markers)
        self.spanish_markers = frozenset(word.lower() for word in spanish_markers)

    def count_markers(self, text: str) -> tuple[int, int]:
        """Return (english_hits, spanish_hits) over whole words in text."""
        words = _WORD_PATTERN.findall((text or "").lower())
        english = sum(1 for word in words if word in self.english_markers)
        spanish = sum(1 for word in words if word in self.spanish_markers)
        return english, spanish

    def detect(self, text: str) -> LanguageTag:
        english, spanish = self.count_markers(text)
        if english > spanish:
            return LanguageTag.EN
        return LanguageTag.ES
