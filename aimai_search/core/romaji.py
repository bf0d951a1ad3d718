"""Best-effort conversion of romaji queries to hiragana."""

import re
import unicodedata
from typing import Callable, Optional, Sequence, Tuple

import jaconv

from .tables import ROMAJI_HINT_PATTERNS, ROMAJI_SHORT_OUTPUT_RATIO, ROMAJI_WORD_ENDINGS


class RomajiTransliterator:
    """Converts Latin-script queries to kana before normalization."""

    def __init__(
        self,
        primitive: Optional[Callable[[str], str]] = None,
        hint_patterns: Sequence[str] = ROMAJI_HINT_PATTERNS,
        word_endings: Sequence[Tuple[str, str]] = ROMAJI_WORD_ENDINGS,
        short_output_ratio: float = ROMAJI_SHORT_OUTPUT_RATIO,
    ) -> None:
        """
        Initialize the transliterator.

        Args:
            primitive: Latin to kana converter (defaults to jaconv.alphabet2kana)
            hint_patterns: Regexes that suggest the input is romaji
            word_endings: (pattern, replacement) pairs for word-final long vowels
            short_output_ratio: Output/input length ratio considered suspiciously short
        """
        self.primitive = primitive or jaconv.alphabet2kana
        self.hint_regexes = [re.compile(pattern) for pattern in hint_patterns]
        self.word_endings = [(re.compile(pattern), repl) for pattern, repl in word_endings]
        self.short_output_ratio = short_output_ratio

        self.separator_regex = re.compile(r"-+")
        self.vowel_run_regex = re.compile(r"([aiueo])\1{2,}")

    def prepare(self, text: str) -> str:
        """Lower-case, drop readability hyphens and squash long vowel runs."""
        prepared = unicodedata.normalize("NFKC", text).lower()
        prepared = self.separator_regex.sub("", prepared)
        return self.vowel_run_regex.sub(r"\1\1", prepared)

    def looks_like_romaji(self, text: str) -> bool:
        return any(regex.search(text) for regex in self.hint_regexes)

    def to_kana(self, text: str) -> str:
        """
        Convert romaji text to hiragana.

        Text that is not romaji passes through the primitive unchanged. When
        the input looks like romaji and the converted output is suspiciously
        short, word-final long vowels are expanded and the longer candidate
        wins.

        Args:
            text: Query text, possibly in romaji

        Returns:
            Kana text (or the input, when nothing could be converted)
        """
        if not text:
            return ""

        prepared = self.prepare(text)
        converted = self.primitive(prepared)

        if not self.looks_like_romaji(prepared):
            return converted
        if len(converted) > len(prepared) * self.short_output_ratio:
            return converted

        expanded = self._expand_word_ending(prepared)
        if expanded == prepared:
            return converted

        candidate = self.primitive(expanded)
        return candidate if len(candidate) > len(converted) else converted

    def _expand_word_ending(self, text: str) -> str:
        for regex, replacement in self.word_endings:
            expanded, count = regex.subn(replacement, text)
            if count:
                return expanded
        return text


_default_transliterator = RomajiTransliterator()


def to_kana(text: str) -> str:
    """Convert romaji to hiragana with the default tables."""
    return _default_transliterator.to_kana(text)
