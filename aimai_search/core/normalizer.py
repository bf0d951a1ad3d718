"""Text normalization for consistent Japanese-aware comparison."""

import unicodedata
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .tables import (
    COMBINING_DAKUTEN,
    ITERATION_MARKS,
    KANA_ROWS,
    KATAKANA_END,
    KATAKANA_HIRAGANA_OFFSET,
    KATAKANA_START,
    LONG_VOWEL_EXCEPTIONS,
    LONG_VOWEL_MARK,
    ROW_VOWELS,
    VOICED_ITERATION_MARKS,
)


@dataclass(frozen=True)
class NormalizationOptions:
    """Switches for the optional normalization steps."""

    use_kana_normalization: bool = True
    normalize_long_vowel: bool = True
    expand_iteration_mark: bool = True


DEFAULT_OPTIONS = NormalizationOptions()

_KATAKANA_TABLE = {
    code: code - KATAKANA_HIRAGANA_OFFSET
    for code in range(KATAKANA_START, KATAKANA_END + 1)
}


def katakana_to_hiragana(text: str) -> str:
    """Map standard katakana syllables onto hiragana; everything else passes through."""
    return text.translate(_KATAKANA_TABLE)


class TextNormalizer:
    """Turns raw text into the canonical form used for comparison."""

    def __init__(
        self,
        long_vowel_exceptions: Optional[Mapping[str, str]] = None,
        kana_rows: Optional[Mapping[str, str]] = None,
        row_vowels: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize the normalizer.

        Args:
            long_vowel_exceptions: Word-level long vowel expansions (hiragana keys)
            kana_rows: Kana grouped by vowel row
            row_vowels: Vowel inserted after a kana of each row
        """
        exceptions = LONG_VOWEL_EXCEPTIONS if long_vowel_exceptions is None else long_vowel_exceptions
        rows = KANA_ROWS if kana_rows is None else kana_rows
        vowels = ROW_VOWELS if row_vowels is None else row_vowels

        # Longest words first so that compounds win over their prefixes
        self.long_vowel_exceptions = sorted(
            exceptions.items(), key=lambda item: len(item[0]), reverse=True
        )
        self.kana_vowels: Dict[str, str] = {
            kana: vowels[row]
            for row, kanas in rows.items()
            if row in vowels
            for kana in kanas
        }

    def normalize(self, text: str, options: NormalizationOptions = DEFAULT_OPTIONS) -> str:
        """
        Normalize text for consistent comparison.

        Steps run in a fixed order: NFKC folding, lower-casing, katakana to
        hiragana, long vowel resolution and iteration mark expansion. The
        last two are optional.

        Args:
            text: Input text to normalize
            options: Which optional steps to run

        Returns:
            Normalized text
        """
        if not text:
            return ""

        if not options.use_kana_normalization:
            return text.lower()

        normalized = unicodedata.normalize("NFKC", text)
        normalized = normalized.lower()
        normalized = katakana_to_hiragana(normalized)

        if options.normalize_long_vowel:
            normalized = self.resolve_long_vowels(normalized)

        if options.expand_iteration_mark:
            normalized = self.expand_iteration_marks(normalized)

        return normalized

    def resolve_long_vowels(self, text: str) -> str:
        """
        Replace long vowel marks with an explicit vowel.

        Known words from the exception table are expanded first. Remaining
        marks take the vowel of the preceding kana's row; marks that cannot
        be resolved are dropped.
        """
        if LONG_VOWEL_MARK not in text:
            return text

        for word, expansion in self.long_vowel_exceptions:
            if word in text:
                text = text.replace(word, expansion)

        resolved = []
        for char in text:
            if char != LONG_VOWEL_MARK:
                resolved.append(char)
                continue
            vowel = self.kana_vowels.get(resolved[-1]) if resolved else None
            if vowel:
                resolved.append(vowel)

        return "".join(resolved)

    @staticmethod
    def expand_iteration_marks(text: str) -> str:
        """Replace iteration marks with a copy of the preceding character."""
        if not any(mark in text for mark in ITERATION_MARKS + VOICED_ITERATION_MARKS):
            return text

        expanded = []
        for char in text:
            if expanded and char in ITERATION_MARKS:
                expanded.append(expanded[-1])
            elif expanded and char in VOICED_ITERATION_MARKS:
                voiced = unicodedata.normalize("NFC", expanded[-1] + COMBINING_DAKUTEN)
                expanded.append(voiced if len(voiced) == 1 else expanded[-1])
            else:
                expanded.append(char)

        return "".join(expanded)


_default_normalizer = TextNormalizer()


def normalize(text: str, options: NormalizationOptions = DEFAULT_OPTIONS) -> str:
    """Normalize text with the default tables."""
    return _default_normalizer.normalize(text, options)
