"""Data tables driving the normalization and romaji heuristics.

The tables are plain mappings and tuples so they can be inspected, tested
and replaced without touching the algorithms that consume them.
"""

from typing import Dict, Tuple

# Long vowel mark (U+30FC). NFKC folds the half-width form into this one.
LONG_VOWEL_MARK = "ー"

# Known words whose long vowel is conventionally spelled with the vowel of
# the preceding mora. Keys are hiragana (the pipeline runs this step after
# katakana conversion). Longer keys are applied first.
LONG_VOWEL_EXCEPTIONS: Dict[str, str] = {
    "けーき": "けえき",
    "げーむ": "げえむ",
    "せーる": "せえる",
    "めーる": "めえる",
    "ぺーじ": "ぺえじ",
    "でーた": "でえた",
    "てーぶる": "てえぶる",
    "れーす": "れえす",
    "べーす": "べえす",
    "ねーむ": "ねえむ",
    "こーひー": "こおひい",
    "こーど": "こおど",
    "こーす": "こおす",
    "ほーむ": "ほおむ",
    "ろーま": "ろおま",
    "のーと": "のおと",
    "ぼーる": "ぼおる",
    "ぽーと": "ぽおと",
    "もーど": "もおど",
    "ろーど": "ろおど",
    "そーす": "そおす",
}

# Kana grouped by the vowel they end in.
KANA_ROWS: Dict[str, str] = {
    "a": "あかさたなはまやらわがざだばぱぁゃゎゕ",
    "i": "いきしちにひみりゐぎじぢびぴぃ",
    "u": "うくすつぬふむゆるぐずづぶぷぅゅゔ",
    "e": "えけせてねへめれゑげぜでべぺぇゖ",
    "o": "おこそとのほもよろをごぞどぼぽぉょ",
}

# Vowel inserted for a long vowel mark following a kana of the given row.
# e-row and o-row lengthen with い and う, as in せんせい and とうきょう.
ROW_VOWELS: Dict[str, str] = {
    "a": "あ",
    "i": "い",
    "u": "う",
    "e": "い",
    "o": "う",
}

# Iteration marks. Voiced marks repeat the preceding kana with a dakuten.
ITERATION_MARKS = "々ゝヽ"
VOICED_ITERATION_MARKS = "ゞヾ"
COMBINING_DAKUTEN = "゙"

# Standard katakana block mapped onto hiragana (ァ..ヶ -> ぁ..ゖ).
KATAKANA_START = 0x30A1
KATAKANA_END = 0x30F6
KATAKANA_HIRAGANA_OFFSET = 0x60

# Patterns that suggest a query is romaji the primitive failed to convert.
ROMAJI_HINT_PATTERNS: Tuple[str, ...] = (
    r"[aiueo]{2}",
    r"[kgsztdnhbpmyrwfjvc][aiueo]",
    r"([bcdfghjklmpqrstvwxz])\1",
    r"(shi|chi|tsu|sha|shu|sho|cha|chu|cho|ja|ju|jo)",
    r"(kya|kyu|kyo|gya|gyu|gyo|nya|nyu|nyo|hya|hyu|hyo|mya|myu|myo|rya|ryu|ryo|pya|pyu|pyo|bya|byu|byo)",
)

# Word-final spellings that usually drop a long vowel in casual romaji.
ROMAJI_WORD_ENDINGS: Tuple[Tuple[str, str], ...] = (
    (r"([kgsztdnhbpmr]y)o$", r"\1ou"),
    (r"([kgsztdnhbpmr]y)u$", r"\1uu"),
    (r"(sh|ch|j)o$", r"\1ou"),
    (r"(sh|ch|j)u$", r"\1uu"),
)

# Kana output at or below this fraction of the input length is considered
# suspiciously short for a romaji query.
ROMAJI_SHORT_OUTPUT_RATIO = 0.6
