"""Word segmentation and Optimal Recognition Point (ORP) alignment.

WHY: The reader shows one word at a time with a single highlighted
character fixed on the screen's centre line. Each word must therefore be
split into the part left of the pivot, the pivot character itself, and
the part to its right, so the display can right-align the prefix and
left-align the suffix around a fixed column.

HOW: segment() trims the text, splits it on whitespace runs, and turns
every token into an immutable WordRecord. The pivot position depends only
on the token's length, via fixed breakpoints (see pivot_index()).

RULES:
- segment() is pure and total: any string in, a list out, never raises
- Empty or whitespace-only text yields an empty list
- prefix + pivot + suffix == text for every record except EMPTY_WORD
- pivot is always exactly one character (empty only for EMPTY_WORD)
- Punctuation stays attached to its token ("world." is one record)
"""

from __future__ import annotations

from dataclasses import dataclass

# (max token length, pivot index) — checked in order; longer tokens use
# _LONG_WORD_PIVOT.
_PIVOT_BREAKPOINTS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (5, 1),
    (9, 2),
    (13, 3),
)
_LONG_WORD_PIVOT = 4


@dataclass(frozen=True)
class WordRecord:
    """One token ready for display, split around its pivot character.

    WHY: The display needs three separately styled pieces per word. Doing
    the split once at load time keeps the playback loop free of string
    work.

    RULES:
    - text: the original token, unmodified
    - prefix: characters strictly before the pivot (may be empty)
    - pivot: the single ORP character
    - suffix: characters after the pivot (may be empty)
    """

    text: str
    prefix: str
    pivot: str
    suffix: str

    @property
    def is_empty(self) -> bool:
        return not self.text


EMPTY_WORD = WordRecord(text="", prefix="", pivot="", suffix="")
"""Sentinel record used before any text is loaded."""


def pivot_index(length: int) -> int:
    """Return the ORP index for a token of the given length.

    RULES:
    - 1 → 0, 2–5 → 1, 6–9 → 2, 10–13 → 3, 14+ → 4
    - Lengths below 1 map to 0
    """
    for max_length, index in _PIVOT_BREAKPOINTS:
        if length <= max_length:
            return index
    return _LONG_WORD_PIVOT


def make_word(token: str) -> WordRecord:
    """Build the pivot-aligned record for a single token.

    An empty token returns EMPTY_WORD rather than a record with no pivot.
    """
    if not token:
        return EMPTY_WORD
    index = pivot_index(len(token))
    return WordRecord(
        text=token,
        prefix=token[:index],
        pivot=token[index],
        suffix=token[index + 1:],
    )


def segment(text: str) -> list[WordRecord]:
    """Split raw text into an ordered list of pivot-aligned word records.

    WHY: Every text source (typed text, extracted PDF, AI output) enters
    the reader through this one function, so they all behave alike.

    HOW: str.split() with no separator trims the ends and splits on runs
    of any whitespace, which is exactly the tokenization the reader needs.

    Args:
        text: Raw text in any shape, including empty.

    Returns:
        One WordRecord per whitespace-separated token, in reading order.
    """
    return [make_word(token) for token in text.split()]
