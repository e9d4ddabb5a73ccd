"""
Unicode sentence and word segmentation (UAX #29).

Boundaries come from ``uniseg``; this module only turns its segments into
offset-carrying spans and drops word segments that hold no letters or digits
(whitespace, punctuation, symbols).
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final

import regex as re
from uniseg.sentencebreak import sentences
from uniseg.wordbreak import words

# a word needs at least one alphabetic or numeric character
_WORDLIKE_PAT: Final = re.compile(r"[\p{Alphabetic}\p{N}]")


@dataclass(frozen=True, slots=True)
class Span:
    """A contiguous slice of a parent string with its code point offsets."""

    text: str
    start: int
    end: int


def _spans(segments: Iterator[str]) -> Iterator[Span]:
    """Attach running offsets to consecutive segments."""
    offset = 0
    for segment in segments:
        end = offset + len(segment)
        yield Span(segment, offset, end)
        offset = end


def segment_sentences(text: str) -> Iterator[Span]:
    """Yield the sentences of ``text`` in order; together they cover the whole input."""
    if not text:
        return
    yield from _spans(sentences(text))


def segment_words(sentence: str) -> Iterator[Span]:
    """Yield the words of ``sentence`` in order, skipping non-word segments."""
    if not sentence:
        return
    for span in _spans(words(sentence)):
        if _WORDLIKE_PAT.search(span.text):
            yield span


__all__ = ["Span", "segment_sentences", "segment_words"]
