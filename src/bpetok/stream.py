"""
Lazy, pull-based token streams.

Each stream is a small state machine over three cursors: a sentence cursor
over the input text, a word cursor over the current sentence and a queue of
subword tokens for the current word. Segmentation and decomposition happen
only when the next token is pulled, so a caller that stops early never pays
for the rest of the input. Streams are single-pass and cannot be restarted;
call the encoder again for a fresh one.
"""

from collections import deque
from collections.abc import Iterator
from enum import Enum, auto
from itertools import chain
from typing import TYPE_CHECKING

from .constants import SENTENCE_END_TOKEN, SENTENCE_START_TOKEN
from .segment import Span, segment_sentences, segment_words
from .types import Token

if TYPE_CHECKING:
    from .encoder import BytePairEncoder


class SentenceCursor(Iterator[Iterator[Span]]):
    """
    Walks the sentences of a text, yielding a word cursor for each one.

    Sentences without a single word (blank or punctuation-only) are skipped,
    so every yielded word cursor has at least one word.
    """

    def __init__(self, text: str) -> None:
        self._sentences: Iterator[Span] = segment_sentences(text)

    def __iter__(self) -> "SentenceCursor":
        return self

    def __next__(self) -> Iterator[Span]:
        for sentence in self._sentences:
            words = segment_words(sentence.text)
            first = next(words, None)
            if first is not None:
                return chain((first,), words)
        raise StopIteration


class _Phase(Enum):
    NEXT_SENTENCE = auto()
    WORDS = auto()
    DONE = auto()


class TokenStream(Iterator[Token]):
    """Flat token stream: ``<s>``, the sentence's subwords, ``</s>``, per sentence."""

    def __init__(
        self, encoder: "BytePairEncoder", cursor: Iterator[Iterator[Span]]
    ) -> None:
        self._encoder = encoder
        self._cursor = cursor
        self._words: Iterator[Span] | None = None
        self._pending: deque[Token] = deque()
        self._phase = _Phase.NEXT_SENTENCE

    def __iter__(self) -> "TokenStream":
        return self

    def __next__(self) -> Token:
        while not self._pending:
            match self._phase:
                case _Phase.NEXT_SENTENCE:
                    words = next(self._cursor, None)
                    if words is None:
                        self._phase = _Phase.DONE
                        continue
                    self._words = words
                    self._phase = _Phase.WORDS
                    return SENTENCE_START_TOKEN
                case _Phase.WORDS:
                    word = next(self._words, None)
                    if word is None:
                        self._words = None
                        self._phase = _Phase.NEXT_SENTENCE
                        return SENTENCE_END_TOKEN
                    self._pending.extend(self._encoder.tokenize_word(word.text))
                case _Phase.DONE:
                    raise StopIteration

        return self._pending.popleft()


class SentenceStream(Iterator[TokenStream]):
    """Stream of per-sentence token streams, each bounded by ``<s>`` and ``</s>``."""

    def __init__(
        self, encoder: "BytePairEncoder", cursor: Iterator[Iterator[Span]]
    ) -> None:
        self._encoder = encoder
        self._cursor = cursor

    def __iter__(self) -> "SentenceStream":
        return self

    def __next__(self) -> TokenStream:
        words = next(self._cursor)
        return TokenStream(self._encoder, iter((words,)))


__all__ = ["SentenceCursor", "TokenStream", "SentenceStream"]
