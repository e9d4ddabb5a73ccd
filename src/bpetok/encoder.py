"""
Byte pair encoder applying a pre-trained subword vocabulary to raw text.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .constants import UNKNOWN_TOKEN, WORD_BREAK_CHAR
from .decompose import Decomposer, DecomposerName, get_decomposer
from .normalize import Normalization, NormalizationName
from .pretrained import DefaultVocab, DefaultVocabName, load_default
from .stream import SentenceCursor, SentenceStream, TokenStream
from .types import Token
from .vocab import Vocabulary

log = logging.getLogger(__name__)


class BytePairEncoder:
    """
    Tokenizer that splits text into sentences, words and vocabulary subwords.

    Text is segmented into sentences and words with Unicode (UAX #29) rules.
    Each word is normalized, prefixed with the word break character ``▁`` and
    decomposed into subwords of the vocabulary; each sentence is wrapped in
    ``<s>`` and ``</s>``. Text the vocabulary does not cover becomes ``<unk>``
    (or whatever ``unk_token`` is set to), so tokenization never fails.

    The vocabulary is read-only: one encoder can be used from several threads.

    .. code-block:: python

        encoder = BytePairEncoder.from_str("▁hello\\t1\\n▁world\\t2")
        encoder.tokenize("Hello, world!")
        # ['<s>', '▁hello', '▁world', '</s>']
    """

    def __init__(
        self,
        vocab: Vocabulary,
        *,
        decomposer: DecomposerName = "greedy",
        normalization: "NormalizationName | Normalization" = Normalization.LOWER,
        unk_token: str | None = UNKNOWN_TOKEN,
        collapse_unknown: bool = False,
    ) -> None:
        """
        Create an encoder over an existing vocabulary.

        :param vocab: Subword vocabulary.
        :param decomposer: Word decomposition strategy, "greedy" or "best-match".
        :param normalization: Normalization applied to each word before lookup.
        :param unk_token: Token for uncovered characters; ``None`` emits the
                          characters themselves.
        :param collapse_unknown: One fallback token per run of uncovered characters.
        :raises StrategyError: If decomposer or normalization names are unknown.
        """
        self.vocab = vocab
        self.decomposer: Decomposer = get_decomposer(
            decomposer,
            vocab,
            normalization=normalization,
            unk_token=unk_token,
            collapse_unknown=collapse_unknown,
        )

    # Construction
    # ===================================================================================

    @classmethod
    def from_str(
        cls, text: str, *, strict: bool = False, signed_scores: bool = False, **options
    ) -> "BytePairEncoder":
        """
        Create an encoder from ``<subword>\\t<rank>`` lines.

        ``strict`` and ``signed_scores`` are passed to :meth:`Vocabulary.from_str`;
        the remaining options configure the encoder.

        :raises EmptyVocabError: If ``text`` holds no records.
        :raises MalformedRecordError: If a line is malformed.
        :raises DuplicateEntryError: If ``strict`` and a subword repeats.
        """
        vocab = Vocabulary.from_str(text, strict=strict, signed_scores=signed_scores)
        return cls(vocab, **options)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        strict: bool = False,
        signed_scores: bool = False,
        **options,
    ) -> "BytePairEncoder":
        """
        Create an encoder from a file of ``<subword>\\t<rank>`` lines.

        .. code-block:: python

            # BPEmb files store scores (<= 0) instead of ranks
            encoder = BytePairEncoder.from_file("en.wiki.bpe.vs10000.vocab", signed_scores=True)

        :raises VocabIoError: If the file cannot be read.
        :raises EmptyVocabError: If the file holds no records.
        :raises MalformedRecordError: If a line is malformed.
        :raises DuplicateEntryError: If ``strict`` and a subword repeats.
        """
        vocab = Vocabulary.from_file(path, strict=strict, signed_scores=signed_scores)
        return cls(vocab, **options)

    @classmethod
    def from_pretrained(
        cls, name: "DefaultVocabName | DefaultVocab" = "small", **options
    ) -> "BytePairEncoder":
        """
        Create an encoder over a shared default multilingual vocabulary.

        :param name: "small" (100k subwords), "medium" (320k) or "large" (1M).
        :raises VocabIoError: If the vocabulary file is not available.
        """
        return cls(load_default(name), **options)

    @classmethod
    def default_small(cls) -> "BytePairEncoder":
        """Encoder over the 100,000 subword default vocabulary."""
        return cls.from_pretrained(DefaultVocab.SMALL)

    @classmethod
    def default_medium(cls) -> "BytePairEncoder":
        """Encoder over the 320,000 subword default vocabulary."""
        return cls.from_pretrained(DefaultVocab.MEDIUM)

    @classmethod
    def default_large(cls) -> "BytePairEncoder":
        """Encoder over the 1,000,000 subword default vocabulary."""
        return cls.from_pretrained(DefaultVocab.LARGE)

    # Tokenization
    # ===================================================================================

    def tokenize_word(self, word: str) -> list[Token]:
        """Mark ``word`` with the word break character and split it into subwords."""
        return self.decomposer.decompose(WORD_BREAK_CHAR + word)

    def tokenize_iter(self, text: str) -> TokenStream:
        """
        Lazily tokenize ``text`` into a flat token stream.

        Produces the same tokens as :meth:`tokenize`, computing them only as
        they are pulled. The stream is single-pass.
        """
        return TokenStream(self, SentenceCursor(text))

    def tokenize_sentences_iter(self, text: str) -> SentenceStream:
        """
        Lazily tokenize ``text`` into one token stream per sentence.

        .. code-block:: python

            for sentence in encoder.tokenize_sentences_iter(text):
                tokens = list(sentence)
        """
        return SentenceStream(self, SentenceCursor(text))

    def tokenize(self, text: str) -> list[Token]:
        """
        Tokenize ``text`` into a flat list of tokens.

        Empty text, and text without any word, gives an empty list.
        """
        return list(self.tokenize_iter(text))

    def tokenize_sentences(self, text: str) -> list[list[Token]]:
        """Tokenize ``text`` into token lists, one per sentence."""
        return [list(sentence) for sentence in self.tokenize_sentences_iter(text)]

    def tokenize_batch(
        self, texts: list[str], num_workers: int | None = None
    ) -> list[list[Token]]:
        """
        Tokenize many texts, in input order.

        :param texts: Text inputs to tokenize.
        :param num_workers: Worker thread count; defaults to the CPU count.
                            ``1`` (or ``0``) tokenizes serially.
        """
        if not texts:
            return []

        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)  # "0" interpreted as 1 worker

        if workers == 1 or len(texts) == 1:
            return [self.tokenize(text) for text in texts]

        log.debug(f"tokenizing {len(texts)} texts with {workers} workers")
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self.tokenize, texts))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(vocab={self.vocab!r}, "
            f"decomposer={self.decomposer.__class__.__name__})"
        )


__all__ = ["BytePairEncoder"]
