"""
Immutable subword vocabulary built from ``<subword>\\t<rank>`` records.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Final

import regex as re

from ._decorators import measure_time
from .errors import (
    DuplicateEntryError,
    EmptyVocabError,
    MalformedRecordError,
    VocabIoError,
)
from .types import Rank, Record

log = logging.getLogger(__name__)

FIELD_SEP: Final[str] = "\t"

_RANK_PAT: Final = re.compile(r"[0-9]+")
_SCORE_PAT: Final = re.compile(r"-?[0-9]+")


def parse_records(text: str, *, signed_scores: bool = False) -> Iterator[Record]:
    """
    Decode vocabulary records from text, one ``<subword>\\t<rank>`` pair per line.

    Blank lines are skipped. Parsing stops at the first malformed line.

    :param text: Vocabulary content.
    :param signed_scores: Read BPEmb-style scores (``0``, ``-0``, ``-4`` ...) and
                          convert each score to the rank ``-score``.
    :raises MalformedRecordError: If a line does not have exactly two tab-separated
                                  fields or its rank is not a non-negative integer.
    """
    rank_pat = _SCORE_PAT if signed_scores else _RANK_PAT

    for line_no, line in enumerate(text.split("\n"), start=1):
        line = line.removesuffix("\r")
        if not line:
            continue

        fields = line.split(FIELD_SEP)
        if len(fields) != 2:
            raise MalformedRecordError(
                "record must have exactly two tab-separated fields",
                line_no=line_no,
                record=line,
            )

        subword, rank_str = fields
        if not subword:
            raise MalformedRecordError(
                "record has an empty subword", line_no=line_no, record=line
            )
        if rank_pat.fullmatch(rank_str) is None:
            raise MalformedRecordError(
                "rank is not a non-negative integer", line_no=line_no, record=line
            )

        rank = int(rank_str)
        if signed_scores:
            # scores are log-probabilities, most frequent closest to zero
            if rank > 0:
                raise MalformedRecordError(
                    "score must not be positive", line_no=line_no, record=line
                )
            rank = -rank

        yield subword, rank


class Vocabulary(Mapping[str, Rank]):
    """
    Read-only mapping from subword to rank (lower rank = more frequent).

    Instances never change after construction, so a single vocabulary can be
    shared between threads and encoders without locking.
    """

    __slots__ = ("_ranks", "_max_token_len")

    def __init__(self, ranks: Mapping[str, Rank]) -> None:
        """Wrap an already validated mapping; use the ``from_*`` constructors instead."""
        if not ranks:
            raise EmptyVocabError("vocabulary has no entries")
        self._ranks: Mapping[str, Rank] = MappingProxyType(dict(ranks))
        self._max_token_len: int = max(len(subword) for subword in self._ranks)

    @classmethod
    def from_records(cls, records: Iterable[Record], *, strict: bool = False) -> "Vocabulary":
        """
        Build a vocabulary from ``(subword, rank)`` records.

        A repeated subword replaces the earlier rank (last one wins) unless
        ``strict`` is set, in which case the load fails.

        :param records: Iterable of ``(subword, rank)`` pairs.
        :param strict: Reject duplicate subwords instead of overwriting them.
        :raises EmptyVocabError: If ``records`` is empty.
        :raises MalformedRecordError: If a subword is empty or a rank is negative.
        :raises DuplicateEntryError: If ``strict`` and a subword repeats.
        """
        ranks: dict[str, Rank] = {}
        n_duplicates = 0

        for idx, (subword, rank) in enumerate(records, start=1):
            if not isinstance(subword, str) or not subword:
                raise MalformedRecordError(
                    "subword must be a non-empty string", line_no=idx, record=repr(subword)
                )
            # bool is an int subclass but never a valid rank
            if isinstance(rank, bool) or not isinstance(rank, int) or rank < 0:
                raise MalformedRecordError(
                    "rank must be a non-negative integer", line_no=idx, record=subword
                )

            if subword in ranks:
                if strict:
                    raise DuplicateEntryError(
                        "duplicate subword", line_no=idx, record=subword
                    )
                log.debug(f"subword {subword!r} redefined: rank {ranks[subword]} -> {rank}")
                n_duplicates += 1

            ranks[subword] = rank

        if n_duplicates:
            log.warning(f"{n_duplicates} duplicate subwords overwritten (last one wins)")

        vocab = cls(ranks)
        log.debug(f"built vocabulary with {len(vocab)} subwords")
        return vocab

    @classmethod
    def from_str(
        cls, text: str, *, strict: bool = False, signed_scores: bool = False
    ) -> "Vocabulary":
        """
        Build a vocabulary from tab-separated text.

        .. code-block:: python

            vocab = Vocabulary.from_str("▁hello\\t1\\n▁world\\t2")
            vocab.lookup("▁hello")  # 1
        """
        return cls.from_records(
            parse_records(text, signed_scores=signed_scores), strict=strict
        )

    @classmethod
    @measure_time
    def from_file(
        cls,
        path: str | Path,
        *,
        strict: bool = False,
        signed_scores: bool = False,
    ) -> "Vocabulary":
        """
        Build a vocabulary from a UTF-8 file of tab-separated records.

        :raises VocabIoError: If the file cannot be read or is not valid UTF-8.
        """
        path = Path(path)
        log.info(f"loading vocabulary from {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise VocabIoError("vocabulary file is not valid UTF-8", path=str(path)) from e
        except OSError as e:
            raise VocabIoError("could not read vocabulary file", path=str(path)) from e

        try:
            return cls.from_str(text, strict=strict, signed_scores=signed_scores)
        except EmptyVocabError as e:
            raise EmptyVocabError("vocabulary file has no records", source=str(path)) from e

    def lookup(self, candidate: str) -> Rank | None:
        """Return the rank of ``candidate`` on an exact match, else ``None``."""
        return self._ranks.get(candidate)

    @property
    def max_token_len(self) -> int:
        """Length in code points of the longest subword."""
        return self._max_token_len

    def __getitem__(self, subword: str) -> Rank:
        return self._ranks[subword]

    def __contains__(self, subword: object) -> bool:
        return subword in self._ranks

    def __iter__(self) -> Iterator[str]:
        return iter(self._ranks)

    def __len__(self) -> int:
        return len(self._ranks)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={len(self)}, max_token_len={self._max_token_len})"


__all__ = ["Vocabulary", "parse_records", "FIELD_SEP"]
