"""Word to subword decomposition strategies."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Final, Literal, override

from .constants import UNKNOWN_TOKEN
from .errors import StrategyError
from .normalize import Normalization, NormalizationName
from .types import Token
from .vocab import Vocabulary

log = logging.getLogger(__name__)

# a segment is a piece of the word and whether the vocabulary covers it
type Segment = tuple[str, bool]

# =========================================================================================

# decomposition strategies


class Decomposer(ABC):
    """
    Base strategy for splitting one word into vocabulary subwords.

    Subclasses only decide where the word is cut. This class normalizes the
    word first and renders pieces the vocabulary does not cover as fallback
    tokens, so every strategy covers the whole word and never raises.
    """

    def __init__(
        self,
        vocab: Vocabulary,
        *,
        normalization: "NormalizationName | Normalization" = Normalization.LOWER,
        unk_token: str | None = UNKNOWN_TOKEN,
        collapse_unknown: bool = False,
    ) -> None:
        """
        Configure the strategy.

        :param vocab: Vocabulary consulted for exact subword matches.
        :param normalization: Normalization applied to the word before lookup.
        :param unk_token: Token emitted for uncovered text. ``None`` emits the
                          uncovered characters themselves.
        :param collapse_unknown: Emit one fallback token per run of adjacent
                                 uncovered characters instead of one per character.
        """
        super().__init__()
        self.vocab = vocab
        self.normalization = Normalization.get(normalization)
        self.unk_token = unk_token
        self.collapse_unknown = collapse_unknown

    def decompose(self, word: str) -> list[Token]:
        """Return the subword tokens of ``word``, left to right."""
        text = self.normalization.apply(word)

        tokens: list[Token] = []
        # uncovered characters waiting for a fallback token
        pending: list[str] = []

        for piece, known in self._segment(text):
            if not known:
                if self.collapse_unknown:
                    pending.append(piece)
                else:
                    tokens.extend(self._fallback(c) for c in piece)
                continue
            if pending:
                tokens.append(self._fallback("".join(pending)))
                pending.clear()
            tokens.append(piece)

        if pending:
            tokens.append(self._fallback("".join(pending)))

        return tokens

    def _fallback(self, uncovered: str) -> Token:
        """Render uncovered text as a token."""
        if self.unk_token is None:
            return uncovered
        return self.unk_token

    @abstractmethod
    def _segment(self, text: str) -> Iterator[Segment]:
        """Yield consecutive pieces covering ``text`` exactly once."""


class GreedyDecomposer(Decomposer):
    """
    Longest-prefix-first decomposition, left to right.

    At each position the longest prefix of the remaining text found verbatim in
    the vocabulary is taken. When not even a single character matches, that
    character is marked uncovered and the scan moves on by one.
    """

    @override
    def _segment(self, text: str) -> Iterator[Segment]:
        n = len(text)
        max_len = self.vocab.max_token_len
        pos = 0

        while pos < n:
            # no subword is longer than max_len, so longer candidates cannot match
            for end in range(min(n, pos + max_len), pos, -1):
                candidate = text[pos:end]
                if candidate in self.vocab:
                    yield candidate, True
                    pos = end
                    break
            else:
                yield text[pos], False
                pos += 1


class BestMatchDecomposer(Decomposer):
    """
    Longest-match-anywhere decomposition.

    Finds the longest subword occurring anywhere in the text, preferring the
    lowest rank (then the rightmost position) among matches of equal length,
    and splits the text around it. The remainders on either side are handled
    the same way. Text containing no subword at all is one uncovered run.
    """

    @override
    def _segment(self, text: str) -> Iterator[Segment]:
        # work stack of (piece, resolved); popped left to right
        stack: list[Segment] = [(text, False)]

        while stack:
            piece, resolved = stack.pop()
            if resolved:
                yield piece, True
                continue
            if not piece:
                continue

            match = self._best_match(piece)
            if match is None:
                yield piece, False
                continue

            start, end = match
            # push right first so the left remainder is processed next
            stack.append((piece[end:], False))
            stack.append((piece[start:end], True))
            stack.append((piece[:start], False))

    def _best_match(self, text: str) -> tuple[int, int] | None:
        """Return ``(start, end)`` of the preferred longest subword in ``text``."""
        n = len(text)
        for length in range(min(n, self.vocab.max_token_len), 0, -1):
            best: tuple[int, int] | None = None
            for start in range(n - length + 1):
                rank = self.vocab.lookup(text[start : start + length])
                if rank is None:
                    continue
                # non-strict comparison keeps the rightmost of equal ranks
                if best is None or rank <= best[0]:
                    best = (rank, start)
            if best is not None:
                return best[1], best[1] + length
        return None


DecomposerName = Literal["greedy", "best-match"]

_DECOMPOSERS: Final[dict[str, type[Decomposer]]] = {
    "greedy": GreedyDecomposer,
    "best-match": BestMatchDecomposer,
}


def list_decomposers() -> list[str]:
    """Return available decomposition strategy names."""
    return list(_DECOMPOSERS.keys())


def get_decomposer(
    name: DecomposerName,
    vocab: Vocabulary,
    *,
    normalization: "NormalizationName | Normalization" = Normalization.LOWER,
    unk_token: str | None = UNKNOWN_TOKEN,
    collapse_unknown: bool = False,
) -> Decomposer:
    """
    Create a decomposition strategy by name.

    :param name: Strategy identifier: "greedy" or "best-match".
    :param vocab: Vocabulary the strategy matches against.
    :raises StrategyError: If name is unknown.

    .. code-block:: python

        decomposer = get_decomposer("greedy", vocab)
        decomposer.decompose("▁hello")
    """
    if name not in _DECOMPOSERS:
        raise StrategyError(
            "unknown decomposer name",
            invalid_name=name,
            available=list_decomposers(),
        )

    log.debug(f"using {name} decomposer")
    return _DECOMPOSERS[name](
        vocab,
        normalization=normalization,
        unk_token=unk_token,
        collapse_unknown=collapse_unknown,
    )


__all__ = [
    "DecomposerName",
    "Decomposer",
    "GreedyDecomposer",
    "BestMatchDecomposer",
    "list_decomposers",
    "get_decomposer",
]
