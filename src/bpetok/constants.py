"""Marker tokens shared by the encoder and decomposers."""

from typing import Final

# prefixed to every word before decomposition
WORD_BREAK_CHAR: Final[str] = "▁"

SENTENCE_START_TOKEN: Final[str] = "<s>"
SENTENCE_END_TOKEN: Final[str] = "</s>"

# emitted for characters no vocabulary entry covers
UNKNOWN_TOKEN: Final[str] = "<unk>"
