"""bpetok: subword tokenization with pre-trained BPE vocabularies."""

from .constants import (
    SENTENCE_END_TOKEN,
    SENTENCE_START_TOKEN,
    UNKNOWN_TOKEN,
    WORD_BREAK_CHAR,
)
from .decompose import (
    BestMatchDecomposer,
    Decomposer,
    GreedyDecomposer,
    get_decomposer,
    list_decomposers,
)
from .encoder import BytePairEncoder
from .normalize import Normalization, list_normalizations
from .pretrained import DefaultVocab, list_defaults, load_default
from .segment import Span, segment_sentences, segment_words
from .stream import SentenceStream, TokenStream
from .vocab import Vocabulary, parse_records

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bpetok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "BytePairEncoder",
    "Vocabulary",
    "parse_records",
    "Decomposer",
    "GreedyDecomposer",
    "BestMatchDecomposer",
    "Normalization",
    "DefaultVocab",
    "Span",
    "TokenStream",
    "SentenceStream",
    "get_decomposer",
    "load_default",
    "segment_sentences",
    "segment_words",
    "list_decomposers",
    "list_normalizations",
    "list_defaults",
    "WORD_BREAK_CHAR",
    "SENTENCE_START_TOKEN",
    "SENTENCE_END_TOKEN",
    "UNKNOWN_TOKEN",
]
