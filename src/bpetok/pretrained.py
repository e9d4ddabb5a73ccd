"""
Default multilingual vocabularies.

The defaults are the BPEmb multilingual Wikipedia vocabularies
(https://github.com/bheinzerling/bpemb, MIT licensed) in three sizes. The
files are looked up in the directory named by ``BPETOK_VOCAB_DIR`` or, when
it is unset, in the ``vocabs/`` directory of the installed package; either
the plain ``.vocab`` file or a gzip-compressed ``.vocab.gz`` copy is accepted.

Each default is loaded at most once per process and then shared read-only.
"""

import gzip
import logging
import os
import threading
from enum import Enum
from importlib.resources import files
from pathlib import Path
from typing import Final, Literal

from ._decorators import measure_time
from .errors import EmptyVocabError, StrategyError, VocabIoError
from .vocab import Vocabulary

log = logging.getLogger(__name__)

VOCAB_DIR_ENV: Final[str] = "BPETOK_VOCAB_DIR"

DefaultVocabName = Literal["small", "medium", "large"]


class DefaultVocab(str, Enum):
    """Bundled vocabulary sizes and their BPEmb file names."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def filename(self) -> str:
        """BPEmb vocabulary file name for this size."""
        return _FILENAMES[self]

    @classmethod
    def get(cls, name: "str | DefaultVocab") -> "DefaultVocab":
        """Get default vocabulary by name (case-insensitive)."""
        if isinstance(name, DefaultVocab):
            return name
        if isinstance(name, str) and name.upper() in cls.__members__:
            return cls[name.upper()]
        raise StrategyError(
            "unknown default vocabulary",
            invalid_name=name,
            available=list_defaults(),
        )


_FILENAMES: Final[dict[DefaultVocab, str]] = {
    DefaultVocab.SMALL: "multi.wiki.bpe.vs100000.vocab",
    DefaultVocab.MEDIUM: "multi.wiki.bpe.vs320000.vocab",
    DefaultVocab.LARGE: "multi.wiki.bpe.vs1000000.vocab",
}

_cache: dict[DefaultVocab, Vocabulary] = {}
_lock = threading.Lock()


def list_defaults() -> list[str]:
    """Return available default vocabulary names."""
    return [size.value for size in DefaultVocab]


def _vocab_dir() -> Path:
    """Directory holding the default vocabulary files."""
    override = os.environ.get(VOCAB_DIR_ENV, "").strip()
    if override:
        return Path(override)
    return Path(str(files("bpetok"))) / "vocabs"


def _read_asset(size: DefaultVocab) -> str:
    """Read the text of a default vocabulary file, plain or gzipped."""
    base = _vocab_dir() / size.filename
    gz_path = base.with_name(base.name + ".gz")

    try:
        if base.is_file():
            return base.read_text(encoding="utf-8")
        if gz_path.is_file():
            with gzip.open(gz_path, "rt", encoding="utf-8") as f:
                return f.read()
    except UnicodeDecodeError as e:
        raise VocabIoError("default vocabulary is not valid UTF-8", path=str(base)) from e
    except OSError as e:
        raise VocabIoError("could not read default vocabulary", path=str(base)) from e

    raise VocabIoError(
        f"default vocabulary '{size.value}' not found; "
        f"download {size.filename} from BPEmb and set {VOCAB_DIR_ENV}",
        path=str(base),
    )


@measure_time
def _build(size: DefaultVocab) -> Vocabulary:
    """Parse a default vocabulary file into a vocabulary."""
    log.info(f"loading default vocabulary '{size.value}' ({size.filename})")
    text = _read_asset(size)
    try:
        # BPEmb stores log-probability scores (<= 0) rather than ranks
        return Vocabulary.from_str(text, signed_scores=True)
    except EmptyVocabError as e:
        raise EmptyVocabError(
            "default vocabulary has no records", source=size.filename
        ) from e


def load_default(name: "DefaultVocabName | DefaultVocab") -> Vocabulary:
    """
    Return the shared default vocabulary of the given size.

    The first call per size reads and parses the file; later calls return the
    same instance.

    :param name: "small" (100k subwords), "medium" (320k) or "large" (1M).
    :raises StrategyError: If name is unknown.
    :raises VocabIoError: If the vocabulary file is missing or unreadable.
    """
    size = DefaultVocab.get(name)

    vocab = _cache.get(size)
    if vocab is not None:
        return vocab

    with _lock:
        # another thread may have finished the load while we waited
        vocab = _cache.get(size)
        if vocab is None:
            vocab = _build(size)
            _cache[size] = vocab
    return vocab


def clear_cache() -> None:
    """Forget loaded defaults so the next load reads the files again."""
    with _lock:
        _cache.clear()


__all__ = [
    "DefaultVocab",
    "DefaultVocabName",
    "VOCAB_DIR_ENV",
    "list_defaults",
    "load_default",
    "clear_cache",
]
