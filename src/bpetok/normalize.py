"""Word normalization applied before vocabulary lookup."""

import unicodedata
from enum import Enum
from typing import Literal

from .errors import StrategyError

NormalizationName = Literal["lower", "casefold", "nfkc"]


class Normalization(str, Enum):
    """
    Named normalization forms.

    ``LOWER`` matches vocabularies trained on lowercased text (BPEmb) and is the
    default. ``CASEFOLD`` also folds caseless-matching characters (``ß`` -> ``ss``).
    ``NFKC`` applies compatibility composition before lowercasing.
    """

    LOWER = "lower"
    CASEFOLD = "casefold"
    NFKC = "nfkc"

    @classmethod
    def get(cls, name: "str | Normalization") -> "Normalization":
        """Get normalization form by name (case-insensitive)."""
        if isinstance(name, Normalization):
            return name
        if isinstance(name, str) and name.upper() in cls.__members__:
            return cls[name.upper()]
        raise StrategyError(
            "unknown normalization",
            invalid_name=name,
            available=list_normalizations(),
        )

    def apply(self, text: str) -> str:
        """Return the normalized form of ``text``."""
        match self:
            case Normalization.LOWER:
                return text.lower()
            case Normalization.CASEFOLD:
                return text.casefold()
            case Normalization.NFKC:
                return unicodedata.normalize("NFKC", text).lower()


def list_normalizations() -> list[str]:
    """Return available normalization names."""
    return [form.value for form in Normalization]


__all__ = ["Normalization", "NormalizationName", "list_normalizations"]
