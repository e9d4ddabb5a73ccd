"""Custom exception hierarchy for bpetok vocabulary and configuration errors."""

from ._sanitise import render_record


class BpeTokError(Exception):
    """Base exception for all bpetok errors."""


class VocabError(BpeTokError):
    """Raised when a vocabulary cannot be built."""


class EmptyVocabError(VocabError):
    """Raised when a vocabulary source yields no records."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        extra = " "
        if source:
            extra += f"(source: {source}) "
        super().__init__(message + extra)
        self.source = source


class MalformedRecordError(VocabError):
    """Raised when a vocabulary record is not a ``<subword>\\t<rank>`` pair."""

    def __init__(
        self,
        message: str,
        *,
        line_no: int | None = None,
        record: str | None = None,
    ) -> None:
        """Initialize with optional line number and record that get appended to the message."""
        extra = " "
        if line_no is not None:
            extra += f"(line: {line_no}) "
        if record is not None:
            extra += f"(record: '{render_record(record)}') "
        super().__init__(message + extra)
        self.line_no = line_no
        self.record = record


class DuplicateEntryError(MalformedRecordError):
    """Raised when a strict load meets the same subword twice."""


class VocabIoError(VocabError):
    """Raised when a vocabulary file or bundled asset cannot be read."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        extra = " "
        if path:
            extra += f"(path: {path}) "
        super().__init__(message + extra)
        self.path = path


class StrategyError(BpeTokError):
    """Raised when a named option (decomposer, normalization, default vocab) is unknown."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if available is not None:
            extra += f"(available: {available}) "
        if invalid_name is not None:
            extra += f"(got {invalid_name!r}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available = available
