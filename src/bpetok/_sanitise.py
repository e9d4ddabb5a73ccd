"""
Helpers for showing vocabulary records inside error messages.

A rejected record may hold tabs, stray carriage returns or other invisible
characters. They are rendered as ``\\uXXXX`` so the message shows where the
field split went wrong.
"""

import unicodedata

RECORD_PREVIEW_LEN = 80


def _escape(c: str) -> str:
    # Cc, Cf, Cs, Co and Cn all share the leading "C"
    if unicodedata.category(c).startswith("C"):
        return f"\\u{ord(c):04x}"
    return c


def render_record(record: str, limit: int = RECORD_PREVIEW_LEN) -> str:
    """Return ``record`` with invisible characters escaped, cut to ``limit`` characters."""
    shown = "".join(_escape(c) for c in record[:limit])
    if len(record) > limit:
        shown += "..."
    return shown
