from __future__ import annotations

MAX_TEXT_LENGTH = 41
ELLIPSIS = "..."
GLYPH = "🎶"


def format_description(text: str) -> str:
    """Trim, truncate to 41 characters and wrap ``text`` in the note glyph."""

    text = text.strip()
    if len(text) > MAX_TEXT_LENGTH:
        return f"{GLYPH} {text[:MAX_TEXT_LENGTH]}{ELLIPSIS} {GLYPH}"
    return f"{GLYPH} {text} {GLYPH}"
