"""
Markdown Text Utilities.

Pure functions deriving display fields from note content: the title shown
in lists, a plain-text preview snippet, and word/character counts for the
editor status line. No rendering happens here.
"""

import re

DEFAULT_NOTE_TITLE = "Untitled Note"
TITLE_MAX_LENGTH = 50
PREVIEW_MAX_LENGTH = 200
MAX_NOTE_LENGTH = 100_000

_ELLIPSIS = "..."
_HEADING_MARKER = re.compile(r"^#+\s*")

# Order matters: block constructs go before inline ones, images before links.
_PREVIEW_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"!\[[^\]]*\]\([^)]*\)"), ""),
    (re.compile(r"\[(.+?)\]\(.+?\)"), r"\1"),
    (re.compile(r"^---+\s*$", re.MULTILINE), ""),
    (re.compile(r"^#+\s*", re.MULTILINE), ""),
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
    (re.compile(r"^>\s*", re.MULTILINE), ""),
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),
    (re.compile(r"\*(.+?)\*"), r"\1"),
    (re.compile(r"~~(.+?)~~"), r"\1"),
    (re.compile(r"`(.+?)`"), r"\1"),
]
_NEWLINES = re.compile(r"\n+")


def extract_title(content: str) -> str:
    """
    Derive a note title from its content.

    Takes the first line, trims it, strips one leading run of markdown
    heading markers and truncates anything longer than 50 characters to
    47 characters plus an ellipsis.

    Args:
        content: Full markdown content

    Returns:
        Display title, or "Untitled Note" when the first line is blank
    """
    if not content:
        return DEFAULT_NOTE_TITLE

    first_line = content.split("\n", 1)[0].strip()
    title = _HEADING_MARKER.sub("", first_line, count=1)

    if not title:
        return DEFAULT_NOTE_TITLE

    if len(title) > TITLE_MAX_LENGTH:
        return title[: TITLE_MAX_LENGTH - len(_ELLIPSIS)] + _ELLIPSIS

    return title


def generate_preview(content: str, max_length: int = PREVIEW_MAX_LENGTH) -> str:
    """
    Build a single-line plain-text preview of markdown content.

    Markdown syntax is stripped, line breaks collapse to single spaces and
    the result is cut at max_length characters with an ellipsis appended.
    """
    if not content:
        return ""

    preview = content
    for pattern, replacement in _PREVIEW_RULES:
        preview = pattern.sub(replacement, preview)

    preview = _NEWLINES.sub(" ", preview.strip()).strip()

    if len(preview) > max_length:
        preview = preview[:max_length] + _ELLIPSIS

    return preview


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def count_characters(text: str) -> int:
    """Count characters, whitespace included."""
    return len(text)


def has_content(text: str) -> bool:
    """Whether the text holds anything besides whitespace."""
    return bool(text.strip())


def exceeds_length_guideline(text: str, limit: int = MAX_NOTE_LENGTH) -> bool:
    """
    Check text against the soft editing length guideline.

    The guideline is advisory; nothing in storage enforces it.
    """
    return len(text) > limit
