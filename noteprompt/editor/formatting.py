"""
Markdown Editing Helpers.

Cursor-relative text splices behind the formatting toolbar and the Enter
key. Each helper takes the current text and selection and returns the new
text with the selection the editor should show afterwards. Nothing here
touches widgets; the caller applies the result to its text field.
"""

import re
from typing import NamedTuple

from noteprompt.core.exceptions import ValidationError

PLACEHOLDER = "placeholder"
CODE_PLACEHOLDER = "code"
CODE_FENCE = "```"
HORIZONTAL_RULE = "---"

BOLD = "**"
ITALIC = "*"
STRIKETHROUGH = "~~"
INLINE_CODE = "`"

H1 = "# "
H2 = "## "
H3 = "### "
UNORDERED_LIST = "- "
ORDERED_LIST = "1. "
BLOCKQUOTE = "> "

_LIST_ITEM = re.compile(r"^(?P<indent>[ \t]*)(?:(?P<bullet>[-*+])|(?P<number>\d+)\.|(?P<quote>>)) (?P<body>.*)$")
_HEADING_PREFIX = re.compile(r"#{1,6} ")


class Selection(NamedTuple):
    """Half-open character range; start == end is a collapsed cursor."""

    start: int
    end: int

    @classmethod
    def collapsed(cls, offset: int) -> "Selection":
        return cls(offset, offset)

    @property
    def is_collapsed(self) -> bool:
        return self.start == self.end


class EditResult(NamedTuple):
    """Text after an edit and the selection to show."""

    text: str
    selection: Selection


def _check_selection(text: str, selection: Selection) -> None:
    if not 0 <= selection.start <= selection.end <= len(text):
        raise ValidationError(
            "Selection out of range",
            details={"start": selection.start, "end": selection.end, "length": len(text)},
        )


def wrap_selection(
    text: str,
    selection: Selection,
    prefix: str,
    suffix: str | None = None,
) -> EditResult:
    """
    Wrap the selection in inline markers such as ``**`` or ``~~``.

    With a collapsed cursor a placeholder word is inserted between the
    markers and selected so typing replaces it.

    Args:
        text: Current editor text
        selection: Current selection
        prefix: Opening marker
        suffix: Closing marker; defaults to prefix

    Raises:
        ValidationError: If the selection lies outside the text
    """
    _check_selection(text, selection)
    closing = prefix if suffix is None else suffix
    start, end = selection
    inner = PLACEHOLDER if selection.is_collapsed else text[start:end]

    new_text = f"{text[:start]}{prefix}{inner}{closing}{text[end:]}"
    inner_start = start + len(prefix)
    return EditResult(new_text, Selection(inner_start, inner_start + len(inner)))


def toggle_line_prefix(text: str, selection: Selection, prefix: str) -> EditResult:
    """
    Add or remove a line marker such as ``# `` or ``- `` on the cursor's line.

    A heading marker replaces a heading of another level instead of
    stacking on it. The cursor keeps its place relative to the line's text.
    """
    _check_selection(text, selection)
    line_start = text.rfind("\n", 0, selection.start) + 1

    existing = _HEADING_PREFIX.match(text, line_start)
    if existing and _HEADING_PREFIX.fullmatch(prefix) and existing.group() != prefix:
        new_text = text[:line_start] + prefix + text[existing.end():]
        shift = len(prefix) - len(existing.group())
        offset = max(line_start, selection.start + shift)
    elif text.startswith(prefix, line_start):
        new_text = text[:line_start] + text[line_start + len(prefix):]
        offset = max(line_start, selection.start - len(prefix))
    else:
        new_text = text[:line_start] + prefix + text[line_start:]
        offset = selection.start + len(prefix)

    return EditResult(new_text, Selection.collapsed(offset))


def insert_code_block(text: str, selection: Selection) -> EditResult:
    """
    Fence the selection as a code block on its own lines.

    With a collapsed cursor a placeholder line is fenced and selected.
    """
    _check_selection(text, selection)
    start, end = selection
    inner = CODE_PLACEHOLDER if selection.is_collapsed else text[start:end]

    opening = f"\n{CODE_FENCE}\n"
    new_text = f"{text[:start]}{opening}{inner}\n{CODE_FENCE}\n{text[end:]}"
    inner_start = start + len(opening)
    return EditResult(new_text, Selection(inner_start, inner_start + len(inner)))


def insert_horizontal_rule(text: str, selection: Selection) -> EditResult:
    """Insert a horizontal rule at the cursor, replacing any selection."""
    _check_selection(text, selection)
    rule = f"\n{HORIZONTAL_RULE}\n"
    new_text = text[: selection.start] + rule + text[selection.end:]
    return EditResult(new_text, Selection.collapsed(selection.start + len(rule)))


def insert_link(text: str, selection: Selection, label: str | None = None, url: str = "url") -> EditResult:
    """
    Replace the selection with a markdown link.

    Args:
        label: Link text; defaults to the selected text, or "text" when
            nothing is selected
        url: Link target
    """
    _check_selection(text, selection)
    start, end = selection
    if label is None:
        label = text[start:end] if not selection.is_collapsed else "text"

    link = f"[{label}]({url})"
    return EditResult(text[:start] + link + text[end:], Selection.collapsed(start + len(link)))


def continue_list(text: str, cursor: int) -> EditResult:
    """
    Handle Enter pressed at cursor.

    On a list or quote line the next line gets the same marker, with
    ordered numbers incremented. Pressing Enter on an item that has no
    text ends the list by removing its marker. Any other line just gets
    a newline.
    """
    _check_selection(text, Selection.collapsed(cursor))
    line_start = text.rfind("\n", 0, cursor) + 1
    line_end = text.find("\n", cursor)
    if line_end == -1:
        line_end = len(text)

    match = _LIST_ITEM.match(text[line_start:line_end])
    if match is None:
        # A bare marker with no trailing space is not a list item yet.
        return EditResult(text[:cursor] + "\n" + text[cursor:], Selection.collapsed(cursor + 1))

    if not match.group("body").strip() and cursor == line_end:
        new_text = text[:line_start] + text[line_end:]
        return EditResult(new_text, Selection.collapsed(line_start))

    indent = match.group("indent")
    if match.group("bullet"):
        marker = f"{match.group('bullet')} "
    elif match.group("number"):
        marker = f"{int(match.group('number')) + 1}. "
    else:
        marker = BLOCKQUOTE

    insertion = f"\n{indent}{marker}"
    return EditResult(
        text[:cursor] + insertion + text[cursor:],
        Selection.collapsed(cursor + len(insertion)),
    )
