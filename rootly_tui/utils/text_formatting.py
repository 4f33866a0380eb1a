"""
Text formatting utilities for the list and detail panes.

Widths are terminal cells, measured with rich.cells so wide glyphs
(CJK, emoji) are counted correctly.
"""

import textwrap

from rich.cells import cell_len, set_cell_size


def truncate(text: str, width: int) -> str:
    """
    Truncate text to fit `width` cells, ending in "..." when cut.

    Args:
        text: The text to truncate
        width: Maximum width in cells

    Returns:
        Text that fits in `width` cells
    """
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    if width <= 3:
        return set_cell_size(text, width)
    return set_cell_size(text, width - 3).rstrip() + "..."


def pad(text: str, width: int) -> str:
    """Truncate or right-pad text to exactly `width` cells."""
    return set_cell_size(text, max(0, width))


def wrap_text(text: str, width: int) -> list[str]:
    """
    Wrap text to `width` columns, keeping blank lines between paragraphs.
    """
    width = max(1, width)
    lines: list[str] = []
    for paragraph in text.splitlines() or [""]:
        if not paragraph.strip():
            lines.append("")
            continue
        indent = paragraph[: len(paragraph) - len(paragraph.lstrip())]
        wrapped = textwrap.wrap(
            paragraph.strip(),
            width=width,
            initial_indent=indent,
            subsequent_indent=indent,
            break_long_words=True,
            break_on_hyphens=False,
        )
        lines.extend(wrapped or [""])
    return lines


def join_horizontal(left: list[str], right: list[str], left_width: int, gap: int = 2) -> list[str]:
    """Place two columns of lines side by side."""
    height = max(len(left), len(right))
    spacer = " " * gap
    rows = []
    for i in range(height):
        lhs = left[i] if i < len(left) else ""
        rhs = right[i] if i < len(right) else ""
        rows.append((pad(lhs, left_width) + spacer + rhs).rstrip())
    return rows
