"""Text helpers for doc comment bodies: indentation and heading levels."""

import re
import textwrap

MAX_HEADING_LEVEL = 6

# CommonMark allows up to three spaces before fences and ATX headings
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_HEADING_RE = re.compile(r"^( {0,3})(#{1,6})(?=[ \t]|$)")


def handle_indentation(raw: str) -> str | None:
    """Normalize the indentation of a doc comment body.

    The first line is left-trimmed. The common leading whitespace of the
    non-blank lines after it is removed, which keeps nested lists and code
    blocks intact. Returns None when nothing but whitespace remains.

    Examples
    --------
    >>> handle_indentation("  Adds numbers.\\n    - a\\n      - nested\\n")
    'Adds numbers.\\n- a\\n  - nested'
    >>> handle_indentation("   \\n  ") is None
    True
    """
    first, newline, rest = raw.partition("\n")
    if newline:
        text = f"{first.lstrip()}\n{textwrap.dedent(rest)}"
    else:
        text = raw
    text = text.strip()
    return text or None


def shift_headings(raw: str, levels: int) -> str:
    """Shift every ATX heading of ``raw`` down by ``levels``.

    Headings inside fenced code blocks are left alone and levels are capped
    at ``MAX_HEADING_LEVEL``. Shifting by 0 returns the input unchanged and
    shifting by ``a`` then ``b`` equals shifting by ``a + b``.

    Examples
    --------
    >>> shift_headings("# Example\\nadd 1 2", 2)
    '### Example\\nadd 1 2'
    """
    if levels == 0:
        return raw

    lines = []
    fence: tuple[str, int] | None = None
    for line in raw.splitlines(keepends=True):
        if fence_match := _FENCE_RE.match(line):
            marker = fence_match.group(1)
            if fence is None:
                fence = (marker[0], len(marker))
            elif _closes_fence(line, fence):
                fence = None
        elif fence is None and (heading := _HEADING_RE.match(line)):
            level = min(len(heading.group(2)) + levels, MAX_HEADING_LEVEL)
            line = f"{heading.group(1)}{'#' * level}{line[heading.end() :]}"
        lines.append(line)
    return "".join(lines)


def _closes_fence(line: str, fence: tuple[str, int]) -> bool:
    char, length = fence
    stripped = line.strip()
    return len(stripped) >= length and set(stripped) == {char}
