"""Balanced-brace block extraction.

Locates ``keyword "name" {`` headers and returns the exact text of the block
that follows, using a running brace-depth counter.
"""

import logging
import re

logger = logging.getLogger(__name__)


def header_pattern(keyword: str) -> re.Pattern[str]:
    """Build the line-anchored header pattern for a declaration keyword."""
    return re.compile(
        rf'^[ \t]*{re.escape(keyword)}[ \t]+"([^"]+)"[ \t]*\{{',
        re.MULTILINE,
    )


def find_headers(text: str, keyword: str) -> list[tuple[str, int]]:
    """Find every declaration header of one keyword.

    Args:
        text: The full file text.
        keyword: The declaration keyword (e.g. "variable", "output").

    Returns:
        ``(name, open_brace_index)`` pairs in file order.
    """
    return [(m.group(1), m.end() - 1) for m in header_pattern(keyword).finditer(text)]


def _scan_block(text: str, start_index: int, quote_aware: bool) -> tuple[str, bool]:
    """Scan one block; return its text and whether the closing brace was found."""
    depth = 0
    open_index = -1
    in_string = False
    i = start_index
    n = len(text)

    while i < n:
        ch = text[i]

        if quote_aware:
            if in_string:
                if ch == "\\":
                    i += 2
                    continue
                if ch == '"':
                    in_string = False
                i += 1
                continue
            if ch == '"':
                in_string = True
                i += 1
                continue
            if ch == "#" or text.startswith("//", i):
                newline = text.find("\n", i)
                i = n if newline == -1 else newline
                continue
            if text.startswith("/*", i):
                end = text.find("*/", i + 2)
                i = n if end == -1 else end + 2
                continue

        if ch == "{":
            if open_index == -1:
                open_index = i
            depth += 1
        elif ch == "}" and open_index != -1:
            depth -= 1
            if depth == 0:
                return text[open_index : i + 1], True
        i += 1

    if open_index == -1:
        return "", False
    return text[open_index:], False


def extract_block(text: str, start_index: int, quote_aware: bool = False) -> str:
    """Return the balanced-brace block starting at or after start_index.

    The block runs from the first ``{`` at or after ``start_index`` through
    its matching ``}``, inclusive. By default every brace counts, including
    braces inside quoted strings and comments; ``quote_aware`` skips those.

    If the text ends before the depth returns to zero, the truncated block is
    returned and a warning is logged.

    Args:
        text: The text to scan.
        start_index: Index of the opening brace (or a position before it).
        quote_aware: Skip braces inside strings and comments.

    Returns:
        The block text, or an empty string when no ``{`` follows start_index.
    """
    block, closed = _scan_block(text, start_index, quote_aware)
    if block and not closed:
        logger.warning(
            f"Unbalanced braces: block starting at offset {start_index} "
            f"reached end of text ({len(block)} chars accumulated)"
        )
    return block


def is_balanced(block: str, quote_aware: bool = False) -> bool:
    """Check whether a block text closes its own opening brace."""
    scanned, closed = _scan_block(block, 0, quote_aware)
    return closed and scanned == block
