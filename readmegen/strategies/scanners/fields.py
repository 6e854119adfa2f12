"""Tolerant field parsing for declaration blocks.

Each field is matched independently against the raw block text. A field
that does not match falls back to its default value; nothing here raises.
"""

import logging
import re
from dataclasses import dataclass

from readmegen.interfaces.scanner import Validation
from readmegen.strategies.scanners.blocks import extract_block

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "string"

_QUOTED = r"""(?:"((?:[^"\\\n]|\\.)*)"|'((?:[^'\\\n]|\\.)*)'|<<-?(\w+)[ \t]*\n(.*?)\n[ \t]*\3\b)"""

DESCRIPTION_RE = re.compile(rf"\bdescription\s*=\s*{_QUOTED}", re.DOTALL)
ERROR_MESSAGE_RE = re.compile(rf"\berror_message\s*=\s*{_QUOTED}", re.DOTALL)
ERROR_MESSAGE_KEYWORD_RE = re.compile(r"\berror_message\s*=")
TYPE_RE = re.compile(r"(?:^[ \t]*|\{[ \t]*)type[ \t]*=(?!=)[ \t]*", re.MULTILINE)
DEFAULT_RE = re.compile(r"\bdefault\s*=(?!=)[ \t]*")
SENSITIVE_RE = re.compile(r"(?:^[ \t]*|\{[ \t]*)sensitive[ \t]*=[ \t]*true\b", re.MULTILINE)
VALIDATION_RE = re.compile(r"\bvalidation\s*\{")
CONDITION_RE = re.compile(r"\bcondition\s*=\s*")


@dataclass(frozen=True)
class ParsedFields:
    """Fields recovered from one declaration block."""

    description: str = ""
    type: str = DEFAULT_TYPE
    has_default: bool = False
    default_value: str | None = None
    sensitive: bool = False
    validation: Validation | None = None


def _unescape(value: str) -> str:
    return re.sub(r"\\([\"'\\])", r"\1", value)


def _quoted_value(match: re.Match[str] | None) -> str:
    if match is None:
        return ""
    double, single, _, heredoc = match.groups()
    if double is not None:
        return _unescape(double)
    if single is not None:
        return _unescape(single)
    return (heredoc or "").strip()


def read_expression(text: str, pos: int) -> str:
    """Read an expression starting at pos.

    Stops at the end of the line, or at a trailing comment, once every
    bracket opened by the expression is closed. Stops early at a closing
    bracket that belongs to the enclosing block.
    """
    depth = 0
    in_string = False
    i = pos
    n = len(text)

    while i < n:
        ch = text[i]
        if in_string:
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
            if depth < 0:
                break
        elif depth == 0 and (ch == "\n" or ch == "#" or text.startswith("//", i)):
            break
        i += 1

    return text[pos:i].strip()


def parse_validation(raw_block: str, quote_aware: bool = False) -> Validation | None:
    """Parse the first ``validation { ... }`` sub-block.

    Args:
        raw_block: The outer declaration block.
        quote_aware: Passed through to the block extractor.

    Returns:
        The Validation, or None when the block has no validation keyword.
    """
    match = VALIDATION_RE.search(raw_block)
    if match is None:
        return None

    sub_block = extract_block(raw_block, match.end() - 1, quote_aware)

    condition = ""
    condition_match = CONDITION_RE.search(sub_block)
    if condition_match is not None:
        start = condition_match.end()
        error_keyword = ERROR_MESSAGE_KEYWORD_RE.search(sub_block, start)
        if error_keyword is not None:
            condition = sub_block[start : error_keyword.start()].strip()
        else:
            condition = sub_block[start:].strip()
            if condition.endswith("}"):
                condition = condition[:-1].rstrip()

    return Validation(
        condition_expression=condition,
        error_message=_quoted_value(ERROR_MESSAGE_RE.search(sub_block)),
        raw_block=sub_block,
    )


def parse_fields(raw_block: str, quote_aware: bool = False) -> ParsedFields:
    """Extract the declared fields from one block.

    A ``default =`` clause anywhere in the block means the declaration has a
    default, whatever the value is (an explicit ``null`` still counts).

    Args:
        raw_block: The balanced-brace declaration block.
        quote_aware: Passed through to the validation sub-block extractor.

    Returns:
        ParsedFields with documented defaults for every missing field.
    """
    type_match = TYPE_RE.search(raw_block)
    type_expr = read_expression(raw_block, type_match.end()) if type_match else ""

    default_match = DEFAULT_RE.search(raw_block)
    default_value = read_expression(raw_block, default_match.end()) if default_match else None

    fields = ParsedFields(
        description=_quoted_value(DESCRIPTION_RE.search(raw_block)),
        type=type_expr or DEFAULT_TYPE,
        has_default=default_match is not None,
        default_value=default_value,
        sensitive=SENSITIVE_RE.search(raw_block) is not None,
        validation=parse_validation(raw_block, quote_aware),
    )

    if not type_match:
        logger.debug("No type field found, using generic type sentinel")

    return fields
