"""Regex-based HCL declaration scanner.

A best-effort structural scanner: header discovery and balanced-brace
extraction locate each block, then tolerant field patterns recover the
metadata. Malformed input degrades to empty fields instead of raising.
"""

import logging

from readmegen.interfaces.scanner import BaseDeclarationScanner, Declaration
from readmegen.strategies.scanners.blocks import extract_block, find_headers, is_balanced
from readmegen.strategies.scanners.fields import parse_fields

logger = logging.getLogger(__name__)


class HclRegexScanner(BaseDeclarationScanner):
    """Scanner for Terraform/OpenTofu ``variable`` and ``output`` blocks.

    Attributes:
        quote_aware: Whether brace counting skips strings and comments.
    """

    def __init__(self, quote_aware: bool = False) -> None:
        """Initialize the scanner.

        Args:
            quote_aware: Skip braces inside quoted strings and comments.
                Off by default, so literal braces in descriptions are
                counted like any other brace.
        """
        self._quote_aware = quote_aware

    def scan(self, text: str, keyword: str = "variable") -> list[Declaration]:
        """Scan text for declarations of one keyword, in file order."""
        declarations: list[Declaration] = []

        for name, brace_index in find_headers(text, keyword):
            raw_block = extract_block(text, brace_index, self._quote_aware)
            if not is_balanced(raw_block, self._quote_aware):
                logger.warning(f"{keyword} '{name}' is truncated; fields may be incomplete")

            fields = parse_fields(raw_block, self._quote_aware)
            declarations.append(
                Declaration(
                    kind=keyword,
                    name=name,
                    raw_block=raw_block,
                    description=fields.description,
                    type=fields.type,
                    has_default=fields.has_default,
                    default_value=fields.default_value,
                    sensitive=fields.sensitive,
                    validation=fields.validation,
                )
            )

        logger.debug(f"Scanned {len(declarations)} {keyword} declaration(s)")
        return declarations

    @property
    def quote_aware(self) -> bool:
        return self._quote_aware
