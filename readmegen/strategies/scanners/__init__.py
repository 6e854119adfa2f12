"""Concrete declaration scanner implementations."""

from readmegen.strategies.scanners.blocks import extract_block, find_headers, is_balanced
from readmegen.strategies.scanners.fields import ParsedFields, parse_fields, parse_validation
from readmegen.strategies.scanners.hcl import HclRegexScanner

__all__ = [
    "HclRegexScanner",
    "ParsedFields",
    "extract_block",
    "find_headers",
    "is_balanced",
    "parse_fields",
    "parse_validation",
]
