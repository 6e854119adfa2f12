"""README assembly."""

from readmegen.strategies.readme.assembler import (
    MODULES_BEGIN,
    MODULES_END,
    TF_DOCS_BEGIN,
    TF_DOCS_END,
    ReadmeAssembler,
    extract_between_markers,
    extract_description,
    render_module_table,
    replace_between_markers,
)

__all__ = [
    "MODULES_BEGIN",
    "MODULES_END",
    "ReadmeAssembler",
    "TF_DOCS_BEGIN",
    "TF_DOCS_END",
    "extract_between_markers",
    "extract_description",
    "render_module_table",
    "replace_between_markers",
]
