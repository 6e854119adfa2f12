"""README document assembly.

Embeds the rendered usage blocks and the module description into the
README layout, keeping any existing terraform-docs section intact.
"""

import logging
import re
from collections.abc import Sequence

from readmegen.interfaces.module import ModuleContext
from readmegen.strategies.usage.models import ModuleDescription
from readmegen.strategies.usage.synthesizer import UsageExamples, UsageSynthesizer

logger = logging.getLogger(__name__)

TF_DOCS_BEGIN = "<!-- BEGIN_TF_DOCS -->"
TF_DOCS_END = "<!-- END_TF_DOCS -->"
MODULES_BEGIN = "<!-- BEGIN_MODULES -->"
MODULES_END = "<!-- END_MODULES -->"

DESCRIPTION_SECTION_RE = re.compile(r"## Description[ \t]*\n\n([^\n#][^\n]*)")


def extract_between_markers(content: str, begin: str, end: str) -> str:
    """Return the text from begin through end marker, inclusive.

    Returns the two empty markers when either is missing.
    """
    begin_index = content.find(begin)
    end_index = content.find(end)
    if begin_index != -1 and end_index != -1 and end_index >= begin_index:
        return content[begin_index : end_index + len(end)]
    return f"{begin}\n{end}"


def replace_between_markers(content: str, begin: str, end: str, body: str) -> str | None:
    """Replace whatever sits between two markers.

    Returns:
        The new content, or None when the markers are not both present.
    """
    begin_index = content.find(begin)
    end_index = content.find(end)
    if begin_index == -1 or end_index == -1 or end_index < begin_index:
        return None
    return content[: begin_index + len(begin)] + "\n" + body + "\n" + content[end_index:]


def extract_description(readme: str) -> str:
    """Return the first line of a README's Description section."""
    match = DESCRIPTION_SECTION_RE.search(readme)
    return match.group(1).strip() if match else ""


def render_module_table(rows: Sequence[tuple[str, str, str, str]]) -> str:
    """Render the root module table.

    Args:
        rows: ``(name, link, type, description)`` tuples.
    """
    lines = ["| Module | Type | Description |", "|--------|------|-------------|"]
    lines.extend(
        f"| [{name}](./{link}) | {kind} | {description} |" for name, link, kind, description in rows
    )
    return "\n".join(lines)


class ReadmeAssembler:
    """Builds the module README from its sections."""

    def __init__(self, synthesizer: UsageSynthesizer | None = None) -> None:
        self._synthesizer = synthesizer or UsageSynthesizer()

    def assemble(
        self,
        context: ModuleContext,
        description: ModuleDescription,
        usage: UsageExamples,
        existing_readme: str | None = None,
    ) -> str:
        """Assemble the README of one module.

        Args:
            context: The classified module context.
            description: Prose and usage groups for the module.
            usage: The rendered usage blocks.
            existing_readme: Current README text, whose terraform-docs
                section is carried over.

        Returns:
            The README text.
        """
        meta = context.meta
        basic = usage.basic.text or self._synthesizer.render_module_block(meta, [])
        tf_docs = extract_between_markers(existing_readme or "", TF_DOCS_BEGIN, TF_DOCS_END)
        first_output = context.output_names[0] if context.outputs else "id"
        features = "\n".join(f"- {feature}" for feature in description.features)

        sections = [
            f"# Module: {meta.name}",
            f"## Description\n\n{description.description}",
            f"## Features\n\n{features}",
            f"## Basic Usage\n\n```hcl\n{basic}\n```",
        ]
        sections.extend(
            f"### Usage with {block.label}\n\n```hcl\n{block.text}\n```" for block in usage.conditional
        )
        sections.append(
            "## Using Outputs\n\n"
            "```hcl\n"
            "# Reference outputs in other resources\n"
            'resource "example_resource" "this" {\n'
            f"  example_attribute = module.{meta.name}.{first_output}\n"
            "}\n"
            "```"
        )
        sections.append(tf_docs)

        logger.debug(
            f"Assembled README for '{meta.name}' with "
            f"{len(usage.conditional)} conditional usage section(s)"
        )
        return "\n\n".join(sections) + "\n"
