"""Prompt construction and reply parsing for LLM describers.

The prompt carries a compact structural summary of the classified module
plus the module files; the reply is a JSON object validated into a
ModuleDescription.
"""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from readmegen.interfaces.describer import DescriberError
from readmegen.interfaces.module import ModuleContext
from readmegen.strategies.usage.models import ModuleDescription

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a technical documentation generator for Terraform modules. "
    "You MUST respond with ONLY valid JSON, no markdown, no code blocks, no explanations. "
    "Your response must be parseable as a single JSON object."
)

REPLY_EXAMPLE = {
    "description": "One sentence describing what this module does",
    "features": ["Creates ...", "Configures ...", "Supports ..."],
    "conditionalUsage": [
        {
            "name": "S3 Backup",
            "triggerVar": "backup_provider",
            "value": "s3",
            "condition": 'backup_provider = "s3"',
            "variables": ["backup_s3_bucket", "backup_s3_prefix"],
        }
    ],
}

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?")


def build_prompt_payload(context: ModuleContext) -> dict[str, Any]:
    """Summarize the classified module for the prompt.

    Only structural facts: names per category, and the condition expression
    of each trigger and conditional variable.
    """
    classified = context.classified

    def with_condition(declarations) -> list[dict[str, str]]:
        return [
            {"name": d.name, "condition": d.condition, "description": d.description}
            for d in declarations
        ]

    return {
        "module": context.meta.name,
        "required": [d.name for d in classified.required],
        "triggers": with_condition(classified.trigger),
        "conditional": with_condition(classified.conditional),
        "optional": [d.name for d in classified.optional],
        "outputs": context.output_names,
    }


def build_user_prompt(context: ModuleContext) -> str:
    """Build the user prompt for one module."""
    payload = build_prompt_payload(context)
    files_context = "\n\n".join(
        f"### {filename}\n```hcl\n{content}\n```" for filename, content in context.files.items()
    )

    return f"""Analyze this Terraform module and return a JSON object.

VARIABLE ANALYSIS:
- Required variables (no default, no validation): {json.dumps(payload["required"])}
- Trigger variables (no default + validation such as contains([...], var.X)): {json.dumps(payload["triggers"], indent=2)}
- Conditional variables (default + validation referencing a trigger): {json.dumps(payload["conditional"], indent=2)}
- Outputs: {json.dumps(payload["outputs"])}

TRIGGERS AND CONDITIONAL VARIABLES:
- A trigger variable has no default and a validation like: contains(["value1", "value2"], var.trigger_name)
- A conditional variable references the trigger in its validation, e.g.: var.trigger_name != "value1" || var.conditional_var != null
- This means: when trigger_name = "value1", conditional_var becomes required

TASK:
1. Describe the module in one sentence and list its features
2. Read the possible values of each trigger variable from its contains() validation
3. For each trigger value, list the conditional variables that become required
4. Only emit usage groups for trigger values with at least one conditional variable

Return this exact JSON structure:
{json.dumps(REPLY_EXAMPLE, indent=2)}

Rules:
- description: one clear sentence, no period at the end
- features: 3-7 strings, each starting with a verb (Creates, Configures, Supports, ...)
- conditionalUsage: empty array when there are no trigger variables

Terraform files:
{files_context}

Respond with ONLY the JSON object:"""


def parse_ai_response(response: str) -> ModuleDescription:
    """Parse an LLM reply into a ModuleDescription.

    Markdown code fences around the JSON are removed first.

    Raises:
        DescriberError: If the reply is not a JSON object or fails validation.
    """
    cleaned = _FENCE_RE.sub("", response or "").strip()

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise DescriberError(f"Failed to parse AI response as JSON: {e}") from e

    if not isinstance(data, dict):
        raise DescriberError(f"AI response is a {type(data).__name__}, expected an object")

    try:
        description = ModuleDescription.model_validate(data)
    except ValidationError as e:
        raise DescriberError(f"AI response failed validation: {e}") from e

    logger.debug(
        f"Parsed AI response: {len(description.features)} feature(s), "
        f"{len(description.conditional_usage)} usage group(s)"
    )
    return description
