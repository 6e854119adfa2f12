"""Heuristic module describer.

Offline, deterministic fallback for the LLM describer. Usage groups are
recovered by pattern matching on condition expressions; nothing is
evaluated.
"""

import logging
import re

from readmegen.interfaces.describer import BaseModuleDescriber
from readmegen.interfaces.module import ModuleContext
from readmegen.strategies.usage.models import ModuleDescription, UsageGroup

logger = logging.getLogger(__name__)

CONTAINS_RE = re.compile(
    r"contains\s*\(\s*\[(?P<values>[^\]]*)\]\s*,\s*var\.(?P<name>[A-Za-z_][\w-]*)\s*\)"
)
STRING_LITERAL_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')


def _humanize(text: str) -> str:
    return " ".join(part.capitalize() for part in re.split(r"[_\-\s]+", text) if part)


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def trigger_values(condition: str, trigger: str) -> list[str]:
    """Return the values listed in ``contains([...], var.<trigger>)``."""
    values: list[str] = []
    for match in CONTAINS_RE.finditer(condition):
        if match.group("name") == trigger:
            values.extend(STRING_LITERAL_RE.findall(match.group("values")))
    return _unique(values)


def referenced_values(condition: str, trigger: str) -> list[str]:
    """Return trigger values a condition compares against.

    Matches ``var.<trigger> != "<value>"``, ``var.<trigger> == "<value>"``
    and ``contains([...], var.<trigger>)``.
    """
    comparison = re.compile(rf'var\.{re.escape(trigger)}\s*(?:!=|==)\s*"((?:[^"\\]|\\.)*)"')
    return _unique(comparison.findall(condition) + trigger_values(condition, trigger))


class HeuristicDescriber(BaseModuleDescriber):
    """Describes a module from its classified declarations alone."""

    async def describe(self, context: ModuleContext) -> ModuleDescription:
        """Build a description, features and usage groups without an LLM."""
        groups = self.usage_groups(context)
        description = ModuleDescription(
            description=self._description(context),
            features=self._features(context),
            conditional_usage=groups,
        )
        logger.info(
            f"Heuristic description for '{context.meta.name}': {len(groups)} usage group(s)"
        )
        return description

    def usage_groups(self, context: ModuleContext) -> list[UsageGroup]:
        """Group conditional variables by the trigger value they depend on.

        Groups follow trigger discovery order, then the order of values in
        the trigger's ``contains()`` list. Values that no conditional
        variable references are skipped.
        """
        classified = context.classified
        groups: list[UsageGroup] = []

        for trigger in classified.trigger:
            for value in trigger_values(trigger.condition, trigger.name):
                variables = [
                    c.name
                    for c in classified.conditional
                    if value in referenced_values(c.condition, trigger.name)
                ]
                if not variables:
                    continue
                groups.append(
                    UsageGroup(
                        trigger=trigger.name,
                        value=value,
                        label=f"{_humanize(value)} {_humanize(trigger.name)}",
                        variables=variables,
                    )
                )

        return groups

    def _description(self, context: ModuleContext) -> str:
        return f"Terraform module for {_humanize(context.meta.name) or context.meta.name}"

    def _features(self, context: ModuleContext) -> list[str]:
        classified = context.classified
        features: list[str] = []

        if classified.required:
            features.append(f"Requires {len(classified.required)} input variable(s)")
        if classified.trigger:
            names = ", ".join(t.name for t in classified.trigger)
            features.append(f"Supports conditional configuration driven by {names}")
        if classified.optional or classified.conditional:
            count = len(classified.optional) + len(classified.conditional)
            features.append(f"Provides defaults for {count} optional variable(s)")
        if context.outputs:
            features.append(f"Exposes {len(context.outputs)} output(s)")
        if any(o.sensitive for o in context.outputs):
            features.append("Marks sensitive outputs")

        return features

    @property
    def name(self) -> str:
        return "heuristic"
