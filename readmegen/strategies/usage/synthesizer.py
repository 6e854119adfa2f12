"""Usage example synthesis.

Renders the "basic usage" module block (everything that must always be
supplied) and one "conditional usage" block per usage group, where the
trigger shows its concrete value and each conditional variable carries a
``# Required when <trigger> = "<value>"`` comment.

Every observable ordering is an explicit sort by name, so repeated runs over
the same declarations and groups are byte-identical.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from readmegen.interfaces.module import ClassifiedDeclarations, ModuleContext, ModuleMeta
from readmegen.interfaces.scanner import Declaration
from readmegen.strategies.usage.models import UsageGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageBlock:
    """A rendered usage example.

    Attributes:
        text: The HCL module block, or an empty string.
        label: The usage group label (None for the basic block).
        condition: The ``trigger = "value"`` condition (None for the basic block).
    """

    text: str
    label: str | None = None
    condition: str | None = None


@dataclass(frozen=True)
class UsageExamples:
    """The basic usage block and the conditional blocks, in group order."""

    basic: UsageBlock
    conditional: tuple[UsageBlock, ...] = ()


def _hcl_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class UsageSynthesizer:
    """Renders column-aligned, deterministically ordered usage examples."""

    def __init__(
        self,
        placeholder_prefix: str = "your-",
        separator: str = "-",
        indent: str = "  ",
    ) -> None:
        """Initialize the synthesizer.

        Args:
            placeholder_prefix: Prefix of generated placeholder values.
            separator: Replaces underscores in placeholder values.
            indent: Indentation of lines inside the module block.
        """
        self._placeholder_prefix = placeholder_prefix
        self._separator = separator
        self._indent = indent

    def placeholder_for(self, name: str) -> str:
        """Derive the placeholder value for a declaration name.

        ``bucket_name`` becomes ``your-bucket-name``.
        """
        return f"{self._placeholder_prefix}{name.replace('_', self._separator)}"

    def render_assignments(
        self,
        names: Sequence[str],
        values: dict[str, str] | None = None,
        annotations: dict[str, str] | None = None,
    ) -> list[str]:
        """Render ``name = "value"`` lines padded to the widest name.

        Args:
            names: Names in display order.
            values: Explicit values; other names get a placeholder.
            annotations: Conditions for the ``# Required when`` comment.

        Returns:
            One line per name.
        """
        if not names:
            return []

        values = values or {}
        annotations = annotations or {}
        width = max(len(name) for name in names)

        lines = []
        for name in names:
            value = values.get(name, self.placeholder_for(name))
            line = f'{self._indent}{name.ljust(width)} = "{_hcl_string(value)}"'
            if name in annotations:
                line += f"  # Required when {annotations[name]}"
            lines.append(line)
        return lines

    def render_module_block(self, meta: ModuleMeta, lines: Sequence[str]) -> str:
        """Wrap assignment lines in a ``module`` block with its source."""
        parts = [f'module "{meta.name}" {{', f'{self._indent}source = "{meta.source}"']
        if lines:
            parts.append("")
            parts.extend(lines)
        parts.append("}")
        return "\n".join(parts)

    def render_basic_usage(
        self,
        required: Iterable[Declaration],
        trigger: Iterable[Declaration],
        meta: ModuleMeta,
    ) -> str:
        """Render the basic usage block.

        Shows required and trigger declarations only, sorted by name, with
        placeholder values.

        Returns:
            The module block, or an empty string when there is nothing to show.
        """
        names = sorted({d.name for d in required} | {d.name for d in trigger})
        if not names:
            return ""
        return self.render_module_block(meta, self.render_assignments(names))

    def render_conditional_usage(
        self,
        group: UsageGroup,
        required: Iterable[Declaration],
        trigger: Iterable[Declaration],
        meta: ModuleMeta,
    ) -> str:
        """Render the usage block of one usage group.

        The displayed set is required + trigger + the group's variables,
        sorted by name. The trigger line shows the group's value and the
        group's variables are annotated with the group's condition. Column
        width is computed for this block alone.
        """
        names = sorted(
            {d.name for d in required}
            | {d.name for d in trigger}
            | set(group.variables)
            | {group.trigger}
        )
        lines = self.render_assignments(
            names,
            values={group.trigger: group.value},
            annotations={name: group.condition for name in group.variables},
        )
        return self.render_module_block(meta, lines)

    def check_references(self, group: UsageGroup, classified: ClassifiedDeclarations) -> list[str]:
        """Return the names a usage group references that are not known locally.

        Unknown names are logged and still rendered with placeholder values.
        """
        unknown: list[str] = []

        if group.trigger not in {d.name for d in classified.trigger}:
            unknown.append(group.trigger)
            logger.warning(f"Usage group '{group.label}' references unknown trigger '{group.trigger}'")

        known_conditional = {d.name for d in classified.conditional}
        for name in group.variables:
            if name not in known_conditional and name != group.trigger:
                unknown.append(name)
                logger.warning(
                    f"Usage group '{group.label}' references '{name}', "
                    f"which is not a conditional variable"
                )

        return unknown

    def synthesize(self, context: ModuleContext, groups: Sequence[UsageGroup]) -> UsageExamples:
        """Render the basic block and one conditional block per usage group.

        Args:
            context: The classified module context.
            groups: Usage groups, rendered in the order given.

        Returns:
            The rendered UsageExamples.
        """
        classified = context.classified
        basic = UsageBlock(
            text=self.render_basic_usage(classified.required, classified.trigger, context.meta)
        )

        blocks = []
        for group in groups:
            self.check_references(group, classified)
            blocks.append(
                UsageBlock(
                    text=self.render_conditional_usage(
                        group, classified.required, classified.trigger, context.meta
                    ),
                    label=group.label,
                    condition=group.condition,
                )
            )

        logger.info(
            f"Synthesized usage for module '{context.meta.name}': "
            f"{len(classified.required) + len(classified.trigger)} basic variable(s), "
            f"{len(blocks)} conditional block(s)"
        )
        return UsageExamples(basic=basic, conditional=tuple(blocks))
