"""Module-level data shared between scanning, classification and synthesis."""

import enum
from dataclasses import dataclass, field

from readmegen.interfaces.scanner import Declaration


class Category(str, enum.Enum):
    """Classification of a variable declaration."""

    REQUIRED = "required"
    TRIGGER = "trigger"
    CONDITIONAL = "conditional"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class ClassifiedDeclarations:
    """The four disjoint category lists, each in discovery order."""

    required: tuple[Declaration, ...] = ()
    trigger: tuple[Declaration, ...] = ()
    conditional: tuple[Declaration, ...] = ()
    optional: tuple[Declaration, ...] = ()

    @property
    def total(self) -> int:
        return len(self.required) + len(self.trigger) + len(self.conditional) + len(self.optional)

    def by_category(self, category: Category) -> tuple[Declaration, ...]:
        return getattr(self, category.value)

    def category_of(self, name: str) -> Category | None:
        """Return the category holding a declaration name, if any."""
        for category in Category:
            if any(d.name == name for d in self.by_category(category)):
                return category
        return None


@dataclass(frozen=True)
class ModuleMeta:
    """Module metadata used only for textual substitution.

    Attributes:
        name: Display name of the module (usually the directory name).
        source: Canonical module source locator.
        version: Version tag the source points at.
    """

    name: str
    source: str
    version: str = "v0.0.0"


@dataclass
class ModuleContext:
    """Everything one synthesis pass knows about a module."""

    meta: ModuleMeta
    declarations: list[Declaration] = field(default_factory=list)
    classified: ClassifiedDeclarations = field(default_factory=ClassifiedDeclarations)
    outputs: list[Declaration] = field(default_factory=list)
    files: dict[str, str] = field(default_factory=dict)

    @property
    def output_names(self) -> list[str]:
        return [o.name for o in self.outputs]
