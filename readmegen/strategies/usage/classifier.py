"""Variable classification.

Partitions variable declarations into four disjoint categories using the
has-default x has-validation decision table:

    has_default  has_validation  category
    -----------  --------------  -----------
    no           no              REQUIRED
    no           yes             TRIGGER
    yes          yes             CONDITIONAL
    yes          no              OPTIONAL
"""

import logging
from collections import Counter
from collections.abc import Iterable
from typing import Literal

from readmegen.interfaces.module import Category, ClassifiedDeclarations
from readmegen.interfaces.scanner import Declaration, DuplicateDeclarationError

logger = logging.getLogger(__name__)

DuplicatePolicy = Literal["reject", "last_wins"]


def categorize(declaration: Declaration) -> Category:
    """Return the category of a single declaration."""
    has_validation = declaration.validation is not None

    match (declaration.has_default, has_validation):
        case (False, False):
            return Category.REQUIRED
        case (False, True):
            return Category.TRIGGER
        case (True, True):
            return Category.CONDITIONAL
        case _:
            return Category.OPTIONAL


def classify(declarations: Iterable[Declaration]) -> ClassifiedDeclarations:
    """Partition declarations into the four categories.

    Discovery order is preserved inside each category.

    Args:
        declarations: Variable declarations, in discovery order.

    Returns:
        The four category lists.
    """
    buckets: dict[Category, list[Declaration]] = {category: [] for category in Category}
    for declaration in declarations:
        buckets[categorize(declaration)].append(declaration)

    return ClassifiedDeclarations(
        required=tuple(buckets[Category.REQUIRED]),
        trigger=tuple(buckets[Category.TRIGGER]),
        conditional=tuple(buckets[Category.CONDITIONAL]),
        optional=tuple(buckets[Category.OPTIONAL]),
    )


def apply_duplicate_policy(
    declarations: list[Declaration],
    policy: DuplicatePolicy = "reject",
) -> list[Declaration]:
    """Resolve declarations that share a name within one module.

    Args:
        declarations: Declarations in discovery order, across all files.
        policy: "reject" raises, "last_wins" keeps the last occurrence.

    Returns:
        Declarations with unique names, in discovery order.

    Raises:
        DuplicateDeclarationError: With the "reject" policy, if any name repeats.
        ValueError: If the policy is unknown.
    """
    counts = Counter(d.name for d in declarations)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if not duplicates:
        return list(declarations)

    match policy:
        case "reject":
            logger.error(f"Duplicate declaration names rejected: {duplicates}")
            raise DuplicateDeclarationError(duplicates)
        case "last_wins":
            logger.warning(f"Duplicate declaration names, keeping last occurrence: {duplicates}")
            last_index = {d.name: i for i, d in enumerate(declarations)}
            return [d for i, d in enumerate(declarations) if last_index[d.name] == i]
        case _:
            raise ValueError(
                f"Unknown duplicate policy: {policy}. Valid options: 'reject', 'last_wins'"
            )
