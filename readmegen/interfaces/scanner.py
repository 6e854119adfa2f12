"""Abstract base class for declaration scanning strategies.

The Strategy Pattern keeps the structural scanner behind a small seam, so a
stricter grammar-aware parser can replace the regex scanner without touching
classification or usage synthesis.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Validation:
    """A validation rule attached to a declaration.

    Attributes:
        condition_expression: Raw boolean expression text between
            ``condition =`` and the following ``error_message``, trimmed.
        error_message: The error message text, or an empty string.
        raw_block: The full validation sub-block, braces included.
    """

    condition_expression: str
    error_message: str = ""
    raw_block: str = ""


@dataclass(frozen=True)
class Declaration:
    """One parsed ``variable`` or ``output`` entry.

    Attributes:
        kind: The declaration keyword ("variable" or "output").
        name: The declared name.
        raw_block: The exact balanced-brace block text.
        description: The description field, or an empty string.
        type: The type expression, "string" when absent.
        has_default: Whether a ``default =`` clause was written.
        default_value: The default expression text, only set with has_default.
        sensitive: Whether ``sensitive = true`` was written.
        validation: The first validation rule, if any.
    """

    kind: str
    name: str
    raw_block: str
    description: str = ""
    type: str = "string"
    has_default: bool = False
    default_value: str | None = None
    sensitive: bool = False
    validation: Validation | None = None

    @property
    def required(self) -> bool:
        """Return True when callers must always supply a value."""
        return not self.has_default

    @property
    def condition(self) -> str:
        """Return the validation condition, or an empty string."""
        return self.validation.condition_expression if self.validation else ""


class DuplicateDeclarationError(ValueError):
    """Raised when a module declares the same name more than once."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Duplicate declarations: {', '.join(names)}")


class BaseDeclarationScanner(ABC):
    """Abstract base class for declaration scanners.

    All concrete scanners must recover ``variable`` and ``output``
    declarations from raw module text without raising on malformed input.

    Example:
        ```python
        class HclRegexScanner(BaseDeclarationScanner):
            def scan(self, text: str, keyword: str = "variable") -> list[Declaration]:
                # Locate headers, extract blocks, parse fields
                pass
        ```
    """

    @abstractmethod
    def scan(self, text: str, keyword: str = "variable") -> list[Declaration]:
        """Scan module text for declarations of one keyword.

        Args:
            text: The full, already normalized text of one file.
            keyword: The declaration keyword to look for.

        Returns:
            Declarations in file order (top to bottom).
        """
        ...

    def scan_variables(self, text: str) -> list[Declaration]:
        """Return all ``variable`` declarations found in the text."""
        return self.scan(text, "variable")

    def scan_outputs(self, text: str) -> list[Declaration]:
        """Return all ``output`` declarations found in the text."""
        return self.scan(text, "output")
