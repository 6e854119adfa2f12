"""Module description interfaces.

Defines the abstract base class for the collaborator that produces prose
(description, features) and usage groups for a classified module.
"""

from abc import ABC, abstractmethod
from typing import Any

from readmegen.interfaces.module import ModuleContext


class BaseModuleDescriber(ABC):
    """Abstract base class for module description strategies.

    Implementations receive a fully classified ModuleContext and return a
    ModuleDescription whose usage groups drive the conditional usage blocks.
    """

    @abstractmethod
    async def describe(self, context: ModuleContext) -> Any:
        """Describe a module.

        Args:
            context: The classified module context.

        Returns:
            A ModuleDescription instance.

        Raises:
            DescriberError: If no description could be produced.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a short human-readable name for logs."""


class DescriberError(Exception):
    """Exception raised when a module description cannot be produced."""

    pass
