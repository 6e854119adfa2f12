"""Abstract base class for module file sources.

Sources hand normalized file text to the scanner; the scanner itself never
touches the filesystem or version control.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class BaseModuleSource(ABC):
    """Abstract base class for module source strategies.

    Example:
        ```python
        class LocalModuleSource(BaseModuleSource):
            def read_files(self, directory: str | Path) -> dict[str, str]:
                # Read *.tf files from disk
                pass
        ```
    """

    @abstractmethod
    def detect(self, directory: str | Path) -> bool:
        """Return True if the directory holds a module this source can read."""

    @abstractmethod
    def read_files(self, directory: str | Path) -> dict[str, str]:
        """Read module files.

        Args:
            directory: The module directory.

        Returns:
            Mapping of relative file name to file text, sorted by name.

        Raises:
            FileNotFoundError: If the directory does not exist.
        """

    @abstractmethod
    def find_module_directories(self, base_dir: str | Path) -> list[Path]:
        """Return every module directory below base_dir, sorted."""

    @abstractmethod
    def module_source(self, directory: str | Path) -> str:
        """Return the canonical source locator for a module directory."""

    @abstractmethod
    def latest_tag(self) -> str:
        """Return the version tag module sources should point at."""

    def module_name(self, directory: str | Path) -> str:
        """Return the display name of a module directory."""
        return Path(directory).resolve().name
