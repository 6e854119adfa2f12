"""Local filesystem module source.

Reads module files from disk and resolves the repository and tag used in
module source locators from settings or from git.
"""

import logging
import re
import subprocess
from fnmatch import fnmatch
from pathlib import Path

from readmegen.interfaces.source import BaseModuleSource

logger = logging.getLogger(__name__)

GITHUB_REMOTE_RE = re.compile(r"github\.com[:/]([^/]+/[^/.\s]+)")


class LocalModuleSource(BaseModuleSource):
    """Module source backed by a local checkout.

    Attributes:
        file_patterns: File name patterns that make up a module.
        exclude_dirs: Directory names that are never read or descended into.
    """

    def __init__(
        self,
        file_patterns: list[str] | None = None,
        exclude_dirs: list[str] | None = None,
        repository: str | None = None,
        default_tag: str = "v0.0.0",
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the source.

        Args:
            file_patterns: Glob patterns of module files (default: ``*.tf``).
            exclude_dirs: Directory names to skip.
            repository: ``owner/repo``; read from the git remote when None.
            default_tag: Tag used when git has none.
            encoding: Encoding of module files.
        """
        self._file_patterns = file_patterns or ["*.tf"]
        self._exclude_dirs = set(
            exclude_dirs or [".git", "node_modules", ".terraform", "vendor", "__pycache__"]
        )
        self._repository = repository
        self._default_tag = default_tag
        self._encoding = encoding
        self._tag_cache: str | None = None

    def _matches(self, filename: str) -> bool:
        return any(fnmatch(filename, pattern) for pattern in self._file_patterns)

    def _excluded(self, path: Path) -> bool:
        return any(part in self._exclude_dirs for part in path.parts)

    def detect(self, directory: str | Path) -> bool:
        path = Path(directory)
        return path.is_dir() and any(
            entry.is_file() and self._matches(entry.name) for entry in path.iterdir()
        )

    def read_files(self, directory: str | Path) -> dict[str, str]:
        """Read the module files of one directory (not recursive).

        Returns:
            Mapping of file name to text, sorted by file name.

        Raises:
            FileNotFoundError: If the directory does not exist.
        """
        path = Path(directory)
        if not path.is_dir():
            raise FileNotFoundError(f"Module directory not found: {directory}")

        files: dict[str, str] = {}
        for entry in sorted(path.iterdir(), key=lambda p: p.name):
            if entry.is_file() and self._matches(entry.name):
                files[entry.name] = entry.read_text(encoding=self._encoding)

        logger.info(f"Read {len(files)} module file(s) from {directory}")
        return files

    def find_module_directories(self, base_dir: str | Path) -> list[Path]:
        """Find every directory below base_dir that holds module files."""
        base = Path(base_dir)
        if not base.is_dir():
            logger.warning(f"Base directory not found: {base_dir}")
            return []

        directories = {
            file.parent
            for file in base.rglob("*")
            if file.is_file()
            and self._matches(file.name)
            and not self._excluded(file.relative_to(base).parent)
        }
        found = sorted(directories)
        logger.info(f"Found {len(found)} module director(ies) below {base_dir}")
        return found

    def latest_tag(self) -> str:
        """Return the latest git tag, or the default tag."""
        if self._tag_cache is None:
            tag = self._git("describe", "--tags", "--abbrev=0")
            self._tag_cache = tag or self._default_tag
        return self._tag_cache

    def repository(self) -> str:
        """Return the repository as ``owner/repo``."""
        if self._repository:
            return self._repository

        remote = self._git("remote", "get-url", "origin")
        match = GITHUB_REMOTE_RE.search(remote or "")
        return match.group(1) if match else "owner/repo"

    def module_path(self, directory: str | Path) -> str:
        """Return the module path relative to the repository root."""
        top_level = self._git("rev-parse", "--show-toplevel", cwd=directory)
        if top_level:
            try:
                return Path(directory).resolve().relative_to(Path(top_level).resolve()).as_posix()
            except ValueError:
                logger.debug(f"{directory} is outside the repository at {top_level}")

        path = Path(directory).as_posix()
        return path[2:] if path.startswith("./") else path

    def module_source(self, directory: str | Path) -> str:
        """Return the ``git::`` source locator of a module directory."""
        return (
            f"git::https://github.com/{self.repository()}.git"
            f"//{self.module_path(directory)}?ref={self.latest_tag()}"
        )

    def _git(self, *args: str, cwd: str | Path | None = None) -> str | None:
        """Run a git command; return stripped stdout, or None on failure."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=True,
                timeout=10,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"git {' '.join(args)} failed: {e}")
            return None
        return result.stdout.strip() or None
