"""README generation pipeline.

Runs one module through the full pipeline:
1. Reading -> 2. Scanning -> 3. Classification -> 4. Description ->
5. Usage synthesis -> 6. Assembly -> 7. Writing

Modules are independent, so a batch runs them concurrently. A failure in
one module is recorded in its result and never aborts the batch.
"""

import asyncio
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from readmegen.core.config import Settings, get_settings
from readmegen.core.factory import ComponentFactory
from readmegen.interfaces.module import ModuleContext, ModuleMeta
from readmegen.interfaces.scanner import Declaration
from readmegen.strategies.readme import (
    MODULES_BEGIN,
    MODULES_END,
    extract_description,
    render_module_table,
    replace_between_markers,
)
from readmegen.strategies.usage import apply_duplicate_policy, classify

logger = logging.getLogger(__name__)

MODULE_TYPE = "Terraform/OpenTofu"


@dataclass
class GenerationResult:
    """Outcome of generating one module README."""

    directory: Path
    readme_path: Path
    content: str = ""
    written: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReadmeGenerator:
    """Generates module READMEs from module directories.

    Example:
        ```python
        generator = ReadmeGenerator(get_settings())
        result = await generator.generate("infrastructure/aws/s3", dry_run=True)
        print(result.content)
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        factory: ComponentFactory | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            settings: Application settings. If None, uses global settings.
            factory: Component factory. If None, one is built from settings.
        """
        self._settings = settings or (factory.settings if factory else get_settings())
        self._factory = factory or ComponentFactory(self._settings)

    def build_context(
        self,
        meta: ModuleMeta,
        files: dict[str, str],
    ) -> ModuleContext:
        """Scan and classify the files of one module.

        Files are scanned in file name order, declarations in file order.

        Raises:
            DuplicateDeclarationError: If a variable name repeats and the
                duplicate policy is "reject".
        """
        scanner = self._factory.get_scanner()

        variables: list[Declaration] = []
        outputs: list[Declaration] = []
        for filename in sorted(files):
            text = files[filename]
            variables.extend(scanner.scan_variables(text))
            outputs.extend(scanner.scan_outputs(text))

        variables = apply_duplicate_policy(variables, self._settings.duplicate_policy)
        classified = classify(variables)

        logger.info(
            f"Module '{meta.name}': {len(classified.required)} required, "
            f"{len(classified.trigger)} trigger, {len(classified.conditional)} conditional, "
            f"{len(classified.optional)} optional, {len(outputs)} output(s)"
        )

        return ModuleContext(
            meta=meta,
            declarations=variables,
            classified=classified,
            outputs=outputs,
            files={filename: files[filename] for filename in sorted(files)},
        )

    def prepare_context(self, directory: str | Path) -> ModuleContext:
        """Read, scan and classify one module directory.

        Raises:
            FileNotFoundError: If the directory does not exist.
            DuplicateDeclarationError: See build_context.
        """
        source = self._factory.get_source()
        files = source.read_files(directory)

        meta = ModuleMeta(
            name=source.module_name(directory),
            source=source.module_source(directory),
            version=source.latest_tag(),
        )
        return self.build_context(meta, files)

    async def generate(self, directory: str | Path, dry_run: bool = False) -> GenerationResult:
        """Generate the README of one module.

        Args:
            directory: The module directory.
            dry_run: Build the README without writing it.

        Returns:
            The GenerationResult; ``error`` is set when the module failed.
        """
        directory = Path(directory)
        readme_path = directory / "README.md"
        logger.info(f"Processing module: {directory}")

        try:
            # File reads and git lookups run in a worker thread
            context = await asyncio.to_thread(self.prepare_context, directory)

            describer = self._factory.get_describer()
            description = await describer.describe(context)

            usage = self._factory.get_synthesizer().synthesize(
                context, description.conditional_usage
            )

            existing = await asyncio.to_thread(self._read_existing, readme_path)
            content = self._factory.get_assembler().assemble(context, description, usage, existing)

            if not dry_run:
                await asyncio.to_thread(readme_path.write_text, content, encoding="utf-8")
                logger.info(f"Generated: {readme_path} ({len(content)} chars)")

            return GenerationResult(
                directory=directory,
                readme_path=readme_path,
                content=content,
                written=not dry_run,
            )

        except Exception as e:
            logger.exception(f"README generation failed for {directory}: {e}")
            return GenerationResult(directory=directory, readme_path=readme_path, error=str(e))

    @staticmethod
    def _read_existing(readme_path: Path) -> str | None:
        return readme_path.read_text(encoding="utf-8") if readme_path.exists() else None

    async def generate_many(
        self,
        directories: Sequence[str | Path],
        dry_run: bool = False,
    ) -> list[GenerationResult]:
        """Generate READMEs for several modules concurrently.

        Returns:
            One result per directory, in input order.
        """
        semaphore = asyncio.Semaphore(self._settings.max_concurrency)

        async def bounded(directory: str | Path) -> GenerationResult:
            async with semaphore:
                return await self.generate(directory, dry_run=dry_run)

        return list(await asyncio.gather(*(bounded(d) for d in directories)))

    def update_root_readme(
        self,
        base_dir: str | Path,
        results: Sequence[GenerationResult],
        dry_run: bool = False,
    ) -> bool:
        """Refresh the module table in the README above base_dir.

        The table replaces whatever sits between the BEGIN_MODULES and
        END_MODULES markers.

        Returns:
            True if the table was (or in a dry run, would be) updated.
        """
        root_readme = Path(base_dir).resolve().parent / "README.md"
        if not root_readme.exists():
            logger.info(f"No root README.md found at {root_readme}")
            return False

        rows = [
            (
                result.directory.name,
                Path(os.path.relpath(result.directory.resolve(), root_readme.parent)).as_posix(),
                MODULE_TYPE,
                extract_description(result.content),
            )
            for result in results
            if result.ok
        ]

        content = root_readme.read_text(encoding="utf-8")
        updated = replace_between_markers(content, MODULES_BEGIN, MODULES_END, render_module_table(rows))
        if updated is None:
            logger.warning(
                f"Module markers not found in {root_readme}; "
                f"add {MODULES_BEGIN} and {MODULES_END} to enable the module table"
            )
            return False

        if not dry_run:
            root_readme.write_text(updated, encoding="utf-8")
        logger.info(f"Root README table updated with {len(rows)} module(s) (dry_run={dry_run})")
        return True
