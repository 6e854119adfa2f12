"""Command line entry point.

Usage:
    readmegen ./modules/vpc ./modules/rds
    readmegen --all --base-dir ./infrastructure
    readmegen --describer heuristic --dry-run ./modules/vpc
"""

import argparse
import asyncio
import sys
from pathlib import Path

from readmegen.core.config import Settings, get_settings
from readmegen.core.factory import ComponentFactory
from readmegen.core.logging_config import get_logger, setup_logging
from readmegen.pipeline import ReadmeGenerator

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="readmegen",
        description="Generate README files for Terraform/OpenTofu modules.",
    )
    parser.add_argument("directories", nargs="*", help="Module directories to process.")
    parser.add_argument("--all", action="store_true", help="Process every module below --base-dir.")
    parser.add_argument("--base-dir", default=".", help="Base directory for --all (default: .).")
    parser.add_argument(
        "--describer",
        choices=["openai", "heuristic"],
        help="Override the describer strategy.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Do not write any file.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


async def run(args: argparse.Namespace, settings: Settings) -> int:
    """Run the generator for the parsed arguments.

    Returns:
        The process exit code.
    """
    factory = ComponentFactory(settings)
    generator = ReadmeGenerator(settings, factory)

    directories = [Path(d) for d in args.directories]
    if args.all:
        directories = factory.get_source().find_module_directories(args.base_dir)
        print(f"Found {len(directories)} module(s) in {args.base_dir}")

    if not directories:
        print("No directories to process.")
        return 0

    missing = [d for d in directories if not d.is_dir()]
    for directory in missing:
        logger.warning(f"Directory not found: {directory}")

    results = await generator.generate_many(
        [d for d in directories if d.is_dir()],
        dry_run=args.dry_run,
    )

    for result in results:
        if not result.ok:
            print(f"FAILED  {result.directory}: {result.error}")
        elif args.dry_run:
            print(f"DRY-RUN {result.readme_path} ({len(result.content)} chars)")
        else:
            print(f"OK      {result.readme_path}")

    succeeded = sum(1 for r in results if r.ok)
    failed = len(results) - succeeded + len(missing)

    if args.all and succeeded:
        await asyncio.to_thread(
            generator.update_root_readme, args.base_dir, results, dry_run=args.dry_run
        )

    print(f"Summary: {succeeded} succeeded, {failed} failed")
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.describer:
        settings = settings.model_copy(update={"describer_type": args.describer})
    setup_logging(settings, verbose=args.verbose)

    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
