"""Unit tests for the generation pipeline and the command line."""

import asyncio
import threading
import time
from unittest.mock import MagicMock

import pytest

from readmegen import cli
from readmegen.core.config import Settings
from readmegen.core.factory import ComponentFactory
from readmegen.interfaces import ModuleMeta
from readmegen.pipeline import ReadmeGenerator
from readmegen.strategies.readme import MODULES_BEGIN, MODULES_END, TF_DOCS_BEGIN, TF_DOCS_END


def write_module(directory, files):
    directory.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        (directory / filename).write_text(content, encoding="utf-8")
    return directory


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        describer_type="heuristic",
        github_repository="acme/infra",
        max_concurrency=2,
    )


@pytest.fixture
def generator(settings):
    return ReadmeGenerator(settings, ComponentFactory(settings))


@pytest.fixture
def base_dir(tmp_path, s3_files):
    base = tmp_path / "infrastructure"
    write_module(base / "s3", s3_files)
    write_module(base / "logs", {"variables.tf": 'variable "retention" {\n  type = number\n}\n'})
    return base


# =============================================================================
# ReadmeGenerator Tests
# =============================================================================


class TestReadmeGenerator:
    """Test suite for ReadmeGenerator."""

    def test_generate_dry_run(self, generator, base_dir):
        """Test that a dry run builds the README without writing it."""
        result = asyncio.run(generator.generate(base_dir / "s3", dry_run=True))

        assert result.ok, result.error
        assert result.written is False
        assert not result.readme_path.exists()
        assert result.content.startswith("# Module: s3")
        assert "### Usage with Glacier Storage Class" in result.content
        assert 'storage_class = "glacier"' in result.content
        assert "git::https://github.com/acme/infra.git//" in result.content

    def test_generate_writes_and_keeps_tf_docs(self, generator, base_dir):
        """Test that the README is written and its terraform-docs section kept."""
        readme = base_dir / "s3" / "README.md"
        readme.write_text(f"old\n{TF_DOCS_BEGIN}\ninputs table\n{TF_DOCS_END}\n", encoding="utf-8")

        result = asyncio.run(generator.generate(base_dir / "s3"))

        assert result.written is True
        content = readme.read_text(encoding="utf-8")
        assert content == result.content
        assert f"{TF_DOCS_BEGIN}\ninputs table\n{TF_DOCS_END}" in content
        assert not content.startswith("old")

    def test_generation_is_deterministic(self, generator, base_dir):
        """Test that two runs over the same module produce identical READMEs."""
        first = asyncio.run(generator.generate(base_dir / "s3", dry_run=True))
        second = asyncio.run(generator.generate(base_dir / "s3", dry_run=True))

        assert first.content == second.content

    def test_duplicate_names_fail_the_module(self, generator, tmp_path):
        """Test that duplicate variable names fail the module with a diagnostic."""
        module = write_module(
            tmp_path / "dup",
            {
                "a.tf": 'variable "name" {\n  type = string\n}\n',
                "b.tf": 'variable "name" {\n  default = "x"\n}\n',
            },
        )

        result = asyncio.run(generator.generate(module, dry_run=True))

        assert not result.ok
        assert "Duplicate declarations: name" in result.error

    def test_last_wins_policy(self, tmp_path):
        """Test that the last_wins policy keeps the last declaration."""
        settings = Settings(_env_file=None, describer_type="heuristic", duplicate_policy="last_wins")
        generator = ReadmeGenerator(settings)
        files = {
            "a.tf": 'variable "name" {\n  type = string\n}\n',
            "b.tf": 'variable "name" {\n  default = "x"\n}\n',
        }

        context = generator.build_context(ModuleMeta(name="dup", source="./dup"), files)

        assert [d.name for d in context.classified.optional] == ["name"]
        assert context.classified.required == ()

    def test_missing_directory(self, generator, tmp_path):
        """Test that a missing directory is reported as a failed result."""
        result = asyncio.run(generator.generate(tmp_path / "missing", dry_run=True))

        assert not result.ok
        assert "not found" in result.error

    def test_generate_many_keeps_input_order(self, generator, base_dir, tmp_path):
        """Test that batch results follow input order, failures included."""
        directories = [base_dir / "s3", tmp_path / "missing", base_dir / "logs"]

        results = asyncio.run(generator.generate_many(directories, dry_run=True))

        assert [r.directory for r in results] == directories
        assert [r.ok for r in results] == [True, False, True]

    def test_blocking_steps_run_off_the_event_loop(self, generator, base_dir, monkeypatch):
        """Test that reading files and querying git run in a worker thread, not on the loop."""
        prepare_threads = []
        prepare_context = generator.prepare_context

        def recording_prepare_context(directory):
            prepare_threads.append(threading.get_ident())
            return prepare_context(directory)

        monkeypatch.setattr(generator, "prepare_context", recording_prepare_context)

        async def run():
            loop_thread = threading.get_ident()
            result = await generator.generate(base_dir / "s3", dry_run=True)
            return loop_thread, result

        loop_thread, result = asyncio.run(run())

        assert result.ok, result.error
        assert len(prepare_threads) == 1
        assert prepare_threads[0] != loop_thread

    def test_slow_module_does_not_stall_the_batch(self, generator, base_dir, monkeypatch):
        """Test that a slow module read overlaps with the other modules of a batch."""
        prepare_context = generator.prepare_context

        def slow_prepare_context(directory):
            time.sleep(0.5)
            return prepare_context(directory)

        monkeypatch.setattr(generator, "prepare_context", slow_prepare_context)

        started = time.monotonic()
        results = asyncio.run(generator.generate_many([base_dir / "s3", base_dir / "logs"], dry_run=True))
        elapsed = time.monotonic() - started

        assert all(r.ok for r in results)
        assert elapsed < 0.9

    def test_update_root_readme(self, generator, base_dir):
        """Test that the root module table replaces the marked section."""
        root = base_dir.parent / "README.md"
        root.write_text(f"# Infra\n\n{MODULES_BEGIN}\nstale\n{MODULES_END}\n", encoding="utf-8")
        results = asyncio.run(generator.generate_many([base_dir / "s3"], dry_run=True))

        assert generator.update_root_readme(base_dir, results) is True

        content = root.read_text(encoding="utf-8")
        assert "stale" not in content
        assert "| [s3](./infrastructure/s3) | Terraform/OpenTofu | Terraform module for S3 |" in content

    def test_update_root_readme_dry_run(self, generator, base_dir):
        """Test that a dry run leaves the root README untouched."""
        root = base_dir.parent / "README.md"
        original = f"{MODULES_BEGIN}\nstale\n{MODULES_END}\n"
        root.write_text(original, encoding="utf-8")
        results = asyncio.run(generator.generate_many([base_dir / "s3"], dry_run=True))

        assert generator.update_root_readme(base_dir, results, dry_run=True) is True
        assert root.read_text(encoding="utf-8") == original

    def test_update_root_readme_without_markers(self, generator, base_dir):
        """Test that a root README without markers is not changed."""
        (base_dir.parent / "README.md").write_text("# Infra\n", encoding="utf-8")
        assert generator.update_root_readme(base_dir, []) is False

    def test_update_root_readme_missing(self, generator, base_dir):
        """Test that a missing root README is skipped."""
        assert generator.update_root_readme(base_dir, []) is False


# =============================================================================
# Command Line Tests
# =============================================================================


class TestCli:
    """Test suite for the command line entry point."""

    @pytest.fixture(autouse=True)
    def isolated(self, monkeypatch, settings):
        monkeypatch.setattr(cli, "get_settings", lambda: settings)
        monkeypatch.setattr(cli, "setup_logging", MagicMock())

    def test_dry_run(self, base_dir, capsys):
        """Test a dry run from the command line."""
        exit_code = cli.main(["--dry-run", str(base_dir / "s3")])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "DRY-RUN" in out
        assert "Summary: 1 succeeded, 0 failed" in out
        assert not (base_dir / "s3" / "README.md").exists()

    def test_missing_directory_fails(self, base_dir, capsys):
        """Test that a missing directory makes the exit code 1."""
        exit_code = cli.main(["--dry-run", str(base_dir / "s3"), str(base_dir / "missing")])

        assert exit_code == 1
        assert "Summary: 1 succeeded, 1 failed" in capsys.readouterr().out

    def test_nothing_to_do(self, capsys):
        """Test that no directories exits with 0."""
        assert cli.main([]) == 0
        assert "No directories to process." in capsys.readouterr().out

    def test_all_writes_readmes_and_root_table(self, base_dir):
        """Test that --all writes every module README and the root table."""
        root = base_dir.parent / "README.md"
        root.write_text(f"{MODULES_BEGIN}\n{MODULES_END}\n", encoding="utf-8")

        exit_code = cli.main(["--all", "--base-dir", str(base_dir)])

        assert exit_code == 0
        assert (base_dir / "s3" / "README.md").exists()
        assert (base_dir / "logs" / "README.md").exists()
        assert "[logs](./infrastructure/logs)" in root.read_text(encoding="utf-8")

    def test_describer_override(self, base_dir, settings, monkeypatch):
        """Test that --describer overrides settings without mutating them."""
        captured = {}

        async def fake_run(args, run_settings):
            captured["settings"] = run_settings
            return 0

        monkeypatch.setattr(cli, "run", fake_run)

        assert cli.main(["--describer", "openai", str(base_dir / "s3")]) == 0
        assert captured["settings"].describer_type == "openai"
        assert settings.describer_type == "heuristic"
