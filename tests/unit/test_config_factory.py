"""Unit tests for settings and the component factory."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from readmegen.core.config import PROVIDERS, Settings
from readmegen.core.factory import ComponentFactory
from readmegen.core.logging_config import setup_logging
from readmegen.strategies.describers import HeuristicDescriber, OpenAIDescriber
from readmegen.strategies.scanners import HclRegexScanner
from readmegen.strategies.sources import LocalModuleSource


def make_settings(**overrides) -> Settings:
    values = {
        "groq_api_key": "",
        "github_token": "",
        "openai_api_key": "",
        "anthropic_api_key": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self):
        """Test that settings fall back to the documented defaults."""
        settings = make_settings()

        assert settings.scanner_type == "hcl_regex"
        assert settings.scanner_quote_aware is False
        assert settings.duplicate_policy == "reject"
        assert settings.ai_provider == "groq"
        assert settings.resolved_model == PROVIDERS["groq"]["default_model"]
        assert settings.resolved_base_url == PROVIDERS["groq"]["base_url"]

    def test_provider_is_normalized(self):
        """Test that the provider name is lowercased and selects its API key."""
        settings = make_settings(ai_provider="GitHub", github_token="ghp-test")

        assert settings.ai_provider == "github"
        assert settings.provider["display_name"] == "GitHub Models"
        assert settings.resolve_api_key() == "ghp-test"

    def test_unknown_provider(self):
        """Test that an unknown AI provider is rejected."""
        with pytest.raises(ValidationError):
            make_settings(ai_provider="mystery")

    def test_unknown_duplicate_policy(self):
        """Test that an unknown duplicate policy is rejected."""
        with pytest.raises(ValidationError):
            make_settings(duplicate_policy="first_wins")

    def test_overrides(self):
        """Test that model, base URL and log level overrides are applied."""
        settings = make_settings(ai_model="custom", ai_base_url="http://localhost:8000/v1", log_level="debug")

        assert settings.resolved_model == "custom"
        assert settings.resolved_base_url == "http://localhost:8000/v1"
        assert settings.log_level == "DEBUG"

    def test_environment(self, monkeypatch):
        """Test that settings are read from environment variables."""
        monkeypatch.setenv("AI_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("MAX_CONCURRENCY", "8")

        settings = Settings(_env_file=None)

        assert settings.ai_provider == "openai"
        assert settings.resolve_api_key() == "sk-env"
        assert settings.max_concurrency == 8


class TestSetupLogging:
    """Test suite for logging setup."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_console_only(self):
        """Test that only the console handler is installed without a log directory."""
        root = setup_logging(make_settings())

        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_log_files(self, tmp_path):
        """Test that info.log and error.log handlers are added with a log directory."""
        root = setup_logging(make_settings(log_dir=tmp_path / "logs"), verbose=True)

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 3
        assert (tmp_path / "logs" / "info.log").exists()
        assert (tmp_path / "logs" / "error.log").exists()

    def test_configure_logging_sets_up_structlog(self):
        """Test that configure_logging configures structlog."""
        structlog.reset_defaults()
        try:
            make_settings(log_level="warning").configure_logging()

            assert structlog.is_configured()
        finally:
            structlog.reset_defaults()


# =============================================================================
# Component Factory Tests
# =============================================================================


class TestComponentFactory:
    """Test suite for ComponentFactory."""

    def test_scanner(self):
        """Test that the scanner is built from settings and cached."""
        factory = ComponentFactory(make_settings(scanner_quote_aware=True))

        scanner = factory.get_scanner()

        assert isinstance(scanner, HclRegexScanner)
        assert scanner.quote_aware is True
        assert factory.get_scanner() is scanner

    def test_unknown_scanner(self):
        """Test that an unknown scanner type raises ValueError."""
        with pytest.raises(ValueError, match="Unknown scanner type"):
            ComponentFactory(make_settings()).get_scanner("tree_sitter")

    def test_heuristic_describer(self):
        """Test that the heuristic describer can be selected."""
        factory = ComponentFactory(make_settings(describer_type="heuristic"))
        assert isinstance(factory.get_describer(), HeuristicDescriber)

    def test_openai_describer_with_key(self):
        """Test that the OpenAI describer is built when the provider key is set."""
        factory = ComponentFactory(make_settings(ai_provider="openai", openai_api_key="sk-test"))

        describer = factory.get_describer()

        assert isinstance(describer, OpenAIDescriber)
        assert describer.model == "gpt-4o"
        assert describer.name == "OpenAI (gpt-4o)"

    def test_missing_key_falls_back(self):
        """Test that a missing API key falls back to the heuristic describer."""
        factory = ComponentFactory(make_settings())
        assert isinstance(factory.get_describer(), HeuristicDescriber)

    def test_missing_key_without_fallback(self):
        """Test that a missing API key raises when fallback is disabled."""
        factory = ComponentFactory(make_settings(llm_fallback_to_heuristic=False))

        with pytest.raises(ValueError, match="GROQ_API_KEY"):
            factory.get_describer()

    def test_unknown_describer(self):
        """Test that an unknown describer type raises ValueError."""
        with pytest.raises(ValueError, match="Unknown describer type"):
            ComponentFactory(make_settings()).get_describer("markov")

    def test_source(self):
        """Test that the local source receives the configured repository."""
        factory = ComponentFactory(make_settings(github_repository="acme/infra"))

        source = factory.get_source()

        assert isinstance(source, LocalModuleSource)
        assert source.repository() == "acme/infra"

    def test_assembler_shares_synthesizer(self):
        """Test that the assembler reuses the cached synthesizer."""
        factory = ComponentFactory(make_settings())
        assert factory.get_assembler()._synthesizer is factory.get_synthesizer()

    def test_clear_cache(self):
        """Test that clear_cache forces new instances."""
        factory = ComponentFactory(make_settings())
        scanner = factory.get_scanner()

        factory.clear_cache()

        assert factory.get_scanner() is not scanner
