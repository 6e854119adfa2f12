"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables and is
passed explicitly to every component. Nothing in the scanning,
classification or synthesis code reads the environment.
"""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# OpenAI-compatible chat endpoints, keyed by provider name
PROVIDERS: dict[str, dict[str, str]] = {
    "groq": {
        "display_name": "Groq",
        "base_url": "https://api.groq.com/openai/v1",
        "default_model": "llama-3.3-70b-versatile",
        "api_key_setting": "groq_api_key",
    },
    "github": {
        "display_name": "GitHub Models",
        "base_url": "https://models.inference.ai.azure.com",
        "default_model": "gpt-4o",
        "api_key_setting": "github_token",
    },
    "openai": {
        "display_name": "OpenAI",
        "base_url": "https://api.openai.com/v1",
        "default_model": "gpt-4o",
        "api_key_setting": "openai_api_key",
    },
    "anthropic": {
        "display_name": "Anthropic Claude",
        "base_url": "https://api.anthropic.com/v1/",
        "default_model": "claude-sonnet-4-20250514",
        "api_key_setting": "anthropic_api_key",
    },
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Scanning
    scanner_type: str = Field(
        default="hcl_regex",
        description="Declaration scanner strategy: 'hcl_regex'.",
    )
    scanner_quote_aware: bool = Field(
        default=False,
        description="Skip braces inside quoted strings and comments when extracting blocks.",
    )
    duplicate_policy: Literal["reject", "last_wins"] = Field(
        default="reject",
        description="How duplicate declaration names within one module are handled.",
    )

    # Module files
    file_patterns: list[str] = Field(
        default=["*.tf"],
        description="File name patterns that make up a module.",
    )
    exclude_dirs: list[str] = Field(
        default=[".git", "node_modules", ".terraform", "vendor", "__pycache__"],
        description="Directory names skipped when reading and discovering modules.",
    )
    github_repository: str | None = Field(
        default=None,
        description="Repository in 'owner/repo' form used in module sources.",
    )
    default_version_tag: str = Field(
        default="v0.0.0",
        description="Version tag used when the repository has no tags.",
    )

    # Description
    describer_type: str = Field(
        default="openai",
        description="Describer strategy: 'openai' or 'heuristic'.",
    )
    llm_fallback_to_heuristic: bool = Field(
        default=True,
        description="Use the heuristic describer when the LLM is unavailable or fails.",
    )
    ai_provider: str = Field(
        default="groq",
        description="OpenAI-compatible provider: groq, github, openai, anthropic.",
    )
    ai_model: str | None = Field(
        default=None,
        description="Model name; defaults to the provider's default model.",
    )
    ai_base_url: str | None = Field(
        default=None,
        description="Override for the provider base URL.",
    )
    ai_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    ai_max_tokens: int = Field(default=4000, gt=0)
    ai_timeout: float = Field(default=60.0, gt=0, description="Request timeout in seconds.")
    ai_max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries on rate limits and transient errors.",
    )

    # Provider credentials
    groq_api_key: str = Field(default="", description="Groq API key.")
    github_token: str = Field(default="", description="GitHub token for GitHub Models.")
    openai_api_key: str = Field(default="", description="OpenAI API key.")
    anthropic_api_key: str = Field(default="", description="Anthropic API key.")

    # Batch
    max_concurrency: int = Field(
        default=4,
        ge=1,
        description="Modules generated concurrently.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Directory for info.log and error.log; console only when unset.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("ai_provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Normalize and check the provider name."""
        v = v.lower()
        if v not in PROVIDERS:
            raise ValueError(f"Unknown AI provider: {v}. Available: {', '.join(PROVIDERS)}")
        return v

    @property
    def provider(self) -> dict[str, str]:
        """Return the configuration of the selected provider."""
        return PROVIDERS[self.ai_provider]

    @property
    def resolved_model(self) -> str:
        return self.ai_model or self.provider["default_model"]

    @property
    def resolved_base_url(self) -> str:
        return self.ai_base_url or self.provider["base_url"]

    def resolve_api_key(self) -> str:
        """Return the API key of the selected provider (may be empty)."""
        return getattr(self, self.provider["api_key_setting"])

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=level,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
