"""Component Factory for strategy instantiation.

The Factory Pattern lets the pipeline pick scanner and describer
implementations at runtime from configuration.
"""

import logging

from readmegen.core.config import Settings, get_settings
from readmegen.interfaces.describer import BaseModuleDescriber
from readmegen.interfaces.scanner import BaseDeclarationScanner
from readmegen.interfaces.source import BaseModuleSource
from readmegen.strategies.describers import HeuristicDescriber, OpenAIDescriber
from readmegen.strategies.readme import ReadmeAssembler
from readmegen.strategies.scanners import HclRegexScanner
from readmegen.strategies.sources import LocalModuleSource
from readmegen.strategies.usage import UsageSynthesizer

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        scanner = factory.get_scanner()
        describer = factory.get_describer()
        synthesizer = factory.get_synthesizer()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._scanner_cache: BaseDeclarationScanner | None = None
        self._describer_cache: BaseModuleDescriber | None = None
        self._source_cache: BaseModuleSource | None = None
        self._synthesizer_cache: UsageSynthesizer | None = None
        self._assembler_cache: ReadmeAssembler | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_scanner(self, scanner_type: str | None = None) -> BaseDeclarationScanner:
        """Get a declaration scanner.

        Args:
            scanner_type: The scanner type to instantiate. If None, uses settings.

        Raises:
            ValueError: If the scanner type is unknown.
        """
        if self._scanner_cache is None or scanner_type is not None:
            scanner_type = scanner_type or self._settings.scanner_type

            logger.info(f"Instantiating scanner: {scanner_type}")

            match scanner_type:
                case "hcl_regex":
                    self._scanner_cache = HclRegexScanner(
                        quote_aware=self._settings.scanner_quote_aware,
                    )
                case _:
                    raise ValueError(
                        f"Unknown scanner type: {scanner_type}. Valid options: 'hcl_regex'"
                    )

        return self._scanner_cache

    def get_describer(self, describer_type: str | None = None) -> BaseModuleDescriber:
        """Get a module describer.

        The ``openai`` describer needs the selected provider's API key. When
        the key is missing and the heuristic fallback is enabled, the
        heuristic describer is returned instead.

        Args:
            describer_type: The describer type to instantiate. If None, uses settings.

        Raises:
            ValueError: If the type is unknown, or the API key is missing
                without fallback.
        """
        if self._describer_cache is None or describer_type is not None:
            describer_type = describer_type or self._settings.describer_type

            logger.info(f"Instantiating describer: {describer_type}")

            match describer_type:
                case "openai":
                    self._describer_cache = self._build_openai_describer()
                case "heuristic":
                    self._describer_cache = HeuristicDescriber()
                case _:
                    raise ValueError(
                        f"Unknown describer type: {describer_type}. "
                        f"Valid options: 'openai', 'heuristic'"
                    )

        return self._describer_cache

    def _build_openai_describer(self) -> BaseModuleDescriber:
        settings = self._settings
        provider = settings.provider
        api_key = settings.resolve_api_key()
        fallback = HeuristicDescriber() if settings.llm_fallback_to_heuristic else None

        if not api_key:
            env_name = provider["api_key_setting"].upper()
            if fallback is None:
                raise ValueError(f"{env_name} is required for {provider['display_name']}")
            logger.warning(f"{env_name} is not set, using the heuristic describer")
            return fallback

        return OpenAIDescriber(
            api_key=api_key,
            model=settings.resolved_model,
            base_url=settings.resolved_base_url,
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
            timeout=settings.ai_timeout,
            max_retries=settings.ai_max_retries,
            provider_name=provider["display_name"],
            fallback=fallback,
        )

    def get_source(self) -> BaseModuleSource:
        """Get the module source."""
        if self._source_cache is None:
            logger.info("Instantiating local module source")

            self._source_cache = LocalModuleSource(
                file_patterns=self._settings.file_patterns,
                exclude_dirs=self._settings.exclude_dirs,
                repository=self._settings.github_repository,
                default_tag=self._settings.default_version_tag,
            )

        return self._source_cache

    def get_synthesizer(self) -> UsageSynthesizer:
        """Get the usage synthesizer."""
        if self._synthesizer_cache is None:
            self._synthesizer_cache = UsageSynthesizer()
        return self._synthesizer_cache

    def get_assembler(self) -> ReadmeAssembler:
        """Get the README assembler."""
        if self._assembler_cache is None:
            self._assembler_cache = ReadmeAssembler(self.get_synthesizer())
        return self._assembler_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._scanner_cache = None
        self._describer_cache = None
        self._source_cache = None
        self._synthesizer_cache = None
        self._assembler_cache = None
        logger.debug("Component factory cache cleared")
