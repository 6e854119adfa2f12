"""OpenAI-compatible module describer.

Calls any OpenAI-compatible chat completions endpoint (Groq, GitHub
Models, OpenAI, Anthropic) for a description, features and usage groups.
Rate limits and transient errors are retried by the client itself.
"""

import logging

from openai import AsyncOpenAI

from readmegen.interfaces.describer import BaseModuleDescriber, DescriberError
from readmegen.interfaces.module import ModuleContext
from readmegen.strategies.describers.prompts import SYSTEM_PROMPT, build_user_prompt, parse_ai_response
from readmegen.strategies.usage.models import ModuleDescription

logger = logging.getLogger(__name__)


class OpenAIDescriber(BaseModuleDescriber):
    """Describer backed by an OpenAI-compatible chat completions API.

    Attributes:
        model: The chat model to use.
        fallback: Describer used when the API call or reply parsing fails.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        temperature: float = 0.1,
        max_tokens: int = 4000,
        timeout: float = 60.0,
        max_retries: int = 3,
        provider_name: str = "OpenAI",
        fallback: BaseModuleDescriber | None = None,
    ) -> None:
        """Initialize the describer.

        Args:
            api_key: API key of the provider.
            model: The chat model to use.
            base_url: Provider base URL (default: OpenAI).
            temperature: Sampling temperature; low for stable JSON.
            max_tokens: Maximum tokens in the reply.
            timeout: Request timeout in seconds.
            max_retries: Retries on 429 and transient errors.
            provider_name: Provider name for logs.
            fallback: Optional describer used when this one fails.
        """
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._provider_name = provider_name
        self._fallback = fallback

        logger.info(
            f"OpenAIDescriber initialized: provider={provider_name}, model={model}, "
            f"fallback={fallback.name if fallback else None}"
        )

    async def describe(self, context: ModuleContext) -> ModuleDescription:
        """Ask the LLM to describe a module.

        Args:
            context: The classified module context.

        Returns:
            The parsed ModuleDescription.

        Raises:
            DescriberError: If the call or parsing fails and no fallback is set.
        """
        module_name = context.meta.name
        logger.info(f"Calling {self._provider_name} for module '{module_name}'")

        try:
            content = await self._complete(SYSTEM_PROMPT, build_user_prompt(context))
            logger.info(f"LLM response received for '{module_name}': {len(content)} chars")
            return parse_ai_response(content)

        except Exception as e:
            logger.error(f"LLM description failed for '{module_name}': {e}")
            if self._fallback is not None:
                logger.warning(f"Falling back to {self._fallback.name} for '{module_name}'")
                return await self._fallback.describe(context)
            if isinstance(e, DescriberError):
                raise
            raise DescriberError(f"{self._provider_name} API error: {e}") from e

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one chat completion request and return the reply text."""
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )

        content = response.choices[0].message.content
        if not content:
            raise DescriberError(f"Empty response from {self._provider_name}")
        return content

    @property
    def name(self) -> str:
        return f"{self._provider_name} ({self._model})"

    @property
    def model(self) -> str:
        """Return the model name."""
        return self._model
