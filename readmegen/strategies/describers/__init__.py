"""Concrete module describer implementations."""

from readmegen.strategies.describers.heuristic import HeuristicDescriber
from readmegen.strategies.describers.openai import OpenAIDescriber
from readmegen.strategies.describers.prompts import (
    SYSTEM_PROMPT,
    build_prompt_payload,
    build_user_prompt,
    parse_ai_response,
)

__all__ = [
    "HeuristicDescriber",
    "OpenAIDescriber",
    "SYSTEM_PROMPT",
    "build_prompt_payload",
    "build_user_prompt",
    "parse_ai_response",
]
