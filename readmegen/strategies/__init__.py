"""Concrete strategy implementations."""

from readmegen.strategies.describers import (
    HeuristicDescriber,
    OpenAIDescriber,
)
from readmegen.strategies.readme import (
    ReadmeAssembler,
)
from readmegen.strategies.scanners import (
    HclRegexScanner,
)
from readmegen.strategies.sources import (
    LocalModuleSource,
)
from readmegen.strategies.usage import (
    UsageSynthesizer,
)

__all__ = [
    "HclRegexScanner",
    "HeuristicDescriber",
    "LocalModuleSource",
    "OpenAIDescriber",
    "ReadmeAssembler",
    "UsageSynthesizer",
]
