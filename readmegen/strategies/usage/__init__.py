"""Variable classification and usage example synthesis."""

from readmegen.strategies.usage.classifier import apply_duplicate_policy, categorize, classify
from readmegen.strategies.usage.models import ModuleDescription, UsageGroup
from readmegen.strategies.usage.synthesizer import UsageBlock, UsageExamples, UsageSynthesizer

__all__ = [
    "ModuleDescription",
    "UsageBlock",
    "UsageExamples",
    "UsageGroup",
    "UsageSynthesizer",
    "apply_duplicate_policy",
    "categorize",
    "classify",
]
