"""Core configuration and factory components."""

from readmegen.core.config import PROVIDERS, Settings, get_settings
from readmegen.core.factory import ComponentFactory

__all__ = [
    "PROVIDERS",
    "Settings",
    "get_settings",
    "ComponentFactory",
]
