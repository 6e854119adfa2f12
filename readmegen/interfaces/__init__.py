"""Abstract base classes and shared data types."""

from readmegen.interfaces.describer import BaseModuleDescriber, DescriberError
from readmegen.interfaces.module import Category, ClassifiedDeclarations, ModuleContext, ModuleMeta
from readmegen.interfaces.scanner import (
    BaseDeclarationScanner,
    Declaration,
    DuplicateDeclarationError,
    Validation,
)
from readmegen.interfaces.source import BaseModuleSource

__all__ = [
    "BaseDeclarationScanner",
    "BaseModuleDescriber",
    "BaseModuleSource",
    "Category",
    "ClassifiedDeclarations",
    "Declaration",
    "DescriberError",
    "DuplicateDeclarationError",
    "ModuleContext",
    "ModuleMeta",
    "Validation",
]
