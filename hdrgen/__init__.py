"""Generate C/C++ headers whose shared declarations are defined once per translation unit."""

from .engine import HeaderEngine
from .errors import (
    CycleError,
    DuplicateHeaderError,
    DuplicateNameError,
    HdrgenError,
    InconsistentDeclarationError,
    InvalidDeclarationError,
    MissingAssignmentError,
    MissingDependencyError,
    UnknownDeclarationError,
    UnknownHeaderError,
    ValidationErrors,
)
from .models import Declaration, DependencyPolicy, Header, HeaderGuard, Kind, Language, Variadic

__all__ = [
    "CycleError",
    "Declaration",
    "DependencyPolicy",
    "DuplicateHeaderError",
    "DuplicateNameError",
    "HdrgenError",
    "Header",
    "HeaderEngine",
    "HeaderGuard",
    "InconsistentDeclarationError",
    "InvalidDeclarationError",
    "Kind",
    "Language",
    "MissingAssignmentError",
    "MissingDependencyError",
    "UnknownDeclarationError",
    "UnknownHeaderError",
    "ValidationErrors",
    "Variadic",
]
