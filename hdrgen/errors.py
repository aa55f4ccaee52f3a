"""Error types raised while registering, validating, and emitting headers."""

from __future__ import annotations

from typing import Iterable, List, Sequence


class HdrgenError(RuntimeError):
    """Base class for every hdrgen failure."""


class DuplicateNameError(HdrgenError):
    """Raised when a name is registered again with a different definition."""

    def __init__(self, name: str, detail: str | None = None) -> None:
        message = f"Declaration '{name}' is already registered with a different definition"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.name = name


class DuplicateHeaderError(HdrgenError):
    """Raised when a header name or its include guard is already taken."""

    def __init__(self, name: str, detail: str | None = None) -> None:
        message = f"Header '{name}' is already registered"
        if detail:
            message = f"Header '{name}' conflicts with an existing header: {detail}"
        super().__init__(message)
        self.name = name


class UnknownDeclarationError(HdrgenError):
    """Raised when a declaration name is not in the registry."""

    def __init__(self, name: str, context: str | None = None) -> None:
        message = f"Unknown declaration '{name}'"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)
        self.name = name


class UnknownHeaderError(HdrgenError):
    """Raised when a header name has not been registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown header '{name}'")
        self.name = name


class InvalidDeclarationError(HdrgenError):
    """Raised when a declaration's name or body is unusable."""

    def __init__(self, name: str, detail: str) -> None:
        super().__init__(f"Invalid declaration '{name}': {detail}")
        self.name = name
        self.detail = detail


class MissingDependencyError(HdrgenError):
    """A declaration depends on names that were never registered."""

    def __init__(self, name: str, missing: Sequence[str]) -> None:
        joined = ", ".join(missing)
        super().__init__(f"Declaration '{name}' depends on unregistered name(s): {joined}")
        self.name = name
        self.missing = list(missing)


class MissingAssignmentError(HdrgenError):
    """Under the strict policy, a dependency is not assigned to the header that needs it."""

    def __init__(self, header: str, name: str, missing: Sequence[str]) -> None:
        joined = ", ".join(missing)
        super().__init__(
            f"Header '{header}' assigns '{name}' but not its dependencies: {joined}"
        )
        self.header = header
        self.name = name
        self.missing = list(missing)


class InconsistentDeclarationError(HdrgenError):
    """A registry entry changed after it was registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Declaration '{name}' was modified after registration")
        self.name = name


class CycleError(HdrgenError):
    """A set of declarations depends on itself."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = list(names)
        super().__init__("Dependency cycle between: " + ", ".join(self.names))


class ValidationErrors(HdrgenError):
    """Aggregates every structural problem found during validation."""

    def __init__(self, errors: Sequence[HdrgenError]) -> None:
        self.errors: List[HdrgenError] = list(errors)
        lines = [f"{len(self.errors)} validation error(s):"]
        lines.extend(f"  - {error}" for error in self.errors)
        super().__init__("\n".join(lines))

    def of_type(self, error_type: type) -> List[HdrgenError]:
        return [error for error in self.errors if isinstance(error, error_type)]


__all__ = [
    "CycleError",
    "DuplicateHeaderError",
    "DuplicateNameError",
    "HdrgenError",
    "InconsistentDeclarationError",
    "InvalidDeclarationError",
    "MissingAssignmentError",
    "MissingDependencyError",
    "UnknownDeclarationError",
    "UnknownHeaderError",
    "ValidationErrors",
]
