"""Catalog of declarations keyed by unique name."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Tuple

from .errors import DuplicateNameError, InvalidDeclarationError, UnknownDeclarationError
from .kinds import is_identifier, validate_body
from .logging import get_logger
from .models import Declaration, Kind


class DeclarationRegistry:
    """Owns every declaration of one generation run.

    Iteration follows registration order, which the dependency graph uses to
    break ties. Failed calls leave the registry exactly as it was.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Declaration] = {}
        self._positions: Dict[str, int] = {}
        self._fingerprints: Dict[str, str] = {}
        self._revision = 0
        self.logger = get_logger("registry")

    @property
    def revision(self) -> int:
        """Counter bumped by every effective change."""
        return self._revision

    def register(
        self,
        name: str,
        kind: Kind | str,
        body: str,
        dependencies: Iterable[str] = (),
    ) -> Declaration:
        declaration = self._build(name, kind, body, dependencies)
        existing = self._entries.get(name)
        if existing is not None:
            if existing.same_definition(declaration.kind, declaration.body, declaration.dependencies):
                self.logger.debug("Declaration %s re-registered identically; ignoring", name)
                return existing
            raise DuplicateNameError(name, _describe_difference(existing, declaration))

        self._entries[name] = declaration
        self._positions[name] = len(self._positions)
        self._fingerprints[name] = declaration.fingerprint()
        self._revision += 1
        self.logger.debug(
            "Registered %s %s (%d dependencies)", declaration.kind.value, name, len(declaration.dependencies)
        )
        return declaration

    def replace(
        self,
        name: str,
        kind: Kind | str,
        body: str,
        dependencies: Iterable[str] = (),
    ) -> Declaration:
        """Update a declaration in place, keeping its registration position."""
        if name not in self._entries:
            raise UnknownDeclarationError(name, "cannot replace a declaration that was never registered")
        declaration = self._build(name, kind, body, dependencies)
        self._entries[name] = declaration
        self._fingerprints[name] = declaration.fingerprint()
        self._revision += 1
        self.logger.debug("Replaced declaration %s", name)
        return declaration

    def lookup(self, name: str) -> Declaration:
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownDeclarationError(name) from None

    def position(self, name: str) -> int:
        try:
            return self._positions[name]
        except KeyError:
            raise UnknownDeclarationError(name) from None

    def recorded_fingerprint(self, name: str) -> str:
        try:
            return self._fingerprints[name]
        except KeyError:
            raise UnknownDeclarationError(name) from None

    def names(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[Declaration]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _build(
        name: str,
        kind: Kind | str,
        body: str,
        dependencies: Iterable[str],
    ) -> Declaration:
        if not isinstance(name, str) or not is_identifier(name):
            raise InvalidDeclarationError(str(name), "name must be a C identifier")
        try:
            resolved_kind = Kind.parse(kind)
        except ValueError as exc:
            raise InvalidDeclarationError(name, str(exc)) from exc
        if not isinstance(body, str):
            raise InvalidDeclarationError(name, "body must be text")
        deps = _normalise_dependencies(dependencies)
        problem = validate_body(resolved_kind, name, body)
        if problem:
            raise InvalidDeclarationError(name, problem)
        return Declaration(name=name, kind=resolved_kind, body=body, dependencies=deps)


def _normalise_dependencies(dependencies: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(dependencies, str):
        dependencies = [dependencies]
    seen: List[str] = []
    for dep in dependencies:
        dep = str(dep).strip()
        if dep and dep not in seen:
            seen.append(dep)
    return tuple(seen)


def _describe_difference(existing: Declaration, incoming: Declaration) -> str:
    if existing.kind is not incoming.kind:
        return f"kind {existing.kind.value} != {incoming.kind.value}"
    if existing.body != incoming.body:
        return "body differs"
    return "dependencies differ"


__all__ = ["DeclarationRegistry"]
