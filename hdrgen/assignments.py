"""Headers and the many-to-many declaration -> header relation."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from .errors import DuplicateHeaderError, UnknownDeclarationError, UnknownHeaderError
from .guards import GuardSynthesizer
from .kinds import is_identifier
from .logging import get_logger
from .models import Header, HeaderGuard, Language
from .registry import DeclarationRegistry


class AssignmentTable:
    """Tracks which declaration names each header must contain.

    Headers hold names only; bodies are looked up in the registry at render
    time so one edit reaches every header.
    """

    def __init__(self, registry: DeclarationRegistry, guards: GuardSynthesizer | None = None) -> None:
        self.registry = registry
        self.guards = guards or GuardSynthesizer()
        self._headers: Dict[str, Header] = {}
        self._guard_owners: Dict[str, str] = {}
        self._revision = 0
        self.logger = get_logger("assignments")

    @property
    def revision(self) -> int:
        return self._revision

    def register_header(
        self,
        name: str,
        *,
        language: Language | str | None = None,
        guard: Optional[HeaderGuard] = None,
        appendix: Optional[str] = None,
        trailer: Optional[str] = None,
    ) -> Header:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Header name must be non-empty text")
        if name in self._headers:
            raise DuplicateHeaderError(name)
        if guard is not None and not is_identifier(guard.token):
            raise ValueError(f"Guard token for '{name}' must be a C identifier: {guard.token!r}")
        header = Header(
            name=name,
            language=Language.parse(language),
            guard=guard,
            appendix=appendix,
            trailer=trailer,
        )
        token = self.guards.header_guard(header)
        owner = self._guard_owners.get(token)
        if owner is not None:
            raise DuplicateHeaderError(name, f"guard {token} already used by '{owner}'")
        self._headers[name] = header
        self._guard_owners[token] = name
        self._revision += 1
        self.logger.debug("Registered header %s (guard %s)", name, token)
        return header

    def assign(self, header_name: str, declaration_name: str) -> None:
        header = self.header(header_name)
        if declaration_name not in self.registry:
            raise UnknownDeclarationError(declaration_name, f"while assigning to '{header_name}'")
        if declaration_name in header.assigned:
            return
        header.assigned.append(declaration_name)
        self._revision += 1
        self.logger.debug("Assigned %s to %s", declaration_name, header_name)

    def header(self, name: str) -> Header:
        try:
            return self._headers[name]
        except KeyError:
            raise UnknownHeaderError(name) from None

    def headers_for(self, declaration_name: str) -> List[str]:
        """Return the headers explicitly assigned ``declaration_name``."""
        return [header.name for header in self._headers.values() if declaration_name in header.assigned]

    def names(self) -> List[str]:
        return list(self._headers)

    def __contains__(self, name: object) -> bool:
        return name in self._headers

    def __iter__(self) -> Iterator[Header]:
        return iter(list(self._headers.values()))

    def __len__(self) -> int:
        return len(self._headers)


__all__ = ["AssignmentTable"]
