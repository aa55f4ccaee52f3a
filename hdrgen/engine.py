"""Generation run facade: populate, validate, emit."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .assignments import AssignmentTable
from .checker import ConsistencyChecker
from .emitter import Emitter
from .errors import ValidationErrors
from .guards import GuardSynthesizer
from .logging import get_logger
from .models import Declaration, DependencyPolicy, Header, HeaderGuard, Kind, Language
from .registry import DeclarationRegistry


class HeaderEngine:
    """Owns one registry and assignment table for a single generation run.

    Engines share no state, so independent runs may proceed in parallel as
    long as each uses its own instance. ``emit`` and ``emit_all`` validate the
    whole graph before rendering and never return partial output.
    """

    def __init__(
        self,
        *,
        dependency_policy: DependencyPolicy | str = DependencyPolicy.AUTO,
        templates_dir: Path | None = None,
    ) -> None:
        self.dependency_policy = DependencyPolicy(dependency_policy)
        self.guards = GuardSynthesizer()
        self.registry = DeclarationRegistry()
        self.assignments = AssignmentTable(self.registry, self.guards)
        self.checker = ConsistencyChecker(self.registry, self.assignments, self.dependency_policy)
        self.emitter = Emitter(
            self.registry,
            self.assignments,
            policy=self.dependency_policy,
            guards=self.guards,
            templates_dir=templates_dir,
        )
        self._validated_revision: Optional[Tuple[int, int]] = None
        self.logger = get_logger("engine")

    def register_declaration(
        self,
        name: str,
        kind: Kind | str,
        body: str,
        dependencies: Iterable[str] = (),
    ) -> Declaration:
        return self.registry.register(name, kind, body, dependencies)

    def replace_declaration(
        self,
        name: str,
        kind: Kind | str,
        body: str,
        dependencies: Iterable[str] = (),
    ) -> Declaration:
        return self.registry.replace(name, kind, body, dependencies)

    def register_header(
        self,
        name: str,
        *,
        language: Language | str | None = None,
        guard: Optional[HeaderGuard] = None,
        appendix: Optional[str] = None,
        trailer: Optional[str] = None,
    ) -> Header:
        return self.assignments.register_header(
            name, language=language, guard=guard, appendix=appendix, trailer=trailer
        )

    def assign(self, header_name: str, declaration_name: str) -> None:
        self.assignments.assign(header_name, declaration_name)

    def validate(self) -> None:
        """Check the whole graph, or only fingerprints when nothing changed since the last clean pass."""
        revision = (self.registry.revision, self.assignments.revision)
        if revision == self._validated_revision:
            errors = self.checker.check_fingerprints()
        else:
            errors = self.checker.check()
        if not errors:
            self._validated_revision = revision
            self.logger.debug("Validation passed for %d declaration(s)", len(self.registry))
            return
        self._validated_revision = None
        for error in errors:
            self.logger.error("Validation failure (%s): %s", error.__class__.__name__, error)
        raise ValidationErrors(errors)

    def emit(self, header_name: str) -> str:
        self.assignments.header(header_name)
        self.validate()
        return self.emitter.render(header_name)

    def emit_all(self) -> Dict[str, str]:
        """Render every header in registration order, or none at all."""
        self.validate()
        rendered = {name: self.emitter.render(name) for name in self.assignments.names()}
        self.logger.info("Rendered %d header(s)", len(rendered))
        return rendered

    def closure(self, header_name: str) -> List[str]:
        """Declarations ``header_name`` will contain, in emission order."""
        return self.emitter.ordered(header_name)

    def sentinel(self, declaration_name: str) -> str:
        return self.guards.sentinel(self.registry.lookup(declaration_name))

    def header_guard(self, header_name: str) -> str:
        return self.guards.header_guard(self.assignments.header(header_name))

    def headers(self) -> List[str]:
        return self.assignments.names()


__all__ = ["HeaderEngine"]
