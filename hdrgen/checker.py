"""Whole-graph validation run before any header is emitted."""

from __future__ import annotations

from typing import List

from .assignments import AssignmentTable
from .errors import (
    HdrgenError,
    InconsistentDeclarationError,
    MissingAssignmentError,
    UnknownDeclarationError,
    ValidationErrors,
)
from .graph import DependencyGraph
from .logging import get_logger
from .models import DependencyPolicy
from .registry import DeclarationRegistry


class ConsistencyChecker:
    """Collects every structural problem instead of stopping at the first.

    Conflicting definitions are rejected by the registry at registration
    time; this checker covers what can only be judged on the complete graph.
    """

    def __init__(
        self,
        registry: DeclarationRegistry,
        assignments: AssignmentTable,
        policy: DependencyPolicy = DependencyPolicy.AUTO,
    ) -> None:
        self.registry = registry
        self.assignments = assignments
        self.policy = policy
        self.graph = DependencyGraph(registry)
        self.logger = get_logger("checker")

    def check(self) -> List[HdrgenError]:
        errors: List[HdrgenError] = []
        errors.extend(self.check_fingerprints())
        errors.extend(self.graph.find_cycles())
        errors.extend(self.graph.missing_dependencies())
        errors.extend(self._check_assigned_names())
        if self.policy is DependencyPolicy.STRICT:
            errors.extend(self._check_strict_assignments())
        self.logger.debug(
            "Checked %d declaration(s) across %d header(s): %d problem(s)",
            len(self.registry),
            len(self.assignments),
            len(errors),
        )
        return errors

    def validate(self) -> None:
        errors = self.check()
        if errors:
            raise ValidationErrors(errors)

    def check_fingerprints(self) -> List[HdrgenError]:
        """Report entries whose content no longer matches their registration."""
        errors: List[HdrgenError] = []
        for declaration in self.registry:
            if declaration.fingerprint() != self.registry.recorded_fingerprint(declaration.name):
                errors.append(InconsistentDeclarationError(declaration.name))
        return errors

    def _check_assigned_names(self) -> List[HdrgenError]:
        errors: List[HdrgenError] = []
        for header in self.assignments:
            for name in header.assigned:
                if name not in self.registry:
                    errors.append(UnknownDeclarationError(name, f"assigned to '{header.name}'"))
        return errors

    def _check_strict_assignments(self) -> List[HdrgenError]:
        errors: List[HdrgenError] = []
        for header in self.assignments:
            assigned = set(header.assigned)
            for name in header.assigned:
                if name not in self.registry:
                    continue
                missing = [dep for dep in self.graph.dependencies_of(name) if dep not in assigned]
                if missing:
                    errors.append(MissingAssignmentError(header.name, name, missing))
        return errors


__all__ = ["ConsistencyChecker"]
