"""Renders one header at a time from the registry and assignment table."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Set

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .assignments import AssignmentTable
from .graph import DependencyGraph
from .guards import GuardSynthesizer
from .logging import get_logger
from .models import DependencyPolicy, Language
from .registry import DeclarationRegistry

_LANGUAGE_FRAMES: Dict[Language, tuple[Optional[str], Optional[str]]] = {
    Language.ANY: (None, None),
    Language.C: (
        '#ifdef __cplusplus\n#error "This header can only be used by C"\n#endif',
        None,
    ),
    Language.C_AND_CXX: (
        '#ifdef __cplusplus\nextern "C" {\n#endif',
        "#ifdef __cplusplus\n}\n#endif",
    ),
    Language.CXX: (
        '#ifndef __cplusplus\n#error "This header can only be used by C++"\n#endif',
        None,
    ),
}

if set(_LANGUAGE_FRAMES) != set(Language):  # pragma: no cover - import-time guard
    raise RuntimeError("Every header language needs a frame")


class Emitter:
    """Computes a header's closure, orders it, and renders the guarded text.

    The emitter does not validate; callers run the consistency checker first
    (``HeaderEngine.emit`` does so implicitly).
    """

    TEMPLATE_NAME = "header.h.j2"

    def __init__(
        self,
        registry: DeclarationRegistry,
        assignments: AssignmentTable,
        *,
        policy: DependencyPolicy = DependencyPolicy.AUTO,
        guards: GuardSynthesizer | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.registry = registry
        self.assignments = assignments
        self.policy = policy
        self.guards = guards or assignments.guards
        self.graph = DependencyGraph(registry)
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)
        self.logger = get_logger("emitter")

    def closure(self, header_name: str) -> Set[str]:
        header = self.assignments.header(header_name)
        if self.policy is DependencyPolicy.STRICT:
            return set(header.assigned)
        return self.graph.closure(header.assigned)

    def ordered(self, header_name: str) -> List[str]:
        return self.graph.topological_order(self.closure(header_name))

    def render(self, header_name: str) -> str:
        header = self.assignments.header(header_name)
        names = self.ordered(header_name)
        blocks = [self.guards.block(self.registry.lookup(name)) for name in names]
        opening, closing = _LANGUAGE_FRAMES[header.language]
        template = self._env.get_template(self.TEMPLATE_NAME)
        rendered = template.render(
            guard=self.guards.header_guard(header),
            guard_value=header.guard.value if header.guard else None,
            opening=opening,
            closing=closing,
            blocks=blocks,
            appendix=_clean(header.appendix),
            trailer=_clean(header.trailer),
        )
        text = rendered.rstrip("\n") + "\n"
        self.logger.debug(
            "Rendered %s: %d declaration(s), %d byte(s)", header.name, len(names), len(text)
        )
        return text

    def _create_env(self, templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    stripped = text.strip("\n")
    return stripped if stripped.strip() else None


__all__ = ["Emitter"]
