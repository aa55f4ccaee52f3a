"""Manifest loading for hdrgen (hdrgen.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .engine import HeaderEngine
from .kinds import is_identifier, macro_body, prototype_body, typedef_body
from .logging import get_logger
from .models import DependencyPolicy, HeaderGuard, Kind, Language, Variadic

MANIFEST_NAME = "hdrgen.yml"

logger = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the manifest cannot be parsed."""


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps plain scalars such as ``NULL``, ``TRUE`` or ``0x10`` as text.

    C identifiers like ``NULL``, ``true`` or ``yes`` are valid declaration
    names and macro values are emitted verbatim, so only ``~`` and empty
    values still load as ``None``.
    """


_TEXT_TAGS = {
    "tag:yaml.org,2002:null",
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
}

ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TEXT_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ManifestLoader.add_implicit_resolver("tag:yaml.org,2002:null", re.compile(r"^(?:~|)$"), ["~", ""])


@dataclass
class DeclarationSpec:
    """One declaration entry from the manifest."""

    name: str
    kind: Kind
    body: str
    depends_on: List[str] = field(default_factory=list)
    headers: List[str] = field(default_factory=list)


@dataclass
class HeaderSpec:
    """One header entry from the manifest."""

    name: str
    language: Language = Language.ANY
    guard: Optional[HeaderGuard] = None
    appendix: Optional[str] = None
    trailer: Optional[str] = None
    declarations: List[str] = field(default_factory=list)


@dataclass
class Manifest:
    """Represents everything defined in hdrgen.yml."""

    root: Path
    dependency_policy: DependencyPolicy = DependencyPolicy.AUTO
    output_dir: Optional[Path] = None
    templates_dir: Optional[Path] = None
    declarations: List[DeclarationSpec] = field(default_factory=list)
    headers: List[HeaderSpec] = field(default_factory=list)


def load_manifest(manifest_path: Path) -> Manifest:
    """Load a manifest from disk."""
    manifest_file = _resolve_manifest_path(Path(manifest_path))
    if not manifest_file.exists():
        raise ConfigError(f"Manifest not found: {manifest_file}")
    root = manifest_file.parent.resolve()

    data = _read_manifest(manifest_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{manifest_file.name} must contain a mapping at the root")

    options = _as_dict(data.get("options"))
    policy_name = _as_str(options.get("dependency_policy")) or DependencyPolicy.AUTO.value
    try:
        policy = DependencyPolicy(policy_name.strip().lower())
    except ValueError:
        raise ConfigError(
            f"Unknown dependency_policy '{policy_name}' (expected 'auto' or 'strict')"
        ) from None
    output_dir_str = _as_str(options.get("output_dir"))
    templates_dir_str = _as_str(options.get("templates_dir"))

    declarations = [
        _parse_declaration(entry, index)
        for index, entry in enumerate(_as_list(data.get("declarations"), "declarations"))
    ]
    headers = [
        _parse_header(entry, index)
        for index, entry in enumerate(_as_list(data.get("headers"), "headers"))
    ]
    logger.debug(
        "Loaded manifest %s: %d declaration(s), %d header(s)",
        manifest_file,
        len(declarations),
        len(headers),
    )

    return Manifest(
        root=root,
        dependency_policy=policy,
        output_dir=root / output_dir_str if output_dir_str else None,
        templates_dir=root / templates_dir_str if templates_dir_str else None,
        declarations=declarations,
        headers=headers,
    )


def build_engine(manifest: Manifest) -> HeaderEngine:
    """Populate a fresh engine from ``manifest``.

    Headers listed under ``headers`` are registered first, in file order;
    headers that only appear in a declaration's ``headers`` list follow in
    first-seen order.
    """
    engine = HeaderEngine(
        dependency_policy=manifest.dependency_policy,
        templates_dir=manifest.templates_dir,
    )
    for header in manifest.headers:
        engine.register_header(
            header.name,
            language=header.language,
            guard=header.guard,
            appendix=header.appendix,
            trailer=header.trailer,
        )
    for spec in manifest.declarations:
        engine.register_declaration(spec.name, spec.kind, spec.body, spec.depends_on)
        for header_name in spec.headers:
            if header_name not in engine.assignments:
                engine.register_header(header_name)

    for spec in manifest.declarations:
        for header_name in spec.headers:
            engine.assign(header_name, spec.name)
    for header in manifest.headers:
        for declaration_name in header.declarations:
            engine.assign(header.name, declaration_name)
    return engine


def _resolve_manifest_path(manifest_path: Path) -> Path:
    manifest_path = manifest_path.expanduser()
    if manifest_path.is_dir():
        return (manifest_path / MANIFEST_NAME).resolve()
    return manifest_path.resolve()


def _read_manifest(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.load(text, Loader=ManifestLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_declaration(entry: Any, index: int) -> DeclarationSpec:
    if not isinstance(entry, dict):
        raise ConfigError(f"declarations[{index}] must be a mapping")
    name = _as_str(entry.get("name"))
    if not name:
        raise ConfigError(f"declarations[{index}] is missing 'name'")
    kind_value = _as_str(entry.get("kind"))
    if not kind_value:
        raise ConfigError(f"Declaration '{name}' is missing 'kind'")
    try:
        kind = Kind.parse(kind_value)
    except ValueError as exc:
        raise ConfigError(f"Declaration '{name}': {exc}") from exc

    return DeclarationSpec(
        name=name,
        kind=kind,
        body=_declaration_body(name, kind, entry),
        depends_on=_as_str_list(entry.get("depends_on"), f"{name}.depends_on"),
        headers=_as_str_list(entry.get("headers"), f"{name}.headers"),
    )


def _declaration_body(name: str, kind: Kind, entry: Dict[str, Any]) -> str:
    body = entry.get("body")
    if isinstance(body, str) and body.strip():
        return body.rstrip("\n")

    if kind is Kind.TYPEDEF:
        type_ = _as_str(entry.get("type"))
        if not type_:
            raise ConfigError(f"Typedef '{name}' needs either 'body' or 'type'")
        return typedef_body(name, type_)
    if kind is Kind.MACRO:
        params = entry.get("params")
        token = name
        if params is not None:
            token = f"{name}({', '.join(_as_str_list(params, f'{name}.params'))})"
        return macro_body(token, _as_str(entry.get("value")))
    if kind is Kind.PROTOTYPE:
        returns = _as_str(entry.get("returns"))
        if not returns:
            raise ConfigError(f"Prototype '{name}' needs either 'body' or 'returns'")
        variadic = Variadic.VARIADIC if _as_bool(entry.get("variadic")) else Variadic.NARY
        params = _as_str_list(entry.get("params"), f"{name}.params")
        return prototype_body(returns, name, params, variadic)
    raise ConfigError(f"{kind.value.capitalize()} '{name}' needs a 'body'")


def _parse_header(entry: Any, index: int) -> HeaderSpec:
    if isinstance(entry, str):
        return HeaderSpec(name=entry)
    if not isinstance(entry, dict):
        raise ConfigError(f"headers[{index}] must be a mapping or a name")
    name = _as_str(entry.get("name"))
    if not name:
        raise ConfigError(f"headers[{index}] is missing 'name'")
    try:
        language = Language.parse(_as_str(entry.get("language")))
    except ValueError as exc:
        raise ConfigError(f"Header '{name}': {exc}") from exc

    return HeaderSpec(
        name=name,
        language=language,
        guard=_parse_guard(name, entry.get("guard")),
        appendix=_as_str(entry.get("appendix")),
        trailer=_as_str(entry.get("trailer")),
        declarations=_as_str_list(entry.get("declarations"), f"{name}.declarations"),
    )


def _parse_guard(header_name: str, value: Any) -> Optional[HeaderGuard]:
    if value is None:
        return None
    if isinstance(value, str):
        token, guard_value = value, None
    else:
        guard_data = _as_dict(value)
        token = _as_str(guard_data.get("token"))
        if not token:
            raise ConfigError(f"Header '{header_name}' guard needs a 'token'")
        guard_value = _as_str(guard_data.get("value"))
    if not is_identifier(token):
        raise ConfigError(f"Header '{header_name}' guard token must be a C identifier, got {token!r}")
    return HeaderGuard(token=token, value=guard_value)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any, key: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list")
    return value


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, Sequence):
        raise ConfigError(f"'{key}' must be a list of names")
    items: List[str] = []
    for item in value:
        text = _as_str(item)
        if not text:
            raise ConfigError(f"'{key}' entries must be names, got {item!r}")
        items.append(text)
    return items


__all__ = [
    "ConfigError",
    "DeclarationSpec",
    "HeaderSpec",
    "MANIFEST_NAME",
    "Manifest",
    "build_engine",
    "load_manifest",
]
