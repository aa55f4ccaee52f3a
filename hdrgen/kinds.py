"""Per-kind body construction and light body checks.

Bodies are opaque to the engine apart from the names they reference, so the
checks here only catch obvious authoring slips (a macro body that never
defines its macro, a prototype that never names its function). They are not a
C grammar.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional, Sequence

from .models import Kind, Variadic

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_TOKEN_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_identifier(name: str) -> bool:
    return bool(IDENTIFIER_PATTERN.match(name))


def typedef_body(name: str, type_: str) -> str:
    """Return ``typedef <type> <name>;``."""
    return f"typedef {_join_declarator(type_, name)};"


def macro_body(token: str, value: Optional[str] = None) -> str:
    """Return a ``#define`` line; ``token`` may carry a parameter list."""
    token = token.strip()
    if value is None or not str(value).strip():
        return f"#define {token}"
    return f"#define {token} {str(value).strip()}"


def macro_name(token: str) -> str:
    """Name of a macro token, without the parameter list of a function-like macro."""
    return token.split("(", 1)[0].strip()


def prototype_body(
    returns: str,
    name: str,
    params: Sequence[str] = (),
    variadic: Variadic = Variadic.NARY,
) -> str:
    """Return a function prototype such as ``void *memcpy(void *, const void *, size_t);``."""
    parts = [param.strip() for param in params if param and param.strip()]
    if variadic is Variadic.VARIADIC:
        parts.append("...")
    elif not parts:
        parts.append("void")
    return f"{_join_declarator(returns, name)}({', '.join(parts)});"


def _join_declarator(type_: str, name: str) -> str:
    type_ = type_.strip()
    if type_.endswith("*"):
        return f"{type_}{name}"
    return f"{type_} {name}"


def validate_body(kind: Kind, name: str, body: str) -> Optional[str]:
    """Return a problem description, or ``None`` when the body is acceptable."""
    if not body or not body.strip():
        return "body is empty"
    tokens = set(_TOKEN_PATTERN.findall(body))
    if name not in tokens:
        return f"body never mentions '{name}'"
    checker = _BODY_CHECKS[kind]
    return checker(name, body, tokens)


def _check_typedef(name: str, body: str, tokens: set) -> Optional[str]:
    if "typedef" not in tokens:
        return "typedef body has no 'typedef' keyword"
    return None


def _check_macro(name: str, body: str, tokens: set) -> Optional[str]:
    pattern = re.compile(rf"^\s*#\s*define\s+{re.escape(name)}\b", re.MULTILINE)
    if not pattern.search(body):
        return f"macro body does not '#define {name}'"
    return None


def _check_struct(name: str, body: str, tokens: set) -> Optional[str]:
    if "struct" not in tokens and "union" not in tokens:
        return "struct body has no 'struct' or 'union' keyword"
    return None


def _check_enum(name: str, body: str, tokens: set) -> Optional[str]:
    if "enum" not in tokens:
        return "enum body has no 'enum' keyword"
    return None


def _check_prototype(name: str, body: str, tokens: set) -> Optional[str]:
    if not re.search(rf"\b{re.escape(name)}\s*\(", body):
        return f"prototype body never declares '{name}(...)'"
    return None


_BODY_CHECKS: Dict[Kind, Callable[[str, str, set], Optional[str]]] = {
    Kind.TYPEDEF: _check_typedef,
    Kind.MACRO: _check_macro,
    Kind.STRUCT: _check_struct,
    Kind.ENUM: _check_enum,
    Kind.PROTOTYPE: _check_prototype,
}

if set(_BODY_CHECKS) != set(Kind):  # pragma: no cover - import-time guard
    raise RuntimeError("Every declaration kind needs a body check")


__all__ = [
    "is_identifier",
    "macro_body",
    "macro_name",
    "prototype_body",
    "typedef_body",
    "validate_body",
]
