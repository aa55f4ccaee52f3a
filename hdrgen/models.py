"""Core data models shared across hdrgen components."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class Kind(str, Enum):
    """Closed set of declaration kinds a header may carry."""

    TYPEDEF = "typedef"
    MACRO = "macro"
    STRUCT = "struct"  # struct and union definitions
    ENUM = "enum"
    PROTOTYPE = "prototype"

    @classmethod
    def parse(cls, value: "str | Kind") -> "Kind":
        if isinstance(value, Kind):
            return value
        lowered = str(value).strip().lower()
        if lowered == "union":
            return cls.STRUCT
        try:
            return cls(lowered)
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise ValueError(f"Unknown declaration kind '{value}' (expected one of: {choices})") from None


class Language(str, Enum):
    """Language support advertised by a generated header."""

    ANY = "any"
    C = "c"
    C_AND_CXX = "c_and_cxx"
    CXX = "cxx"

    @classmethod
    def parse(cls, value: "str | Language | None") -> "Language":
        if value is None:
            return cls.ANY
        if isinstance(value, Language):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(language.value for language in cls)
            raise ValueError(f"Unknown header language '{value}' (expected one of: {choices})") from None


class Variadic(str, Enum):
    """Arity of a function prototype."""

    NARY = "nary"
    VARIADIC = "variadic"


class DependencyPolicy(str, Enum):
    """How a header obtains the dependencies of its assigned declarations."""

    AUTO = "auto"
    STRICT = "strict"


@dataclass(frozen=True)
class Declaration:
    """A named C/C++ entity emitted verbatim into one or more headers."""

    name: str
    kind: Kind
    body: str
    dependencies: Tuple[str, ...] = ()

    def fingerprint(self) -> str:
        digest = hashlib.sha256()
        for part in (self.kind.value, self.name, self.body, *sorted(set(self.dependencies))):
            digest.update(part.encode("utf-8"))
            digest.update(b"\0")
        return digest.hexdigest()

    def same_definition(self, kind: Kind, body: str, dependencies: Tuple[str, ...]) -> bool:
        return (
            self.kind is kind
            and self.body == body
            and set(self.dependencies) == set(dependencies)
        )


@dataclass(frozen=True)
class HeaderGuard:
    """Explicit include guard token, optionally defined to a value."""

    token: str
    value: Optional[str] = None


@dataclass
class Header:
    """One output header unit and the declaration names requested for it."""

    name: str
    language: Language = Language.ANY
    guard: Optional[HeaderGuard] = None
    appendix: Optional[str] = None
    trailer: Optional[str] = None
    assigned: List[str] = field(default_factory=list)
