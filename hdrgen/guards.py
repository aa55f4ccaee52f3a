"""Include-guard and declaration-sentinel naming.

Two independent namespaces are produced here:

* header guards, one per header: ``_`` + the header identifier with its
  extension removed, uppercased, every other character mapped to ``_``, then
  ``_H`` (``sys/types.h`` becomes ``_SYS_TYPES_H``);
* declaration sentinels, one per declaration: ``__<kind>_<name>_defined``
  (``__typedef_size_t_defined``). A sentinel depends only on the declaration,
  so every header emits a byte-identical block for it and a translation unit
  including several of those headers defines the symbol once.

Kind tokens contain no underscore and names are C identifiers, so two
declarations never share a sentinel, and the lowercase double-underscore
prefix never matches an uppercase ``_..._H`` header guard.
"""

from __future__ import annotations

import re

from .models import Declaration, Header, Kind

_HEADER_EXTENSIONS = (".hpp", ".hxx", ".hh", ".h")
_NON_IDENTIFIER = re.compile(r"[^A-Z0-9]")


class GuardSynthesizer:
    """Derives guard tokens and renders sentinel-guarded blocks."""

    SENTINEL_FMT = "__{kind}_{name}_defined"
    BLOCK_FMT = "#ifndef {sentinel}\n#define {sentinel}\n{body}\n#endif\n"

    def header_guard(self, header: Header | str) -> str:
        if isinstance(header, Header):
            if header.guard is not None:
                return header.guard.token
            identifier = header.name
        else:
            identifier = header
        return self.derive_header_guard(identifier)

    @staticmethod
    def derive_header_guard(identifier: str) -> str:
        base = identifier.strip()
        lowered = base.lower()
        for extension in _HEADER_EXTENSIONS:
            if lowered.endswith(extension) and len(base) > len(extension):
                base = base[: -len(extension)]
                break
        token = _NON_IDENTIFIER.sub("_", base.upper())
        return f"_{token}_H"

    def sentinel(self, declaration: Declaration) -> str:
        return self.sentinel_for(declaration.kind, declaration.name)

    def sentinel_for(self, kind: Kind, name: str) -> str:
        return self.SENTINEL_FMT.format(kind=Kind.parse(kind).value, name=name)

    def block(self, declaration: Declaration) -> str:
        """Return the guarded block emitted for ``declaration`` in every header."""
        return self.BLOCK_FMT.format(
            sentinel=self.sentinel(declaration),
            body=declaration.body.strip("\n"),
        )


__all__ = ["GuardSynthesizer"]
