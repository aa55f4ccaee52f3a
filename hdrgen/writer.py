"""Writes rendered headers to disk, touching only files whose content changed."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping

from .logging import get_logger


@dataclass
class WriteOutcome:
    """Result of writing one header."""

    path: Path
    changed: bool
    diff: str
    dry_run: bool = False


class HeaderWriter:
    """Places header text under ``output_dir`` using the header name as relative path."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.logger = get_logger("writer")

    def path_for(self, header_name: str) -> Path:
        relative = Path(header_name)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Header name must be a relative path inside the output directory: {header_name}")
        return self.output_dir / relative

    def write(self, header_name: str, text: str, *, dry_run: bool = False) -> WriteOutcome:
        path = self.path_for(header_name)
        original = path.read_text(encoding="utf-8") if path.exists() else ""
        if original == text:
            self.logger.debug("%s is up to date", path)
            return WriteOutcome(path=path, changed=False, diff="", dry_run=dry_run)

        diff_text = self._render_diff(header_name, original, text)
        if dry_run:
            self.logger.info("Dry-run: %s would change", path)
            return WriteOutcome(path=path, changed=True, diff=diff_text, dry_run=True)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        self.logger.info("Wrote %s", path)
        return WriteOutcome(path=path, changed=True, diff=diff_text)

    def write_all(self, rendered: Mapping[str, str], *, dry_run: bool = False) -> List[WriteOutcome]:
        """Write every rendered header; paths are checked before anything is written."""
        for header_name in rendered:
            self.path_for(header_name)
        return [self.write(name, text, dry_run=dry_run) for name, text in rendered.items()]

    def stale(self, rendered: Mapping[str, str]) -> List[Path]:
        """Return the paths whose on-disk content differs from ``rendered``."""
        stale: List[Path] = []
        for header_name, text in rendered.items():
            path = self.path_for(header_name)
            current = path.read_text(encoding="utf-8") if path.exists() else None
            if current != text:
                stale.append(path)
        return stale

    @staticmethod
    def _render_diff(header_name: str, original: str, updated: str) -> str:
        diff = difflib.unified_diff(
            original.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=f"{header_name} (original)",
            tofile=f"{header_name} (generated)",
        )
        return "".join(diff)


__all__ = ["HeaderWriter", "WriteOutcome"]
