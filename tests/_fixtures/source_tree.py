"""Helper utilities for writing throwaway source files in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping


class SourceTree:
    """Utility for writing source files and a .codelens.yml into a temp directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the tree."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(content), encoding="utf-8")

    def file(self, relative: str) -> Path:
        return self.root / relative

    def path(self) -> Path:
        """Return the tree root path."""
        return self.root


def dedent(content: str) -> str:
    """Strip the common indent and the leading newline of a triple-quoted sample."""
    return textwrap.dedent(content).lstrip("\n")


__all__ = ["SourceTree", "dedent"]
