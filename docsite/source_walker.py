"""Source tree enumeration for markdown documents."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .errors import DirectoryNotFound
from .models import SourceDocument

_EXCLUDED_DIRS = {
    "node_modules",
    "__pycache__",
}


@dataclass
class IgnoreRule:
    """Represents an exclude rule parsed from .docsite.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in rel_path.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_ignore_rules(patterns: Iterable[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            continue
        directory_only = pattern.endswith("/")
        if directory_only:
            pattern = pattern[:-1]
        anchored = pattern.startswith("/")
        if anchored:
            pattern = pattern[1:]
        rules.append(
            IgnoreRule(
                pattern=pattern,
                directory_only=directory_only,
                anchored=anchored,
                has_slash="/" in pattern,
            )
        )
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


class SourceWalker:
    """Enumerates markdown files under a root, tracking the directory prefix."""

    def __init__(
        self, *, extension: str = ".md", exclude_paths: Iterable[str] = ()
    ) -> None:
        self.extension = extension.lower()
        self._rules = build_ignore_rules(exclude_paths)

    def walk(self, root: Path) -> Iterator[SourceDocument]:
        """Return a lazy sequence of documents under ``root``.

        Raises ``DirectoryNotFound`` immediately when the root is missing so
        callers can record the condition and skip the subtree.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.is_dir():
            raise DirectoryNotFound(root_path)
        return self._iter_documents(root_path)

    def _iter_documents(self, root: Path) -> Iterator[SourceDocument]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            prefix = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept = []
            for name in sorted(dirnames):
                if name.startswith(".") or name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{prefix}/{name}" if prefix else name
                if _should_ignore(rel_path, True, self._rules):
                    continue
                kept.append(name)
            # os.walk honours in-place edits, which also fixes traversal order.
            dirnames[:] = kept

            for filename in sorted(filenames):
                if filename.startswith(".") or not filename.lower().endswith(self.extension):
                    continue
                rel_path = f"{prefix}/{filename}" if prefix else filename
                if _should_ignore(rel_path, False, self._rules):
                    continue
                yield SourceDocument(
                    absolute_path=current_dir / filename,
                    directory_prefix=prefix,
                )


__all__ = ["IgnoreRule", "SourceWalker", "build_ignore_rules"]
