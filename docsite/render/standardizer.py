"""Normalisation pass for legacy documents before they are rendered."""

from __future__ import annotations

import re
from typing import List, Set, Tuple

from markdown.extensions.toc import slugify as toc_slugify
from markdown.extensions.toc import unique

from ..routing.titles import title_case

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_TOC_HEADING = re.compile(r"^##\s+(table of contents|contents)\s*$", re.IGNORECASE | re.MULTILINE)
_EXAMPLES_HEADING = re.compile(r"^##\s+examples?\s*$", re.IGNORECASE | re.MULTILINE)
_INLINE_MARKUP = re.compile(r"[*`]|\[([^\]]*)\]\([^)]*\)")

TOC_TITLE = "Table of Contents"
EXAMPLES_PLACEHOLDER = "## Examples\n\nThis section will be expanded with practical examples.\n"


class DocumentStandardizer:
    """Ensures a document has a title, a table of contents and an examples section."""

    def standardize(self, raw_text: str, title_hint: str) -> str:
        text = raw_text.replace("\r\n", "\n")
        if not text.lstrip().startswith("# "):
            text = f"# {title_case(title_hint)}\n\n{text.lstrip()}"
        if not _EXAMPLES_HEADING.search(text):
            text = text.rstrip() + "\n\n" + EXAMPLES_PLACEHOLDER
        if not _TOC_HEADING.search(text):
            text = self._insert_toc(text)
        return text

    def _insert_toc(self, text: str) -> str:
        lines = text.split("\n")
        headings = _scan_headings(lines)
        insert_at = next((index for index, level, _ in headings if level == 2), None)
        if insert_at is None:
            return text

        # Anchors must match what the renderer's toc extension assigns, which
        # numbers duplicates in document order, the inserted heading included.
        used: Set[str] = set()
        entries: List[str] = []
        toc_placed = False
        for index, level, title in headings:
            if index >= insert_at and not toc_placed:
                unique(toc_slugify(TOC_TITLE, "-"), used)
                toc_placed = True
            anchor = unique(toc_slugify(_plain(title), "-"), used)
            if index >= insert_at and level in (2, 3):
                indent = "  " * (level - 2)
                entries.append(f"{indent}- [{_plain(title)}](#{anchor})")

        block = [f"## {TOC_TITLE}", "", *entries, ""]
        return "\n".join(lines[:insert_at] + block + lines[insert_at:])


def _scan_headings(lines: List[str]) -> List[Tuple[int, int, str]]:
    headings: List[Tuple[int, int, str]] = []
    in_code = False
    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith(("```", "~~~")):
            in_code = not in_code
            continue
        if in_code or line.startswith(" "):
            continue
        match = _HEADING.match(stripped)
        if match:
            headings.append((index, len(match.group(1)), match.group(2)))
    return headings


def _plain(title: str) -> str:
    return _INLINE_MARKUP.sub(lambda match: match.group(1) or "", title).strip()


__all__ = ["DocumentStandardizer", "EXAMPLES_PLACEHOLDER", "TOC_TITLE"]
