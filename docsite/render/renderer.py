"""Markdown to HTML rendering with diagram block tagging."""

from __future__ import annotations

import re
from typing import Optional, Sequence

import markdown

ERROR_FRAGMENT = '<div class="error">Content not found</div>'

DEFAULT_EXTENSIONS: tuple[str, ...] = ("fenced_code", "tables", "toc")


def rewrite_diagrams(html: str, language: str = "mermaid") -> str:
    """Turn fenced ``language`` code blocks into diagram containers.

    The substitution is textual; output that was already rewritten contains
    no matching code block, so applying it again is a no-op.
    """
    pattern = re.compile(
        rf'<pre><code class="language-{re.escape(language)}">(.*?)</code></pre>',
        re.DOTALL,
    )
    return pattern.sub(lambda match: f'<div class="{language}">{match.group(1)}</div>', html)


class ContentRenderer:
    """Converts raw markdown into an HTML fragment."""

    def __init__(
        self,
        *,
        diagram_language: str = "mermaid",
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        self.diagram_language = diagram_language
        self.extensions = list(extensions)

    def render(self, raw_text: Optional[str]) -> str:
        if raw_text is None:
            return ERROR_FRAGMENT
        # A fresh converter per call keeps concurrent renders independent.
        converter = markdown.Markdown(extensions=self.extensions, output_format="html")
        html = converter.convert(raw_text)
        return rewrite_diagrams(html, self.diagram_language)


__all__ = ["ContentRenderer", "DEFAULT_EXTENSIONS", "ERROR_FRAGMENT", "rewrite_diagrams"]
