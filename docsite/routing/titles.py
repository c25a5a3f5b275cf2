"""Human-readable titles derived from source filenames."""

from __future__ import annotations

import re
from typing import Iterable, Mapping

_WORD_START = re.compile(r"\b\w")
_SEPARATORS = re.compile(r"[-_]+")


def title_case(value: str) -> str:
    """Upper-case the first character of every word, leaving the rest untouched."""
    spaced = _SEPARATORS.sub(" ", value).strip()
    return _WORD_START.sub(lambda match: match.group(0).upper(), spaced)


def apply_acronyms(title: str, acronyms: Mapping[str, str]) -> str:
    for wrong, right in acronyms.items():
        title = re.sub(rf"\b{re.escape(wrong)}\b", right, title)
    return title


def derive_title(
    filename: str,
    *,
    extension: str = ".md",
    strip_suffixes: Iterable[str] = ("-spec",),
    acronyms: Mapping[str, str] | None = None,
) -> str:
    """Turn ``Keys_management-spec.md`` style names into ``Keys Management``."""
    stem = filename
    if stem.lower().endswith(extension.lower()):
        stem = stem[: -len(extension)]
    for suffix in strip_suffixes:
        if suffix and stem.lower().endswith(suffix.lower()) and len(stem) > len(suffix):
            stem = stem[: -len(suffix)]
            break
    return apply_acronyms(title_case(stem), acronyms or {})


__all__ = ["apply_acronyms", "derive_title", "title_case"]
