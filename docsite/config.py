"""Configuration loading for docsite (.docsite.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".docsite.yml"

DEFAULT_OVERRIDES: Dict[str, str] = {"index.md": "home"}
DEFAULT_ACRONYMS: Dict[str, str] = {"P2p": "P2P", "Api": "API"}
DEFAULT_TITLE_SUFFIXES: List[str] = ["-spec"]


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class Category:
    """Named sidebar group listing route ids in display order."""

    name: str
    routes: List[str] = field(default_factory=list)


@dataclass
class TitleConfig:
    """Rules for deriving human-readable titles from filenames."""

    strip_suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_TITLE_SUFFIXES))
    acronyms: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ACRONYMS))


@dataclass
class LegacyConfig:
    """Legacy documents to standardise and relocate before building."""

    root: Optional[Path] = None
    files: Dict[str, str] = field(default_factory=dict)


@dataclass
class ClientConfig:
    """Settings baked into the browser runtime."""

    base_url: str = "/content"
    container: str = ".docs-content"
    nav: str = ".docs-nav"
    site_title: str = ""
    emit_runtime: bool = True


@dataclass
class SiteConfig:
    """Represents the settings defined in .docsite.yml."""

    root: Path
    source_roots: List[Path] = field(default_factory=list)
    output_dir: Optional[Path] = None
    extension: str = ".md"
    exclude_paths: List[str] = field(default_factory=list)
    diagram_language: str = "mermaid"
    home_route: str = "home"
    home_title: str = "Home"
    overrides: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_OVERRIDES))
    categories: List[Category] = field(default_factory=list)
    titles: TitleConfig = field(default_factory=TitleConfig)
    legacy: LegacyConfig = field(default_factory=LegacyConfig)
    client: ClientConfig = field(default_factory=ClientConfig)

    def __post_init__(self) -> None:
        if not self.source_roots:
            self.source_roots = [self.root / "docs"]
        if self.output_dir is None:
            self.output_dir = self.root / "website" / "content"
        if self.legacy.root is None:
            self.legacy.root = self.source_roots[0]
        self.overrides = {key.lower(): value for key, value in self.overrides.items()}


def load_config(config_path: Path) -> SiteConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SiteConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source_roots = [root / item for item in _as_str_list(data.get("source_roots"))]
    output_str = _as_str(data.get("output_dir"))
    output_dir = root / output_str if output_str else None

    home_data = _as_dict(data.get("home"))
    overrides = dict(DEFAULT_OVERRIDES)
    overrides.update(_as_str_map(data.get("overrides"), "overrides"))

    titles = TitleConfig()
    titles_data = _as_dict(data.get("titles"))
    if "strip_suffixes" in titles_data:
        titles.strip_suffixes = _as_str_list(titles_data.get("strip_suffixes"))
    if "acronyms" in titles_data:
        titles.acronyms = _as_str_map(titles_data.get("acronyms"), "titles.acronyms")

    legacy = LegacyConfig()
    legacy_data = _as_dict(data.get("legacy"))
    if legacy_data:
        legacy_root = _as_str(legacy_data.get("root"))
        legacy.root = root / legacy_root if legacy_root else None
        legacy.files = _as_str_map(legacy_data.get("files"), "legacy.files")

    client = ClientConfig()
    client_data = _as_dict(data.get("client"))
    if client_data:
        client.base_url = _as_str(client_data.get("base_url")) or client.base_url
        client.container = _as_str(client_data.get("container")) or client.container
        client.nav = _as_str(client_data.get("nav")) or client.nav
        client.site_title = _as_str(client_data.get("site_title")) or client.site_title
        emit = _as_bool(client_data.get("emit_runtime"))
        if emit is not None:
            client.emit_runtime = emit

    return SiteConfig(
        root=root,
        source_roots=source_roots,
        output_dir=output_dir,
        extension=_as_str(data.get("extension")) or ".md",
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        diagram_language=_as_str(data.get("diagram_language")) or "mermaid",
        home_route=_as_str(home_data.get("route")) or "home",
        home_title=_as_str(home_data.get("title")) or "Home",
        overrides=overrides,
        categories=_parse_categories(data.get("categories")),
        titles=titles,
        legacy=legacy,
        client=client,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_categories(value: Any) -> List[Category]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("categories must be a list of {name, routes} mappings")
    categories: List[Category] = []
    for item in value:
        if not isinstance(item, dict) or not _as_str(item.get("name")):
            raise ConfigError("each category needs a name")
        categories.append(
            Category(name=str(item["name"]), routes=_as_str_list(item.get("routes")))
        )
    return categories


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_str_map(value: Any, key: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping")
    return {str(k): str(v) for k, v in value.items() if v is not None}


__all__ = [
    "CONFIG_FILENAME",
    "Category",
    "ClientConfig",
    "ConfigError",
    "LegacyConfig",
    "SiteConfig",
    "TitleConfig",
    "load_config",
]
