"""Browser runtime emitted next to the build artifacts."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ..config import ClientConfig

RUNTIME_TEMPLATE = "loader.js.j2"


def _create_env(templates_dir: Path | None) -> Environment:
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    loader = FileSystemLoader(directories)
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def render_runtime(
    client: ClientConfig,
    *,
    home_route: str = "home",
    templates_dir: Path | None = None,
) -> str:
    """Render the JavaScript loader for the single-page shell."""
    template = _create_env(templates_dir).get_template(RUNTIME_TEMPLATE)
    return template.render(
        base_url=client.base_url.rstrip("/"),
        container=client.container,
        nav=client.nav,
        site_title=client.site_title,
        home_route=home_route,
    ).rstrip() + "\n"


__all__ = ["RUNTIME_TEMPLATE", "render_runtime"]
