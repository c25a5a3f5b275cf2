"""Persistence of build artifacts under the output directory."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from ..logging import get_logger
from ..manifest import content_index_from_json
from ..models import ContentArtifact, ContentIndexEntry

ROUTES_FILENAME = "routes.json"
CONTENT_FILENAME = "content.json"
RUNTIME_FILENAME = "docsite-loader.js"


class ArtifactStore:
    """Reads and writes per-route HTML plus the JSON manifests."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.logger = get_logger("stores.artifacts")

    def page_path(self, route_id: str) -> Path:
        return self.output_dir / f"{route_id}.html"

    async def write_pages(self, artifacts: Iterable[ContentArtifact]) -> List[Path]:
        """Write every page concurrently and return once all writes have settled."""
        loop = asyncio.get_running_loop()
        tasks = [
            loop.run_in_executor(None, self._write_text, self.page_path(item.route_id), item.html)
            for item in artifacts
        ]
        return list(await asyncio.gather(*tasks))

    def write_manifest(self, payload: List[Dict[str, str]]) -> Path:
        return self._write_json(ROUTES_FILENAME, payload, sort_keys=False)

    def write_content_index(self, payload: Dict[str, Dict[str, str]]) -> Path:
        return self._write_json(CONTENT_FILENAME, payload, sort_keys=True)

    def write_runtime(self, script: str) -> Path:
        return self._write_text(self.output_dir / RUNTIME_FILENAME, script)

    def load_manifest(self) -> List[Dict[str, Any]]:
        data = self._read_json(ROUTES_FILENAME)
        return data if isinstance(data, list) else []

    def load_content_index(self) -> Dict[str, ContentIndexEntry]:
        return content_index_from_json(self._read_json(CONTENT_FILENAME))

    def remove_stale_pages(self, keep: Set[Path]) -> List[Path]:
        """Delete ``.html`` files that the current build did not produce."""
        if not self.output_dir.is_dir():
            return []
        keep_resolved = {path.resolve() for path in keep}
        removed: List[Path] = []
        for path in sorted(self.output_dir.rglob("*.html")):
            if path.resolve() in keep_resolved:
                continue
            path.unlink()
            removed.append(path)
            self.logger.debug("Removed stale page %s", path)
        return removed

    # ------------------------------------------------------------------
    # Internal helpers

    def _write_json(self, name: str, payload: Any, *, sort_keys: bool) -> Path:
        text = json.dumps(payload, indent=2, sort_keys=sort_keys, ensure_ascii=False) + "\n"
        return self._write_text(self.output_dir / name, text)

    def _write_text(self, path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            if path.read_text(encoding="utf-8") == text:
                return path
        except (FileNotFoundError, UnicodeDecodeError):
            pass
        path.write_text(text, encoding="utf-8")
        self.logger.debug("Wrote %s", path)
        return path

    def _read_json(self, name: str) -> Optional[Any]:
        path = self.output_dir / name
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as exc:
            self.logger.warning("Ignoring malformed %s: %s", path, exc)
            return None


__all__ = ["ArtifactStore", "CONTENT_FILENAME", "ROUTES_FILENAME", "RUNTIME_FILENAME"]
