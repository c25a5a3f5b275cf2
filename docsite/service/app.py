"""FastAPI application entrypoint for docsite service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError
from ..errors import BuildError
from ..models import BuildResult
from ..pipeline import SitePipeline


class BuildRequest(BaseModel):
    path: str = "."
    migrate: bool = False
    clean: bool = False


class BuildResponse(BaseModel):
    status: str
    routes: int
    output_dir: str
    errors: List[str] = []


class RouteModel(BaseModel):
    id: str
    title: str
    category: Optional[str] = None


class ContentResponse(BaseModel):
    html: str
    path: str


class HealthResponse(BaseModel):
    status: str


def _default_pipeline(path: str) -> SitePipeline:
    return SitePipeline.from_path(Path(path))


def create_app(
    pipeline_factory: Callable[[str], SitePipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing build and content lookups."""

    app = FastAPI(title="Docsite Service", version="0.1.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/build", response_model=BuildResponse)
    async def build(payload: BuildRequest) -> BuildResponse:
        pipeline = pipeline_factory(payload.path)

        def _run_build() -> BuildResult:
            return pipeline.build(migrate=payload.migrate, clean=payload.clean)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_build)
        summary = result.summary()
        return BuildResponse(
            status="ok",
            routes=summary["routes"],
            output_dir=summary["output_dir"],
            errors=summary["errors"],
        )

    @app.get("/routes", response_model=List[RouteModel], response_model_exclude_none=True)
    async def routes(path: str = ".") -> List[Dict[str, Any]]:
        return pipeline_factory(path).store.load_manifest()

    @app.get("/content/{route_id:path}", response_model=ContentResponse)
    async def content(route_id: str, path: str = ".") -> ContentResponse:
        index = pipeline_factory(path).store.load_content_index()
        entry = index.get(route_id)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Route not found: {route_id}")
        return ContentResponse(html=entry.html, path=entry.path)

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(BuildError)
    async def build_error_handler(_: Any, exc: BuildError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)
