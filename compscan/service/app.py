"""FastAPI application entrypoint for compscan service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..analyzer import PackageAnalyzer
from ..models import ProjectSummary

AnalyzerFactory = Callable[[Path], PackageAnalyzer]


class AnalyzeRequest(BaseModel):
    path: str
    verbose: Optional[bool] = None


class AnalyzeResponse(BaseModel):
    monorepo: bool
    packageJson: Dict[str, Any]
    components: List[Dict[str, Any]]
    metadata: Dict[str, Any]
    detectedFrameworks: List[Dict[str, Any]]
    usedTools: List[Dict[str, Any]]
    componentCount: int
    extensions: List[str]
    workspaces: List[Dict[str, Any]]
    outcomes: List[Dict[str, Any]]
    bestComponentFolder: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_analyzer(project_path: Path) -> PackageAnalyzer:
    return PackageAnalyzer(project_path)


def create_app(
    analyzer_factory: AnalyzerFactory = _default_analyzer,
) -> FastAPI:
    """Create the FastAPI application exposing compscan analysis."""

    app = FastAPI(title="Compscan Service", version="1.0.0")

    async def get_factory() -> AnalyzerFactory:
        return analyzer_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze_project(
        payload: AnalyzeRequest,
        factory: AnalyzerFactory = Depends(get_factory),
    ) -> AnalyzeResponse:
        project = Path(payload.path).expanduser()
        if not await asyncio.to_thread(project.is_dir):
            raise FileNotFoundError(f"Project path is not a directory: {payload.path}")

        summary: ProjectSummary = await factory(project).analyze_async(payload.verbose)
        return AnalyzeResponse(
            **summary.to_dict(),
            bestComponentFolder=summary.best_component_folder(),
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
