"""FastAPI application entrypoint for lookatni service mode."""

from __future__ import annotations

import asyncio
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional, TypeVar

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..codec import MarkerCodec, read_artifact
from ..markers.presets import get_preset
from ..models import ExtractOptions
from ..version import __version__

_T = TypeVar("_T")


class ArtifactRequest(BaseModel):
    path: Optional[str] = None
    content: Optional[str] = None


class ValidateRequest(ArtifactRequest):
    strict: bool = False


class GenerateRequest(BaseModel):
    source_dir: str
    output_file: str
    exclude: List[str] = Field(default_factory=list)
    preset: Optional[str] = None


class ExtractRequest(BaseModel):
    artifact: str
    output_dir: str
    overwrite: bool = False
    create_dirs: bool = True
    dry_run: bool = False


class RecordModel(BaseModel):
    filename: str
    content: str
    start_line: int
    end_line: int
    size: int


class IssueModel(BaseModel):
    line: int
    message: str
    severity: str


class ParseResponse(BaseModel):
    total_markers: int
    total_files: int
    total_bytes: int
    metadata: Dict[str, str]
    errors: List[IssueModel]
    records: List[RecordModel]


class ValidateResponse(BaseModel):
    is_valid: bool
    errors: List[IssueModel]
    duplicate_filenames: List[str]
    invalid_filenames: List[str]
    statistics: Dict[str, Any]


class GenerateResponse(BaseModel):
    success: bool
    total_files: int
    total_bytes: int
    errors: List[str]
    skipped_files: List[Dict[str, str]]
    file_types: Dict[str, int]


class ExtractResponse(BaseModel):
    success: bool
    extracted_files: List[str]
    skipped_files: List[str]
    errors: List[str]


class HealthResponse(BaseModel):
    status: str


async def _run_blocking(func: Callable[[], _T]) -> _T:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return func()
    return await loop.run_in_executor(None, func)


def _artifact_loader(payload: ArtifactRequest) -> Callable[[], str]:
    content, path = payload.content, payload.path
    if content is not None:
        return lambda: content
    if path:
        return lambda: read_artifact(path)
    raise ValueError("Either 'path' or 'content' is required")


def create_app(
    codec_factory: Callable[[], MarkerCodec] = MarkerCodec,
) -> FastAPI:
    """Create the FastAPI application exposing the codec operations."""

    app = FastAPI(title="lookatni Service", version=__version__)

    async def get_codec() -> MarkerCodec:
        return codec_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/parse", response_model=ParseResponse)
    async def parse_artifact(
        payload: ArtifactRequest,
        codec: MarkerCodec = Depends(get_codec),
    ) -> ParseResponse:
        load = _artifact_loader(payload)
        parsed = await _run_blocking(lambda: codec.parse_text(load()))
        return ParseResponse(
            total_markers=parsed.total_markers,
            total_files=parsed.total_files,
            total_bytes=parsed.total_bytes,
            metadata=parsed.metadata,
            errors=[IssueModel(**asdict(error)) for error in parsed.errors],
            records=[RecordModel(**asdict(record)) for record in parsed.records],
        )

    @app.post("/validate", response_model=ValidateResponse)
    async def validate_artifact(
        payload: ValidateRequest,
        codec: MarkerCodec = Depends(get_codec),
    ) -> ValidateResponse:
        load = _artifact_loader(payload)
        report = await _run_blocking(
            lambda: codec.validate_text(load(), strict=payload.strict)
        )
        return ValidateResponse(
            is_valid=report.is_valid,
            errors=[IssueModel(**asdict(error)) for error in report.errors],
            duplicate_filenames=report.duplicate_filenames,
            invalid_filenames=report.invalid_filenames,
            statistics=asdict(report.statistics),
        )

    @app.post("/generate", response_model=GenerateResponse)
    async def generate_artifact(
        payload: GenerateRequest,
        codec: MarkerCodec = Depends(get_codec),
    ) -> GenerateResponse:
        config = get_preset(payload.preset).config if payload.preset else None
        result = await _run_blocking(
            lambda: codec.generate(
                payload.source_dir, payload.output_file, payload.exclude, config
            )
        )
        return GenerateResponse(
            success=result.success,
            total_files=result.total_files,
            total_bytes=result.total_bytes,
            errors=result.errors,
            skipped_files=[asdict(skipped) for skipped in result.skipped_files],
            file_types=result.file_types,
        )

    @app.post("/extract", response_model=ExtractResponse)
    async def extract_artifact(
        payload: ExtractRequest,
        codec: MarkerCodec = Depends(get_codec),
    ) -> ExtractResponse:
        options = ExtractOptions(
            overwrite=payload.overwrite,
            create_dirs=payload.create_dirs,
            dry_run=payload.dry_run,
        )
        result = await _run_blocking(
            lambda: codec.extract(payload.artifact, payload.output_dir, options)
        )
        return ExtractResponse(**asdict(result))

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(
        _: Any, exc: NotADirectoryError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(
        _: Any, exc: ValueError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
