"""FastAPI application entrypoint for codelens service mode."""

from __future__ import annotations

import asyncio
import itertools
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import CodeLensConfig, load_config
from ..diagnostics import DiagnosticsConfig
from ..engine import (
    analyze_metrics,
    detect_errors,
    detect_language,
    format_code,
    highlight,
    resolve_for_analysis,
    validate_code,
)
from ..languages import (
    PROFILES,
    LanguageTag,
    display_name,
    lookup_language,
    resolve_language,
    supported_languages,
)
from ..logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SourceRequest(BaseModel):
    code: str
    language: Optional[str] = None
    filename: Optional[str] = None
    stream: Optional[str] = None


class DetectRequest(BaseModel):
    code: str
    filename: Optional[str] = None
    stream: Optional[str] = None


class DiagnosticsRequest(SourceRequest):
    max_line_length: Optional[int] = None
    disabled: Optional[List[str]] = None


class FormatOptionsModel(BaseModel):
    indent_size: Optional[int] = None
    use_tabs: Optional[bool] = None
    max_line_length: Optional[int] = None
    preserve_blank_lines: Optional[bool] = None


class FormatRequest(SourceRequest):
    options: Optional[FormatOptionsModel] = None


class HealthResponse(BaseModel):
    status: str


class LanguageInfo(BaseModel):
    tag: str
    name: str
    extensions: List[str]


class LanguagesResponse(BaseModel):
    languages: List[LanguageInfo]


class DetectResponse(BaseModel):
    language: str
    name: str


class HighlightResponse(BaseModel):
    language: str
    html: str


class DiagnosticModel(BaseModel):
    line: int
    column: int
    severity: str
    kind: str
    message: str
    suggestion: str


class DiagnosticsResponse(BaseModel):
    language: str
    is_valid: bool
    error_count: int
    warning_count: int
    summary: str
    errors: List[DiagnosticModel]
    warnings: List[DiagnosticModel]


class MetricsResponse(BaseModel):
    language: str
    metrics: Dict[str, Any]


class FormatResponse(BaseModel):
    language: str
    code: str
    changed: bool


class ValidationIssueModel(BaseModel):
    type: str
    message: str
    suggestion: str


class ValidateResponse(BaseModel):
    language: str
    is_valid: bool
    issues: List[ValidationIssueModel]


class StreamTracker:
    """Last call wins: remembers the newest in-flight request per stream.

    Tickets come from one counter shared by every stream, so a ticket is never
    reissued. A stream is forgotten once its newest request finishes; only
    streams with work in flight are tracked.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tickets = itertools.count(1)
        self._latest: Dict[str, int] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._latest)

    def begin(self, stream: str) -> int:
        with self._lock:
            ticket = next(self._tickets)
            self._latest[stream] = ticket
            return ticket

    def is_current(self, stream: str, ticket: int) -> bool:
        with self._lock:
            return self._latest.get(stream) == ticket

    def finish(self, stream: str, ticket: int) -> bool:
        """Release ``ticket``; True when it was still the stream's newest request."""
        with self._lock:
            if self._latest.get(stream) != ticket:
                return False
            del self._latest[stream]
            return True


def _default_config() -> CodeLensConfig:
    return load_config(Path.cwd())


def create_app(
    config_factory: Callable[[], CodeLensConfig] = _default_config,
) -> FastAPI:
    """Create the FastAPI application exposing codelens operations."""

    app = FastAPI(title="CodeLens Service", version="1.0.0")
    streams = StreamTracker()
    app.state.streams = streams

    async def get_config() -> CodeLensConfig:
        # Re-read per request so edits to .codelens.yml apply without a restart.
        return config_factory()

    async def run_latest(stream: Optional[str], func: Callable[[], T]) -> T:
        ticket = streams.begin(stream) if stream else 0
        loop = asyncio.get_running_loop()
        current = True
        try:
            result = await loop.run_in_executor(None, func)
        finally:
            if stream:
                current = streams.finish(stream, ticket)
        if not current:
            logger.debug("Discarding superseded result for stream %s", stream)
            raise HTTPException(status_code=409, detail="superseded")
        return result

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/languages", response_model=LanguagesResponse)
    async def languages() -> LanguagesResponse:
        return LanguagesResponse(
            languages=[
                LanguageInfo(
                    tag=tag.value,
                    name=display_name(tag),
                    extensions=list(PROFILES[tag].extensions),
                )
                for tag in supported_languages()
            ]
        )

    @app.post("/detect", response_model=DetectResponse)
    async def detect(payload: DetectRequest) -> DetectResponse:
        tag = await run_latest(payload.stream, lambda: detect_language(payload.code, payload.filename))
        return DetectResponse(language=tag.value, name=display_name(tag))

    @app.post("/highlight", response_model=HighlightResponse)
    async def highlight_code(
        payload: SourceRequest,
        config: CodeLensConfig = Depends(get_config),
    ) -> HighlightResponse:
        tag = _language_for(payload, config)
        rendered = await run_latest(payload.stream, lambda: highlight(payload.code, tag))
        return HighlightResponse(language=tag.value, html=rendered)

    @app.post("/diagnostics", response_model=DiagnosticsResponse)
    async def diagnostics(
        payload: DiagnosticsRequest,
        config: CodeLensConfig = Depends(get_config),
    ) -> DiagnosticsResponse:
        tag = _language_for(payload, config)
        settings = config.diagnostics
        if payload.max_line_length is not None:
            settings = replace(settings, max_line_length=payload.max_line_length)
        if payload.disabled is not None:
            settings = DiagnosticsConfig(settings.max_line_length, frozenset(payload.disabled))
        result = await run_latest(payload.stream, lambda: detect_errors(payload.code, tag, settings))
        return DiagnosticsResponse(language=tag.value, **result.to_dict())

    @app.post("/metrics", response_model=MetricsResponse)
    async def metrics(
        payload: SourceRequest,
        config: CodeLensConfig = Depends(get_config),
    ) -> MetricsResponse:
        tag = _language_for(payload, config)
        report = await run_latest(payload.stream, lambda: analyze_metrics(payload.code, tag))
        return MetricsResponse(language=tag.value, metrics=report.to_dict())

    @app.post("/format", response_model=FormatResponse)
    async def format_source(
        payload: FormatRequest,
        config: CodeLensConfig = Depends(get_config),
    ) -> FormatResponse:
        tag = _language_for(payload, config)
        options = config.format
        if payload.options is not None:
            overrides = {
                key: value
                for key, value in payload.options.model_dump().items()
                if value is not None
            }
            options = replace(options, **overrides)
        formatted = await run_latest(payload.stream, lambda: format_code(payload.code, tag, options))
        return FormatResponse(language=tag.value, code=formatted, changed=formatted != payload.code)

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(
        payload: SourceRequest,
        config: CodeLensConfig = Depends(get_config),
    ) -> ValidateResponse:
        tag = _language_for(payload, config)
        result = await run_latest(payload.stream, lambda: validate_code(payload.code, tag))
        return ValidateResponse(language=tag.value, **result.to_dict())

    @app.exception_handler(ValueError)
    async def value_error_handler(
        _: Any, exc: ValueError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def _language_for(payload: SourceRequest, config: CodeLensConfig) -> LanguageTag:
    if payload.language and lookup_language(payload.language) is None:
        logger.debug("Unknown language %r; using javascript rules", payload.language)
    tag = resolve_for_analysis(payload.code, payload.language, payload.filename)
    if tag is LanguageTag.AUTO and config.language is not None:
        tag = config.language
    return resolve_language(tag)


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)
