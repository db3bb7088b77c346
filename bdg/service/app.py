"""FastAPI application exposing the README block engine over HTTP."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import DEFAULT_YEAR_MAX, DEFAULT_YEAR_MIN
from ..readme.markers import (
    MarkerBlockError,
    ensure_marker_block,
    extract_managed_block,
    marker_count,
    readme_newline_info,
    remove_marker_block,
    rewrite_marker_block,
    rewrite_marker_block_lines,
)
from ..readme.parser import parse_badge_line
from ..readme.removal import BadgeNotFoundError, remove_block_lines_by_id_kind
from ..reports import BadgeReport
from ..version import VersionOptions, classify_version


class HealthResponse(BaseModel):
    status: str


class ClassifyRequest(BaseModel):
    version: str
    allow_yy_calver: bool = False
    year_min: int = DEFAULT_YEAR_MIN
    year_max: int = DEFAULT_YEAR_MAX


class ClassifyResponse(BaseModel):
    raw: str
    version_format: str
    calver_scheme: Optional[str] = None
    calver_parts: Optional[Dict[str, int]] = None
    modifier: Optional[str] = None
    semver_parts: Optional[Dict[str, Any]] = None


class ParseRequest(BaseModel):
    lines: List[str]


class ParseResponse(BaseModel):
    badges: List[BadgeReport]


class DocumentRequest(BaseModel):
    content: str


class RewriteRequest(BaseModel):
    content: str
    badges: List[str] = Field(default_factory=list)


class RemoveRequest(BaseModel):
    content: str
    all: bool = False
    ids: List[str] = Field(default_factory=list)
    kinds: List[str] = Field(default_factory=list)
    strict: bool = False


class DocumentResponse(BaseModel):
    content: str
    changed: bool
    newline: str
    trailing_newline: bool
    marker_count: int
    badges: List[str]


class RemoveResponse(DocumentResponse):
    removed_ids: List[str] = Field(default_factory=list)
    missing_ids: List[str] = Field(default_factory=list)
    removed_kinds: Dict[str, int] = Field(default_factory=dict)


def _describe(original: str, updated: str) -> Dict[str, Any]:
    newline, trailing = readme_newline_info(updated)
    return {
        "content": updated,
        "changed": original != updated,
        "newline": newline,
        "trailing_newline": trailing,
        "marker_count": marker_count(updated),
        "badges": extract_managed_block(updated),
    }


def create_app() -> FastAPI:
    """Create the FastAPI application exposing bdg operations."""
    app = FastAPI(title="bdg Service", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/version/classify", response_model=ClassifyResponse)
    async def classify(payload: ClassifyRequest) -> ClassifyResponse:
        if payload.year_min > payload.year_max:
            raise ValueError("year_min must not exceed year_max")
        options = VersionOptions(
            allow_yy_calver=payload.allow_yy_calver,
            year_min=payload.year_min,
            year_max=payload.year_max,
        )
        return ClassifyResponse(**classify_version(payload.version, options).to_dict())

    @app.post("/badges/parse", response_model=ParseResponse)
    async def parse(payload: ParseRequest) -> ParseResponse:
        return ParseResponse(
            badges=[BadgeReport(**parse_badge_line(line).to_dict()) for line in payload.lines]
        )

    @app.post("/readme/ensure", response_model=DocumentResponse)
    async def ensure(payload: DocumentRequest) -> DocumentResponse:
        updated = ensure_marker_block(payload.content)
        return DocumentResponse(**_describe(payload.content, updated))

    @app.post("/readme/rewrite", response_model=DocumentResponse)
    async def rewrite(payload: RewriteRequest) -> DocumentResponse:
        updated = rewrite_marker_block(payload.content, payload.badges)
        return DocumentResponse(**_describe(payload.content, updated))

    @app.post("/readme/remove", response_model=RemoveResponse)
    async def remove(payload: RemoveRequest) -> RemoveResponse:
        if payload.all and (payload.ids or payload.kinds):
            raise ValueError("all cannot be combined with ids or kinds")
        if not payload.all and not payload.ids and not payload.kinds:
            raise ValueError("nothing to remove: set all, ids or kinds")
        if payload.all:
            updated = remove_marker_block(payload.content)
            return RemoveResponse(**_describe(payload.content, updated))
        removal = remove_block_lines_by_id_kind(
            payload.content, payload.ids, payload.kinds, strict=payload.strict
        )
        if any(line.strip() for line in removal.remaining):
            updated = rewrite_marker_block_lines(payload.content, removal.remaining)
        else:
            updated = remove_marker_block(payload.content)
        return RemoveResponse(
            **_describe(payload.content, updated),
            removed_ids=removal.removed_ids,
            missing_ids=removal.missing_ids,
            removed_kinds=removal.removed_kinds,
        )

    @app.exception_handler(MarkerBlockError)
    async def marker_block_handler(_: Any, exc: MarkerBlockError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(BadgeNotFoundError)
    async def badge_not_found_handler(_: Any, exc: BadgeNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=400, content={"detail": str(exc), "missing_ids": exc.missing_ids}
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
