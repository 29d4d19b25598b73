"""
API routes for the printability validator.

Base URL: /v1
"""

import dataclasses
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, File, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from printability.api.dependencies import get_default_settings, get_default_strategy, get_validator
from printability.config import ConfigError, parse_strategy
from printability.validation import Bleed

router = APIRouter(prefix="/v1")

# Track server start time
_server_start_time = datetime.now()


def _error_response(error: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error, "code": code})


@router.get("/health")
async def health_check(detailed: bool = Query(default=False)):
    """
    Health check endpoint.

    Args:
        detailed: If true, include uptime and reading strategy
    """
    if not detailed:
        return {"status": "ok"}

    uptime_seconds = (datetime.now() - _server_start_time).total_seconds()
    return {
        "status": "ok",
        "uptime_seconds": int(uptime_seconds),
        "strategy": get_default_strategy().value,
    }


@router.get("/settings")
async def get_settings():
    """Validation settings applied when a request does not override them."""
    settings = get_default_settings()
    return {
        "check_left_margin": settings.check_left_margin,
        "check_fonts": settings.check_fonts,
        "check_page_count": settings.check_page_count,
        "check_pdf_version": settings.check_pdf_version,
        "max_page_count": settings.max_page_count,
        "bleed": {
            "positive_mm": settings.bleed.positive_mm,
            "negative_mm": settings.bleed.negative_mm,
        },
        "strategy": get_default_strategy().value,
    }


@router.post("/validate")
async def validate_document(
    file: UploadFile = File(...),
    check_left_margin: Optional[bool] = Query(default=None),
    check_fonts: Optional[bool] = Query(default=None),
    check_page_count: Optional[bool] = Query(default=None),
    check_pdf_version: Optional[bool] = Query(default=None),
    max_page_count: Optional[int] = Query(default=None, ge=1),
    positive_bleed_mm: Optional[int] = Query(default=None),
    negative_bleed_mm: Optional[int] = Query(default=None),
    strategy: Optional[str] = Query(default=None, description="in_memory or incremental")
):
    """
    Validate a PDF for automated print.

    Query parameters override the server's default settings for this
    request only. The response always carries the full validation result;
    a document that cannot be parsed is reported as PDF_PARSE_ERROR.
    """
    data = await file.read()

    if not data:
        return _error_response("No data provided", "EMPTY_DATA")

    defaults = get_default_settings()
    overrides = {
        name: value
        for name, value in (
            ("check_left_margin", check_left_margin),
            ("check_fonts", check_fonts),
            ("check_page_count", check_page_count),
            ("check_pdf_version", check_pdf_version),
            ("max_page_count", max_page_count),
        )
        if value is not None
    }

    try:
        if positive_bleed_mm is not None or negative_bleed_mm is not None:
            overrides["bleed"] = Bleed(
                positive_mm=defaults.bleed.positive_mm if positive_bleed_mm is None else positive_bleed_mm,
                negative_mm=defaults.bleed.negative_mm if negative_bleed_mm is None else negative_bleed_mm,
            )
        read_strategy = get_default_strategy() if strategy is None else parse_strategy(strategy)
    except (ValueError, ConfigError) as e:
        return _error_response(str(e), "INVALID_SETTINGS")

    settings = dataclasses.replace(defaults, **overrides)

    # Parsing is CPU bound, keep it off the event loop
    result = await run_in_threadpool(get_validator().validate_bytes, data, settings, read_strategy)

    return {"filename": file.filename, **result.to_dict()}
