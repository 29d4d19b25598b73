"""
FastAPI application factory.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from printability.api.dependencies import init_dependencies
from printability.api.routes import router
from printability.validation import CHECK_ALL, PdfValidator, ReadStrategy, ValidationSettings

logger = logging.getLogger(__name__)


def create_app(
    validator: Optional[PdfValidator] = None,
    settings: Optional[ValidationSettings] = None,
    strategy: ReadStrategy = ReadStrategy.IN_MEMORY,
    cors_origins: list[str] = None,
    debug: bool = False
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        validator: Configured PDF validator (default reader config if None)
        settings: Default validation settings (all checks if None)
        strategy: Default read strategy for uploaded documents
        cors_origins: List of allowed CORS origins (None = allow all)
        debug: Enable debug mode

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Printability Validator",
        description="REST API for checking PDFs before automated print and mailing",
        version="1.0.0",
        debug=debug
    )

    # CORS configuration
    if cors_origins is None:
        # Development: allow all origins
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if validator is None:
        validator = PdfValidator()
    if settings is None:
        settings = CHECK_ALL

    init_dependencies(validator, settings, strategy)

    # Include routes
    app.include_router(router)

    @app.on_event("startup")
    async def startup():
        logger.info("Printability Validator starting...")
        logger.info(
            f"  Checks: margin={settings.check_left_margin} fonts={settings.check_fonts} "
            f"page_count={settings.check_page_count} (max {settings.max_page_count}) "
            f"pdf_version={settings.check_pdf_version}"
        )
        logger.info(f"  Bleed: +{settings.bleed.positive_mm}/-{settings.bleed.negative_mm} mm, reading: {strategy.value}")

    @app.on_event("shutdown")
    async def shutdown():
        logger.info("Printability Validator shutting down...")

    return app
