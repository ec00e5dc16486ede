"""FastAPI application setup."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from learndoc.api.exceptions import ApiError
from learndoc.api.response import INTERNAL_ERROR, VALIDATION_ERROR, error_json
from learndoc.api.routes import documents, health
from learndoc.services import DocumentGenerator

logger = logging.getLogger(__name__)


def create_app(generator: Optional[DocumentGenerator] = None) -> FastAPI:
    """Build the API around a document generator.

    Args:
        generator: Orchestrator to serve. Built from env when None.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        # Startup
        yield
        # Shutdown
        await app.state.document_generator.shutdown()

    app = FastAPI(
        title="LearnDoc API",
        description="Backend API for generating structured LaTeX learning documents",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.document_generator = generator or DocumentGenerator()

    # CORS middleware for frontend dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:4321",
            "http://localhost:5173",
            "http://127.0.0.1:4321",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        """Map route errors onto their status and envelope code."""
        return error_json(exc.status_code, exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report malformed bodies and query params in the envelope."""
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "Invalid request")
        return error_json(
            400,
            VALIDATION_ERROR,
            f"{location}: {message}" if location else message,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle anything the routes did not."""
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return error_json(500, INTERNAL_ERROR, "Internal server error")

    # Register routes
    app.include_router(health.router)
    app.include_router(documents.router)

    return app


app = create_app()
