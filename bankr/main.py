"""FastAPI application factory and entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from bankr.config import Settings, get_settings
from bankr.core.exceptions import BankrError, EngineError, QueryValidationError
from bankr.core.logging import RequestLoggingMiddleware, logger, setup_logging
from bankr.routers import health_router, location_router, search_router
from bankr.services.context import SearchContext, build_context

API_BANNER = "Bankr API v3"

# OpenAPI tags metadata
tags_metadata = [
    {
        "name": "Health",
        "description": "Health check and engine status endpoints",
    },
    {
        "name": "Search",
        "description": "Free-text search over bank branches with bank abbreviation detection",
    },
    {
        "name": "Location",
        "description": "Reverse geocoding for the branch locator",
    },
]


def create_app(
    settings: Settings | None = None,
    context_factory: Callable[[Settings], SearchContext] = build_context,
) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan manager."""
        setup_logging(settings.debug)
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Environment: {settings.environment}")
        logger.info(f"Search engine: {settings.elasticsearch_url} (index {settings.index_name})")

        if settings.allowed_origins == "*":
            logger.warning("CORS: Allowing all origins (*) - this is insecure in production")

        try:
            context = context_factory(settings)
        except BankrError as e:
            logger.error(f"Startup failed: {e}")
            raise
        app.state.context = context
        logger.info(
            f"Abbreviations: {len(context.registry)} loaded from {context.registry.source}"
        )

        yield

        logger.info("Shutting down...")
        context.client.close()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "REST API for searching Indian bank branches by bank name, abbreviation, "
            "branch, place, IFSC or MICR code."
        ),
        version=settings.app_version,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware (NOTE: FastAPI processes in REVERSE order of add_middleware calls)
    health_prefix = f"{settings.api_prefix}/health"
    app.add_middleware(RequestLoggingMiddleware, skip_paths=(health_prefix,))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    @app.exception_handler(QueryValidationError)
    async def query_validation_handler(
        request: Request, exc: QueryValidationError
    ) -> JSONResponse:
        logger.debug(f"Rejected query on {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(EngineError)
    async def engine_error_handler(request: Request, exc: EngineError) -> JSONResponse:
        logger.error(f"Engine error during {exc.operation}: {exc} (cause: {exc.cause!r})")
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions.

        Clients only ever see the generic message; details are logged
        server-side.
        """
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": BankrError.public_message},
        )

    api_prefix = settings.api_prefix

    @app.get(api_prefix, include_in_schema=False)
    async def api_root() -> dict:
        return {"message": API_BANNER}

    app.include_router(health_router, prefix=api_prefix)
    app.include_router(search_router, prefix=api_prefix)
    app.include_router(location_router, prefix=api_prefix)

    # Mount the frontend last so API routes take precedence
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.static_dir), html=True), name="static")
        logger.info(f"Static files: Serving from {settings.static_dir}")

    return app


# Create app instance
app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bankr.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
