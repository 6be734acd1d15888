"""
Job board API - Main FastAPI application
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from jobboard.core.config import settings
from jobboard.core.database import Database
from jobboard.core.logging_config import configure_logging
from jobboard.core.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    ExceptionHandlerMiddleware,
    error_payload,
)
from jobboard.core.exceptions import JobBoardException, ValidationError
from jobboard.jobs.router import router as jobs_router
from jobboard.greenhouse.router import router as greenhouse_router

logger = structlog.get_logger()


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    The database is opened in the lifespan (or taken from the caller, which
    then keeps ownership) and disposed when the application shuts down.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_database = database is None
        app.state.database = database or Database.from_settings()
        logger.info("application_starting", version=settings.APP_VERSION)

        try:
            app.state.database.create_all()
        except Exception as e:
            logger.error("database_init_failed", error=str(e))
            raise

        yield

        logger.info("application_shutting_down")
        if owns_database:
            app.state.database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Job board API with Greenhouse job import",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(CorrelationIDMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ExceptionHandlerMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(JobBoardException)
    async def jobboard_exception_handler(request: Request, exc: JobBoardException):
        """Handle job board exceptions"""
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed request bodies and query parameters in the error envelope"""
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        error = ValidationError("Request validation failed", details={"errors": errors})
        return JSONResponse(status_code=error.status_code, content=error_payload(error))

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/api/docs",
        }

    app.include_router(jobs_router)
    app.include_router(greenhouse_router)

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "jobboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
