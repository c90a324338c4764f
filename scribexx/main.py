"""
ScribexX

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scribexx.ai.feedback import WritingAnalysisError
from scribexx.api.middleware.request_id import RequestIdMiddleware
from scribexx.api.v1 import router as api_v1_router
from scribexx.config import get_settings, openai_configured
from scribexx.database import close_db, init_db
from scribexx.engines.progress.errors import ProgressNotInitializedError, UnknownCatalogItemError
from scribexx.logging_config import configure_logging, get_logger
from scribexx.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    ScribexX writing-education backend.

    ## Features

    - **REDI**: leveled grammar and style exercises with per-skill mastery
    - **OWL**: writing quests across town locations that unlock with mastery
    - **Rewards**: currency, achievements, writing streaks and daily challenges
    - **AI Feedback**: scored writing reviews with suggested exercises
    - **Dashboards**: teachers and parents follow linked students
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# add_middleware stacks innermost-first, so CORS (added last) wraps everything.
_cors_origins = list(settings.cors_origins)

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _cors_headers(request: Request) -> dict:
    """CORS headers for error responses; 500s can bypass the CORS middleware."""
    origin = request.headers.get("origin") or ""
    allow_origin = origin if origin in _cors_origins else (_cors_origins[0] if _cors_origins else "*")
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "*",
        "Access-Control-Allow-Headers": "*",
    }


def _error_response(request: Request, status_code: int, content: dict) -> JSONResponse:
    headers = _cors_headers(request)
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers["X-Request-ID"] = req_id
        if status_code >= 500:
            content["request_id"] = req_id
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(request, exc.status_code, {"detail": exc.detail})


@app.exception_handler(ProgressNotInitializedError)
async def progress_not_initialized_handler(request: Request, exc: ProgressNotInitializedError):
    """Transitions need an existing row; GET /progress creates it."""
    return _error_response(request, status.HTTP_409_CONFLICT, {
        "detail": str(exc),
        "code": "progress_not_initialized",
    })


@app.exception_handler(UnknownCatalogItemError)
async def unknown_catalog_item_handler(request: Request, exc: UnknownCatalogItemError):
    return _error_response(request, status.HTTP_404_NOT_FOUND, {
        "detail": str(exc),
        "code": f"unknown_{exc.kind}",
    })


@app.exception_handler(WritingAnalysisError)
async def writing_analysis_handler(request: Request, exc: WritingAnalysisError):
    return _error_response(request, status.HTTP_502_BAD_GATEWAY, {
        "detail": str(exc),
        "code": "writing_analysis_failed",
    })


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    content = {"detail": "Validation error", "errors": errors}
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        content["request_id"] = req_id
    return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, content)


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    req_id = getattr(request.state, "request_id", None)
    if settings.debug:
        content = {
            "detail": str(exc),
            "type": type(exc).__name__,
            "request_id": req_id,
        }
    else:
        content = {"detail": "Internal server error", "request_id": req_id}
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(
        status="ok",
        version=settings.version,
        database="connected",
        ai_configured=openai_configured(settings),
    )


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": {
            "v1": settings.api_v1_prefix,
        },
    }


app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "scribexx.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
