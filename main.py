"""
Symptom Checker Backend - FastAPI Application Entry Point

JSON API behind the symptom checker UI: quick triage, detailed analysis,
voice transcription and symptom history.
"""

from contextlib import asynccontextmanager
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

import models  # noqa: F401  registers tables on Base.metadata
from core.config import Settings, settings
from core.database import Database
from core.logging import setup_logging, get_logger, log_request_middleware
from api.deps import get_database, get_settings
from api.v1 import symptom_checker, voice
from schemas.responses import HealthResponse
from services.history_service import SymptomHistoryService
from services.transcription_service import TranscriptionService
from services.triage_service import TriageService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(f"Starting {app_settings.APP_NAME}...")

    if database.enabled and app_settings.DATABASE_AUTO_CREATE:
        try:
            await database.create_all()
        except Exception as e:
            logger.error(f"Could not create database tables: {e}")

    yield

    logger.info(f"Shutting down {app_settings.APP_NAME}...")
    await database.dispose()


def client_host(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def jsonable_errors(errors):
    """Validation errors may carry exception objects in ``ctx``."""
    return jsonable_encoder(errors, custom_encoder={Exception: str})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and its services from settings."""
    app_settings = app_settings or settings
    setup_logging(app_settings)

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Symptom triage, detailed analysis, voice transcription and history",
        version=app_settings.VERSION,
        docs_url="/docs" if app_settings.DEBUG else None,
        redoc_url="/redoc" if app_settings.DEBUG else None,
        openapi_url="/openapi.json" if app_settings.DEBUG else None,
        lifespan=lifespan,
    )

    database = Database(app_settings.DATABASE_URL, echo=app_settings.DATABASE_ECHO)
    app.state.settings = app_settings
    app.state.database = database
    app.state.triage_service = TriageService.from_settings(app_settings)
    app.state.transcription_service = TranscriptionService.from_settings(app_settings)
    app.state.history_service = SymptomHistoryService(
        database,
        history_limit=app_settings.HISTORY_LIMIT,
        context_limit=app_settings.HISTORY_CONTEXT_LIMIT,
    )

    if not app_settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set. Symptom checks will return default results.")
    if not app_settings.ELEVENLABS_API_KEY:
        logger.warning("ELEVENLABS_API_KEY is not set. Voice transcription is disabled.")
    if not database.enabled:
        logger.warning("DATABASE_URL is not set. Symptom history is disabled.")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if app_settings.ENABLE_REQUEST_LOGGING:
        app.middleware("http")(log_request_middleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation exceptions."""
        logger.error(
            f"Validation Exception: {exc.errors()} | "
            f"Path: {request.url.path} | "
            f"Method: {request.method} | "
            f"Client: {client_host(request)}"
        )
        errors = exc.errors()
        user_message = errors[0].get("msg", "Invalid input data") if errors else "Invalid input data"

        return JSONResponse(
            status_code=422,
            content={
                "status": "error",
                "message": user_message,
                "detail": jsonable_errors(errors),
            }
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.error(
            f"HTTP Exception: {exc.detail} | "
            f"Path: {request.url.path} | "
            f"Method: {request.method} | "
            f"Client: {client_host(request)}"
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": "error",
                "message": exc.detail,
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Server Exception: {exc} | "
            f"Path: {request.url.path} | "
            f"Method: {request.method} | "
            f"Client: {client_host(request)}"
        )
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Internal server error",
            }
        )

    @app.get("/health", response_model=HealthResponse)
    async def health(
        current_settings: Settings = Depends(get_settings),
        current_database: Database = Depends(get_database),
    ):
        return HealthResponse(
            service=current_settings.APP_NAME,
            version=current_settings.VERSION,
            database=current_database.enabled,
        )

    # Include API routers
    app.include_router(symptom_checker.router, tags=["Symptom Checker"])
    app.include_router(voice.router, tags=["Voice"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
