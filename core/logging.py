"""
Logging configuration for the Symptom Checker backend.

Uses structlog for structured logging with JSON output and file-based logging.
"""

import logging
import sys
import os
from datetime import datetime
from typing import Optional
import structlog
from structlog.stdlib import LoggerFactory

from core.config import Settings, settings


def setup_logging(app_settings: Optional[Settings] = None) -> structlog.stdlib.BoundLogger:
    """Setup structured logging configuration with file-based logging."""
    app_settings = app_settings or settings

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if not app_settings.DEBUG else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    # Console handler (always enabled)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logs_dir = app_settings.LOGS_DIR
    day = datetime.now().strftime('%Y%m%d')

    if app_settings.ENABLE_FILE_LOGGING:
        os.makedirs(logs_dir, exist_ok=True)

        app_file_handler = logging.FileHandler(os.path.join(logs_dir, f"app_{day}.log"), encoding='utf-8')
        app_file_handler.setFormatter(formatter)
        app_file_handler.setLevel(logging.INFO)
        root_logger.addHandler(app_file_handler)

        error_file_handler = logging.FileHandler(os.path.join(logs_dir, f"error_{day}.log"), encoding='utf-8')
        error_file_handler.setFormatter(formatter)
        error_file_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_file_handler)

    request_logger = logging.getLogger("requests")
    request_logger.handlers.clear()
    if app_settings.ENABLE_REQUEST_LOGGING and app_settings.ENABLE_FILE_LOGGING:
        request_logger.setLevel(logging.INFO)
        # Prevent propagation to root logger to avoid duplicate logs
        request_logger.propagate = False

        request_file_handler = logging.FileHandler(os.path.join(logs_dir, f"requests_{day}.log"), encoding='utf-8')
        request_file_handler.setFormatter(formatter)
        request_logger.addHandler(request_file_handler)
    else:
        request_logger.propagate = True

    logger = structlog.get_logger()

    # Add Sentry integration if configured
    if (app_settings.SENTRY_DSN and
            app_settings.SENTRY_DSN.strip() and
            not app_settings.SENTRY_DSN.startswith('your-sentry')):
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=app_settings.SENTRY_DSN,
            environment=app_settings.SENTRY_ENVIRONMENT,
            integrations=[
                FastApiIntegration(),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=0.1 if app_settings.ENV == "production" else 1.0,
        )

        logger.info("Sentry integration enabled", environment=app_settings.SENTRY_ENVIRONMENT)

    return logger


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)


async def log_request_middleware(request, call_next):
    """Log incoming requests."""
    logger = get_logger("requests")

    logger.info(
        "Request started",
        method=request.method,
        url=str(request.url),
        client_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

    response = await call_next(request)

    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
    )

    return response
