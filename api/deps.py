"""
Dependency injection utilities for API endpoints.

Services are built once by the application factory and kept on ``app.state``.
"""

from fastapi import Request

from core.config import Settings
from core.database import Database
from services.history_service import SymptomHistoryService
from services.transcription_service import TranscriptionService
from services.triage_service import TriageService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_triage_service(request: Request) -> TriageService:
    return request.app.state.triage_service


def get_transcription_service(request: Request) -> TranscriptionService:
    return request.app.state.transcription_service


def get_history_service(request: Request) -> SymptomHistoryService:
    return request.app.state.history_service
