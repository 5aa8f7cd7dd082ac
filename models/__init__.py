"""
SQLAlchemy ORM models for the Symptom Checker backend.
"""

from .symptom_record import SymptomRecord

__all__ = [
    "SymptomRecord",
]
