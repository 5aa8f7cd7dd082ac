"""
Pydantic schemas for the Symptom Checker backend.

Contains all API request/response schemas organized by module.
"""

from .symptom_checker import *
from .responses import *
