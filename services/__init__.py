"""
Services module for the Symptom Checker backend.

Contains business logic and external service integrations.
"""
