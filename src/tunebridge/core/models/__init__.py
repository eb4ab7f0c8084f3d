"""Pydantic configuration models, data models and service protocols."""
