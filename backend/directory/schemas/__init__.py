"""Pydantic request/response schemas for the directory API."""
