# backend/directory/services/search/llm_schema.py
"""
Pydantic schema for the query-enhancement completion.

The model is asked for a JSON object; this schema validates it before the
search pipeline trusts any of its fields.
"""
from typing import List

from pydantic import Field, field_validator

from ...schemas.base import StandardizedModel


class SearchEnhancement(StandardizedModel):
    """Structured interpretation of a free-text directory query."""

    keywords: List[str] = Field(default_factory=list, description="Search terms and synonyms")
    business_types: List[str] = Field(
        default_factory=list, description="Category names that match the request"
    )
    services: List[str] = Field(default_factory=list, description="Specific services mentioned")
    intent: str = Field(default="", description="One-sentence summary of what the user wants")

    @field_validator("keywords", "business_types", "services", mode="before")
    @classmethod
    def _clean_terms(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            cleaned = []
            for item in value:
                text = str(item).strip()
                if text and text.lower() not in {c.lower() for c in cleaned}:
                    cleaned.append(text)
            return cleaned
        return value

    @field_validator("intent", mode="before")
    @classmethod
    def _intent_text(cls, value: object) -> object:
        return "" if value is None else value
