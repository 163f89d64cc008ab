"""
Structured Output Models for AI Responses

This module defines the Pydantic models, response schema and prompt used to
obtain bookmark categories from the AI provider as structured JSON.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class CategoryAssignment(BaseModel):
    """A single bookmark id and the category the AI assigned to it."""

    id: str = Field(..., min_length=1, description="Bookmark id from the request")
    category: str = Field(
        ..., min_length=1, max_length=60, description="Short high-level category"
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Accept numeric ids from the model and normalize to strings."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v

    @field_validator("category")
    @classmethod
    def clean_category(cls, v: str) -> str:
        """Strip whitespace and surrounding quotes."""
        v = v.strip().strip("\"'").strip()
        if not v:
            raise ValueError("category is blank")
        return v


class CategorizationResponse(BaseModel):
    """Top-level structured output for a categorization request."""

    categorization: List[Any] = Field(
        default_factory=list,
        description="Category assignments, one per bookmark",
    )


# Response schema in Gemini generationConfig format
GEMINI_CATEGORIZATION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "categorization": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "category": {"type": "STRING"},
                },
                "required": ["id", "category"],
            },
        }
    },
    "required": ["categorization"],
}


def _strip_code_fence(response_text: str) -> str:
    if "```" not in response_text:
        return response_text
    match = re.search(r"```(?:json)?\s*(.*?)\s*```", response_text, re.DOTALL)
    return match.group(1) if match else response_text


def parse_categorization_response(response_text: Optional[str]) -> Dict[str, str]:
    """
    Parse AI response text into an ``id -> category`` mapping.

    Entries missing an id or a category are dropped; the rest are kept.

    Args:
        response_text: Raw response text from AI

    Returns:
        Mapping of bookmark id to category; empty for an empty response

    Raises:
        ValueError: If the text is not JSON or lacks a ``categorization`` list
    """
    if not response_text or not response_text.strip():
        return {}

    try:
        data = json.loads(_strip_code_fence(response_text).strip())
    except json.JSONDecodeError as e:
        raise ValueError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("categorization"), list):
        raise ValueError("Response has no 'categorization' list")

    try:
        response = CategorizationResponse(**data)
    except ValidationError as e:
        raise ValueError(f"Response has unexpected shape: {e}") from e

    category_map: Dict[str, str] = {}
    dropped = 0
    for item in response.categorization:
        try:
            assignment = CategoryAssignment(**item)
        except (ValidationError, TypeError):
            dropped += 1
            continue
        category_map[assignment.id] = assignment.category

    if dropped:
        logger.debug(f"Dropped {dropped} malformed categorization entries")
    return category_map


def create_categorization_prompt(sample: List[Dict[str, str]]) -> str:
    """
    Create a prompt asking for one short category per bookmark.

    Args:
        sample: Bookmarks as ``{id, title, url}`` dictionaries

    Returns:
        Formatted prompt string
    """
    return (
        "You are an expert bookmark organizer. Analyze the following list of "
        "bookmarks and assign a single, short, 1-word or 2-word high-level "
        "category to each one (e.g., 'Development', 'News', 'Shopping', "
        "'Social', 'Design').\n\n"
        "Respond with a JSON object of the form "
        '{"categorization": [{"id": "<bookmark id>", "category": "<category>"}]}.\n\n'
        "Bookmarks to process:\n"
        f"{json.dumps(sample, ensure_ascii=False)}\n"
    )
