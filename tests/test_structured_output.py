"""
Tests for structured output parsing of categorization responses.
"""

import json

import pytest
from pydantic import ValidationError

from bookmark_cosmos.core.structured_output import (
    CategoryAssignment,
    create_categorization_prompt,
    parse_categorization_response,
)


class TestCategoryAssignment:
    """Test CategoryAssignment model."""

    def test_numeric_id_is_string(self):
        assignment = CategoryAssignment(id=12, category="News")
        assert assignment.id == "12"

    def test_category_is_cleaned(self):
        assignment = CategoryAssignment(id="1", category=' "Design" ')
        assert assignment.category == "Design"

    def test_blank_category_rejected(self):
        with pytest.raises(ValidationError):
            CategoryAssignment(id="1", category="   ")

    def test_long_category_rejected(self):
        with pytest.raises(ValidationError):
            CategoryAssignment(id="1", category="x" * 61)


class TestParseCategorizationResponse:
    """Test parse_categorization_response function."""

    def test_valid_response(self):
        text = json.dumps(
            {
                "categorization": [
                    {"id": "1", "category": "Development"},
                    {"id": "2", "category": "Design"},
                ]
            }
        )

        assert parse_categorization_response(text) == {
            "1": "Development",
            "2": "Design",
        }

    def test_code_fenced_response(self):
        text = '```json\n{"categorization": [{"id": "1", "category": "AI"}]}\n```'
        assert parse_categorization_response(text) == {"1": "AI"}

    def test_malformed_entries_are_dropped(self):
        text = json.dumps(
            {
                "categorization": [
                    {"id": "1", "category": "AI"},
                    {"id": "2"},
                    {"category": "Orphan"},
                    "junk",
                    {"id": "3", "category": ""},
                ]
            }
        )

        assert parse_categorization_response(text) == {"1": "AI"}

    def test_empty_text(self):
        assert parse_categorization_response("") == {}
        assert parse_categorization_response(None) == {}

    def test_not_json(self):
        with pytest.raises(ValueError):
            parse_categorization_response("Sure! Here are your categories")

    def test_missing_list(self):
        with pytest.raises(ValueError):
            parse_categorization_response('{"result": []}')

    def test_empty_list(self):
        assert parse_categorization_response('{"categorization": []}') == {}


class TestCreateCategorizationPrompt:
    """Test prompt creation."""

    def test_sample_is_embedded_as_json(self):
        sample = [{"id": "1", "title": "GitHub", "url": "https://github.com"}]

        prompt = create_categorization_prompt(sample)

        payload = prompt.split("Bookmarks to process:\n", 1)[1]
        assert json.loads(payload) == sample
        assert "categorization" in prompt
