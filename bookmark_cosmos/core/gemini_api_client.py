"""
Gemini API Client Implementation

This module provides a client for the Google Gemini ``generateContent`` REST
API with bookmark-specific functionality for assigning categories using a
JSON response schema.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from bookmark_cosmos.core.base_api_client import APIClientError, BaseAPIClient
from bookmark_cosmos.core.structured_output import (
    GEMINI_CATEGORIZATION_SCHEMA,
    create_categorization_prompt,
    parse_categorization_response,
)


class GeminiAPIClient(BaseAPIClient):
    """
    Gemini API client for categorizing bookmarks.

    Sends one request per sample and asks for structured JSON output.
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
    DEFAULT_MODEL = "gemini-3-flash-preview"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: int = 30,
        max_retries: int = 3,
    ):
        """
        Initialize Gemini API client.

        Args:
            api_key: Gemini API key
            model: Model name used in the request URL
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
        """
        super().__init__(api_key, timeout=timeout, max_retries=max_retries)
        self.model = model

        self.total_input_tokens = 0
        self.total_output_tokens = 0

        self.logger = logging.getLogger(__name__)

    @property
    def endpoint(self) -> str:
        return f"{self.BASE_URL}/{self.model}:generateContent"

    def _get_auth_headers(self) -> Dict[str, str]:
        """Get Gemini-specific authentication headers."""
        return {"x-goog-api-key": self.api_key}

    def _build_request(self, sample: List[Dict[str, str]]) -> Dict[str, Any]:
        return {
            "contents": [
                {"role": "user", "parts": [{"text": create_categorization_prompt(sample)}]}
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": GEMINI_CATEGORIZATION_SCHEMA,
                "temperature": 0.2,
            },
        }

    @staticmethod
    def _extract_text(response: Dict[str, Any]) -> str:
        """
        Pull the generated text out of a ``generateContent`` response.

        Raises:
            APIClientError: If the response has no candidate text
        """
        candidates = response.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            raise APIClientError("Empty response from Gemini API")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(
            part.get("text", "") for part in parts if isinstance(part, dict)
        )
        return text

    async def classify_batch(self, sample: List[Dict[str, str]]) -> Dict[str, str]:
        """
        Assign a category to each bookmark in the sample.

        Args:
            sample: Bookmarks as ``{id, title, url}`` dictionaries

        Returns:
            Partial mapping of bookmark id to category

        Raises:
            APIClientError: On request failure or an unusable response
        """
        if not sample:
            return {}

        response = await self._make_request(
            method="POST",
            url=self.endpoint,
            data=self._build_request(sample),
        )

        usage = response.get("usageMetadata", {}) or {}
        self.total_input_tokens += usage.get("promptTokenCount", 0)
        self.total_output_tokens += usage.get("candidatesTokenCount", 0)

        text = self._extract_text(response)
        try:
            category_map = parse_categorization_response(text)
        except ValueError as e:
            raise APIClientError(f"Malformed categorization response: {e}") from e

        self.logger.debug(
            f"Gemini categorized {len(category_map)} of {len(sample)} bookmarks"
        )
        return category_map

    def _get_mock_response(
        self, method: str, url: str, data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Generate Gemini-formatted mock response for test mode.

        Every bookmark in the request is assigned the category ``"Mock"``.
        """
        ids: List[str] = []
        try:
            prompt = data["contents"][0]["parts"][0]["text"]
            sample = json.loads(prompt.split("Bookmarks to process:\n", 1)[1])
            ids = [str(item["id"]) for item in sample]
        except (KeyError, IndexError, TypeError, ValueError):
            pass

        payload = {"categorization": [{"id": i, "category": "Mock"} for i in ids]}
        return {
            "candidates": [{"content": {"parts": [{"text": json.dumps(payload)}]}}],
            "usageMetadata": {"promptTokenCount": 100, "candidatesTokenCount": 20},
            "test_mode": True,
        }

    def get_usage_statistics(self) -> Dict[str, Any]:
        """
        Get detailed usage statistics.

        Returns:
            Dictionary with usage data
        """
        stats = super().get_usage_statistics()
        stats.update(
            {
                "provider": "gemini",
                "model": self.model,
                "total_input_tokens": self.total_input_tokens,
                "total_output_tokens": self.total_output_tokens,
            }
        )
        return stats
