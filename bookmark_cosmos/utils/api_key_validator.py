"""
API key checks for the classification provider.

Keys are validated for shape only (no network call) and are never written
to logs or error messages in full.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class KeyFormat:
    prefix: str
    length: int
    pattern: str


KEY_FORMATS = {
    # Google AI Studio keys: "AIza" followed by 35 URL-safe characters
    "gemini": KeyFormat(prefix="AIza", length=39, pattern=r"AIza[0-9A-Za-z_\-]{35}"),
}

MASK = "***"


class APIKeyValidator:
    """Format validation and masking of provider API keys."""

    @classmethod
    def validate_format(cls, provider: str, api_key: str) -> Tuple[bool, Optional[str]]:
        """
        Check that a key looks like a key for the given provider.

        Args:
            provider: Provider name, e.g. ``"gemini"``
            api_key: Key to check

        Returns:
            Tuple of (is_valid, reason); reason is None for valid keys
        """
        if not api_key:
            return False, "API key is empty"

        key_format = KEY_FORMATS.get(provider)
        if key_format is None:
            return False, f"Unknown provider: {provider}"

        if len(api_key) < key_format.length:
            return False, f"API key too short (expected {key_format.length} characters)"
        if not api_key.startswith(key_format.prefix):
            return False, f"API key should start with '{key_format.prefix}'"
        if not re.fullmatch(key_format.pattern, api_key):
            return False, "API key contains unexpected characters"

        return True, None

    @staticmethod
    def sanitize_for_logging(api_key: str) -> str:
        """Show only the first six and last three characters of a key."""
        if not api_key or len(api_key) < 10:
            return MASK
        return f"{api_key[:6]}...{api_key[-3:]}"

    @classmethod
    def mask_in_error_message(cls, message: str, api_keys: Iterable[Optional[str]]) -> str:
        """
        Replace known keys, and anything shaped like a provider key, in a message.

        Args:
            message: Text that may contain keys, e.g. an exception message
            api_keys: Keys known to the caller; None entries are skipped
        """
        for key in api_keys:
            if key:
                message = message.replace(key, cls.sanitize_for_logging(key))

        for key_format in KEY_FORMATS.values():
            message = re.sub(
                key_format.pattern,
                lambda match: cls.sanitize_for_logging(match.group(0)),
                message,
            )
        return message
