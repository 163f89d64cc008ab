"""
Pydantic-based configuration system for Bookmark Cosmos.

Configuration is read from an optional TOML or JSON file, with the Gemini
API key falling back to environment variables.
"""

import json
import os
import sys
import warnings
from pathlib import Path
from typing import Dict, List, Literal, Optional

import toml
from pydantic import (
    BaseModel,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)

from bookmark_cosmos.utils.api_key_validator import APIKeyValidator

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


class NetworkConfig(BaseModel):
    """Network settings for the AI provider."""

    timeout: int = Field(
        default=30,
        ge=5,
        le=300,
        description="Request timeout in seconds",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum retry attempts",
    )


class HostConfig(BaseModel):
    """Bookmark host selection and tree interpretation."""

    mode: Literal["mock", "chrome"] = Field(
        default="mock",
        description="'mock' serves preview data, 'chrome' reads a profile Bookmarks file",
    )
    bookmarks_file: Optional[Path] = Field(
        default=None,
        description="Chrome profile Bookmarks file; defaults to the platform's default profile",
    )
    root_ids: List[str] = Field(
        default_factory=lambda: ["0", "1", "2", "3"],
        description="Ids of the host's top-level containers",
    )
    default_category: str = Field(
        default="General",
        min_length=1,
        description="Category for bookmarks directly inside a root container",
    )
    fallback_category: str = Field(
        default="Uncategorized",
        min_length=1,
        description="Category for bookmarks without any usable folder",
    )
    new_folder_parent_id: str = Field(
        default="2",
        min_length=1,
        description="Host folder under which new folders are created",
    )
    mock_latency: float = Field(
        default=0.0,
        ge=0.0,
        le=10.0,
        description="Simulated delay of the mock host in seconds",
    )

    @field_validator("root_ids", mode="before")
    @classmethod
    def coerce_root_ids(cls, v):
        """Allow integer ids in configuration files."""
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v]
        return v

    @field_validator("default_category", "fallback_category")
    @classmethod
    def strip_label(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("category label must not be blank")
        return v


class ClassifierConfig(BaseModel):
    """AI classifier settings with secure API key handling."""

    gemini_api_key: Optional[SecretStr] = Field(
        default=None,
        description="Gemini API key",
    )
    model: str = Field(
        default="gemini-3-flash-preview",
        min_length=1,
        description="Gemini model name",
    )
    batch_size: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum bookmarks sent per classification request",
    )
    max_batches: int = Field(
        default=1,
        ge=1,
        le=100,
        description="Maximum classification requests per organize run",
    )

    @field_validator("gemini_api_key", mode="before")
    @classmethod
    def validate_api_key_format(cls, v):
        """Reject placeholder keys and warn about suspicious ones."""
        if v is None or v == "":
            return None

        key_str = v.get_secret_value() if isinstance(v, SecretStr) else str(v)

        if key_str in ["your-gemini-api-key-here", "placeholder"]:
            raise ValueError(
                "Please replace the placeholder API key with your actual "
                "Gemini API key."
            )

        is_valid, reason = APIKeyValidator.validate_format("gemini", key_str)
        if not is_valid:
            warnings.warn(
                f"Gemini API key looks unusual ({reason}). "
                "Please verify this is a valid API key.",
                UserWarning,
            )

        return SecretStr(key_str)


class CosmosConfig(BaseModel):
    """Main configuration model."""

    host: HostConfig = Field(default_factory=HostConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)

    @model_validator(mode="after")
    def validate_chrome_file(self):
        """A configured Bookmarks file must exist when the chrome host is used."""
        bookmarks_file = self.host.bookmarks_file
        if self.host.mode == "chrome" and bookmarks_file and not bookmarks_file.exists():
            raise ValueError(f"Chrome bookmarks file not found: {bookmarks_file}")
        return self


class ConfigurationManager:
    """Manages loading and validation of configuration from multiple sources."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)
        """
        self._config: Optional[CosmosConfig] = None
        self._load_configuration(config_path)

    def _get_default_config_paths(self) -> List[Path]:
        """Get list of default configuration file paths to try."""
        if getattr(sys, "frozen", False):
            app_dir = Path(sys.executable).parent
            return [
                app_dir / "user_config.toml",
                app_dir / "user_config.json",
            ]

        config_dir = Path(__file__).parent
        project_root = config_dir.parent.parent
        return [
            config_dir / "user_config.toml",
            config_dir / "user_config.json",
            project_root / "bookmark_cosmos.toml",
            project_root / "bookmark_cosmos.json",
        ]

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data: Dict = {}

        if config_path:
            config_data = self._load_config_file(Path(config_path))
        else:
            for path in self._get_default_config_paths():
                if path.exists():
                    config_data = self._load_config_file(path)
                    break

        self._load_api_key_from_env(config_data)

        try:
            self._config = CosmosConfig(**config_data)
        except ValidationError as e:
            raise ValueError(format_config_error(e))

    def _load_config_file(self, config_path: Path) -> Dict:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            if config_path.suffix.lower() == ".toml":
                return toml.load(config_path)
            elif config_path.suffix.lower() == ".json":
                with open(config_path, "r", encoding="utf-8") as f:
                    return json.load(f)
            else:
                raise ValueError(
                    f"Unsupported configuration file format: {config_path.suffix}"
                )
        except Exception as e:
            raise ValueError(f"Failed to load configuration from {config_path}: {e}")

    def _load_api_key_from_env(self, config_data: Dict) -> None:
        """Load the API key from environment variables as fallback."""
        classifier = config_data.setdefault("classifier", {})
        if classifier.get("gemini_api_key"):
            return
        for env_var in API_KEY_ENV_VARS:
            value = os.getenv(env_var)
            if value and value.strip():
                classifier["gemini_api_key"] = value.strip()
                return

    def update_from_cli_args(self, args: Dict) -> None:
        """Update configuration from command-line arguments."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")

        config_dict = self._config.model_dump()
        api_key = self._config.classifier.gemini_api_key
        config_dict["classifier"]["gemini_api_key"] = (
            api_key.get_secret_value() if api_key else None
        )

        if args.get("host"):
            config_dict["host"]["mode"] = args["host"]
        if args.get("bookmarks_file"):
            config_dict["host"]["bookmarks_file"] = args["bookmarks_file"]
        if args.get("batch_size"):
            config_dict["classifier"]["batch_size"] = args["batch_size"]

        try:
            self._config = CosmosConfig(**config_dict)
        except ValidationError as e:
            raise ValueError(format_config_error(e))

    @property
    def config(self) -> CosmosConfig:
        """Get the current configuration."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")
        return self._config


def _format_location(location: tuple) -> str:
    if not location:
        return "Configuration"
    return " -> ".join(str(part) for part in location)


def format_config_error(error: Exception) -> str:
    """
    Format any configuration-related error into a user-friendly message.

    Args:
        error: Exception that occurred during configuration

    Returns:
        Formatted error message
    """
    if isinstance(error, ValidationError):
        lines = ["Configuration validation failed:"]
        for detail in error.errors():
            location = _format_location(detail.get("loc", ()))
            message = detail.get("msg", "Invalid value")
            lines.append(f"  {location}: {message}")
        return "\n".join(lines)

    if isinstance(error, FileNotFoundError):
        return f"Configuration file not found: {error}"

    return f"Configuration error: {error}"
