"""
Configuration management for doc-translator.

Handles loading configuration from YAML files and environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from doc_translator.errors import InvalidArgument

# Load .env file if present (before Settings initialization)
load_dotenv()

MAX_BETWEEN_BLOCKS_LINES = 20


class GoogleCloudConfig(BaseModel):
    """Google Cloud project and storage settings."""

    project_id: str = Field(default="")
    location: str = Field(default="global")
    # Only needed for PDF -> DOCX conversion through batch translation
    translation_bucket: str = Field(default="")
    max_retries: int = Field(default=3, ge=1, le=10)

    @field_validator("translation_bucket")
    @classmethod
    def normalize_bucket(cls, v: str) -> str:
        """Accept `name`, `gs://name` or `gs://name/prefix` and keep the bucket name."""
        return normalize_bucket_name(v)


class BatchConfig(BaseModel):
    """Limits applied to every batch."""

    max_files: int = Field(default=50, ge=1, le=1000)
    # Number of items translated at once
    concurrency: int = Field(default=10, ge=1, le=100)
    # Page ceiling of a single synchronous document translation call
    max_pages_per_request: int = Field(default=20, ge=1, le=1000)
    # Segments of one oversized PDF translated at once (1 = strictly sequential)
    segment_concurrency: int = Field(default=1, ge=1, le=20)
    max_file_size_mb: int = Field(default=20, ge=1, le=1024)
    between_blocks_lines: int = Field(default=0, ge=0, le=MAX_BETWEEN_BLOCKS_LINES)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO")
    file: Path | None = Field(default=None)
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    max_file_size_mb: int = Field(default=10, ge=1, le=100)
    backup_count: int = Field(default=5, ge=1, le=20)


@dataclass
class TranslatorOptions:
    """Explicit configuration the batch translator is constructed with."""

    max_pages_per_request: int = 20
    concurrency: int = 10
    segment_concurrency: int = 1
    max_files: int = 50
    max_file_size_bytes: int = 20 * 1024 * 1024


class Settings(BaseSettings):
    """Main settings class that combines all configurations."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_TRANSLATOR_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    google: GoogleCloudConfig = Field(default_factory=GoogleCloudConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def __init__(self, **data: Any) -> None:
        """Initialize with the flat environment variables used by deployments."""
        super().__init__(**data)
        if not self.google.project_id:
            self.google.project_id = (
                os.getenv("GCP_PROJECT_ID")
                or os.getenv("GOOGLE_CLOUD_PROJECT")
                or os.getenv("GCLOUD_PROJECT")
                or ""
            )
        if os.getenv("GCP_LOCATION") and "location" not in _explicit_keys(data, "google"):
            self.google.location = os.environ["GCP_LOCATION"]
        if not self.google.translation_bucket:
            self.google.translation_bucket = normalize_bucket_name(
                os.getenv("GCS_TRANSLATION_BUCKET", "")
            )

        batch_overrides = {
            "max_files": _env_int("MAX_FILES"),
            "concurrency": _env_int("IMAGE_BATCH_SIZE"),
            "max_pages_per_request": _env_int("MAX_PAGES_PER_REQUEST"),
        }
        explicit = _explicit_keys(data, "batch")
        for key, value in batch_overrides.items():
            if value is not None and key not in explicit:
                setattr(self.batch, key, max(1, value))

    @classmethod
    def from_yaml(cls, path: Path | str) -> Settings:
        """Load settings from a YAML file, with environment variable overrides."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        yaml_config = _substitute_env_vars(yaml_config)

        return cls(**yaml_config)

    def translator_options(self) -> TranslatorOptions:
        """Build the options object the batch translator is constructed with."""
        return TranslatorOptions(
            max_pages_per_request=self.batch.max_pages_per_request,
            concurrency=self.batch.concurrency,
            segment_concurrency=self.batch.segment_concurrency,
            max_files=self.batch.max_files,
            max_file_size_bytes=self.batch.max_file_size_mb * 1024 * 1024,
        )


def _explicit_keys(data: dict[str, Any], section: str) -> set[str]:
    """Keys of a config section that were passed explicitly rather than defaulted."""
    value = data.get(section)
    if isinstance(value, dict):
        return set(value)
    if isinstance(value, BaseModel):
        return set(value.model_fields_set)
    return set()


def _env_int(name: str) -> int | None:
    """Read an integer environment variable, ignoring unset or non-numeric values."""
    value = os.getenv(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _substitute_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively substitute ${ENV_VAR} patterns in config values."""
    result = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = _substitute_env_vars(value)
        elif isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            result[key] = os.getenv(env_var, "")
        elif isinstance(value, list):
            result[key] = [
                _substitute_env_vars(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


def normalize_bucket_name(bucket_or_uri: str | None) -> str:
    """Strip an optional `gs://` scheme and object prefix from a bucket reference."""
    if not bucket_or_uri:
        return ""
    value = bucket_or_uri.strip()
    if value.lower().startswith("gs://"):
        value = value[5:]
    return value.lstrip("/").split("/")[0]


def resolve_project_id(settings: Settings) -> str:
    """
    Resolve the Google Cloud project to bill translation calls to.

    Uses the configured project first, then the project attached to
    Application Default Credentials.

    Raises:
        InvalidArgument: If no project can be determined.
    """
    if settings.google.project_id:
        return settings.google.project_id

    import google.auth
    from google.auth.exceptions import DefaultCredentialsError

    try:
        _, project_id = google.auth.default(
            scopes=["https://www.googleapis.com/auth/cloud-platform"]
        )
    except DefaultCredentialsError:
        project_id = None

    if not project_id:
        raise InvalidArgument(
            "Missing project id. Set GCP_PROJECT_ID or configure Application Default "
            "Credentials via: gcloud auth application-default login."
        )
    return project_id


def load_config(path: Path | str | None = None) -> Settings:
    """
    Load configuration from YAML file or return defaults.

    Args:
        path: Path to YAML config file. If None, looks for config.yaml in current directory.

    Returns:
        Settings instance with merged YAML and environment configurations.
    """
    if path is None:
        default_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(".doc-translator.yaml"),
        ]
        for p in default_paths:
            if p.exists():
                path = p
                break

    if path is not None:
        return Settings.from_yaml(path)

    return Settings()


def create_default_config(path: Path | str = "config.yaml") -> None:
    """Create a default configuration file."""
    default_config = """# doc-translator configuration
google:
  # Falls back to GCP_PROJECT_ID / GOOGLE_CLOUD_PROJECT, then gcloud credentials
  project_id: "${GCP_PROJECT_ID}"
  location: "global"
  # Needed only for PDF -> DOCX conversion (e.g. "my-bucket" or "gs://my-bucket")
  translation_bucket: "${GCS_TRANSLATION_BUCKET}"

batch:
  # Maximum files accepted in one batch
  max_files: 50
  # Files translated at the same time
  concurrency: 10
  # Page ceiling of one document translation call; larger PDFs are split
  max_pages_per_request: 20
  # Segments of one large PDF translated at the same time
  segment_concurrency: 1
  max_file_size_mb: 20
  # Blank lines between blocks in combined text output (0-20)
  between_blocks_lines: 0

logging:
  level: "INFO"
  file: "./logs/doc-translator.log"
"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)
