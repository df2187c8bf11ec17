"""
Tests for settings loading, environment fallbacks and logging setup.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from google.auth.exceptions import DefaultCredentialsError

from doc_translator.config import (
    LoggingConfig,
    Settings,
    create_default_config,
    load_config,
    normalize_bucket_name,
    resolve_project_id,
)
from doc_translator.errors import InvalidArgument
from doc_translator.logging_config import setup_logging

FLAT_ENV = (
    "GCP_PROJECT_ID",
    "GOOGLE_CLOUD_PROJECT",
    "GCLOUD_PROJECT",
    "GCP_LOCATION",
    "GCS_TRANSLATION_BUCKET",
    "MAX_FILES",
    "IMAGE_BATCH_SIZE",
    "MAX_PAGES_PER_REQUEST",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in FLAT_ENV:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.google.project_id == ""
        assert settings.google.location == "global"
        assert settings.batch.max_files == 50
        assert settings.batch.concurrency == 10
        assert settings.batch.max_pages_per_request == 20
        assert settings.batch.segment_concurrency == 1

    def test_project_env_precedence(self, monkeypatch):
        monkeypatch.setenv("GCLOUD_PROJECT", "third")
        assert Settings().google.project_id == "third"

        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "second")
        assert Settings().google.project_id == "second"

        monkeypatch.setenv("GCP_PROJECT_ID", "first")
        assert Settings().google.project_id == "first"

    def test_explicit_project_wins(self, monkeypatch):
        monkeypatch.setenv("GCP_PROJECT_ID", "from-env")

        assert Settings(google={"project_id": "explicit"}).google.project_id == "explicit"

    def test_location_env(self, monkeypatch):
        monkeypatch.setenv("GCP_LOCATION", "us-central1")

        assert Settings().google.location == "us-central1"
        assert Settings(google={"location": "europe-west1"}).google.location == "europe-west1"

    def test_bucket_env_is_normalized(self, monkeypatch):
        monkeypatch.setenv("GCS_TRANSLATION_BUCKET", "gs://my-bucket/some/prefix")

        assert Settings().google.translation_bucket == "my-bucket"

    def test_batch_env_overrides(self, monkeypatch):
        monkeypatch.setenv("MAX_FILES", "7")
        monkeypatch.setenv("IMAGE_BATCH_SIZE", "3")
        monkeypatch.setenv("MAX_PAGES_PER_REQUEST", "0")

        settings = Settings()

        assert settings.batch.max_files == 7
        assert settings.batch.concurrency == 3
        assert settings.batch.max_pages_per_request == 1

    def test_non_numeric_env_is_ignored(self, monkeypatch):
        monkeypatch.setenv("MAX_FILES", "lots")

        assert Settings().batch.max_files == 50

    def test_explicit_batch_values_win(self, monkeypatch):
        monkeypatch.setenv("MAX_FILES", "7")

        assert Settings(batch={"max_files": 12}).batch.max_files == 12

    def test_translator_options(self):
        settings = Settings(batch={"max_file_size_mb": 2, "concurrency": 4})

        options = settings.translator_options()

        assert options.max_file_size_bytes == 2 * 1024 * 1024
        assert options.concurrency == 4
        assert options.max_pages_per_request == 20


class TestYamlConfig:
    def test_yaml_with_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MY_PROJECT", "yaml-project")
        path = tmp_path / "config.yaml"
        path.write_text(
            "google:\n"
            '  project_id: "${MY_PROJECT}"\n'
            '  translation_bucket: "gs://staging"\n'
            "batch:\n"
            "  max_files: 5\n"
            "  segment_concurrency: 2\n",
            encoding="utf-8",
        )

        settings = load_config(path)

        assert settings.google.project_id == "yaml-project"
        assert settings.google.translation_bucket == "staging"
        assert settings.batch.max_files == 5
        assert settings.batch.segment_concurrency == 2

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = Settings.from_yaml(tmp_path / "absent.yaml")

        assert settings.batch.max_files == 50

    def test_default_config_round_trips(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GCP_PROJECT_ID", "proj")
        path = tmp_path / "nested" / "config.yaml"

        create_default_config(path)
        settings = load_config(path)

        assert settings.google.project_id == "proj"
        assert settings.batch.between_blocks_lines == 0
        assert settings.logging.level == "INFO"


class TestNormalizeBucketName:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("bucket", "bucket"),
            ("gs://bucket", "bucket"),
            ("GS://bucket/prefix/deeper", "bucket"),
            ("  gs://bucket/  ", "bucket"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize(self, value, expected):
        assert normalize_bucket_name(value) == expected


class TestResolveProjectId:
    def test_configured_project(self):
        assert resolve_project_id(Settings(google={"project_id": "p"})) == "p"

    def test_credentials_project(self, monkeypatch):
        monkeypatch.setattr("google.auth.default", lambda scopes=None: (object(), "adc-project"))

        assert resolve_project_id(Settings()) == "adc-project"

    def test_missing_project(self, monkeypatch):
        def no_credentials(scopes=None):
            raise DefaultCredentialsError("no credentials")

        monkeypatch.setattr("google.auth.default", no_credentials)

        with pytest.raises(InvalidArgument, match="GCP_PROJECT_ID"):
            resolve_project_id(Settings())


class TestLogging:
    def test_console_and_file_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"

        setup_logging(LoggingConfig(level="WARNING", file=log_file))

        logger = logging.getLogger("doc_translator")
        assert logger.level == logging.DEBUG
        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        assert log_file.parent.exists()
        assert logging.getLogger("google.api_core").level == logging.WARNING

        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_console_only(self):
        setup_logging(LoggingConfig(level="ERROR"))

        logger = logging.getLogger("doc_translator")
        assert logger.level == logging.ERROR
        assert len(logger.handlers) == 1
        logger.handlers.clear()
