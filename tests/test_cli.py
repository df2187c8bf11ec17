"""
Tests for the command line interface.
"""

import io
import zipfile

import pytest
from conftest import FakeOCRProvider, FakeTranslationProvider, make_pdf
from google.auth.exceptions import DefaultCredentialsError
from typer.testing import CliRunner

from doc_translator import factory
from doc_translator.cli import app
from doc_translator.orchestrator import BatchTranslator

runner = CliRunner()


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("GCP_PROJECT_ID", "GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def fake_backend(monkeypatch):
    provider = FakeTranslationProvider(detected_languages=["en"])

    def create(settings):
        return BatchTranslator(
            provider, FakeOCRProvider(document_text="hi"), options=settings.translator_options()
        )

    monkeypatch.setattr(factory, "create_batch_translator", create)
    return provider


class TestTranslateDoc:
    def test_writes_translation_next_to_input(self, workdir, fake_backend):
        source = workdir / "report.pdf"
        source.write_bytes(make_pdf(1))

        result = runner.invoke(app, ["translate-doc", "-i", str(source), "-t", "pt-BR"])

        assert result.exit_code == 0, result.output
        assert (workdir / "report_pt-BR_translations.pdf").read_bytes() == source.read_bytes()
        assert "Detected language: en" in result.output

    def test_tuning_flags(self, workdir, fake_backend):
        source = workdir / "report.pdf"
        source.write_bytes(make_pdf(1))

        result = runner.invoke(
            app,
            ["translate-doc", "-i", str(source), "-t", "fr", "--native-pdf-only"],
        )

        assert result.exit_code == 0, result.output
        tuning = fake_backend.document_calls[0]["tuning"]
        assert tuning.translate_native_pdf_only is True
        assert tuning.enable_rotation_correction is None

    def test_unsupported_file_exits_1(self, workdir, fake_backend):
        source = workdir / "notes.txt"
        source.write_text("hello", encoding="utf-8")

        result = runner.invoke(app, ["translate-doc", "-i", str(source), "-t", "fr"])

        assert result.exit_code == 1
        assert "Unsupported MIME type" in result.output

    def test_missing_project_exits_2(self, workdir, monkeypatch):
        def no_credentials(scopes=None):
            raise DefaultCredentialsError("none")

        monkeypatch.setattr("google.auth.default", no_credentials)
        source = workdir / "report.pdf"
        source.write_bytes(make_pdf(1))

        result = runner.invoke(app, ["translate-doc", "-i", str(source), "-t", "fr"])

        assert result.exit_code == 2
        assert "GCP_PROJECT_ID" in result.output

    def test_missing_input_file(self, workdir, fake_backend):
        result = runner.invoke(app, ["translate-doc", "-i", "absent.pdf", "-t", "fr"])

        assert result.exit_code == 1


class TestTranslateImage:
    def test_writes_text(self, workdir, fake_backend):
        (workdir / "scan.png").write_bytes(b"png")

        result = runner.invoke(app, ["translate-image", "-i", "scan.png", "-t", "de"])

        assert result.exit_code == 0, result.output
        assert (workdir / "scan_de_translations.txt").read_text(encoding="utf-8") == "HI"

    def test_rejects_non_image(self, workdir, fake_backend):
        (workdir / "doc.pdf").write_bytes(make_pdf(1))

        result = runner.invoke(app, ["translate-image", "-i", "doc.pdf", "-t", "de"])

        assert result.exit_code == 1


class TestTranslateBatch:
    def test_archive(self, workdir, fake_backend):
        (workdir / "a.png").write_bytes(b"1")
        (workdir / "b.txt").write_text("x", encoding="utf-8")

        result = runner.invoke(app, ["translate-batch", "a.png", "b.txt", "-t", "de"])

        assert result.exit_code == 0, result.output
        with zipfile.ZipFile(io.BytesIO((workdir / "translations.zip").read_bytes())) as zf:
            assert set(zf.namelist()) == {"a_de_translations.txt", "b_error.txt"}
        assert "1 of 2 file(s) failed" in result.output

    def test_combined_images(self, workdir, fake_backend):
        (workdir / "a.png").write_bytes(b"1")
        (workdir / "b.png").write_bytes(b"2")

        result = runner.invoke(
            app,
            ["translate-batch", "a.png", "b.png", "-t", "de", "--combine-images", "--between-lines", "1"],
        )

        assert result.exit_code == 0, result.output
        text = (workdir / "images_de_translations.txt").read_text(encoding="utf-8")
        assert text == "===== a.png =====\nHI\n\n===== b.png =====\nHI\n"


class TestInit:
    def test_creates_config(self, workdir):
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0, result.output
        assert "max_pages_per_request" in (workdir / "config.yaml").read_text(encoding="utf-8")

    def test_refuses_overwrite(self, workdir):
        (workdir / "config.yaml").write_text("keep: me\n", encoding="utf-8")

        result = runner.invoke(app, ["init"], input="n\n")

        assert result.exit_code != 0
        assert (workdir / "config.yaml").read_text(encoding="utf-8") == "keep: me\n"
