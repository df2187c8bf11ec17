"""
CLI for doc-translator.

Provides commands to translate a single document, a single image, or a
whole batch of files through Google Cloud Translation and Vision.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from doc_translator.config import Settings, create_default_config, load_config
from doc_translator.errors import InvalidArgument, TranslatorError
from doc_translator.logging_config import setup_logging
from doc_translator.models import BatchItem, BatchRequest, BatchResponse, DocumentTuning

app = typer.Typer(
    name="doc-translator",
    help="Translate documents (PDF/DOCX/PPTX/XLSX) and images via Google Cloud Translation v3.",
    add_completion=False,
)

console = Console()


def get_settings(config_path: Path | None = None) -> Settings:
    """Load settings from config file or defaults."""
    settings = load_config(config_path) if config_path else load_config()
    setup_logging(settings.logging)
    return settings


def _read_item(path: Path, mime_type: str | None = None) -> BatchItem:
    if not path.is_file():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)
    return BatchItem(original_name=path.name, content=path.read_bytes(), declared_mime=mime_type)


def _tuning(native_pdf_only: bool, shadow_removal: bool, rotation_correction: bool) -> DocumentTuning:
    # Unset flags keep the service defaults
    return DocumentTuning(
        translate_native_pdf_only=native_pdf_only or None,
        enable_shadow_removal_native_pdf=shadow_removal or None,
        enable_rotation_correction=rotation_correction or None,
    )


def _run(settings: Settings, request: BatchRequest) -> BatchResponse:
    """Build the translator and run one batch, mapping failures to exit codes."""
    from doc_translator.factory import create_batch_translator

    try:
        translator = create_batch_translator(settings)
    except InvalidArgument as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(2) from None

    try:
        return asyncio.run(translator.translate_batch(request))
    except TranslatorError as e:
        console.print(f"[red]Translation failed ({type(e).__name__}): {e.message}[/red]")
        raise typer.Exit(1) from None


def _write_response(response: BatchResponse, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(response.content)
    console.print(f"[green]OK: wrote {output}[/green]")
    if response.detected_language_code:
        console.print(f"Detected language: {response.detected_language_code}")


@app.command("translate-doc")
def translate_doc(
    input_path: Path = typer.Option(..., "--in", "-i", help="Input document (e.g. ./file.pdf)"),
    to: str = typer.Option(..., "--to", "-t", help="Target language (e.g. pt-BR)"),
    source: str | None = typer.Option(
        None, "--from", "-f", help="Source language (e.g. en). Detected when omitted"
    ),
    mime: str | None = typer.Option(
        None, "--mime", help="Document MIME type. Inferred from the extension when omitted"
    ),
    output: Path | None = typer.Option(None, "--out", "-o", help="Output file"),
    native_pdf_only: bool = typer.Option(
        False, "--native-pdf-only", help="PDF: translate native pages only (higher limits)"
    ),
    shadow_removal: bool = typer.Option(
        False, "--shadow-removal", help="PDF: remove shadow text behind background images"
    ),
    rotation_correction: bool = typer.Option(
        False, "--rotation-correction", help="PDF: enable automatic rotation correction"
    ),
    to_docx: bool = typer.Option(
        False, "--to-docx", help="PDF: produce an editable DOCX (needs a translation bucket)"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Translate a local PDF/DOCX/PPTX/XLSX document."""
    settings = get_settings(config)
    item = _read_item(input_path, mime)
    request = BatchRequest(
        items=[item],
        target_language=to,
        source_language=source,
        tuning=_tuning(native_pdf_only, shadow_removal, rotation_correction),
        convert_pdf_to_docx=to_docx,
    )

    response = _run(settings, request)
    _write_response(response, output or input_path.with_name(response.filename))
    console.print(f"Output MIME: {response.media_type}")


@app.command("translate-image")
def translate_image(
    input_path: Path = typer.Option(..., "--in", "-i", help="Input image (e.g. ./scan.png)"),
    to: str = typer.Option(..., "--to", "-t", help="Target language (e.g. pt-BR)"),
    source: str | None = typer.Option(
        None, "--from", "-f", help="Source language (e.g. en). Detected when omitted"
    ),
    output: Path | None = typer.Option(None, "--out", "-o", help="Output TXT file"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Translate the text of an image (PNG/JPG) via OCR; writes a TXT file."""
    settings = get_settings(config)
    item = _read_item(input_path)
    if not item.effective_mime.startswith("image/"):
        console.print(f"[red]Not an image: {input_path}[/red]")
        raise typer.Exit(1)

    request = BatchRequest(items=[item], target_language=to, source_language=source)
    response = _run(settings, request)
    _write_response(response, output or input_path.with_name(response.filename))


@app.command("translate-batch")
def translate_batch(
    inputs: list[Path] = typer.Argument(..., help="Documents and images to translate"),
    to: str = typer.Option(..., "--to", "-t", help="Target language (e.g. pt-BR)"),
    source: str | None = typer.Option(None, "--from", "-f", help="Source language"),
    combine_images: bool = typer.Option(
        False, "--combine-images", help="Join the text of all images into one TXT"
    ),
    combine_all: bool = typer.Option(
        False, "--combine-all-to-txt", help="Join the text of every file into one TXT"
    ),
    between_lines: int | None = typer.Option(
        None, "--between-lines", help="Blank lines between files in combined TXT (0-20)"
    ),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", help="Output directory"),
    native_pdf_only: bool = typer.Option(False, "--native-pdf-only", help="PDF: native pages only"),
    shadow_removal: bool = typer.Option(False, "--shadow-removal", help="PDF: shadow removal"),
    rotation_correction: bool = typer.Option(
        False, "--rotation-correction", help="PDF: rotation correction"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Translate several files; writes a zip archive or a combined TXT."""
    settings = get_settings(config)
    items = [_read_item(path) for path in inputs]
    request = BatchRequest(
        items=items,
        target_language=to,
        source_language=source,
        combine_images=combine_images,
        combine_all_to_txt=combine_all,
        between_blocks_lines=(
            settings.batch.between_blocks_lines if between_lines is None else between_lines
        ),
        tuning=_tuning(native_pdf_only, shadow_removal, rotation_correction),
    )

    response = _run(settings, request)
    _write_response(response, output_dir / response.filename)

    if len(response.outcomes) > 1:
        table = Table(title="Batch results")
        table.add_column("File", style="cyan")
        table.add_column("Output")
        table.add_column("Status")
        for outcome in response.outcomes:
            status = "[green]ok[/green]" if outcome.ok else f"[red]{outcome.error}[/red]"
            output_name = outcome.filename if outcome.ok else outcome.error_filename
            table.add_row(outcome.item_name, output_name, status)
        console.print(table)

        failed = sum(1 for outcome in response.outcomes if not outcome.ok)
        if failed:
            console.print(f"[yellow]{failed} of {len(response.outcomes)} file(s) failed[/yellow]")


@app.command()
def init(
    output_path: Path = typer.Option(
        Path("config.yaml"),
        "--output",
        "-o",
        help="Output path for config file",
    ),
) -> None:
    """Generate a default configuration file."""
    if output_path.exists():
        overwrite = typer.confirm(f"{output_path} already exists. Overwrite?")
        if not overwrite:
            raise typer.Abort()

    create_default_config(output_path)
    console.print(
        Panel(
            f"Created config file: {output_path}\n\n"
            "Set GCP_PROJECT_ID (or run: gcloud auth application-default login), then run:\n"
            "  doc-translator translate-doc -i ./file.pdf -t pt-BR",
            title="[bold blue]doc-translator[/bold blue]",
            border_style="blue",
        )
    )


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
