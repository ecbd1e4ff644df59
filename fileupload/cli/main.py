"""fileupload CLI - Main commands."""
import sys
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from fileupload import (
    Base64Upload,
    DataUriUpload,
    FileUpload,
    File,
    MemoryUploadRegistry,
    UploadEnvironment,
    UploadError,
    UploadSettings,
    UploadValidationError,
)
from fileupload.core.config import UNLIMITED, parse_size

app = typer.Typer(
    name="fileupload",
    help="Validate and store Base64 data, data URIs and files",
    add_completion=False
)
console = Console()

EXIT_REJECTED = 1
EXIT_FATAL = 2

STORE_INPUT_NAME = "file"


def read_source(source: str) -> str:
    """Read text from a file, or from stdin for '-'."""
    if source == "-":
        return sys.stdin.read().strip()
    path = Path(source)
    if not path.is_file():
        console.print(f"[red]Source not found: {source}[/red]")
        raise typer.Exit(EXIT_REJECTED)
    return path.read_text().strip()


def build_settings(directory: Path, name: Optional[str], max_kb: Optional[int]) -> UploadSettings:
    settings = UploadSettings(UploadEnvironment.from_environ()).with_target_directory(directory)
    if name:
        settings.with_target_filename(name)
    if max_kb is not None:
        settings.with_maximum_size_in_kilobytes(max_kb)
    return settings


def run_upload(save: Callable[[], File]) -> None:
    """Run an upload and report the outcome."""
    try:
        stored = save()
    except UploadValidationError as e:
        console.print(f"[red]Rejected ({e.code}):[/red] {e.message}")
        raise typer.Exit(EXIT_REJECTED)
    except UploadError as e:
        console.print(f"[red]Error ({e.code}):[/red] {e.message}")
        raise typer.Exit(EXIT_FATAL)

    console.print(f"[green]Stored:[/green] {stored.filename_with_extension}")
    console.print(f"Path: {stored.path}")


def format_size(size: int) -> str:
    if size >= UNLIMITED:
        return "unlimited"
    return f"{size:,} bytes"


@app.command()
def limits():
    """Show the effective upload limits of the environment."""
    environment = UploadEnvironment.from_environ()

    table = Table(title="Upload environment")
    table.add_column("Setting", style="cyan")
    table.add_column("Raw value")
    table.add_column("Effective", justify="right")

    table.add_row("upload_max_filesize", environment.upload_max_filesize,
                  format_size(parse_size(environment.upload_max_filesize)))
    table.add_row("post_max_size", environment.post_max_size,
                  format_size(parse_size(environment.post_max_size)))
    table.add_row("memory_limit", environment.memory_limit,
                  format_size(parse_size(environment.memory_limit)))
    table.add_row("file_uploads", environment.file_uploads,
                  "on" if environment.uploads_enabled else "off")
    table.add_row("max_file_uploads", environment.max_file_uploads, environment.max_file_uploads)

    console.print(table)
    console.print(f"[bold]Maximum upload size:[/bold] {format_size(environment.maximum_upload_size)}")


@app.command()
def base64(
    source: str = typer.Argument(..., help="File containing Base64 text, '-' for stdin"),
    directory: Path = typer.Option(..., "--dir", "-d", help="Target directory"),
    extension: str = typer.Option(None, "--ext", "-e", help="Filename extension (default: bin)"),
    name: str = typer.Option(None, "--name", "-n", help="Target filename without extension"),
    max_kb: int = typer.Option(None, "--max-kb", help="Maximum decoded size in KB"),
):
    """Store Base64-encoded data."""
    def save() -> File:
        upload = Base64Upload(build_settings(directory, name, max_kb))
        if extension:
            upload.with_filename_extension(extension)
        return upload.with_data(read_source(source)).save()

    run_upload(save)


@app.command("data-uri")
def data_uri(
    source: str = typer.Argument(..., help="File containing the data URI, '-' for stdin"),
    directory: Path = typer.Option(..., "--dir", "-d", help="Target directory"),
    name: str = typer.Option(None, "--name", "-n", help="Target filename without extension"),
    max_kb: int = typer.Option(None, "--max-kb", help="Maximum decoded size in KB"),
    allow: Optional[List[str]] = typer.Option(None, "--allow", "-a", help="Permitted type as MIME=EXT (repeatable)"),
):
    """Store the content of a data URI."""
    mapping = {}
    for entry in allow or []:
        mime_type, sep, ext = entry.partition("=")
        if not sep or not mime_type or not ext:
            console.print(f"[red]Expected MIME=EXT, got: {entry}[/red]")
            raise typer.Exit(EXIT_REJECTED)
        mapping[mime_type] = ext

    def save() -> File:
        upload = DataUriUpload(build_settings(directory, name, max_kb))
        upload.with_allowed_mime_types_and_extensions(mapping)
        return upload.with_uri(read_source(source)).save()

    run_upload(save)


@app.command()
def store(
    file_path: Path = typer.Argument(..., help="Local file to store", exists=True, dir_okay=False),
    directory: Path = typer.Option(..., "--dir", "-d", help="Target directory"),
    name: str = typer.Option(None, "--name", "-n", help="Target filename without extension"),
    max_kb: int = typer.Option(None, "--max-kb", help="Maximum size in KB"),
    allow: Optional[List[str]] = typer.Option(None, "--allow", "-a", help="Permitted extension (repeatable)"),
):
    """Store a local file as if it had been received from a file input."""
    def save() -> File:
        registry = MemoryUploadRegistry()
        registry.register_bytes(STORE_INPUT_NAME, file_path.read_bytes(), file_path.name)
        try:
            upload = FileUpload(registry, build_settings(directory, name, max_kb))
            if allow:
                upload.with_allowed_extensions(allow)
                console.print(f"Permitted: {upload.allowed_extensions_human_string(' and ')}")
            return upload.from_input(STORE_INPUT_NAME).save()
        finally:
            registry.cleanup()

    run_upload(save)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
