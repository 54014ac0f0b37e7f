"""davdrop CLI."""

import logging
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from davdrop.config import (
    DavDropConfig,
    DropConfig,
    ServerConfig,
    get_config_template,
    load_config,
)
from davdrop.errors import DavDropError, NoFilesFound
from davdrop.pipeline import upload_files
from davdrop.search import find_files
from davdrop.types import CompressionMode, Credentials, IfNoFilesFound

app = typer.Typer(help="davdrop - Upload files to Nextcloud and share a public link")
console = Console()

CONFIG_FILE = "davdrop.yaml"


def setup_logging(verbose: bool = False):
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def build_config(config_path: Path, endpoint: str | None) -> DavDropConfig:
    """Load the config file if present and apply CLI overrides."""
    if config_path.exists():
        config = load_config(config_path)
        if endpoint:
            server = ServerConfig(**{**config.server.model_dump(), "endpoint": endpoint})
            config = DavDropConfig(server=server, upload=config.upload)
        return config

    if not endpoint:
        console.print(
            f"[red]Error:[/red] {config_path} not found and no --endpoint given. "
            "Run 'davdrop init' or pass --endpoint."
        )
        raise typer.Exit(1)
    return DavDropConfig(server=ServerConfig(endpoint=endpoint))


@app.command()
def init():
    """Write a configuration template to the current directory."""
    config_file = Path(CONFIG_FILE)

    if config_file.exists():
        console.print(f"[yellow]Warning:[/yellow] {CONFIG_FILE} already exists.")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit(0)

    config_file.write_text(get_config_template())
    console.print(f"[green]Wrote {CONFIG_FILE}.[/green]")
    console.print(f"\nEdit {CONFIG_FILE} to point at your server.")


@app.command()
def upload(
    paths: list[str] = typer.Argument(..., help="Files, directories or glob patterns to upload"),
    name: str = typer.Option(..., "--name", "-n", help="Artifact name"),
    root: Path | None = typer.Option(
        None, "--root", "-r", help="Root directory (default: common parent of the files)"
    ),
    config_path: Path = typer.Option(Path(CONFIG_FILE), "--config", "-c", help="Config file"),
    endpoint: str | None = typer.Option(None, "--endpoint", "-e", help="Server base URL"),
    username: str | None = typer.Option(None, "--username", "-u", envvar="DAVDROP_USERNAME"),
    password: str | None = typer.Option(None, "--password", "-p", envvar="DAVDROP_PASSWORD"),
    no_compress: bool = typer.Option(
        False, "--no-compress", help="Upload a single file as-is instead of a zip"
    ),
    if_no_files_found: IfNoFilesFound = typer.Option(
        IfNoFilesFound.WARN, "--if-no-files-found", help="warn, error or ignore"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Upload files as one artifact and print its public share URL."""
    setup_logging(verbose)

    if not username or not password:
        console.print(
            "[red]Error:[/red] Credentials required. "
            "Pass --username/--password or set DAVDROP_USERNAME and DAVDROP_PASSWORD."
        )
        raise typer.Exit(1)

    try:
        file_config = build_config(config_path, endpoint)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(1)

    try:
        result = find_files(paths)
        if not result.files:
            message = f"No files were found with the provided path: {', '.join(paths)}."
            if if_no_files_found == IfNoFilesFound.ERROR:
                raise NoFilesFound(message)
            if if_no_files_found == IfNoFilesFound.WARN:
                console.print(
                    f"[yellow]Warning:[/yellow] {escape(message)} No artifacts will be uploaded."
                )
            raise typer.Exit(0)

        config = DropConfig.from_config(
            file_config,
            Credentials(username=username, password=password),
            compression=CompressionMode.NONE if no_compress else None,
        )

        console.print(f"[green]Uploading artifact '{escape(name)}'[/green]")
        console.print(f"  Files: {len(result.files)}")
        console.print(f"  Server: {config.endpoint}")
        console.print(f"  Compression: {config.compression.value}")

        url = upload_files(root or result.root_directory, name, result.files, config)
    except DavDropError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    # URL stays on one line
    console.print(f"\n[green]Shared:[/green] {escape(url)}", soft_wrap=True)


if __name__ == "__main__":
    app()
