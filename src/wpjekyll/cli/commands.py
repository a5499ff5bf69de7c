"""CLI command implementations"""

from typing import Annotated, Optional

import typer

from wpjekyll.config import Settings, load_config
from wpjekyll.core.errors import MalformedExportError
from wpjekyll.core.logging import setup_logging
from wpjekyll.core.pipeline import plan_import, run_import


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def import_cmd(
    source: Annotated[Optional[str], typer.Option("--source", help='WordPress export XML file (default: "wordpress.xml")')] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Site root to write _posts, _drafts, ... into")] = None,
    no_fetch: Annotated[Optional[bool], typer.Option("--no-fetch-images/--fetch-images", help="Do not fetch the images referenced in the posts")] = None,
    assets: Annotated[Optional[str], typer.Option("--assets-folder", help="Folder where images are downloaded to (default: assets)")] = None,
    meta: Annotated[Optional[bool], typer.Option("--include-meta/--no-include-meta", help="Import meta data from the WordPress post")] = None,
    hero: Annotated[Optional[bool], typer.Option("--strip-hero-image/--keep-hero-image", help="Drop the first image of each post")] = None,
    revert: Annotated[Optional[bool], typer.Option("--revert-failed-assets/--keep-failed-assets", help="Keep the original image URL when a download fails")] = None,
    timeout: Annotated[Optional[float], typer.Option("--timeout", help="Per-request download timeout in seconds")] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = None,
    ):
    """Convert every item of the export into a Markdown file with YAML front matter."""
    settings = _settings(overrides={
        "source": source, "output_dir": out, "no_fetch_images": no_fetch,
        "assets_folder": assets, "include_meta": meta, "strip_hero_image": hero,
        "revert_failed_assets": revert, "fetch_timeout": timeout,
        "log_level": log_level.upper() if log_level else None,
    })
    setup_logging(settings.log_level)

    try:
        report = run_import(settings)
    except MalformedExportError as e:
        _fail("Import failed", e)

    for line in report.summary_lines():
        typer.echo(line)
    if report.failures:
        typer.echo(f"{len(report.failures)} item(s) could not be imported.", err=True)


def list_cmd(
    source: Annotated[Optional[str], typer.Option("--source", help="WordPress export XML file")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Site root the paths are relative to")] = None,
    ):
    """Show where each item would be written, without writing anything."""
    settings = _settings(overrides={"source": source, "output_dir": out})
    try:
        plan = plan_import(settings)
    except MalformedExportError as e:
        _fail("Cannot read export", e)
    if not plan:
        typer.echo("No items found in export.")
        raise typer.Exit(1)
    for item, path, error in plan:
        typer.echo(f"  {item.title} -> {path if path else f'ERROR: {error}'}")
    typer.echo(f"{len(plan)} item(s) in {settings.source}")
