"""CLI entrypoint: Typer app definition and command registration"""

import typer

from wpjekyll.cli.commands import import_cmd, list_cmd


app = typer.Typer(name="wpjekyll", no_args_is_help=True, help="WordPress export to Jekyll posts converter")

app.command(name="import")(import_cmd)
app.command(name="list")(list_cmd)
