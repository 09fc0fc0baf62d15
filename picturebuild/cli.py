"""Command line entry point: ``picturebuild``.

With no subcommand the full build runs: clean, images, assets, html.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from picturebuild.core.config import BuildSettings, configure_logging
from picturebuild.core.errors import BuildError
from picturebuild.scripts import build
from picturebuild.services.asset_service import clean_output, copy_static_assets
from picturebuild.services.html_rewriter import build_html
from picturebuild.services.image_processing_service import build_images

app = typer.Typer(
    name="picturebuild",
    help="Build the static site: responsive images, hashed assets, HTML.",
    add_completion=False,
)


def _run(stage):
    try:
        stage()
    except (BuildError, OSError) as e:
        typer.echo(f"Build failed: {e}", err=True)
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    root: Optional[Path] = typer.Option(
        None, help="Project root containing index.html and assets/."
    ),
):
    settings = BuildSettings() if root is None else BuildSettings(root=root)
    configure_logging(settings.log_level)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        _run(lambda: asyncio.run(build.main(settings)))


@app.command(name="clean", help="Remove and recreate the output tree.")
def clean_cmd(ctx: typer.Context):
    _run(lambda: clean_output(ctx.obj))


@app.command(name="images", help="Generate image variants and the manifest.")
def images_cmd(ctx: typer.Context):
    _run(lambda: asyncio.run(build_images(ctx.obj)))


@app.command(name="assets", help="Copy css/fonts and hash SVG images.")
def assets_cmd(ctx: typer.Context):
    _run(lambda: asyncio.run(copy_static_assets(ctx.obj)))


@app.command(name="html", help="Rewrite the template using the manifest.")
def html_cmd(ctx: typer.Context):
    _run(lambda: build_html(ctx.obj))


if __name__ == "__main__":
    app()
