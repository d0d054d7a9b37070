"""Main CLI application module.

This module provides the main entry point for the ack-deploy CLI.

Commands:
- init: Scaffold deployment files
- build: Build and push the application image
- deploy: Deploy to an ACK cluster
- kubeconfig: Configure cluster credentials
"""

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from .commands import build, deploy, init, kubeconfig
from .context import build_cli_context

# Create the main CLI application
app = typer.Typer(
    help="🚀 Deploy Laravel applications to Alibaba Cloud ACK",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def configure_logging(verbose: bool) -> None:
    """Send loguru output to stderr at DEBUG (verbose) or WARNING."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
    project_dir: Annotated[
        Path | None,
        typer.Option(
            "--project-dir",
            help="Laravel project root (defaults to the nearest directory with artisan)",
            file_okay=False,
            dir_okay=True,
            exists=True,
        ),
    ] = None,
) -> None:
    configure_logging(verbose)
    ctx.obj = build_cli_context(project_dir)


app.command(name="init")(init)
app.command(name="build")(build)
app.command(name="deploy")(deploy)
app.command(name="kubeconfig")(kubeconfig)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
