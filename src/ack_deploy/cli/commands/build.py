"""Image build command."""

from typing import Annotated

import typer

from ack_deploy.cli.context import get_cli_context
from ack_deploy.cli.shared.console import with_error_handling
from ack_deploy.config.resolver import DOCKER_REGISTRY


@with_error_handling
def build(
    ctx: typer.Context,
    tag: Annotated[
        str,
        typer.Option("--tag", help="Image tag"),
    ] = "latest",
    registry: Annotated[
        str | None,
        typer.Option("--registry", help="Override the Docker registry"),
    ] = None,
    push: Annotated[
        bool,
        typer.Option("--push", help="Push the image after building"),
    ] = False,
) -> None:
    """Build the application image from Dockerfile.ack.

    Examples:
        ack-deploy build
        ack-deploy build --tag v1.2.0 --push
    """
    cli = get_cli_context(ctx)
    cli.console.print_header("Building Docker Image")

    config = cli.config.resolve({DOCKER_REGISTRY: registry}, tag=tag)
    image = cli.image_builder().build(config, push=push)

    cli.console.ok(f"Image ready: {image}")
    if not push:
        cli.console.info(f"Push it with: docker push {image}")
