"""Scaffolding command."""

from enum import Enum
from typing import Annotated

import typer

from ack_deploy.cli.context import get_cli_context
from ack_deploy.cli.shared.console import with_error_handling


class ResourceSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@with_error_handling
def init(
    ctx: typer.Context,
    app_name: Annotated[
        str | None,
        typer.Option("--app-name", help="Application name (defaults to the project directory)"),
    ] = None,
    registry: Annotated[
        str | None,
        typer.Option("--registry", help="Docker registry host"),
    ] = None,
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", help="Kubernetes namespace"),
    ] = None,
    domain: Annotated[
        str | None,
        typer.Option("--domain", help="Domain served by the ingress"),
    ] = None,
    region: Annotated[
        str | None,
        typer.Option("--region", help="ACK region, e.g. me-central-1"),
    ] = None,
    size: Annotated[
        ResourceSize,
        typer.Option("--size", help="Resource profile for requests, limits and autoscaling"),
    ] = ResourceSize.SMALL,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing files without asking"),
    ] = False,
) -> None:
    """Generate ACK deployment files for this Laravel project.

    Creates Dockerfile.ack, deploy-ack.sh, .env.ack, docker-compose.ack.yml
    and the Kubernetes manifests in k8s/. Values not given as options are
    prompted for.

    Examples:
        ack-deploy init
        ack-deploy init --app-name shop --registry docker.io --namespace default
    """
    cli = get_cli_context(ctx)
    cli.console.print_header("Laravel ACK Deployment Setup")

    scaffolder = cli.scaffolder()
    scaffolder.validate_project()
    config = scaffolder.gather_config(
        app_name=app_name,
        registry=registry,
        namespace=namespace,
        domain=domain,
        region=region,
        size=size.value,
    )
    scaffolder.scaffold(config, force=force)

    cli.console.ok("[bold green]ACK deployment files generated![/bold green]")
    scaffolder.print_next_steps(config)
