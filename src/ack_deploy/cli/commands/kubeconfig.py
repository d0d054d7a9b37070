"""Kubeconfig setup command."""

from typing import Annotated

import typer

from ack_deploy.cli.context import get_cli_context
from ack_deploy.cli.shared.console import with_error_handling


@with_error_handling
def kubeconfig(
    ctx: typer.Context,
    cluster_id: Annotated[
        str | None,
        typer.Option("--cluster-id", help="ACK cluster ID"),
    ] = None,
    region: Annotated[
        str | None,
        typer.Option("--region", help="ACK region"),
    ] = None,
    save: Annotated[
        bool,
        typer.Option("--save", help="Save cluster ID and region to .env.ack"),
    ] = False,
    local: Annotated[
        bool,
        typer.Option("--local", help="Write kubeconfig.yaml in the project instead of ~/.kube/config"),
    ] = False,
) -> None:
    """Fetch kubectl credentials for an ACK cluster via the aliyun CLI.

    Examples:
        ack-deploy kubeconfig --cluster-id c1234567890 --region me-central-1
        ack-deploy kubeconfig --local --save
    """
    cli = get_cli_context(ctx)
    cli.console.print_header("ACK Kubeconfig Setup")

    cli.provisioner.provision(
        cluster_id=cluster_id, region=region, save=save, local=local
    )
