"""Cluster deployment command."""

from typing import Annotated

import typer

from ack_deploy.cli.context import get_cli_context
from ack_deploy.cli.shared.console import with_error_handling
from ack_deploy.config.resolver import K8S_NAMESPACE


@with_error_handling
def deploy(
    ctx: typer.Context,
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", "-n", help="Kubernetes namespace"),
    ] = None,
    build: Annotated[
        bool,
        typer.Option("--build", help="Build and push the image first"),
    ] = False,
    wait: Annotated[
        bool,
        typer.Option("--wait", help="Wait for the deployment to become available"),
    ] = False,
    recreate: Annotated[
        bool,
        typer.Option("--recreate", help="Delete the existing deployment before applying"),
    ] = False,
) -> None:
    """Deploy the application to Alibaba Cloud ACK.

    This command:
    - Builds and pushes the image (with --build)
    - Checks kubectl connectivity, offering kubeconfig setup if needed
    - Creates the namespace when it is not 'default'
    - Recreates the deployment when pods are stuck pulling images
    - Applies the manifests in k8s/
    - Waits for the rollout (with --wait) and prints the service URL

    Examples:
        ack-deploy deploy
        ack-deploy deploy --build --wait -n production
    """
    cli = get_cli_context(ctx)
    cli.console.print_header("Deploying to Alibaba Cloud ACK")

    config = cli.config.resolve({K8S_NAMESPACE: namespace})
    cli.orchestrator().deploy(config, build=build, wait=wait, recreate=recreate)
