"""Kubectl command abstractions.

Every kubectl invocation is routed through ``KubeconfigResolver`` so the
project-local or global kubeconfig is passed explicitly.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from ..kubeconfig import KubeconfigResolver
    from .runner import CommandRunner, LineSink


class KubectlCommands:
    """Kubectl-related shell commands.

    Provides operations for:
    - Client and cluster connectivity checks
    - Namespace creation
    - Deployment inspection, deletion and readiness waits
    - Manifest application
    - Pod and Service status queries
    """

    def __init__(self, runner: CommandRunner, kubeconfig: KubeconfigResolver) -> None:
        """Initialize kubectl commands.

        Args:
            runner: Command runner for executing shell commands
            kubeconfig: Resolver deciding which kubeconfig to pass
        """
        self._runner = runner
        self._kubeconfig = kubeconfig

    def command(self, *args: str) -> list[str]:
        """Build a kubectl command line including ``--kubeconfig`` if known."""
        return self._kubeconfig.command_with_kubeconfig(["kubectl", *args])

    def _run(
        self, args: Sequence[str], *, input_data: str | None = None
    ) -> CommandResult:
        return self._runner.run(self.command(*args), input_data=input_data)

    # =========================================================================
    # Connectivity
    # =========================================================================

    def client_version(self) -> CommandResult:
        """Check that the kubectl binary is installed and runs."""
        return self._run(["version", "--client"])

    def cluster_info(self) -> CommandResult:
        """Check that the current kubeconfig reaches a cluster."""
        return self._run(["cluster-info"])

    # =========================================================================
    # Namespace Management
    # =========================================================================

    def ensure_namespace(self, namespace: str) -> CommandResult:
        """Create a namespace idempotently.

        Renders the Namespace with ``--dry-run=client -o yaml`` and pipes it
        into ``kubectl apply -f -`` so an existing namespace is not an error.
        """
        manifest = self._run(
            ["create", "namespace", namespace, "--dry-run=client", "-o", "yaml"]
        )
        if not manifest.success:
            return manifest
        return self._run(["apply", "-f", "-"], input_data=manifest.stdout)

    # =========================================================================
    # Deployment Operations
    # =========================================================================

    def deployment_exists(self, name: str, namespace: str) -> bool:
        """Check whether a Deployment exists."""
        return self._run(["get", "deployment", name, "-n", namespace]).success

    def delete_deployment(
        self,
        name: str,
        namespace: str,
        *,
        on_output: LineSink | None = None,
    ) -> CommandResult:
        """Delete a Deployment and block until it is gone."""
        return self._runner.run_streaming(
            self.command("delete", "deployment", name, "-n", namespace, "--wait=true"),
            on_output=on_output,
        )

    def wait_for_deployment(
        self,
        name: str,
        namespace: str,
        *,
        timeout: str = "300s",
        process_timeout: float | None = None,
        on_output: LineSink | None = None,
    ) -> CommandResult:
        """Wait for a Deployment to report the Available condition."""
        return self._runner.run_streaming(
            self.command(
                "wait",
                "--for=condition=available",
                f"--timeout={timeout}",
                f"deployment/{name}",
                "-n",
                namespace,
            ),
            timeout=process_timeout,
            on_output=on_output,
        )

    # =========================================================================
    # Manifests
    # =========================================================================

    def apply_directory(
        self,
        directory: Path,
        namespace: str,
        *,
        on_output: LineSink | None = None,
        on_error: LineSink | None = None,
    ) -> CommandResult:
        """Apply every manifest in a directory, scoped to a namespace."""
        return self._runner.run_streaming(
            self.command("apply", "-f", f"{directory}/", "-n", namespace),
            on_output=on_output,
            on_error=on_error,
        )

    # =========================================================================
    # Status
    # =========================================================================

    def get_pods(
        self, label_selector: str, namespace: str, *, no_headers: bool = False
    ) -> CommandResult:
        """List pods matching a label selector as kubectl's table output."""
        args = ["get", "pods", "-l", label_selector, "-n", namespace]
        if no_headers:
            args.append("--no-headers")
        return self._run(args)

    def get_load_balancer_ip(self, service: str, namespace: str) -> str:
        """Return the Service's load-balancer ingress IP, or "" if unassigned."""
        result = self._run(
            [
                "get",
                "service",
                service,
                "-n",
                namespace,
                "-o",
                "jsonpath={.status.loadBalancer.ingress[0].ip}",
            ]
        )
        return result.stdout.strip() if result.success else ""
