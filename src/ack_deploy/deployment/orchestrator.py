"""ACK deployment orchestration.

This module provides the DeploymentOrchestrator which runs the ``deploy``
workflow step by step. Each step either completes, degrades to a warning
(idempotent or best-effort steps) or raises ``DeploymentError``, which
aborts the remaining steps.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from ack_deploy.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants

from .image_builder import DeploymentError
from .recreation import DeploymentRecreator

if TYPE_CHECKING:
    from ack_deploy.cli.shared.console import CLIConsole
    from ack_deploy.config import DeployConfig
    from ack_deploy.infra.constants import DeploymentPaths

    from .kubeconfig import KubeconfigProvisioner
    from .shell_commands import ShellCommands


KUBECTL_INSTALL_HINT = (
    "Install kubectl:\n"
    "• macOS: brew install kubectl\n"
    '• Linux: curl -LO "https://dl.k8s.io/release/$(curl -L -s '
    'https://dl.k8s.io/release/stable.txt)/bin/linux/amd64/kubectl"\n'
    "• Windows: choco install kubernetes-cli"
)

MANUAL_KUBECONFIG_HINT = (
    "Manual setup options:\n"
    "1. Download kubeconfig from ACK Console:\n"
    "   • Go to Container Service → Clusters → Your Cluster → Connection Information\n"
    "   • Download kubeconfig and save as ~/.kube/config\n\n"
    "2. Or set KUBECONFIG environment variable:\n"
    "   export KUBECONFIG=/path/to/your/kubeconfig\n\n"
    "3. Or use Alibaba Cloud CLI:\n"
    "   ack-deploy kubeconfig --cluster-id <cluster-id> --region <region>"
)


class DeploymentOrchestrator:
    """Runs the deploy workflow against an ACK cluster.

    The workflow consists of:
    1. Build and push the image (optional)
    2. Verify kubectl and cluster connectivity, provisioning a kubeconfig
       once if the cluster is unreachable
    3. Ensure the target namespace exists
    4. Recreate a broken Deployment (forced or auto-detected)
    5. Apply the manifests in k8s/
    6. Wait for the Deployment to become available (optional)
    7. Report the Service endpoint and pod status

    Attributes:
        commands: Shell command executor
        console: CLI console for output
        paths: Deployment path resolver
        provisioner: Kubeconfig provisioner used when the cluster is unreachable
        recreator: Deployment recreation heuristic
        constants: Deployment configuration constants
    """

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        paths: DeploymentPaths,
        provisioner: KubeconfigProvisioner,
        recreator: DeploymentRecreator | None = None,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.paths = paths
        self.provisioner = provisioner
        self.constants = constants or DEFAULT_CONSTANTS
        self.recreator = recreator or DeploymentRecreator(
            commands, console, self.constants
        )

    # =========================================================================
    # Public Interface
    # =========================================================================

    def deploy(
        self,
        config: DeployConfig,
        *,
        build: bool = False,
        wait: bool = False,
        recreate: bool = False,
    ) -> None:
        """Deploy the application.

        Args:
            config: Resolved deployment configuration
            build: Build and push the image first
            wait: Wait for the Deployment to become available
            recreate: Delete the existing Deployment before applying

        Raises:
            DeploymentError: On the first unrecoverable step
        """
        logger.debug(
            f"Deploying {config.app_name} to namespace {config.namespace} "
            f"(build={build}, wait={wait}, recreate={recreate})"
        )

        if build:
            self.build_and_push()

        self.check_connectivity()
        self.ensure_namespace(config.namespace)

        if recreate or self.recreator.inspect(config).warranted:
            self.recreator.recreate(config)

        self.apply_manifests(config)

        if wait:
            self.wait_for_ready(config)

        self.show_service_info(config)
        self.console.ok("[bold green]Deployment completed successfully![/bold green]")

    # =========================================================================
    # Steps
    # =========================================================================

    def build_and_push(self) -> None:
        """Run ``ack-deploy build --push`` in a child process."""
        self.console.info("Building and pushing Docker image...")
        result = self.commands.run_cli(
            ["--project-dir", str(self.paths.project_root), "build", "--push"],
            timeout=self.constants.BUILD_AND_PUSH_TIMEOUT,
            on_output=self.console.line,
            on_error=self.console.error_line,
        )
        if not result.success:
            details = (
                f"Stopped after {int(self.constants.BUILD_AND_PUSH_TIMEOUT)} seconds."
                if result.timed_out
                else None
            )
            raise DeploymentError("Image build and push failed", details=details)

    def check_connectivity(self) -> None:
        """Verify kubectl is installed and the cluster is reachable.

        When ``cluster-info`` fails, automatic kubeconfig provisioning is
        attempted and ``cluster-info`` retried exactly once.

        Raises:
            DeploymentError: If kubectl is missing or the cluster stays unreachable
        """
        kubectl = self.commands.kubectl

        if not kubectl.client_version().success:
            raise DeploymentError(
                "kubectl is not installed or not accessible",
                details=KUBECTL_INSTALL_HINT,
            )

        if kubectl.cluster_info().success:
            self.console.ok("kubectl connectivity confirmed")
            return

        self.console.error("Cannot connect to Kubernetes cluster.")
        self.console.info("🔧 Kubeconfig Setup Options:")

        if self.provisioner.auto_provision():
            if kubectl.cluster_info().success:
                self.console.ok("Successfully connected to ACK cluster")
                return
            logger.warning("cluster-info still failing after kubeconfig setup")

        raise DeploymentError(
            "Cannot connect to Kubernetes cluster",
            details=MANUAL_KUBECONFIG_HINT,
        )

    def ensure_namespace(self, namespace: str) -> bool:
        """Create the namespace if needed; failures only warn.

        Returns:
            True if the namespace is known to exist
        """
        if namespace == self.constants.DEFAULT_NAMESPACE:
            return True

        self.console.info(f"Creating namespace: {namespace}")
        result = self.commands.kubectl.ensure_namespace(namespace)
        if not result.success:
            self.console.warn(
                f"Could not create namespace {namespace} (may already exist)"
            )
            return False
        return True

    def apply_manifests(self, config: DeployConfig) -> None:
        """Apply every manifest in k8s/ to the target namespace.

        Raises:
            DeploymentError: If k8s/ is missing or kubectl apply fails
        """
        manifests_dir = self.paths.manifests_dir
        if not manifests_dir.is_dir():
            raise DeploymentError(
                f"{self.constants.MANIFESTS_DIR} directory not found",
                details="Generate the manifests with: ack-deploy init",
            )

        self.console.info("Applying Kubernetes manifests...")
        result = self.commands.kubectl.apply_directory(
            manifests_dir,
            config.namespace,
            on_output=self.console.line,
            on_error=self.console.error_line,
        )
        if not result.success:
            raise DeploymentError(
                "Failed to apply Kubernetes manifests",
                details=result.stderr.strip() or None,
            )
        self.console.ok("Kubernetes manifests applied successfully")

    def wait_for_ready(self, config: DeployConfig) -> bool:
        """Wait for the Deployment to become available; failures only warn."""
        self.console.info("Waiting for deployment to be ready...")
        result = self.commands.kubectl.wait_for_deployment(
            config.deployment_name,
            config.namespace,
            timeout=self.constants.WAIT_TIMEOUT,
            process_timeout=self.constants.WAIT_PROCESS_TIMEOUT,
            on_output=self.console.line,
        )
        if not result.success:
            self.console.warn("Deployment readiness check timed out or failed")
            self.console.print(
                f"[dim]💡 Check pod status with: kubectl get pods "
                f"-l {config.label_selector} -n {config.namespace}[/dim]"
            )
            return False

        self.console.ok("Deployment is ready")
        return True

    def show_service_info(self, config: DeployConfig) -> None:
        """Print the external URL (if assigned) and current pod status."""
        self.console.info("Getting service information...")
        kubectl = self.commands.kubectl

        external_ip = kubectl.get_load_balancer_ip(config.service_name, config.namespace)
        if external_ip:
            self.console.info(f"🌐 Application URL: http://{external_ip}")
        else:
            self.console.info("External IP not yet assigned. Run this command to check:")
            self.console.line(
                f"kubectl get service {config.service_name} -n {config.namespace}"
            )

        pods = kubectl.get_pods(config.label_selector, config.namespace)
        self.console.print()
        self.console.info("Pod status:")
        self.console.line(pods.stdout.strip() or "(no pods found)")
