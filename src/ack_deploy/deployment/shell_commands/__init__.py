"""Shell command abstractions for ACK deployment operations.

This package wraps the external tools the deployer drives, one module per
tool:

- docker: image build and push
- kubectl: cluster connectivity, namespaces, manifests and status
- aliyun: ACK cluster credentials

Usage:
    from ack_deploy.deployment.shell_commands import ShellCommands

    commands = ShellCommands(project_root=Path("."), kubeconfig=resolver)
    if commands.kubectl.cluster_info().success:
        print("Cluster reachable")
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from .aliyun import AliyunCommands
from .docker import DockerCommands
from .kubectl import KubectlCommands
from .runner import CommandRunner, LineSink
from .types import CommandResult, OutputStream

if TYPE_CHECKING:
    from ..kubeconfig import KubeconfigResolver


class ShellCommands:
    """Unified interface for all shell command operations.

    Attributes:
        docker: Docker-related commands
        kubectl: Kubernetes kubectl commands
        aliyun: Alibaba Cloud CLI commands
    """

    def __init__(self, project_root: Path, kubeconfig: KubeconfigResolver) -> None:
        """Initialize the shell commands executor.

        Args:
            project_root: Path to the project root directory.
                         Commands will be executed from this directory by default.
            kubeconfig: Resolver deciding which kubeconfig kubectl uses
        """
        self._project_root = Path(project_root)
        self._runner = CommandRunner(self._project_root)

        self.docker = DockerCommands(self._runner)
        self.kubectl = KubectlCommands(self._runner, kubeconfig)
        self.aliyun = AliyunCommands(self._runner)

    @property
    def project_root(self) -> Path:
        """Get the project root path."""
        return self._project_root

    def run_cli(
        self,
        args: list[str],
        *,
        timeout: float | None = None,
        on_output: LineSink | None = None,
        on_error: LineSink | None = None,
    ) -> CommandResult:
        """Run another ack-deploy command in a child process."""
        return self._runner.run_streaming(
            [sys.executable, "-m", "ack_deploy", *args],
            timeout=timeout,
            on_output=on_output,
            on_error=on_error,
        )


__all__ = [
    "ShellCommands",
    "CommandResult",
    "OutputStream",
    "LineSink",
    "AliyunCommands",
    "DockerCommands",
    "KubectlCommands",
    "CommandRunner",
]
