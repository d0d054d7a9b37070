"""Alibaba Cloud CLI command abstractions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner


class AliyunCommands:
    """``aliyun`` CLI commands used to obtain ACK cluster credentials."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def version(self) -> CommandResult:
        return self._runner.run(["aliyun", "version"])

    def is_available(self) -> bool:
        """Check that the aliyun binary is installed and runs."""
        return self.version().success

    def get_user_config(self, cluster_id: str, region: str) -> CommandResult:
        """Fetch the user kubeconfig of an ACK cluster.

        Args:
            cluster_id: ACK cluster id
            region: Region the cluster runs in (e.g., "me-central-1")

        Returns:
            CommandResult whose stdout holds the API response
        """
        return self._runner.run(
            [
                "aliyun",
                "cs",
                "GET",
                f"/k8s/{cluster_id}/user_config",
                "--region",
                region,
            ]
        )
