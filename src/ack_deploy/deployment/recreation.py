"""Deployment recreation heuristic.

A Deployment whose pods are stuck pulling an image usually points at a
stale image reference; deleting and recreating it lets the next apply
start clean. Pods that are still starting must be left alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from ack_deploy.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants

if TYPE_CHECKING:
    from ack_deploy.cli.shared.console import CLIConsole
    from ack_deploy.config import DeployConfig

    from .shell_commands import ShellCommands


class PodStatusClass(Enum):
    """Classification of ``kubectl get pods --no-headers`` output."""

    IMAGE_PULL_ERROR = "image_pull_error"
    STARTING = "starting"
    OTHER = "other"


@dataclass(frozen=True)
class RecreationDecision:
    """Outcome of inspecting an existing Deployment."""

    warranted: bool
    reason: str
    pod_status: PodStatusClass | None = None


def classify_pod_status(
    snapshot: str, constants: DeploymentConstants = DEFAULT_CONSTANTS
) -> PodStatusClass:
    """Classify raw pod listing text by substring search.

    Image pull errors take precedence over pods that are still starting.
    """
    if any(marker in snapshot for marker in constants.IMAGE_PULL_MARKERS):
        return PodStatusClass.IMAGE_PULL_ERROR
    if any(marker in snapshot for marker in constants.STARTING_MARKERS):
        return PodStatusClass.STARTING
    return PodStatusClass.OTHER


class DeploymentRecreator:
    """Detects broken Deployments and deletes them before re-applying."""

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.constants = constants or DEFAULT_CONSTANTS

    def inspect(self, config: DeployConfig) -> RecreationDecision:
        """Decide whether the app's Deployment should be recreated.

        Pod inspection failures are never fatal; they simply mean no
        recreation.
        """
        name = config.deployment_name
        self.console.info(f"🔍 Checking for deployment issues: {name}")

        if not self.commands.kubectl.deployment_exists(name, config.namespace):
            self.console.info("No existing deployment found")
            return RecreationDecision(False, "deployment not found")

        result = self.commands.kubectl.get_pods(
            config.label_selector, config.namespace, no_headers=True
        )
        if not result.success:
            logger.warning(f"Could not list pods for {name}: {result.output}")
            return RecreationDecision(False, "pod status unavailable")

        snapshot = result.stdout.strip()
        if snapshot:
            self.console.info("📋 Current pod status:")
            self.console.line(snapshot)

        status = classify_pod_status(snapshot, self.constants)
        if status is PodStatusClass.IMAGE_PULL_ERROR:
            self.console.warn(
                "Detected ImagePull errors. Will recreate deployment automatically."
            )
            return RecreationDecision(True, "image pull errors", status)
        if status is PodStatusClass.STARTING:
            self.console.info("⏳ Pods are still starting up, skipping recreation")
            return RecreationDecision(False, "pods starting", status)

        self.console.ok("No deployment recreation needed")
        return RecreationDecision(False, "pods healthy", status)

    def recreate(self, config: DeployConfig) -> bool:
        """Delete the app's Deployment so the next apply recreates it.

        Returns:
            True if a Deployment was deleted
        """
        name = config.deployment_name
        self.console.info(f"🔄 Checking for existing deployment: {name}")

        if not self.commands.kubectl.deployment_exists(name, config.namespace):
            self.console.info("No existing deployment found")
            return False

        self.console.warn("Existing deployment found. Recreating...")
        result = self.commands.kubectl.delete_deployment(
            name,
            config.namespace,
            on_output=lambda line: self.console.line(f"  {line}"),
        )
        if result.success:
            self.console.ok("Deployment deleted successfully")
            return True

        self.console.warn("Failed to delete deployment (continuing anyway)")
        return False
