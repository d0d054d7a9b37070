"""Docker image building and publishing.

This module builds the application image from ``Dockerfile.ack`` and
optionally pushes it to the configured registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ack_deploy.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants

if TYPE_CHECKING:
    from ack_deploy.cli.shared.console import CLIConsole
    from ack_deploy.config import DeployConfig
    from ack_deploy.infra.constants import DeploymentPaths

    from .shell_commands import CommandResult, ShellCommands


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


def _failure_details(result: CommandResult, timeout: float) -> str | None:
    if result.timed_out:
        return f"The process was stopped after {int(timeout)} seconds."
    return result.stderr.strip()[-2000:] or None


class ImageBuilder:
    """Builds and pushes the application image.

    Attributes:
        commands: Shell command executor
        console: CLI console for output
        paths: Deployment path resolver
        constants: Deployment configuration constants
    """

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        paths: DeploymentPaths,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.paths = paths
        self.constants = constants or DEFAULT_CONSTANTS

    def build(self, config: DeployConfig, *, push: bool = False) -> str:
        """Build (and optionally push) ``<registry>/<app>:<tag>``.

        Args:
            config: Resolved deployment configuration
            push: Whether to push the image after a successful build

        Returns:
            The image reference that was built

        Raises:
            DeploymentError: If Dockerfile.ack is missing or docker fails
        """
        if not self.paths.dockerfile.exists():
            raise DeploymentError(
                f"{self.constants.DOCKERFILE} not found",
                details="Generate it with: ack-deploy init",
            )

        image = config.image
        self.console.info(f"Building image: {image}")
        result = self.commands.docker.build(
            image,
            dockerfile=self.constants.DOCKERFILE,
            platform=self.constants.BUILD_PLATFORM,
            timeout=self.constants.BUILD_TIMEOUT,
            on_output=self.console.line,
            on_error=self.console.error_line,
        )
        if not result.success:
            raise DeploymentError(
                "Docker build failed",
                details=_failure_details(result, self.constants.BUILD_TIMEOUT),
            )
        self.console.ok("Docker image built successfully")

        if push:
            self.push(image)

        return image

    def push(self, image: str) -> None:
        """Push an image to its registry.

        Raises:
            DeploymentError: If the push fails or times out
        """
        self.console.info(f"Pushing image: {image}")
        result = self.commands.docker.push(
            image,
            timeout=self.constants.PUSH_TIMEOUT,
            on_output=self.console.line,
            on_error=self.console.error_line,
        )
        if not result.success:
            raise DeploymentError(
                "Docker push failed",
                details=_failure_details(result, self.constants.PUSH_TIMEOUT)
                or f"Make sure you are logged in: docker login {image.split('/')[0]}",
            )
        self.console.ok("Docker image pushed successfully")
