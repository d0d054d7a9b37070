"""Docker command abstractions.

This module provides the image build and push operations used to publish
the application image to a container registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .runner import CommandRunner, LineSink


class DockerCommands:
    """Docker-related shell commands."""

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Docker commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def build(
        self,
        image: str,
        *,
        dockerfile: str,
        platform: str,
        context: str = ".",
        timeout: float | None = None,
        on_output: LineSink | None = None,
        on_error: LineSink | None = None,
    ) -> CommandResult:
        """Build an image from the project root.

        Args:
            image: Full image reference to tag the build with
            dockerfile: Dockerfile path relative to the project root
            platform: Target platform (e.g., "linux/amd64")
            context: Build context directory
            timeout: Seconds before the build is killed
            on_output: Callback for each stdout line
            on_error: Callback for each stderr line

        Returns:
            CommandResult with build status

        Example:
            >>> docker.build("registry.example.com/app:latest",
            ...              dockerfile="Dockerfile.ack", platform="linux/amd64")
        """
        return self._runner.run_streaming(
            [
                "docker",
                "build",
                "--platform",
                platform,
                "-t",
                image,
                "-f",
                dockerfile,
                context,
            ],
            timeout=timeout,
            on_output=on_output,
            on_error=on_error,
        )

    def push(
        self,
        image: str,
        *,
        timeout: float | None = None,
        on_output: LineSink | None = None,
        on_error: LineSink | None = None,
    ) -> CommandResult:
        """Push an image to its remote registry.

        Args:
            image: Full image reference including registry
                  (e.g., "registry.me-central-1.aliyuncs.com/team/app:v1")
            timeout: Seconds before the push is killed

        Returns:
            CommandResult with push status
        """
        return self._runner.run_streaming(
            ["docker", "push", image],
            timeout=timeout,
            on_output=on_output,
            on_error=on_error,
        )
