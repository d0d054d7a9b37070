"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from ack_deploy.cli.shared.console import CLIConsole, console
from ack_deploy.config import ConfigResolver, EnvAckStore
from ack_deploy.deployment import (
    DeploymentOrchestrator,
    ImageBuilder,
    KubeconfigProvisioner,
    KubeconfigResolver,
    ProjectScaffolder,
)
from ack_deploy.deployment.shell_commands import ShellCommands
from ack_deploy.infra.constants import DeploymentConstants, DeploymentPaths
from ack_deploy.utils.paths import get_project_root


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    project_root: Path
    commands: ShellCommands
    constants: DeploymentConstants
    paths: DeploymentPaths
    store: EnvAckStore
    config: ConfigResolver
    kubeconfig: KubeconfigResolver
    provisioner: KubeconfigProvisioner

    def image_builder(self) -> ImageBuilder:
        return ImageBuilder(self.commands, self.console, self.paths, self.constants)

    def orchestrator(self) -> DeploymentOrchestrator:
        return DeploymentOrchestrator(
            self.commands,
            self.console,
            self.paths,
            self.provisioner,
            constants=self.constants,
        )

    def scaffolder(self) -> ProjectScaffolder:
        return ProjectScaffolder(
            self.console, self.paths, self.config, constants=self.constants
        )


def build_cli_context(project_root: Path | None = None) -> CLIContext:
    """Build a fresh CLIContext."""
    project_root = (project_root or get_project_root()).resolve()
    constants = DeploymentConstants()
    paths = DeploymentPaths(project_root)
    store = EnvAckStore(paths.env_file)
    config = ConfigResolver(store, project_root=project_root, constants=constants)
    kubeconfig = KubeconfigResolver(paths)
    commands = ShellCommands(project_root, kubeconfig)

    return CLIContext(
        console=console,
        project_root=project_root,
        commands=commands,
        constants=constants,
        paths=paths,
        store=store,
        config=config,
        kubeconfig=kubeconfig,
        provisioner=KubeconfigProvisioner(
            commands, console, paths, config, store, kubeconfig
        ),
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext stored by the app callback, or build a new one."""
    if ctx is not None and isinstance(ctx.obj, CLIContext):
        return ctx.obj
    return build_cli_context()
