"""Kubeconfig discovery and provisioning.

Two concerns live here:

- ``KubeconfigResolver`` decides which kubeconfig a kubectl invocation
  should use. A project-local ``kubeconfig.yaml`` wins over the global
  ``~/.kube/config``; when neither exists the command is left alone and
  kubectl falls back to its own discovery.
- ``KubeconfigProvisioner`` fetches credentials for an ACK cluster through
  the ``aliyun`` CLI and writes them to one of those two locations.
"""

from __future__ import annotations

import json
import os
import shutil
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ack_deploy.config.resolver import ACK_CLUSTER_ID, ACK_REGION

from .image_builder import DeploymentError

if TYPE_CHECKING:
    from ack_deploy.cli.shared.console import CLIConsole
    from ack_deploy.config import ConfigResolver, EnvAckStore
    from ack_deploy.infra.constants import DeploymentPaths

    from .shell_commands import ShellCommands


KUBECONFIG_FILE_MODE = 0o600
KUBECONFIG_DIR_MODE = 0o700
BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"

ALIYUN_INSTALL_HINT = (
    "Install Alibaba Cloud CLI:\n"
    "• Python: pip install aliyun-cli\n"
    "• macOS: brew install aliyun-cli\n"
    "• Or download from: https://github.com/aliyun/aliyun-cli\n\n"
    "After installation, configure with: aliyun configure"
)


class KubeconfigScope(str, Enum):
    """Where a kubeconfig file lives."""

    PROJECT = "project"
    GLOBAL = "global"


@dataclass(frozen=True)
class KubeconfigLocation:
    """A kubeconfig file that exists on disk."""

    scope: KubeconfigScope
    path: Path


class KubeconfigResolver:
    """Pick the kubeconfig used for kubectl invocations.

    The location is recomputed on every call so a kubeconfig written in the
    middle of a command is picked up by the next kubectl invocation. A global
    kubeconfig written by this tool during the run is used even when
    ``KUBECONFIG`` points somewhere else.
    """

    def __init__(
        self, paths: DeploymentPaths, environ: Mapping[str, str] | None = None
    ) -> None:
        self.paths = paths
        self._environ = environ if environ is not None else os.environ
        self._provisioned: Path | None = None

    def use_provisioned(self, path: Path) -> None:
        """Prefer ``path`` over the ``KUBECONFIG`` lookup for the rest of the run."""
        self._provisioned = path

    def locate(self) -> KubeconfigLocation | None:
        """Return the kubeconfig to use, or None to rely on kubectl defaults.

        An explicit ``KUBECONFIG`` environment variable suppresses the
        global fallback unless this run provisioned the global file; a
        project-local file still takes precedence.
        """
        local = self.paths.local_kubeconfig
        if local.is_file():
            return KubeconfigLocation(KubeconfigScope.PROJECT, local)

        if self._provisioned is not None and self._provisioned.is_file():
            return KubeconfigLocation(KubeconfigScope.GLOBAL, self._provisioned)

        if self._environ.get("KUBECONFIG"):
            return None

        global_path = self.paths.global_kubeconfig
        if global_path.is_file():
            return KubeconfigLocation(KubeconfigScope.GLOBAL, global_path)

        return None

    def command_with_kubeconfig(self, base_cmd: Sequence[str]) -> list[str]:
        """Insert ``--kubeconfig <path>`` right after the executable.

        Example:
            >>> resolver.command_with_kubeconfig(["kubectl", "get", "pods"])
            ['kubectl', '--kubeconfig', '/app/kubeconfig.yaml', 'get', 'pods']
        """
        cmd = list(base_cmd)
        location = self.locate()
        if location is None or not cmd:
            return cmd
        return [cmd[0], "--kubeconfig", str(location.path), *cmd[1:]]


def extract_kubeconfig(payload: str) -> str:
    """Return the kubeconfig document from an ``aliyun cs`` response.

    The ACK API wraps the kubeconfig in a JSON object under ``config``;
    anything else is assumed to be the kubeconfig itself.
    """
    try:
        data = json.loads(payload)
    except ValueError:
        return payload
    if isinstance(data, dict) and isinstance(data.get("config"), str):
        return data["config"]
    return payload


class KubeconfigProvisioner:
    """Fetch ACK cluster credentials and persist them for kubectl.

    Attributes:
        commands: Shell command executor
        console: CLI console for output and prompts
        paths: Deployment path resolver
        config: Resolver used for cluster id / region lookups
        store: The .env.ack store cluster identity is saved to
        kubeconfig: Resolver told about global kubeconfigs written here
    """

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        paths: DeploymentPaths,
        config: ConfigResolver,
        store: EnvAckStore,
        kubeconfig: KubeconfigResolver | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.paths = paths
        self.config = config
        self.store = store
        self.kubeconfig = kubeconfig

    # =========================================================================
    # Cluster identity
    # =========================================================================

    def cluster_id(self, flag: str | None = None) -> str | None:
        """Cluster id from flag, .env.ack or ACK_CLUSTER_ID."""
        return self.config.lookup(ACK_CLUSTER_ID, flag)

    def region(self, flag: str | None = None) -> str:
        """Region from flag, .env.ack or ACK_REGION, defaulting to me-central-1."""
        return (
            self.config.lookup(ACK_REGION, flag)
            or self.config.constants.DEFAULT_REGION
        )

    def save_cluster_config(self, cluster_id: str, region: str) -> None:
        """Persist cluster identity into .env.ack."""
        self.store.write({ACK_CLUSTER_ID: cluster_id, ACK_REGION: region})
        self.console.ok(f"Cluster configuration saved to {self.store.path.name}")

    # =========================================================================
    # Credentials
    # =========================================================================

    def fetch(self, cluster_id: str, region: str) -> str | None:
        """Download the kubeconfig for a cluster, or None on failure."""
        result = self.commands.aliyun.get_user_config(cluster_id, region)
        if not result.success:
            logger.warning(f"aliyun cs GET failed: {result.output}")
            return None
        return extract_kubeconfig(result.stdout)

    def write(self, kubeconfig: str, *, local: bool) -> Path:
        """Write a kubeconfig to the project or global location.

        Global writes create ``~/.kube`` with mode 0700 and back up an
        existing config first. Project-local writes overwrite in place and
        make sure the file is git-ignored. The file itself gets mode 0600.

        Returns:
            Path the kubeconfig was written to
        """
        if local:
            path = self.paths.local_kubeconfig
            self.console.info("Using project-specific kubeconfig")
        else:
            path = self.paths.global_kubeconfig
            self._ensure_private_dir(path.parent)
            backup = self.backup(path)
            if backup:
                self.console.info(f"📁 Backed up existing kubeconfig to: {backup}")

        path.write_text(kubeconfig)
        path.chmod(KUBECONFIG_FILE_MODE)
        self.console.ok(f"Kubeconfig saved to: {path}")

        if local and self.ensure_gitignored(path.name):
            self.console.info(f"📝 Added {path.name} to {self.paths.gitignore.name}")
        if not local and self.kubeconfig is not None:
            self.kubeconfig.use_provisioned(path)

        return path

    def backup(self, path: Path) -> Path | None:
        """Copy an existing file to ``<path>.backup.<timestamp>``.

        A numeric suffix keeps backups taken within the same second apart.
        """
        if not path.exists():
            return None
        stamp = datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)
        backup = path.with_name(f"{path.name}.backup.{stamp}")
        counter = 1
        while backup.exists():
            backup = path.with_name(f"{path.name}.backup.{stamp}.{counter}")
            counter += 1
        shutil.copy2(path, backup)
        return backup

    def ensure_gitignored(self, filename: str) -> bool:
        """Append ``filename`` to .gitignore unless it is already listed.

        Returns:
            True if the file was appended, False if it was already present
        """
        gitignore = self.paths.gitignore
        content = gitignore.read_text() if gitignore.exists() else ""
        listed = {line.strip() for line in content.splitlines()}
        if filename in listed or f"/{filename}" in listed:
            return False

        if content and not content.endswith("\n"):
            content += "\n"
        content += f"\n# ACK kubeconfig\n{filename}\n"
        gitignore.write_text(content)
        return True

    def _ensure_private_dir(self, directory: Path) -> None:
        if directory.is_dir():
            return
        directory.mkdir(mode=KUBECONFIG_DIR_MODE, parents=True, exist_ok=True)
        directory.chmod(KUBECONFIG_DIR_MODE)
        self.console.info(f"Created directory: {directory}")

    # =========================================================================
    # Automatic setup (used when cluster-info fails during deploy)
    # =========================================================================

    def auto_provision(self) -> bool:
        """Try to obtain a working kubeconfig without leaving the deploy flow.

        Returns:
            True if a kubeconfig was written, False if setup was not possible
        """
        self.console.info("🔍 Attempting automatic ACK kubeconfig setup...")

        if not self.commands.aliyun.is_available():
            self.console.warn(
                "Alibaba Cloud CLI not found. Install with: pip install aliyun-cli"
            )
            return False

        cluster_id = self.cluster_id()
        region = self.region()

        if not cluster_id:
            if not self.console.confirm(
                "Would you like to configure ACK cluster connection now?"
            ):
                return False
            cluster_id = self.console.ask("Enter your ACK Cluster ID").strip()
            region = self.console.ask("Enter your ACK Region", default=region).strip()
            if not cluster_id or not region:
                return False
            self.save_cluster_config(cluster_id, region)

        self.console.info(f"Getting kubeconfig for cluster: {cluster_id}")
        kubeconfig = self.fetch(cluster_id, region)
        if kubeconfig is None:
            self.console.warn(
                "Failed to get kubeconfig from Alibaba Cloud. "
                "Check your aliyun CLI configuration."
            )
            return False

        local = self.console.confirm(
            "Save kubeconfig to project directory? (Recommended for project isolation)",
            default=True,
        )
        self.write(kubeconfig, local=local)
        return True

    # =========================================================================
    # Interactive setup (the ``kubeconfig`` command)
    # =========================================================================

    def provision(
        self,
        *,
        cluster_id: str | None = None,
        region: str | None = None,
        save: bool = False,
        local: bool = False,
    ) -> Path:
        """Fetch and write a kubeconfig, prompting for anything missing.

        Returns:
            Path the kubeconfig was written to

        Raises:
            DeploymentError: If the aliyun CLI is missing, no cluster id is
                given or the kubeconfig cannot be downloaded
        """
        if not self.commands.aliyun.is_available():
            raise DeploymentError(
                "Alibaba Cloud CLI (aliyun) is not installed or not accessible",
                details=ALIYUN_INSTALL_HINT,
            )
        self.console.ok("Alibaba Cloud CLI found")

        cluster_id = self.cluster_id(cluster_id)
        if not cluster_id:
            self.console.print_steps(
                "Find your cluster ID:",
                [
                    "• ACK Console → Clusters → Cluster Information",
                    "• Or run: aliyun cs GET /clusters",
                ],
            )
            cluster_id = self.console.ask("Enter your ACK Cluster ID").strip()
        if not cluster_id:
            raise DeploymentError("Cluster ID is required")

        region = region or self.config.lookup(ACK_REGION)
        if not region:
            region = self.console.ask(
                "Enter your ACK Region", default=self.config.constants.DEFAULT_REGION
            ).strip()

        self.console.info(f"Getting kubeconfig for cluster: {cluster_id} ({region})")
        kubeconfig = self.fetch(cluster_id, region)
        if kubeconfig is None:
            raise DeploymentError(
                "Failed to get kubeconfig from Alibaba Cloud",
                details=(
                    "Troubleshooting:\n"
                    "• Check your credentials: aliyun configure list\n"
                    "• Verify the cluster ID and region are correct\n"
                    "• Make sure your account has access to the cluster\n"
                    f"• List clusters: aliyun cs GET /clusters --region {region}"
                ),
            )

        if not local:
            local = self.console.confirm(
                "Save kubeconfig to project directory? (Recommended for project isolation)",
                default=True,
            )
        path = self.write(kubeconfig, local=local)

        if save or self.console.confirm(
            f"Save cluster configuration to {self.store.path.name}?", default=True
        ):
            self.save_cluster_config(cluster_id, region)

        self.verify()
        return path

    def verify(self) -> bool:
        """Check connectivity with the kubeconfig now in place; failures only warn."""
        self.console.info("Verifying cluster connection...")
        result = self.commands.kubectl.cluster_info()
        if not result.success:
            self.console.warn(
                "Could not connect to the cluster with the new kubeconfig. "
                "Check network access to the API server."
            )
            return False
        self.console.ok("Successfully connected to ACK cluster")
        self.console.line(result.stdout.strip())
        return True
