"""Deployment constants and configuration.

This module centralizes all magic strings, paths, and timeouts used
throughout the scaffolding and deployment process.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for ACK deployment.

    All attributes are class-level and immutable.
    """

    # Defaults used when no flag, .env.ack entry or environment variable is set
    DEFAULT_NAMESPACE: str = "default"
    DEFAULT_REGION: str = "me-central-1"
    DEFAULT_REGISTRY: str = "registry.me-central-1.aliyuncs.com"
    DEFAULT_TAG: str = "latest"
    DEFAULT_DOMAIN: str = "example.com"
    FALLBACK_APP_NAME: str = "laravel-app"

    # Kubernetes resource name suffixes (<app>-app, <app>-service)
    DEPLOYMENT_SUFFIX: str = "-app"
    SERVICE_SUFFIX: str = "-service"

    # Timeouts (seconds) for external processes
    BUILD_TIMEOUT: float = 600
    PUSH_TIMEOUT: float = 600
    BUILD_AND_PUSH_TIMEOUT: float = 1200
    WAIT_TIMEOUT: str = "300s"
    WAIT_PROCESS_TIMEOUT: float = 330

    # Image build settings
    BUILD_PLATFORM: str = "linux/amd64"

    # Pod status markers used by the recreation heuristic
    IMAGE_PULL_MARKERS: tuple[str, ...] = ("ImagePullBackOff", "ErrImagePull")
    STARTING_MARKERS: tuple[str, ...] = ("ContainerCreating", "Pending")

    # File names relative to the project root
    ENV_FILE: str = ".env.ack"
    DOCKERFILE: str = "Dockerfile.ack"
    DEPLOY_SCRIPT: str = "deploy-ack.sh"
    COMPOSE_FILE: str = "docker-compose.ack.yml"
    MANIFESTS_DIR: str = "k8s"
    LOCAL_KUBECONFIG: str = "kubeconfig.yaml"
    GITIGNORE: str = ".gitignore"

    def deployment_name(self, app_name: str) -> str:
        """Name of the Deployment resource for an app."""
        return f"{app_name}{self.DEPLOYMENT_SUFFIX}"

    def service_name(self, app_name: str) -> str:
        """Name of the Service resource for an app."""
        return f"{app_name}{self.SERVICE_SUFFIX}"


class DeploymentPaths:
    """Path resolver for files the tool reads and generates.

    All paths are derived from the Laravel project root.
    """

    def __init__(self, project_root: Path, home: Path | None = None) -> None:
        """Initialize deployment paths.

        Args:
            project_root: Path to the Laravel project root
            home: Home directory used for the global kubeconfig
                  (defaults to the current user's home)
        """
        self._project_root = project_root
        self._home = home if home is not None else Path.home()
        self._constants = DEFAULT_CONSTANTS

    @property
    def project_root(self) -> Path:
        """Get path to project root."""
        return self._project_root

    @property
    def env_file(self) -> Path:
        """Get path to .env.ack."""
        return self._project_root / self._constants.ENV_FILE

    @property
    def dockerfile(self) -> Path:
        """Get path to Dockerfile.ack."""
        return self._project_root / self._constants.DOCKERFILE

    @property
    def manifests_dir(self) -> Path:
        """Get path to the Kubernetes manifests directory."""
        return self._project_root / self._constants.MANIFESTS_DIR

    @property
    def local_kubeconfig(self) -> Path:
        """Get path to the project-local kubeconfig."""
        return self._project_root / self._constants.LOCAL_KUBECONFIG

    @property
    def global_kubeconfig(self) -> Path:
        """Get path to the user's global kubeconfig."""
        return self._home / ".kube" / "config"

    @property
    def gitignore(self) -> Path:
        """Get path to the project's .gitignore."""
        return self._project_root / self._constants.GITIGNORE


DEFAULT_CONSTANTS = DeploymentConstants()
