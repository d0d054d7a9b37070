"""Project scaffolding for ``ack-deploy init``.

Collects the deployment settings (flags first, prompts for the rest),
renders the embedded templates into the Laravel project and prints what
to do next.
"""

from __future__ import annotations

import base64
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ack_deploy.config import normalize_registry
from ack_deploy.config.resolver import (
    ACK_REGION,
    APP_NAME,
    DOCKER_REGISTRY,
    DOMAIN,
    K8S_NAMESPACE,
)
from ack_deploy.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants
from ack_deploy.infra.regions import ACK_REGIONS, get_region, registry_for_region
from ack_deploy.templates import TemplateError, TemplateRenderer, validate_manifest

from .image_builder import DeploymentError

if TYPE_CHECKING:
    from ack_deploy.cli.shared.console import CLIConsole
    from ack_deploy.config import ConfigResolver, DeployConfig
    from ack_deploy.infra.constants import DeploymentPaths


SCRIPT_MODE = 0o755
APP_KEY_BYTES = 32
PROJECT_MARKERS = ("composer.json", ".env.example")


@dataclass(frozen=True)
class ScaffoldFile:
    """A template and where its rendered output goes in the project."""

    template: str
    destination: str
    executable: bool = False
    manifest: bool = False


SCAFFOLD_FILES: tuple[ScaffoldFile, ...] = (
    ScaffoldFile("Dockerfile.ack.j2", DEFAULT_CONSTANTS.DOCKERFILE),
    ScaffoldFile("deploy-ack.sh.j2", DEFAULT_CONSTANTS.DEPLOY_SCRIPT, executable=True),
    ScaffoldFile("env.ack.j2", DEFAULT_CONSTANTS.ENV_FILE),
    ScaffoldFile(
        "docker-compose.ack.yml.j2", DEFAULT_CONSTANTS.COMPOSE_FILE, manifest=True
    ),
    ScaffoldFile("k8s/configmap.yaml.j2", "k8s/configmap.yaml", manifest=True),
    ScaffoldFile("k8s/deployment.yaml.j2", "k8s/deployment.yaml", manifest=True),
    ScaffoldFile("k8s/service.yaml.j2", "k8s/service.yaml", manifest=True),
    ScaffoldFile("k8s/ingress.yaml.j2", "k8s/ingress.yaml", manifest=True),
    ScaffoldFile("k8s/hpa.yaml.j2", "k8s/hpa.yaml", manifest=True),
)


def generate_app_key() -> str:
    """Laravel-style application key: ``base64:`` + 32 random bytes."""
    return "base64:" + base64.b64encode(secrets.token_bytes(APP_KEY_BYTES)).decode()


class ProjectScaffolder:
    """Generates the ACK deployment files for a Laravel project.

    Attributes:
        console: CLI console for output and prompts
        paths: Deployment path resolver
        resolver: Configuration resolver for defaults
        renderer: Template renderer
        constants: Deployment configuration constants
    """

    def __init__(
        self,
        console: CLIConsole,
        paths: DeploymentPaths,
        resolver: ConfigResolver,
        renderer: TemplateRenderer | None = None,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.console = console
        self.paths = paths
        self.resolver = resolver
        self.renderer = renderer or TemplateRenderer()
        self.constants = constants or DEFAULT_CONSTANTS

    def validate_project(self) -> list[str]:
        """Warn about files a Laravel project is expected to have.

        Returns:
            Names of the missing files
        """
        root = self.paths.project_root
        missing = [name for name in PROJECT_MARKERS if not (root / name).exists()]
        for name in missing:
            self.console.warn(f"{name} not found. Is this a Laravel project root?")
        return missing

    def gather_config(
        self,
        *,
        app_name: str | None = None,
        registry: str | None = None,
        namespace: str | None = None,
        domain: str | None = None,
        region: str | None = None,
        size: str = "small",
    ) -> DeployConfig:
        """Resolve the settings to scaffold with, prompting for missing values."""
        region = (
            region
            or self.resolver.lookup(ACK_REGION)
            or self.constants.DEFAULT_REGION
        )
        if get_region(region) is None:
            self.console.warn(
                f"Unknown ACK region '{region}'. Known regions: {', '.join(ACK_REGIONS)}"
            )

        if not app_name:
            app_name = self.console.ask(
                "Application name",
                default=self.resolver.lookup(APP_NAME) or self.paths.project_root.name,
            )

        if not registry:
            registry = self.console.ask(
                "Docker registry",
                default=self.resolver.lookup(DOCKER_REGISTRY)
                or registry_for_region(region, self.constants.DEFAULT_REGISTRY),
            )
        registry = normalize_registry(registry)

        if not namespace:
            namespace = self.console.ask(
                "Kubernetes namespace",
                default=self.resolver.lookup(K8S_NAMESPACE)
                or self.constants.DEFAULT_NAMESPACE,
            )

        if domain is None:
            domain = self.console.ask(
                "Domain (optional)", default=self.resolver.lookup(DOMAIN) or ""
            )

        return self.resolver.resolve(
            {
                APP_NAME: app_name,
                DOCKER_REGISTRY: registry,
                K8S_NAMESPACE: namespace,
                DOMAIN: domain.strip(),
                ACK_REGION: region,
            },
            size=size,
        )

    def scaffold(self, config: DeployConfig, *, force: bool = False) -> list[Path]:
        """Render every template into the project.

        Existing files are only replaced with ``force`` or after confirmation.

        Returns:
            Paths that were written

        Raises:
            DeploymentError: If a rendered manifest is not valid YAML
        """
        root = self.paths.project_root
        self.paths.manifests_dir.mkdir(parents=True, exist_ok=True)
        app_key = generate_app_key()

        written: list[Path] = []
        for item in SCAFFOLD_FILES:
            target = root / item.destination
            if target.exists() and not force:
                if not self.console.confirm(
                    f"{item.destination} already exists. Overwrite?"
                ):
                    self.console.info(f"Skipped {item.destination}")
                    continue

            content = self.renderer.render_template(
                item.template, config, APP_KEY=app_key
            )
            if item.manifest:
                try:
                    validate_manifest(content, item.destination)
                except TemplateError as e:
                    raise DeploymentError(
                        f"Generated {item.destination} is invalid", details=str(e)
                    ) from e

            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
            if item.executable and os.name != "nt":
                target.chmod(SCRIPT_MODE)

            logger.debug(f"Rendered {item.template} -> {target}")
            self.console.ok(f"Created {item.destination}")
            written.append(target)

        return written

    def print_next_steps(self, config: DeployConfig) -> None:
        self.console.print_steps(
            "Next steps:",
            [
                f"1. Review {self.constants.ENV_FILE} and the manifests in "
                f"{self.constants.MANIFESTS_DIR}/",
                "2. Configure cluster access: ack-deploy kubeconfig --cluster-id <id>",
                f"3. Build and push the image: ack-deploy build --push  ({config.image})",
                "4. Deploy: ack-deploy deploy --wait",
            ],
        )
