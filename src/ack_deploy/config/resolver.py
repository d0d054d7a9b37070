"""Deployment configuration resolution.

Every command builds a fresh ``DeployConfig`` from four layered sources,
highest priority first: command-line flag, ``.env.ack``, process
environment, hard-coded default.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, replace
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict

from ack_deploy.infra.constants import DEFAULT_CONSTANTS, DeploymentConstants
from ack_deploy.infra.regions import (
    ResourceProfile,
    get_resource_profile,
    registry_for_region,
)

from .naming import image_repository, kubernetes_app_name
from .providers import (
    DefaultProvider,
    EnvProvider,
    FileProvider,
    FlagProvider,
    ProviderChain,
)
from .store import EnvAckStore

# Keys understood in flags, .env.ack and the environment
APP_NAME = "APP_NAME"
DOCKER_REGISTRY = "DOCKER_REGISTRY"
K8S_NAMESPACE = "K8S_NAMESPACE"
DOMAIN = "DOMAIN"
ACK_CLUSTER_ID = "ACK_CLUSTER_ID"
ACK_REGION = "ACK_REGION"

RESOURCE_KEYS: dict[str, str] = {
    "cpu_request": "ACK_CPU_REQUEST",
    "memory_request": "ACK_MEMORY_REQUEST",
    "cpu_limit": "ACK_CPU_LIMIT",
    "memory_limit": "ACK_MEMORY_LIMIT",
    "min_replicas": "ACK_MIN_REPLICAS",
    "max_replicas": "ACK_MAX_REPLICAS",
    "cpu_threshold": "ACK_CPU_THRESHOLD",
}


class DeployConfig(BaseModel):
    """Resolved configuration for a single command invocation."""

    model_config = ConfigDict(frozen=True)

    registry: str
    app_name: str
    image_repository: str
    namespace: str
    tag: str
    domain: str = ""
    cluster_id: str | None = None
    region: str
    resources: ResourceProfile = ResourceProfile()

    @property
    def image(self) -> str:
        """Full image reference, ``<registry>/<repository>:<tag>``."""
        return f"{self.registry}/{self.image_repository}:{self.tag}"

    @property
    def deployment_name(self) -> str:
        return DEFAULT_CONSTANTS.deployment_name(self.app_name)

    @property
    def service_name(self) -> str:
        return DEFAULT_CONSTANTS.service_name(self.app_name)

    @property
    def label_selector(self) -> str:
        return f"app={self.deployment_name}"


class ConfigResolver:
    """Build ``DeployConfig`` objects from flags, .env.ack and the environment.

    Nothing is cached: each call re-reads ``.env.ack`` through the store.
    """

    def __init__(
        self,
        store: EnvAckStore,
        *,
        project_root: Path,
        environ: Mapping[str, str] | None = None,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.store = store
        self.project_root = project_root
        self.constants = constants or DEFAULT_CONSTANTS
        self._environ = environ

    def chain(
        self,
        flags: Mapping[str, str | None] | None = None,
        defaults: Mapping[str, str] | None = None,
    ) -> ProviderChain:
        """Provider chain in lookup order: flag, file, env, default."""
        return ProviderChain(
            [
                FlagProvider(flags),
                FileProvider(self.store),
                EnvProvider(self._environ),
                DefaultProvider(defaults or {}),
            ]
        )

    def lookup(self, key: str, flag: str | None = None) -> str | None:
        """Resolve a single key without any default."""
        return self.chain({key: flag}).get(key)

    def default_values(self, region: str | None = None) -> dict[str, str]:
        """Fallback values used when no other source has a key."""
        region = region or self.constants.DEFAULT_REGION
        return {
            APP_NAME: self.project_root.name,
            DOCKER_REGISTRY: registry_for_region(
                region, self.constants.DEFAULT_REGISTRY
            ),
            K8S_NAMESPACE: self.constants.DEFAULT_NAMESPACE,
            ACK_REGION: self.constants.DEFAULT_REGION,
        }

    def resolve(
        self,
        flags: Mapping[str, str | None] | None = None,
        *,
        tag: str | None = None,
        size: str = "small",
    ) -> DeployConfig:
        """Resolve the full deployment configuration.

        Args:
            flags: Values given on the command line, keyed like .env.ack
            tag: Image tag (defaults to ``latest``)
            size: Resource profile used when no ACK_* resource keys are set

        Returns:
            Immutable DeployConfig
        """
        region = self.chain(flags).get(ACK_REGION) or self.constants.DEFAULT_REGION
        chain = self.chain(flags, self.default_values(region))

        raw_app_name = chain.get(APP_NAME) or self.constants.FALLBACK_APP_NAME
        logger.debug(f"APP_NAME resolved from {chain.source_of(APP_NAME)}")

        return DeployConfig(
            registry=chain.get(DOCKER_REGISTRY) or self.constants.DEFAULT_REGISTRY,
            app_name=kubernetes_app_name(raw_app_name),
            image_repository=image_repository(raw_app_name),
            namespace=chain.get(K8S_NAMESPACE) or self.constants.DEFAULT_NAMESPACE,
            tag=tag or self.constants.DEFAULT_TAG,
            domain=chain.get(DOMAIN) or "",
            cluster_id=chain.get(ACK_CLUSTER_ID),
            region=region,
            resources=self._resolve_resources(chain, size),
        )

    def _resolve_resources(self, chain: ProviderChain, size: str) -> ResourceProfile:
        profile = get_resource_profile(size)
        values: dict[str, str | int] = {}
        for field in fields(ResourceProfile):
            raw = chain.get(RESOURCE_KEYS[field.name])
            if raw is None:
                continue
            if isinstance(getattr(profile, field.name), int):
                try:
                    values[field.name] = int(raw)
                except ValueError:
                    logger.warning(
                        f"Ignoring non-numeric {RESOURCE_KEYS[field.name]}={raw!r}"
                    )
                    continue
            else:
                values[field.name] = raw
        return replace(profile, **values)
