from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from loguru import logger

from ack_deploy.config import ConfigResolver, EnvAckStore
from ack_deploy.infra.constants import DeploymentPaths

# Keys read from the process environment during configuration lookup
CONFIG_ENV_VARS = (
    "APP_NAME",
    "DOCKER_REGISTRY",
    "K8S_NAMESPACE",
    "DOMAIN",
    "ACK_CLUSTER_ID",
    "ACK_REGION",
    "ACK_CPU_REQUEST",
    "ACK_MEMORY_REQUEST",
    "ACK_CPU_LIMIT",
    "ACK_MEMORY_LIMIT",
    "ACK_MIN_REPLICAS",
    "ACK_MAX_REPLICAS",
    "ACK_CPU_THRESHOLD",
    "KUBECONFIG",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell configuration out of the tests."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop sinks the CLI callback bound to a test runner's streams."""
    yield
    logger.remove()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A minimal Laravel project directory."""
    root = tmp_path / "shop"
    root.mkdir()
    (root / "artisan").write_text("#!/usr/bin/env php\n")
    (root / "composer.json").write_text("{}\n")
    (root / ".env.example").write_text("APP_NAME=Laravel\n")
    return root


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def paths(project_root: Path, home_dir: Path) -> DeploymentPaths:
    return DeploymentPaths(project_root, home=home_dir)


@pytest.fixture
def store(paths: DeploymentPaths) -> EnvAckStore:
    return EnvAckStore(paths.env_file)


@pytest.fixture
def resolver(store: EnvAckStore, project_root: Path) -> ConfigResolver:
    return ConfigResolver(store, project_root=project_root, environ={})


@pytest.fixture
def mock_console() -> MagicMock:
    """Create a mock CLI console."""
    return MagicMock()


@pytest.fixture
def mock_commands() -> MagicMock:
    """Create a mock shell commands instance."""
    commands = MagicMock()
    commands.docker = MagicMock()
    commands.kubectl = MagicMock()
    commands.aliyun = MagicMock()
    return commands
