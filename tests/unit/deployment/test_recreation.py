"""Tests for the deployment recreation heuristic."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ack_deploy.config import DeployConfig
from ack_deploy.deployment import (
    DeploymentRecreator,
    PodStatusClass,
    classify_pod_status,
)
from ack_deploy.deployment.shell_commands import CommandResult

PULL_BACKOFF = "shop-app-7d9c-abcde   0/1   ImagePullBackOff   0   2m"
ERR_PULL = "shop-app-7d9c-abcde   0/1   ErrImagePull   0   10s"
CREATING = "shop-app-7d9c-abcde   0/1   ContainerCreating   0   5s"
PENDING = "shop-app-7d9c-abcde   0/1   Pending   0   5s"
RUNNING = "shop-app-7d9c-abcde   1/1   Running   0   3d"


@pytest.fixture
def config() -> DeployConfig:
    return DeployConfig(
        registry="docker.io",
        app_name="shop",
        image_repository="shop",
        namespace="prod",
        tag="latest",
        region="me-central-1",
    )


class TestClassifyPodStatus:
    @pytest.mark.parametrize("snapshot", [PULL_BACKOFF, ERR_PULL])
    def test_image_pull_errors(self, snapshot: str) -> None:
        assert classify_pod_status(snapshot) is PodStatusClass.IMAGE_PULL_ERROR

    @pytest.mark.parametrize("snapshot", [CREATING, PENDING])
    def test_starting(self, snapshot: str) -> None:
        assert classify_pod_status(snapshot) is PodStatusClass.STARTING

    @pytest.mark.parametrize("snapshot", [RUNNING, ""])
    def test_other(self, snapshot: str) -> None:
        assert classify_pod_status(snapshot) is PodStatusClass.OTHER

    def test_pull_error_beats_starting(self) -> None:
        snapshot = f"{PULL_BACKOFF}\n{CREATING}"

        assert classify_pod_status(snapshot) is PodStatusClass.IMAGE_PULL_ERROR


class TestDeploymentRecreator:
    @pytest.fixture
    def recreator(
        self, mock_commands: MagicMock, mock_console: MagicMock
    ) -> DeploymentRecreator:
        return DeploymentRecreator(mock_commands, mock_console)

    def test_inspect_missing_deployment(
        self,
        recreator: DeploymentRecreator,
        mock_commands: MagicMock,
        config: DeployConfig,
    ) -> None:
        mock_commands.kubectl.deployment_exists.return_value = False

        decision = recreator.inspect(config)

        assert decision.warranted is False
        mock_commands.kubectl.get_pods.assert_not_called()

    def test_inspect_image_pull_errors(
        self,
        recreator: DeploymentRecreator,
        mock_commands: MagicMock,
        config: DeployConfig,
    ) -> None:
        mock_commands.kubectl.deployment_exists.return_value = True
        mock_commands.kubectl.get_pods.return_value = CommandResult(
            success=True, stdout=PULL_BACKOFF
        )

        decision = recreator.inspect(config)

        assert decision.warranted is True
        assert decision.pod_status is PodStatusClass.IMAGE_PULL_ERROR
        mock_commands.kubectl.get_pods.assert_called_once_with(
            "app=shop-app", "prod", no_headers=True
        )

    def test_inspect_starting_pods(
        self,
        recreator: DeploymentRecreator,
        mock_commands: MagicMock,
        config: DeployConfig,
    ) -> None:
        mock_commands.kubectl.deployment_exists.return_value = True
        mock_commands.kubectl.get_pods.return_value = CommandResult(
            success=True, stdout=CREATING
        )

        assert recreator.inspect(config).warranted is False

    def test_inspect_pod_listing_failure_is_not_fatal(
        self,
        recreator: DeploymentRecreator,
        mock_commands: MagicMock,
        config: DeployConfig,
    ) -> None:
        mock_commands.kubectl.deployment_exists.return_value = True
        mock_commands.kubectl.get_pods.return_value = CommandResult(success=False)

        assert recreator.inspect(config).warranted is False

    def test_recreate_deletes_existing(
        self,
        recreator: DeploymentRecreator,
        mock_commands: MagicMock,
        config: DeployConfig,
    ) -> None:
        mock_commands.kubectl.deployment_exists.return_value = True
        mock_commands.kubectl.delete_deployment.return_value = CommandResult(success=True)

        assert recreator.recreate(config) is True

        args = mock_commands.kubectl.delete_deployment.call_args
        assert args.args == ("shop-app", "prod")

    def test_recreate_without_deployment(
        self,
        recreator: DeploymentRecreator,
        mock_commands: MagicMock,
        config: DeployConfig,
    ) -> None:
        mock_commands.kubectl.deployment_exists.return_value = False

        assert recreator.recreate(config) is False
        mock_commands.kubectl.delete_deployment.assert_not_called()

    def test_recreate_delete_failure_only_warns(
        self,
        recreator: DeploymentRecreator,
        mock_commands: MagicMock,
        mock_console: MagicMock,
        config: DeployConfig,
    ) -> None:
        mock_commands.kubectl.deployment_exists.return_value = True
        mock_commands.kubectl.delete_deployment.return_value = CommandResult(success=False)

        assert recreator.recreate(config) is False
        mock_console.warn.assert_called_with(
            "Failed to delete deployment (continuing anyway)"
        )
