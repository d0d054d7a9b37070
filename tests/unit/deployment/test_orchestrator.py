"""Tests for the deploy workflow."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ack_deploy.config import DeployConfig
from ack_deploy.deployment import DeploymentError, DeploymentOrchestrator
from ack_deploy.deployment.recreation import RecreationDecision
from ack_deploy.deployment.shell_commands import CommandResult
from ack_deploy.infra.constants import DeploymentPaths


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(success=True, stdout=stdout)


def failed(stderr: str = "error") -> CommandResult:
    return CommandResult(success=False, stderr=stderr, returncode=1)


@pytest.fixture
def config() -> DeployConfig:
    return DeployConfig(
        registry="docker.io",
        app_name="shop",
        image_repository="shop",
        namespace="default",
        tag="latest",
        region="me-central-1",
    )


@pytest.fixture
def kubectl(mock_commands: MagicMock) -> MagicMock:
    """Kubectl mock where every step succeeds."""
    kubectl = mock_commands.kubectl
    kubectl.client_version.return_value = ok()
    kubectl.cluster_info.return_value = ok()
    kubectl.ensure_namespace.return_value = ok()
    kubectl.apply_directory.return_value = ok()
    kubectl.wait_for_deployment.return_value = ok()
    kubectl.get_load_balancer_ip.return_value = "47.1.2.3"
    kubectl.get_pods.return_value = ok("shop-app-1   1/1   Running")
    return kubectl


@pytest.fixture
def provisioner() -> MagicMock:
    return MagicMock()


@pytest.fixture
def recreator() -> MagicMock:
    recreator = MagicMock()
    recreator.inspect.return_value = RecreationDecision(False, "pods healthy")
    return recreator


@pytest.fixture
def orchestrator(
    mock_commands: MagicMock,
    mock_console: MagicMock,
    paths: DeploymentPaths,
    provisioner: MagicMock,
    recreator: MagicMock,
    kubectl: MagicMock,
) -> DeploymentOrchestrator:
    paths.manifests_dir.mkdir()
    return DeploymentOrchestrator(
        mock_commands, mock_console, paths, provisioner, recreator=recreator
    )


class TestDeploy:
    def test_happy_path(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        mock_commands: MagicMock,
        mock_console: MagicMock,
        config: DeployConfig,
    ) -> None:
        orchestrator.deploy(config)

        mock_commands.run_cli.assert_not_called()
        kubectl.ensure_namespace.assert_not_called()
        kubectl.apply_directory.assert_called_once()
        kubectl.wait_for_deployment.assert_not_called()
        mock_console.info.assert_any_call("🌐 Application URL: http://47.1.2.3")

    def test_build_runs_build_command_with_push(
        self,
        orchestrator: DeploymentOrchestrator,
        mock_commands: MagicMock,
        paths: DeploymentPaths,
        config: DeployConfig,
    ) -> None:
        mock_commands.run_cli.return_value = ok()

        orchestrator.deploy(config, build=True)

        args = mock_commands.run_cli.call_args.args[0]
        assert args == ["--project-dir", str(paths.project_root), "build", "--push"]
        assert mock_commands.run_cli.call_args.kwargs["timeout"] == 1200

    def test_build_failure_aborts(
        self,
        orchestrator: DeploymentOrchestrator,
        mock_commands: MagicMock,
        kubectl: MagicMock,
        config: DeployConfig,
    ) -> None:
        mock_commands.run_cli.return_value = failed()

        with pytest.raises(DeploymentError, match="build and push failed"):
            orchestrator.deploy(config, build=True)

        kubectl.client_version.assert_not_called()

    def test_wait_failure_is_a_warning(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        mock_console: MagicMock,
        config: DeployConfig,
    ) -> None:
        kubectl.wait_for_deployment.return_value = failed("timed out")

        orchestrator.deploy(config, wait=True)

        mock_console.warn.assert_any_call("Deployment readiness check timed out or failed")
        kubectl.wait_for_deployment.assert_called_once()
        assert kubectl.wait_for_deployment.call_args.args == ("shop-app", "default")

    def test_forced_recreate(
        self,
        orchestrator: DeploymentOrchestrator,
        recreator: MagicMock,
        config: DeployConfig,
    ) -> None:
        orchestrator.deploy(config, recreate=True)

        recreator.inspect.assert_not_called()
        recreator.recreate.assert_called_once_with(config)

    def test_auto_detected_recreate(
        self,
        orchestrator: DeploymentOrchestrator,
        recreator: MagicMock,
        config: DeployConfig,
    ) -> None:
        recreator.inspect.return_value = RecreationDecision(True, "image pull errors")

        orchestrator.deploy(config)

        recreator.recreate.assert_called_once_with(config)

    def test_no_recreate_when_not_warranted(
        self,
        orchestrator: DeploymentOrchestrator,
        recreator: MagicMock,
        config: DeployConfig,
    ) -> None:
        orchestrator.deploy(config)

        recreator.recreate.assert_not_called()


class TestConnectivity:
    def test_missing_kubectl_is_fatal(
        self, orchestrator: DeploymentOrchestrator, kubectl: MagicMock
    ) -> None:
        kubectl.client_version.return_value = CommandResult(
            success=False, returncode=127
        )

        with pytest.raises(DeploymentError) as excinfo:
            orchestrator.check_connectivity()

        assert "brew install kubectl" in excinfo.value.details
        kubectl.cluster_info.assert_not_called()

    def test_provisions_and_retries_once(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        provisioner: MagicMock,
    ) -> None:
        kubectl.cluster_info.side_effect = [failed(), ok()]
        provisioner.auto_provision.return_value = True

        orchestrator.check_connectivity()

        assert kubectl.cluster_info.call_count == 2
        provisioner.auto_provision.assert_called_once()

    def test_still_unreachable_after_provisioning(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        provisioner: MagicMock,
    ) -> None:
        kubectl.cluster_info.return_value = failed()
        provisioner.auto_provision.return_value = True

        with pytest.raises(DeploymentError) as excinfo:
            orchestrator.check_connectivity()

        assert kubectl.cluster_info.call_count == 2
        assert "KUBECONFIG" in excinfo.value.details

    def test_provisioning_not_possible(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        provisioner: MagicMock,
    ) -> None:
        kubectl.cluster_info.return_value = failed()
        provisioner.auto_provision.return_value = False

        with pytest.raises(DeploymentError, match="Cannot connect"):
            orchestrator.check_connectivity()

        assert kubectl.cluster_info.call_count == 1

    def test_unreachable_cluster_stops_before_apply(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        provisioner: MagicMock,
        config: DeployConfig,
    ) -> None:
        kubectl.cluster_info.return_value = failed()
        provisioner.auto_provision.return_value = False

        with pytest.raises(DeploymentError):
            orchestrator.deploy(config)

        kubectl.apply_directory.assert_not_called()


class TestSteps:
    def test_default_namespace_is_a_no_op(
        self, orchestrator: DeploymentOrchestrator, kubectl: MagicMock
    ) -> None:
        assert orchestrator.ensure_namespace("default") is True
        kubectl.ensure_namespace.assert_not_called()

    def test_namespace_failure_is_a_warning(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        mock_console: MagicMock,
    ) -> None:
        kubectl.ensure_namespace.return_value = failed()

        assert orchestrator.ensure_namespace("staging") is False
        mock_console.warn.assert_called_once()

    def test_missing_manifests_dir_is_fatal(
        self,
        orchestrator: DeploymentOrchestrator,
        paths: DeploymentPaths,
        config: DeployConfig,
    ) -> None:
        paths.manifests_dir.rmdir()

        with pytest.raises(DeploymentError) as excinfo:
            orchestrator.apply_manifests(config)

        assert "ack-deploy init" in excinfo.value.details

    def test_apply_failure_is_fatal(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        config: DeployConfig,
    ) -> None:
        kubectl.apply_directory.return_value = failed("forbidden")

        with pytest.raises(DeploymentError) as excinfo:
            orchestrator.apply_manifests(config)

        assert excinfo.value.details == "forbidden"

    def test_apply_scopes_to_namespace(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        paths: DeploymentPaths,
        config: DeployConfig,
    ) -> None:
        orchestrator.apply_manifests(config.model_copy(update={"namespace": "prod"}))

        assert kubectl.apply_directory.call_args.args == (paths.manifests_dir, "prod")

    def test_service_info_without_external_ip(
        self,
        orchestrator: DeploymentOrchestrator,
        kubectl: MagicMock,
        mock_console: MagicMock,
        config: DeployConfig,
    ) -> None:
        kubectl.get_load_balancer_ip.return_value = ""

        orchestrator.show_service_info(config)

        mock_console.line.assert_any_call("kubectl get service shop-service -n default")
        kubectl.get_pods.assert_called_once_with("app=shop-app", "default")
