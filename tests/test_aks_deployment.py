"""
Tests for AKSDeploymentCommand using mocked kubectl subprocess calls.

These tests verify that config files from the workspace are applied with
the provisioned kubeconfig, without requiring a real cluster.
"""

import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import KubectlResponse, access_profile_resource
from acsdeploy.modules.azure import ContainerServiceType, OrchestratorType
from acsdeploy.modules.command import CommandState
from acsdeploy.modules.commands import AKSDeploymentCommand, KubectlApplier

pytestmark = pytest.mark.kubectl_mock


@pytest.fixture
def aks_context(make_context, tmp_path):
    (tmp_path / "k8s").mkdir()
    (tmp_path / "k8s" / "deployment.yaml").write_text("kind: Deployment\n")
    (tmp_path / "k8s" / "service.yaml").write_text("kind: Service\n")

    def _make(**overrides):
        values = dict(
            container_service_name="aks-1",
            container_service_type=ContainerServiceType.AKS,
            orchestrator_type=OrchestratorType.KUBERNETES,
            config_files=["k8s/*.yaml"],
        )
        values.update(overrides)
        return make_context(**values)

    return _make


@pytest.fixture
def command(azure_helper, fake_azure):
    fake_azure.access_profiles["aks-1"] = access_profile_resource(b"apiVersion: v1\nkind: Config\n")
    return AKSDeploymentCommand(azure_helper)


class TestAKSDeployment:

    @pytest.mark.asyncio
    async def test_applies_each_config_file(self, command, aks_context, kubectl_mocker, log_stream):
        kubectl_mocker.register("apply -f", KubectlResponse(stdout="configured"))

        outcome = await command.execute(aks_context())

        assert outcome.state == CommandState.SUCCESS
        assert kubectl_mocker.call_count == 2
        applied = [Path(call.command[3]).name for call in kubectl_mocker.calls]
        assert applied == ["deployment.yaml", "service.yaml"]
        assert "Deployed to aks-1" in log_stream.getvalue()

    @pytest.mark.asyncio
    async def test_temporary_kubeconfig_is_removed(self, command, aks_context, kubectl_mocker):
        kubectl_mocker.register("apply -f", KubectlResponse(stdout="configured"))

        outcome = await command.execute(aks_context())

        kubeconfig = Path(kubectl_mocker.calls[0].command[-1])
        assert outcome.kubeconfig_path is None
        assert not kubeconfig.exists()

    @pytest.mark.asyncio
    async def test_persisted_kubeconfig(self, command, aks_context, kubectl_mocker, tmp_path):
        kubectl_mocker.register("apply -f", KubectlResponse(stdout="configured"))
        kubeconfig = tmp_path / ".kube" / "config"

        outcome = await command.execute(aks_context(kubeconfig_path=kubeconfig))

        assert outcome.kubeconfig_path == kubeconfig
        assert kubeconfig.read_bytes() == b"apiVersion: v1\nkind: Config\n"
        assert kubectl_mocker.was_called_with(f"--kubeconfig {kubeconfig}")

    @pytest.mark.asyncio
    async def test_kubectl_failure_has_error(self, command, aks_context, kubectl_mocker, log_stream):
        kubectl_mocker.register("deployment.yaml", KubectlResponse(stderr="error: unable to recognize", returncode=1))

        outcome = await command.execute(aks_context())

        assert outcome.state == CommandState.HAS_ERROR
        assert kubectl_mocker.call_count == 1
        assert "Failed to apply deployment.yaml" in log_stream.getvalue()

    @pytest.mark.asyncio
    async def test_no_matching_files_has_error(self, command, aks_context, kubectl_mocker):
        outcome = await command.execute(aks_context(config_files=["missing/*.yaml"]))

        assert outcome.state == CommandState.HAS_ERROR
        assert "No config files found" in outcome.error
        assert kubectl_mocker.call_count == 0

    @pytest.mark.asyncio
    async def test_missing_kubeconfig_has_error(self, azure_helper, aks_context, kubectl_mocker, tmp_path):
        command = AKSDeploymentCommand(azure_helper)
        kubeconfig = tmp_path / "kubeconfig"

        outcome = await command.execute(aks_context(kubeconfig_path=kubeconfig))

        assert outcome.state == CommandState.HAS_ERROR
        assert not kubeconfig.exists()
        assert kubectl_mocker.call_count == 0


class TestKubectlApplier:

    def test_builds_apply_command(self, kubectl_mocker, tmp_path):
        kubectl_mocker.register("apply", KubectlResponse(stdout="service/web created"))

        result = KubectlApplier().apply(tmp_path / "svc.yaml", tmp_path / "config")

        assert result["success"] is True
        assert result["output"] == "service/web created"
        assert kubectl_mocker.calls[0].command == [
            "kubectl", "apply", "-f", str(tmp_path / "svc.yaml"), "--kubeconfig", str(tmp_path / "config"),
        ]

    def test_reports_failure(self, kubectl_mocker, tmp_path):
        kubectl_mocker.register("apply", KubectlResponse(stderr="forbidden", returncode=1))

        result = KubectlApplier().apply(tmp_path / "svc.yaml", tmp_path / "config")

        assert result["success"] is False
        assert result["status"] == "FAILED"
        assert "forbidden" in result["output"]
