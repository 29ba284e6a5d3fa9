"""
Shared pytest fixtures for acsdeploy tests.

This module provides common fixtures including:
- KubectlMocker: Mock kubectl subprocess calls with canned responses
- FakeAzure: httpx MockTransport standing in for Azure AD and ARM
- FakeRedis: In-memory async Redis for task channel round trips
- Context builders for deployment steps
"""

import asyncio
import base64
import io
import os
import re
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Union
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from acsdeploy.config.provider import AzureConfig, TelemetryConfig
from acsdeploy.modules.azure import AzureHelper, ContainerServiceType, OrchestratorType
from acsdeploy.modules.context import DeploymentContext, JobContext, StreamLogSink
from acsdeploy.modules.credentials import StaticCredentialStore, TokenCredentialData


# =============================================================================
# Kubectl Mocking Infrastructure
# =============================================================================

@dataclass
class KubectlResponse:
    """Represents a mocked kubectl command response."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    def to_completed_process(self) -> MagicMock:
        """Convert to a subprocess.CompletedProcess-like mock."""
        result = MagicMock()
        result.stdout = self.stdout
        result.stderr = self.stderr
        result.returncode = self.returncode
        return result


@dataclass
class KubectlCall:
    """Record of a kubectl call made during testing."""
    command: List[str]
    full_command_str: str
    matched_pattern: Optional[str] = None
    response: Optional[KubectlResponse] = None


class KubectlMocker:
    """
    Mock kubectl subprocess calls with pattern-matched responses.

    Usage:
        def test_apply(kubectl_mocker):
            kubectl_mocker.register("apply -f", KubectlResponse(
                stdout="deployment.apps/web created"
            ))
            ...
            assert kubectl_mocker.was_called_with("apply -f")
    """

    def __init__(self):
        self._responses = []
        self._call_history: List[KubectlCall] = []
        self._default_response = KubectlResponse(
            stderr="Error: mock not configured for this command",
            returncode=1
        )

    def register(
        self,
        pattern: Union[str, Pattern],
        response: KubectlResponse,
        priority: int = 0
    ) -> "KubectlMocker":
        """
        Register a response for commands matching the pattern.

        Args:
            pattern: String (substring match) or regex pattern
            response: KubectlResponse to return when matched
            priority: Higher priority patterns are checked first
        """
        self._responses.append((pattern, response, priority))
        self._responses.sort(key=lambda x: x[2], reverse=True)
        return self

    def mock_run(self, cmd: List[str], **kwargs) -> MagicMock:
        """Mock implementation of subprocess.run for kubectl commands."""
        cmd_str = " ".join(cmd)
        if cmd[0] != "kubectl":
            raise RuntimeError(f"Non-kubectl command blocked: {cmd_str}")

        kubectl_args = " ".join(cmd[1:])
        matched_pattern = None
        response = self._default_response

        for pattern, resp, _ in self._responses:
            if isinstance(pattern, str):
                if pattern in kubectl_args:
                    matched_pattern = pattern
                    response = resp
                    break
            elif pattern.search(kubectl_args):
                matched_pattern = pattern.pattern
                response = resp
                break

        self._call_history.append(KubectlCall(
            command=cmd,
            full_command_str=cmd_str,
            matched_pattern=matched_pattern,
            response=response
        ))
        return response.to_completed_process()

    @property
    def calls(self) -> List[KubectlCall]:
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    def was_called_with(self, pattern: str) -> bool:
        return any(pattern in call.full_command_str for call in self._call_history)


@pytest.fixture
def kubectl_mocker():
    """Fixture that provides a KubectlMocker with subprocess.run patched."""
    mocker = KubectlMocker()
    with patch("subprocess.run", side_effect=mocker.mock_run):
        yield mocker


# =============================================================================
# Azure Mocking Infrastructure
# =============================================================================

def container_service_resource(
    name: str = "acs-cluster",
    orchestrator: str = "Kubernetes",
    fqdn: str = "acs-mgmt.westus.cloudapp.azure.com",
    admin: str = "azureuser",
) -> dict:
    """Build a containerServices GET response body."""
    return {
        "name": name,
        "type": "Microsoft.ContainerService/containerServices",
        "properties": {
            "orchestratorProfile": {"orchestratorType": orchestrator},
            "masterProfile": {"count": 1, "dnsPrefix": "acs-mgmt", "fqdn": fqdn},
            "linuxProfile": {"adminUsername": admin},
        },
    }


def access_profile_resource(kubeconfig) -> dict:
    """Build a clusterAdmin access profile body; pass raw bytes to encode them."""
    if isinstance(kubeconfig, bytes):
        kubeconfig = base64.b64encode(kubeconfig).decode("ascii")
    properties = {} if kubeconfig is None else {"kubeConfig": kubeconfig}
    return {"name": "clusterAdmin", "properties": properties}


class FakeAzure:
    """Answers Azure AD token and ARM requests from in-memory resources."""

    def __init__(self):
        self.container_services: Dict[str, dict] = {}
        self.access_profiles: Dict[str, dict] = {}
        self.requests: List[httpx.Request] = []
        self.token_status = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/oauth2/v2.0/token"):
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            return httpx.Response(200, json={"access_token": "token-abc", "expires_in": 3600})

        if "/containerServices/" in path:
            resource = self.container_services.get(path.rsplit("/", 1)[-1])
            if resource is None:
                return httpx.Response(404, json={"error": {"code": "ResourceNotFound"}})
            return httpx.Response(200, json=resource)

        match = re.search(r"/managedClusters/([^/]+)/accessProfiles/clusterAdmin$", path)
        if match and match.group(1) in self.access_profiles:
            return httpx.Response(200, json=self.access_profiles[match.group(1)])

        return httpx.Response(404, json={"error": {"code": "ResourceNotFound"}})

    @property
    def arm_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == "management.azure.com"]


@pytest.fixture
def fake_azure():
    return FakeAzure()


@pytest.fixture
def azure_config():
    return AzureConfig(
        authority_host="https://login.microsoftonline.com",
        management_endpoint="https://management.azure.com",
        container_service_api_version="2017-01-31",
        managed_cluster_api_version="2017-08-31",
        request_timeout=5,
    )


@pytest.fixture
def telemetry_config():
    return TelemetryConfig(enabled=True, endpoint="https://telemetry.example.com/v2/track", instrumentation_key="ikey")


@pytest.fixture
def credential():
    return TokenCredentialData(
        credential_id="azure-sp",
        subscription_id="sub-1",
        tenant_id="tenant-1",
        client_id="client-1",
        client_secret="secret-1",
    )


@pytest.fixture
def credential_store(credential):
    return StaticCredentialStore({credential.credential_id: credential})


@pytest.fixture
def azure_helper(fake_azure, azure_config, credential_store):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_azure.handler))
    return AzureHelper(credential_store, azure_config, http_client=http_client)


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

class FakeRedis:
    """In-memory async Redis covering the list and key operations the task channel uses."""

    def __init__(self):
        self.lists: Dict[str, List[str]] = {}
        self.values: Dict[str, str] = {}
        self.published: List[tuple] = []

    async def lpush(self, key, value):
        self.lists.setdefault(key, []).insert(0, value)
        return len(self.lists[key])

    async def rpop(self, key):
        items = self.lists.get(key)
        return items.pop() if items else None

    async def brpop(self, key, timeout=0):
        waited = 0.0
        while True:
            items = self.lists.get(key)
            if items:
                return (key, items.pop())
            if timeout and waited >= timeout:
                return None
            await asyncio.sleep(0.01)
            waited += 0.01

    async def llen(self, key):
        return len(self.lists.get(key, []))

    async def expire(self, key, ttl):
        return True

    async def setex(self, key, ttl, value):
        self.values[key] = value
        return True

    async def get(self, key):
        return self.values.get(key)

    async def delete(self, *keys):
        count = 0
        for key in keys:
            if self.values.pop(key, None) is not None or self.lists.pop(key, None) is not None:
                count += 1
        return count

    async def publish(self, channel, message):
        self.published.append((channel, message))
        return 0


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def mock_redis():
    """Create a mock Redis client for async operations."""
    redis = AsyncMock()
    redis.setex = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.delete = AsyncMock(return_value=1)
    redis.expire = AsyncMock()
    redis.lpush = AsyncMock()
    redis.rpop = AsyncMock(return_value=None)
    redis.brpop = AsyncMock(return_value=None)
    redis.llen = AsyncMock(return_value=0)
    redis.publish = AsyncMock()
    return redis


# =============================================================================
# Context Builders
# =============================================================================

@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def job_context(tmp_path, log_stream):
    return JobContext(
        workspace=tmp_path,
        log_sink=StreamLogSink(log_stream, run_id="run-42"),
        run_id="run-42",
    )


@pytest.fixture
def make_context(job_context):
    """Factory for deployment contexts with sensible ACS defaults."""

    def _make(**overrides) -> DeploymentContext:
        values = dict(
            job=job_context,
            credential_id="azure-sp",
            resource_group="rg-deploy",
            container_service_name="acs-cluster",
            container_service_type=ContainerServiceType.ACS_KUBERNETES,
            orchestrator_type=OrchestratorType.KUBERNETES,
        )
        values.update(overrides)
        return DeploymentContext(**values)

    return _make


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "kubectl_mock: Tests using mocked kubectl subprocess calls"
    )
