"""
Deploy Kubernetes config files to an AKS cluster.

The command fetches the cluster admin kubeconfig and applies every
matching config file from the workspace with kubectl.
"""

import asyncio
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ...errors import DeploymentError
from ..azure import AzureHelper, AzureManagementClient
from ..command import CommandOutcome, run_guarded
from ..context import DeploymentContext, LogSink
from ..telemetry import DEPLOY_FAILURE, START_DEPLOY, TelemetryEmitter, hash_value
from .kubeconfig import KubeconfigProvisioner

logger = logging.getLogger(__name__)


class ConfigApplier(Protocol):
    """Applies one config file to a cluster."""

    def apply(self, config_file: Path, kubeconfig: Path) -> Dict:
        ...


class KubectlApplier:
    """Applies config files with `kubectl apply`."""

    def __init__(self, timeout: int = 120):
        self.timeout = timeout

    def apply(self, config_file: Path, kubeconfig: Path) -> Dict:
        """
        Run kubectl apply for one file.

        Returns:
            Result dictionary with output and status
        """
        cmd = ["kubectl", "apply", "-f", str(config_file), "--kubeconfig", str(kubeconfig)]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            process = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"kubectl apply timed out for {config_file}")
            return {
                "success": False,
                "error": "Command timed out",
                "status": "TIMEOUT",
                "return_code": -1,
            }

        output = process.stdout
        if process.stderr:
            output += "\n" + process.stderr

        return {
            "success": process.returncode == 0,
            "output": output.strip(),
            "status": "SUCCESS" if process.returncode == 0 else "FAILED",
            "return_code": process.returncode,
        }


class KubernetesDeployWorker:
    """Resolves config files, prepares a kubeconfig and applies the files."""

    def __init__(
        self,
        client: AzureManagementClient,
        api_version: str,
        applier: Optional[ConfigApplier] = None,
    ):
        self.client = client
        self.api_version = api_version
        self.applier = applier or KubectlApplier()

    def resolve_config_files(self, workspace: Path, patterns: List[str]) -> List[Path]:
        files = []
        for pattern in patterns:
            for match in sorted(workspace.glob(pattern)):
                if match.is_file() and match not in files:
                    files.append(match)
        if not files:
            raise DeploymentError(f"No config files found matching {', '.join(patterns) or '<none>'}")
        return files

    async def prepare_kubeconfig(self, context: DeploymentContext, kubeconfig_file: Path) -> Path:
        provisioner = KubeconfigProvisioner(self.client, self.api_version)
        return await provisioner.provision(
            context.resource_group, context.container_service_name, kubeconfig_file
        )

    async def deploy(self, context: DeploymentContext) -> Optional[Path]:
        """
        Apply all config files of the context.

        Returns:
            The kubeconfig path when it was requested to persist, else None

        Raises:
            DeploymentError: If no files match or kubectl fails
        """
        log_sink: LogSink = context.job.log_sink
        config_files = self.resolve_config_files(context.job.workspace, context.config_files)

        if context.kubeconfig_path is not None:
            return await self._apply_all(context, config_files, Path(context.kubeconfig_path), log_sink)

        with tempfile.TemporaryDirectory(prefix="kubeconfig-") as tmp:
            await self._apply_all(context, config_files, Path(tmp) / "config", log_sink)
        return None

    async def _apply_all(
        self, context: DeploymentContext, config_files: List[Path], kubeconfig: Path, log_sink: LogSink
    ) -> Path:
        await self.prepare_kubeconfig(context, kubeconfig)
        for config_file in config_files:
            log_sink.write_line(f"Applying {config_file.name}")
            result = await asyncio.to_thread(self.applier.apply, config_file, kubeconfig)
            if result.get("output"):
                log_sink.write_line(result["output"])
            if not result.get("success"):
                raise DeploymentError(
                    f"Failed to apply {config_file.name}: {result.get('error') or result.get('status')}"
                )
        return kubeconfig


class AKSDeploymentCommand:
    """Deploys workspace config files to an AKS cluster."""

    def __init__(
        self,
        azure: AzureHelper,
        telemetry: Optional[TelemetryEmitter] = None,
        applier: Optional[ConfigApplier] = None,
    ):
        self.azure = azure
        self.telemetry = telemetry
        self.applier = applier

    async def execute(self, context: DeploymentContext) -> CommandOutcome:
        return await run_guarded(
            context,
            lambda: self._deploy(context),
            telemetry=self.telemetry,
            failure_event=DEPLOY_FAILURE,
        )

    async def _deploy(self, context: DeploymentContext) -> CommandOutcome:
        credential = self.azure.get_credential(context.credential_id, context.job.owner)

        if self.telemetry is not None:
            await self.telemetry.send_event(
                START_DEPLOY,
                context.container_service_type.value,
                context.job.run_id,
                Subscription=hash_value(credential.subscription_id),
                ResourceGroup=hash_value(context.resource_group),
                ContainerServiceName=hash_value(context.container_service_name),
            )

        async with await self.azure.build_client(credential) as client:
            worker = KubernetesDeployWorker(
                client, self.azure.config.managed_cluster_api_version, self.applier
            )
            kubeconfig_path = await worker.deploy(context)

        context.log_status(f"Deployed to {context.container_service_name}")
        return CommandOutcome.success(kubeconfig_path=kubeconfig_path)
