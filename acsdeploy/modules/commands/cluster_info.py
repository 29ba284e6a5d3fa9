"""
Resolve master endpoint details of an ACS cluster.

The lookup runs in-process, or on a named remote executor when the
context carries an executor id and a task channel is available.
"""

import logging
from typing import Optional

from ...errors import ClusterNotFoundError, DeploymentError, OrchestratorTypeMismatchError, TaskTimeoutError
from ..azure import AzureHelper, AzureManagementClient, ContainerServiceType, OrchestratorType
from ..command import CommandOutcome, CommandState, run_guarded
from ..context import DeploymentContext, LogSink, MemoryLogSink
from ..queue import TaskChannel, TaskRequest, TaskResult
from ..telemetry import GET_INFO_FAILURE, START_DEPLOY, TelemetryEmitter, hash_value

logger = logging.getLogger(__name__)

CONTAINER_SERVICE_INFO_TASK = "container_service_info"


async def get_acs_info(
    client: AzureManagementClient,
    resource_group: str,
    container_service_name: str,
    configured_type: Optional[OrchestratorType],
    log_sink: LogSink,
) -> CommandOutcome:
    """
    Look up a container service and check its orchestrator type.

    Args:
        client: Authenticated management client
        resource_group: Resource group of the cluster
        container_service_name: Cluster name
        configured_type: Expected orchestrator, None accepts any
        log_sink: Receives progress and diagnostics

    Returns:
        SUCCESS with fqdn and admin username, or HAS_ERROR
    """
    container_service = await client.get_container_service(resource_group, container_service_name)
    if container_service is None:
        error = ClusterNotFoundError(container_service_name, resource_group)
        log_sink.write_line(error.message)
        return CommandOutcome.failure(error.message)

    orchestrator_type = container_service.orchestrator_type
    log_sink.write_line(f"Orchestrator type: {orchestrator_type.value}")

    if configured_type is not None and orchestrator_type != configured_type:
        error = OrchestratorTypeMismatchError(
            container_service_name, orchestrator_type.value, configured_type.value
        )
        log_sink.write_line(error.message)
        return CommandOutcome.failure(error.message, orchestrator_type=orchestrator_type)

    log_sink.write_line(f"Management master FQDN: {container_service.master_fqdn}")
    log_sink.write_line(f"Admin username: {container_service.admin_username}")

    return CommandOutcome.success(
        orchestrator_type=orchestrator_type,
        fqdn=container_service.master_fqdn,
        admin_username=container_service.admin_username,
    )


def outcome_to_task_result(task_id: str, outcome: CommandOutcome, log_lines) -> TaskResult:
    return TaskResult(
        task_id=task_id,
        command_state=outcome.state,
        data={
            "orchestrator_type": outcome.orchestrator_type.value if outcome.orchestrator_type else None,
            "fqdn": outcome.fqdn,
            "admin_username": outcome.admin_username,
        },
        log_lines=list(log_lines),
        error=outcome.error,
    )


def task_result_to_outcome(result: TaskResult) -> CommandOutcome:
    orchestrator = result.data.get("orchestrator_type")
    return CommandOutcome(
        state=result.command_state,
        orchestrator_type=OrchestratorType(orchestrator) if orchestrator else None,
        fqdn=result.data.get("fqdn"),
        admin_username=result.data.get("admin_username"),
        error=result.error,
    )


class GetContainerServiceInfoCommand:
    """Resolves the management master FQDN and admin user of an ACS cluster."""

    def __init__(
        self,
        azure: AzureHelper,
        telemetry: Optional[TelemetryEmitter] = None,
        channel: Optional[TaskChannel] = None,
        result_timeout: float = 60,
    ):
        self.azure = azure
        self.telemetry = telemetry
        self.channel = channel
        self.result_timeout = result_timeout

    async def execute(self, context: DeploymentContext) -> CommandOutcome:
        if context.container_service_type.is_managed:
            # Managed clusters are resolved through their access profile instead
            context.log_status(
                f"{context.container_service_name} is a managed cluster, skipping master lookup"
            )
            return CommandOutcome.success()

        return await run_guarded(
            context,
            lambda: self._resolve(context),
            telemetry=self.telemetry,
            failure_event=GET_INFO_FAILURE,
        )

    async def _resolve(self, context: DeploymentContext) -> CommandOutcome:
        credential = self.azure.get_credential(context.credential_id, context.job.owner)

        if self.telemetry is not None:
            await self.telemetry.send_event(
                START_DEPLOY,
                ContainerServiceType.normalize(context.container_service_type.value),
                context.job.run_id,
                Subscription=hash_value(credential.subscription_id),
                ResourceGroup=hash_value(context.resource_group),
                ContainerServiceName=hash_value(context.container_service_name),
            )

        context.log_status("Getting management master FQDN")

        if context.executor_id and self.channel is not None:
            return await self._dispatch(context)

        async with await self.azure.build_client(credential) as client:
            return await get_acs_info(
                client,
                context.resource_group,
                context.container_service_name,
                context.orchestrator_type,
                context.job.log_sink,
            )

    async def _dispatch(self, context: DeploymentContext) -> CommandOutcome:
        request = TaskRequest(
            kind=CONTAINER_SERVICE_INFO_TASK,
            payload={
                "credential_id": context.credential_id,
                "owner": context.job.owner,
                "resource_group": context.resource_group,
                "container_service_name": context.container_service_name,
                "orchestrator_type": context.orchestrator_type.value if context.orchestrator_type else None,
            },
        )
        task_id = await self.channel.push_task(context.executor_id, request)
        result = await self.channel.wait_for_result(task_id, timeout=self.result_timeout)
        if result is None:
            raise TaskTimeoutError(task_id, context.executor_id, self.result_timeout)

        for line in result.log_lines:
            context.log_status(line)

        if result.command_state == CommandState.UNKNOWN:
            raise DeploymentError(result.error or f"Executor {context.executor_id} failed task {task_id}")
        return task_result_to_outcome(result)

    async def handle_task(self, request: TaskRequest) -> TaskResult:
        """
        Executor-side handler for container service info tasks.

        Runs the lookup with this executor's credential store and returns
        the outcome plus collected log lines as plain data.
        """
        payload = request.payload
        sink = MemoryLogSink()
        credential = self.azure.get_credential(payload["credential_id"], payload.get("owner"))
        configured = payload.get("orchestrator_type")

        async with await self.azure.build_client(credential) as client:
            outcome = await get_acs_info(
                client,
                payload["resource_group"],
                payload["container_service_name"],
                OrchestratorType(configured) if configured else None,
                sink,
            )
        return outcome_to_task_result(request.task_id, outcome, sink.lines)
