import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional, Protocol

from ..azure.models import OrchestratorType
from ..context import DeploymentContext
from ..telemetry import MESSAGE, TelemetryEmitter

logger = logging.getLogger(__name__)


class CommandState(str, Enum):
    """Result state of a command."""

    UNKNOWN = "Unknown"
    SUCCESS = "Success"
    HAS_ERROR = "HasError"

    def is_error(self) -> bool:
        return self is CommandState.HAS_ERROR


@dataclass(frozen=True)
class CommandOutcome:
    """Freshly built result of one command invocation."""

    state: CommandState = CommandState.UNKNOWN
    orchestrator_type: Optional[OrchestratorType] = None
    fqdn: Optional[str] = None
    admin_username: Optional[str] = None
    kubeconfig_path: Optional[Path] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, **fields) -> "CommandOutcome":
        return cls(state=CommandState.SUCCESS, **fields)

    @classmethod
    def failure(cls, error: str, **fields) -> "CommandOutcome":
        return cls(state=CommandState.HAS_ERROR, error=error, **fields)


class Command(Protocol):
    """A deployment step."""

    async def execute(self, context: DeploymentContext) -> CommandOutcome:
        """
        Run the step.

        Never raises, except asyncio.CancelledError which is re-raised so
        that an enclosing cancellable pipeline observes it.
        """
        ...


async def run_guarded(
    context: DeploymentContext,
    action: Callable[[], Awaitable[CommandOutcome]],
    telemetry: Optional[TelemetryEmitter] = None,
    failure_event: str = "CommandFailure",
) -> CommandOutcome:
    """
    Command boundary: turn any failure of action into a HAS_ERROR outcome.

    Args:
        context: Context whose log sink receives the error
        action: Body of the command
        telemetry: Emitter for the failure event
        failure_event: Event type sent on failure

    Returns:
        The action's outcome, or a failure outcome
    """
    try:
        return await action()
    except asyncio.CancelledError:
        context.log_status(f"{context.container_service_name}: interrupted")
        raise
    except Exception as e:
        context.log_error(e)
        logger.warning(f"Command failed for {context.container_service_name}: {e}")
        if telemetry is not None:
            await telemetry.send_event(
                failure_event,
                context.container_service_type.value,
                context.job.run_id,
                **{MESSAGE: str(e)},
            )
        return CommandOutcome.failure(str(e))
