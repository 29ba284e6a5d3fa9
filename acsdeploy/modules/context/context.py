import dataclasses
import logging
import sys
import traceback
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, TextIO, TYPE_CHECKING

from ..azure.models import ContainerServiceType, OrchestratorType

if TYPE_CHECKING:
    from ..command import CommandOutcome

logger = logging.getLogger("acsdeploy.run")


class LogSink(Protocol):
    """Append-only line output attributed to one pipeline run."""

    def write_line(self, line: str) -> None:
        ...


class StreamLogSink:
    """Writes run log lines to a text stream and mirrors them to the logger."""

    def __init__(self, stream: Optional[TextIO] = None, run_id: Optional[str] = None):
        self.stream = stream or sys.stdout
        self.run_id = run_id

    def write_line(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()
        logger.debug(f"[{self.run_id or '-'}] {line}")


class MemoryLogSink:
    """Collects lines in memory, used to marshal remote worker output."""

    def __init__(self):
        self.lines: List[str] = []

    def write_line(self, line: str) -> None:
        self.lines.append(line)


@dataclass(frozen=True)
class JobContext:
    """Host-side details of the pipeline run executing a step."""

    workspace: Path
    log_sink: LogSink
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    owner: Optional[str] = None


@dataclass(frozen=True)
class DeploymentContext:
    """
    Immutable input of one deployment step.

    Output of earlier steps (master FQDN, admin user) is carried forward
    through with_outcome(), which refuses to overwrite a value already set.
    """

    job: JobContext
    credential_id: str
    resource_group: str
    container_service_name: str
    container_service_type: ContainerServiceType
    orchestrator_type: Optional[OrchestratorType] = None
    executor_id: Optional[str] = None
    kubeconfig_path: Optional[Path] = None
    config_files: List[str] = field(default_factory=list)
    mgmt_fqdn: Optional[str] = None
    admin_username: Optional[str] = None

    def log_status(self, message: str) -> None:
        self.job.log_sink.write_line(message)

    def log_error(self, error: BaseException) -> None:
        self.job.log_sink.write_line(f"ERROR: {error}")
        logger.debug("".join(traceback.format_exception(type(error), error, error.__traceback__)))

    def with_outcome(self, outcome: "CommandOutcome") -> "DeploymentContext":
        """
        Return a copy carrying the outputs of a successful outcome.

        Raises:
            ValueError: If an output field would be written twice with a different value
        """
        updates = {}
        for name, value in (("mgmt_fqdn", outcome.fqdn), ("admin_username", outcome.admin_username)):
            if value is None:
                continue
            current = getattr(self, name)
            if current is not None and current != value:
                raise ValueError(f"{name} already set to {current}, refusing to overwrite with {value}")
            updates[name] = value
        if not updates:
            return self
        return dataclasses.replace(self, **updates)
