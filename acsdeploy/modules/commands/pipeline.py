import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..command import Command, CommandOutcome, CommandState
from ..context import DeploymentContext

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcomes of the steps that ran, in order."""

    outcomes: List[CommandOutcome] = field(default_factory=list)
    context: Optional[DeploymentContext] = None

    @property
    def state(self) -> CommandState:
        if not self.outcomes:
            return CommandState.UNKNOWN
        return self.outcomes[-1].state


class CommandPipeline:
    """Runs commands in order, stopping at the first failed step."""

    def __init__(self, commands: Sequence[Command]):
        self.commands = list(commands)

    async def run(self, context: DeploymentContext) -> PipelineResult:
        result = PipelineResult(context=context)

        for command in self.commands:
            outcome = await command.execute(result.context)
            result.outcomes.append(outcome)

            if outcome.state.is_error():
                logger.info(f"{type(command).__name__} failed, skipping remaining steps")
                break

            try:
                result.context = result.context.with_outcome(outcome)
            except ValueError as e:
                result.context.log_error(e)
                logger.warning(f"{type(command).__name__} produced conflicting outputs: {e}")
                result.outcomes[-1] = CommandOutcome.failure(str(e))
                break

        return result
