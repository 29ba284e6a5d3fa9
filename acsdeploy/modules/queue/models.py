"""
Messages exchanged with remote executors.

Both directions carry plain data only; credentials travel as ids and are
resolved by the executor against its own credential store.
"""

import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..command import CommandState


class TaskRequest(BaseModel):
    """Unit of work dispatched to a named executor."""

    task_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: str = Field(..., description="Handler name on the executor", min_length=1)
    payload: Dict[str, Any] = Field(default_factory=dict)
    executor_id: Optional[str] = None
    queued_at: Optional[str] = None


class TaskResult(BaseModel):
    """Small result value marshalled back from an executor."""

    task_id: str
    command_state: CommandState = CommandState.UNKNOWN
    data: Dict[str, Any] = Field(default_factory=dict)
    log_lines: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    stored_at: Optional[str] = None
