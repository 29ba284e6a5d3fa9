"""
Command Module - Black Box Interface

Purpose: Uniform contract every deployment step conforms to
Interface: Command.execute(), CommandOutcome, CommandState, run_guarded()
Hidden: Failure conversion, telemetry on failure

Lets a pipeline sequence heterogeneous steps without knowing their internals.
"""

from .command import Command, CommandOutcome, CommandState, run_guarded

__all__ = ["Command", "CommandOutcome", "CommandState", "run_guarded"]
