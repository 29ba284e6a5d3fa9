"""
Executor Module - Black Box Interface

Purpose: Remote worker that runs control-plane lookups for commands
Interface: Redis task queue in, plain-data results out
Hidden: Handler wiring, credential resolution on the worker side

Can be replaced with different execution mechanisms without affecting commands.
"""

from .worker import RemoteTaskWorker, build_worker

__all__ = ["RemoteTaskWorker", "build_worker"]
