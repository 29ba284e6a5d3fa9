"""
Context Module - Black Box Interface

Purpose: Carry the inputs of a deployment step and its log sink
Interface: DeploymentContext, JobContext, LogSink
Hidden: Log stream handling

Contexts are immutable; commands report results through outcomes.
"""

from .context import DeploymentContext, JobContext, LogSink, MemoryLogSink, StreamLogSink

__all__ = ["DeploymentContext", "JobContext", "LogSink", "MemoryLogSink", "StreamLogSink"]
