"""
Telemetry Module - Black Box Interface

Purpose: Emit usage and failure events without affecting commands
Interface: TelemetryEmitter.send_event(), hash_value()
Hidden: Event envelope, transport

Can be replaced with any event collector; failures never propagate.
"""

from .telemetry import (
    DEPLOY_FAILURE,
    GET_INFO_FAILURE,
    MESSAGE,
    START_DEPLOY,
    TelemetryEmitter,
    hash_value,
)

__all__ = [
    "DEPLOY_FAILURE",
    "GET_INFO_FAILURE",
    "MESSAGE",
    "START_DEPLOY",
    "TelemetryEmitter",
    "hash_value",
]
