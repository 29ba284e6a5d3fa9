"""
Best-effort telemetry for deployment commands.

Events are fire-and-forget: a failure to deliver one is logged at debug
level and never reaches the command that emitted it.
"""

import hashlib
import logging
from datetime import UTC, datetime
from typing import Dict, Optional

import httpx

from ...config.provider import TelemetryConfig

logger = logging.getLogger("acsdeploy.telemetry")

START_DEPLOY = "StartDeploy"
GET_INFO_FAILURE = "GetInfoFailure"
DEPLOY_FAILURE = "DeployFailure"
MESSAGE = "Message"


def hash_value(value: Optional[str]) -> str:
    """Hash identifiers that must not leave the host in clear text."""
    if value is None:
        return ""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class TelemetryEmitter:
    """Posts typed key/value events to a collection endpoint."""

    def __init__(self, config: TelemetryConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._http = http_client

    def build_event(
        self, event_type: str, container_service_type: str, run_id: Optional[str], properties: Dict[str, str]
    ) -> dict:
        return {
            "name": f"{container_service_type}.{event_type}",
            "time": datetime.now(UTC).isoformat(),
            "iKey": self.config.instrumentation_key,
            "properties": {"RunId": hash_value(run_id), **properties},
        }

    async def send_event(
        self,
        event_type: str,
        container_service_type: str,
        run_id: Optional[str] = None,
        **properties: str,
    ) -> None:
        """
        Send one event. Never raises.

        Args:
            event_type: Event tag, e.g. StartDeploy
            container_service_type: Normalized cluster variant name
            run_id: Pipeline run identifier (hashed before sending)
            **properties: String properties; callers hash sensitive values
        """
        try:
            event = self.build_event(event_type, container_service_type, run_id, properties)
            if not self.config.is_configured:
                logger.debug(f"Telemetry disabled, dropping event {event['name']}")
                return

            if self._http is not None:
                response = await self._http.post(self.config.endpoint, json=event, timeout=5)
            else:
                async with httpx.AsyncClient(timeout=5) as client:
                    response = await client.post(self.config.endpoint, json=event)

            if response.status_code >= 400:
                logger.debug(f"Telemetry endpoint returned {response.status_code}")
        except Exception as e:
            logger.debug(f"Failed to send telemetry event {event_type}: {e}")
