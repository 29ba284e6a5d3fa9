"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class AzureConfig:
    """Azure control-plane configuration."""
    authority_host: str
    management_endpoint: str
    container_service_api_version: str
    managed_cluster_api_version: str
    request_timeout: float


@dataclass
class ExecutorConfig:
    """Remote executor configuration."""
    executor_id: Optional[str]
    redis_url: str
    result_timeout: int
    poll_wait: int

    @property
    def is_remote(self) -> bool:
        """Check if work should be dispatched to a remote executor."""
        return bool(self.executor_id)


@dataclass
class TelemetryConfig:
    """Telemetry configuration."""
    enabled: bool
    endpoint: Optional[str]
    instrumentation_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        """Check if telemetry has somewhere to send events."""
        return self.enabled and bool(self.endpoint)


@dataclass
class CredentialsConfig:
    """Credential store configuration."""
    store_path: Optional[str]


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_azure_config(self) -> AzureConfig:
        """Get Azure configuration."""
        ...

    def get_executor_config(self) -> ExecutorConfig:
        """Get executor configuration."""
        ...

    def get_telemetry_config(self) -> TelemetryConfig:
        """Get telemetry configuration."""
        ...

    def get_credentials_config(self) -> CredentialsConfig:
        """Get credential store configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_azure_config(self) -> AzureConfig:
        """Get Azure configuration from environment variables."""
        return AzureConfig(
            authority_host=os.getenv("AZURE_AUTHORITY_HOST", "https://login.microsoftonline.com"),
            management_endpoint=os.getenv("AZURE_MANAGEMENT_ENDPOINT", "https://management.azure.com"),
            container_service_api_version=os.getenv("ACS_API_VERSION", "2017-01-31"),
            managed_cluster_api_version=os.getenv("AKS_API_VERSION", "2017-08-31"),
            request_timeout=float(os.getenv("AZURE_REQUEST_TIMEOUT", "30")),
        )

    def get_executor_config(self) -> ExecutorConfig:
        """Get executor configuration from environment variables."""
        return ExecutorConfig(
            executor_id=os.getenv("EXECUTOR_ID") or None,
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            result_timeout=int(os.getenv("EXECUTOR_RESULT_TIMEOUT", "60")),
            poll_wait=int(os.getenv("EXECUTOR_POLL_WAIT", "5")),
        )

    def get_telemetry_config(self) -> TelemetryConfig:
        """Get telemetry configuration from environment variables."""
        return TelemetryConfig(
            enabled=os.getenv("TELEMETRY_ENABLED", "false").lower() == "true",
            endpoint=os.getenv("TELEMETRY_ENDPOINT"),
            instrumentation_key=os.getenv("TELEMETRY_INSTRUMENTATION_KEY"),
        )

    def get_credentials_config(self) -> CredentialsConfig:
        """Get credential store configuration from environment variables."""
        return CredentialsConfig(store_path=os.getenv("AZURE_CREDENTIALS_FILE"))
