"""Exceptions raised by acsdeploy commands and their collaborators."""

from typing import Optional


class DeploymentError(Exception):
    """Base class for all acsdeploy failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ClusterNotFoundError(DeploymentError):
    """The named container service does not exist in the resource group."""

    def __init__(self, cluster_name: str, resource_group: str):
        self.cluster_name = cluster_name
        self.resource_group = resource_group
        super().__init__(
            f"Container service {cluster_name} not found in resource group {resource_group}"
        )


class OrchestratorTypeMismatchError(DeploymentError):
    """The cluster runs a different orchestrator than the one configured."""

    def __init__(self, cluster_name: str, actual: str, expected: str):
        self.cluster_name = cluster_name
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"Orchestrator type of container service {cluster_name} is {actual}, "
            f"but {expected} is configured"
        )


class KubeconfigError(DeploymentError):
    """The admin access profile did not carry a usable kubeconfig."""

    def __init__(self, cause: Optional[BaseException] = None):
        self.cause = cause
        message = "Failed to get kubeconfig"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class CredentialNotFoundError(DeploymentError):
    """The credential id is unknown or not visible to the requesting owner."""

    def __init__(self, credential_id: str, owner: Optional[str] = None):
        self.credential_id = credential_id
        self.owner = owner
        scope = f" for owner {owner}" if owner else ""
        super().__init__(f"Credential {credential_id} not found{scope}")


class AzureRequestError(DeploymentError):
    """An Azure control-plane or token request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class TaskTimeoutError(DeploymentError):
    """A remote executor did not answer in time."""

    def __init__(self, task_id: str, executor_id: str, timeout: float):
        self.task_id = task_id
        self.executor_id = executor_id
        self.timeout = timeout
        super().__init__(
            f"Task {task_id} on executor {executor_id} did not complete within {timeout}s"
        )
