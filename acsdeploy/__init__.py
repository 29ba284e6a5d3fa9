"""
acsdeploy - Azure Container Service deployment commands

Build-step commands that deploy workloads to ACS and AKS clusters.

Architecture:
- Each module is self-contained with clear interfaces
- Commands share one execution contract and return plain outcomes
- Remote work travels as plain data over a task channel

Modules:
- command: Execution contract, command states and outcomes
- commands: Cluster info resolution, kubeconfig provisioning, AKS deployment
- context: Per-invocation deployment context and log sinks
- credentials: Credential store and Azure token exchange
- azure: Azure control-plane client
- telemetry: Best-effort event emission
- queue: Task channel for remote executors
- executor: Remote task worker
- storage: Redis connection abstraction
"""

__version__ = "1.0.0"
