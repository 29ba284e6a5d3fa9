"""
Queue Module - Black Box Interface

Purpose: Carry tasks to named executors and results back
Interface: push_task(), pull_tasks(), store_result(), wait_for_result()
Hidden: Queue implementation, blocking logic, result storage

Can be replaced with RabbitMQ, Kafka, or any message queue.
"""

from .models import TaskRequest, TaskResult
from .queue import TaskChannel

__all__ = ["TaskChannel", "TaskRequest", "TaskResult"]
