#!/usr/bin/env python3
"""
Remote task worker - runs control-plane lookups on behalf of commands.

A worker listens on its executor queue, runs the handler registered for
each task kind and stores a plain-data result for the waiting command.
"""

import asyncio
import logging
import os
import sys
from typing import Awaitable, Callable, Dict, Optional

from ...config import ConfigProvider, get_config
from ...logging_config import configure_logging
from ..command import CommandState
from ..queue import TaskChannel, TaskRequest, TaskResult

logger = logging.getLogger("acsdeploy.executor")

TaskHandler = Callable[[TaskRequest], Awaitable[TaskResult]]


class RemoteTaskWorker:
    """Worker that pulls tasks for one executor id and answers them."""

    def __init__(self, channel: TaskChannel, executor_id: str, poll_wait: int = 5):
        """
        Initialize worker.

        Args:
            channel: Task channel shared with the dispatching commands
            executor_id: Queue this worker serves
            poll_wait: Seconds to block on an empty queue
        """
        self.channel = channel
        self.executor_id = executor_id
        self.poll_wait = poll_wait
        self._handlers: Dict[str, TaskHandler] = {}
        self._running = False

    def register(self, kind: str, handler: TaskHandler) -> "RemoteTaskWorker":
        self._handlers[kind] = handler
        return self

    def stop(self) -> None:
        self._running = False

    async def run(self) -> None:
        """
        Main worker loop.

        Per-task failures are reported back as results; queue failures are
        logged and retried after a short pause.
        """
        logger.info(f"Worker started for executor {self.executor_id}")
        self._running = True

        while self._running:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                logger.info("Worker cancelled")
                raise
            except Exception as e:
                logger.error(f"Task queue error: {e}")
                logger.info("Retrying in 5 seconds...")
                await asyncio.sleep(5)

    async def run_once(self) -> int:
        """Pull and process one batch of tasks. Returns the number processed."""
        tasks = await self.channel.pull_tasks(self.executor_id, wait=self.poll_wait)
        for task in tasks:
            result = await self.process_task(task)
            await self.channel.store_result(result)
        return len(tasks)

    async def process_task(self, task: TaskRequest) -> TaskResult:
        """
        Run the handler for a task.

        Returns:
            The handler's result, or a HAS_ERROR result carrying the failure
        """
        logger.info(f"Processing task {task.task_id} ({task.kind})")

        handler = self._handlers.get(task.kind)
        if handler is None:
            logger.error(f"No handler registered for task kind {task.kind}")
            return TaskResult(
                task_id=task.task_id,
                command_state=CommandState.HAS_ERROR,
                error=f"Unsupported task kind: {task.kind}",
            )

        try:
            return await handler(task)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Task {task.task_id} failed: {e}")
            return TaskResult(
                task_id=task.task_id,
                command_state=CommandState.HAS_ERROR,
                log_lines=[f"ERROR: {e}"],
                error=str(e),
            )


async def build_worker(config_provider: Optional[ConfigProvider] = None, redis_client=None) -> RemoteTaskWorker:
    """
    Composition root for a worker process.

    Wires the credential store, Azure helper and the container service
    info handler onto a worker for the configured executor id.
    """
    from ..azure import AzureHelper
    from ..commands import CONTAINER_SERVICE_INFO_TASK, GetContainerServiceInfoCommand
    from ..credentials import FileCredentialStore, StaticCredentialStore
    from ..storage import StorageModule

    config_provider = config_provider or get_config()
    executor_config = config_provider.get_executor_config()
    credentials_config = config_provider.get_credentials_config()

    if not executor_config.is_remote:
        raise ValueError("EXECUTOR_ID environment variable is required for a worker")

    if credentials_config.store_path:
        store = FileCredentialStore(credentials_config.store_path)
    else:
        logger.warning("AZURE_CREDENTIALS_FILE not set, worker has no credentials")
        store = StaticCredentialStore()

    storage = StorageModule(executor_config.redis_url, executor_config.result_timeout, client=redis_client)
    channel = await storage.open_channel()

    azure = AzureHelper(store, config_provider.get_azure_config())
    info_command = GetContainerServiceInfoCommand(azure)

    worker = RemoteTaskWorker(
        channel,
        executor_config.executor_id,
        poll_wait=executor_config.poll_wait,
    )
    worker.register(CONTAINER_SERVICE_INFO_TASK, info_command.handle_task)
    return worker


async def _serve() -> None:
    worker = await build_worker()
    await worker.run()


def main():
    """Main entry point."""
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    try:
        asyncio.run(_serve())
    except KeyboardInterrupt:
        logger.info("Worker stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
