import asyncio
import logging
from datetime import UTC, datetime
from typing import List, Optional

from .models import TaskRequest, TaskResult

logger = logging.getLogger(__name__)


class TaskChannel:
    def __init__(self, redis_client, max_tasks_per_fetch: int = 10, result_ttl: int = 300):
        """
        Initialize task channel.

        Args:
            redis_client: Async Redis client
            max_tasks_per_fetch: Max tasks to return per non-blocking fetch
            result_ttl: Seconds a stored result stays readable
        """
        self.redis = redis_client
        self.max_tasks_per_fetch = max_tasks_per_fetch
        self.result_ttl = result_ttl

    async def push_task(self, executor_id: str, request: TaskRequest) -> str:
        """
        Add task to executor's queue.

        Args:
            executor_id: Target executor
            request: Task to run

        Returns:
            Task ID

        Logic:
        1. Stamp executor and queue time
        2. Push to executor queue (LPUSH for FIFO with RPOP)
        3. Set expiration on queue
        """
        request.executor_id = executor_id
        request.queued_at = datetime.now(UTC).isoformat()

        queue_key = f"queue:tasks:{executor_id}"

        await self.redis.lpush(queue_key, request.model_dump_json())

        await self.redis.expire(queue_key, self.result_ttl)

        logger.debug(f"Queued task {request.task_id} ({request.kind}) for executor {executor_id}")
        return request.task_id

    async def pull_tasks(self, executor_id: str, wait: int = 0) -> List[TaskRequest]:
        """
        Pull tasks from queue with optional blocking.

        Args:
            executor_id: Executor identifier
            wait: Seconds to wait for a task (0 = non-blocking)

        Returns:
            List of tasks (empty if none available)
        """
        queue_key = f"queue:tasks:{executor_id}"
        tasks = []

        if wait > 0:
            try:
                result = await self.redis.brpop(queue_key, timeout=wait)
                if result:
                    tasks.append(TaskRequest.model_validate_json(result[1]))
            except asyncio.TimeoutError:
                pass

        else:
            for _ in range(self.max_tasks_per_fetch):
                raw = await self.redis.rpop(queue_key)
                if not raw:
                    break
                tasks.append(TaskRequest.model_validate_json(raw))

        return tasks

    async def store_result(self, result: TaskResult) -> None:
        """
        Store task result and notify waiters.

        Args:
            result: Result produced by the executor
        """
        result.stored_at = datetime.now(UTC).isoformat()

        result_key = f"result:{result.task_id}"
        await self.redis.setex(result_key, self.result_ttl, result.model_dump_json())

        await self.redis.publish(f"result:ready:{result.task_id}", "1")

    async def wait_for_result(self, task_id: str, timeout: float = 60) -> Optional[TaskResult]:
        """
        Wait for task result (blocking).

        Args:
            task_id: Task identifier
            timeout: Max seconds to wait

        Returns:
            TaskResult or None if timeout

        Logic:
        1. Check if result already exists
        2. If not, poll with exponential backoff
        """
        result_key = f"result:{task_id}"

        raw = await self.redis.get(result_key)
        if raw:
            await self.redis.delete(result_key)
            return TaskResult.model_validate_json(raw)

        elapsed = 0.0
        poll_interval = 0.1

        while elapsed < timeout:
            await asyncio.sleep(poll_interval)
            elapsed += poll_interval

            raw = await self.redis.get(result_key)
            if raw:
                await self.redis.delete(result_key)
                return TaskResult.model_validate_json(raw)

            poll_interval = min(poll_interval * 1.5, 1.0)

        return None

    async def get_queue_depth(self, executor_id: str) -> int:
        """Get number of pending tasks."""
        return await self.redis.llen(f"queue:tasks:{executor_id}")

    async def clear_queue(self, executor_id: str) -> int:
        """
        Clear all pending tasks for executor.

        Returns:
            Number of tasks cleared
        """
        queue_key = f"queue:tasks:{executor_id}"

        count = await self.redis.llen(queue_key)

        await self.redis.delete(queue_key)

        return count
