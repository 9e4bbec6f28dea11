#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
BoundedDispatcher - Translate chunks concurrently under a fixed ceiling.

At most max_concurrency translation calls are in flight. Admission goes
through an asyncio.Semaphore, whose waiters are woken in arrival order.
A chunk whose translation fails keeps its original text; the batch itself
never fails because of one chunk.
"""

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Union

from tqdm import tqdm

from config.logging_config import get_logger

from .chunk import Chunk
from .exceptions import ConfigurationError

logger = get_logger(__name__)


TranslateOne = Callable[[str], Union[str, Awaitable[str]]]
ProgressCallback = Callable[[int, int], Any]


class TaskStatus(Enum):
    """Task status"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ChunkTask:
    """Translation of one chunk"""
    index: int
    chunk: Chunk
    status: TaskStatus = TaskStatus.PENDING
    result: Optional[str] = None
    error: Optional[str] = None
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @property
    def duration(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return self.end_time - self.start_time


@dataclass
class DispatchStats:
    """Statistics of one dispatch run"""
    total_tasks: int = 0
    completed: int = 0
    failed: int = 0
    total_time: float = 0.0
    avg_time_per_task: float = 0.0
    max_in_flight: int = 0
    failed_indices: List[int] = field(default_factory=list)

    def update(self, task: ChunkTask):
        """Update stats from finished task"""
        if task.status == TaskStatus.COMPLETED:
            self.completed += 1
        elif task.status == TaskStatus.FAILED:
            self.failed += 1
            self.failed_indices.append(task.index)

        finished = self.completed + self.failed
        if finished > 0:
            self.avg_time_per_task = (
                (self.avg_time_per_task * (finished - 1)) + task.duration
            ) / finished


class BoundedDispatcher:
    """Runs a translation callable over chunks with bounded concurrency"""

    def __init__(self, max_concurrency: int, show_progress: bool = False):
        """
        Args:
            max_concurrency: Maximum translation calls in flight. Must be > 0.
            show_progress: Display a tqdm progress bar.

        Raises:
            ConfigurationError: max_concurrency <= 0.
        """
        if max_concurrency <= 0:
            raise ConfigurationError(
                f"max_concurrency must be greater than 0, got: {max_concurrency}"
            )
        self.max_concurrency = max_concurrency
        self.show_progress = show_progress

        self.stats = DispatchStats()
        self.tasks: List[ChunkTask] = []

    async def _run_task(
        self,
        task: ChunkTask,
        translate_one: TranslateOne,
        gate: asyncio.Semaphore,
        on_finished: Callable[[ChunkTask], None],
    ) -> None:
        async with gate:
            self._in_flight += 1
            self.stats.max_in_flight = max(self.stats.max_in_flight, self._in_flight)
            task.status = TaskStatus.RUNNING
            task.start_time = time.perf_counter()
            try:
                translated = translate_one(task.chunk.content)
                if inspect.isawaitable(translated):
                    translated = await translated
                task.result = translated
                task.status = TaskStatus.COMPLETED
            except Exception as e:
                task.result = task.chunk.content
                task.status = TaskStatus.FAILED
                task.error = f"{type(e).__name__}: {e}"
                logger.warning(
                    f" Chunk #{task.index + 1}/{len(self.tasks)} failed, keeping original text: {task.error}"
                )
            finally:
                task.end_time = time.perf_counter()
                self._in_flight -= 1

        on_finished(task)

    async def translate_all(
        self,
        chunks: List[Chunk],
        translate_one: TranslateOne,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[str]:
        """
        Translate every chunk and return the texts in chunk order.

        Args:
            chunks: Chunks to translate.
            translate_one: Async (or plain) callable text -> translated text.
                Exceptions it raises are contained to its chunk.
            on_progress: Called as on_progress(completed, total) once per
                finished chunk, in completion order. Errors it raises are
                logged and do not affect the results.

        Returns:
            One text per chunk, same order as chunks. Failed chunks carry
            their original content.
        """
        self.tasks = [ChunkTask(index=i, chunk=chunk) for i, chunk in enumerate(chunks)]
        self.stats = DispatchStats(total_tasks=len(self.tasks))
        self._in_flight = 0

        if not self.tasks:
            return []

        total = len(self.tasks)
        completed = 0
        gate = asyncio.Semaphore(self.max_concurrency)

        progress_bar = None
        if self.show_progress:
            progress_bar = tqdm(
                total=total,
                desc="Translating",
                unit="chunk",
                bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]"
            )

        def on_finished(task: ChunkTask) -> None:
            nonlocal completed
            completed += 1
            self.stats.update(task)
            if progress_bar:
                progress_bar.update(1)
                progress_bar.set_postfix({'failed': self.stats.failed})
            if on_progress:
                try:
                    on_progress(completed, total)
                except Exception as e:
                    logger.warning(f" Progress callback failed at {completed}/{total}: {type(e).__name__}: {e}")

        start_time = time.perf_counter()
        try:
            await asyncio.gather(*(
                self._run_task(task, translate_one, gate, on_finished)
                for task in self.tasks
            ))
        finally:
            self.stats.total_time = time.perf_counter() - start_time
            if progress_bar:
                progress_bar.close()

        if self.stats.failed:
            logger.warning(f" {self.stats.failed}/{total} chunks kept their original text")

        return [task.result for task in self.tasks]

    def get_failed_tasks(self) -> List[ChunkTask]:
        """Get list of failed tasks"""
        return [task for task in self.tasks if task.status == TaskStatus.FAILED]
