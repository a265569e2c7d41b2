"""WorkerPool — 固定数量的 worker 并行执行克隆任务

并行度 = min(parallelism, 任务数)，至少为 1。每个 worker 循环:
从 JobQueue 原子取下一个任务 -> CloneExecutor 执行 -> 结果交给 ResultAggregator
-> 完成计数 +1 并通知 ProgressReporter。取完即退出，不预取。
所有 worker 退出后（ThreadPoolExecutor 上下文结束即为汇合点）才返回结果。
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from basecamp.core.models import BatchResult, JobOutcome, RepoJob
from basecamp.services.batch.aggregator import ResultAggregator
from basecamp.services.batch.job_queue import JobQueue
from basecamp.services.batch.progress import NullProgressReporter, ProgressReporter
from basecamp.services.repo.executor import CloneExecutor

logger = logging.getLogger(__name__)


def effective_parallelism(parallelism: int, job_count: int) -> int:
    """将并行度限制在 [1, job_count]"""
    return max(1, min(parallelism, job_count))


class WorkerPool:
    """有界并发的克隆执行池"""

    def __init__(
        self,
        executor: CloneExecutor | None = None,
        reporter: ProgressReporter | None = None,
    ) -> None:
        self.executor = executor or CloneExecutor()
        self.reporter = reporter or NullProgressReporter()

    @staticmethod
    def _notify(callback: Callable[..., None], job: RepoJob, *args: object) -> None:
        """通知 reporter；reporter 出错只记录日志，不影响任务执行"""
        try:
            callback(job, *args)
        except Exception:  # noqa: BLE001
            logger.exception("进度报告出错: %s", job.name)

    def run(self, jobs: list[RepoJob], parallelism: int, *, codebase: str = "") -> BatchResult:
        """执行全部任务，所有 worker 结束后返回 BatchResult"""
        total = len(jobs)
        label = codebase or (jobs[0].codebase if jobs else "")
        self.reporter.batch_started(label, total)
        if not jobs:
            result = BatchResult()
            self.reporter.batch_finished(result)
            return result

        queue = JobQueue(total)
        aggregator = ResultAggregator([job.name for job in jobs])
        counter_lock = threading.Lock()
        completed = 0

        def publish(job: RepoJob, outcome: JobOutcome) -> None:
            nonlocal completed
            aggregator.record(job.name, outcome)
            with counter_lock:
                completed += 1
                done = completed
                # 在锁内通知，保证 reporter 看到的计数单调递增
                self._notify(self.reporter.job_finished, job, outcome, done, total)

        def worker() -> int:
            processed = 0
            while True:
                index = queue.take_next()
                if index is None:
                    return processed
                job = jobs[index]
                self._notify(self.reporter.job_started, job)
                try:
                    outcome = self.executor.execute(job)
                except Exception as e:  # noqa: BLE001
                    # 单个任务的异常不能中断其余任务
                    logger.exception("执行任务 '%s' 时出错", job.name)
                    outcome = JobOutcome.failed(f"内部错误: {e}")
                publish(job, outcome)
                processed += 1

        workers = effective_parallelism(parallelism, total)
        logger.info("启动 %d 个 worker 处理 %d 个任务", workers, total)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="basecamp-worker") as pool:
            futures = [pool.submit(worker) for _ in range(workers)]
        for i, future in enumerate(futures):
            logger.debug("worker %d 处理了 %d 个任务", i, future.result())

        result = aggregator.finalize()
        self.reporter.batch_finished(result)
        return result
