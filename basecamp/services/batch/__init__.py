"""批量克隆引擎

- job_queue.py:  共享任务队列
- pool.py:       有界并发 worker 池
- aggregator.py: 结果汇总
- progress.py:   进度报告（观察者）
- rollback.py:   失败代码仓的配置回滚
"""

from basecamp.services.batch.aggregator import ResultAggregator
from basecamp.services.batch.job_queue import JobQueue
from basecamp.services.batch.pool import WorkerPool, effective_parallelism
from basecamp.services.batch.progress import (
    ConsoleProgressReporter,
    LoggingProgressReporter,
    NullProgressReporter,
    ProgressReporter,
)
from basecamp.services.batch.rollback import RollbackCoordinator

__all__ = [
    "JobQueue",
    "ResultAggregator",
    "WorkerPool",
    "effective_parallelism",
    "ProgressReporter",
    "NullProgressReporter",
    "LoggingProgressReporter",
    "ConsoleProgressReporter",
    "RollbackCoordinator",
]
