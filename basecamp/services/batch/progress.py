"""进度报告 — 订阅 WorkerPool 的完成事件

克隆执行器本身不输出任何进度，由 WorkerPool 在每个事件点通知 reporter。
各回调可能来自不同 worker 线程。
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

import click

from basecamp.core.models import BatchResult, JobOutcome, OutcomeKind, RepoJob

logger = logging.getLogger(__name__)


class ProgressReporter(Protocol):
    """进度观察者协议"""

    def batch_started(self, codebase: str, total: int) -> None:
        ...

    def job_started(self, job: RepoJob) -> None:
        ...

    def job_finished(self, job: RepoJob, outcome: JobOutcome, completed: int, total: int) -> None:
        """completed 单调递增，最后一次等于 total"""
        ...

    def batch_finished(self, result: BatchResult) -> None:
        ...


class NullProgressReporter:
    """不输出任何内容"""

    def batch_started(self, codebase: str, total: int) -> None:
        pass

    def job_started(self, job: RepoJob) -> None:
        pass

    def job_finished(self, job: RepoJob, outcome: JobOutcome, completed: int, total: int) -> None:
        pass

    def batch_finished(self, result: BatchResult) -> None:
        pass


class LoggingProgressReporter(NullProgressReporter):
    """把进度写入日志"""

    def batch_started(self, codebase: str, total: int) -> None:
        logger.info("开始安装 codebase '%s' 的 %d 个代码仓", codebase, total)

    def job_finished(self, job: RepoJob, outcome: JobOutcome, completed: int, total: int) -> None:
        logger.info("[%d/%d] %s -> %s", completed, total, job.name, outcome.kind.value)


_MARKS = {
    OutcomeKind.CLONED: ("✓", "green"),
    OutcomeKind.ALREADY_PRESENT: ("✓", "green"),
    OutcomeKind.FAILED: ("✗", "red"),
}


class ConsoleProgressReporter:
    """终端进度输出：每完成一个任务输出一行，带 [完成数/总数] 前缀"""

    def __init__(self, show_started: bool = False) -> None:
        self.show_started = show_started
        self._lock = threading.Lock()

    def _echo(self, message: str) -> None:
        with self._lock:
            click.echo(message)

    def batch_started(self, codebase: str, total: int) -> None:
        self._echo(f"{click.style('i', fg='blue', bold=True)} 正在安装 codebase '{codebase}' 的 {total} 个代码仓")

    def job_started(self, job: RepoJob) -> None:
        if self.show_started:
            self._echo(f"  正在克隆 '{job.name}'...")

    def job_finished(self, job: RepoJob, outcome: JobOutcome, completed: int, total: int) -> None:
        mark, color = _MARKS[outcome.kind]
        if outcome.kind is OutcomeKind.CLONED:
            text = f"已克隆 '{job.name}'"
        elif outcome.kind is OutcomeKind.ALREADY_PRESENT:
            text = f"代码仓 '{job.name}' 已安装"
        else:
            text = f"克隆 '{job.name}' 失败"
        width = len(str(total))
        self._echo(f"  [{completed:>{width}}/{total}] {click.style(mark, fg=color, bold=True)} {text}")

    def batch_finished(self, result: BatchResult) -> None:
        pass
