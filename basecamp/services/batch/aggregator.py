"""结果汇总 — 按结果类型把完成的任务归入三个分组"""

from __future__ import annotations

import logging
import threading

from basecamp.core.exceptions import ExecutionError
from basecamp.core.models import BatchResult, JobOutcome, OutcomeKind

logger = logging.getLogger(__name__)


class ResultAggregator:
    """线程安全的结果累积器

    worker 完成任务后调用 record()；所有 worker 结束后调用 finalize()
    得到不可变的 BatchResult，分组内按任务输入顺序排列。
    """

    def __init__(self, names: list[str]) -> None:
        self._order = {name: i for i, name in enumerate(names)}
        if len(self._order) != len(names):
            raise ExecutionError("批次中存在重复的代码仓名")
        self._lock = threading.Lock()
        self._outcomes: dict[str, JobOutcome] = {}

    def record(self, name: str, outcome: JobOutcome) -> None:
        """记录一个任务结果，重复或未知的名字抛 ExecutionError"""
        if name not in self._order:
            raise ExecutionError(f"代码仓 '{name}' 不在本批次中")
        with self._lock:
            if name in self._outcomes:
                raise ExecutionError(f"代码仓 '{name}' 的结果被重复记录")
            self._outcomes[name] = outcome

    def recorded(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def finalize(self) -> BatchResult:
        """生成最终结果；仍有任务未记录时抛 ExecutionError"""
        with self._lock:
            missing = [n for n in self._order if n not in self._outcomes]
            if missing:
                raise ExecutionError(f"以下代码仓没有结果: {', '.join(missing)}")
            ordered = sorted(self._outcomes.items(), key=lambda kv: self._order[kv[0]])

        succeeded = tuple(n for n, o in ordered if o.kind is OutcomeKind.CLONED)
        present = tuple(n for n, o in ordered if o.kind is OutcomeKind.ALREADY_PRESENT)
        failed = tuple((n, o.reason) for n, o in ordered if o.kind is OutcomeKind.FAILED)
        result = BatchResult(
            total=len(ordered),
            succeeded=succeeded,
            already_present=present,
            failed=failed,
        )
        logger.info(
            "批次完成: 共 %d, 新克隆 %d, 已存在 %d, 失败 %d",
            result.total, len(succeeded), len(present), len(failed),
        )
        return result
