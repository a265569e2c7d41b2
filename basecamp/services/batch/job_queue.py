"""任务队列 — 多个 worker 共享的待处理任务下标池"""

from __future__ import annotations

import threading
from collections import deque


class JobQueue:
    """线程安全的任务下标队列

    持有 0..N-1，take_next() 原子地取出一个；任一下标在所有调用方之间只交付一次。
    """

    def __init__(self, size: int) -> None:
        self._lock = threading.Lock()
        self._pending: deque[int] = deque(range(max(0, size)))

    def take_next(self) -> int | None:
        """取出下一个任务下标，已取完返回 None"""
        with self._lock:
            if not self._pending:
                return None
            return self._pending.popleft()

    def remaining(self) -> int:
        with self._lock:
            return len(self._pending)
