"""测试共享 fixture — 内存中的 git 传输层与命令执行器，无需真实网络"""

from __future__ import annotations

import threading
import time
from collections import Counter
from pathlib import Path

import pytest

from basecamp.core.config import BasecampConfig, GitSettings
from basecamp.services.repo.transport import CredentialCallback, TransportResult
from basecamp.utils.shell import CommandResult


class FakeTransport:
    """记录调用次数与并发度的 clone 原语

    failures: 代码仓名 -> 失败消息；leave_partial 中的名字失败时留下半截目录。
    """

    def __init__(
        self,
        failures: dict[str, str] | None = None,
        *,
        leave_partial: set[str] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.failures = failures or {}
        self.leave_partial = leave_partial or set()
        self.delay = delay
        self.calls: Counter[str] = Counter()
        self.threads: set[str] = set()
        self.max_active = 0
        self._active = 0
        self._lock = threading.Lock()

    def clone(self, url: str, local_path: Path, credentials: CredentialCallback) -> TransportResult:
        name = local_path.name
        with self._lock:
            self.calls[name] += 1
            self.threads.add(threading.current_thread().name)
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if name in self.failures:
                if name in self.leave_partial:
                    (local_path / ".git").mkdir(parents=True, exist_ok=True)
                return TransportResult(ok=False, message=self.failures[name], attempts=1)
            (local_path / ".git").mkdir(parents=True, exist_ok=True)
            return TransportResult(ok=True, attempts=1)
        finally:
            with self._lock:
                self._active -= 1


class FakeGit:
    """模拟 git 命令行的 CommandExecutor

    clone 时创建目标目录；missing 中的代码仓返回 "not found"；
    dirty 中的目录 status 返回修改；ahead 中的目录有未推送提交。
    """

    def __init__(
        self,
        missing: set[str] | None = None,
        dirty: set[str] | None = None,
        ahead: set[str] | None = None,
    ) -> None:
        self.missing = missing or set()
        self.dirty = dirty or set()
        self.ahead = ahead or set()
        self.commands: list[list[str]] = []
        self._lock = threading.Lock()

    def execute(self, cmd, *, cwd=".", env=None):  # type: ignore[no-untyped-def]
        with self._lock:
            self.commands.append(list(cmd))
        name = Path(cwd).name
        if cmd[:2] == ["git", "clone"]:
            url = cmd[-2]
            # 与 git 一致: 相对目标路径按 cwd 解析
            dest = Path(cwd) / cmd[-1]
            repo = url.rstrip("/").rsplit("/", 1)[-1].removesuffix(".git")
            if repo in self.missing:
                return CommandResult(128, "", f"fatal: repository '{url}' not found\n")
            (dest / ".git").mkdir(parents=True, exist_ok=True)
            return CommandResult(0, "", "")
        if cmd[:2] == ["git", "status"]:
            return CommandResult(0, " M file.txt\n" if name in self.dirty else "", "")
        if "--abbrev-ref" in cmd:
            return CommandResult(0, "main\n", "")
        if "--verify" in cmd:
            return CommandResult(0, "abc123\n", "")
        if cmd[:2] == ["git", "rev-list"]:
            return CommandResult(0, "2\n" if name in self.ahead else "0\n", "")
        return CommandResult(0, "", "")


def make_config(root: Path, codebases: dict[str, list[str]] | None = None,
                url: str = "https://github.com/acme", **settings: object) -> BasecampConfig:
    """在 root 下写入一份配置并返回"""
    config = BasecampConfig(root, GitSettings(github_url=url, **settings))  # type: ignore[arg-type]
    for name, repos in (codebases or {}).items():
        config.add_repositories(name, repos)
    config.persist()
    return config


@pytest.fixture()
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture()
def config_factory():
    """make_config 的 fixture 形式"""
    return make_config


@pytest.fixture()
def transport_factory():
    """按需构造带失败规则的 FakeTransport"""
    return FakeTransport


@pytest.fixture()
def git_factory():
    return FakeGit
