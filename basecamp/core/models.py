"""核心数据模型

批量克隆引擎在各组件之间传递的数据类集中定义于此：
任务（RepoJob）、单任务结果（JobOutcome）、批次汇总（BatchResult）、
凭据及回滚结果。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# =========================================================================
# 任务与结果
# =========================================================================


@dataclass(frozen=True)
class RepoJob:
    """单个代码仓的获取任务，入队后不可变"""

    codebase: str
    name: str
    remote_url: str
    local_path: Path


class OutcomeKind(str, Enum):
    """任务结果类型"""

    ALREADY_PRESENT = "already_present"
    CLONED = "cloned"
    FAILED = "failed"


@dataclass(frozen=True)
class JobOutcome:
    """单个任务的执行结果，每个 RepoJob 恰好产生一次"""

    kind: OutcomeKind
    reason: str = ""

    @classmethod
    def already_present(cls) -> JobOutcome:
        return cls(OutcomeKind.ALREADY_PRESENT)

    @classmethod
    def cloned(cls) -> JobOutcome:
        return cls(OutcomeKind.CLONED)

    @classmethod
    def failed(cls, reason: str) -> JobOutcome:
        return cls(OutcomeKind.FAILED, reason)

    @property
    def is_failure(self) -> bool:
        return self.kind is OutcomeKind.FAILED


@dataclass(frozen=True)
class BatchResult:
    """一个批次的汇总结果

    不变式: len(succeeded) + len(already_present) + len(failed) == total，
    且每个代码仓名只出现在一个分组中。各分组按任务输入顺序排列。
    """

    total: int = 0
    succeeded: tuple[str, ...] = ()
    already_present: tuple[str, ...] = ()
    failed: tuple[tuple[str, str], ...] = ()

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def failed_names(self) -> list[str]:
        return [name for name, _ in self.failed]

    @property
    def up_to_date(self) -> bool:
        """所有代码仓本地均已存在"""
        return self.total > 0 and len(self.already_present) == self.total


# =========================================================================
# 凭据
# =========================================================================


class CredentialType(str, Enum):
    """远端可接受的认证方式"""

    USER_PASS_PLAINTEXT = "user_pass_plaintext"
    SSH_KEY = "ssh_key"


@dataclass(frozen=True)
class DefaultCredential:
    """交由 git 自身的 credential helper 处理（HTTPS 场景）"""


@dataclass(frozen=True)
class AgentCredential:
    """通过 ssh-agent 中已加载的密钥认证"""

    username: str


@dataclass(frozen=True)
class KeyCredential:
    """使用磁盘上的 SSH 私钥认证，公钥可选"""

    username: str
    private_key: Path
    public_key: Path | None = None


Credential = DefaultCredential | AgentCredential | KeyCredential


@dataclass(frozen=True)
class CredentialAttempt:
    """一次凭据请求的记录，仅在单次 CloneExecutor 调用内有效"""

    attempt_index: int
    candidate_key: tuple[Path, Path | None] | None = None


# =========================================================================
# 回滚
# =========================================================================


@dataclass
class RollbackResult:
    """回滚结果

    diverged 为 True 表示内存中的配置已修改但未能写回磁盘，
    调用方应从磁盘重新加载配置。
    """

    codebase: str
    removed: list[str] = field(default_factory=list)
    error: str = ""
    diverged: bool = False

    @property
    def ok(self) -> bool:
        return not self.error
