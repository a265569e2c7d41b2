"""单个代码仓的获取

CloneExecutor.execute(job) 只返回 JobOutcome，不抛异常、不输出进度，
进度与汇总由上层的 WorkerPool / ProgressReporter 负责。
"""

from __future__ import annotations

import logging

from basecamp.core.exceptions import AuthExhaustedError, TransportError
from basecamp.core.models import (
    Credential,
    CredentialAttempt,
    CredentialType,
    JobOutcome,
    KeyCredential,
    RepoJob,
)
from basecamp.services.repo.credentials import CredentialResolver
from basecamp.services.repo.transport import GitTransport, SubprocessGitTransport, TransportResult
from basecamp.services.repo.urls import is_ssh_url

logger = logging.getLogger(__name__)

SSH_AUTH_FAILURE_PREFIX = "SSH 认证失败: "
AUTH_EXHAUSTED_TEXT = "认证尝试已用尽"


def ssh_auth_hints(reason: str) -> list[str]:
    """SSH 认证失败时给用户的排查建议；其他失败返回空列表"""
    if not reason.startswith(SSH_AUTH_FAILURE_PREFIX):
        return []
    hints = [
        "1. 检查 SSH 密钥是否配置正确: ssh -T git@github.com",
        "2. 将密钥加入 ssh-agent: ssh-add ~/.ssh/id_ed25519",
        "3. 确认地址格式正确: git@github.com:username/repo.git",
    ]
    if "passphrase" in reason.lower():
        hints.append("4. 密钥设置了口令，请先加入 ssh-agent: ssh-add ~/.ssh/id_ed25519")
    return hints


class CloneExecutor:
    """代码仓获取执行器"""

    def __init__(
        self,
        transport: GitTransport | None = None,
        resolver: CredentialResolver | None = None,
    ) -> None:
        self.transport = transport or SubprocessGitTransport()
        self.resolver = resolver or CredentialResolver()

    def execute(self, job: RepoJob) -> JobOutcome:
        """执行一次获取：本地已存在则跳过，否则 clone"""
        if job.local_path.exists():
            logger.info("代码仓已存在，跳过: %s", job.local_path)
            return JobOutcome.already_present()

        try:
            job.local_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("创建目录失败 %s: %s", job.local_path.parent, e)
            return JobOutcome.failed(f"无法创建目录 {job.local_path.parent}: {e}")

        attempts: list[CredentialAttempt] = []

        def credentials(
            url: str, username: str | None, allowed: frozenset[CredentialType],
        ) -> Credential:
            index = len(attempts)
            credential = self.resolver.resolve(url, index, allowed, username)
            if credential is None:
                raise AuthExhaustedError(f"{AUTH_EXHAUSTED_TEXT}（共 {index} 次）")
            key = None
            if isinstance(credential, KeyCredential):
                key = (credential.private_key, credential.public_key)
            attempts.append(CredentialAttempt(attempt_index=index, candidate_key=key))
            return credential

        logger.debug("开始克隆: %s -> %s", job.remote_url, job.local_path)
        try:
            result = self.transport.clone(job.remote_url, job.local_path, credentials)
        except AuthExhaustedError as e:
            logger.warning("认证尝试已用尽 %s: %s", job.name, e)
            return JobOutcome.failed(str(e))
        except TransportError as e:
            logger.error("传输层错误 %s: %s", job.name, e)
            return JobOutcome.failed(str(e))

        if result.ok:
            return JobOutcome.cloned()
        return JobOutcome.failed(self._failure_reason(job, result))

    @staticmethod
    def _failure_reason(job: RepoJob, result: TransportResult) -> str:
        message = result.message or "git clone 失败"
        if result.exhausted and AUTH_EXHAUSTED_TEXT not in message:
            message = f"{AUTH_EXHAUSTED_TEXT}: {message}"
        if result.auth_failure and is_ssh_url(job.remote_url):
            return SSH_AUTH_FAILURE_PREFIX + message
        return message
