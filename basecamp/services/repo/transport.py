"""git 传输层 — clone 原语

SubprocessGitTransport 通过 CommandExecutor 调用 `git clone`。每次调用前向
凭据回调索取一个凭据，并把它翻译成该次 git 进程的环境变量；
认证失败后再次索取，直到成功或回调用尽；已失败过的凭据不再重复执行 git。
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol

from basecamp.core.exceptions import AuthExhaustedError, TransportError
from basecamp.core.models import (
    AgentCredential,
    Credential,
    CredentialType,
    KeyCredential,
)
from basecamp.services.repo.urls import allowed_credential_types, infer_username, is_ssh_url
from basecamp.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

# (url, username_from_url, allowed_types) -> 凭据；用尽时抛 AuthExhaustedError
CredentialCallback = Callable[[str, "str | None", frozenset[CredentialType]], Credential]

_AUTH_FAILURE_MARKERS = (
    "permission denied (publickey",
    "authentication failed",
    "could not read username",
    "could not read password",
    "terminal prompts disabled",
    "invalid username or password",
    "publickey",
    "passphrase",
)

_GIT_NOT_FOUND_RC = 127


@dataclass
class TransportResult:
    """一次 clone 调用的结果"""

    ok: bool
    message: str = ""
    auth_failure: bool = False
    exhausted: bool = False
    attempts: int = 0


class GitTransport(Protocol):
    """clone 原语协议"""

    def clone(self, url: str, local_path: Path, credentials: CredentialCallback) -> TransportResult:
        ...


def is_auth_failure(stderr: str) -> bool:
    text = stderr.lower()
    return any(marker in text for marker in _AUTH_FAILURE_MARKERS)


def credential_env(credential: Credential | None) -> dict[str, str]:
    """凭据 -> git 进程环境变量；任何情况下都禁止终端交互"""
    env = {"GIT_TERMINAL_PROMPT": "0"}
    if isinstance(credential, KeyCredential):
        env["GIT_SSH_COMMAND"] = (
            f"ssh -i {shlex.quote(str(credential.private_key))} "
            "-o IdentitiesOnly=yes -o BatchMode=yes"
        )
    elif isinstance(credential, AgentCredential):
        env["GIT_SSH_COMMAND"] = "ssh -o BatchMode=yes"
    return env


def _last_lines(text: str, limit: int = 3) -> str:
    lines = [ln.strip() for ln in text.strip().splitlines() if ln.strip()]
    return " ".join(lines[-limit:])[:500]


class SubprocessGitTransport:
    """基于 git 命令行的 clone 实现"""

    def __init__(self, executor: CommandExecutor | None = None) -> None:
        self._executor = executor

    @property
    def executor(self) -> CommandExecutor:
        return self._executor or get_executor()

    def _run_clone(self, url: str, local_path: Path, credential: Credential | None) -> tuple[int, str]:
        # git 按 cwd 解析目标路径，传绝对路径避免相对根目录下路径叠加
        dest = local_path.resolve()
        r = self.executor.execute(
            ["git", "clone", "--quiet", url, str(dest)],
            cwd=str(dest.parent),
            env=credential_env(credential),
        )
        if r.returncode == _GIT_NOT_FOUND_RC:
            raise TransportError(f"无法执行 git (rc={r.returncode}): {r.stderr.strip()[:300]}")
        return r.returncode, r.stderr

    def clone(self, url: str, local_path: Path, credentials: CredentialCallback) -> TransportResult:
        allowed = allowed_credential_types(url)
        if not allowed:
            rc, stderr = self._run_clone(url, local_path, None)
            if rc == 0:
                return TransportResult(ok=True, attempts=1)
            return TransportResult(ok=False, message=_last_lines(stderr), attempts=1)

        username = infer_username(url) if is_ssh_url(url) else None
        failed: set[Credential] = set()
        message = ""
        attempts = 0
        while True:
            try:
                credential = credentials(url, username, allowed)
            except AuthExhaustedError as e:
                return TransportResult(
                    ok=False, message=message or str(e),
                    auth_failure=True, exhausted=True, attempts=attempts,
                )
            if credential in failed:
                logger.debug("跳过已失败的凭据: %s", type(credential).__name__)
                continue

            attempts += 1
            rc, stderr = self._run_clone(url, local_path, credential)
            if rc == 0:
                logger.info("克隆成功: %s -> %s (尝试 %d 次)", url, local_path, attempts)
                return TransportResult(ok=True, attempts=attempts)

            message = _last_lines(stderr) or f"git clone 失败 (rc={rc})"
            if not is_auth_failure(stderr):
                logger.warning("克隆失败 %s: %s", url, message)
                return TransportResult(ok=False, message=message, attempts=attempts)

            logger.debug("认证失败 (第 %d 次) %s: %s", attempts, url, message)
            failed.add(credential)
