"""凭据解析 — 每次认证尝试给出一个候选凭据

CredentialResolver.resolve(url, attempt_index) 是纯策略函数（除读取 ~/.ssh 外无副作用）:

  0. attempt_index >= MAX_ATTEMPTS        -> None（已用尽）
  1. 远端接受用户名/密码                  -> DefaultCredential（交给 credential helper）
  2. attempt_index == 0 且 ssh-agent 可用 -> AgentCredential
  3. 其余                                 -> 第 (attempt_index - 1) % N 个 SSH 私钥

从不交互式询问口令。带口令且未加入 ssh-agent 的私钥仍会被尝试，预期失败。
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from basecamp.core.models import (
    AgentCredential,
    Credential,
    CredentialType,
    DefaultCredential,
    KeyCredential,
)
from basecamp.services.repo.urls import infer_username

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 6

STANDARD_KEY_NAMES = (
    "id_ed25519",
    "id_rsa",
    "id_ecdsa",
    "id_dsa",
    "github_rsa",
    "github_ed25519",
)

# ~/.ssh 下这些前缀的文件不是私钥
_NON_KEY_PREFIXES = ("known_hosts", "config", "authorized_keys", "environment")

_IDENTITY_FILE_RE = re.compile(r"^identityfile(?:\s*=\s*|\s+)(.+)$", re.IGNORECASE)

KeyCandidate = tuple[Path, "Path | None"]


def parse_identity_files(config_text: str, home: Path) -> list[Path]:
    """解析 ssh_config 中的 IdentityFile 指令"""
    paths: list[Path] = []
    for raw in config_text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = _IDENTITY_FILE_RE.match(line)
        if not m:
            continue
        value = m.group(1).strip().strip('"')
        if not value:
            continue
        if value.startswith("~"):
            value = str(home) + value[1:]
        path = Path(value)
        if not path.is_absolute():
            path = home / path
        paths.append(path)
    return paths


def _public_key_for(private_key: Path) -> Path | None:
    for pub in (private_key.with_name(private_key.name + ".pub"), private_key.with_suffix(".pub")):
        if pub != private_key and pub.is_file():
            return pub
    return None


def discover_key_candidates(ssh_dir: Path, home: Path | None = None) -> list[KeyCandidate]:
    """枚举可用的 SSH 私钥候选（按优先级去重）

    来源依次为: 标准文件名、ssh_config 的 IdentityFile、
    ssh 目录下其余带 .pub 同名文件的非隐藏文件。只保留确实存在的私钥。
    """
    home = home or ssh_dir.parent
    ordered: list[Path] = [ssh_dir / name for name in STANDARD_KEY_NAMES]

    config_file = ssh_dir / "config"
    if config_file.is_file():
        try:
            ordered.extend(parse_identity_files(config_file.read_text(encoding="utf-8"), home))
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("读取 ssh 配置失败 %s: %s", config_file, e)

    if ssh_dir.is_dir():
        try:
            entries = sorted(ssh_dir.iterdir())
        except OSError as e:
            logger.debug("无法列出 %s: %s", ssh_dir, e)
            entries = []
        for entry in entries:
            name = entry.name
            if name.startswith(".") or name.endswith(".pub") or name.startswith(_NON_KEY_PREFIXES):
                continue
            if entry.is_file() and _public_key_for(entry) is not None:
                ordered.append(entry)

    seen: set[Path] = set()
    candidates: list[KeyCandidate] = []
    for key in ordered:
        if key in seen or not key.is_file():
            continue
        seen.add(key)
        candidates.append((key, _public_key_for(key)))
    return candidates


class CredentialResolver:
    """按尝试序号给出候选凭据"""

    def __init__(
        self,
        ssh_dir: str | Path | None = None,
        *,
        agent_available: bool | None = None,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        """
        参数:
            ssh_dir: SSH 目录，默认 ~/.ssh
            agent_available: 是否有 ssh-agent；None 表示按 SSH_AUTH_SOCK 判断
            max_attempts: 单个代码仓最多尝试次数
        """
        self.ssh_dir = Path(ssh_dir) if ssh_dir else Path.home() / ".ssh"
        self._agent_available = agent_available
        self.max_attempts = max_attempts

    @property
    def agent_available(self) -> bool:
        if self._agent_available is not None:
            return self._agent_available
        return bool(os.environ.get("SSH_AUTH_SOCK"))

    def candidates(self) -> list[KeyCandidate]:
        return discover_key_candidates(self.ssh_dir)

    def resolve(
        self,
        remote_url: str,
        attempt_index: int,
        allowed_types: frozenset[CredentialType] = frozenset({CredentialType.SSH_KEY}),
        username: str | None = None,
    ) -> Credential | None:
        """返回第 attempt_index 次尝试的凭据，None 表示已用尽"""
        if attempt_index >= self.max_attempts:
            logger.warning("认证尝试次数过多 (%d)，放弃: %s", attempt_index, remote_url)
            return None

        if CredentialType.USER_PASS_PLAINTEXT in allowed_types:
            logger.debug("远端要求用户名/密码，使用默认凭据: %s", remote_url)
            return DefaultCredential()

        user = username or infer_username(remote_url)

        if attempt_index == 0 and self.agent_available:
            logger.debug("尝试 ssh-agent 凭据 (user=%s)", user)
            return AgentCredential(user)

        candidates = self.candidates()
        if not candidates:
            logger.warning("未找到可用的 SSH 私钥: %s", self.ssh_dir)
            return None

        slot = attempt_index - 1 if attempt_index > 0 else 0
        private_key, public_key = candidates[slot % len(candidates)]
        logger.debug(
            "尝试私钥 %d/%d: %s", slot % len(candidates) + 1, len(candidates), private_key,
        )
        return KeyCredential(user, private_key, public_key)
