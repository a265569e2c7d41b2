"""代码仓地址与本地路径规则"""

from __future__ import annotations

from pathlib import Path

from basecamp.core.models import CredentialType

DEFAULT_SSH_USER = "git"


def build_repo_url(base_url: str, name: str) -> str:
    """由远程基础地址和代码仓名拼出 clone 地址

    >>> build_repo_url("https://github.com/org", "ui")
    'https://github.com/org/ui.git'
    >>> build_repo_url("git@github.com:org", "ui")
    'git@github.com:org/ui.git'
    """
    if base_url.startswith("https://"):
        base = base_url if base_url.endswith("/") else base_url + "/"
        return f"{base}{name}.git"
    if base_url.startswith("git@"):
        parts = base_url.split(":")
        if len(parts) == 2:
            host, path = parts
            if not path.endswith("/"):
                path += "/"
            return f"{host}:{path}{name}.git"
    return f"{base_url}/{name}.git"


def repo_path(root: str | Path, codebase: str, name: str) -> Path:
    """代码仓在本地的目录: <root>/<codebase>/<name>"""
    return Path(root) / codebase / name


def is_ssh_url(url: str) -> bool:
    if url.startswith("ssh://"):
        return True
    if "://" in url:
        return False
    # scp 风格: [user@]host:path
    head, sep, _ = url.partition(":")
    return bool(sep) and "/" not in head and len(head) > 1


def infer_username(url: str, default: str = DEFAULT_SSH_USER) -> str:
    """从 user@host: 前缀推断 SSH 用户名"""
    rest = url.removeprefix("ssh://")
    host_part = rest.split("/", 1)[0].split(":", 1)[0]
    if "@" in host_part:
        user = host_part.split("@", 1)[0]
        if user:
            return user
    return default


def allowed_credential_types(url: str) -> frozenset[CredentialType]:
    """远端可接受的认证方式；本地路径与 file:// 无需认证"""
    if url.startswith(("https://", "http://")):
        return frozenset({CredentialType.USER_PASS_PLAINTEXT})
    if is_ssh_url(url):
        return frozenset({CredentialType.SSH_KEY})
    return frozenset()
