"""代码仓获取模块

- urls.py:        clone 地址与本地路径规则
- credentials.py: 凭据候选解析（ssh-agent / SSH 私钥 / credential helper）
- transport.py:   git clone 原语
- executor.py:    单个代码仓的获取
- status.py:      本地未提交 / 未推送检查
"""

from basecamp.services.repo.credentials import CredentialResolver
from basecamp.services.repo.executor import CloneExecutor, ssh_auth_hints
from basecamp.services.repo.transport import GitTransport, SubprocessGitTransport, TransportResult
from basecamp.services.repo.urls import build_repo_url, repo_path

__all__ = [
    "CredentialResolver",
    "CloneExecutor",
    "GitTransport",
    "SubprocessGitTransport",
    "TransportResult",
    "build_repo_url",
    "repo_path",
    "ssh_auth_hints",
]
