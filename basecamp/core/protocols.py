"""领域协议定义

批量克隆引擎只通过这些 Protocol 访问外部协作者，
测试中可用内存实现替换。
"""

from __future__ import annotations

from typing import Protocol


class ConfigStore(Protocol):
    """配置存储协议（安装时只读，回滚时读写）"""

    def has_remote_base_url(self) -> bool:
        ...

    def list_repositories(self, codebase: str) -> list[str]:
        """codebase 不存在时抛 CodebaseNotFoundError"""
        ...

    def remove_repositories(self, codebase: str, names: list[str]) -> None:
        """任一名字不存在时抛 RepositoryNotFoundError"""
        ...

    def persist(self) -> None:
        """写入失败时抛 ConfigPersistError"""
        ...
