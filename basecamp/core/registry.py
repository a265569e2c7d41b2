"""YAML 注册表 — codebase 到代码仓列表的映射

codebases.yaml 结构:

    codebases:
      frontend:
        - ui
        - api

修改只作用于内存，调用 save() 才写回磁盘；
这样回滚时 "删除 + 持久化" 两步可以分别报告失败。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from basecamp.core.exceptions import CodebaseNotFoundError, RepositoryNotFoundError
from basecamp.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


class YamlRegistry:
    """YAML 文件注册表基类

    子类用法:
        class MyRegistry(YamlRegistry):
            section_key = "items"
    """

    section_key: str = "entries"

    def __init__(self, registry_file: str | Path) -> None:
        self.registry_file = Path(registry_file)
        self._data: dict[str, Any] = load_yaml(self.registry_file)

    def _section(self) -> dict[str, Any]:
        """获取当前 section 字典（自动创建）"""
        section = self._data.get(self.section_key)
        if not isinstance(section, dict):
            section = {}
            self._data[self.section_key] = section
        return section

    def save(self) -> None:
        """持久化到 YAML 文件"""
        save_yaml(self.registry_file, self._data)


class CodebaseRegistry(YamlRegistry):
    """codebase 注册表"""

    section_key = "codebases"

    def names(self) -> list[str]:
        """所有 codebase 名（按名称排序）"""
        return sorted(self._section())

    def has(self, codebase: str) -> bool:
        return codebase in self._section()

    def repositories(self, codebase: str) -> list[str]:
        """codebase 下的代码仓列表（副本）"""
        section = self._section()
        if codebase not in section:
            raise CodebaseNotFoundError(codebase)
        return list(section[codebase] or [])

    def add(self, codebase: str, repos: list[str]) -> list[str]:
        """追加代码仓，已存在的跳过，返回实际新增的列表"""
        current: list[str] = list(self._section().get(codebase) or [])
        added: list[str] = []
        for repo in repos:
            if repo in current:
                logger.debug("代码仓 '%s' 已在 codebase '%s' 中，跳过", repo, codebase)
                continue
            current.append(repo)
            added.append(repo)
        self._section()[codebase] = current
        return added

    def remove(self, codebase: str, repos: list[str]) -> None:
        """移除代码仓；任一名字不存在则整体不修改"""
        current = self.repositories(codebase)
        for repo in repos:
            if repo not in current:
                raise RepositoryNotFoundError(repo, codebase)
        self._section()[codebase] = [r for r in current if r not in repos]

    def clear(self) -> None:
        self._data[self.section_key] = {}

    def drop(self, codebase: str) -> None:
        """删除整个 codebase"""
        section = self._section()
        if codebase not in section:
            raise CodebaseNotFoundError(codebase)
        del section[codebase]
