"""codebase 管理服务 — 初始化、列表与删除

删除分两步: prepare_removal() 做存在性与安全检查（未提交 / 未推送），
CLI 确认后 execute_removal() 更新配置并删除本地目录。
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from basecamp.core.config import BasecampConfig
from basecamp.core.exceptions import (
    RemoteUrlNotConfiguredError,
    RepositoryNotFoundError,
    UncommittedChangesError,
    UnpushedCommitsError,
    ValidationError,
)
from basecamp.services.repo.status import has_uncommitted_changes, has_unpushed_commits
from basecamp.services.repo.urls import build_repo_url, repo_path
from basecamp.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


def build_remote_url(connection_type: str, name: str) -> str:
    """根据连接方式与组织/用户名生成 GitHub 基础地址"""
    if not name:
        raise ValidationError("组织名或用户名不能为空")
    if connection_type == "https":
        return f"https://github.com/{name}"
    if connection_type == "ssh":
        return f"git@github.com:{name}"
    raise ValidationError(f"不支持的连接方式: {connection_type}")


@dataclass
class RemovalPlan:
    """待执行的删除操作"""

    codebase: str
    repositories: list[str]
    on_disk: list[Path] = field(default_factory=list)
    whole_codebase: bool = False


@dataclass
class RemovalReport:
    """删除结果；本地目录删除失败只记录，不影响配置更新"""

    plan: RemovalPlan
    deleted: list[Path] = field(default_factory=list)
    delete_errors: list[tuple[Path, str]] = field(default_factory=list)


class CodebaseService:
    """codebase 管理服务"""

    def __init__(
        self,
        config: BasecampConfig | None = None,
        *,
        root: str | Path | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._config = config
        self._root = root
        self._executor = executor

    @property
    def config(self) -> BasecampConfig:
        if self._config is None:
            self._config = BasecampConfig.load(self._root)
            if not self._config.has_remote_base_url():
                raise RemoteUrlNotConfiguredError()
        return self._config

    @staticmethod
    def initialize(
        url: str, root: str | Path | None = None, *, reset_codebases: bool = False,
    ) -> BasecampConfig:
        """写入 GitHub 地址；reset_codebases 为 True 时同时清空 codebase 列表"""
        config = BasecampConfig(root)
        if reset_codebases:
            config.codebases.clear()
        config.set_remote_base_url(url)
        config.persist()
        logger.info("basecamp 已初始化: %s", config.config_dir)
        return config

    # ---- 列表 ----

    def list_codebases(self) -> list[dict[str, Any]]:
        return [
            {"name": name, "repositories": self.config.list_repositories(name)}
            for name in self.config.list_codebases()
        ]

    def list_repositories(self, codebase: str) -> list[dict[str, str]]:
        base = self.config.remote_base_url
        return [
            {"name": name, "url": build_repo_url(base, name)}
            for name in self.config.list_repositories(codebase)
        ]

    # ---- 删除 ----

    def _check_clean(self, path: Path) -> None:
        if has_uncommitted_changes(path, self._executor):
            raise UncommittedChangesError(str(path))
        if has_unpushed_commits(path, self._executor):
            raise UnpushedCommitsError(str(path))

    def prepare_removal(
        self, codebase: str, repositories: list[str] | None = None, *, force: bool = False,
    ) -> RemovalPlan:
        """校验并生成删除计划；非 force 时本地有未提交/未推送内容则抛异常"""
        configured = self.config.list_repositories(codebase)
        whole = not repositories
        targets = configured if whole else list(dict.fromkeys(repositories or []))
        for name in targets:
            if name not in configured:
                raise RepositoryNotFoundError(name, codebase)

        root = self.config.root
        on_disk = [p for p in (repo_path(root, codebase, r) for r in targets) if p.exists()]
        if not force:
            for path in on_disk:
                self._check_clean(path)

        if whole and (root / codebase).exists():
            on_disk = [root / codebase]
        return RemovalPlan(codebase=codebase, repositories=targets, on_disk=on_disk, whole_codebase=whole)

    def execute_removal(self, plan: RemovalPlan) -> RemovalReport:
        """更新并保存配置，然后删除本地目录"""
        if plan.whole_codebase:
            self.config.remove_codebase(plan.codebase)
        else:
            self.config.remove_repositories(plan.codebase, plan.repositories)
        self.config.persist()
        logger.info("已从配置移除: %s %s", plan.codebase, plan.repositories)

        report = RemovalReport(plan=plan)
        for path in plan.on_disk:
            try:
                shutil.rmtree(path)
                report.deleted.append(path)
                logger.info("已删除本地目录: %s", path)
            except OSError as e:
                logger.warning("删除本地目录 %s 失败: %s", path, e)
                report.delete_errors.append((path, str(e)))
        return report
