"""安装服务 — 批量克隆的对外入口

install_batch() 是唯一的批量入口，只返回 BatchResult；
如何展示结果、是否回滚由调用方决定。add_and_install() 是 "添加后安装" 组合流程，
失败时使用 RollbackCoordinator 回滚配置。
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from basecamp.core.config import BasecampConfig
from basecamp.core.exceptions import ConfigError, RemoteUrlNotConfiguredError
from basecamp.core.models import BatchResult, RepoJob, RollbackResult
from basecamp.services.batch.pool import WorkerPool
from basecamp.services.batch.progress import NullProgressReporter, ProgressReporter
from basecamp.services.batch.rollback import RollbackCoordinator
from basecamp.services.repo.executor import CloneExecutor
from basecamp.services.repo.urls import build_repo_url, repo_path

logger = logging.getLogger(__name__)


@dataclass
class AddResult:
    """添加后安装的结果"""

    codebase: str
    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    batch: BatchResult | None = None
    rollback: RollbackResult | None = None

    @property
    def success(self) -> bool:
        return self.batch is None or self.batch.success


class InstallService:
    """代码仓安装服务"""

    def __init__(
        self,
        config: BasecampConfig | None = None,
        *,
        root: str | Path | None = None,
        executor: CloneExecutor | None = None,
        reporter: ProgressReporter | None = None,
        rollback: RollbackCoordinator | None = None,
    ) -> None:
        self._config = config
        self._root = root
        self.executor = executor or CloneExecutor()
        self.reporter = reporter or NullProgressReporter()
        self.rollback = rollback or RollbackCoordinator()

    @property
    def config(self) -> BasecampConfig:
        if self._config is None:
            self._config = BasecampConfig.load(self._root)
        return self._config

    @property
    def workspace_root(self) -> Path:
        return self.config.root

    def _parallelism(self, parallelism: int | None) -> int:
        return parallelism if parallelism is not None else self.config.settings.parallel

    def _require_remote(self) -> str:
        if not self.config.has_remote_base_url():
            raise RemoteUrlNotConfiguredError()
        return self.config.remote_base_url

    def build_jobs(self, codebase: str, names: list[str], remote_base_url: str) -> list[RepoJob]:
        """每个代码仓一个任务；重复的名字只保留第一次出现"""
        jobs: list[RepoJob] = []
        seen: set[str] = set()
        for name in names:
            if name in seen:
                logger.warning("忽略重复的代码仓: %s", name)
                continue
            seen.add(name)
            jobs.append(RepoJob(
                codebase=codebase,
                name=name,
                remote_url=build_repo_url(remote_base_url, name),
                local_path=repo_path(self.workspace_root, codebase, name),
            ))
        return jobs

    def install_batch(
        self,
        codebase: str,
        repository_names: list[str],
        remote_base_url: str,
        parallelism: int,
    ) -> BatchResult:
        """并行获取一组代码仓，所有任务结束后返回 BatchResult"""
        jobs = self.build_jobs(codebase, repository_names, remote_base_url)
        pool = WorkerPool(executor=self.executor, reporter=self.reporter)
        result = pool.run(jobs, parallelism, codebase=codebase)
        if result.failed and self.config.settings.cleanup_failed:
            self._cleanup_failed(jobs, result)
        return result

    @staticmethod
    def _cleanup_failed(jobs: list[RepoJob], result: BatchResult) -> None:
        """删除失败任务残留的目录（这些目录在本批次开始前并不存在）"""
        failed = set(result.failed_names)
        for job in jobs:
            if job.name not in failed or not job.local_path.exists():
                continue
            try:
                shutil.rmtree(job.local_path)
                logger.info("已清理失败残留目录: %s", job.local_path)
            except OSError as e:
                logger.warning("清理失败残留目录 %s 出错: %s", job.local_path, e)

    def install_codebase(self, codebase: str, parallelism: int | None = None) -> BatchResult:
        """安装单个 codebase 下的全部代码仓"""
        remote = self._require_remote()
        names = self.config.list_repositories(codebase)
        if not names:
            logger.info("codebase '%s' 中没有代码仓", codebase)
            return BatchResult()
        return self.install_batch(codebase, names, remote, self._parallelism(parallelism))

    def install_all(self, parallelism: int | None = None) -> dict[str, BatchResult]:
        """依次安装所有 codebase；某个 codebase 有失败不影响后续"""
        self._require_remote()
        results: dict[str, BatchResult] = {}
        for codebase in self.config.list_codebases():
            results[codebase] = self.install_codebase(codebase, parallelism)
        return results

    def add_and_install(
        self, codebase: str, names: list[str], parallelism: int | None = None,
    ) -> AddResult:
        """添加代码仓到配置并安装新增部分，失败的代码仓从配置中回滚"""
        remote = self._require_remote()
        added = self.config.add_repositories(codebase, names)
        skipped = [n for n in dict.fromkeys(names) if n not in added]
        self.config.persist()
        result = AddResult(codebase=codebase, added=added, skipped=skipped)
        if skipped:
            logger.info("已存在于 codebase '%s'，跳过: %s", codebase, ", ".join(skipped))
        if not added:
            return result

        batch = self.install_batch(codebase, added, remote, self._parallelism(parallelism))
        result.batch = batch
        if batch.success:
            return result

        # 从磁盘重新加载一份配置再回滚
        try:
            fresh = BasecampConfig.load(self.config.root)
        except ConfigError as e:
            logger.error("回滚前重新加载配置失败: %s", e)
            result.rollback = RollbackResult(codebase=codebase, error=str(e))
            return result
        result.rollback = self.rollback.reconcile(fresh, codebase, batch)
        self._config = fresh
        return result
