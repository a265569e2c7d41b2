"""本地代码仓状态检查 — 删除前确认没有未提交/未推送的工作"""

from __future__ import annotations

import logging
from pathlib import Path

from basecamp.core.exceptions import ExecutionError
from basecamp.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)


def _git(args: list[str], repo: Path, executor: CommandExecutor | None) -> tuple[int, str, str]:
    r = (executor or get_executor()).execute(["git", *args], cwd=str(repo))
    return r.returncode, r.stdout, r.stderr


def has_uncommitted_changes(repo: Path, executor: CommandExecutor | None = None) -> bool:
    """工作区或暂存区有修改（含未跟踪文件）"""
    rc, out, err = _git(["status", "--porcelain", "--untracked-files=all"], repo, executor)
    if rc != 0:
        raise ExecutionError(f"git status 失败 {repo}: {err.strip()[:300]}")
    dirty = bool(out.strip())
    if dirty:
        logger.debug("%s 存在 %d 处未提交修改", repo, len(out.strip().splitlines()))
    return dirty


def has_unpushed_commits(repo: Path, executor: CommandExecutor | None = None) -> bool:
    """当前分支领先于 origin 上的同名分支；没有远端跟踪分支时视为 False"""
    rc, out, err = _git(["rev-parse", "--abbrev-ref", "HEAD"], repo, executor)
    if rc != 0:
        raise ExecutionError(f"git rev-parse 失败 {repo}: {err.strip()[:300]}")
    branch = out.strip() or "HEAD"

    remote = f"origin/{branch}"
    rc, _, _ = _git(["rev-parse", "--verify", "--quiet", remote], repo, executor)
    if rc != 0:
        logger.debug("%s 没有远端跟踪分支 %s", repo, remote)
        return False

    rc, out, err = _git(["rev-list", "--count", f"{remote}..HEAD"], repo, executor)
    if rc != 0:
        raise ExecutionError(f"git rev-list 失败 {repo}: {err.strip()[:300]}")
    try:
        return int(out.strip() or "0") > 0
    except ValueError:
        return False
