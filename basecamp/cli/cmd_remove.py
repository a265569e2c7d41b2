"""remove 命令 — 从配置移除代码仓或整个 codebase，并删除本地目录"""

from __future__ import annotations

import click

from basecamp.cli import _root, ui
from basecamp.services.codebase_service import CodebaseService, RemovalPlan


def register(group: click.Group) -> None:
    group.add_command(remove)


def _confirmation(plan: RemovalPlan) -> str:
    target = (
        f"codebase '{plan.codebase}' 及其全部代码仓"
        if plan.whole_codebase
        else f"codebase '{plan.codebase}' 中的代码仓 {plan.repositories}"
    )
    if not plan.on_disk:
        return f"将从配置中移除{target}，是否继续?"
    dirs = "\n".join(f"  - {p}" for p in plan.on_disk)
    return f"将从配置中移除{target}，并删除以下本地目录:\n{dirs}\n是否继续?"


@click.command()
@click.argument("codebase")
@click.argument("repositories", nargs=-1)
@click.option("--force", "-f", is_flag=True, help="忽略未提交修改与未推送提交")
@click.option("--yes", "-y", is_flag=True, help="不再确认")
def remove(codebase: str, repositories: tuple[str, ...], force: bool, yes: bool) -> None:
    """移除代码仓（不指定代码仓则移除整个 codebase）"""
    svc = CodebaseService(root=_root())
    plan = svc.prepare_removal(codebase, list(repositories), force=force)

    if not yes and not click.confirm(_confirmation(plan), default=False):
        ui.info("已取消。")
        return

    report = svc.execute_removal(plan)
    if plan.whole_codebase:
        ui.success(f"已从配置移除 codebase '{codebase}'")
    else:
        ui.success(f"已从 codebase '{codebase}' 移除 [{', '.join(plan.repositories)}]")
    for path in report.deleted:
        ui.success(f"已删除本地目录 {path}")
    for path, err in report.delete_errors:
        ui.warning(f"删除本地目录 {path} 失败: {err}")
