"""终端输出工具 — 带状态前缀的消息、表格与批次结果展示"""

from __future__ import annotations

import click

from basecamp.core.models import BatchResult, RollbackResult
from basecamp.services.repo.executor import ssh_auth_hints


def success(message: str) -> None:
    click.echo(f"{click.style('✓', fg='green', bold=True)} {message}")


def error(message: str) -> None:
    click.echo(f"{click.style('✗', fg='red', bold=True)} {click.style(message, fg='red')}", err=True)


def warning(message: str) -> None:
    click.echo(f"{click.style('!', fg='yellow', bold=True)} {message}")


def info(message: str) -> None:
    click.echo(f"{click.style('i', fg='blue', bold=True)} {message}")


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    """按列宽对齐输出表格"""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(cells: list[str]) -> str:
        return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"

    click.echo(border)
    click.echo(click.style(line(headers), bold=True))
    click.echo(border)
    for row in rows:
        click.echo(line(row))
    click.echo(border)


def report_batch(codebase: str, result: BatchResult) -> None:
    """输出一个批次的汇总；失败时列出每个代码仓的原因"""
    if result.failed:
        warning(f"codebase '{codebase}' 安装完成，但有 {len(result.failed)} 个代码仓失败:")
        click.echo()
        for name, reason in result.failed:
            error(f"  {name}: {reason}")
            for hint in ssh_auth_hints(reason):
                click.echo(f"      {hint}")
        click.echo()
        return
    if result.up_to_date:
        success(f"codebase '{codebase}' 已是最新")
        return
    if result.already_present:
        info(f"{len(result.already_present)} 个代码仓此前已安装")
    success(f"codebase '{codebase}' 新安装 {len(result.succeeded)} 个代码仓")


def report_rollback(result: RollbackResult) -> None:
    if result.ok:
        if result.removed:
            success(f"已从 codebase '{result.codebase}' 移除失败的代码仓 [{', '.join(result.removed)}]")
        return
    error(f"回滚配置失败: {result.error}")
    if result.diverged:
        warning("内存中的配置与磁盘不一致，请重新运行命令以从磁盘加载配置")
