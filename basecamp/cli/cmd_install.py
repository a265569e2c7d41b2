"""install 命令 — 并行克隆 codebase 下的代码仓"""

from __future__ import annotations

import click

from basecamp.cli import _root, ui
from basecamp.services.batch.progress import ConsoleProgressReporter
from basecamp.services.install_service import InstallService


def register(group: click.Group) -> None:
    group.add_command(install)


@click.command()
@click.argument("codebase", required=False)
@click.option("--parallel", "-p", type=click.IntRange(min=1), default=None, help="并行克隆数（默认取配置，4）")
def install(codebase: str | None, parallel: int | None) -> None:
    """安装指定 codebase（不指定则安装全部）"""
    svc = InstallService(root=_root(), reporter=ConsoleProgressReporter())
    if codebase:
        results = {codebase: svc.install_codebase(codebase, parallel)}
    else:
        results = svc.install_all(parallel)
        if not results:
            ui.info("还没有任何 codebase，使用 'basecamp add <codebase> <repo>' 添加。")
            return

    failed = 0
    for name, result in results.items():
        if result.total == 0:
            ui.info(f"codebase '{name}' 中没有代码仓")
            continue
        ui.report_batch(name, result)
        failed += len(result.failed)

    if failed:
        raise click.ClickException(f"{failed} 个代码仓克隆失败")
