"""add 命令 — 添加代码仓并立即安装，失败的代码仓回滚出配置"""

from __future__ import annotations

from pathlib import Path

import click

from basecamp.cli import _root, ui
from basecamp.core.config import CONFIG_DIR_NAME, CONFIG_FILE_NAME, BasecampConfig
from basecamp.services.batch.progress import ConsoleProgressReporter
from basecamp.services.codebase_service import CodebaseService
from basecamp.services.install_service import InstallService


def register(group: click.Group) -> None:
    group.add_command(add)


def _load_or_create(root: Path) -> BasecampConfig:
    """加载配置；不存在时询问 GitHub 地址并创建"""
    if (root / CONFIG_DIR_NAME / CONFIG_FILE_NAME).exists():
        return BasecampConfig.load(root)
    ui.info("未找到配置文件，将新建配置。")
    ui.info("示例: https://github.com/your-org 或 git@github.com:your-org")
    url = click.prompt("GitHub 地址")
    return CodebaseService.initialize(url, root)


@click.command()
@click.argument("codebase")
@click.argument("repositories", nargs=-1, required=True)
@click.option("--parallel", "-p", type=click.IntRange(min=1), default=None, help="并行克隆数")
def add(codebase: str, repositories: tuple[str, ...], parallel: int | None) -> None:
    """添加代码仓到 codebase 并安装"""
    config = _load_or_create(_root())
    svc = InstallService(config, reporter=ConsoleProgressReporter())
    result = svc.add_and_install(codebase, list(repositories), parallel)

    if result.skipped:
        ui.info(f"已存在于 codebase '{codebase}'，跳过 [{', '.join(result.skipped)}]")
    if not result.added:
        ui.info("没有需要安装的新代码仓。")
        return
    ui.success(f"已添加 [{', '.join(result.added)}] 到 codebase '{codebase}'")

    batch = result.batch
    if batch is None:
        return
    ui.report_batch(codebase, batch)
    if result.rollback is not None:
        ui.report_rollback(result.rollback)
    if not batch.success:
        raise click.ClickException(f"{len(batch.failed)} 个代码仓克隆失败")
