"""init 命令 — 生成 .basecamp/ 配置"""

from __future__ import annotations

import click

from basecamp.cli import _root, ui
from basecamp.core.config import BasecampConfig
from basecamp.services.codebase_service import CodebaseService, build_remote_url


def register(group: click.Group) -> None:
    group.add_command(init)


def _ask_remote_url() -> str:
    """交互式询问连接方式与组织/用户名，直到用户确认"""
    while True:
        connection = click.prompt(
            "使用哪种连接方式", type=click.Choice(["https", "ssh"]), default="https",
        )
        repo_type = click.prompt(
            "连接组织仓库还是个人仓库", type=click.Choice(["org", "personal"]), default="org",
        )
        label = "组织名" if repo_type == "org" else "GitHub 用户名"
        name = click.prompt(f"请输入{label}")
        url = build_remote_url(connection, name)
        ui.info(f"GitHub 地址将设置为: {url}")
        if click.confirm("是否正确?", default=True):
            return url
        ui.info("重新输入。")


@click.command()
@click.option("--connection-type", type=click.Choice(["https", "ssh"]), default=None, help="连接方式")
@click.option("--repo-type", type=click.Choice(["org", "personal"]), default=None, help="组织或个人仓库")
@click.option("--name", default=None, help="组织名或 GitHub 用户名")
@click.option("--non-interactive", is_flag=True, help="非交互模式")
@click.option("--force", is_flag=True, help="覆盖已有配置")
def init(
    connection_type: str | None, repo_type: str | None, name: str | None,
    non_interactive: bool, force: bool,
) -> None:
    """初始化 basecamp 配置"""
    root = _root()
    if BasecampConfig.exists_at(root) and not force:
        if non_interactive:
            raise click.ClickException("配置已存在，使用 --force 覆盖")
        if not click.confirm(f"{root.resolve()}/.basecamp 下已有配置，是否覆盖?", default=False):
            ui.info("已取消，保留现有配置。")
            return

    if non_interactive or (connection_type and name):
        if not connection_type or not name:
            raise click.UsageError("非交互模式需要 --connection-type 与 --name")
        url = build_remote_url(connection_type, name)
    else:
        ui.info("配置 GitHub 连接:")
        url = _ask_remote_url()

    config = CodebaseService.initialize(url, root, reset_codebases=True)
    ui.success(f"basecamp 已初始化，配置位于 {config.config_dir}")
