"""basecamp 命令行接口

CLI 按命令拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import click

from basecamp import __version__
from basecamp.core.exceptions import BasecampError
from basecamp.utils.logger import level_from_verbosity, setup_logging


class BasecampGroup(click.Group):
    """把业务异常转换为 ClickException（非零退出码 + 友好提示）"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except BasecampError as e:
            raise click.ClickException(str(e)) from e


def _root() -> Path:
    """当前命令的配置根目录"""
    ctx = click.get_current_context()
    return Path(ctx.find_root().obj["root"])


@click.group(cls=BasecampGroup)
@click.version_option(version=__version__, prog_name="basecamp")
@click.option("-v", "--verbose", count=True, help="日志详细程度（-v, -vv, -vvv）")
@click.option(
    "--root", envvar="BASECAMP_ROOT", default=".",
    type=click.Path(file_okay=False), help="工作根目录（包含 .basecamp/）",
)
@click.pass_context
def main(ctx: click.Context, verbose: int, root: str) -> None:
    """BaseCamp - 多 codebase / 多代码仓管理工具"""
    setup_logging(
        level=os.getenv("BASECAMP_LOG_LEVEL") or level_from_verbosity(verbose),
        json_output=os.getenv("BASECAMP_LOG_JSON", "") == "1",
    )
    ctx.obj = {"root": root}


# 注册各子命令
from basecamp.cli.cmd_init import register as _reg_init  # noqa: E402
from basecamp.cli.cmd_install import register as _reg_install  # noqa: E402
from basecamp.cli.cmd_list import register as _reg_list  # noqa: E402
from basecamp.cli.cmd_add import register as _reg_add  # noqa: E402
from basecamp.cli.cmd_remove import register as _reg_remove  # noqa: E402

_reg_init(main)
_reg_install(main)
_reg_list(main)
_reg_add(main)
_reg_remove(main)
