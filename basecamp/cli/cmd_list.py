"""list 命令 — 列出 codebase 或其中的代码仓"""

from __future__ import annotations

import click

from basecamp.cli import _root, ui
from basecamp.services.codebase_service import CodebaseService


def register(group: click.Group) -> None:
    group.add_command(list_cmd)


@click.command(name="list")
@click.argument("codebase", required=False)
def list_cmd(codebase: str | None) -> None:
    """列出所有 codebase，或指定 codebase 的代码仓"""
    svc = CodebaseService(root=_root())
    if codebase:
        repos = svc.list_repositories(codebase)
        if not repos:
            ui.info(f"codebase '{codebase}' 中没有代码仓，使用 'basecamp add {codebase} <repo>' 添加。")
            return
        ui.print_table(["Repository", "URL"], [[r["name"], r["url"]] for r in repos])
        return

    codebases = svc.list_codebases()
    if not codebases:
        ui.info("还没有任何 codebase，使用 'basecamp add <codebase> <repo>' 添加。")
        return
    rows = [[c["name"], ", ".join(c["repositories"]) or "None"] for c in codebases]
    ui.print_table(["Codebase", "Repositories"], rows)
