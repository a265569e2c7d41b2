"""CLI 端到端测试 — 通过 CliRunner 调用命令，git 由 FakeGit 模拟"""

from __future__ import annotations

import logging

import pytest
from click.testing import CliRunner

from basecamp import __version__
from basecamp.cli import main
from basecamp.core.config import BasecampConfig
from basecamp.utils.shell import get_executor, set_executor


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


@pytest.fixture()
def git(git_factory):
    fake = git_factory(missing={"bad"})
    original = get_executor()
    set_executor(fake)
    yield fake
    set_executor(original)


@pytest.fixture()
def run(tmp_path, git):
    runner = CliRunner()

    def _run(*args: str, input: str | None = None):
        return runner.invoke(main, ["--root", str(tmp_path), *args], input=input)

    return _run


class TestInit:

    def test_non_interactive(self, tmp_path, run) -> None:
        result = run("init", "--non-interactive", "--connection-type", "ssh", "--name", "acme")
        assert result.exit_code == 0, result.output
        assert "basecamp 已初始化" in result.output
        assert BasecampConfig.load(tmp_path).remote_base_url == "git@github.com:acme"

    def test_interactive(self, tmp_path, run) -> None:
        result = run("init", input="https\norg\nacme\ny\n")
        assert result.exit_code == 0, result.output
        assert "https://github.com/acme" in result.output
        assert BasecampConfig.load(tmp_path).remote_base_url == "https://github.com/acme"

    def test_existing_requires_force(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["a"]})
        result = run("init", "--non-interactive", "--connection-type", "https", "--name", "other")
        assert result.exit_code == 1
        assert "--force" in result.output

        result = run("init", "--non-interactive", "--force", "--connection-type", "https", "--name", "other")
        assert result.exit_code == 0, result.output
        config = BasecampConfig.load(tmp_path)
        assert config.remote_base_url == "https://github.com/other"
        assert config.list_codebases() == []

    def test_missing_name(self, run) -> None:
        result = run("init", "--non-interactive", "--connection-type", "https")
        assert result.exit_code == 2


class TestAdd:

    def test_add_and_rollback(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path)
        result = run("add", "x", "good", "bad")

        assert result.exit_code == 1
        assert "已克隆 'good'" in result.output
        assert "克隆 'bad' 失败" in result.output
        assert "not found" in result.output
        assert "移除失败的代码仓 [bad]" in result.output
        assert BasecampConfig.load(tmp_path).list_repositories("x") == ["good"]
        assert (tmp_path / "x" / "good" / ".git").is_dir()
        assert not (tmp_path / "x" / "bad").exists()

    def test_add_prompts_for_remote(self, tmp_path, run) -> None:
        result = run("add", "x", "ui", input="https://github.com/acme\n")
        assert result.exit_code == 0, result.output
        assert "未找到配置文件" in result.output
        config = BasecampConfig.load(tmp_path)
        assert config.remote_base_url == "https://github.com/acme"
        assert config.list_repositories("x") == ["ui"]

    def test_add_existing_is_skipped(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["ui"]})
        result = run("add", "x", "ui")
        assert result.exit_code == 0, result.output
        assert "跳过 [ui]" in result.output
        assert "没有需要安装的新代码仓" in result.output

    def test_invalid_remote(self, run) -> None:
        result = run("add", "x", "ui", input="ftp://example.com\n")
        assert result.exit_code == 1
        assert "非法的 GitHub 地址" in result.output


class TestInstall:

    def test_install_all(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"frontend": ["ui", "api"], "backend": ["svc"]})
        result = run("install", "-p", "2")
        assert result.exit_code == 0, result.output
        assert "codebase 'backend' 新安装 1 个代码仓" in result.output
        assert "codebase 'frontend' 新安装 2 个代码仓" in result.output

        again = run("install", "frontend")
        assert again.exit_code == 0, again.output
        assert "codebase 'frontend' 已是最新" in again.output

    def test_install_failure_exit_code(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["good", "bad"]})
        result = run("install", "x")
        assert result.exit_code == 1
        assert "1 个代码仓克隆失败" in result.output
        # 安装失败不修改配置
        assert BasecampConfig.load(tmp_path).list_repositories("x") == ["good", "bad"]

    def test_unknown_codebase(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path)
        result = run("install", "nope")
        assert result.exit_code == 1
        assert "Codebase 'nope' 不存在" in result.output

    def test_without_config(self, run) -> None:
        result = run("install")
        assert result.exit_code == 1
        assert "basecamp init" in result.output

    def test_invalid_parallel(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["a"]})
        assert run("install", "-p", "0").exit_code == 2


class TestList:

    def test_list_codebases(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["a", "b"], "empty": []})
        result = run("list")
        assert result.exit_code == 0, result.output
        assert "| Codebase" in result.output
        assert "a, b" in result.output
        assert "None" in result.output

    def test_list_repositories(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["ui"]})
        result = run("list", "x")
        assert result.exit_code == 0, result.output
        assert "https://github.com/acme/ui.git" in result.output

    def test_list_nothing(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path)
        assert "还没有任何 codebase" in run("list").output


class TestRemove:

    def test_remove_with_yes(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["a", "b"]})
        (tmp_path / "x" / "a" / ".git").mkdir(parents=True)
        result = run("remove", "x", "a", "-y")
        assert result.exit_code == 0, result.output
        assert not (tmp_path / "x" / "a").exists()
        assert BasecampConfig.load(tmp_path).list_repositories("x") == ["b"]

    def test_remove_cancelled(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["a"]})
        (tmp_path / "x" / "a").mkdir(parents=True)
        result = run("remove", "x", input="n\n")
        assert result.exit_code == 0, result.output
        assert "已取消" in result.output
        assert (tmp_path / "x" / "a").exists()
        assert BasecampConfig.load(tmp_path).list_codebases() == ["x"]

    def test_remove_dirty_requires_force(self, tmp_path, run, config_factory, git) -> None:
        config_factory(tmp_path, {"x": ["a"]})
        (tmp_path / "x" / "a").mkdir(parents=True)
        git.dirty.add("a")
        result = run("remove", "x", "a", "-y")
        assert result.exit_code == 1
        assert "未提交的修改" in result.output

        result = run("remove", "x", "a", "-y", "--force")
        assert result.exit_code == 0, result.output
        assert not (tmp_path / "x" / "a").exists()

    def test_remove_unknown_repository(self, tmp_path, run, config_factory) -> None:
        config_factory(tmp_path, {"x": ["a"]})
        result = run("remove", "x", "zzz", "-y")
        assert result.exit_code == 1
        assert "'zzz' 不在 codebase 'x' 中" in result.output


def test_version(run) -> None:
    result = run("--version")
    assert result.exit_code == 0
    assert __version__ in result.output


def test_invalid_parallel_in_config(tmp_path, run) -> None:
    path = tmp_path / ".basecamp" / "config.yaml"
    path.parent.mkdir()
    path.write_text("github_url: https://github.com/acme\nparallel:\n", encoding="utf-8")
    result = run("install", "cb")
    assert result.exit_code == 1
    assert "parallel 必须是不小于 1 的整数" in result.output
