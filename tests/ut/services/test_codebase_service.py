"""CodebaseService 单元测试 — 初始化、列表与删除"""

from __future__ import annotations

import pytest

from basecamp.core.config import BasecampConfig
from basecamp.core.exceptions import (
    ExecutionError,
    RemoteUrlNotConfiguredError,
    RepositoryNotFoundError,
    UncommittedChangesError,
    UnpushedCommitsError,
    ValidationError,
)
from basecamp.services.codebase_service import CodebaseService, build_remote_url
from basecamp.services.repo.status import has_uncommitted_changes, has_unpushed_commits
from basecamp.utils.shell import CommandResult


def _checkout(root, codebase, name):
    path = root / codebase / name
    (path / ".git").mkdir(parents=True)
    return path


class TestBuildRemoteUrl:

    def test_https(self) -> None:
        assert build_remote_url("https", "acme") == "https://github.com/acme"

    def test_ssh(self) -> None:
        assert build_remote_url("ssh", "acme") == "git@github.com:acme"

    def test_invalid(self) -> None:
        with pytest.raises(ValidationError):
            build_remote_url("ftp", "acme")
        with pytest.raises(ValidationError, match="不能为空"):
            build_remote_url("https", "")


class TestInitialize:

    def test_creates_config(self, tmp_path) -> None:
        CodebaseService.initialize("https://github.com/acme", tmp_path)
        assert BasecampConfig.load(tmp_path).remote_base_url == "https://github.com/acme"

    def test_keeps_codebases_unless_reset(self, tmp_path, config_factory) -> None:
        config_factory(tmp_path, {"x": ["a"]})
        CodebaseService.initialize("git@github.com:other", tmp_path)
        assert BasecampConfig.load(tmp_path).list_codebases() == ["x"]

        CodebaseService.initialize("git@github.com:other", tmp_path, reset_codebases=True)
        assert BasecampConfig.load(tmp_path).list_codebases() == []


class TestListing:

    def test_list_codebases(self, tmp_path, config_factory) -> None:
        config_factory(tmp_path, {"b": ["x"], "a": []})
        svc = CodebaseService(root=tmp_path)
        assert svc.list_codebases() == [
            {"name": "a", "repositories": []},
            {"name": "b", "repositories": ["x"]},
        ]

    def test_list_repositories(self, tmp_path, config_factory) -> None:
        config_factory(tmp_path, {"x": ["ui"]}, url="git@github.com:acme")
        assert CodebaseService(root=tmp_path).list_repositories("x") == [
            {"name": "ui", "url": "git@github.com:acme/ui.git"},
        ]

    def test_remote_required(self, tmp_path, config_factory) -> None:
        config_factory(tmp_path, url="")
        with pytest.raises(RemoteUrlNotConfiguredError):
            CodebaseService(root=tmp_path).list_codebases()


class TestRemoval:

    @pytest.fixture()
    def config(self, tmp_path, config_factory):
        return config_factory(tmp_path, {"x": ["a", "b"], "y": ["c"]})

    def test_remove_repositories(self, tmp_path, config, fake_git) -> None:
        path = _checkout(tmp_path, "x", "a")
        svc = CodebaseService(config, executor=fake_git)

        plan = svc.prepare_removal("x", ["a"])
        assert plan.on_disk == [path]
        assert not plan.whole_codebase

        report = svc.execute_removal(plan)
        assert report.deleted == [path]
        assert not path.exists()
        assert BasecampConfig.load(tmp_path).list_repositories("x") == ["b"]

    def test_remove_whole_codebase(self, tmp_path, config, fake_git) -> None:
        _checkout(tmp_path, "x", "a")
        svc = CodebaseService(config, executor=fake_git)

        plan = svc.prepare_removal("x")
        assert plan.whole_codebase
        assert plan.repositories == ["a", "b"]
        assert plan.on_disk == [tmp_path / "x"]

        svc.execute_removal(plan)
        assert not (tmp_path / "x").exists()
        assert BasecampConfig.load(tmp_path).list_codebases() == ["y"]

    def test_not_on_disk(self, tmp_path, config, fake_git) -> None:
        svc = CodebaseService(config, executor=fake_git)
        plan = svc.prepare_removal("x", ["b"])
        assert plan.on_disk == []
        assert svc.execute_removal(plan).deleted == []
        assert fake_git.commands == []

    def test_unknown_repository(self, config, fake_git) -> None:
        with pytest.raises(RepositoryNotFoundError, match="zzz"):
            CodebaseService(config, executor=fake_git).prepare_removal("x", ["a", "zzz"])

    def test_uncommitted_changes_block(self, tmp_path, config, git_factory) -> None:
        _checkout(tmp_path, "x", "a")
        svc = CodebaseService(config, executor=git_factory(dirty={"a"}))
        with pytest.raises(UncommittedChangesError):
            svc.prepare_removal("x", ["a"])
        assert BasecampConfig.load(tmp_path).list_repositories("x") == ["a", "b"]

    def test_unpushed_commits_block(self, tmp_path, config, git_factory) -> None:
        _checkout(tmp_path, "x", "a")
        with pytest.raises(UnpushedCommitsError):
            CodebaseService(config, executor=git_factory(ahead={"a"})).prepare_removal("x")

    def test_force_skips_checks(self, tmp_path, config, git_factory) -> None:
        path = _checkout(tmp_path, "x", "a")
        git = git_factory(dirty={"a"})
        svc = CodebaseService(config, executor=git)
        plan = svc.prepare_removal("x", ["a"], force=True)
        assert plan.on_disk == [path]
        assert git.commands == []


class ScriptedGit:
    def __init__(self, *results: CommandResult) -> None:
        self.results = list(results)

    def execute(self, cmd, *, cwd=".", env=None):  # type: ignore[no-untyped-def]
        return self.results.pop(0)


class TestStatus:

    def test_status_failure_raises(self, tmp_path) -> None:
        git = ScriptedGit(CommandResult(128, "", "fatal: not a git repository"))
        with pytest.raises(ExecutionError, match="not a git repository"):
            has_uncommitted_changes(tmp_path, git)

    def test_no_tracking_branch(self, tmp_path) -> None:
        git = ScriptedGit(CommandResult(0, "feature\n", ""), CommandResult(1, "", ""))
        assert has_unpushed_commits(tmp_path, git) is False

    def test_ahead_of_remote(self, tmp_path) -> None:
        git = ScriptedGit(
            CommandResult(0, "main\n", ""),
            CommandResult(0, "abc\n", ""),
            CommandResult(0, "3\n", ""),
        )
        assert has_unpushed_commits(tmp_path, git) is True
