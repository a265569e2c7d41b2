"""集中配置管理

配置目录 .basecamp/ 下两份文件:
  - config.yaml:     git 设置（github_url）与工具选项（parallel、cleanup_failed）
  - codebases.yaml:  codebase -> 代码仓列表

BasecampConfig 同时实现回滚所需的 ConfigStore 协议。
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from basecamp.core.exceptions import (
    ConfigError,
    ConfigPersistError,
    InvalidRemoteUrlError,
)
from basecamp.core.registry import CodebaseRegistry
from basecamp.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".basecamp"
CONFIG_FILE_NAME = "config.yaml"
CODEBASES_FILE_NAME = "codebases.yaml"

DEFAULT_PARALLEL = 4


@dataclass
class GitSettings:
    """config.yaml 内容"""

    github_url: str = ""
    parallel: int = DEFAULT_PARALLEL
    # 克隆失败后删除本次创建的残留目录
    cleanup_failed: bool = True

    # 放不到字段里的配置项，原样写回
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GitSettings:
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        settings = cls(**matched)
        settings.extra = extra
        settings.validate()
        return settings

    def validate(self) -> None:
        """字段类型校验，不合法时抛 ConfigError"""
        if not isinstance(self.github_url, str):
            raise ConfigError(f"github_url 必须是字符串: {self.github_url!r}")
        # bool 是 int 的子类，需单独排除
        if isinstance(self.parallel, bool) or not isinstance(self.parallel, int) or self.parallel < 1:
            raise ConfigError(f"parallel 必须是不小于 1 的整数: {self.parallel!r}")
        if not isinstance(self.cleanup_failed, bool):
            raise ConfigError(f"cleanup_failed 必须是 true 或 false: {self.cleanup_failed!r}")

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra")
        return {**data, **extra}


def resolve_root(root: str | Path | None = None) -> Path:
    """配置根目录：显式参数 > BASECAMP_ROOT > 当前目录"""
    if root:
        return Path(root)
    return Path(os.getenv("BASECAMP_ROOT", "."))


def validate_remote_url(url: str) -> str:
    if not url.startswith(("https://", "git@")):
        raise InvalidRemoteUrlError(url)
    return url


class BasecampConfig:
    """basecamp 配置（git 设置 + codebase 注册表）"""

    def __init__(self, root: str | Path | None = None, settings: GitSettings | None = None) -> None:
        self.root = resolve_root(root)
        self.settings = settings or GitSettings()
        self.codebases = CodebaseRegistry(self.codebases_path)

    # ---- 路径 ----

    @property
    def config_dir(self) -> Path:
        return self.root / CONFIG_DIR_NAME

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    @property
    def codebases_path(self) -> Path:
        return self.config_dir / CODEBASES_FILE_NAME

    # ---- 加载 / 持久化 ----

    @classmethod
    def exists_at(cls, root: str | Path | None = None) -> bool:
        base = resolve_root(root) / CONFIG_DIR_NAME
        return (base / CONFIG_FILE_NAME).exists() or (base / CODEBASES_FILE_NAME).exists()

    @classmethod
    def load(cls, root: str | Path | None = None) -> BasecampConfig:
        """从配置目录加载；config.yaml 不存在时抛 ConfigError"""
        base = resolve_root(root)
        config_path = base / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if not config_path.exists():
            raise ConfigError(f"配置文件不存在: {config_path}（请先执行 'basecamp init'）")
        try:
            settings = GitSettings.from_dict(load_yaml(config_path))
            config = cls(base, settings)
        except (yaml.YAMLError, ValueError, TypeError) as e:
            raise ConfigError(f"配置文件无效: {e}") from e
        logger.info("配置已加载: %s", config.config_dir)
        return config

    def persist(self) -> None:
        """写回 config.yaml 与 codebases.yaml

        两份文件分别写入，任一失败都抛 ConfigPersistError。
        """
        errors: list[str] = []
        try:
            save_yaml(self.config_path, self.settings.to_dict())
        except (OSError, yaml.YAMLError) as e:
            errors.append(f"{self.config_path}: {e}")
        try:
            self.codebases.save()
        except (OSError, yaml.YAMLError) as e:
            errors.append(f"{self.codebases_path}: {e}")
        if errors:
            raise ConfigPersistError("配置写入失败: " + "; ".join(errors))
        logger.info("配置已保存: %s", self.config_dir)

    # ---- git 设置 ----

    @property
    def remote_base_url(self) -> str:
        return self.settings.github_url

    def has_remote_base_url(self) -> bool:
        return bool(self.settings.github_url)

    def set_remote_base_url(self, url: str) -> None:
        self.settings.github_url = validate_remote_url(url)

    # ---- codebase 操作 ----

    def list_codebases(self) -> list[str]:
        return self.codebases.names()

    def list_repositories(self, codebase: str) -> list[str]:
        return self.codebases.repositories(codebase)

    def add_repositories(self, codebase: str, names: list[str]) -> list[str]:
        return self.codebases.add(codebase, names)

    def remove_repositories(self, codebase: str, names: list[str]) -> None:
        self.codebases.remove(codebase, names)

    def remove_codebase(self, codebase: str) -> None:
        self.codebases.drop(codebase)
