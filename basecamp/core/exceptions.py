"""统一异常体系

所有业务异常继承 BasecampError，CLI 层据此输出友好提示。
单个代码仓的克隆失败不走异常，而是记录在 BatchResult 中。
"""

from __future__ import annotations


class BasecampError(Exception):
    """basecamp 基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(BasecampError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ConfigLookupError(BasecampError):
    """配置中找不到指定的 codebase 或代码仓"""

    code = "CONFIG_LOOKUP_ERROR"


class CodebaseNotFoundError(ConfigLookupError):
    """指定的 codebase 不存在"""

    code = "CODEBASE_NOT_FOUND"

    def __init__(self, codebase: str) -> None:
        super().__init__(f"Codebase '{codebase}' 不存在")
        self.codebase = codebase


class RepositoryNotFoundError(ConfigLookupError):
    """codebase 中不存在指定的代码仓"""

    code = "REPOSITORY_NOT_FOUND"

    def __init__(self, repository: str, codebase: str) -> None:
        super().__init__(f"代码仓 '{repository}' 不在 codebase '{codebase}' 中")
        self.repository = repository
        self.codebase = codebase


class ConfigPersistError(BasecampError):
    """配置写回磁盘失败"""

    code = "CONFIG_PERSIST_ERROR"


class RemoteUrlNotConfiguredError(BasecampError):
    """尚未配置远程基础地址"""

    code = "REMOTE_URL_NOT_CONFIGURED"

    def __init__(self) -> None:
        super().__init__("尚未配置 GitHub 地址，请先执行 'basecamp init'")


class InvalidRemoteUrlError(BasecampError):
    """远程基础地址格式不合法"""

    code = "INVALID_REMOTE_URL"

    def __init__(self, url: str) -> None:
        super().__init__(f"非法的 GitHub 地址: {url}（须以 https:// 或 git@ 开头）")
        self.url = url


class AuthExhaustedError(BasecampError):
    """凭据候选已全部尝试仍未通过认证"""

    code = "AUTH_EXHAUSTED"


class TransportError(BasecampError):
    """git 传输层失败（网络、协议或认证）"""

    code = "TRANSPORT_ERROR"


class ExecutionError(BasecampError):
    """命令执行或批处理内部状态异常"""

    code = "EXECUTION_ERROR"


class UncommittedChangesError(BasecampError):
    """本地代码仓存在未提交的修改"""

    code = "UNCOMMITTED_CHANGES"

    def __init__(self, path: str) -> None:
        super().__init__(f"代码仓 '{path}' 存在未提交的修改")
        self.path = path


class UnpushedCommitsError(BasecampError):
    """本地代码仓存在未推送的提交"""

    code = "UNPUSHED_COMMITS"

    def __init__(self, path: str) -> None:
        super().__init__(f"代码仓 '{path}' 存在未推送的提交")
        self.path = path


class ValidationError(BasecampError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"
