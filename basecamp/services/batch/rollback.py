"""回滚 — "添加后安装" 流程中把克隆失败的代码仓从配置中移除

使配置恢复到从未请求过这些失败代码仓时的状态。
移除或写回失败只报告，不会触发重新克隆。
"""

from __future__ import annotations

import logging

from basecamp.core.exceptions import ConfigLookupError, ConfigPersistError
from basecamp.core.models import BatchResult, RollbackResult
from basecamp.core.protocols import ConfigStore

logger = logging.getLogger(__name__)


class RollbackCoordinator:
    """根据批次结果回滚配置"""

    def reconcile(self, config: ConfigStore, codebase: str, batch: BatchResult) -> RollbackResult:
        failed = batch.failed_names
        result = RollbackResult(codebase=codebase)
        if not failed:
            return result

        logger.info("回滚 codebase '%s' 中克隆失败的代码仓: %s", codebase, ", ".join(failed))
        try:
            config.remove_repositories(codebase, failed)
        except ConfigLookupError as e:
            logger.error("回滚时移除代码仓失败: %s", e)
            result.error = str(e)
            return result

        try:
            config.persist()
        except ConfigPersistError as e:
            # 内存已修改但磁盘未更新
            logger.error("回滚后写回配置失败，内存与磁盘配置不一致: %s", e)
            result.error = str(e)
            result.diverged = True
            return result

        result.removed = list(failed)
        logger.info("已从 codebase '%s' 移除: %s", codebase, ", ".join(failed))
        return result
