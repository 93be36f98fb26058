# services/history_service.py
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from extensions.history_database import HistoryDatabase, history_db
from repositories.password_history_repository import PasswordHistoryRepository
from utils.password import password_fingerprint

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT_IP = "unknown"


class HistoryOperation(str, Enum):
    CHECK = "check"
    RECORD = "record"


class OnStoreError(str, Enum):
    TREAT_AS_REUSED = "treat_as_reused"  # 读失败：拒绝修改（安全优先）
    LOG_AND_SKIP = "log_and_skip"        # 写失败：记录日志，不影响已通过的修改


STORE_ERROR_POLICY = {
    HistoryOperation.CHECK: OnStoreError.TREAT_AS_REUSED,
    HistoryOperation.RECORD: OnStoreError.LOG_AND_SKIP,
}

# 网络超时在 PyMySQL 中表现为 OSError，统一按存储错误处理
STORE_ERRORS = (SQLAlchemyError, OSError)


class PasswordHistoryGate:
    """
    密码历史检查 / 记录：
    - 未配置历史库时全部跳过（检查视为未重复，记录直接忽略）
    - 检查在所有规则之前执行，记录只在全部规则通过后执行
    """

    def __init__(self, database: HistoryDatabase = history_db, repository=None):
        self.database = database
        # 默认仓储与开关检查使用同一个历史库
        self.repository = repository if repository is not None else PasswordHistoryRepository(database)

    @property
    def enabled(self) -> bool:
        return self.database.is_configured

    def is_reused(self, user_id: str, password: str) -> bool:
        if not self.enabled:
            logger.info("Password history database not configured, skipping check")
            return False

        fingerprint = password_fingerprint(password)
        if fingerprint is None:
            logger.error("Failed to hash password, skipping history check")
            return False

        try:
            return self.repository.count(user_id, fingerprint) > 0
        except STORE_ERRORS as exc:
            return self._on_store_error(HistoryOperation.CHECK, user_id, exc)

    def record(self, user_id: str, password: str, client_ip: Optional[str] = None) -> None:
        if not self.enabled:
            logger.info("Password history database not configured, skipping storage")
            return

        fingerprint = password_fingerprint(password)
        if fingerprint is None:
            logger.error("Failed to hash password for storage")
            return

        # 写入阶段的任何异常都不能影响已通过的修改
        try:
            self.repository.add(user_id, fingerprint, client_ip or UNKNOWN_CLIENT_IP)
        except Exception as exc:
            self._on_store_error(HistoryOperation.RECORD, user_id, exc)
            return
        logger.info("Password history stored for user: %s", user_id)

    @staticmethod
    def _on_store_error(operation: HistoryOperation, user_id: str, exc: Exception) -> bool:
        policy = STORE_ERROR_POLICY[operation]
        logger.error("Error during password history %s for user %s (%s): %s",
                     operation.value, user_id, policy.value, exc)
        return policy is OnStoreError.TREAT_AS_REUSED
