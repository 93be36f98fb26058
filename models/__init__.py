# -*- coding: utf-8 -*-
"""
__init__.py
--------------------------------------------------------------------
汇总导入所有模型，外部模块可简化引用：from models import UserIdentity, Verdict
注意：
- 历史表只是 SQLAlchemy Core 的 Table 定义，表本身由外部系统维护。
"""

from .identity import UserIdentity, ValidationRequest
from .verdict import Violation, Verdict
from .password_history import metadata, build_password_history_table

__all__ = [
    "UserIdentity", "ValidationRequest",
    "Violation", "Verdict",
    "metadata", "build_password_history_table",
]
