# models/password_history.py
from typing import Optional

from sqlalchemy import Column, DateTime, MetaData, String, Table

metadata = MetaData()


def build_password_history_table(name: str = "hashes", schema: Optional[str] = None) -> Table:
    """
    外部密码历史表（由旧系统维护）：
    - uid: 用户名
    - hash: 密码指纹（sha512 -> base64 -> hex）
    - date: 写入时间
    - ip: 客户端地址
    """
    key = f"{schema}.{name}" if schema else name
    if key in metadata.tables:
        return metadata.tables[key]
    return Table(
        name,
        metadata,
        Column("uid", String(255), nullable=False, index=True),
        Column("hash", String(255), nullable=False),
        Column("date", DateTime, nullable=False),
        Column("ip", String(64), nullable=False),
        schema=schema,
    )
