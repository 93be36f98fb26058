"""Data access helpers for the external password history table."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, insert, select

from extensions.history_database import HistoryDatabase, history_db


class PasswordHistoryRepository:
    """
    仅做持久化读写，不做策略判断。
    连接 / 查询异常原样抛出，由上层按读写策略处理。
    """

    def __init__(self, database: HistoryDatabase = history_db) -> None:
        self.database = database

    def count(self, uid: str, fingerprint: str) -> int:
        table = self.database.table
        query = (
            select(func.count())
            .select_from(table)
            .where(table.c.uid == uid, table.c.hash == fingerprint)
        )
        with self.database.connect() as conn:
            result = conn.execute(query).scalar()
        return int(result or 0)

    def add(self, uid: str, fingerprint: str, client_ip: str, created_at: datetime | None = None) -> None:
        table = self.database.table
        stmt = insert(table).values(
            uid=uid,
            hash=fingerprint,
            date=created_at if created_at is not None else func.now(),
            ip=client_ip,
        )
        with self.database.begin() as conn:
            conn.execute(stmt)
