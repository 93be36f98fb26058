import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from app import create_app
from config.settings import BaseConfig
from extensions.history_database import HistoryDatabase, history_db
from models.password_history import build_password_history_table, metadata
from services.history_service import PasswordHistoryGate
from services.message_catalog import MessageCatalog
from services.password_policy_service import PasswordPolicyService
from utils.password import password_fingerprint


class FakeHistoryRepository:
    """内存版历史仓储，可模拟查询 / 写入异常。"""

    def __init__(self, fail_on_count=None, fail_on_add=None):
        self.rows = []
        self.count_calls = 0
        self.fail_on_count = fail_on_count
        self.fail_on_add = fail_on_add

    def count(self, uid, fingerprint):
        self.count_calls += 1
        if self.fail_on_count is not None:
            raise self.fail_on_count
        return sum(1 for row in self.rows if row[0] == uid and row[1] == fingerprint)

    def add(self, uid, fingerprint, client_ip, created_at=None):
        if self.fail_on_add is not None:
            raise self.fail_on_add
        self.rows.append((uid, fingerprint, client_ip))


class ConfiguredDatabase(HistoryDatabase):
    @property
    def is_configured(self) -> bool:
        return True


def _store_error():
    return OperationalError("SELECT 1", {}, Exception("Can't connect to MySQL server (timed out)"))


@pytest.fixture()
def app():
    """提供测试用的 Flask 应用（历史库未配置）。"""
    app = create_app("testing")
    yield app
    history_db.init_engine(None)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def history_table():
    return build_password_history_table()


@pytest.fixture()
def history_engine(app, history_table):
    """In-memory SQLite engine bound to the global history database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine, tables=[history_table])
    history_db.init_engine(engine, history_table)
    yield engine
    history_db.init_engine(None)
    engine.dispose()


@pytest.fixture()
def history_rows(history_engine, history_table):
    def _rows():
        with history_engine.connect() as conn:
            return [tuple(row) for row in conn.execute(
                select(history_table.c.uid, history_table.c.hash, history_table.c.ip)
            )]
    return _rows


@pytest.fixture()
def seed_history(history_engine, history_table):
    def _seed(uid, password, ip="10.0.0.1"):
        from datetime import datetime
        with history_engine.begin() as conn:
            conn.execute(history_table.insert().values(
                uid=uid, hash=password_fingerprint(password), date=datetime(2024, 1, 1), ip=ip,
            ))
    return _seed


@pytest.fixture()
def catalog():
    return MessageCatalog(search_dirs=(BaseConfig.BUNDLED_MESSAGES_DIR,), default_locale="en")


@pytest.fixture()
def fake_repository():
    return FakeHistoryRepository()


@pytest.fixture()
def make_repository():
    return FakeHistoryRepository


@pytest.fixture()
def store_error():
    return _store_error


@pytest.fixture()
def make_service(catalog):
    """构造带可替换历史仓储的服务实例。"""
    def _create(repository=None, min_length=None, **kwargs):
        if repository is not None:
            gate = PasswordHistoryGate(ConfiguredDatabase(), repository)
        else:
            gate = PasswordHistoryGate(HistoryDatabase())
        return PasswordPolicyService(catalog=catalog, history_gate=gate, min_length=min_length, **kwargs)
    return _create
