# config/settings.py
import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
load_dotenv(os.path.join(BASE_DIR, ".env"))  # 自动加载环境变量

DEFAULT_MIN_LENGTH = 12
DEFAULT_STOP_WORDS = ("da", "das", "de", "do", "dos")


def _as_list(val, default=()):
    if val is None or not str(val).strip():
        return tuple(default)
    return tuple(item.strip() for item in str(val).split(",") if item.strip())


def parse_min_length(value) -> int:
    """Parse the configured minimum length; absent, invalid or non-positive values fall back to 12."""
    if value is None:
        return DEFAULT_MIN_LENGTH
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return DEFAULT_MIN_LENGTH
    return parsed if parsed > 0 else DEFAULT_MIN_LENGTH


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    # 日志相关
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "./logs")
    LOG_JSON = os.getenv("LOG_JSON", "1") == "1"  # 是否 JSON 格式
    LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", 5 * 1024 * 1024))
    LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", 5))
    APP_NAME = os.getenv("APP_NAME", "password-policy-service")

    # ========= 密码策略 =========
    # 最小长度（字符串，由 parse_min_length 解析）
    PASSWORD_MIN_LENGTH = os.getenv("PASSWORD_MIN_LENGTH", str(DEFAULT_MIN_LENGTH))
    # 姓名中忽略的连接词
    PASSWORD_NAME_STOP_WORDS = _as_list(os.getenv("PASSWORD_NAME_STOP_WORDS"), DEFAULT_STOP_WORDS)
    # 错误信息行分隔符
    PASSWORD_REPORT_LINE_SEPARATOR = os.getenv("PASSWORD_REPORT_LINE_SEPARATOR", "<br/>")

    # ========= 密码历史库（MySQL） =========
    PASSWORD_HISTORY_DB_HOST = os.getenv("PASSWORD_HISTORY_DB_HOST")
    PASSWORD_HISTORY_DB_PORT = os.getenv("PASSWORD_HISTORY_DB_PORT", "3306")
    PASSWORD_HISTORY_DB_NAME = os.getenv("PASSWORD_HISTORY_DB_NAME")
    PASSWORD_HISTORY_DB_USER = os.getenv("PASSWORD_HISTORY_DB_USER")
    PASSWORD_HISTORY_DB_PASSWORD = os.getenv("PASSWORD_HISTORY_DB_PASSWORD")
    # 连接 / 读写超时（秒）
    PASSWORD_HISTORY_DB_TIMEOUT = int(os.getenv("PASSWORD_HISTORY_DB_TIMEOUT", 5))
    PASSWORD_HISTORY_TABLE = os.getenv("PASSWORD_HISTORY_TABLE", "hashes")
    PASSWORD_HISTORY_SCHEMA = os.getenv("PASSWORD_HISTORY_SCHEMA") or None

    # ========= 多语言 =========
    # 外部消息目录优先于内置 i18n 目录
    MESSAGES_DIR = os.getenv("MESSAGES_DIR", "/opt/password-policy/messages")
    BUNDLED_MESSAGES_DIR = os.path.join(BASE_DIR, "i18n")
    DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "en")
    SUPPORTED_LOCALES = _as_list(os.getenv("SUPPORTED_LOCALES"), ("en", "pt"))

    # =========================================


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    LOG_JSON = False
    LOG_DIR = os.getenv("TEST_LOG_DIR")  # 为空时只输出到控制台
    PASSWORD_MIN_LENGTH = str(DEFAULT_MIN_LENGTH)
    PASSWORD_NAME_STOP_WORDS = DEFAULT_STOP_WORDS
    MESSAGES_DIR = None
    DEFAULT_LOCALE = "en"
    SUPPORTED_LOCALES = ("en", "pt")
    # 测试中由 fixture 注入 SQLite 引擎
    PASSWORD_HISTORY_DB_HOST = None
    PASSWORD_HISTORY_DB_NAME = None
    PASSWORD_HISTORY_DB_USER = None
    PASSWORD_HISTORY_DB_PASSWORD = None


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(config_name):
    return config_map.get(config_name, DevelopmentConfig)
