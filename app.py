# app.py
import os

from flask import Flask
from config.settings import get_config
from extensions.history_database import history_db
from extensions.logger import init_logger
from controllers.password_policy_controller import password_policy_bp
from services.history_service import PasswordHistoryGate
from services.message_catalog import MessageCatalog
from services.password_policy_service import EXTENSION_KEY, PasswordPolicyService
from utils.response import json_response
from utils.exceptions import BizError


def create_app(config_name=None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name or os.getenv("APP_ENV", "development")))

    # 初始化扩展
    init_logger(app)
    history_db.init_app(app)

    # 消息目录缓存：进程级共享，按语言懒加载
    catalog = MessageCatalog.from_config(app.config)
    app.extensions[EXTENSION_KEY] = PasswordPolicyService.from_config(
        app.config,
        catalog=catalog,
        history_gate=PasswordHistoryGate(history_db),
    )
    app.logger.info(
        "Password policy ready (min_length=%s, history_enabled=%s)",
        app.extensions[EXTENSION_KEY].min_length,
        history_db.is_configured,
    )

    # 密码策略校验
    app.register_blueprint(password_policy_bp)

    # 错误处理
    @app.errorhandler(404)
    def not_found(e):
        return json_response(message="Not found", code=404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return json_response(message="Method not allowed", code=405)

    @app.errorhandler(BizError)
    def _biz_err(e: BizError):
        return json_response(code=e.code, message=e.message, data=e.data)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", 8000)),
        debug=app.config.get("DEBUG", False),
    )
