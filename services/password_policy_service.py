# services/password_policy_service.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

from config.settings import DEFAULT_STOP_WORDS, parse_min_length
from constants.password_rules import HEADER_KEY, POLICY_CONFIG_TYPE, POLICY_DISPLAY_NAME, POLICY_ID
from models.identity import UserIdentity, ValidationRequest
from models.verdict import Verdict
from services.history_service import PasswordHistoryGate
from services.message_catalog import MessageCatalog, resolve_locale
from services.report_builder import ReportBuilder
from services.rule_engine import RuleContext, evaluate
from utils.name_tokens import build_forbidden_tokens

logger = logging.getLogger(__name__)

EXTENSION_KEY = "password_policy"


class PasswordPolicyService:
    """
    密码策略校验入口：
      - 历史检查 -> 长度 -> 禁用词 -> 复杂度 -> 非法字符
      - 全部通过后写入历史记录并返回 Accepted
      - 任何异常都不会抛给调用方，最坏情况返回通用拒绝信息
    """

    def __init__(
        self,
        catalog: MessageCatalog,
        history_gate: Optional[PasswordHistoryGate] = None,
        min_length=None,
        stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
        supported_locales: Iterable[str] = ("en", "pt"),
        default_locale: str = "en",
        line_separator: str = "<br/>",
    ):
        self.catalog = catalog
        self.history_gate = history_gate or PasswordHistoryGate()
        self.min_length = parse_min_length(min_length)
        self.stop_words = tuple(stop_words)
        self.supported_locales = tuple(supported_locales)
        self.default_locale = default_locale
        self.report_builder = ReportBuilder(catalog, line_separator)

    @classmethod
    def from_config(cls, config, catalog: Optional[MessageCatalog] = None, history_gate=None) -> "PasswordPolicyService":
        return cls(
            catalog=catalog or MessageCatalog.from_config(config),
            history_gate=history_gate,
            min_length=config.get("PASSWORD_MIN_LENGTH"),
            stop_words=config.get("PASSWORD_NAME_STOP_WORDS", DEFAULT_STOP_WORDS),
            supported_locales=config.get("SUPPORTED_LOCALES", ("en", "pt")),
            default_locale=config.get("DEFAULT_LOCALE", "en"),
            line_separator=config.get("PASSWORD_REPORT_LINE_SEPARATOR", "<br/>"),
        )

    def describe(self) -> dict:
        return {
            "id": POLICY_ID,
            "display_name": POLICY_DISPLAY_NAME,
            "config_type": POLICY_CONFIG_TYPE,
            "default_value": str(parse_min_length(None)),
            "min_length": self.min_length,
            "history_enabled": self.history_gate.enabled,
        }

    def resolve_locale(self, identity_locale: Optional[str], language_hint: Optional[str]) -> str:
        return resolve_locale(identity_locale, language_hint, self.supported_locales, self.default_locale)

    def validate(
        self,
        identity: Optional[UserIdentity],
        password: Optional[str],
        client_ip: Optional[str] = None,
        language_hint: Optional[str] = None,
    ) -> Verdict:
        request = ValidationRequest.from_identity(identity, password)
        locale = self.resolve_locale(request.locale, language_hint)
        try:
            return self._validate(request, locale, client_ip)
        except Exception:
            logger.exception("Unexpected error while validating password for user %s", request.username)
            return Verdict.reject(
                header=self.catalog.get(locale, HEADER_KEY),
                lines=(),
                separator=self.report_builder.line_separator,
            )

    def _validate(self, request: ValidationRequest, locale: str, client_ip: Optional[str]) -> Verdict:
        logger.info("Validating password for user: %s", request.username)
        ctx = RuleContext(
            password=request.password,
            min_length=self.min_length,
            forbidden_tokens=build_forbidden_tokens(request.username, request.full_name_sources, self.stop_words),
            username=request.username,
            history_check=self.history_gate.is_reused if request.has_user else None,
        )
        violations = evaluate(ctx)

        def _record():
            if request.has_user:
                self.history_gate.record(request.username, request.password, client_ip)

        verdict = self.report_builder.build(locale, violations, on_accepted=_record)
        if not verdict.accepted:
            logger.info("Password rejected for user %s: %s", request.username,
                        ", ".join(v.kind.name for v in verdict.violations))
        return verdict
