# services/message_catalog.py
from __future__ import annotations

import json
import logging
import os
import threading
from typing import Dict, Iterable, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

CATALOG_FILE_TEMPLATE = "messages_{locale}.json"


def format_template(template: str, params: Sequence) -> str:
    """Replace {0}, {1}, ... placeholders; other braces are left untouched."""
    message = template
    for idx, value in enumerate(params):
        message = message.replace("{" + str(idx) + "}", str(value))
    return message


def resolve_locale(
    profile_locale: Optional[str],
    language_hint: Optional[str],
    supported: Iterable[str],
    default: str = "en",
) -> str:
    """
    语言解析顺序：
      1. 用户资料中的语言（取语言部分，如 pt-BR -> pt）
      2. 请求语言提示中包含的已知语言标记
      3. 默认语言
    """
    supported = [code.lower() for code in supported]
    if profile_locale:
        language = profile_locale.replace("_", "-").split("-")[0].strip().lower()
        if language:
            return language
    if language_hint:
        hint = language_hint.lower()
        for code in supported:
            if code != default and code in hint:
                return code
    return default


class MessageCatalog:
    """
    Process-wide, read-through cache of locale -> {key: template}.

    Entries are loaded lazily and never evicted. Directories are searched in
    order, so an external override directory can shadow the bundled catalogs.
    """

    def __init__(self, search_dirs: Sequence[Optional[str]] = (), default_locale: str = "en"):
        self.search_dirs = [d for d in search_dirs if d]
        self.default_locale = default_locale
        self._cache: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Mapping) -> "MessageCatalog":
        return cls(
            search_dirs=(config.get("MESSAGES_DIR"), config.get("BUNDLED_MESSAGES_DIR")),
            default_locale=config.get("DEFAULT_LOCALE", "en"),
        )

    def messages(self, locale: str) -> Dict[str, str]:
        cached = self._cache.get(locale)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._cache.get(locale)
            if cached is None:
                # 找不到的语言缓存为空表，按键回退到默认语言
                cached = self._load(locale) or {}
                self._cache[locale] = cached
        return cached

    def _load(self, locale: str) -> Optional[Dict[str, str]]:
        filename = CATALOG_FILE_TEMPLATE.format(locale=locale)
        for directory in self.search_dirs:
            path = os.path.join(directory, filename)
            if not os.path.isfile(path):
                continue
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as exc:
                logger.error("Error loading messages from %s: %s", path, exc)
                continue
            if not isinstance(data, dict):
                logger.error("Message catalog %s is not a JSON object", path)
                continue
            logger.info("Loaded messages from %s", path)
            return {str(k): str(v) for k, v in data.items()}
        logger.warning("Message catalog not found for locale %s", locale)
        return None

    def get(self, locale: str, key: str, default: Optional[str] = None) -> str:
        """Look a key up in locale, then the default locale, then fall back to default or the key itself."""
        template = self.messages(locale).get(key)
        if template is None and locale != self.default_locale:
            template = self.messages(self.default_locale).get(key)
        if template is None:
            return default if default is not None else key
        return template

    def render(self, locale: str, key: str, *params) -> str:
        return format_template(self.get(locale, key), params)
