from __future__ import annotations

import string
from enum import Enum


class RuleKind(str, Enum):
    """
    密码策略规则（封闭集合），按此顺序执行：
    - HISTORY_REUSE 最先执行，违规时排在报告第一行
    - 其余规则互不短路
    """

    HISTORY_REUSE = "history_reuse"
    MIN_LENGTH = "min_length"
    FORBIDDEN_WORD = "forbidden_word"
    COMPLEXITY = "complexity"
    DISALLOWED_CHARS = "disallowed_chars"


class ViolationKind(str, Enum):
    """Violation kinds; the value is the message catalog key."""

    PASSWORD_REQUIRED = "invalidPasswordNull"
    HISTORY_REUSE = "invalidPasswordHistory"
    MIN_LENGTH = "invalidPasswordMinLength"
    FORBIDDEN_WORD = "invalidPasswordContainsBadWord"
    COMPLEXITY = "invalidPasswordComplexity"
    DISALLOWED_CHARS = "invalidPasswordInvalidChars"


class CharacterGroup(str, Enum):
    DIGITS = "passwordGroupDigits"
    LOWERCASE = "passwordGroupLowercase"
    UPPERCASE = "passwordGroupUppercase"
    SYMBOLS = "passwordGroupSymbols"


SYMBOLS = "@!#$%&()=.:,;*<>"

GROUP_CHARACTERS: dict[CharacterGroup, frozenset[str]] = {
    CharacterGroup.DIGITS: frozenset(string.digits),
    CharacterGroup.LOWERCASE: frozenset(string.ascii_lowercase),
    CharacterGroup.UPPERCASE: frozenset(string.ascii_uppercase),
    CharacterGroup.SYMBOLS: frozenset(SYMBOLS),
}

# 至少命中 4 组中的 3 组
MIN_GROUPS_REQUIRED = 3

# 引号、带重音的拉丁字母、欧元符号、加号、连字符（产品要求，不做 Unicode 归一化）
DISALLOWED_CHARACTERS = "\"'áàãâÁÀÃÂéèêÉÈÊíìîÍÌÎóòõôÓÒÕÔúùûÚÙÛçÇ€+-"

# Catalog keys used only while rendering
HEADER_KEY = "invalidPasswordRequirements"
COMPLEXITY_FOUND_KEY = "invalidPasswordComplexityFound"
COMPLEXITY_MISSING_KEY = "invalidPasswordComplexityMissing"
GROUP_NONE_KEY = "passwordGroupNone"

# 英文默认展示名（目录缺失时使用）
GROUP_LABELS_EN: dict[str, str] = {
    CharacterGroup.DIGITS.value: "digits (0-9)",
    CharacterGroup.LOWERCASE.value: "lowercase (a-z)",
    CharacterGroup.UPPERCASE.value: "uppercase (A-Z)",
    CharacterGroup.SYMBOLS.value: f"symbols ({SYMBOLS})",
    GROUP_NONE_KEY: "none",
}

POLICY_ID = "custom-password-policy"
POLICY_DISPLAY_NAME = "Custom Password Policy"
POLICY_CONFIG_TYPE = "int"
