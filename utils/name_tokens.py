import re
from typing import Iterable, List, Optional, Sequence

from config.settings import DEFAULT_STOP_WORDS

# 只认 ASCII 字母、空白与数字
NON_LETTER_RE = re.compile(r"[^a-zA-Z\s]", re.ASCII)
SINGLE_LETTER_RE = re.compile(r"\b\w\b\s?", re.ASCII)
WHITESPACE_RE = re.compile(r"\s+", re.ASCII)
DIGIT_RUN_RE = re.compile(r"\d{4,}", re.ASCII)


def tokenize_full_name(name: Optional[str], stop_words: Iterable[str] = DEFAULT_STOP_WORDS) -> List[str]:
    """
    将全名拆分为禁止出现在密码中的词：
      1. 去掉非 ASCII 字母与空白的字符（重音字母直接删除，不做归一化）
      2. 去掉连接词（da/das/de/do/dos，整词、不区分大小写）
      3. 去掉单字母词
      4. 合并空白并按空白切分
    """
    if not name:
        return []
    clean = NON_LETTER_RE.sub("", name)
    for word in stop_words:
        clean = re.sub(rf"\b{re.escape(word)}\b", "", clean, flags=re.IGNORECASE | re.ASCII)
    clean = SINGLE_LETTER_RE.sub("", clean)
    clean = WHITESPACE_RE.sub(" ", clean.strip())
    return [word for word in clean.split(" ") if word]


def find_digit_run(username: Optional[str]) -> Optional[str]:
    """Return the first run of 4+ consecutive digits in the username."""
    if not username:
        return None
    match = DIGIT_RUN_RE.search(username)
    return match.group(0) if match else None


def extract_full_name(sources: Sequence[Optional[str]]) -> str:
    """sources = (cn, displayName, firstName, lastName)"""
    cn, display_name, first_name, last_name = (list(sources) + [None] * 4)[:4]
    if cn:
        return cn
    if display_name:
        return display_name
    return " ".join(part for part in (first_name, last_name) if part)


def build_forbidden_tokens(
    username: Optional[str],
    full_name_sources: Sequence[Optional[str]],
    stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
) -> List[str]:
    """
    Ordered, de-duplicated, lowercased forbidden tokens:
    digit run from the username first, then the username, then name words.
    """
    candidates: List[str] = []
    digit_run = find_digit_run(username)
    if digit_run:
        candidates.append(digit_run)
    if username:
        candidates.append(username)
    candidates.extend(tokenize_full_name(extract_full_name(full_name_sources), stop_words))

    tokens: List[str] = []
    for candidate in candidates:
        token = candidate.lower()
        if token and token not in tokens:
            tokens.append(token)
    return tokens
