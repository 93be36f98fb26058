# utils/password.py
import base64
import hashlib
import logging
from typing import Optional

logger = logging.getLogger(__name__)

FINGERPRINT_ALGORITHM = "sha512"
FINGERPRINT_ENCODING = "utf-8"


def password_fingerprint(plain: str, algorithm: str = FINGERPRINT_ALGORITHM) -> Optional[str]:
    """
    与旧系统（PHP）的历史记录格式保持一致：
        bin2hex(base64_encode(hash('sha512', $password, true)))
    摘要算法不可用时返回 None，调用方视为“无法检查 / 记录历史”。
    """
    try:
        digest = hashlib.new(algorithm, plain.encode(FINGERPRINT_ENCODING)).digest()
    except ValueError as exc:
        logger.error("Error hashing password with %s: %s", algorithm, exc)
        return None
    return base64.b64encode(digest).hex()
