# utils/exceptions.py
from typing import Any, Optional
from werkzeug.exceptions import HTTPException


class BizError(HTTPException):
    code: int  # HTTP 状态码
    message: str  # 业务提示
    data: Optional[Any]  # 附加数据

    def __init__(self, message: str = "Invalid request", code: int = 400, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(description=message)


class PasswordRejected(BizError):
    """密码未通过策略校验；message 为渲染后的完整提示。"""

    def __init__(self, verdict):
        super().__init__(message=verdict.message, code=400, data=verdict.to_dict())
        self.verdict = verdict
