# models/verdict.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from constants.password_rules import ViolationKind


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    params: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class Verdict:
    """
    单次校验结果：
    - accepted=True 时 message 为 None
    - accepted=False 时 message = header + 各行错误（按分隔符拼接）
    """

    accepted: bool
    header: Optional[str] = None
    lines: Tuple[str, ...] = ()
    violations: Tuple[Violation, ...] = field(default=(), compare=False)
    separator: str = field(default="<br/>", compare=False)

    @classmethod
    def accept(cls) -> "Verdict":
        return cls(accepted=True)

    @classmethod
    def reject(cls, header: str, lines, violations=(), separator: str = "<br/>") -> "Verdict":
        return cls(
            accepted=False,
            header=header,
            lines=tuple(lines),
            violations=tuple(violations),
            separator=separator,
        )

    @property
    def message(self) -> Optional[str]:
        if self.accepted:
            return None
        return self.separator.join([self.header or "", *self.lines])

    def to_dict(self) -> Dict[str, Any]:
        if self.accepted:
            return {"valid": True}
        return {
            "valid": False,
            "errors": list(self.lines),
            "violations": [v.kind.name.lower() for v in self.violations],
        }
