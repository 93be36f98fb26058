"""Fixed-order password rule pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from constants.password_rules import (
    DISALLOWED_CHARACTERS,
    GROUP_CHARACTERS,
    MIN_GROUPS_REQUIRED,
    CharacterGroup,
    RuleKind,
    ViolationKind,
)
from models.verdict import Violation

PIPELINE: tuple[RuleKind, ...] = (
    RuleKind.HISTORY_REUSE,
    RuleKind.MIN_LENGTH,
    RuleKind.FORBIDDEN_WORD,
    RuleKind.COMPLEXITY,
    RuleKind.DISALLOWED_CHARS,
)


@dataclass(frozen=True)
class RuleContext:
    password: Optional[str]
    min_length: int
    forbidden_tokens: Sequence[str] = ()
    username: Optional[str] = None
    # (username, password) -> bool；为 None 时跳过历史检查
    history_check: Optional[Callable[[str, str], bool]] = None


def check_history(ctx: RuleContext) -> Optional[Violation]:
    if ctx.history_check is None or not ctx.username:
        return None
    if ctx.history_check(ctx.username, ctx.password):
        return Violation(ViolationKind.HISTORY_REUSE)
    return None


def check_min_length(ctx: RuleContext) -> Optional[Violation]:
    actual = len(ctx.password)
    if actual < ctx.min_length:
        return Violation(ViolationKind.MIN_LENGTH, (ctx.min_length, actual))
    return None


def check_forbidden_words(ctx: RuleContext) -> Optional[Violation]:
    lowered = ctx.password.lower()
    for token in ctx.forbidden_tokens:
        if token and token.lower() in lowered:
            # 只报告第一个命中的词
            return Violation(ViolationKind.FORBIDDEN_WORD, (token,))
    return None


def classify_groups(password: str) -> tuple[List[CharacterGroup], List[CharacterGroup]]:
    """Return (found, missing) character groups in canonical order."""
    chars = set(password)
    found: List[CharacterGroup] = []
    missing: List[CharacterGroup] = []
    for group, members in GROUP_CHARACTERS.items():
        (found if chars & members else missing).append(group)
    return found, missing


def check_complexity(ctx: RuleContext) -> Optional[Violation]:
    found, missing = classify_groups(ctx.password)
    if len(found) < MIN_GROUPS_REQUIRED:
        return Violation(ViolationKind.COMPLEXITY, (tuple(found), tuple(missing)))
    return None


def find_disallowed_characters(password: str) -> List[str]:
    offending: List[str] = []
    for char in password:
        if char in DISALLOWED_CHARACTERS and char not in offending:
            offending.append(char)
    return offending


def check_disallowed_characters(ctx: RuleContext) -> Optional[Violation]:
    offending = find_disallowed_characters(ctx.password)
    if offending:
        return Violation(ViolationKind.DISALLOWED_CHARS, tuple(offending))
    return None


RULE_CHECKS: Dict[RuleKind, Callable[[RuleContext], Optional[Violation]]] = {
    RuleKind.HISTORY_REUSE: check_history,
    RuleKind.MIN_LENGTH: check_min_length,
    RuleKind.FORBIDDEN_WORD: check_forbidden_words,
    RuleKind.COMPLEXITY: check_complexity,
    RuleKind.DISALLOWED_CHARS: check_disallowed_characters,
}


def evaluate(ctx: RuleContext) -> List[Violation]:
    """
    Run every rule in PIPELINE order and collect the violations.

    A missing password short-circuits to a single PASSWORD_REQUIRED violation
    without touching the history store.
    """
    if ctx.password is None:
        return [Violation(ViolationKind.PASSWORD_REQUIRED)]

    violations: List[Violation] = []
    for kind in PIPELINE:
        violation = RULE_CHECKS[kind](ctx)
        if violation is not None:
            violations.append(violation)
    return violations
