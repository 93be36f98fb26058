# services/report_builder.py
from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from constants.password_rules import (
    COMPLEXITY_FOUND_KEY,
    COMPLEXITY_MISSING_KEY,
    GROUP_LABELS_EN,
    GROUP_NONE_KEY,
    HEADER_KEY,
    ViolationKind,
)
from models.verdict import Verdict, Violation
from services.message_catalog import MessageCatalog

LIST_SEPARATOR = ", "


class ReportBuilder:
    """Render violations into a localized Verdict."""

    def __init__(self, catalog: MessageCatalog, line_separator: str = "<br/>"):
        self.catalog = catalog
        self.line_separator = line_separator

    def _group_label(self, locale: str, key: str) -> str:
        return self.catalog.get(locale, key, default=GROUP_LABELS_EN.get(key, key))

    def _join_groups(self, locale: str, groups) -> str:
        if not groups:
            return self._group_label(locale, GROUP_NONE_KEY)
        return LIST_SEPARATOR.join(self._group_label(locale, g.value) for g in groups)

    def render_violation(self, locale: str, violation: Violation) -> List[str]:
        kind = violation.kind
        if kind is ViolationKind.COMPLEXITY:
            found, missing = violation.params
            return [
                self.catalog.render(locale, kind.value),
                self.catalog.render(locale, COMPLEXITY_FOUND_KEY, self._join_groups(locale, found)),
                self.catalog.render(locale, COMPLEXITY_MISSING_KEY, self._join_groups(locale, missing)),
            ]
        if kind is ViolationKind.DISALLOWED_CHARS:
            return [self.catalog.render(locale, kind.value, LIST_SEPARATOR.join(violation.params))]
        return [self.catalog.render(locale, kind.value, *violation.params)]

    def build(
        self,
        locale: str,
        violations: Sequence[Violation],
        on_accepted: Optional[Callable[[], None]] = None,
    ) -> Verdict:
        """Accepted verdicts run on_accepted (history record) before returning."""
        if not violations:
            if on_accepted is not None:
                on_accepted()
            return Verdict.accept()
        lines: List[str] = []
        for violation in violations:
            lines.extend(self.render_violation(locale, violation))
        return Verdict.reject(
            header=self.catalog.render(locale, HEADER_KEY),
            lines=lines,
            violations=violations,
            separator=self.line_separator,
        )
