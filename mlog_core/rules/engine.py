from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from config.constants import FALLBACK_DIAGNOSIS
from .base import DiagnosticRule
from .catalogue import default_catalogue

logger = logging.getLogger(__name__)

DiagnosisPayload = Union[Dict[str, Any], str]


@dataclass(frozen=True)
class AnalysisResult:
    main_problem: Optional[str] = None
    additional_problems: Tuple[str, ...] = ()
    matched_rules: Tuple[str, ...] = ()

    @classmethod
    def from_hits(cls, hits: Sequence[Tuple[str, str]]) -> "AnalysisResult":
        if not hits:
            return cls()
        rule_ids = tuple(rule_id for rule_id, _ in hits)
        reasons = tuple(reason for _, reason in hits)
        return cls(main_problem=reasons[0], additional_problems=reasons[1:], matched_rules=rule_ids)

    @property
    def is_fallback(self) -> bool:
        return self.main_problem is None

    def to_payload(self) -> DiagnosisPayload:
        """HTTP 层序列化格式；未命中任何规则时为固定的回退字符串。"""
        if self.is_fallback:
            return FALLBACK_DIAGNOSIS
        return {
            "mainProblem": self.main_problem,
            "additionalProblems": list(self.additional_problems),
        }


class RuleClassifier:
    def __init__(self, rules: Optional[Iterable[DiagnosticRule]] = None):
        self._rules: Tuple[DiagnosticRule, ...] = tuple(default_catalogue() if rules is None else rules)

    @property
    def rules(self) -> Tuple[DiagnosticRule, ...]:
        return self._rules

    def evaluate(self, log: str) -> List[Tuple[str, str]]:
        """按目录顺序返回 (rule_id, reason)。"""
        hits: List[Tuple[str, str]] = []
        for rule in self._rules:
            if not rule.matches(log):
                continue
            try:
                reason = rule.apply(log)
            except Exception:
                # 单条规则失败不影响其余规则
                logger.exception("Rule failed (%s)", rule.rule_id)
                continue
            if reason:
                hits.append((rule.rule_id, reason))
            else:
                logger.debug("Rule %s matched keywords but produced no reason", rule.rule_id)
        return hits

    def classify(self, log: str) -> AnalysisResult:
        return AnalysisResult.from_hits(self.evaluate(log))


_default_classifier = RuleClassifier()


def classify(log: str) -> AnalysisResult:
    return _default_classifier.classify(log)
