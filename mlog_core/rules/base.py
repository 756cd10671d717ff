from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Tuple, Union

ReasonEvaluator = Callable[[str], Optional[str]]


class Logic(str, Enum):
    ONE_OF = "one_of"
    ALL_OF = "all_of"


@dataclass(frozen=True)
class StaticReason:
    text: str

    def resolve(self, log: str) -> Optional[str]:
        return self.text


@dataclass(frozen=True)
class DynamicReason:
    """根据完整日志生成原因文本；返回 None 表示关键字命中但细查不成立。"""

    evaluator: ReasonEvaluator

    def resolve(self, log: str) -> Optional[str]:
        return self.evaluator(log)


Reason = Union[StaticReason, DynamicReason]


@dataclass(frozen=True)
class DiagnosticRule:
    rule_id: str
    keywords: Tuple[str, ...]
    reason: Reason
    logic: Logic = Logic.ONE_OF

    def matches(self, log: str) -> bool:
        if not self.keywords:
            return False
        if self.logic is Logic.ALL_OF:
            return all(k in log for k in self.keywords)
        return any(k in log for k in self.keywords)

    def apply(self, log: str) -> Optional[str]:
        text = self.reason.resolve(log)
        return text if text else None


def static_rule(rule_id: str, keywords: Iterable[str], text: str, logic: Logic = Logic.ONE_OF) -> DiagnosticRule:
    return DiagnosticRule(rule_id, tuple(keywords), StaticReason(text), logic)


def dynamic_rule(rule_id: str, keywords: Iterable[str], evaluator: ReasonEvaluator, logic: Logic = Logic.ONE_OF) -> DiagnosticRule:
    return DiagnosticRule(rule_id, tuple(keywords), DynamicReason(evaluator), logic)
