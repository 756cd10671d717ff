from .base import DiagnosticRule, DynamicReason, Logic, StaticReason, dynamic_rule, static_rule
from .catalogue import DEFAULT_RULES, RuleCatalogue, default_catalogue
from .engine import AnalysisResult, RuleClassifier, classify

__all__ = [
    "DiagnosticRule",
    "DynamicReason",
    "Logic",
    "StaticReason",
    "dynamic_rule",
    "static_rule",
    "DEFAULT_RULES",
    "RuleCatalogue",
    "default_catalogue",
    "AnalysisResult",
    "RuleClassifier",
    "classify",
]
