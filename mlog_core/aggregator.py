from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import error_handler
from .extractor import ExtractedFields, FieldExtractor
from .rules.engine import AnalysisResult, RuleClassifier


@dataclass(frozen=True)
class AnalysisResponse:
    """提取字段、原始日志与诊断结果的组合，原样交给 HTTP 层序列化。"""

    fields: ExtractedFields
    raw_log: str
    diagnosis: AnalysisResult = field(default_factory=AnalysisResult)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fields": dict(self.fields),
            "rawLog": self.raw_log,
            "diagnosis": self.diagnosis.to_payload(),
        }


def build_response(fields: ExtractedFields, log: str, diagnosis: AnalysisResult) -> AnalysisResponse:
    return AnalysisResponse(fields=fields, raw_log=log, diagnosis=diagnosis)


@error_handler
def analyze_log(
    log: str,
    extractor: Optional[FieldExtractor] = None,
    classifier: Optional[RuleClassifier] = None,
) -> AnalysisResponse:
    extractor = extractor or FieldExtractor()
    classifier = classifier or RuleClassifier()
    return build_response(extractor.extract(log), log, classifier.classify(log))
