"""移动端 Minecraft 启动器日志的字段提取与规则诊断。"""
from .aggregator import AnalysisResponse, analyze_log, build_response
from .extractor import FieldExtractor, KeywordSet, extract_info
from .rules import AnalysisResult, RuleClassifier, classify

__all__ = [
    "AnalysisResponse",
    "analyze_log",
    "build_response",
    "FieldExtractor",
    "KeywordSet",
    "extract_info",
    "AnalysisResult",
    "RuleClassifier",
    "classify",
]
