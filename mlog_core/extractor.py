from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from config.app_config import parse_custom_keywords
from config.constants import KEYWORD_SEPARATOR
from .patterns import (
    FAILED_COMPONENT_PATTERN,
    FIELD_KEYWORD,
    FIELD_LAUNCHER,
    FIELD_PATTERNS,
    LAUNCHER_SIGNATURES,
    FieldPattern,
    LauncherSignature,
)

logger = logging.getLogger(__name__)

ExtractedFields = Dict[str, str]


class KeywordSet:
    """保持首次插入顺序的去重集合。"""

    def __init__(self, items: Iterable[str] = ()) -> None:
        self._items: Dict[str, None] = {}
        for item in items:
            self.add(item)

    def add(self, item: Optional[str]) -> None:
        if item:
            self._items.setdefault(item, None)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self):
        return iter(self._items)

    def join(self, sep: str = KEYWORD_SEPARATOR) -> str:
        return sep.join(self._items)


class FieldExtractor:
    """从日志中识别启动器并提取环境字段。

    Args:
        custom_keywords: '|' 分隔的字符串或已拆分的关键字序列，来自服务配置。
        signatures / field_patterns: 默认使用 patterns 模块中的表，测试可替换。
    """

    def __init__(
        self,
        custom_keywords: Union[str, Sequence[str], None] = "",
        signatures: Sequence[LauncherSignature] = LAUNCHER_SIGNATURES,
        field_patterns: Mapping[str, Sequence[FieldPattern]] = FIELD_PATTERNS,
    ) -> None:
        if isinstance(custom_keywords, str) or custom_keywords is None:
            self.custom_keywords: Tuple[str, ...] = tuple(parse_custom_keywords(custom_keywords))
        else:
            self.custom_keywords = tuple(k.strip() for k in custom_keywords if k and k.strip())
        self.signatures = tuple(signatures)
        self.field_patterns = {k: tuple(v) for k, v in field_patterns.items()}

    def identify_launcher(self, log: str) -> Optional[str]:
        for signature in self.signatures:
            if signature.matches(log):
                return signature.name
        return None

    def extract_field(self, log: str, category: str, launcher: Optional[str] = None) -> Optional[str]:
        for candidate in self.field_patterns.get(category, ()):
            if not candidate.applies_to(launcher):
                continue
            value = candidate.extract(log)
            if value:
                return value
        return None

    def collect_keywords(self, log: str) -> KeywordSet:
        keywords = KeywordSet()
        m = FAILED_COMPONENT_PATTERN.search(log)
        if m:
            keywords.add(m.group(1).strip())
        for literal in self.custom_keywords:
            if literal in log:
                keywords.add(literal)
        return keywords

    def extract(self, log: str) -> ExtractedFields:
        info: ExtractedFields = {}
        launcher = self.identify_launcher(log)
        if launcher:
            info[FIELD_LAUNCHER] = launcher

        for category in self.field_patterns:
            if category in (FIELD_LAUNCHER, FIELD_KEYWORD):
                continue
            value = self.extract_field(log, category, launcher)
            if value:
                info[category] = value

        keywords = self.collect_keywords(log)
        if keywords:
            info[FIELD_KEYWORD] = keywords.join()

        logger.debug("提取字段: launcher=%s, fields=%s", launcher, sorted(info))
        return info


def extract_info(log: str, custom_keywords: Union[str, List[str], None] = "") -> ExtractedFields:
    """便捷入口：使用默认模式表提取字段。"""
    return FieldExtractor(custom_keywords).extract(log)
