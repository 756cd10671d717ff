from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest


@dataclass(slots=True)
class Observability:
    metrics_enabled: bool

    registry: Optional[CollectorRegistry] = None
    analyses: Any = None
    rule_hits: Any = None
    fallbacks: Any = None
    gemini_calls: Any = None

    def record_analysis(self, source: str, matched_rules: Iterable[str]) -> None:
        if not self.metrics_enabled:
            return
        self.analyses.labels(source=source).inc()
        hit_any = False
        for rule_id in matched_rules:
            self.rule_hits.labels(rule_id=rule_id).inc()
            hit_any = True
        if not hit_any:
            self.fallbacks.inc()

    def record_gemini(self, outcome: str) -> None:
        if self.metrics_enabled:
            self.gemini_calls.labels(outcome=outcome).inc()

    def render(self) -> tuple[str, str]:
        if not self.metrics_enabled or self.registry is None:
            return "# metrics disabled\n", "text/plain"
        return generate_latest(self.registry).decode("utf-8"), CONTENT_TYPE_LATEST


def build_observability(enabled: bool) -> Observability:
    obs = Observability(metrics_enabled=bool(enabled))
    if not obs.metrics_enabled:
        return obs

    # 每个 app 独立的 registry，避免重复创建 app 时指标重复注册
    registry = CollectorRegistry()
    obs.registry = registry
    obs.analyses = Counter(
        "mlog_analyses_total",
        "Analysed logs",
        labelnames=("source",),
        registry=registry,
    )
    obs.rule_hits = Counter(
        "mlog_rule_hits_total",
        "Diagnostic rule hits",
        labelnames=("rule_id",),
        registry=registry,
    )
    obs.fallbacks = Counter("mlog_fallback_total", "Analyses without any rule hit", registry=registry)
    obs.gemini_calls = Counter(
        "mlog_gemini_calls_total",
        "Gemini summarisation calls",
        labelnames=("outcome",),
        registry=registry,
    )
    return obs
