from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

from config.constants import (
    CUSTOM_KEYWORD_DELIMITER,
    DEFAULT_ANALYSIS_TIMEOUT,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_GEMINI_PROXY_TARGET,
    DEFAULT_GEMINI_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_UPLOAD_BYTES,
    DEFAULT_PORT,
)

logger = logging.getLogger(__name__)

# 环境变量 -> 配置字段
ENV_OVERRIDES = {
    "MLOG_CUSTOM_KEYWORDS": "custom_keywords",
    "GEMINI_PROXY_TARGET": "gemini_proxy_target",
    "GEMINI_API_KEY": "gemini_api_key",
    "GEMINI_MODEL": "gemini_model",
    "GEMINI_TIMEOUT": "gemini_timeout_seconds",
    "MLOG_MAX_UPLOAD_BYTES": "max_upload_bytes",
    "MLOG_ANALYSIS_TIMEOUT": "analysis_timeout_seconds",
    "MLOG_STATIC_DIR": "static_dir",
    "MLOG_HOST": "host",
    "MLOG_PORT": "port",
    "MLOG_LOG_LEVEL": "log_level",
    "MLOG_LOG_JSON": "log_json",
    "MLOG_ENABLE_METRICS": "enable_metrics",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_custom_keywords(raw: Optional[str]) -> List[str]:
    """拆分以 '|' 分隔的自定义关键字，去除首尾空白并丢弃空项。"""
    if not raw:
        return []
    items = (part.strip() for part in str(raw).split(CUSTOM_KEYWORD_DELIMITER))
    return [item for item in items if item]


@dataclass
class ServiceConfig:
    """进程启动时构建一次，随后显式传入提取器与各协作方。"""

    custom_keywords: str = ""
    gemini_proxy_target: str = DEFAULT_GEMINI_PROXY_TARGET
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_timeout_seconds: float = DEFAULT_GEMINI_TIMEOUT
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    analysis_timeout_seconds: float = DEFAULT_ANALYSIS_TIMEOUT
    static_dir: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = False
    enable_metrics: bool = True
    _source: Optional[str] = field(default=None, repr=False)

    @property
    def keyword_list(self) -> List[str]:
        return parse_custom_keywords(self.custom_keywords)

    def _validate(self) -> None:
        if isinstance(self.custom_keywords, (list, tuple)):
            self.custom_keywords = CUSTOM_KEYWORD_DELIMITER.join(str(k) for k in self.custom_keywords)
        elif not isinstance(self.custom_keywords, str):
            self.custom_keywords = ""

        if not isinstance(self.gemini_proxy_target, str) or not self.gemini_proxy_target.strip():
            self.gemini_proxy_target = DEFAULT_GEMINI_PROXY_TARGET
        if not self.gemini_proxy_target.endswith("/"):
            self.gemini_proxy_target += "/"

        if not isinstance(self.gemini_model, str) or not self.gemini_model.strip():
            self.gemini_model = DEFAULT_GEMINI_MODEL

        try:
            self.gemini_timeout_seconds = float(self.gemini_timeout_seconds)
        except (TypeError, ValueError):
            self.gemini_timeout_seconds = DEFAULT_GEMINI_TIMEOUT
        if self.gemini_timeout_seconds <= 0:
            self.gemini_timeout_seconds = DEFAULT_GEMINI_TIMEOUT

        try:
            self.max_upload_bytes = int(self.max_upload_bytes)
        except (TypeError, ValueError):
            self.max_upload_bytes = DEFAULT_MAX_UPLOAD_BYTES
        if self.max_upload_bytes <= 0:
            self.max_upload_bytes = DEFAULT_MAX_UPLOAD_BYTES

        try:
            self.analysis_timeout_seconds = float(self.analysis_timeout_seconds)
        except (TypeError, ValueError):
            self.analysis_timeout_seconds = DEFAULT_ANALYSIS_TIMEOUT
        if self.analysis_timeout_seconds <= 0:
            self.analysis_timeout_seconds = DEFAULT_ANALYSIS_TIMEOUT

        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            self.port = DEFAULT_PORT
        if not 0 < self.port < 65536:
            self.port = DEFAULT_PORT

        if not isinstance(self.host, str) or not self.host:
            self.host = DEFAULT_HOST
        if not isinstance(self.log_level, str) or not self.log_level:
            self.log_level = DEFAULT_LOG_LEVEL
        self.log_level = self.log_level.upper()

        self.log_json = _as_bool(self.log_json)
        self.enable_metrics = _as_bool(self.enable_metrics)
        if self.static_dir is not None and not str(self.static_dir).strip():
            self.static_dir = None

    def _apply(self, data: Mapping[str, Any]) -> None:
        # 只接受公开的数据字段，属性与方法名一律忽略
        known = {f.name for f in fields(self) if not f.name.startswith("_")}
        for key, value in data.items():
            if key not in known:
                logger.debug("忽略未知配置项: %s", key)
                continue
            setattr(self, key, value)

    @classmethod
    def load(cls, config_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> "ServiceConfig":
        """JSON 文件 -> 环境变量覆盖 -> 校验。文件缺失或损坏时使用默认值。"""
        cfg = cls()
        if config_file and os.path.exists(config_file):
            try:
                with open(config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    cfg._apply(data)
                    cfg._source = config_file
                else:
                    logger.warning("配置文件格式错误（应为对象）: %s", config_file)
            except (OSError, ValueError) as e:
                logger.warning("配置文件解析失败: %s", e)

        env = os.environ if environ is None else environ
        cfg._apply({attr: env[name] for name, attr in ENV_OVERRIDES.items() if name in env})
        cfg._validate()
        return cfg

    def to_dict(self) -> Dict[str, Any]:
        data = {k: v for k, v in self.__dict__.items() if not k.startswith("_")}
        if data.get("gemini_api_key"):
            data["gemini_api_key"] = "***"
        return data


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES
