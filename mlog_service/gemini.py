"""Gemini generateContent 代理客户端。

规则诊断不依赖这里的任何结果；AI 摘要只是附加的叙述性分析。
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Tuple

import aiohttp

from config.app_config import ServiceConfig
from config.constants import GEMINI_EMPTY_REPLY, GEMINI_FAILURE_PREFIX, GEMINI_PROMPT_HEADER
from mlog_core.errors import UpstreamError
from .retry import RetryPolicy, async_retry

logger = logging.getLogger(__name__)


def build_prompt(log: str, fields: Optional[Mapping[str, str]] = None) -> str:
    if not fields:
        return f"{GEMINI_PROMPT_HEADER}\n{log}"
    env_lines = "\n".join(f"{k}: {v}" for k, v in fields.items())
    return f"{GEMINI_PROMPT_HEADER}\n[环境信息]\n{env_lines}\n[日志]\n{log}"


def extract_reply_text(data: Any) -> str:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return GEMINI_EMPTY_REPLY
    return text or GEMINI_EMPTY_REPLY


def _error_message(data: Any, status: int) -> str:
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return f"HTTP {status}"


class GeminiClient:
    def __init__(self, config: ServiceConfig, policy: Optional[RetryPolicy] = None):
        self.config = config
        self.policy = policy or RetryPolicy()

    def build_url(self, proxy_target: Optional[str] = None) -> str:
        target = self.config.gemini_proxy_target
        if proxy_target and proxy_target.startswith(("http://", "https://")):
            target = proxy_target
        if not target.endswith("/"):
            target += "/"
        return f"{target}v1beta/models/{self.config.gemini_model}:generateContent?key={self.config.gemini_api_key}"

    async def _post(self, url: str, body: Mapping[str, Any]) -> Tuple[int, Any]:
        timeout = aiohttp.ClientTimeout(total=self.config.gemini_timeout_seconds)
        async with aiohttp.ClientSession(trust_env=True, timeout=timeout) as session:
            async with session.post(url, json=body, headers={"Content-Type": "application/json"}) as resp:
                try:
                    data = await resp.json(content_type=None)
                except ValueError:
                    data = {"error": {"message": (await resp.text())[:500]}}
                return resp.status, data

    async def generate(self, body: Mapping[str, Any], proxy_target: Optional[str] = None) -> Tuple[int, Any]:
        """转发 generateContent 请求；上游错误统一抛出 UpstreamError。"""
        if not self.config.gemini_api_key:
            raise UpstreamError("未配置 GEMINI_API_KEY")
        url = self.build_url(proxy_target)
        try:
            status, data = await async_retry(lambda: self._post(url, body), policy=self.policy)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise UpstreamError(str(exc) or exc.__class__.__name__) from exc
        if status >= 400:
            raise UpstreamError(_error_message(data, status), status=status)
        return status, data

    async def summarize(
        self,
        log: str,
        fields: Optional[Mapping[str, str]] = None,
        proxy_target: Optional[str] = None,
    ) -> str:
        body = {"contents": [{"parts": [{"text": build_prompt(log, fields)}]}]}
        try:
            _, data = await self.generate(body, proxy_target)
        except UpstreamError as exc:
            logger.error("Gemini API 调用异常: %s", exc)
            return GEMINI_FAILURE_PREFIX + str(exc)
        return extract_reply_text(data)
