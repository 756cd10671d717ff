from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from config.app_config import ServiceConfig
from config.constants import GEMINI_FAILURE_PREFIX
from mlog_core.aggregator import analyze_log
from mlog_core.errors import AnalysisError, UpstreamError, UserError
from mlog_core.extractor import FieldExtractor
from mlog_core.file_io import check_size, decode_log_bytes
from mlog_core.rules import RuleClassifier
from .gemini import GeminiClient
from .observability import build_observability

logger = logging.getLogger(__name__)


class AnalyzeRequest(BaseModel):
    log: Optional[str] = None


class GeminiRequest(BaseModel):
    log: Optional[str] = None
    proxy: Optional[str] = None
    fields: Optional[Dict[str, str]] = None


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


def create_app(config: Optional[ServiceConfig] = None, gemini: Optional[GeminiClient] = None) -> FastAPI:
    """创建 HTTP 服务：日志上传分析、Gemini 摘要与代理、health/metrics。"""

    config = config or ServiceConfig()
    extractor = FieldExtractor(config.keyword_list)
    classifier = RuleClassifier()
    gemini = gemini or GeminiClient(config)
    obs = build_observability(config.enable_metrics)

    app = FastAPI(title="mlog-analyzer")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.config = config
    app.state.observability = obs

    @app.exception_handler(UserError)
    async def user_error_handler(request: Request, exc: UserError):
        return _error(400, str(exc))

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(request: Request, exc: AnalysisError):
        return _error(500, str(exc))

    async def run_analysis(log: str, source: str) -> Any:
        loop = asyncio.get_running_loop()
        try:
            response = await asyncio.wait_for(
                loop.run_in_executor(None, analyze_log, log, extractor, classifier),
                timeout=config.analysis_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error("日志分析超时 (%s, %d chars)", source, len(log))
            return _error(504, "日志分析超时")
        obs.record_analysis(source, response.diagnosis.matched_rules)
        logger.info(
            "分析完成: source=%s, launcher=%s, rules=%s",
            source,
            response.fields.get("launcher"),
            ",".join(response.diagnosis.matched_rules) or "-",
        )
        return response.to_dict()

    @app.post("/api/extract")
    async def extract(file: Optional[UploadFile] = File(None)):
        if file is None:
            return _error(400, "未上传文件")
        try:
            data = await file.read(config.max_upload_bytes + 1)
        finally:
            await file.close()
        try:
            check_size(len(data), config.max_upload_bytes)
        except UserError as exc:
            return _error(413, str(exc))
        log = decode_log_bytes(data)
        return await run_analysis(log, "upload")

    @app.post("/api/analyze")
    async def analyze(req: AnalyzeRequest):
        if not req.log:
            return _error(400, "缺少日志内容")
        return await run_analysis(req.log, "text")

    @app.post("/api/gemini")
    async def gemini_summary(req: GeminiRequest):
        if not req.log:
            return _error(400, "缺少日志内容")
        text = await gemini.summarize(req.log, req.fields, req.proxy)
        obs.record_gemini("error" if text.startswith(GEMINI_FAILURE_PREFIX) else "ok")
        return {"gemini": text}

    @app.post("/proxy/gemini")
    async def proxy_gemini(request: Request):
        try:
            body = await request.json()
        except ValueError:
            return _error(400, "请求体不是有效的 JSON")
        try:
            status, data = await gemini.generate(body)
        except UpstreamError as exc:
            obs.record_gemini("error")
            return _error(500, str(exc))
        obs.record_gemini("ok")
        return JSONResponse(status_code=status, content=data)

    @app.get("/health")
    def health():
        return {"status": "ok", "rules": len(classifier.rules)}

    @app.get("/metrics")
    def metrics():
        content, media_type = obs.render()
        return PlainTextResponse(content=content, media_type=media_type)

    if config.static_dir:
        if os.path.isdir(config.static_dir):
            app.mount("/", StaticFiles(directory=config.static_dir, html=True), name="static")
        else:
            logger.warning("静态目录不存在，已跳过: %s", config.static_dir)

    return app
