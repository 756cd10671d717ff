from __future__ import annotations
import logging
from functools import wraps
from typing import Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class AppError(Exception):
    """基础异常"""


class UserError(AppError):
    """用户可恢复错误（如未上传文件、无法解码的日志）"""


class AnalysisError(AppError):
    """分析过程错误"""


class UpstreamError(AppError):
    """外部服务（Gemini 代理）调用失败"""

    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.status = status


def error_handler(func: Callable[..., T]) -> Callable[..., T]:
    """AppError 原样抛出；其余异常记录堆栈后包装为 AnalysisError，由 HTTP 层映射为 500。"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AppError:
            raise
        except Exception as exc:
            logger.exception("%s 执行失败", func.__name__)
            raise AnalysisError(f"日志分析失败: {exc}") from exc
    return wrapper
