"""日志文本的读取与解码。核心只接受已解码的文本，解码失败在这里终止。"""
from __future__ import annotations
import codecs
import os

from config.constants import DEFAULT_MAX_UPLOAD_BYTES
from .errors import UserError


def decode_log_bytes(data: bytes) -> str:
    """严格按 UTF-8 解码上传内容（允许 BOM）。

    二进制或非 UTF-8 内容直接抛出 UserError，不做替换字符降级，
    以免规则在乱码上误报。
    """
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]
    if b"\x00" in data:
        raise UserError("日志文件包含二进制内容，无法解析")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UserError(f"日志文件不是有效的 UTF-8 文本: {exc.reason}") from exc


def check_size(size: int, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> None:
    if size > max_bytes:
        raise UserError(f"日志文件过大: {size} bytes > {max_bytes} bytes")


def read_log_file(path: str, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> str:
    """读取本地日志文件（CLI 使用），大小与编码规则与上传一致。"""
    try:
        check_size(os.path.getsize(path), max_bytes)
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise UserError(f"无法读取日志文件 {path}: {exc}") from exc
    return decode_log_bytes(data)
