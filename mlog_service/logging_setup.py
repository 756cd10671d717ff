from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from pythonjsonlogger import jsonlogger

from config.app_config import ServiceConfig
from config.constants import LOG_FILE

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: ServiceConfig, log_file: Optional[str] = LOG_FILE) -> None:
    level = getattr(logging, str(config.log_level).upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        try:
            handlers.append(
                RotatingFileHandler(
                    log_file,
                    maxBytes=10 * 1024 * 1024,
                    backupCount=5,
                    encoding="utf-8",
                )
            )
        except OSError:
            # 文件系统不可写时，至少保留 stdout
            logging.getLogger(__name__).warning("无法创建日志文件 %s，仅输出到控制台", log_file)

    if config.log_json:
        fmt: logging.Formatter = jsonlogger.JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    else:
        fmt = logging.Formatter(LOG_FORMAT)
    for h in handlers:
        h.setFormatter(fmt)

    logging.basicConfig(level=level, handlers=handlers, force=True)
