from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Optional

import uvicorn

from config.app_config import ServiceConfig
from config.constants import DEFAULT_CONFIG_FILE
from mlog_core.aggregator import analyze_log
from mlog_core.errors import UserError
from mlog_core.extractor import FieldExtractor
from mlog_core.file_io import read_log_file
from .logging_setup import setup_logging


def _cmd_serve(args: argparse.Namespace, config: ServiceConfig) -> int:
    from .server import create_app

    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    setup_logging(config)

    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
    return 0


def _cmd_analyze(args: argparse.Namespace, config: ServiceConfig) -> int:
    setup_logging(config, log_file=None)
    keywords = args.keywords if args.keywords is not None else config.keyword_list
    try:
        log = read_log_file(args.file, config.max_upload_bytes)
    except UserError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    response = analyze_log(log, FieldExtractor(keywords))
    payload = response.to_dict()
    if not args.include_log:
        payload.pop("rawLog", None)
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="mlog")
    parser.add_argument("--config", default=os.getenv("MLOG_CONFIG", DEFAULT_CONFIG_FILE))

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_serve = sub.add_parser("serve", help="Serve the log analysis HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.set_defaults(func=_cmd_serve)

    p_analyze = sub.add_parser("analyze", help="Analyse a log file and print the result as JSON")
    p_analyze.add_argument("file")
    p_analyze.add_argument("--keywords", default=None, help="'|' separated custom keywords")
    p_analyze.add_argument("--include-log", action="store_true", help="Include rawLog in the output")
    p_analyze.set_defaults(func=_cmd_analyze)

    args = parser.parse_args(argv)
    config = ServiceConfig.load(args.config)
    return int(args.func(args, config))


if __name__ == "__main__":
    raise SystemExit(main())
