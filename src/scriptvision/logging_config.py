# -*- coding: utf-8 -*-
"""
scriptvision/logging_config.py

日志约定：
- 库代码只用 get_logger(__name__) 拿 logger，不自己配 handler。
- CLI 启动时调用一次 setup_logging()；测试里不调用，pytest 的 caplog 照样能抓到。
- 给用户看的进度行仍由 CLI print（[OK]/[RUN]/[INFO]/[ERROR]）。
"""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
	logging.basicConfig(
		level=getattr(logging, level.upper(), logging.INFO),
		format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
		datefmt="%Y-%m-%d %H:%M:%S",
		handlers=[logging.StreamHandler(sys.stderr)],
	)


def get_logger(name: str) -> logging.Logger:
	if name.startswith("scriptvision"):
		return logging.getLogger(name)
	return logging.getLogger(f"scriptvision.{name}")
