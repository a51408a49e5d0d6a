# -*- coding: utf-8 -*-
"""
scriptvision/core/io.py

目的：
- 统一管理项目目录的路径约定（哪些文件放哪里）。
- 统一创建目录骨架（ensure_dirs）。

项目目录约定（v0.1）：
- project.json    : ProjectState（剧本、分镜表、主体、风格、进度）
- script.txt      : 可选，set-script 时顺手落一份纯文本，方便直接编辑
- logs/llm.jsonl  : 每次和 LLM 往来的 prompt / response
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProjectPaths:
	"""只存路径，不做读写。"""
	root: Path
	project: Path
	script_txt: Path
	logs_dir: Path
	llm_log: Path

	def ensure_dirs(self) -> None:
		# 重复执行必须安全
		for d in (self.root, self.logs_dir):
			d.mkdir(parents=True, exist_ok=True)


def project_paths(project_dir: str | Path) -> ProjectPaths:
	"""根据 project_dir 生成 ProjectPaths；这里不创建目录。"""
	root = Path(project_dir)

	return ProjectPaths(
		root=root,
		project=root / "project.json",
		script_txt=root / "script.txt",
		logs_dir=root / "logs",
		llm_log=root / "logs" / "llm.jsonl",
	)
