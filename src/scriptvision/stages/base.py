# -*- coding: utf-8 -*-
"""
scriptvision/stages/base.py

目的：
- 定义 Stage 的“接口形状”和运行上下文 StageContext。
- 每个阶段都遵循同一种调用方式：run(paths, ctx)。
- llm_session：统一“拿一个 LLM client、用完关掉”的写法。
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional, Protocol

from scriptvision.core.io import ProjectPaths
from scriptvision.providers.llm.mock_client import MockLLMClient
from scriptvision.providers.llm.openai_client import load_openai_client


@dataclass
class StageContext:
	"""
	运行上下文：
	- project_name：新建 project.json 时用的项目名
	- use_mock：不调真实 LLM，用固定回复（CLI --mock）
	- llm_client：外部注入的 client（测试用）；注入的 client 由注入方负责关闭
	- env_root：到哪里找 .env；缺省从当前目录向上找
	"""
	project_name: str = "Untitled Project"
	use_mock: bool = False
	llm_client: Optional[Any] = None
	env_root: str = ""


class Stage(Protocol):
	name: str

	def run(self, paths: ProjectPaths, ctx: StageContext) -> None:
		...


def find_env_root(start: Optional[Path] = None) -> Path:
	"""向上查找含 .env 的目录；找不到就返回起点。"""
	origin = (start or Path.cwd()).resolve()
	p = origin
	while p != p.parent:
		if (p / ".env").exists():
			return p
		p = p.parent
	return origin


@contextmanager
def llm_session(paths: ProjectPaths, ctx: StageContext) -> Iterator[Any]:
	if ctx.llm_client is not None:
		yield ctx.llm_client
		return

	if ctx.use_mock:
		llm: Any = MockLLMClient(log_path=paths.llm_log)
	else:
		root = ctx.env_root or str(find_env_root())
		llm = load_openai_client(project_root=root, log_path=paths.llm_log)

	try:
		yield llm
	finally:
		llm.close()
