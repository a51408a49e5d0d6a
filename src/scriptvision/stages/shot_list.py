# -*- coding: utf-8 -*-
"""
scriptvision/stages/shot_list.py

“分镜表阶段”：剧本 -> canonical 分镜表（GenerateShotListSkill）。
结构化输出不合格时 skill 内部回退自由文本解析；生成失败（GenerationError）原样上抛。
"""

from __future__ import annotations

from scriptvision.core.io import ProjectPaths
from scriptvision.core.project import load_project, save_project
from scriptvision.logging_config import get_logger
from scriptvision.skills.generate_shot_list import GenerateShotListSkill
from scriptvision.stages.base import StageContext, llm_session


log = get_logger(__name__)


class ShotListStage:
	name = "shot_list"

	def run(self, paths: ProjectPaths, ctx: StageContext) -> None:
		p = load_project(paths.project)

		with llm_session(paths, ctx) as llm:
			result = GenerateShotListSkill(llm).run(p.script)

		if result.used_fallback:
			log.warning("shot list used text fallback: %s", result.error)

		if result.outcome != "ok":
			# 解析为空不是错误，也不能清掉已有分镜表
			print(f"[INFO] no shots could be parsed from the response; keeping {len(p.shot_list)} existing shot(s)")
			return

		p.set_shot_list(result.shots)
		save_project(paths.project, p)
		print(f"[OK] shot list: {len(p.shot_list)} shot(s), fallback={result.used_fallback}")
