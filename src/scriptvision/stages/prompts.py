# -*- coding: utf-8 -*-
"""
scriptvision/stages/prompts.py

“视觉 prompt 阶段”：分镜 + 选中风格 + active 主体 -> GeneratedPrompt（GenerateVisualPromptSkill）。
- 默认只给还没有 prompt 的镜头生成；指定 shot_id 时只（重新）生成这一条
- 没选风格 / 分镜表为空：EmptyInputError，不调模型
- 每生成一条就落盘一次，中途 GenerationError 不会丢掉前面的结果
"""

from __future__ import annotations

from typing import Optional

from scriptvision.core.errors import EmptyInputError
from scriptvision.core.io import ProjectPaths
from scriptvision.core.project import load_project, save_project
from scriptvision.core.schemas import CameraSettings
from scriptvision.logging_config import get_logger
from scriptvision.skills.visual_prompts import GenerateVisualPromptSkill
from scriptvision.stages.base import StageContext, llm_session


log = get_logger(__name__)


class PromptsStage:
	name = "prompts"

	def __init__(self, shot_id: str = "", camera: Optional[CameraSettings] = None):
		self.shot_id = shot_id
		self.camera = camera

	def run(self, paths: ProjectPaths, ctx: StageContext) -> None:
		p = load_project(paths.project)

		style = p.selected_style
		if style is None:
			raise EmptyInputError("style", "No style selected (use `scriptvision style select`)")
		if not p.shot_list:
			raise EmptyInputError("shot_list", "Shot list is empty")

		if self.shot_id:
			targets = [s for s in p.shot_list if s.id == self.shot_id]
			if not targets:
				raise ValueError(f"unknown shot id: {self.shot_id}")
		else:
			done = {g.shot_id for g in p.generated_prompts}
			targets = [s for s in p.shot_list if s.id not in done]

		if not targets:
			print("[INFO] every shot already has a prompt")
			return

		with llm_session(paths, ctx) as llm:
			skill = GenerateVisualPromptSkill(llm)
			for shot in targets:
				result = skill.run(shot, p.subjects, style, script=p.script, camera=self.camera)
				if result.used_fallback:
					log.warning("visual prompt for shot %s used %s fallback: %s", shot.id, result.source, result.error)

				p.add_generated_prompt(result.prompt)
				save_project(paths.project, p)
				print(f"[OK] prompt for Scene {shot.scene}, Shot {shot.shot} (source={result.source})")

		print(f"[OK] prompts: {len(targets)} generated; {len(p.generated_prompts)} total")
