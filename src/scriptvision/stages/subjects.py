# -*- coding: utf-8 -*-
"""
scriptvision/stages/subjects.py

“主体阶段”：剧本 -> 提议主体（proposed_subjects）。
这里只写 proposed；并入 canonical 要用户确认（CLI merge-subjects）。
"""

from __future__ import annotations

from scriptvision.core.io import ProjectPaths
from scriptvision.core.project import load_project, save_project
from scriptvision.logging_config import get_logger
from scriptvision.skills.extract_subjects import ExtractSubjectsSkill
from scriptvision.stages.base import StageContext, llm_session


log = get_logger(__name__)


class SubjectsStage:
	name = "subjects"

	def run(self, paths: ProjectPaths, ctx: StageContext) -> None:
		p = load_project(paths.project)

		with llm_session(paths, ctx) as llm:
			result = ExtractSubjectsSkill(llm).run(p.script)

		if result.used_fallback:
			log.warning("subjects used text fallback: %s", result.error)

		if result.outcome != "ok":
			print(f"[INFO] no subjects could be parsed from the response; keeping {len(p.proposed_subjects)} proposed subject(s)")
			return

		p.set_proposed_subjects(result.subjects)
		save_project(paths.project, p)
		print(f"[OK] proposed subjects: {len(p.proposed_subjects)}")
