# -*- coding: utf-8 -*-
"""
scriptvision/stages/script.py

“剧本阶段”：确保 project.json 存在，且剧本非空。

输入：
- project.json 里的 script；为空时读 script.txt（如果有）

输出：
- project.json：script、workflow_progress.script_completed
"""

from __future__ import annotations

from scriptvision.core.errors import EmptyInputError
from scriptvision.core.io import ProjectPaths
from scriptvision.core.project import load_project, new_project, save_project
from scriptvision.stages.base import StageContext


class ScriptStage:
	name = "script"

	def run(self, paths: ProjectPaths, ctx: StageContext) -> None:
		paths.ensure_dirs()

		if not paths.project.exists():
			save_project(paths.project, new_project(ctx.project_name))

		p = load_project(paths.project)
		if not p.script.strip() and paths.script_txt.exists():
			p.set_script(paths.script_txt.read_text(encoding="utf-8"))

		if not p.script.strip():
			raise EmptyInputError("script", f"Script is empty (use set-script or put it in {paths.script_txt})")

		p.mark("script_completed")
		save_project(paths.project, p)
