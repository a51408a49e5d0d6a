# -*- coding: utf-8 -*-
"""
scriptvision/pipeline/orchestrator.py

目的：
- 阶段调度器：按固定顺序 script -> shot_list -> subjects -> prompts 执行各个 stage。
- run_until(..., until="shot_list")：跑到指定阶段停止。
- CLI 不直接调用 stage，统一走 orchestrator。

orchestrator 只负责：创建 paths、按顺序调用 stage、打印状态。
"""

from __future__ import annotations

from typing import Dict

from scriptvision.core.io import project_paths
from scriptvision.core.project import load_project
from scriptvision.stages.base import Stage, StageContext
from scriptvision.stages.prompts import PromptsStage
from scriptvision.stages.script import ScriptStage
from scriptvision.stages.shot_list import ShotListStage
from scriptvision.stages.subjects import SubjectsStage


STAGE_ORDER = [
	"script",
	"shot_list",
	"subjects",
	"prompts",
]


def run_until(project_dir: str, ctx: StageContext, until: str) -> None:
	if until not in STAGE_ORDER:
		raise ValueError(f"invalid stage: {until}")

	paths = project_paths(project_dir)
	paths.ensure_dirs()

	stages: Dict[str, Stage] = {
		"script": ScriptStage(),
		"shot_list": ShotListStage(),
		"subjects": SubjectsStage(),
		"prompts": PromptsStage(),
	}

	for name in STAGE_ORDER:
		print(f"[RUN] stage={name}")
		stages[name].run(paths, ctx)

		if name == until:
			break

	p = load_project(paths.project)
	done = [k for k, v in p.workflow_progress.items() if v]
	print(f"[OK] progress = {', '.join(done) or '-'}")
