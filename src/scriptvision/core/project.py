# -*- coding: utf-8 -*-
"""
scriptvision/core/project.py

目的：
- 定义 project.json 对应的 ProjectState，以及读写方法。
- ProjectState 是整个应用的状态对象：剧本、canonical 分镜表 / 主体、
  待审的建议镜头 / 提议主体、风格、生成过的 prompt、工作流进度。

约定：
- 所有集合更新都是“整体替换”：先算出新 list，再赋值回字段，
  不在原 list 上 append / remove。调用方手里拿着的旧 list 不会被改掉。
- 建议镜头只能通过 accept_suggestions 进入 canonical；
  提议主体只能通过 merge_proposed_subjects 进入 canonical。
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from scriptvision.core import merge
from scriptvision.core.review import ReviewBatch
from scriptvision.core.schemas import GeneratedPrompt, Shot, Style, Subject, SuggestedShot, new_id


SCHEMA_VERSION = "scriptvision.project.v0.1"

PROGRESS_KEYS = [
	"script_completed",
	"shot_list_completed",
	"subjects_completed",
	"styles_completed",
	"prompts_completed",
]


def _empty_progress() -> Dict[str, bool]:
	return {k: False for k in PROGRESS_KEYS}


@dataclass
class ProjectState:
	name: str = "Untitled Project"
	script: str = ""
	shot_list: List[Shot] = field(default_factory=list)
	subjects: List[Subject] = field(default_factory=list)
	proposed_subjects: List[Subject] = field(default_factory=list)
	suggested_shots: ReviewBatch[SuggestedShot] = field(default_factory=ReviewBatch)
	styles: List[Style] = field(default_factory=list)
	selected_style_id: str = ""
	generated_prompts: List[GeneratedPrompt] = field(default_factory=list)
	workflow_progress: Dict[str, bool] = field(default_factory=_empty_progress)

	# ---------- progress ----------

	def mark(self, key: str, value: bool = True) -> None:
		if key not in PROGRESS_KEYS:
			raise ValueError(f"invalid progress key: {key}")
		self.workflow_progress = {**self.workflow_progress, key: value}

	# ---------- script ----------

	def set_script(self, script: str) -> None:
		self.script = script or ""
		self.mark("script_completed", bool(self.script.strip()))

	# ---------- shots ----------

	def set_shot_list(self, shots: Sequence[Shot]) -> None:
		self.shot_list = merge.sort_shots(shots)
		self.mark("shot_list_completed", bool(self.shot_list))

	def add_shots(self, shots: Sequence[Shot]) -> None:
		self.shot_list = merge.add_shots(self.shot_list, shots)

	def update_shot(self, shot: Shot) -> None:
		self.shot_list = merge.update_shot(self.shot_list, shot)

	def delete_shot(self, shot_id: str) -> None:
		self.shot_list = merge.delete_shot(self.shot_list, shot_id)

	def set_suggestions(self, suggestions: Sequence[SuggestedShot]) -> None:
		batch: ReviewBatch[SuggestedShot] = ReviewBatch()
		batch.replace(suggestions)
		self.suggested_shots = batch

	def accept_suggestions(self) -> int:
		"""把选中的建议镜头并入分镜表，返回并入条数；建议批次随之清空。"""
		before = len(self.shot_list)
		self.shot_list = self.suggested_shots.commit(lambda picked: merge.merge_shots(self.shot_list, picked))
		return len(self.shot_list) - before

	# ---------- subjects ----------

	def set_proposed_subjects(self, subjects: Sequence[Subject]) -> None:
		self.proposed_subjects = list(subjects)

	def merge_proposed_subjects(self, skipped: Optional[List[Subject]] = None) -> int:
		before = len(self.subjects)
		self.subjects = merge.merge_subjects(self.subjects, self.proposed_subjects, skipped=skipped)
		self.proposed_subjects = []
		if self.subjects:
			self.mark("subjects_completed")
		return len(self.subjects) - before

	def add_subject(self, subject: Subject) -> bool:
		"""手动添加：同名（大小写不敏感）已存在时不加，返回 False。"""
		merged = merge.merge_subjects(self.subjects, [subject])
		added = len(merged) > len(self.subjects)
		self.subjects = merged
		return added

	def update_subject(self, subject: Subject) -> None:
		# 先找 canonical，找不到再找 proposed
		if any(s.id == subject.id for s in self.subjects):
			self.subjects = [subject if s.id == subject.id else s for s in self.subjects]
		else:
			self.proposed_subjects = [subject if s.id == subject.id else s for s in self.proposed_subjects]

	def delete_subject(self, subject_id: str) -> None:
		if any(s.id == subject_id for s in self.subjects):
			self.subjects = [s for s in self.subjects if s.id != subject_id]
		else:
			self.proposed_subjects = [s for s in self.proposed_subjects if s.id != subject_id]

	# ---------- styles ----------

	def add_style(self, style: Style) -> Style:
		if not style.id:
			style = Style(**{**style.to_dict(), "id": new_id()})
		self.styles = [*self.styles, style]
		return style

	def update_style(self, style: Style) -> None:
		self.styles = [style if s.id == style.id else s for s in self.styles]

	def delete_style(self, style_id: str) -> None:
		self.styles = [s for s in self.styles if s.id != style_id]
		if self.selected_style_id == style_id:
			self.selected_style_id = ""

	def select_style(self, style_id: str) -> None:
		if style_id and not any(s.id == style_id for s in self.styles):
			raise ValueError(f"unknown style id: {style_id}")
		self.selected_style_id = style_id
		self.mark("styles_completed", bool(style_id))

	@property
	def selected_style(self) -> Optional[Style]:
		for s in self.styles:
			if s.id == self.selected_style_id:
				return s
		return None

	# ---------- prompts ----------

	def add_generated_prompt(self, prompt: GeneratedPrompt) -> None:
		self.generated_prompts = [*self.generated_prompts, prompt]
		self.mark("prompts_completed")


def new_project(name: str = "Untitled Project") -> ProjectState:
	return ProjectState(name=name)


def _progress_from(data: Any) -> Dict[str, bool]:
	progress = _empty_progress()
	if isinstance(data, dict):
		for k in PROGRESS_KEYS:
			if k in data:
				progress[k] = bool(data[k])
	return progress


def load_project(path: Path) -> ProjectState:
	"""
	从 project.json 加载。

	容错：缺字段就用默认值，避免轻易崩。
	"""
	data = json.loads(path.read_text(encoding="utf-8"))

	suggested = data.get("suggested_shots") or {}
	batch: ReviewBatch[SuggestedShot] = ReviewBatch()
	batch.replace([SuggestedShot.from_dict(x) for x in suggested.get("items", [])])
	for k, v in (suggested.get("selected") or {}).items():
		idx = int(k)
		if v and 0 <= idx < len(batch):
			batch.toggle(idx)

	return ProjectState(
		name=data.get("name", "Untitled Project"),
		script=data.get("script", ""),
		shot_list=[Shot.from_dict(x) for x in data.get("shot_list", [])],
		subjects=[Subject.from_dict(x) for x in data.get("subjects", [])],
		proposed_subjects=[Subject.from_dict(x) for x in data.get("proposed_subjects", [])],
		suggested_shots=batch,
		styles=[Style.from_dict(x) for x in data.get("styles", [])],
		selected_style_id=data.get("selected_style_id", ""),
		generated_prompts=[GeneratedPrompt.from_dict(x) for x in data.get("generated_prompts", [])],
		workflow_progress=_progress_from(data.get("workflow_progress")),
	)


def save_project(path: Path, p: ProjectState) -> None:
	"""落盘到 project.json（可读的 indent=2）。"""
	data = {
		"schema_version": SCHEMA_VERSION,
		"name": p.name,
		"script": p.script,
		"shot_list": [s.to_dict() for s in p.shot_list],
		"subjects": [s.to_dict() for s in p.subjects],
		"proposed_subjects": [s.to_dict() for s in p.proposed_subjects],
		"suggested_shots": {
			"items": [s.to_dict() for s in p.suggested_shots.items],
			"selected": {str(i): True for i in p.suggested_shots.selected_indices()},
		},
		"styles": [s.to_dict() for s in p.styles],
		"selected_style_id": p.selected_style_id,
		"generated_prompts": [g.to_dict() for g in p.generated_prompts],
		"workflow_progress": p.workflow_progress,
	}

	path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
