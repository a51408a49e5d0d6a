# -*- coding: utf-8 -*-
"""
visual_prompts/prompt.py

这个文件做什么：
- 单个镜头 + 选中风格 + 相关主体 + 镜头参数 -> “生成三档视觉 prompt”的任务描述。
- 三档：concise / normal / detailed，给下游文生图用。
- relevant_subjects()：只把这个镜头里提到的 active 主体带进上下文。
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from scriptvision.core.schemas import CameraSettings, Shot, Style, Subject


TEMPLATE_ID = "visual-prompt"
PHASE = "visualPrompt"

SYSTEM_PROMPT = "You are a helpful assistant specialized in visual prompts and film production."

JSON_SYSTEM_PROMPT = (
	"You write prompts for AI image generation from film shots.\n"
	"You must output exactly one JSON object. No explanations, no Markdown, no code fences.\n"
)

_RULES = (
	"Important:\n"
	"1. Integrate camera work seamlessly into the scene description.\n"
	"2. Describe the scene positively. Focus on what is in the scene, not on what is absent.\n"
	"3. Begin every prompt with the style prefix when one is given.\n"
)


def _shot_text(shot: Shot) -> str:
	return " ".join([shot.description, shot.people, shot.action, shot.location, shot.props]).lower()


def relevant_subjects(shot: Shot, subjects: Sequence[Subject]) -> List[Subject]:
	"""active 且名字（或别名）出现在镜头文字里的主体；都没出现时退回全部 active 主体。"""
	active = [s for s in subjects if s.active]
	text = _shot_text(shot)
	hits = [s for s in active if s.name.lower() in text or (s.alias and s.alias.lower() in text)]
	return hits or active


def _context(shot: Shot, subjects: Sequence[Subject], style: Style, script: str, camera: Optional[CameraSettings]) -> str:
	cam = camera or CameraSettings()
	subject_info = "\n".join(f"{s.name}: {s.description}" for s in subjects) or "-"
	lines = [
		f"Subjects: {subject_info}",
		f"Shot Description: {shot.description}",
		f"Action: {shot.action}",
		f"Location: {shot.location}",
		f"Director's Notes: {shot.directors_notes}",
		f"Style: {style.name}",
		f"Style Prefix: {style.prefix}",
		f"Style Suffix: {style.suffix}",
		f"Camera Shot: {cam.shot}",
		f"Camera Move: {cam.move}",
		f"Camera Size: {shot.shot_size}",
		f"Framing: {cam.framing}",
		f"Depth of Field: {cam.depth_of_field}",
		f"Camera Type: {cam.camera_type}",
		f"Camera Name: {cam.camera_name}",
	]
	if script:
		lines.append(f"Full Script: {script}")
	return "\n".join(lines)


def build_text_prompt(
	shot: Shot,
	subjects: Sequence[Subject],
	style: Style,
	script: str = "",
	camera: Optional[CameraSettings] = None,
) -> str:
	return (
		"Generate three visual prompts (concise, normal, and detailed) for AI image generation "
		"based on the following information:\n"
		"\n"
		+ _context(shot, subjects, style, script, camera)
		+ "\n\n"
		+ _RULES
		+ "\n"
		"Write the three prompts as three paragraphs separated by a blank line, "
		"in the order concise, normal, detailed. No headings."
	)


def build_json_prompt(
	shot: Shot,
	subjects: Sequence[Subject],
	style: Style,
	script: str = "",
	camera: Optional[CameraSettings] = None,
) -> str:
	return (
		"Generate three visual prompts for AI image generation.\n"
		"Output format:\n"
		'{"concise": "...", "normal": "...", "detailed": "..."}\n'
		"\n"
		+ _context(shot, subjects, style, script, camera)
		+ "\n\n"
		+ _RULES
	)
