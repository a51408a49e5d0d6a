# -*- coding: utf-8 -*-
"""
generate_shot_list/prompt.py

这个文件做什么：
- 结构化主路径：要求模型只输出 {"shots": [...]} 的 JSON 对象。
- 自由文本回退：沿用“逐镜头 Label: value”的纯文本格式，交给 extract_shots。
"""

from __future__ import annotations


TEMPLATE_ID = "shot-list-generation"
PHASE = "shotListGeneration"

SYSTEM_PROMPT = "You are a helpful assistant specialized in visual prompts and film production."

JSON_SYSTEM_PROMPT = (
	"You are a film shot-list planner.\n"
	"You must output exactly one JSON object. No explanations, no Markdown, no code fences.\n"
)

_FIELDS_HELP = (
	"- Scene number\n"
	"- Shot number\n"
	"- Shot size (ECU, CU, MCU, MS, MLS, LS, ELS)\n"
	"- Description\n"
	"- People in the shot\n"
	"- Action\n"
	"- Dialogue\n"
	"- Location\n"
)


def build_text_prompt(script: str) -> str:
	return (
		"Generate a detailed shot list from the following script. Break it down into scenes and shots "
		"with the following information for each shot:\n"
		+ _FIELDS_HELP
		+ "\n"
		"Format each shot as follows:\n"
		"Scene [number], Shot [number]: [description]\n"
		"Shot Size: [size]\n"
		"People: [people]\n"
		"Action: [action]\n"
		"Dialogue: [dialogue]\n"
		"Location: [location]\n"
		"\n"
		"SCRIPT:\n"
		f"{script}"
	)


def build_json_prompt(script: str) -> str:
	return (
		"Generate a detailed shot list from the following script.\n"
		"Output format:\n"
		"{\n"
		'  "shots": [\n'
		'    {"scene": "1", "shot": "1", "shot_size": "WS", "description": "...", '
		'"people": "...", "action": "...", "dialogue": "...", "location": "..."}\n'
		"  ]\n"
		"}\n"
		"\n"
		"Hard requirements:\n"
		"- scene, shot and description are required for every shot\n"
		"- scene and shot are numbers written as strings; shot may be a decimal such as \"2.1\"\n"
		"- output JSON only\n"
		"\n"
		"SCRIPT:\n"
		f"{script}"
	)
