# -*- coding: utf-8 -*-
"""
suggest_shots/prompt.py

这个文件做什么：
- 把剧本 + 现有分镜表拼成“补镜头建议”的任务描述。
- 这里不调用模型，只做 prompt 组装。

关键点：
- 明确要求 "Scene N, Shot M: 描述" + "Shot Size:" + "Reason:" 的输出格式，
  这正是 extract_shots 的 pattern 策略最稳的输入形状。
"""

from __future__ import annotations

import json
from typing import List

from scriptvision.core.schemas import Shot


TEMPLATE_ID = "shot-suggestions"
PHASE = "shotSuggestions"

SYSTEM_PROMPT = "You are a helpful assistant specialized in visual prompts and film production."


def existing_shots_payload(shot_list: List[Shot]) -> List[dict]:
	return [
		{
			"scene": s.scene,
			"shot": s.shot,
			"shotSize": s.shot_size,
			"description": s.description,
			"people": s.people,
			"action": s.action,
			"dialogue": s.dialogue,
			"location": s.location,
		}
		for s in shot_list
	]


def build_user_prompt(script: str, shot_list: List[Shot]) -> str:
	existing = json.dumps(existing_shots_payload(shot_list), ensure_ascii=False, indent=2)

	return (
		"Analyze this script and existing shot list. Suggest additional shots that might be missing "
		"or would enhance the visual storytelling.\n"
		"\n"
		"SCRIPT:\n"
		f"{script}\n"
		"\n"
		"EXISTING SHOT LIST:\n"
		f"{existing}\n"
		"\n"
		"Consider establishing shots, reaction shots, insert shots, transitional shots, "
		"emotional beats and visual motifs.\n"
		"\n"
		"For each suggested shot, provide:\n"
		"- Scene number\n"
		"- Shot number (can be a decimal if it fits between existing shots, e.g., 3.5)\n"
		"- Description of the shot\n"
		"- Recommended shot size (ECU, CU, MCU, MS, MLS, LS, ELS)\n"
		"- Reason why this shot would enhance the visual storytelling\n"
		"\n"
		"Format each suggestion as follows:\n"
		"Scene [number], Shot [number]: [description]\n"
		"Shot Size: [size]\n"
		"Reason: [explanation]\n"
		"\n"
		"Aim to suggest 3-7 additional shots that would significantly improve the visual storytelling."
	)
