# -*- coding: utf-8 -*-
"""
visual_prompts/skill.py

单个镜头 -> GeneratedPrompt（concise / normal / detailed）：
1) 没选风格直接报 EmptyInputError，不调模型
2) 结构化主路径：JSON mode + validate_prompts_payload
3) 主路径不合规 -> 自由文本，按空行切三段
4) 文本也切不出三段 -> 用镜头字段 + 风格前后缀拼一个模板版本（template 回退）
5) 模型调用失败（GenerationError）原样上抛

三档 prompt 都保证以风格 prefix 开头、以 suffix 结尾。
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from scriptvision.core.errors import EmptyInputError, StructuredOutputError
from scriptvision.core.schemas import CameraSettings, GeneratedPrompt, Shot, Style, Subject, new_id
from scriptvision.logging_config import get_logger

from ..generation import generate, generate_structured
from .prompt import (
	JSON_SYSTEM_PROMPT,
	PHASE,
	SYSTEM_PROMPT,
	TEMPLATE_ID,
	build_json_prompt,
	build_text_prompt,
	relevant_subjects,
)
from .validator import LEVELS, split_prompt_variants, validate_prompts_payload


log = get_logger(__name__)

SOURCE_STRUCTURED = "structured"
SOURCE_TEXT = "text"
SOURCE_TEMPLATE = "template"


@dataclass
class VisualPromptResult:
	prompt: GeneratedPrompt
	used_fallback: bool
	error: str
	source: str = SOURCE_STRUCTURED


def _sentence(s: str) -> str:
	s = s.strip()
	if s and s[-1] not in ".!?":
		s += "."
	return s


def compose_from_shot(shot: Shot, camera: Optional[CameraSettings] = None) -> Dict[str, str]:
	"""不依赖模型的三档 prompt：镜头字段按固定句式拼起来。"""
	cam = camera or CameraSettings()
	who = shot.people if shot.people.lower() not in ("", "none") else ""
	where = f" in {shot.location}" if shot.location else ""
	size = shot.shot_size or "Medium shot"

	what = shot.action or shot.description
	if who and who.lower() not in what.lower():
		what = f"{who} {what}"

	concise = _sentence(f"{size} of {who or shot.description}{where}")
	normal = " ".join(x for x in [
		_sentence(f"{size}, {what}{where}"),
		_sentence(f"Camera {cam.move}") if cam.move else "",
	] if x)
	detailed = " ".join(x for x in [
		normal,
		_sentence(shot.description) if shot.description and shot.description not in what else "",
		_sentence(f"{cam.depth_of_field} depth of field") if cam.depth_of_field else "",
		_sentence(f"Framing: {cam.framing}") if cam.framing else "",
	] if x)

	return {"concise": concise, "normal": normal, "detailed": detailed}


def apply_style(text: str, style: Style) -> str:
	out = text.strip()
	prefix = style.prefix.strip()
	suffix = style.suffix.strip()
	if prefix and not out.lower().startswith(prefix.lower()):
		out = f"{prefix} {out}"
	if suffix and not out.lower().endswith(suffix.lower()):
		out = f"{out} {suffix}"
	return out


class GenerateVisualPromptSkill:
	def __init__(self, llm_client: Any):
		self.llm_client = llm_client

	def run(
		self,
		shot: Shot,
		subjects: Sequence[Subject],
		style: Optional[Style],
		script: str = "",
		camera: Optional[CameraSettings] = None,
	) -> VisualPromptResult:
		if style is None:
			raise EmptyInputError("style", "No style selected")

		related = relevant_subjects(shot, subjects)
		error = ""
		source = SOURCE_STRUCTURED

		try:
			variants = generate_structured(
				self.llm_client,
				PHASE,
				TEMPLATE_ID,
				JSON_SYSTEM_PROMPT,
				build_json_prompt(shot, related, style, script, camera),
				validate_prompts_payload,
			)
		except StructuredOutputError as e:
			log.warning("structured visual prompt rejected, falling back to text: %s", e)
			error = str(e)
			raw = generate(
				self.llm_client,
				TEMPLATE_ID,
				SYSTEM_PROMPT,
				build_text_prompt(shot, related, style, script, camera),
				phase=PHASE,
			)
			variants = split_prompt_variants(raw)
			source = SOURCE_TEXT
			if variants is None:
				log.info("visual prompt: reply did not split into %d paragraphs, using template", len(LEVELS))
				variants = compose_from_shot(shot, camera)
				source = SOURCE_TEMPLATE

		prompt = GeneratedPrompt(
			shot_id=shot.id,
			concise=apply_style(variants["concise"], style),
			normal=apply_style(variants["normal"], style),
			detailed=apply_style(variants["detailed"], style),
			timestamp=datetime.now(timezone.utc).isoformat(),
			id=new_id(),
		)
		return VisualPromptResult(prompt=prompt, used_fallback=source != SOURCE_STRUCTURED, error=error, source=source)
