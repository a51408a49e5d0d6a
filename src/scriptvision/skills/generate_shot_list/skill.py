# -*- coding: utf-8 -*-
"""
generate_shot_list/skill.py

这个文件做什么：
- 剧本 -> 分镜表：
  1) 校验剧本非空
  2) 结构化主路径：JSON mode + validate_shot_list_payload
  3) 主路径输出不合规（StructuredOutputError）时回退：自由文本 + extract_shots + merge_shots 分配 id
  4) 模型调用本身失败（GenerationError）不回退，原样上抛

返回的 shots 已按 scene/shot 排好序。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from scriptvision.core.errors import EmptyInputError, StructuredOutputError
from scriptvision.core.extract_shots import run_strategies
from scriptvision.core.merge import merge_shots, sort_shots
from scriptvision.core.schemas import Shot
from scriptvision.logging_config import get_logger

from ..generation import generate, generate_structured
from .prompt import JSON_SYSTEM_PROMPT, PHASE, SYSTEM_PROMPT, TEMPLATE_ID, build_json_prompt, build_text_prompt
from .validator import validate_shot_list_payload


log = get_logger(__name__)

OUTCOME_OK = "ok"
OUTCOME_NOTHING_PARSED = "nothing_parsed"


@dataclass
class ShotListResult:
	shots: List[Shot]
	used_fallback: bool
	error: str
	strategy: str = "structured"
	outcome: str = OUTCOME_OK


class GenerateShotListSkill:
	def __init__(self, llm_client: Any):
		self.llm_client = llm_client

	def run(self, script: str) -> ShotListResult:
		if not (script or "").strip():
			raise EmptyInputError("script", "Script is empty")

		try:
			shots = generate_structured(
				self.llm_client,
				PHASE,
				TEMPLATE_ID,
				JSON_SYSTEM_PROMPT,
				build_json_prompt(script),
				validate_shot_list_payload,
			)
			return ShotListResult(shots=sort_shots(shots), used_fallback=False, error="")

		except StructuredOutputError as e:
			log.warning("structured shot list rejected, falling back to text parsing: %s", e)
			error = str(e)

		raw = generate(self.llm_client, TEMPLATE_ID, SYSTEM_PROMPT, build_text_prompt(script), phase=PHASE)
		strategy, candidates = run_strategies(raw)
		if not candidates:
			log.info("shot list: nothing parsed from the text fallback")
			return ShotListResult(shots=[], used_fallback=True, error=error, strategy="", outcome=OUTCOME_NOTHING_PARSED)

		return ShotListResult(
			shots=merge_shots([], candidates),
			used_fallback=True,
			error=error,
			strategy=strategy,
		)
