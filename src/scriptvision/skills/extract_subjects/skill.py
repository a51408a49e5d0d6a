# -*- coding: utf-8 -*-
"""
extract_subjects/skill.py

剧本 -> 提议主体（proposed_subjects）：
- 结构化主路径失败（StructuredOutputError）回退到自由文本 + extract_subjects
- 结果只进 proposed，不直接并入 canonical；合并由 ProjectState.merge_proposed_subjects 做
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from scriptvision.core.errors import EmptyInputError, StructuredOutputError
from scriptvision.core.extract_subjects import extract_subjects
from scriptvision.core.schemas import Subject
from scriptvision.logging_config import get_logger

from ..generation import generate, generate_structured
from .prompt import JSON_SYSTEM_PROMPT, PHASE, SYSTEM_PROMPT, TEMPLATE_ID, build_json_prompt, build_text_prompt
from .validator import validate_subjects_payload


log = get_logger(__name__)

OUTCOME_OK = "ok"
OUTCOME_NOTHING_PARSED = "nothing_parsed"


@dataclass
class SubjectsResult:
	subjects: List[Subject]
	used_fallback: bool
	error: str
	outcome: str = OUTCOME_OK


class ExtractSubjectsSkill:
	def __init__(self, llm_client: Any):
		self.llm_client = llm_client

	def run(self, script: str) -> SubjectsResult:
		if not (script or "").strip():
			raise EmptyInputError("script", "Script is empty")

		try:
			subjects = generate_structured(
				self.llm_client,
				PHASE,
				TEMPLATE_ID,
				JSON_SYSTEM_PROMPT,
				build_json_prompt(script),
				validate_subjects_payload,
			)
			return SubjectsResult(subjects=subjects, used_fallback=False, error="")

		except StructuredOutputError as e:
			log.warning("structured subjects rejected, falling back to text parsing: %s", e)
			error = str(e)

		raw = generate(self.llm_client, TEMPLATE_ID, SYSTEM_PROMPT, build_text_prompt(script), phase=PHASE)
		subjects = extract_subjects(raw)
		if not subjects:
			log.info("subjects: nothing parsed from the text fallback")
			return SubjectsResult(subjects=[], used_fallback=True, error=error, outcome=OUTCOME_NOTHING_PARSED)
		return SubjectsResult(subjects=subjects, used_fallback=True, error=error)
