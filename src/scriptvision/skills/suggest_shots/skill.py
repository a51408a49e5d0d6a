# -*- coding: utf-8 -*-
"""
suggest_shots/skill.py

这个文件做什么：
- 把“补镜头建议”的完整流程封装成一个 skill：
  1) 校验输入（分镜表不能为空）
  2) build prompt
  3) 调用 LLM 拿自由文本（失败原样上抛，不做解析）
  4) normalize + extract_shots 策略链
  5) 结果交给调用方放进 review batch；没解析出东西是 "no_suggestions"，不是错误

注意：
- 这里只依赖 llm_client.chat_text(...) 接口。
- 这条链路没有结构化主路径，extract_shots 就是唯一的解析方式。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from scriptvision.core.errors import EmptyInputError
from scriptvision.core.extract_shots import Drop, run_strategies
from scriptvision.core.normalize import normalize_response
from scriptvision.core.schemas import Shot, SuggestedShot
from scriptvision.logging_config import get_logger

from ..generation import generate
from .prompt import PHASE, SYSTEM_PROMPT, TEMPLATE_ID, build_user_prompt


log = get_logger(__name__)

OUTCOME_OK = "ok"
OUTCOME_NO_SUGGESTIONS = "no_suggestions"


@dataclass
class SuggestResult:
	suggestions: List[SuggestedShot]
	outcome: str
	strategy: str = ""
	raw_text: str = ""
	drops: List[Drop] = field(default_factory=list)


class SuggestShotsSkill:
	def __init__(self, llm_client: Any):
		self.llm_client = llm_client

	def run(self, script: str, shot_list: List[Shot]) -> SuggestResult:
		if not shot_list:
			raise EmptyInputError(
				"shot list",
				"No shot list: please generate a shot list first before requesting suggestions.",
			)

		user_prompt = build_user_prompt(script or "", shot_list)
		raw = generate(self.llm_client, TEMPLATE_ID, SYSTEM_PROMPT, user_prompt, phase=PHASE)
		text = normalize_response(raw)

		drops: List[Drop] = []
		strategy, suggestions = run_strategies(text, drops)

		if not suggestions:
			log.info("shot suggestions: nothing parsed from %d chars", len(text))
			return SuggestResult(suggestions=[], outcome=OUTCOME_NO_SUGGESTIONS, raw_text=text, drops=drops)

		return SuggestResult(
			suggestions=suggestions,
			outcome=OUTCOME_OK,
			strategy=strategy,
			raw_text=text,
			drops=drops,
		)
