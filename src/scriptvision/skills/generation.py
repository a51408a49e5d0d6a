# -*- coding: utf-8 -*-
"""
skills/generation.py

skill 层调用模型的两个入口：
- generate()            : 自由文本；失败原样上抛（GenerationError），不做解析
- generate_structured() : JSON mode + 本地 validate；不合规抛 StructuredOutputError

validate(data) 负责把 dict 转成目标对象，不合规就 raise ValueError，
这里统一包装成 StructuredOutputError，方便上层只 catch 一种错误去做回退。
"""

from __future__ import annotations

from typing import Any, Callable, Dict, TypeVar

from scriptvision.core.errors import StructuredOutputError
from scriptvision.providers.llm.base import LLMClient


T = TypeVar("T")


def generate(llm: LLMClient, template: str, system_prompt: str, user_prompt: str, phase: str = "") -> str:
	return llm.chat_text(system_prompt, user_prompt, template=template, phase=phase)


def generate_structured(
	llm: LLMClient,
	phase: str,
	template: str,
	system_prompt: str,
	user_prompt: str,
	validate: Callable[[Dict[str, Any]], T],
) -> T:
	data = llm.chat_json(system_prompt, user_prompt, template=template, phase=phase)
	try:
		return validate(data)
	except StructuredOutputError:
		raise
	except ValueError as e:
		raise StructuredOutputError(str(e)) from e
