# -*- coding: utf-8 -*-
"""
providers/llm/base.py

skill 层只依赖这个接口，不关心背后是 OpenAI、兼容网关还是离线 mock：
- chat_text(system_prompt, user_prompt, template=...) -> str
- chat_json(system_prompt, user_prompt, template=...) -> dict
- close()
"""

from __future__ import annotations

from typing import Dict, Protocol


class LLMClient(Protocol):
	def chat_text(self, system_prompt: str, user_prompt: str, template: str = "", phase: str = "") -> str:
		...

	def chat_json(self, system_prompt: str, user_prompt: str, template: str = "", phase: str = "") -> Dict[str, Any]:
		...

	def close(self) -> None:
		...
