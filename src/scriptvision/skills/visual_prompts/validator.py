# -*- coding: utf-8 -*-
"""
visual_prompts/validator.py

- JSON mode：concise / normal / detailed 三个键都必须是非空字符串。
- 文本回退：按空行切段，去掉 "Concise:" 之类的小标题，正好三段才算数。
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from scriptvision.core.normalize import normalize_response


LEVELS = ("concise", "normal", "detailed")

_HEADING_RE = re.compile(r"^[ \t]*(?:[-*#>][ \t]*)*(?:\*\*|__)?[ \t]*(?:\d+[.)][ \t]*)?(concise|normal|detailed)\b[^:\n]{0,20}:(?:\*\*|__)?[ \t]*", flags=re.IGNORECASE)


def validate_prompts_payload(payload: Dict[str, Any]) -> Dict[str, str]:
	if not isinstance(payload, dict):
		raise ValueError("payload must be a JSON object")

	out: Dict[str, str] = {}
	for k in LEVELS:
		v = payload.get(k)
		if not isinstance(v, str) or not v.strip():
			raise ValueError(f"missing or empty prompt: {k}")
		out[k] = v.strip()
	return out


def split_prompt_variants(raw: Any) -> Optional[Dict[str, str]]:
	text = normalize_response(raw)
	if not text:
		return None

	paragraphs: List[str] = []
	for block in re.split(r"\n[ \t]*\n", text):
		body = _HEADING_RE.sub("", block.strip()).strip()
		if body:
			paragraphs.append(" ".join(line.strip() for line in body.split("\n")))

	if len(paragraphs) != len(LEVELS):
		return None
	return dict(zip(LEVELS, paragraphs))
