# -*- coding: utf-8 -*-
"""
generate_shot_list/validator.py

这个文件做什么：
- 对 JSON mode 返回的分镜表做强校验，并转成带 id 的 Shot。
- 任何不合规：直接 raise ValueError，让上层回退到自由文本解析。
"""

from __future__ import annotations

from typing import Any, Dict, List

from scriptvision.core.schemas import Shot, new_id


REQUIRED = ("scene", "shot", "description")


def validate_shot_item(item: Any, i: int) -> Shot:
	if not isinstance(item, dict):
		raise ValueError(f"shots[{i}] must be an object")

	s = Shot.from_dict(item)
	for k in REQUIRED:
		if not getattr(s, k):
			raise ValueError(f"shots[{i}] missing {k}")

	s.id = new_id()
	return s


def validate_shot_list_payload(payload: Dict[str, Any]) -> List[Shot]:
	if not isinstance(payload, dict):
		raise ValueError("payload must be a JSON object")

	if "shots" not in payload:
		raise ValueError("missing key: shots")

	items = payload["shots"]
	if not isinstance(items, list):
		raise ValueError("shots must be a list")

	if not items:
		raise ValueError("shots is empty")

	return [validate_shot_item(item, i) for i, item in enumerate(items)]
