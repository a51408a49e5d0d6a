# -*- coding: utf-8 -*-
"""
extract_subjects/validator.py

- 对 JSON mode 返回的主体列表做强校验，转成带新 id 的 Subject。
- category 必须能归一到 People / Places / Props 之一，否则整批作废（上层回退）。
"""

from __future__ import annotations

from typing import Any, Dict, List

from scriptvision.core.schemas import Subject, new_id, normalize_category


def validate_subject_item(item: Any, i: int) -> Subject:
	if not isinstance(item, dict):
		raise ValueError(f"subjects[{i}] must be an object")

	name = str(item.get("name") or "").strip()
	if not name:
		raise ValueError(f"subjects[{i}] missing name")

	category = normalize_category(item.get("category"), default=None)
	if category is None:
		raise ValueError(f"subjects[{i}] invalid category: {item.get('category')!r}")

	alias = str(item.get("alias") or "").strip()
	if alias.lower() in ("none", "n/a"):
		alias = ""

	return Subject(
		name=name,
		category=category,
		description=str(item.get("description") or "").strip(),
		alias=alias,
		active=True,
		id=new_id(),
	)


def validate_subjects_payload(payload: Dict[str, Any]) -> List[Subject]:
	if not isinstance(payload, dict):
		raise ValueError("payload must be a JSON object")

	items = payload.get("subjects")
	if not isinstance(items, list):
		raise ValueError("subjects must be a list")

	if not items:
		raise ValueError("subjects is empty")

	return [validate_subject_item(item, i) for i, item in enumerate(items)]
