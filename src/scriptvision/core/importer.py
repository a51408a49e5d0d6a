# -*- coding: utf-8 -*-
"""
scriptvision/core/importer.py

手动导入分镜：用户粘贴一段文本（导出的 JSON，或者随便从哪复制的分镜表）。

- 文本整体能解析成 JSON：
    * 是数组 -> 每个对象转 Shot；自带 id 且没和已有 id 冲突就保留，否则分配新 id；
                走 add_shots（拼接 + 排序）
    * 不是数组 -> outcome="invalid"，分镜表不动
- 不是 JSON：走 extract_shots 的策略链，候选走 merge_shots（全部分配新 id）
- 一条都没解析出来：outcome="nothing_parsed"，分镜表不动

和 extract_shots 一样不抛错；结果靠 outcome 区分。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Sequence

from scriptvision.core.extract_shots import run_strategies
from scriptvision.core.merge import add_shots, merge_shots
from scriptvision.core.normalize import normalize_response
from scriptvision.core.schemas import Shot, new_id
from scriptvision.logging_config import get_logger


log = get_logger(__name__)

OUTCOME_OK = "ok"
OUTCOME_INVALID = "invalid"
OUTCOME_NOTHING_PARSED = "nothing_parsed"

SOURCE_JSON = "json"
SOURCE_TEXT = "text"


@dataclass
class ImportResult:
	shots: List[Shot]  # 导入后的完整分镜表
	imported: int
	outcome: str
	source: str


def _shots_from_json(items: List[Any], canonical: Sequence[Shot]) -> List[Shot]:
	used = {s.id for s in canonical}
	out: List[Shot] = []
	for item in items:
		if not isinstance(item, dict):
			continue
		shot = Shot.from_dict(item)
		if not shot.id or shot.id in used:
			sid = new_id()
			while sid in used:
				sid = new_id()
			shot.id = sid
		used.add(shot.id)
		out.append(shot)
	return out


def import_shots(canonical: Sequence[Shot], text: Any) -> ImportResult:
	body = normalize_response(text)
	unchanged = list(canonical)

	try:
		data = json.loads(body)
	except (ValueError, RecursionError):
		# 嵌套过深的 JSON 也按普通文本处理
		data = None
	else:
		if not isinstance(data, list):
			log.info("import rejected: JSON value is %s, not an array", type(data).__name__)
			return ImportResult(shots=unchanged, imported=0, outcome=OUTCOME_INVALID, source=SOURCE_JSON)

		shots = _shots_from_json(data, canonical)
		if not shots:
			return ImportResult(shots=unchanged, imported=0, outcome=OUTCOME_NOTHING_PARSED, source=SOURCE_JSON)
		return ImportResult(shots=add_shots(canonical, shots), imported=len(shots), outcome=OUTCOME_OK, source=SOURCE_JSON)

	_, candidates = run_strategies(body)
	if not candidates:
		return ImportResult(shots=unchanged, imported=0, outcome=OUTCOME_NOTHING_PARSED, source=SOURCE_TEXT)

	return ImportResult(
		shots=merge_shots(canonical, candidates),
		imported=len(candidates),
		outcome=OUTCOME_OK,
		source=SOURCE_TEXT,
	)
