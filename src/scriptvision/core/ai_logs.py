# -*- coding: utf-8 -*-
"""
scriptvision/core/ai_logs.py

logs/llm.jsonl：每次和模型的往来（prompt / response）追加一行 JSON。
- 只追加，不改写；读的时候坏行跳过。
- 记录的是“发了什么、回了什么、用的哪个模型”，便于事后复盘解析失败的原因。
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from scriptvision.core.schemas import new_id


def append_log(
	path: Path,
	type: str,
	content: str,
	template: str = "",
	metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
	entry = {
		"id": new_id(),
		"type": type,
		"template": template,
		"content": content,
		"timestamp": datetime.now(timezone.utc).isoformat(),
		"metadata": metadata or {},
	}

	path.parent.mkdir(parents=True, exist_ok=True)
	with path.open("a", encoding="utf-8") as f:
		f.write(json.dumps(entry, ensure_ascii=False) + "\n")

	return entry


def read_logs(path: Path) -> List[Dict[str, Any]]:
	if not path.exists():
		return []

	out = []
	for line in path.read_text(encoding="utf-8").splitlines():
		if not line.strip():
			continue
		try:
			out.append(json.loads(line))
		except ValueError:
			continue
	return out
