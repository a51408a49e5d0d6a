# -*- coding: utf-8 -*-
"""
scriptvision/core/schemas/shot.py

Shot / SuggestedShot：分镜条目的数据结构，extractor、merger、review 的共享契约。
- core 定义，skills 使用。
- 不依赖任何业务层（LLM、CLI 等）。

字段命名用 snake_case；from_dict() 同时接受旧版 camelCase（shotSize 等），
便于导入外部导出的 JSON。
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional


DEFAULT_SHOT_SIZE = "MS"
DEFAULT_REASON = "Suggested to enhance the visual storytelling."

# camelCase（外部 JSON）-> snake_case（本项目字段）
_CAMEL_ALIASES = {
	"shotSize": "shot_size",
	"setDressing": "set_dressing",
	"specialEffects": "special_effects",
	"directorsNotes": "directors_notes",
}


def new_id() -> str:
	return str(uuid.uuid4())


def _text(v: Any) -> str:
	if v is None:
		return ""
	if isinstance(v, float) and v.is_integer():
		return str(int(v))
	return str(v).strip()


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
	out = {}
	for k, v in data.items():
		out[_CAMEL_ALIASES.get(k, k)] = v
	return out


@dataclass
class ShotFields:
	"""
	一个镜头的全部内容字段（不含身份）。

	scene / shot：
	- 都是字符串，"数字样"，shot 可以带小数（"2.1" 表示插在 2 和 3 之间的子镜头）
	- 排序规则见 core/merge.py

	shot_size：
	- 景别代码（ECU/CU/MCU/MS/MLS/LS/ELS），没给就是空串；建议镜头缺省为 "MS"
	"""
	scene: str = ""
	shot: str = ""
	description: str = ""
	shot_size: str = ""
	people: str = ""
	action: str = ""
	dialogue: str = ""
	location: str = ""
	timestamp: str = ""
	reference: str = ""
	set_dressing: str = ""
	props: str = ""
	special_effects: str = ""
	notes: str = ""
	directors_notes: str = ""


CONTENT_FIELDS = tuple(f.name for f in fields(ShotFields))


@dataclass
class Shot(ShotFields):
	"""canonical 分镜条目：一定有 id，id 一旦分配不再复用。"""
	id: str = ""

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Shot":
		d = _normalize_keys(data)
		kw = {k: _text(d.get(k)) for k in CONTENT_FIELDS}
		return cls(id=_text(d.get("id")), **kw)

	@classmethod
	def from_candidate(cls, c: ShotFields, shot_id: Optional[str] = None) -> "Shot":
		"""从任意 ShotFields（SuggestedShot / Shot）拷贝内容字段，并给定 id。"""
		kw = {k: getattr(c, k) for k in CONTENT_FIELDS}
		return cls(id=shot_id or new_id(), **kw)


@dataclass
class SuggestedShot(ShotFields):
	"""
	extractor 产出的候选镜头：没有稳定 id，多一个 reason（为什么建议这一镜）。
	"""
	reason: str = ""

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "SuggestedShot":
		d = _normalize_keys(data)
		kw = {k: _text(d.get(k)) for k in CONTENT_FIELDS}
		return cls(reason=_text(d.get("reason")), **kw)

	def is_complete(self) -> bool:
		return bool(self.scene and self.shot and self.description)
