# -*- coding: utf-8 -*-
"""
scriptvision/core/schemas/subject.py

Subject：剧本里的人物 / 场所 / 道具。
- name 是去重键（大小写不敏感）
- category 是封闭枚举：People / Places / Props
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .shot import new_id


CATEGORIES = ("People", "Places", "Props")

_CATEGORY_ALIASES = {
	"people": "People",
	"person": "People",
	"character": "People",
	"characters": "People",
	"places": "Places",
	"place": "Places",
	"location": "Places",
	"locations": "Places",
	"props": "Props",
	"prop": "Props",
	"object": "Props",
	"objects": "Props",
}


def normalize_category(value: Any, default: Optional[str] = "People") -> Optional[str]:
	"""
	把 "characters" / "Locations (Places)" 之类的写法归一到三个合法值之一。
	认不出来就返回 default。
	"""
	if not value:
		return default
	s = str(value).strip().strip("*").strip()
	if s in CATEGORIES:
		return s
	head = s.lower().split("(")[0].strip()
	if head in _CATEGORY_ALIASES:
		return _CATEGORY_ALIASES[head]
	for word in s.lower().replace("(", " ").replace(")", " ").split():
		if word in _CATEGORY_ALIASES:
			return _CATEGORY_ALIASES[word]
	return default


@dataclass
class Subject:
	name: str
	category: str = "People"
	description: str = ""
	alias: str = ""
	active: bool = True
	lora_trigger: str = ""
	id: str = ""

	@property
	def key(self) -> str:
		return self.name.lower()

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Subject":
		return cls(
			name=str(data.get("name") or "").strip(),
			category=normalize_category(data.get("category")),
			description=str(data.get("description") or "").strip(),
			alias=str(data.get("alias") or "").strip(),
			active=bool(data.get("active", True)),
			lora_trigger=str(data.get("lora_trigger") or data.get("loraTrigger") or "").strip(),
			id=str(data.get("id") or new_id()),
		)
