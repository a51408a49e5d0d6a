# -*- coding: utf-8 -*-
"""
scriptvision/core/schemas/style.py

Style / GeneratedPrompt：随项目一起落盘的附属集合，core 只做增删改，不解析。
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .shot import new_id


@dataclass
class Style:
	name: str
	prefix: str = ""
	suffix: str = ""
	genre: str = ""
	descriptors: str = ""
	id: str = ""

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Style":
		return cls(
			name=str(data.get("name") or ""),
			prefix=str(data.get("prefix") or ""),
			suffix=str(data.get("suffix") or ""),
			genre=str(data.get("genre") or ""),
			descriptors=str(data.get("descriptors") or ""),
			id=str(data.get("id") or new_id()),
		)


@dataclass
class GeneratedPrompt:
	shot_id: str
	concise: str = ""
	normal: str = ""
	detailed: str = ""
	timestamp: str = ""
	id: str = ""

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "GeneratedPrompt":
		return cls(
			shot_id=str(data.get("shot_id") or data.get("shotId") or ""),
			concise=str(data.get("concise") or ""),
			normal=str(data.get("normal") or ""),
			detailed=str(data.get("detailed") or ""),
			timestamp=str(data.get("timestamp") or ""),
			id=str(data.get("id") or new_id()),
		)


@dataclass
class CameraSettings:
	"""生成视觉 prompt 时的镜头参数；全部可选，空串表示不指定。"""
	shot: str = ""
	move: str = ""
	framing: str = ""
	depth_of_field: str = ""
	camera_type: str = ""
	camera_name: str = ""

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)
