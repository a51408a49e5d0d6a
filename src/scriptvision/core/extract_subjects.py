# -*- coding: utf-8 -*-
"""
scriptvision/core/extract_subjects.py

这个文件做什么：
- 把“主体提取”任务的自由文本回复解析成 Subject 列表（人物 / 场所 / 道具）。
- 和 extract_shots 一样：纯函数、永不抛错、策略链先到先得。

策略：
1) sections : 按 People / Places / Props 小节走行状态机；
              "1. 名字"、"- 名字: 描述"、"**名字**" 都算一条新主体，
              Category / Description / Alias 字段行更新当前主体，其余行拼进描述。
2) bold     : 兜底。全文里每个 **名字** 都当一个主体，类别按它出现在
              "places" / "props" 之前还是之后来猜；同名只留第一个。
"""

from __future__ import annotations

import re
from typing import Any, Callable, List, Optional, Tuple

from scriptvision.core.extract_shots import Drop
from scriptvision.core.normalize import normalize_response
from scriptvision.core.schemas import Subject, new_id, normalize_category
from scriptvision.logging_config import get_logger


log = get_logger(__name__)


_HEADING_RE = re.compile(
	r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\*\*|__)?[ \t]*"
	r"(people|characters|places|locations|props|objects|important[ \t]+objects)\b"
	r"[^:\n]{0,40}?(?:\*\*|__)?[ \t]*:?[ \t]*(?:\*\*|__)?[ \t]*$",
	flags=re.IGNORECASE,
)

_FIELD_RE = re.compile(
	r"^[ \t]*(?:[-*•][ \t]*)*(?:\*\*|__)?[ \t]*(category|description|alias|lora[ \t]+trigger|trigger)"
	r"(?:\*\*|__)?[ \t]*:(?:\*\*|__)?[ \t]*(?P<value>.*)$",
	flags=re.IGNORECASE,
)

_NUMBERED_RE = re.compile(r"^[ \t]*\d+[.)][ \t]+(?P<body>.+)$")
# 顶层列表项：缩进最多 1 个空格；更深的缩进算上一条的子项
_BULLET_RE = re.compile(r"^[ ]?[-*•][ \t]+(?P<body>.+)$")
_BOLD_LINE_RE = re.compile(r"^[ \t]*(?P<body>\*\*[^*\n]+\*\*.*)$")
_BOLD_RE = re.compile(r"\*\*([^*\n]+)\*\*")

_NONE_VALUES = {"", "none", "n/a", "na", "-", "—"}
_RESERVED = {"category", "description", "alias", "people", "places", "props", "characters", "locations", "objects"}


def _clean(s: str) -> str:
	return s.replace("**", "").replace("__", "").strip().strip(":").strip()


def _alias(value: str) -> str:
	v = _clean(value)
	if v.lower().strip(".\"'()") in _NONE_VALUES:
		return ""
	return v


def _split_item(body: str) -> Tuple[str, str]:
	"""'**John** - desc' / 'John: desc' / 'John' -> (name, inline_description)"""
	body = body.strip()
	m = re.match(r"^\*\*([^*\n]+)\*\*(.*)$", body)
	if m:
		name, rest = m.group(1), m.group(2)
		return _clean(name), _clean(rest.lstrip(" \t:-–—"))

	for sep in (":", " – ", " — ", " - "):
		if sep in body:
			name, rest = body.split(sep, 1)
			return _clean(name), _clean(rest)

	return _clean(body), ""


def sections_strategy(text: str, diagnostics: Optional[List[Drop]] = None) -> List[Subject]:
	out: List[Subject] = []
	category = "People"
	current: Optional[Subject] = None

	def flush() -> None:
		nonlocal current
		if current is None:
			return
		if current.name:
			current.description = current.description.strip()
			out.append(current)
		elif diagnostics is not None:
			diagnostics.append(Drop(strategy="sections", reason="missing name", snippet=current.description[:80]))
		current = None

	for raw in text.split("\n"):
		if not raw.strip():
			continue

		m = _HEADING_RE.match(raw)
		if m:
			flush()
			category = normalize_category(m.group(1), default=category)
			continue

		m = _FIELD_RE.match(raw)
		if m:
			if current is None:
				continue
			label = m.group(1).lower()
			value = m.group("value")
			if label == "category":
				current.category = normalize_category(_clean(value), default=current.category)
			elif label == "description":
				current.description = _clean(value)
			elif label == "alias":
				current.alias = _alias(value)
			else:
				current.lora_trigger = _clean(value)
			continue

		m = _NUMBERED_RE.match(raw) or _BULLET_RE.match(raw) or _BOLD_LINE_RE.match(raw)
		if m:
			flush()
			name, desc = _split_item(m.group("body"))
			current = Subject(name=name, category=category, description=desc, alias="", active=True, id=new_id())
			continue

		if current is not None:
			extra = _clean(raw.strip().lstrip("-*• \t"))
			if extra:
				current.description = (current.description + " " + extra).strip()

	flush()
	return out


def bold_names_strategy(text: str, diagnostics: Optional[List[Drop]] = None) -> List[Subject]:
	out: List[Subject] = []
	seen = set()
	low = text.lower()
	places_at = low.find("places")
	props_at = low.find("props")

	for m in _BOLD_RE.finditer(text):
		name = _clean(m.group(1))
		if not name or name.lower() in _RESERVED:
			continue
		if name.lower() in seen:
			if diagnostics is not None:
				diagnostics.append(Drop(strategy="bold", reason="duplicate name", snippet=name))
			continue
		seen.add(name.lower())

		pos = m.start()
		if props_at != -1 and pos > props_at:
			category = "Props"
		elif places_at != -1 and pos > places_at:
			category = "Places"
		else:
			category = "People"

		line_end = text.find("\n", m.end())
		rest = text[m.end(): line_end if line_end != -1 else len(text)]
		out.append(Subject(name=name, category=category, description=_clean(rest.lstrip(" \t:-–—")), active=True, id=new_id()))

	return out


SubjectStrategy = Callable[[str, Optional[List[Drop]]], List[Subject]]

STRATEGIES: List[Tuple[str, SubjectStrategy]] = [
	("sections", sections_strategy),
	("bold", bold_names_strategy),
]


def extract_subjects(raw_text: Any, diagnostics: Optional[List[Drop]] = None) -> List[Subject]:
	text = normalize_response(raw_text)
	if not text:
		return []

	for name, fn in STRATEGIES:
		try:
			subjects = fn(text, diagnostics)
		except Exception as e:  # 单个策略出错只算它没结果
			log.warning("subject extraction strategy %s failed: %s", name, e)
			continue
		if subjects:
			log.debug("subject extraction: strategy=%s records=%d", name, len(subjects))
			return subjects

	return []
