# -*- coding: utf-8 -*-
"""
scriptvision/core/extract_shots.py

这个文件做什么：
- 把模型返回的一段自由文本，尽力还原成一组候选镜头（SuggestedShot）。
- 纯函数：输入 -> 输出，不读写文件、不调用模型、永不抛错。

策略链（按顺序尝试，第一个产出 >=1 条的策略胜出，后面的策略不再执行）：
1) pattern       : "Scene 1, Shot 2: 描述" 这种同一行带描述的标题；
                   在到下一个标题为止的文本里找 "Label: value" 属性行。
2) embedded_json : 文本里同时有 { 和 } 时，逐个解析最小的、不嵌套的 {...}；
                   解析失败的片段直接跳过。
3) line_scan     : 逐行状态机，一个“当前候选”累加器；遇到标题行就 flush。

候选规则：
- scene / shot / description 三者缺一即丢弃（不补默认值）。
- 其余字段有默认：shot_size="MS"，action=description，reason=固定的通用说明，其它为空串。
- 丢弃的候选可以通过 diagnostics（一个 list）拿到 Drop 记录，默认不输出。
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from scriptvision.core.normalize import normalize_response
from scriptvision.core.schemas import DEFAULT_REASON, DEFAULT_SHOT_SIZE, SuggestedShot
from scriptvision.logging_config import get_logger


log = get_logger(__name__)


# 行首可能出现的 Markdown 噪声：缩进、列表符号、引用、标题井号、"1." 编号、加粗
_PREFIX = r"^[ \t]*(?:[-*•>#][ \t]*)*(?:\d+[.)][ \t]+)?(?:\*\*|__)?[ \t]*"
_BOLD = r"(?:\*\*|__)?"
_NUM = r"(\d+(?:\.\d+)?)"
# 标题与描述之间的分隔：冒号 / 句点 / 各种破折号，可以没有
_SEP = r"[ \t]*(?:\([^)\n]*\))?[ \t]*(?:[:.\-–—][ \t]*)?" + _BOLD + r"[ \t]*"

# Scene 1, Shot 2: 描述
_HEADER_RE = re.compile(
	_PREFIX + r"Scene[ \t]+(\d+)[ \t]*[,;/|\-–—]?[ \t]*Shot[ \t]+" + _NUM + r"\b" + _BOLD + _SEP + r"(?P<desc>[^\n]*)$",
	flags=re.IGNORECASE | re.MULTILINE,
)

# Shot 2 (Scene 1): 描述
_ALT_HEADER_RE = re.compile(
	_PREFIX + r"Shot[ \t]+" + _NUM + r"[ \t]*\([ \t]*Scene[ \t]+(\d+)[ \t]*\)" + _BOLD + r"[ \t]*(?:[:.\-–—][ \t]*)?" + _BOLD + r"[ \t]*(?P<desc>[^\n]*)$",
	flags=re.IGNORECASE | re.MULTILINE,
)

# 只在 line_scan 里使用：单独的 "Scene 3" 行、单独的 "Shot 4: ..." 行
_SCENE_ONLY_RE = re.compile(_PREFIX + r"Scene[ \t]+(\d+)\b", flags=re.IGNORECASE)
_SHOT_ONLY_RE = re.compile(
	_PREFIX + r"Shot[ \t]+(?:#[ \t]*)?" + _NUM + r"\b" + _BOLD + _SEP + r"(?P<desc>.*)$",
	flags=re.IGNORECASE,
)

# 字段名 -> 标签写法；顺序即匹配优先级（director's notes 要排在 notes 前面）
_LABELS: List[Tuple[str, str]] = [
	("shot_size", r"shot[ \t]+size|size"),
	("description", r"description|desc"),
	("people", r"people(?:[ \t]+in[ \t]+the[ \t]+shot)?|characters?"),
	("action", r"action"),
	("dialogue", r"dialog(?:ue)?"),
	("location", r"location"),
	("reason", r"reason|rationale"),
	("directors_notes", r"director'?s?[ \t]+notes"),
	("notes", r"notes"),
	("props", r"props"),
	("set_dressing", r"set[ \t]+dressing"),
	("special_effects", r"special[ \t]+effects|vfx|sfx"),
]

# 标签后面必须跟冒号，或者标签本身加粗；否则 "Action hero leaps" 这种正文会被当成属性行
_LABEL_SEP = r"(?:[ \t]*:|(?:\*\*|__)[ \t]*:?)"

_LABEL_RES: Dict[str, re.Pattern] = {
	name: re.compile(
		_PREFIX + r"(?:" + pat + r")\b" + _LABEL_SEP + r"[ \t]*" + _BOLD + r"[ \t]*(?P<value>.*)$",
		flags=re.IGNORECASE | re.MULTILINE,
	)
	for name, pat in _LABELS
}

# pattern 策略里 description 已经由标题行给出，不再从属性行里找
_SECTION_FIELDS = [name for name, _ in _LABELS if name != "description"]

_OBJECT_RE = re.compile(r"\{[^{}]*\}")

# embedded_json 里允许的键名写法（小写、去掉非字母数字后比较）
_JSON_KEYS = {
	"scene": "scene",
	"scenenumber": "scene",
	"shot": "shot",
	"shotnumber": "shot",
	"description": "description",
	"desc": "description",
	"shotsize": "shot_size",
	"size": "shot_size",
	"people": "people",
	"peopleintheshot": "people",
	"characters": "people",
	"action": "action",
	"dialogue": "dialogue",
	"location": "location",
	"reason": "reason",
	"notes": "notes",
	"directorsnotes": "directors_notes",
	"props": "props",
	"setdressing": "set_dressing",
	"specialeffects": "special_effects",
}


@dataclass
class Drop:
	"""一条被丢弃的候选：哪个策略、为什么、原文片段。"""
	strategy: str
	reason: str
	snippet: str = ""


@dataclass
class _Header:
	start: int
	end: int
	scene: str
	shot: str
	desc: str


def _clean(value: str) -> str:
	s = value.replace("**", "").replace("__", "")
	return s.strip().strip("*").strip()


def _snip(s: str, n: int = 80) -> str:
	s = s.replace("\n", " ").strip()
	if len(s) > n:
		return s[:n] + "..."
	return s


def _drop(diagnostics: Optional[List[Drop]], strategy: str, reason: str, snippet: str = "") -> None:
	if diagnostics is not None:
		diagnostics.append(Drop(strategy=strategy, reason=reason, snippet=_snip(snippet)))


def _with_defaults(c: SuggestedShot) -> SuggestedShot:
	if not c.shot_size:
		c.shot_size = DEFAULT_SHOT_SIZE
	if not c.action:
		c.action = c.description
	if not c.reason:
		c.reason = DEFAULT_REASON
	return c


def _missing_fields(c: SuggestedShot) -> List[str]:
	return [k for k in ("scene", "shot", "description") if not getattr(c, k)]


def _find_headers(text: str) -> List[_Header]:
	found: Dict[int, _Header] = {}

	for m in _HEADER_RE.finditer(text):
		found[m.start()] = _Header(m.start(), m.end(), m.group(1), m.group(2), _clean(m.group("desc")))

	for m in _ALT_HEADER_RE.finditer(text):
		if m.start() in found:
			continue
		found[m.start()] = _Header(m.start(), m.end(), m.group(2), m.group(1), _clean(m.group("desc")))

	return [found[k] for k in sorted(found)]


def _match_header_line(line: str) -> Optional[_Header]:
	m = _HEADER_RE.match(line)
	if m:
		return _Header(0, len(line), m.group(1), m.group(2), _clean(m.group("desc")))

	m = _ALT_HEADER_RE.match(line)
	if m:
		return _Header(0, len(line), m.group(2), m.group(1), _clean(m.group("desc")))

	return None


def _match_label(line: str) -> Optional[Tuple[str, str]]:
	for name, _ in _LABELS:
		m = _LABEL_RES[name].match(line)
		if m:
			return name, _clean(m.group("value"))
	return None


# ---------------------------------------------------------------------------
# 1) pattern
# ---------------------------------------------------------------------------

def pattern_strategy(text: str, diagnostics: Optional[List[Drop]] = None) -> List[SuggestedShot]:
	headers = _find_headers(text)
	out: List[SuggestedShot] = []

	for i, h in enumerate(headers):
		if not h.desc:
			_drop(diagnostics, "pattern", "header without description", text[h.start:h.end])
			continue

		stop = headers[i + 1].start if i + 1 < len(headers) else len(text)
		section = text[h.end:stop]

		c = SuggestedShot(scene=h.scene, shot=h.shot, description=h.desc)
		for name in _SECTION_FIELDS:
			m = _LABEL_RES[name].search(section)
			if m:
				value = _clean(m.group("value"))
				if value:
					setattr(c, name, value)

		out.append(_with_defaults(c))

	return out


# ---------------------------------------------------------------------------
# 2) embedded_json
# ---------------------------------------------------------------------------

def _coerce(v: Any) -> str:
	if v is None or isinstance(v, (dict, list)):
		return ""
	if isinstance(v, bool):
		return ""
	if isinstance(v, float) and v.is_integer():
		return str(int(v))
	return str(v).strip()


def _record_from_object(obj: Dict[str, Any]) -> SuggestedShot:
	c = SuggestedShot()
	for k, v in obj.items():
		key = re.sub(r"[^a-z0-9]", "", str(k).lower())
		name = _JSON_KEYS.get(key)
		if name and not getattr(c, name):
			setattr(c, name, _coerce(v))
	return c


def embedded_object_strategy(text: str, diagnostics: Optional[List[Drop]] = None) -> List[SuggestedShot]:
	if "{" not in text or "}" not in text:
		return []

	out: List[SuggestedShot] = []
	for m in _OBJECT_RE.finditer(text):
		chunk = m.group(0)
		try:
			obj = json.loads(chunk)
		except ValueError:
			_drop(diagnostics, "embedded_json", "not valid JSON", chunk)
			continue

		if not isinstance(obj, dict):
			continue

		c = _record_from_object(obj)
		missing = _missing_fields(c)
		if missing:
			_drop(diagnostics, "embedded_json", "missing " + ", ".join(missing), chunk)
			continue

		out.append(_with_defaults(c))

	return out


# ---------------------------------------------------------------------------
# 3) line_scan
# ---------------------------------------------------------------------------

def line_scan_strategy(text: str, diagnostics: Optional[List[Drop]] = None) -> List[SuggestedShot]:
	out: List[SuggestedShot] = []
	current: Optional[SuggestedShot] = None
	# 没出现过 "Scene N" 时，单独的 "Shot M" 视为第 1 场
	current_scene = "1"

	def flush() -> None:
		nonlocal current
		if current is None:
			return
		missing = _missing_fields(current)
		if missing:
			_drop(diagnostics, "line_scan", "missing " + ", ".join(missing), f"Scene {current.scene}, Shot {current.shot}")
		else:
			out.append(_with_defaults(current))
		current = None

	for raw in text.split("\n"):
		line = raw.strip()
		if not line:
			continue

		h = _match_header_line(line)
		if h is not None:
			flush()
			current = SuggestedShot(scene=h.scene, shot=h.shot, description=h.desc)
			current_scene = h.scene
			continue

		m = _SCENE_ONLY_RE.match(line)
		if m:
			flush()
			current_scene = m.group(1)
			continue

		m = _SHOT_ONLY_RE.match(line)
		if m:
			flush()
			current = SuggestedShot(scene=current_scene, shot=m.group(1), description=_clean(m.group("desc")))
			continue

		if current is None:
			continue

		lab = _match_label(line)
		if lab is not None:
			name, value = lab
			if value:
				setattr(current, name, value)
			continue

		# 没有标签的行：描述还空着就当描述
		if not current.description:
			current.description = _clean(line.lstrip("-*•> \t"))

	flush()
	return out


# ---------------------------------------------------------------------------
# 策略链
# ---------------------------------------------------------------------------

Strategy = Callable[[str, Optional[List[Drop]]], List[SuggestedShot]]

STRATEGIES: List[Tuple[str, Strategy]] = [
	("pattern", pattern_strategy),
	("embedded_json", embedded_object_strategy),
	("line_scan", line_scan_strategy),
]


def run_strategies(raw_text: Any, diagnostics: Optional[List[Drop]] = None) -> Tuple[str, List[SuggestedShot]]:
	"""
	返回 (胜出的策略名, 候选列表)；全部失败时返回 ("", [])。
	"""
	text = normalize_response(raw_text)
	if not text:
		return "", []

	for name, fn in STRATEGIES:
		try:
			shots = fn(text, diagnostics)
		except Exception as e:  # 单个策略出错只算它没结果
			log.warning("shot extraction strategy %s failed: %s", name, e)
			_drop(diagnostics, name, f"strategy error: {e}")
			continue

		if shots:
			log.debug("shot extraction: strategy=%s records=%d", name, len(shots))
			return name, shots

	log.debug("shot extraction: no strategy produced records")
	return "", []


def extract_shots(raw_text: Any, diagnostics: Optional[List[Drop]] = None) -> List[SuggestedShot]:
	_, shots = run_strategies(raw_text, diagnostics)
	return shots
