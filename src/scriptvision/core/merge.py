# -*- coding: utf-8 -*-
"""
scriptvision/core/merge.py

这个文件做什么：
- 把候选实体（建议镜头、提议主体）并入 canonical 集合。
- 全部是纯函数：不修改传入的 list，永远返回新 list（调用方整体替换）。

镜头排序规则（add_shots / merge_shots / sort_shots 共用）：
- 主键：scene 按“前导整数”解析，解析不出来算 0
- 次键：shot 先去掉所有非数字、非小数点字符，再按“前导浮点数”解析，解析不出来算 0
- 同键保持拼接顺序（sorted 是稳定排序）

主体去重规则：
- name 小写后作为身份键；已存在的名字直接丢弃，不更新已有主体的字段。
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from scriptvision.core.schemas import Shot, ShotFields, Subject, new_id


_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT_RE = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)")
_NOT_NUMERIC_RE = re.compile(r"[^0-9.]")


def scene_key(scene: str) -> int:
	m = _LEADING_INT_RE.match(scene or "")
	return int(m.group(1)) if m else 0


def shot_key(shot: str) -> float:
	m = _LEADING_FLOAT_RE.match(_NOT_NUMERIC_RE.sub("", shot or ""))
	return float(m.group(1)) if m else 0.0


def order_key(s: ShotFields) -> Tuple[int, float]:
	return scene_key(s.scene), shot_key(s.shot)


def sort_shots(shots: Iterable[Shot]) -> List[Shot]:
	return sorted(shots, key=order_key)


def add_shots(canonical: Sequence[Shot], shots: Sequence[Shot]) -> List[Shot]:
	"""拼接后排序；保留 shots 自带的 id（导入路径用）。"""
	return sort_shots([*canonical, *shots])


def merge_shots(canonical: Sequence[Shot], incoming: Sequence[ShotFields]) -> List[Shot]:
	"""
	每条 incoming 都分配一个全新的 id（即使它本来带 id），再拼接排序。
	新 id 保证不与 canonical 里已有的 id 冲突。
	"""
	used = {s.id for s in canonical}
	fresh: List[Shot] = []
	for c in incoming:
		sid = new_id()
		while sid in used:
			sid = new_id()
		used.add(sid)
		fresh.append(Shot.from_candidate(c, shot_id=sid))

	return add_shots(canonical, fresh)


def update_shot(canonical: Sequence[Shot], updated: Shot) -> List[Shot]:
	return [updated if s.id == updated.id else s for s in canonical]


def delete_shot(canonical: Sequence[Shot], shot_id: str) -> List[Shot]:
	return [s for s in canonical if s.id != shot_id]


def merge_subjects(
	canonical: Sequence[Subject],
	proposed: Sequence[Subject],
	skipped: Optional[List[Subject]] = None,
) -> List[Subject]:
	"""
	proposed 里名字（小写）已在 canonical 出现的，静默丢弃；其余按原顺序追加。

	skipped：
	- 可选的诊断通道；传一个 list 进来就能拿到被丢弃的主体
	- proposed 内部重名时只保留第一个，后面的同样进 skipped
	"""
	seen = {s.key for s in canonical}
	survivors: List[Subject] = []

	for p in proposed:
		if p.key in seen:
			if skipped is not None:
				skipped.append(p)
			continue
		seen.add(p.key)
		survivors.append(p if p.id else Subject(**{**p.to_dict(), "id": new_id()}))

	return [*canonical, *survivors]
