# -*- coding: utf-8 -*-
"""
scriptvision/core/review.py

ReviewBatch：一批候选实体 + 每个下标的“是否选中”。

- toggle / toggle_all / select_all / deselect_all 只改选中状态，不改候选本身。
- commit(merge) 把选中的候选交给 merge，然后清空整批（候选和选中表一起清）。
  commit 之后 batch 为空，所以同一条候选不可能被提交两次。
- merge 抛错时 batch 保持原样：调用方看不到“提交了一半”的状态。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, List, Sequence, TypeVar


T = TypeVar("T")
R = TypeVar("R")


@dataclass
class ReviewBatch(Generic[T]):
	items: List[T] = field(default_factory=list)
	selected: Dict[int, bool] = field(default_factory=dict)

	def __len__(self) -> int:
		return len(self.items)

	def replace(self, items: Sequence[T]) -> None:
		"""新一轮建议到来：整批替换，选中状态归零。"""
		self.items = list(items)
		self.selected = {}

	def is_selected(self, index: int) -> bool:
		return self.selected.get(index, False)

	def toggle(self, index: int) -> None:
		if index < 0 or index >= len(self.items):
			raise IndexError(f"review index out of range: {index}")
		self.selected = {**self.selected, index: not self.is_selected(index)}

	def toggle_all(self, value: bool) -> None:
		self.selected = {i: value for i in range(len(self.items))}

	def select_all(self) -> None:
		self.toggle_all(True)

	def deselect_all(self) -> None:
		self.toggle_all(False)

	def selected_indices(self) -> List[int]:
		return [i for i in range(len(self.items)) if self.is_selected(i)]

	def selected_items(self) -> List[T]:
		return [self.items[i] for i in self.selected_indices()]

	def commit(self, merge: Callable[[List[T]], R]) -> R:
		picked = self.selected_items()
		result = merge(picked)
		self.items = []
		self.selected = {}
		return result
