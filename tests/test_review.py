# -*- coding: utf-8 -*-
"""ReviewBatch（勾选 -> 提交）测试。"""

from __future__ import annotations

import pytest

from scriptvision.core.merge import merge_shots
from scriptvision.core.review import ReviewBatch
from scriptvision.core.schemas import Shot, SuggestedShot


def _batch(n: int = 3) -> ReviewBatch:
	b: ReviewBatch = ReviewBatch()
	b.replace([SuggestedShot(scene="1", shot=str(i + 1), description=f"s{i}") for i in range(n)])
	return b


class TestSelection:
	def test_default_unselected(self):
		b = _batch()
		assert b.selected_indices() == []

	def test_toggle(self):
		b = _batch()
		b.toggle(1)
		assert b.selected_indices() == [1]
		b.toggle(1)
		assert b.selected_indices() == []

	def test_toggle_out_of_range(self):
		with pytest.raises(IndexError):
			_batch(2).toggle(5)

	def test_toggle_all(self):
		b = _batch()
		b.toggle_all(True)
		assert b.selected_indices() == [0, 1, 2]
		b.deselect_all()
		assert b.selected_items() == []

	def test_replace_resets_selection(self):
		b = _batch()
		b.select_all()
		b.replace([SuggestedShot(scene="2", shot="1", description="new")])
		assert len(b) == 1
		assert not b.is_selected(0)


class TestCommit:
	def test_toggle_all_then_commit_empties_batch(self):
		b = _batch()
		b.toggle_all(True)
		b.commit(lambda picked: merge_shots([], picked))
		assert len(b) == 0
		assert b.selected == {}

	def test_only_selected_forwarded(self):
		b = _batch()
		b.toggle(0)
		b.toggle(2)
		merged = b.commit(lambda picked: merge_shots([], picked))
		assert [s.description for s in merged] == ["s0", "s2"]
		assert all(isinstance(s, Shot) and s.id for s in merged)

	def test_unselected_are_discarded(self):
		b = _batch()
		b.toggle(0)
		b.commit(lambda picked: picked)
		# 第二次提交什么都拿不到
		assert b.commit(lambda picked: picked) == []

	def test_failed_merge_keeps_batch(self):
		b = _batch()
		b.select_all()

		def broken(picked):
			raise RuntimeError("merge failed")

		with pytest.raises(RuntimeError):
			b.commit(broken)
		assert len(b) == 3
		assert b.selected_indices() == [0, 1, 2]
