# -*- coding: utf-8 -*-
"""合并（merge_shots / merge_subjects）与排序测试。"""

from __future__ import annotations

from scriptvision.core.merge import (
	add_shots,
	delete_shot,
	merge_shots,
	merge_subjects,
	scene_key,
	shot_key,
	sort_shots,
	update_shot,
)
from scriptvision.core.schemas import Shot, Subject, SuggestedShot


def _shot(scene: str, shot: str, desc: str = "x", sid: str = "") -> Shot:
	return Shot(scene=scene, shot=shot, description=desc, id=sid or f"id-{scene}-{shot}")


class TestSortKeys:
	def test_scene_key(self):
		assert scene_key("12") == 12
		assert scene_key("3A") == 3
		assert scene_key("") == 0
		assert scene_key("INT") == 0

	def test_shot_key(self):
		assert shot_key("2.1") == 2.1
		assert shot_key("10") == 10.0
		# 非数字字符先去掉再解析
		assert shot_key("4b") == 4.0
		assert shot_key("abc") == 0.0

	def test_decimal_sub_shot_between(self):
		shots = sort_shots([_shot("1", "3"), _shot("1", "2.5"), _shot("1", "2")])
		assert [s.shot for s in shots] == ["2", "2.5", "3"]

	def test_numeric_not_lexicographic(self):
		shots = sort_shots([_shot("1", "10"), _shot("1", "9"), _shot("10", "1"), _shot("2", "1")])
		assert [(s.scene, s.shot) for s in shots] == [("1", "9"), ("1", "10"), ("2", "1"), ("10", "1")]

	def test_stable_for_ties(self):
		a = _shot("1", "1", "a", "a")
		b = _shot("1", "1", "b", "b")
		assert [s.id for s in sort_shots([a, b])] == ["a", "b"]
		assert [s.id for s in sort_shots([b, a])] == ["b", "a"]


class TestMergeShots:
	def test_incoming_placed_first_by_scene(self):
		canonical = [_shot("2", "1", "second scene")]
		incoming = [SuggestedShot(scene="1", shot="10", description="first scene")]
		merged = merge_shots(canonical, incoming)
		assert [s.description for s in merged] == ["first scene", "second scene"]

	def test_count_idempotent(self):
		canonical = [_shot("1", "1"), _shot("1", "2")]
		assert len(merge_shots(canonical, [])) == len(canonical)

	def test_fresh_distinct_ids(self):
		canonical = [_shot("1", "1"), _shot("1", "2")]
		incoming = [
			SuggestedShot(scene="1", shot="1.5", description="a"),
			SuggestedShot(scene="1", shot="2.5", description="b"),
			SuggestedShot(scene="3", shot="1", description="c"),
		]
		merged = merge_shots(canonical, incoming)
		old = {s.id for s in canonical}
		new_ids = [s.id for s in merged if s.id not in old]
		assert len(new_ids) == 3
		assert len(set(new_ids)) == 3
		assert all(new_ids)

	def test_incoming_id_is_replaced(self):
		canonical = [_shot("1", "1", sid="dup")]
		merged = merge_shots(canonical, [_shot("1", "2", sid="dup")])
		assert len({s.id for s in merged}) == 2

	def test_non_decreasing_keys(self):
		canonical = [_shot("3", "2"), _shot("1", "4"), _shot("2", "1.5")]
		incoming = [
			SuggestedShot(scene="2", shot="1", description="a"),
			SuggestedShot(scene="1", shot="0.5", description="b"),
			SuggestedShot(scene="3", shot="10", description="c"),
		]
		merged = merge_shots(canonical, incoming)
		keys = [(scene_key(s.scene), shot_key(s.shot)) for s in merged]
		assert keys == sorted(keys)

	def test_inputs_not_mutated(self):
		canonical = [_shot("2", "1")]
		incoming = [SuggestedShot(scene="1", shot="1", description="a")]
		merge_shots(canonical, incoming)
		assert len(canonical) == 1
		assert canonical[0].scene == "2"

	def test_add_keeps_ids(self):
		merged = add_shots([_shot("2", "1", sid="b")], [_shot("1", "1", sid="a")])
		assert [s.id for s in merged] == ["a", "b"]


class TestEditShots:
	def test_update_and_delete(self):
		shots = [_shot("1", "1", "old", "a"), _shot("1", "2", "keep", "b")]
		updated = update_shot(shots, Shot(scene="1", shot="1", description="new", id="a"))
		assert updated[0].description == "new"
		assert shots[0].description == "old"

		remaining = delete_shot(updated, "a")
		assert [s.id for s in remaining] == ["b"]


class TestMergeSubjects:
	def test_case_insensitive_duplicate_dropped(self):
		canonical = [Subject(name="Alice", id="s1")]
		proposed = [Subject(name="alice", id="s2"), Subject(name="Bob", id="s3")]
		merged = merge_subjects(canonical, proposed)
		assert [s.name for s in merged] == ["Alice", "Bob"]
		assert merged[0].id == "s1"

	def test_length_formula(self):
		canonical = [Subject(name="Alice"), Subject(name="Harbor", category="Places")]
		proposed = [Subject(name="HARBOR"), Subject(name="Bob"), Subject(name="Lamp", category="Props"), Subject(name="alice")]
		merged = merge_subjects(canonical, proposed)
		lowered = {s.name.lower() for s in canonical}
		expected = len(canonical) + len([p for p in proposed if p.name.lower() not in lowered])
		assert len(merged) == expected == 4

	def test_no_duplicate_names(self):
		canonical = [Subject(name="Alice")]
		proposed = [Subject(name="Bob"), Subject(name="BOB")]
		skipped = []
		merged = merge_subjects(canonical, proposed, skipped=skipped)
		names = [s.name.lower() for s in merged]
		assert len(names) == len(set(names))
		assert [s.name for s in skipped] == ["BOB"]

	def test_existing_subject_not_updated(self):
		canonical = [Subject(name="Alice", description="original")]
		merged = merge_subjects(canonical, [Subject(name="ALICE", description="changed")])
		assert merged[0].description == "original"

	def test_ids_assigned(self):
		merged = merge_subjects([], [Subject(name="Bob")])
		assert merged[0].id
