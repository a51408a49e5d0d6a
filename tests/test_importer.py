# -*- coding: utf-8 -*-
"""手动导入分镜测试。"""

from __future__ import annotations

import json

from scriptvision.core.importer import import_shots
from scriptvision.core.schemas import Shot


def _canonical():
	return [Shot(scene="2", shot="1", description="Street", id="keep")]


class TestJsonImport:
	def test_array_added_and_sorted(self):
		text = json.dumps([
			{"id": "x1", "scene": "1", "shot": "1", "description": "Opening", "shotSize": "ELS"},
			{"scene": "3", "shot": "1", "description": "Ending"},
		])
		result = import_shots(_canonical(), text)
		assert result.outcome == "ok"
		assert result.source == "json"
		assert result.imported == 2
		assert [s.description for s in result.shots] == ["Opening", "Street", "Ending"]
		assert result.shots[0].id == "x1"
		assert result.shots[0].shot_size == "ELS"
		assert result.shots[2].id

	def test_colliding_id_replaced(self):
		text = json.dumps([{"id": "keep", "scene": "1", "shot": "1", "description": "dup id"}])
		result = import_shots(_canonical(), text)
		ids = [s.id for s in result.shots]
		assert len(set(ids)) == 2
		assert "keep" in ids

	def test_non_array_rejected(self):
		result = import_shots(_canonical(), '{"scene": "1", "shot": "1", "description": "x"}')
		assert result.outcome == "invalid"
		assert [s.id for s in result.shots] == ["keep"]

	def test_empty_array(self):
		result = import_shots(_canonical(), "[]")
		assert result.outcome == "nothing_parsed"
		assert len(result.shots) == 1


class TestTextImport:
	def test_free_text_goes_through_extractor(self):
		text = "Scene 1, Shot 1: Opening\nShot Size: WS\n\nScene 3, Shot 2: Ending"
		result = import_shots(_canonical(), text)
		assert result.outcome == "ok"
		assert result.source == "text"
		assert result.imported == 2
		assert [(s.scene, s.shot) for s in result.shots] == [("1", "1"), ("2", "1"), ("3", "2")]
		assert len({s.id for s in result.shots}) == 3

	def test_nothing_parsed(self):
		canonical = _canonical()
		result = import_shots(canonical, "just some notes")
		assert result.outcome == "nothing_parsed"
		assert result.shots == canonical
		assert result.imported == 0

	def test_deeply_nested_brackets_are_plain_text(self):
		canonical = _canonical()
		result = import_shots(canonical, "[" * 100000)
		assert result.outcome == "nothing_parsed"
		assert result.shots == canonical
