# -*- coding: utf-8 -*-
"""ProjectState 与 project.json 读写测试。"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from scriptvision.core.io import project_paths
from scriptvision.core.project import SCHEMA_VERSION, load_project, new_project, save_project
from scriptvision.core.schemas import GeneratedPrompt, Shot, Style, Subject, SuggestedShot


class TestPaths:
	def test_layout(self):
		with tempfile.TemporaryDirectory() as d:
			paths = project_paths(Path(d) / "film")
			assert not paths.root.exists()
			paths.ensure_dirs()
			paths.ensure_dirs()
			assert paths.logs_dir.is_dir()
			assert paths.project.name == "project.json"
			assert paths.llm_log == paths.root / "logs" / "llm.jsonl"


class TestShotActions:
	def test_accept_suggestions(self):
		p = new_project("Film")
		p.set_shot_list([Shot(scene="2", shot="1", description="b", id="b")])
		p.set_suggestions([
			SuggestedShot(scene="1", shot="1", description="a"),
			SuggestedShot(scene="3", shot="1", description="c"),
		])
		p.suggested_shots.toggle(0)

		added = p.accept_suggestions()
		assert added == 1
		assert [s.description for s in p.shot_list] == ["a", "b"]
		assert len(p.suggested_shots) == 0

	def test_copy_on_write(self):
		p = new_project()
		before = p.shot_list
		p.add_shots([Shot(scene="1", shot="1", description="x", id="x")])
		assert before == []
		assert p.shot_list is not before

	def test_set_shot_list_marks_progress(self):
		p = new_project()
		p.set_shot_list([Shot(scene="1", shot="1", description="x", id="x")])
		assert p.workflow_progress["shot_list_completed"]


class TestSubjectActions:
	def test_merge_proposed_clears_proposed(self):
		p = new_project()
		p.add_subject(Subject(name="Alice", id="a"))
		p.set_proposed_subjects([Subject(name="ALICE", id="b"), Subject(name="Bob", id="c")])
		skipped = []
		added = p.merge_proposed_subjects(skipped=skipped)
		assert added == 1
		assert [s.name for s in p.subjects] == ["Alice", "Bob"]
		assert p.proposed_subjects == []
		assert [s.id for s in skipped] == ["b"]
		assert p.workflow_progress["subjects_completed"]

	def test_add_subject_duplicate(self):
		p = new_project()
		assert p.add_subject(Subject(name="Alice", id="a"))
		assert not p.add_subject(Subject(name="alice", id="b"))
		assert len(p.subjects) == 1

	def test_update_and_delete_fall_back_to_proposed(self):
		p = new_project()
		p.set_proposed_subjects([Subject(name="Bob", id="c")])
		p.update_subject(Subject(name="Bobby", id="c"))
		assert p.proposed_subjects[0].name == "Bobby"
		p.delete_subject("c")
		assert p.proposed_subjects == []


class TestStyles:
	def test_delete_selected_style_deselects(self):
		p = new_project()
		s = p.add_style(Style(name="Noir", prefix="black and white"))
		assert s.id
		p.select_style(s.id)
		assert p.selected_style == s
		p.delete_style(s.id)
		assert p.selected_style_id == ""
		assert p.selected_style is None

	def test_select_unknown_style(self):
		with pytest.raises(ValueError):
			new_project().select_style("missing")


class TestSaveLoad:
	def test_round_trip(self):
		with tempfile.TemporaryDirectory() as d:
			path = Path(d) / "project.json"
			p = new_project("Film")
			p.set_script("INT. ROOM - NIGHT")
			p.set_shot_list([Shot(scene="1", shot="2.5", description="x", shot_size="CU", id="x")])
			p.add_subject(Subject(name="Alice", category="People", id="a"))
			p.set_suggestions([SuggestedShot(scene="1", shot="3", description="y", reason="why")])
			p.suggested_shots.toggle(0)
			p.add_generated_prompt(GeneratedPrompt(shot_id="x", concise="c", id="g"))
			save_project(path, p)

			data = json.loads(path.read_text(encoding="utf-8"))
			assert data["schema_version"] == SCHEMA_VERSION

			loaded = load_project(path)
			assert loaded.name == "Film"
			assert loaded.script == "INT. ROOM - NIGHT"
			assert loaded.shot_list == p.shot_list
			assert loaded.subjects[0].name == "Alice"
			assert loaded.suggested_shots.items[0].reason == "why"
			assert loaded.suggested_shots.selected_indices() == [0]
			assert loaded.generated_prompts[0].concise == "c"
			assert loaded.workflow_progress["script_completed"]
			assert loaded.workflow_progress["prompts_completed"]

	def test_missing_keys_tolerated(self):
		with tempfile.TemporaryDirectory() as d:
			path = Path(d) / "project.json"
			path.write_text('{"name": "Old"}', encoding="utf-8")
			loaded = load_project(path)
			assert loaded.name == "Old"
			assert loaded.shot_list == []
			assert len(loaded.suggested_shots) == 0
			assert loaded.workflow_progress["script_completed"] is False

	def test_null_fields_load_as_empty(self):
		subject = Subject.from_dict({"name": None, "description": None, "alias": None})
		assert (subject.name, subject.description, subject.alias) == ("", "", "")

		style = Style.from_dict({"name": None, "prefix": None, "id": "s"})
		assert (style.name, style.prefix) == ("", "")
		assert style.id == "s"
