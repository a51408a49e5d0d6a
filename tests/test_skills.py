# -*- coding: utf-8 -*-
"""Skills 测试：全部用 MockLLMClient / 假 client，不发网络请求。"""

from __future__ import annotations

import pytest

from scriptvision.core.errors import EmptyInputError, GenerationError, StructuredOutputError
from scriptvision.core.schemas import CameraSettings, Shot, Style, Subject
from scriptvision.providers.llm.mock_client import MockLLMClient
from scriptvision.skills.extract_subjects import ExtractSubjectsSkill
from scriptvision.skills.extract_subjects.validator import validate_subjects_payload
from scriptvision.skills.generate_shot_list import GenerateShotListSkill
from scriptvision.skills.generate_shot_list.validator import validate_shot_list_payload
from scriptvision.skills.generation import generate_structured
from scriptvision.skills.suggest_shots import SuggestShotsSkill
from scriptvision.skills.suggest_shots.prompt import build_user_prompt
from scriptvision.skills.visual_prompts import GenerateVisualPromptSkill
from scriptvision.skills.visual_prompts.prompt import build_json_prompt as build_visual_json_prompt
from scriptvision.skills.visual_prompts.prompt import relevant_subjects
from scriptvision.skills.visual_prompts.validator import split_prompt_variants, validate_prompts_payload


SCRIPT = "INT. OFFICE - DAY\nJohn walks in, checks his watch, and sits down."


class FailingClient:
	"""chat_text / chat_json 都模拟网络失败。"""

	def __init__(self):
		self.calls = 0

	def chat_text(self, system_prompt, user_prompt, template="", phase=""):
		self.calls += 1
		raise GenerationError("LLM HTTP 500: upstream error", status_code=500)

	def chat_json(self, system_prompt, user_prompt, template="", phase=""):
		self.calls += 1
		raise GenerationError("LLM HTTP 500: upstream error", status_code=500)

	def close(self):
		pass


def _existing():
	return [Shot(scene="1", shot="1", description="Establishing", id="a")]


class TestSuggestShots:
	def test_mock_suggestions(self):
		llm = MockLLMClient()
		result = SuggestShotsSkill(llm).run(SCRIPT, _existing())
		assert result.outcome == "ok"
		assert result.strategy == "pattern"
		assert len(result.suggestions) == 5
		assert llm.calls[0][:2] == ("text", "shot-suggestions")

	def test_empty_shot_list_rejected_before_generation(self):
		llm = MockLLMClient()
		with pytest.raises(EmptyInputError):
			SuggestShotsSkill(llm).run(SCRIPT, [])
		assert llm.calls == []

	def test_empty_input_is_value_error(self):
		with pytest.raises(ValueError):
			SuggestShotsSkill(MockLLMClient()).run(SCRIPT, [])

	def test_unparseable_reply(self):
		llm = MockLLMClient(responses={"shot-suggestions": "I think the shot list looks great as it is."})
		result = SuggestShotsSkill(llm).run(SCRIPT, _existing())
		assert result.outcome == "no_suggestions"
		assert result.suggestions == []

	def test_fenced_reply_is_normalized(self):
		reply = "```\r\nScene 2, Shot 1: Rain on the window\r\nShot Size: CU\r\n```"
		llm = MockLLMClient(responses={"shot-suggestions": reply})
		result = SuggestShotsSkill(llm).run(SCRIPT, _existing())
		assert [(s.scene, s.shot, s.shot_size) for s in result.suggestions] == [("2", "1", "CU")]

	def test_generation_failure_propagates(self):
		llm = FailingClient()
		with pytest.raises(GenerationError):
			SuggestShotsSkill(llm).run(SCRIPT, _existing())
		assert llm.calls == 1

	def test_prompt_contains_existing_shots(self):
		prompt = build_user_prompt(SCRIPT, _existing())
		assert "Establishing" in prompt
		assert "Scene [number], Shot [number]: [description]" in prompt


class TestGenerateShotList:
	def test_structured_path(self):
		result = GenerateShotListSkill(MockLLMClient()).run(SCRIPT)
		assert not result.used_fallback
		assert [s.shot for s in result.shots] == ["1", "2"]
		assert len({s.id for s in result.shots}) == 2

	def test_fallback_on_bad_structured_output(self):
		llm = MockLLMClient(json_responses={"shot-list-generation": {"shots": [{"scene": "1"}]}})
		result = GenerateShotListSkill(llm).run(SCRIPT)
		assert result.used_fallback
		assert "missing" in result.error
		assert result.strategy == "line_scan"
		assert [s.shot for s in result.shots] == ["1", "2", "3"]
		assert all(s.id for s in result.shots)
		assert [c[0] for c in llm.calls] == ["json", "text"]

	def test_empty_script(self):
		llm = MockLLMClient()
		with pytest.raises(EmptyInputError):
			GenerateShotListSkill(llm).run("   ")
		assert llm.calls == []

	def test_generation_failure_not_fallback(self):
		llm = FailingClient()
		with pytest.raises(GenerationError):
			GenerateShotListSkill(llm).run(SCRIPT)
		assert llm.calls == 1

	def test_result_sorted(self):
		payload = {"shots": [
			{"scene": 2, "shot": 1, "description": "b"},
			{"scene": 1, "shot": 2, "description": "a"},
		]}
		result = GenerateShotListSkill(MockLLMClient(json_responses={"shot-list-generation": payload})).run(SCRIPT)
		assert [(s.scene, s.shot) for s in result.shots] == [("1", "2"), ("2", "1")]

	def test_nothing_parsed_from_text_fallback(self):
		llm = MockLLMClient(
			responses={"shot-list-generation": "Sorry, I cannot help."},
			json_responses={"shot-list-generation": {"shots": []}},
		)
		result = GenerateShotListSkill(llm).run(SCRIPT)
		assert result.outcome == "nothing_parsed"
		assert result.used_fallback
		assert result.shots == []
		assert "empty" in result.error


class TestExtractSubjects:
	def test_structured_path(self):
		result = ExtractSubjectsSkill(MockLLMClient()).run(SCRIPT)
		assert not result.used_fallback
		assert [(s.name, s.category) for s in result.subjects] == [
			("John", "People"),
			("Downtown Street", "Places"),
			("Briefcase", "Props"),
		]

	def test_fallback_on_invalid_category(self):
		bad = {"subjects": [{"name": "Fog", "category": "Weather"}]}
		result = ExtractSubjectsSkill(MockLLMClient(json_responses={"subject-extraction": bad})).run(SCRIPT)
		assert result.used_fallback
		assert "category" in result.error
		assert len(result.subjects) == 11

	def test_empty_script(self):
		with pytest.raises(EmptyInputError):
			ExtractSubjectsSkill(MockLLMClient()).run("")

	def test_nothing_parsed_from_text_fallback(self):
		llm = MockLLMClient(
			responses={"subject-extraction": "Sorry, I cannot help."},
			json_responses={"subject-extraction": {"subjects": "none"}},
		)
		result = ExtractSubjectsSkill(llm).run(SCRIPT)
		assert result.outcome == "nothing_parsed"
		assert result.subjects == []


class TestValidators:
	def test_shot_list_requires_shots(self):
		with pytest.raises(ValueError, match="shots"):
			validate_shot_list_payload({})
		with pytest.raises(ValueError, match="empty"):
			validate_shot_list_payload({"shots": []})

	def test_shot_item_camel_case(self):
		shots = validate_shot_list_payload({"shots": [{"scene": "1", "shot": "1", "description": "x", "shotSize": "LS"}]})
		assert shots[0].shot_size == "LS"

	def test_subjects_alias_none(self):
		subjects = validate_subjects_payload({"subjects": [{"name": "Ann", "category": "characters", "alias": "None"}]})
		assert subjects[0].category == "People"
		assert subjects[0].alias == ""

	def test_generate_structured_wraps_value_error(self):
		def reject(data):
			raise ValueError("nope")

		with pytest.raises(StructuredOutputError, match="nope"):
			generate_structured(MockLLMClient(), "p", "shot-list-generation", "sys", "user", reject)


def _noir():
	return Style(name="Noir", prefix="Film noir still,", suffix="--ar 16:9", id="noir")


def _john_shot():
	return Shot(
		scene="1",
		shot="2",
		description="John walking down the busy street",
		shot_size="MS",
		people="John",
		action="John walks down the street",
		location="Downtown street",
		id="s2",
	)


def _cast():
	return [
		Subject(name="John", description="mid-30s, business attire", id="j"),
		Subject(name="Sarah", description="John's colleague", id="s"),
		Subject(name="Briefcase", category="Props", active=False, id="b"),
	]


class TestVisualPrompts:
	def test_structured_path_applies_style(self):
		llm = MockLLMClient()
		result = GenerateVisualPromptSkill(llm).run(_john_shot(), _cast(), _noir())
		assert result.source == "structured"
		assert not result.used_fallback
		for text in (result.prompt.concise, result.prompt.normal, result.prompt.detailed):
			assert text.startswith("Film noir still,")
			assert text.endswith("--ar 16:9")
		assert result.prompt.shot_id == "s2"
		assert result.prompt.id
		assert result.prompt.timestamp
		assert llm.calls[0][:2] == ("json", "visual-prompt")

	def test_no_style_rejected_before_generation(self):
		llm = MockLLMClient()
		with pytest.raises(EmptyInputError, match="No style selected"):
			GenerateVisualPromptSkill(llm).run(_john_shot(), _cast(), None)
		assert llm.calls == []

	def test_text_fallback_splits_paragraphs(self):
		llm = MockLLMClient(json_responses={"visual-prompt": {"concise": "only one"}})
		result = GenerateVisualPromptSkill(llm).run(_john_shot(), _cast(), _noir())
		assert result.source == "text"
		assert result.used_fallback
		assert "normal" in result.error
		assert result.prompt.concise == "Film noir still, Medium shot of John walking down the busy street. --ar 16:9"
		assert "checking his watch" in result.prompt.normal
		assert [c[0] for c in llm.calls] == ["json", "text"]

	def test_template_fallback_when_reply_unusable(self):
		llm = MockLLMClient(
			responses={"visual-prompt": "Sorry, I cannot help."},
			json_responses={"visual-prompt": {}},
		)
		camera = CameraSettings(move="follows the movement", depth_of_field="Shallow")
		result = GenerateVisualPromptSkill(llm).run(_john_shot(), _cast(), _noir(), camera=camera)
		assert result.source == "template"
		assert result.prompt.concise == "Film noir still, MS of John in Downtown street. --ar 16:9"
		assert "Camera follows the movement." in result.prompt.normal
		assert "Shallow depth of field." in result.prompt.detailed
		assert "John walking down the busy street." in result.prompt.detailed

	def test_generation_failure_propagates(self):
		llm = FailingClient()
		with pytest.raises(GenerationError):
			GenerateVisualPromptSkill(llm).run(_john_shot(), _cast(), _noir())
		assert llm.calls == 1

	def test_only_active_subjects_in_prompt(self):
		llm = MockLLMClient()
		GenerateVisualPromptSkill(llm).run(_john_shot(), _cast(), _noir())
		prompt = llm.calls[0][2]
		assert "John: mid-30s" in prompt
		assert "Sarah" not in prompt
		assert "Briefcase" not in prompt

	def test_relevant_subjects_falls_back_to_all_active(self):
		shot = Shot(scene="1", shot="1", description="Empty skyline at dawn", id="x")
		assert [s.name for s in relevant_subjects(shot, _cast())] == ["John", "Sarah"]
		assert [s.name for s in relevant_subjects(_john_shot(), _cast())] == ["John"]

	def test_json_prompt_has_camera_settings(self):
		camera = CameraSettings(framing="Rule of thirds", camera_name="ARRI Alexa")
		prompt = build_visual_json_prompt(_john_shot(), [], _noir(), camera=camera)
		assert "Framing: Rule of thirds" in prompt
		assert "Camera Name: ARRI Alexa" in prompt
		assert "Style Prefix: Film noir still," in prompt


class TestPromptVariants:
	def test_payload_requires_all_levels(self):
		with pytest.raises(ValueError, match="detailed"):
			validate_prompts_payload({"concise": "a", "normal": "b", "detailed": "  "})
		assert validate_prompts_payload({"concise": " a ", "normal": "b", "detailed": "c"})["concise"] == "a"

	def test_headings_stripped(self):
		raw = "**Concise:** A\n\n**Normal prompt:** B\nstill B\n\n3. Detailed: C"
		assert split_prompt_variants(raw) == {"concise": "A", "normal": "B still B", "detailed": "C"}

	def test_wrong_paragraph_count(self):
		assert split_prompt_variants("one\n\ntwo") is None
		assert split_prompt_variants(None) is None
