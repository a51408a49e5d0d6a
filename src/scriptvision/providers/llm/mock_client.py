# -*- coding: utf-8 -*-
"""
providers/llm/mock_client.py

离线 mock：没有 API key、或者只想演示 / 调试解析链路时使用（CLI --mock）。
- 按 template id 返回固定的回复文本；认不出的模板返回一句通用文本。
- chat_json 只对分镜表、主体提取、视觉 prompt 三个结构化模板有固定 JSON，其余抛 StructuredOutputError，
  让上层走自由文本回退。
- responses / json_responses 可以在构造时覆盖，测试里用来喂特定回复。
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from scriptvision.core.ai_logs import append_log
from scriptvision.core.errors import StructuredOutputError


MOCK_SHOT_LIST = """Scene 1, Shot 1
Shot Size: ELS (Extreme Long Shot)
Description: Establishing shot of the city skyline at dawn
People: None
Action: Camera pans slowly across the city skyline as the sun rises
Dialogue: None
Location: City skyline

Scene 1, Shot 2
Shot Size: MS (Medium Shot)
Description: John walking down the busy street
People: John
Action: John walks purposefully down the busy street, checking his watch
Dialogue: None
Location: Downtown street

Scene 1, Shot 3
Shot Size: MLS (Medium Long Shot)
Description: John enters the building
People: John
Action: John pushes through the revolving door and enters the lobby
Dialogue: None
Location: Office building entrance"""

MOCK_SUBJECTS = """People:
- John: Main character, mid-30s, business attire, determined personality
- Sarah: Supporting character, early 30s, John's colleague, professional appearance
- David: Office manager, 50s, stern demeanor, always in formal suits

Places:
- Downtown Street: Busy urban setting, morning rush hour, tall buildings
- Office Building: Modern glass skyscraper, corporate headquarters
- Conference Room: Large meeting space with glass walls, executive furniture
- Cafe: Small coffee shop near the office, casual atmosphere

Props:
- Briefcase: Brown leather briefcase carried by John, contains important documents
- Smartphone: John's latest model smartphone, essential communication device
- Coffee Cup: Disposable cup from the cafe, appears in multiple scenes
- Presentation Folder: Red folder containing the proposal documents"""

MOCK_SHOT_SUGGESTIONS = """Based on my analysis of your script and existing shot list, here are some additional shots that would enhance the visual storytelling:

Scene 1, Shot 1.5: Close-up of John's determined expression
Shot Size: CU
Reason: This reaction shot would emphasize John's emotional state and motivation before he enters the building.

Scene 1, Shot 2.5: Insert shot of John's watch showing the time
Shot Size: ECU
Reason: This would establish the time pressure John is under and explain why he's walking purposefully.

Scene 2, Shot 1: Establishing shot of the office interior
Shot Size: LS
Reason: An establishing shot would help orient the viewer to the new location and show the scale of the office environment.

Scene 2, Shot 3.5: Over-the-shoulder shot of John looking at Sarah
Shot Size: MS
Reason: This would establish the relationship between these two characters and create visual interest through shot variety.

Scene 3, Shot 2: Close-up of the presentation folder being opened
Shot Size: CU
Reason: This insert shot would emphasize the importance of the documents and create a moment of anticipation."""


MOCK_VISUAL_PROMPTS = """Medium shot of John walking down the busy street.

Medium shot of John walking purposefully down the busy street, checking his watch. Morning light cuts between tall buildings. Camera follows with slight handheld movement.

Medium shot of John, mid-30s in business attire, walking purposefully down the busy downtown street while checking his watch. Commuters stream past him, morning light cuts between tall glass buildings and reflects off shop windows. Camera follows the movement with a slight handheld feel. Shallow depth of field keeps John sharp against the crowd."""

MOCK_TEXT = {
	"shot-list-generation": MOCK_SHOT_LIST,
	"subject-extraction": MOCK_SUBJECTS,
	"shot-suggestions": MOCK_SHOT_SUGGESTIONS,
	"visual-prompt": MOCK_VISUAL_PROMPTS,
}

MOCK_JSON: Dict[str, Dict[str, Any]] = {
	"shot-list-generation": {
		"shots": [
			{
				"scene": "1",
				"shot": "1",
				"shot_size": "ELS",
				"description": "Establishing shot of the city skyline at dawn",
				"people": "",
				"action": "Camera pans slowly across the city skyline as the sun rises",
				"dialogue": "",
				"location": "City skyline",
			},
			{
				"scene": "1",
				"shot": "2",
				"shot_size": "MS",
				"description": "John walking down the busy street",
				"people": "John",
				"action": "John walks purposefully down the busy street, checking his watch",
				"dialogue": "",
				"location": "Downtown street",
			},
		]
	},
	"subject-extraction": {
		"subjects": [
			{"name": "John", "category": "People", "description": "Main character, mid-30s", "alias": ""},
			{"name": "Downtown Street", "category": "Places", "description": "Busy urban setting", "alias": ""},
			{"name": "Briefcase", "category": "Props", "description": "Brown leather briefcase", "alias": ""},
		]
	},
	"visual-prompt": {
		"concise": "Medium shot of John walking down the busy street.",
		"normal": "Medium shot of John walking purposefully down the busy street, checking his watch. Camera follows the movement.",
		"detailed": "Medium shot of John, mid-30s in business attire, walking purposefully down the busy downtown street while checking his watch. Camera follows the movement with a slight handheld feel. Shallow depth of field.",
	},
}

GENERIC_TEXT = "AI generated response based on your prompt and context."


class MockLLMClient:
	def __init__(
		self,
		responses: Optional[Dict[str, str]] = None,
		json_responses: Optional[Dict[str, Dict[str, Any]]] = None,
		log_path: Optional[Path] = None,
	):
		self.responses = {**MOCK_TEXT, **(responses or {})}
		self.json_responses = {**MOCK_JSON, **(json_responses or {})}
		self.log_path = log_path
		# (kind, template, user_prompt)，测试里用来断言调用顺序
		self.calls: List[Tuple[str, str, str]] = []

	def _log(self, type: str, content: str, template: str) -> None:
		if self.log_path is not None:
			append_log(self.log_path, type, content, template=template, metadata={"model": "mock", "usedMockData": True})

	def chat_text(self, system_prompt: str, user_prompt: str, template: str = "", phase: str = "") -> str:
		self.calls.append(("text", template, user_prompt))
		self._log("prompt", user_prompt, template)
		out = self.responses.get(template, GENERIC_TEXT)
		self._log("response", out, template)
		return out

	def chat_json(self, system_prompt: str, user_prompt: str, template: str = "", phase: str = "") -> Dict[str, Any]:
		self.calls.append(("json", template, user_prompt))
		self._log("prompt", user_prompt, template)
		if template not in self.json_responses:
			raise StructuredOutputError(f"mock client has no structured response for template {template!r}")
		data = copy.deepcopy(self.json_responses[template])
		self._log("response", json.dumps(data, ensure_ascii=False), template)
		return data

	def close(self) -> None:
		pass
