# -*- coding: utf-8 -*-
"""
extract_subjects/prompt.py

这个文件做什么：
- 结构化主路径：{"subjects": [{"name","category","description","alias"}]}
- 自由文本回退：按 People / Places / Props 分节的 Markdown 列表，交给 extract_subjects 解析。
"""

from __future__ import annotations


TEMPLATE_ID = "subject-extraction"
PHASE = "subjectExtraction"

SYSTEM_PROMPT = "You are a helpful assistant specialized in visual prompts and film production."

JSON_SYSTEM_PROMPT = (
	"You extract subjects from film scripts.\n"
	"You must output exactly one JSON object. No explanations, no Markdown, no code fences.\n"
)

_TASK = (
	"Extract all subjects from the following script. Categorize them as:\n"
	"- People (characters)\n"
	"- Places (locations)\n"
	"- Props (important objects)\n"
	"\n"
	"For each subject, provide:\n"
	"- Name\n"
	"- Category\n"
	"- Brief description\n"
	"- Alias (if any)\n"
)

_TEXT_FORMAT = """Please format your response as follows:
### People (Characters)
1. **Character Name**
   - **Category**: People
   - **Description**: Brief description of the character
   - **Alias**: Any alias or nickname (or "None")

### Places (Locations)
1. **Location Name**
   - **Category**: Places
   - **Description**: Brief description of the location
   - **Alias**: Any alias or alternate name (or "None")

### Props (Important Objects)
1. **Object Name**
   - **Category**: Props
   - **Description**: Brief description of the object
   - **Alias**: Any alias or alternate name (or "None")
"""


def build_text_prompt(script: str) -> str:
	return _TASK + "\n" + _TEXT_FORMAT + "\nSCRIPT:\n" + script


def build_json_prompt(script: str) -> str:
	return (
		_TASK
		+ "\n"
		"Output format:\n"
		'{"subjects": [{"name": "...", "category": "People|Places|Props", "description": "...", "alias": ""}]}\n'
		"\n"
		"SCRIPT:\n"
		+ script
	)
