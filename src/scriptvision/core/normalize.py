# -*- coding: utf-8 -*-
"""
scriptvision/core/normalize.py

这个文件做什么：
- 模型返回文本进入解析器之前的统一清洗。
- 不做任何“理解”，只处理编码层面的噪声：BOM、CRLF、外层 Markdown 代码块、首尾空白。

注意：
- 永不抛错：None / 非字符串都会变成空串或 str()。
- 空文本不是错误，调用方把它当作“没有解析出东西”。
"""

from __future__ import annotations

import re
from typing import Any


_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\n(.*?)\n?```$", flags=re.DOTALL)


def normalize_response(raw: Any) -> str:
	if raw is None:
		return ""
	text = raw if isinstance(raw, str) else str(raw)

	text = text.lstrip("﻿")
	text = text.replace("\r\n", "\n").replace("\r", "\n")
	text = text.strip()

	# 整段被 ``` 包起来时只剥一层；正文中间的代码块保持原样
	m = _FENCE_RE.match(text)
	if m:
		text = m.group(1).strip()

	return text


def is_blank(text: Any) -> bool:
	return not normalize_response(text)
