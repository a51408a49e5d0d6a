# -*- coding: utf-8 -*-
"""
scriptvision/core/errors.py

错误分类（只有这几类会 raise，解析 / 合并本身永不抛错）：
- EmptyInputError       : 必需的输入为空（剧本、分镜表），在调用模型之前就拦下
- GenerationError       : 模型调用失败（HTTP 非 2xx、返回形状不对）；原样上抛，不重试
- StructuredOutputError : JSON mode 的输出不是 JSON 或不符合 schema；上层据此回退到自由文本解析
"""

from __future__ import annotations


class ScriptVisionError(Exception):
	"""所有 ScriptVision 自定义错误的基类。"""

	def __init__(self, message: str, error_code: str = "SCRIPTVISION_ERROR"):
		self.message = message
		self.error_code = error_code
		super().__init__(self.message)


class EmptyInputError(ScriptVisionError, ValueError):
	def __init__(self, what: str, message: str | None = None):
		super().__init__(message or f"{what} is empty", error_code="EMPTY_INPUT")
		self.what = what


class GenerationError(ScriptVisionError):
	def __init__(self, message: str, status_code: int | None = None):
		super().__init__(message, error_code="GENERATION_FAILED")
		self.status_code = status_code


class StructuredOutputError(ScriptVisionError, ValueError):
	def __init__(self, message: str):
		super().__init__(message, error_code="STRUCTURED_OUTPUT_INVALID")
