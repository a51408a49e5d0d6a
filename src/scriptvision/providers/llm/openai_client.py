# -*- coding: utf-8 -*-
"""
providers/llm/openai_client.py

这个文件做什么：
- 提供一个极薄的 OpenAI 兼容 Chat Completions client，供 skill 层调用。
- 支持从项目根目录的 .env 读取配置（推荐），避免在 shell 里 export。
- 对外暴露：chat_text(...) -> str、chat_json(...) -> dict、close()

配置来源优先级（从高到低）：
1) 显式传参（model/base_url/api_key）
2) .env 文件
3) 系统环境变量

错误约定：
- HTTP 非 2xx、网络错误、返回形状不对 -> GenerationError（上层原样上抛）
- JSON mode 返回的内容不是 JSON       -> StructuredOutputError（上层回退自由文本）
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from dotenv import load_dotenv

from scriptvision.core.ai_logs import append_log
from scriptvision.core.errors import GenerationError, StructuredOutputError
from scriptvision.logging_config import get_logger


log = get_logger(__name__)

SYSTEM_DEFAULT = "You are a helpful assistant specialized in visual prompts and film production."


@dataclass
class OpenAIConfig:
	api_key: str
	base_url: str
	model: str
	timeout_s: float = 60.0
	temperature: float = 0.7
	max_tokens: int = 2000


def _truncate(s: str, n: int = 1000) -> str:
	if len(s) > n:
		return s[:n] + "...(truncated)"
	return s


class OpenAILLMClient:
	def __init__(self, cfg: OpenAIConfig, log_path: Optional[Path] = None):
		self.cfg = cfg
		self.log_path = log_path
		self._client = httpx.Client(
			base_url=cfg.base_url,
			timeout=httpx.Timeout(cfg.timeout_s),
			headers={
				"Authorization": f"Bearer {cfg.api_key}",
				"Content-Type": "application/json",
			},
		)

	def close(self) -> None:
		self._client.close()

	def __enter__(self) -> "OpenAILLMClient":
		return self

	def __exit__(self, *exc: Any) -> None:
		self.close()

	def _log(self, type: str, content: str, template: str, metadata: Dict[str, Any]) -> None:
		if self.log_path is None:
			return
		append_log(self.log_path, type, content, template=template, metadata=metadata)

	def _complete(self, system_prompt: str, user_prompt: str, template: str, phase: str, json_mode: bool) -> str:
		payload: Dict[str, Any] = {
			"model": self.cfg.model,
			"messages": [
				{"role": "system", "content": system_prompt or SYSTEM_DEFAULT},
				{"role": "user", "content": user_prompt},
			],
			"temperature": self.cfg.temperature,
			"max_tokens": self.cfg.max_tokens,
		}
		if json_mode:
			payload["response_format"] = {"type": "json_object"}
			payload["temperature"] = 0.2

		meta = {"model": self.cfg.model, "phase": phase, "json_mode": json_mode}
		self._log("prompt", user_prompt, template, meta)
		log.info("LLM call template=%s model=%s json_mode=%s", template or "-", self.cfg.model, json_mode)

		try:
			r = self._client.post("/chat/completions", json=payload)
		except httpx.HTTPError as e:
			self._log("response", f"Error: {e}", template, {**meta, "error": True})
			raise GenerationError(f"LLM request failed: {e}") from e

		if r.status_code < 200 or r.status_code >= 300:
			body = _truncate(r.text)
			self._log("response", f"Error: HTTP {r.status_code}", template, {**meta, "error": True})
			raise GenerationError(f"LLM HTTP {r.status_code}: {body}", status_code=r.status_code)

		try:
			data = r.json()
			content = data["choices"][0]["message"]["content"]
		except (ValueError, KeyError, IndexError, TypeError):
			raise GenerationError(f"Unexpected response shape: {_truncate(r.text)}")

		if not isinstance(content, str):
			raise GenerationError("Unexpected response shape: message content is not text")

		self._log("response", content, template, {**meta, "usage": data.get("usage")})
		return content

	def chat_text(self, system_prompt: str, user_prompt: str, template: str = "", phase: str = "") -> str:
		return self._complete(system_prompt, user_prompt, template, phase, json_mode=False)

	def chat_json(self, system_prompt: str, user_prompt: str, template: str = "", phase: str = "") -> Dict[str, Any]:
		content = self._complete(system_prompt, user_prompt, template, phase, json_mode=True)

		try:
			data = json.loads(content)
		except ValueError:
			raise StructuredOutputError(f"LLM output is not valid JSON. content_snip={_truncate(content)}")

		if not isinstance(data, dict):
			raise StructuredOutputError("LLM output must be a JSON object")
		return data


def _load_dotenv_if_present(project_root: Path) -> None:
	env_path = project_root / ".env"
	if env_path.exists():
		load_dotenv(dotenv_path=str(env_path), override=False)


def load_openai_client(
	project_root: Optional[str] = None,
	api_key: Optional[str] = None,
	base_url: Optional[str] = None,
	model: Optional[str] = None,
	timeout_s: Optional[float] = None,
	log_path: Optional[Path] = None,
) -> OpenAILLMClient:
	"""
	加载 OpenAI 兼容 client。

	默认从 project_root/.env 读取（project_root 缺省为当前工作目录）。
	缺 key 直接报错，不静默退回 mock；要离线跑请显式用 MockLLMClient（CLI 的 --mock）。
	"""
	root = Path(project_root or os.getcwd()).resolve()
	_load_dotenv_if_present(root)

	key = (api_key or os.environ.get("OPENAI_API_KEY", "")).strip()
	if not key:
		raise GenerationError("Missing OPENAI_API_KEY (from .env or env)")

	url = (base_url or os.environ.get("OPENAI_BASE_URL", "")).strip() or "https://api.openai.com/v1"
	m = (model or os.environ.get("OPENAI_MODEL", "")).strip() or "gpt-4o-mini"
	t = float(timeout_s or os.environ.get("OPENAI_TIMEOUT_S", "60").strip() or 60)

	cfg = OpenAIConfig(api_key=key, base_url=url, model=m, timeout_s=t)
	return OpenAILLMClient(cfg, log_path=log_path)
