# -*- coding: utf-8 -*-
"""ScriptVision：剧本 -> 分镜表 / 主体 的 LLM 辅助解析与合并。"""

__version__ = "0.1.0"
