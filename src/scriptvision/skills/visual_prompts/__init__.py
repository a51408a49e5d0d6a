# -*- coding: utf-8 -*-
from .skill import GenerateVisualPromptSkill, VisualPromptResult

__all__ = ["GenerateVisualPromptSkill", "VisualPromptResult"]
