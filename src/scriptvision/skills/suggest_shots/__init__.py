# -*- coding: utf-8 -*-
from .skill import SuggestResult, SuggestShotsSkill

__all__ = ["SuggestResult", "SuggestShotsSkill"]
