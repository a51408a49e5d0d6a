# -*- coding: utf-8 -*-
from .skill import GenerateShotListSkill, ShotListResult

__all__ = ["GenerateShotListSkill", "ShotListResult"]
