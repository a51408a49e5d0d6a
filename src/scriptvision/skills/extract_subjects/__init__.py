# -*- coding: utf-8 -*-
from .skill import ExtractSubjectsSkill, SubjectsResult

__all__ = ["ExtractSubjectsSkill", "SubjectsResult"]
