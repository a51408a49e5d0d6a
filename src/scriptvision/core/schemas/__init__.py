# -*- coding: utf-8 -*-
from .shot import Shot, ShotFields, SuggestedShot, new_id, DEFAULT_SHOT_SIZE, DEFAULT_REASON
from .subject import Subject, CATEGORIES, normalize_category
from .style import CameraSettings, GeneratedPrompt, Style

__all__ = [
	"Shot",
	"ShotFields",
	"SuggestedShot",
	"new_id",
	"DEFAULT_SHOT_SIZE",
	"DEFAULT_REASON",
	"Subject",
	"CATEGORIES",
	"normalize_category",
	"Style",
	"GeneratedPrompt",
	"CameraSettings",
]
