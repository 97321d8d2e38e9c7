"""
Pydantic Models Module
Contains data models for all entities in the application.
"""
from vocabstudy.models.review import Grade, AttemptMode, ReviewState, GradeResult, Attempt
from vocabstudy.models.dictionary import (
    DefinitionSense, Meaning, WordEntry, CacheEntry, SimplifiedDefinition
)
from vocabstudy.models.progress import (
    DailyStats, SchedulerStats, ItemStats, DailyAccuracy, ProgressOverview
)

__all__ = [
    "Grade", "AttemptMode", "ReviewState", "GradeResult", "Attempt",
    "DefinitionSense", "Meaning", "WordEntry", "CacheEntry", "SimplifiedDefinition",
    "DailyStats", "SchedulerStats", "ItemStats", "DailyAccuracy", "ProgressOverview"
]
