"""
Utilities Module
Contains helper functions and algorithms.
"""
from vocabstudy.utils.srs_algorithm import ReviewScheduler, advance_review, review_scheduler

__all__ = ["ReviewScheduler", "advance_review", "review_scheduler"]
