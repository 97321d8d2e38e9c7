"""
Progress Schemas
Response schema for the progress overview.
"""
from pydantic import BaseModel

from vocabstudy.models.progress import ProgressOverview


class ProgressOverviewResponse(BaseModel):
    """Progress overview of one user."""
    overview: ProgressOverview
