"""
Pydantic schemas for analytics endpoints.
"""
from pydantic import Field

from mockprep.schemas.base import CamelModel


class UserStatsResponse(CamelModel):
    """Aggregate statistics over the user's completed interviews."""
    total_interviews: int = Field(0, description="Completed interviews")
    average_score: float = Field(0.0, description="Mean overall score, 2 decimals")
    confidence_level: float = Field(0.0, description="Mean confidence level, 2 decimals")
    practice_time: int = Field(0, description="Total practice time in hours")

    class Config:
        json_schema_extra = {
            "example": {
                "totalInterviews": 4,
                "averageScore": 7.25,
                "confidenceLevel": 80.0,
                "practiceTime": 2
            }
        }
