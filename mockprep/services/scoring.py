"""
Score aggregation for completed interviews and per-user statistics.

Pure functions over ORM rows (or anything with the same attributes); the
lifecycle controller and the store persist the results.
"""
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from mockprep.db.models.enums import QuestionType

# Communication is currently derived from the answer score with a flat weight.
COMMUNICATION_WEIGHT = 0.8
# Confidence is not computed from per-answer estimates yet.
CONFIDENCE_LEVEL = 80.0
INSUFFICIENT_DATA_FEEDBACK = "Complete more questions to receive detailed feedback."


@dataclass
class ScoredAnswer:
    """One evaluated answer, as handed to the summary generator."""
    score: float
    feedback: str


@dataclass
class InterviewScores:
    overall_score: float
    communication_score: float
    technical_score: float
    confidence_level: float
    scored: List[ScoredAnswer]

    @property
    def has_data(self) -> bool:
        return bool(self.scored)


@dataclass
class UserStats:
    total_interviews: int = 0
    average_score: float = 0.0
    confidence_level: float = 0.0
    practice_time: int = 0  # hours


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_interview_scores(questions: Iterable) -> InterviewScores:
    """
    Aggregate per-question scores into interview scores.

    Only questions with a response score take part. With none, every score is 0.
    Scores come back rounded to 2 decimals, communication being the rounded
    overall times COMMUNICATION_WEIGHT.
    Technical score falls back to the overall score when no technical question
    was scored. Questions are expected in order_index order.
    """
    scored_questions = [q for q in questions if q.response_score is not None]
    scores = [float(q.response_score) for q in scored_questions]

    overall = round(_mean(scores) or 0.0, 2)
    communication = round(overall * COMMUNICATION_WEIGHT, 2)

    technical_scores = [
        float(q.response_score)
        for q in scored_questions
        if QuestionType(q.question_type) == QuestionType.TECHNICAL
    ]
    technical = _mean(technical_scores)
    technical = overall if technical is None else round(technical, 2)

    return InterviewScores(
        overall_score=overall,
        communication_score=communication,
        technical_score=technical,
        confidence_level=CONFIDENCE_LEVEL,
        scored=[
            ScoredAnswer(score=float(q.response_score), feedback=q.response_feedback or "")
            for q in scored_questions
        ],
    )


def compute_user_stats(completed_interviews: Iterable) -> UserStats:
    """
    Summarize a user's completed interviews.

    Averages are rounded to 2 decimals; practice time is total minutes
    converted to whole hours. Empty input gives all zeros.
    """
    interviews = list(completed_interviews)
    if not interviews:
        return UserStats()

    scores = [_to_float(i.overall_score) for i in interviews if i.overall_score is not None]
    confidence = [_to_float(i.confidence_level) for i in interviews if i.confidence_level is not None]
    minutes = sum(i.duration for i in interviews if i.duration)

    return UserStats(
        total_interviews=len(interviews),
        average_score=round(_mean(scores) or 0.0, 2),
        confidence_level=round(_mean(confidence) or 0.0, 2),
        practice_time=_round_half_up(minutes / 60),
    )
