"""
Unit tests for score aggregation and user statistics.
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from mockprep.db.models.enums import QuestionType
from mockprep.services.scoring import (
    CONFIDENCE_LEVEL,
    compute_interview_scores,
    compute_user_stats,
)


def _question(score, question_type=QuestionType.TECHNICAL, feedback="ok"):
    return SimpleNamespace(response_score=score, question_type=question_type, response_feedback=feedback)


def _interview(overall, confidence=80, duration=30):
    return SimpleNamespace(overall_score=overall, confidence_level=confidence, duration=duration)


def test_scores_from_two_answers():
    """Technical 6.0 and behavioral 9.0."""
    scores = compute_interview_scores([
        _question(6.0, QuestionType.TECHNICAL),
        _question(9.0, QuestionType.BEHAVIORAL),
    ])

    assert scores.overall_score == pytest.approx(7.5)
    assert scores.communication_score == pytest.approx(6.0)
    assert scores.technical_score == pytest.approx(6.0)
    assert scores.confidence_level == CONFIDENCE_LEVEL
    assert len(scores.scored) == 2


def test_unscored_questions_are_ignored():
    scores = compute_interview_scores([
        _question(8.0),
        _question(None),
        _question(None, QuestionType.SITUATIONAL),
    ])

    assert scores.overall_score == pytest.approx(8.0)
    assert [answer.score for answer in scores.scored] == [8.0]


def test_technical_falls_back_to_overall():
    scores = compute_interview_scores([
        _question(5.0, QuestionType.BEHAVIORAL),
        _question(7.0, QuestionType.SITUATIONAL),
    ])

    assert scores.technical_score == pytest.approx(6.0)
    assert scores.technical_score == scores.overall_score


def test_no_scored_answers_gives_zeros():
    scores = compute_interview_scores([_question(None), _question(None)])

    assert not scores.has_data
    assert scores.overall_score == 0
    assert scores.communication_score == 0
    assert scores.technical_score == 0


def test_accepts_decimal_scores_and_string_types():
    """Rows read back from Numeric columns carry Decimals."""
    scores = compute_interview_scores([
        _question(Decimal("7.25"), "technical"),
        _question(Decimal("8.75"), "behavioral"),
    ])

    assert scores.overall_score == pytest.approx(8.0)
    assert scores.technical_score == pytest.approx(7.25)


def test_summary_inputs_keep_feedback_in_order():
    scores = compute_interview_scores([
        _question(4.0, feedback="first"),
        _question(6.0, feedback=None),
    ])

    assert [(a.score, a.feedback) for a in scores.scored] == [(4.0, "first"), (6.0, "")]


def test_user_stats_empty():
    stats = compute_user_stats([])

    assert stats.total_interviews == 0
    assert stats.average_score == 0
    assert stats.confidence_level == 0
    assert stats.practice_time == 0


def test_user_stats_averages_and_hours():
    stats = compute_user_stats([
        _interview(Decimal("7.50"), duration=30),
        _interview(Decimal("8.00"), duration=60),
    ])

    assert stats.total_interviews == 2
    assert stats.average_score == pytest.approx(7.75)
    assert stats.confidence_level == pytest.approx(80.0)
    # 90 minutes rounds half up to 2 hours
    assert stats.practice_time == 2


def test_user_stats_rounds_average_to_two_decimals():
    stats = compute_user_stats([
        _interview(7.0),
        _interview(8.0),
        _interview(8.0),
    ])

    assert stats.average_score == pytest.approx(7.67)


def test_user_stats_tolerates_missing_values():
    stats = compute_user_stats([
        _interview(None, confidence=None, duration=None),
        _interview(6.0, duration=20),
    ])

    assert stats.total_interviews == 2
    assert stats.average_score == pytest.approx(6.0)
    assert stats.practice_time == 0


def test_communication_derives_from_rounded_overall():
    """7.10533 rounds to 7.11; 0.8 x 7.11 = 5.688 is stored as 5.69."""
    scores = compute_interview_scores([
        _question(7.0),
        _question(7.0),
        _question(7.316),
    ])

    assert scores.overall_score == pytest.approx(7.11)
    assert scores.communication_score == pytest.approx(5.69)
    assert scores.technical_score == pytest.approx(7.11)
