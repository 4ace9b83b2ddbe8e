"""
Question generation and answer evaluation.

QuestionEvaluationService is the port the interview lifecycle depends on.
LLMQuestionEvaluationService implements it on top of an LLMProvider and
validates every model output with Pydantic before it reaches the caller.
"""
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from mockprep.core.config import (
    OPENAI_QUESTION_MODEL,
    OPENAI_EVALUATION_MODEL,
    OPENAI_SUMMARY_MODEL,
)
from mockprep.core.errors import GenerationError, EvaluationError
from mockprep.db.models.enums import JobRole, ExperienceLevel, QuestionType
from mockprep.llm.provider import LLMProvider
from mockprep.services.scoring import ScoredAnswer

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Unable to generate overall feedback"


# ============================================
# Pydantic Response Models
# ============================================

class GeneratedQuestion(BaseModel):
    """One interview question as produced by the generator."""
    question: str = Field(..., min_length=1, description="Exact question text")
    type: QuestionType = Field(..., description="technical / behavioral / situational")
    expected_areas: List[str] = Field(default_factory=list, description="Areas a good answer covers")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ResponseEvaluation(BaseModel):
    """Scored assessment of a single answer."""
    score: float = Field(..., description="Overall score 0-10")
    feedback: str = Field(..., description="Narrative feedback")
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    confidence_level: float = Field(0, description="Confidence estimate 0-100")
    communication_score: float = Field(0, description="Clarity and structure 0-10")
    technical_score: float = Field(0, description="Accuracy and depth 0-10")

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("score", "communication_score", "technical_score", mode="before")
    @classmethod
    def clamp_ten_point_scale(cls, value):
        return max(0.0, min(10.0, float(value)))

    @field_validator("confidence_level", mode="before")
    @classmethod
    def clamp_percentage(cls, value):
        return max(0.0, min(100.0, float(value)))


# ============================================
# Port
# ============================================

class QuestionEvaluationService(ABC):
    """Generates questions, scores answers and writes the final summary."""

    @abstractmethod
    def generate_questions(
        self,
        job_role: JobRole,
        experience_level: ExperienceLevel,
        tech_stack: Sequence[str],
        count: int,
    ) -> List[GeneratedQuestion]:
        """Raises GenerationError on failure or empty output."""

    @abstractmethod
    def evaluate_response(
        self,
        question: str,
        response: str,
        job_role: JobRole,
        experience_level: ExperienceLevel,
    ) -> ResponseEvaluation:
        """Raises EvaluationError on failure."""

    @abstractmethod
    def summarize(self, evaluations: Sequence[ScoredAnswer]) -> str:
        """Raises GenerationError on failure."""


# ============================================
# Prompts
# ============================================

def _label(value) -> str:
    raw = value.value if hasattr(value, "value") else str(value)
    return raw.replace("_", " ")


QUESTION_SYSTEM_PROMPT = """You are an expert technical interviewer. Generate {count} interview questions for a {level} {role} position.

Tech stack: {tech_stack}

Create a balanced mix of:
- 60% Technical questions (coding, system design, specific technologies)
- 25% Behavioral questions (teamwork, leadership, problem-solving)
- 15% Situational questions (handling conflicts, deadlines, challenges)

For each question, specify:
- The exact question text
- Question type (technical/behavioral/situational)
- Key areas the response should cover

Respond with a JSON object of the form:
{{"questions": [{{"question": "...", "type": "technical", "expectedAreas": ["..."]}}]}}"""

EVALUATION_SYSTEM_PROMPT = """You are an expert interview evaluator. Analyze the candidate's response and provide structured feedback.

Evaluate based on:
1. Technical accuracy and depth (for technical questions)
2. Communication clarity and structure
3. Confidence and presentation
4. Completeness of the answer
5. Practical experience demonstration

Provide scores:
- Overall score: 0-10 (10 being excellent)
- Communication score: 0-10 (clarity, structure, articulation)
- Technical score: 0-10 (accuracy, depth, practical knowledge)
- Confidence level: 0-100 (tone, conviction)

Give specific, actionable feedback including strengths and areas for improvement.

Respond with a JSON object with the keys: score, feedback, strengths, improvements,
confidenceLevel, communicationScore, technicalScore."""

SUMMARY_SYSTEM_PROMPT = """You are an expert career coach. Based on the individual question evaluations, provide comprehensive interview feedback.

Include:
1. Overall performance summary
2. Key strengths demonstrated
3. Primary areas for improvement
4. Specific actionable recommendations
5. Next steps for skill development

Make it encouraging but honest, with concrete advice."""


def parse_json_payload(text: str) -> Any:
    """
    Parse JSON from a model response.

    Accepts raw JSON or JSON wrapped in a markdown code block.
    Raises ValueError when nothing parseable is found.
    """
    if not text or not text.strip():
        raise ValueError("Empty response from model")

    fenced = re.search(r"```(?:json)?\s*([\[{].*?[\]}])\s*```", text, re.DOTALL)
    candidate = fenced.group(1) if fenced else text.strip()

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"Unparseable model response: {text[:100]}") from e


class LLMQuestionEvaluationService(QuestionEvaluationService):
    """QuestionEvaluationService backed by a chat-completion provider."""

    def __init__(
        self,
        provider: Optional[LLMProvider],
        question_model: str = OPENAI_QUESTION_MODEL,
        evaluation_model: str = OPENAI_EVALUATION_MODEL,
        summary_model: str = OPENAI_SUMMARY_MODEL,
    ):
        self.provider = provider
        self.question_model = question_model
        self.evaluation_model = evaluation_model
        self.summary_model = summary_model

    def _chat(self, messages, model: str, json_output: bool = False) -> str:
        if self.provider is None:
            raise RuntimeError("LLM provider not configured")
        return self.provider.chat(messages, model=model, json_output=json_output).content

    def generate_questions(self, job_role, experience_level, tech_stack, count):
        stack = ", ".join(tech_stack) if tech_stack else "not specified"
        messages = [
            {
                "role": "system",
                "content": QUESTION_SYSTEM_PROMPT.format(
                    count=count,
                    level=_label(experience_level),
                    role=_label(job_role),
                    tech_stack=stack,
                ),
            },
            {
                "role": "user",
                "content": (
                    f"Generate interview questions for: {_label(job_role)} "
                    f"({_label(experience_level)}) with tech stack: {stack}"
                ),
            },
        ]

        try:
            payload = parse_json_payload(self._chat(messages, self.question_model, json_output=True))
            if isinstance(payload, dict):
                payload = payload.get("questions", [])
            if not isinstance(payload, list):
                raise ValueError("Question payload is not a list")
            questions = [GeneratedQuestion.model_validate(item) for item in payload]
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Question generation returned invalid output: {e}")
            raise GenerationError("Failed to generate interview questions") from e
        except Exception as e:
            logger.error(f"Question generation failed: {type(e).__name__}: {e}", exc_info=True)
            raise GenerationError("Failed to generate interview questions") from e

        if not questions:
            raise GenerationError("Generator returned no questions")

        logger.info(f"Generated {len(questions)} questions (requested {count}) for {_label(job_role)}")
        return questions

    def evaluate_response(self, question, response, job_role, experience_level):
        messages = [
            {"role": "system", "content": EVALUATION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Position: {_label(job_role)} ({_label(experience_level)})\n"
                    f"Question: {question}\n"
                    f"Candidate Response: {response}\n\n"
                    "Evaluate this response comprehensively."
                ),
            },
        ]

        try:
            payload = parse_json_payload(self._chat(messages, self.evaluation_model, json_output=True))
            if not isinstance(payload, dict):
                raise ValueError("Evaluation payload is not an object")
            return ResponseEvaluation.model_validate(payload)
        except (ValueError, TypeError, PydanticValidationError) as e:
            logger.error(f"Evaluation returned invalid output: {e}")
            raise EvaluationError("Failed to evaluate response") from e
        except Exception as e:
            logger.error(f"Evaluation failed: {type(e).__name__}: {e}", exc_info=True)
            raise EvaluationError("Failed to evaluate response") from e

    def summarize(self, evaluations):
        summary_lines = "\n".join(
            f"Question {i + 1}: Score {item.score:g}/10. {item.feedback}".rstrip()
            for i, item in enumerate(evaluations)
        )
        messages = [
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Based on these interview question evaluations:\n\n{summary_lines}\n\n"
                    "Provide comprehensive feedback for the candidate."
                ),
            },
        ]

        try:
            content = self._chat(messages, self.summary_model)
        except Exception as e:
            logger.error(f"Summary generation failed: {type(e).__name__}: {e}", exc_info=True)
            raise GenerationError("Failed to generate overall feedback") from e

        return (content or "").strip() or SUMMARY_FALLBACK
