"""
Shared fixtures: in-memory SQLite, fake collaborators, and a TestClient
whose caller identity can be switched per test.
"""
import pytest
from fastapi.testclient import TestClient

from mockprep.core.auth_dependency import get_current_claims
from mockprep.core.errors import GenerationError, EvaluationError, SessionProviderError
from mockprep.db.init_db import init_db
from mockprep.db.models.enums import QuestionType
from mockprep.db.session import build_engine, build_session_factory
from mockprep.main import create_app
from mockprep.services.interview_lifecycle import InterviewLifecycle
from mockprep.services.question_service import (
    QuestionEvaluationService,
    GeneratedQuestion,
    ResponseEvaluation,
)
from mockprep.services.realtime_service import RealtimeSessionService, room_name_for
from mockprep.services.storage import InterviewStore

TEST_DATABASE_URL = "sqlite:///:memory:"

DEFAULT_QUESTIONS = [
    ("Explain how Go interfaces are satisfied.", QuestionType.TECHNICAL),
    ("Tell me about a disagreement with a teammate.", QuestionType.BEHAVIORAL),
]


class FakeGenerator(QuestionEvaluationService):
    """Deterministic generator. Scores are looked up by response text."""

    def __init__(self):
        self.questions = [
            GeneratedQuestion(question=text, type=qtype, expected_areas=["clarity"])
            for text, qtype in DEFAULT_QUESTIONS
        ]
        self.scores = {}
        self.default_score = 7.0
        self.fail_generation = False
        self.fail_evaluation = False
        self.fail_summary = False
        self.generate_calls = []
        self.evaluate_calls = []
        self.summary_calls = []

    def set_questions(self, items):
        self.questions = [
            GeneratedQuestion(question=text, type=qtype, expected_areas=[])
            for text, qtype in items
        ]

    def generate_questions(self, job_role, experience_level, tech_stack, count):
        self.generate_calls.append((job_role, experience_level, list(tech_stack), count))
        if self.fail_generation:
            raise GenerationError("generator unavailable")
        return list(self.questions)

    def evaluate_response(self, question, response, job_role, experience_level):
        self.evaluate_calls.append((question, response, job_role, experience_level))
        if self.fail_evaluation:
            raise EvaluationError("evaluator unavailable")
        score = self.scores.get(response, self.default_score)
        return ResponseEvaluation(
            score=score,
            feedback=f"Feedback for: {response}",
            strengths=["structure"],
            improvements=["depth"],
            confidence_level=65,
            communication_score=score,
            technical_score=score,
        )

    def summarize(self, evaluations):
        self.summary_calls.append(list(evaluations))
        if self.fail_summary:
            raise GenerationError("summary unavailable")
        return f"Overall summary of {len(evaluations)} answers."


class FakeSessions(RealtimeSessionService):
    """Records room operations; can be told to fail."""

    ws_url = "wss://livekit.test"

    def __init__(self):
        self.fail_allocate = False
        self.fail_teardown = False
        self.allocated = []
        self.teardown_calls = []
        self.token_calls = []

    def allocate_room(self, interview_id):
        if self.fail_allocate:
            raise SessionProviderError("room service down")
        room_name = room_name_for(interview_id)
        self.allocated.append(room_name)
        return room_name

    def issue_token(self, room_name, participant_name, user_id):
        self.token_calls.append((room_name, participant_name, user_id))
        return f"token:{room_name}:{user_id}"

    def teardown_room(self, room_name):
        self.teardown_calls.append(room_name)
        if self.fail_teardown:
            raise RuntimeError("room service down")

    def get_room_info(self, room_name):
        return {"name": room_name, "num_participants": 1}


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def sessions():
    return FakeSessions()


@pytest.fixture
def db():
    """Fresh in-memory database session for each test."""
    engine = build_engine(TEST_DATABASE_URL)
    init_db(engine)
    db = build_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def store(db):
    return InterviewStore(db)


@pytest.fixture
def test_user(store):
    return store.upsert_user("user-1", email="ada@example.com", first_name="Ada")


@pytest.fixture
def lifecycle(store, generator, sessions):
    return InterviewLifecycle(store=store, generator=generator, sessions=sessions)


@pytest.fixture
def current_claims():
    """Claims the fake identity provider reports for the caller. Mutate to switch users."""
    return {"sub": "user-1", "email": "ada@example.com", "first_name": "Ada"}


@pytest.fixture
def app(generator, sessions, current_claims):
    app = create_app(
        database_url=TEST_DATABASE_URL,
        generator=generator,
        sessions=sessions,
        configure_logging=False,
    )
    app.dependency_overrides[get_current_claims] = lambda: dict(current_claims)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def app_store(app):
    """Direct store access to the database behind the TestClient."""
    db = app.state.session_factory()
    try:
        yield InterviewStore(db)
    finally:
        db.close()


def interview_payload(**overrides):
    payload = {
        "title": "Backend practice",
        "jobRole": "backend_developer",
        "experienceLevel": "mid",
        "techStack": ["Go", "PostgreSQL"],
        "voiceEnabled": False,
        "questionCount": 2,
    }
    payload.update(overrides)
    return payload
