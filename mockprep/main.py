import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mockprep.api.routes import auth, interviews, questions, analytics, preferences, health
from mockprep.core import config
from mockprep.core.logging_config import setup_logging, sanitize_log_data
from mockprep.db.init_db import init_db
from mockprep.db.session import build_engine, build_session_factory
from mockprep.llm.openai_provider import OpenAIProvider
from mockprep.services.question_service import LLMQuestionEvaluationService, QuestionEvaluationService
from mockprep.services.realtime_service import LiveKitSessionService, RealtimeSessionService

logger = logging.getLogger(__name__)


def build_generator() -> QuestionEvaluationService:
    try:
        provider = OpenAIProvider()
    except ValueError as e:
        logger.warning(f"{e} - question generation and evaluation will fail until it is set")
        provider = None
    return LLMQuestionEvaluationService(provider)


def create_app(
    database_url: str = None,
    generator: QuestionEvaluationService = None,
    sessions: RealtimeSessionService = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the API with its storage and collaborators.

    Everything stateful is created here once and kept on app.state; request
    handlers reach it through the dependencies in core.auth_dependency.
    Serve with: uvicorn mockprep.main:create_app --factory
    """
    if configure_logging:
        setup_logging(config.LOG_LEVEL)

    engine = build_engine(database_url)
    init_db(engine)

    generator = generator or build_generator()
    sessions = sessions or LiveKitSessionService()

    settings_summary = sanitize_log_data({
        "database": engine.url.render_as_string(hide_password=True),
        "livekit_url": sessions.ws_url,
        "openai_api_key": config.OPENAI_API_KEY,
        "cors_origins": ",".join(config.CORS_ORIGINS),
    })
    logger.info(f"Starting MockPrep API: {settings_summary}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        sessions.close()
        engine.dispose()

    app = FastAPI(title="MockPrep API", lifespan=lifespan)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.generator = generator
    app.state.sessions = sessions

    # ============================================
    # CORS: the web client only
    # ============================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # ============================================
    # ROUTERS
    # ============================================
    app.include_router(auth.router)
    app.include_router(interviews.router)
    app.include_router(questions.router)
    app.include_router(analytics.router)
    app.include_router(preferences.router)
    app.include_router(health.router)

    return app
