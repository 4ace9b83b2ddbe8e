import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./mockprep.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# ✅ Identity provider (session tokens are issued externally, we only verify them)
IDENTITY_JWT_SECRET = os.getenv("IDENTITY_JWT_SECRET")
IDENTITY_JWT_ALGORITHM = os.getenv("IDENTITY_JWT_ALGORITHM", "HS256")
IDENTITY_JWT_AUDIENCE = os.getenv("IDENTITY_JWT_AUDIENCE")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session")

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_QUESTION_MODEL = os.getenv("OPENAI_QUESTION_MODEL", "gpt-4o")
OPENAI_EVALUATION_MODEL = os.getenv("OPENAI_EVALUATION_MODEL", "gpt-4o")
OPENAI_SUMMARY_MODEL = os.getenv("OPENAI_SUMMARY_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "60"))

# ✅ LiveKit
LIVEKIT_URL = os.getenv("LIVEKIT_URL", "wss://your-livekit-instance.livekit.cloud")
LIVEKIT_API_KEY = os.getenv("LIVEKIT_API_KEY", "")
LIVEKIT_API_SECRET = os.getenv("LIVEKIT_API_SECRET", "")
LIVEKIT_TOKEN_TTL_SECONDS = int(os.getenv("LIVEKIT_TOKEN_TTL_SECONDS", str(6 * 60 * 60)))
LIVEKIT_ROOM_EMPTY_TIMEOUT = int(os.getenv("LIVEKIT_ROOM_EMPTY_TIMEOUT", "300"))  # 5 minutes
LIVEKIT_ROOM_MAX_PARTICIPANTS = int(os.getenv("LIVEKIT_ROOM_MAX_PARTICIPANTS", "2"))  # user + AI

# ✅ App
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# ✅ Interview defaults
DEFAULT_QUESTION_COUNT = 8
MAX_QUESTION_COUNT = 20
DEFAULT_DURATION_MINUTES = 30
