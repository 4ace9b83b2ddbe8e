"""
Closed value sets shared by the ORM models and the API schemas.
"""
import enum


class JobRole(str, enum.Enum):
    """Roles an interview can be configured for."""
    FRONTEND_DEVELOPER = "frontend_developer"
    BACKEND_DEVELOPER = "backend_developer"
    FULLSTACK_DEVELOPER = "fullstack_developer"
    MOBILE_DEVELOPER = "mobile_developer"
    DATA_SCIENTIST = "data_scientist"
    PRODUCT_MANAGER = "product_manager"
    UX_DESIGNER = "ux_designer"
    DEVOPS_ENGINEER = "devops_engineer"
    QA_ENGINEER = "qa_engineer"
    SOFTWARE_ARCHITECT = "software_architect"


class ExperienceLevel(str, enum.Enum):
    ENTRY = "entry"
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    PRINCIPAL = "principal"


class InterviewStatus(str, enum.Enum):
    """Interview lifecycle status. completed and cancelled are terminal."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QuestionType(str, enum.Enum):
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    SITUATIONAL = "situational"


def enum_values(enum_cls):
    """Persist enum members by value instead of by name."""
    return [member.value for member in enum_cls]
