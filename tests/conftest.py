import os

# Must be set before the application settings are imported
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = ""

import logging
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from medassist import database
from medassist.database import get_db, get_optional_db
from medassist.dependencies import get_diagnosis_service
from medassist.main import app
from medassist.models.base import Base
from medassist.models.diagnosis import Diagnosis  # noqa: F401  (registers table)
from medassist.models.patient import Patient  # noqa: F401  (registers table)
from medassist.services.diagnosis_service import DiagnosisService
from medassist.services.llm_service import LLMResponse


SAMPLE_REPLY = """📄 Prescription Summary

🧠 Diagnosis:
Acute viral pharyngitis (common sore throat).

CONFIDENCE_PERCENT=78

💊 Medications:
| Medication | Dose | Route | Frequency | Duration / Max Dose |
|------------|------|-------|-----------|---------------------|
| Paracetamol | 500 mg | oral | every 6 hours | max 4 g/day |

⚠️ Warnings and Precautions:
- Consult doctor if fever persists beyond 3 days
"""


class FakeLLMService:
    """Stands in for LLMService; records prompts and returns a canned reply."""

    def __init__(self, content: Optional[str] = SAMPLE_REPLY, error: Optional[str] = None):
        self.content = content
        self.error = error
        self.prompts: List[str] = []

    async def process_prompt(self, user_prompt: str, **kwargs) -> LLMResponse:
        self.prompts.append(user_prompt)
        if self.error:
            return LLMResponse(content=None, error=self.error)
        return LLMResponse(content=self.content)


@pytest.fixture
def patient_payload():
    return {
        "fullName": "  Asha Patil ",
        "age": 34,
        "sex": "Female",
        "weight": 58.5,
        "allergies": " penicillin ",
        "symptoms": "Sore throat and mild fever for two days",
        "lang": "EN",
    }


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database and session for a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def fake_llm():
    return FakeLLMService()


@pytest.fixture
def client(db_session: Session, fake_llm: FakeLLMService) -> TestClient:
    """Create a test client backed by the in-memory database and a fake LLM.

    This fixture:
    - Overrides both database dependencies with the test session
    - Injects a diagnosis service that talks to the fake LLM
    - Cleans up dependency overrides after the test
    """

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_optional_db] = override_get_db
    app.dependency_overrides[get_diagnosis_service] = lambda: DiagnosisService(
        llm_service=fake_llm
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def client_without_db(monkeypatch, fake_llm: FakeLLMService) -> TestClient:
    """Create a test client for an application running without a database."""
    monkeypatch.setattr(database, "SessionLocal", None)
    app.dependency_overrides[get_diagnosis_service] = lambda: DiagnosisService(
        llm_service=fake_llm
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def setup_logging():
    # Configure logging for specific modules
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("medassist").setLevel(logging.DEBUG)
