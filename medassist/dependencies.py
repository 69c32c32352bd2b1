from fastapi import Request

from medassist.services.diagnosis_service import DiagnosisService


async def get_diagnosis_service(request: Request) -> DiagnosisService:
    """Dependency to get a diagnosis service sharing the app-wide LLM client."""
    return DiagnosisService(llm_service=getattr(request.app.state, "llm_service", None))
