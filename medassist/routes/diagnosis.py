"""Diagnosis generation and history routes."""

from typing import Optional, Union
import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from medassist.config import settings
from medassist.database import get_db, get_optional_db
from medassist.dependencies import get_diagnosis_service
from medassist.errors import ServiceError
from medassist.repositories.diagnosis import DiagnosisRepository
from medassist.schemas.diagnosis import (
    DiagnosisHistoryResponse,
    DiagnosisRecord,
    DiagnosisResponse,
    EmergencyResponse,
    PatientInput,
)
from medassist.services.diagnosis_service import DiagnosisService
from medassist.services.triage import build_emergency_response, has_critical_symptoms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/diagnosis", tags=["diagnosis"])


@router.post("/generate", response_model=Union[DiagnosisResponse, EmergencyResponse])
async def generate_diagnosis(
    patient: PatientInput,
    db: Optional[Session] = Depends(get_optional_db),
    diagnosis_service: DiagnosisService = Depends(get_diagnosis_service),
):
    """Generate a diagnosis for the submitted patient.

    Critical symptoms short-circuit to a canned emergency referral without
    calling the model. Otherwise the parsed model reply is returned and, when
    a database is configured, stored; storage failures do not fail the request.
    """
    if has_critical_symptoms(patient.symptoms):
        logger.warning("Critical symptoms reported; returning emergency referral")
        return build_emergency_response(patient)

    try:
        result = await diagnosis_service.generate_diagnosis(patient)
    except Exception as e:
        logger.error(f"Diagnosis generation error: {str(e)}")
        raise ServiceError(500, "Failed to generate diagnosis", str(e))

    if db is not None:
        try:
            await run_in_threadpool(DiagnosisRepository(db).create, patient, result)
        except Exception as e:
            logger.warning(f"Failed to store diagnosis in database: {str(e)}")

    return DiagnosisResponse(**result.model_dump(), patient_data=patient)


generate_diagnosis.required_fields = PatientInput.required_fields()


@router.get("/history", response_model=DiagnosisHistoryResponse)
def diagnosis_history(db: Session = Depends(get_db)):
    """Return the most recent stored diagnoses, newest first."""
    try:
        diagnoses = DiagnosisRepository(db).get_recent(settings.DIAGNOSIS_HISTORY_LIMIT)
    except Exception as e:
        logger.error(f"History retrieval error: {str(e)}")
        raise ServiceError(500, "Failed to retrieve diagnosis history", str(e))
    return DiagnosisHistoryResponse(
        diagnoses=[DiagnosisRecord.model_validate(d) for d in diagnoses]
    )
