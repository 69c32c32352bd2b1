"""Patient CRUD routes."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from medassist.database import get_db
from medassist.errors import NotFoundError, ServiceError
from medassist.repositories.patient import PatientRepository
from medassist.schemas.patient import (
    Patient,
    PatientCreate,
    PatientDeleteResponse,
    PatientListResponse,
    PatientResponse,
    PatientUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["patients"])


@router.post("/", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def create_patient(patient: PatientCreate, db: Session = Depends(get_db)):
    try:
        db_patient = PatientRepository(db).create(patient)
    except Exception as e:
        logger.error(f"Patient creation error: {str(e)}")
        raise ServiceError(500, "Failed to create patient", str(e))
    return PatientResponse(patient=Patient.model_validate(db_patient))


create_patient.required_fields = PatientCreate.required_fields()


@router.get("/", response_model=PatientListResponse)
def list_patients(db: Session = Depends(get_db)):
    try:
        patients = PatientRepository(db).get_all()
    except Exception as e:
        logger.error(f"Patient retrieval error: {str(e)}")
        raise ServiceError(500, "Failed to retrieve patients", str(e))
    return PatientListResponse(
        patients=[Patient.model_validate(p) for p in patients]
    )


@router.get("/{patient_id}", response_model=PatientResponse)
def read_patient(patient_id: int, db: Session = Depends(get_db)):
    try:
        db_patient = PatientRepository(db).get(patient_id)
    except Exception as e:
        logger.error(f"Patient retrieval error: {str(e)}")
        raise ServiceError(500, "Failed to retrieve patient", str(e))
    if db_patient is None:
        raise NotFoundError("Patient not found")
    return PatientResponse(patient=Patient.model_validate(db_patient))


@router.put("/{patient_id}", response_model=PatientResponse)
def update_patient(patient_id: int, changes: PatientUpdate, db: Session = Depends(get_db)):
    try:
        db_patient = PatientRepository(db).update(patient_id, changes)
    except Exception as e:
        logger.error(f"Patient update error: {str(e)}")
        raise ServiceError(500, "Failed to update patient", str(e))
    if db_patient is None:
        raise NotFoundError("Patient not found")
    return PatientResponse(patient=Patient.model_validate(db_patient))


@router.delete("/{patient_id}", response_model=PatientDeleteResponse)
def delete_patient(patient_id: int, db: Session = Depends(get_db)):
    try:
        deleted = PatientRepository(db).delete(patient_id)
    except Exception as e:
        logger.error(f"Patient deletion error: {str(e)}")
        raise ServiceError(500, "Failed to delete patient", str(e))
    if not deleted:
        raise NotFoundError("Patient not found")
    return PatientDeleteResponse()
