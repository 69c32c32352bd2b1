from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .patient import PatientBase, CamelModel, RequiredStr


class PatientInput(PatientBase):
    """Patient intake data submitted for a diagnosis."""

    symptoms: RequiredStr
    lang: Optional[str] = "en"

    @field_validator("lang")
    @classmethod
    def default_lang(cls, v: Optional[str]) -> str:
        v = (v or "").strip().lower()
        return v or "en"


class DiagnosisResult(CamelModel):
    """Structured fields parsed from a model reply."""

    diagnosis: str
    confidence: int = 0
    is_emergency: bool = False
    needs_referral: bool = False
    timestamp: datetime


class DiagnosisResponse(DiagnosisResult):
    success: Literal[True] = True
    patient_data: PatientInput


class EmergencyResponse(DiagnosisResult):
    """Canned response returned when critical symptoms are reported."""

    model_config = ConfigDict(extra="forbid")

    confidence: int = 100
    is_emergency: bool = True
    needs_referral: bool = True
    critical_warning: Literal[True] = True


class DiagnosisRecord(BaseModel):
    id: int
    patient_name: str
    age: int
    sex: str
    weight: float
    allergies: Optional[str] = None
    symptoms: str
    diagnosis: str
    confidence: int
    is_emergency: bool
    needs_referral: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DiagnosisHistoryResponse(BaseModel):
    success: bool = True
    diagnoses: List[DiagnosisRecord]
