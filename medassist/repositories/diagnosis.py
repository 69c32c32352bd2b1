from datetime import datetime, timezone

from sqlalchemy.orm import Session
from ..models.diagnosis import Diagnosis
from ..schemas.diagnosis import DiagnosisResult, PatientInput


class DiagnosisRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_recent(self, limit: int = 50) -> list[Diagnosis]:
        """Most recent diagnoses, newest first."""
        return (
            self.db.query(Diagnosis)
            .order_by(Diagnosis.created_at.desc(), Diagnosis.id.desc())
            .limit(limit)
            .all()
        )

    def create(self, patient: PatientInput, result: DiagnosisResult) -> Diagnosis:
        db_diagnosis = Diagnosis(
            patient_name=patient.full_name,
            age=patient.age,
            sex=patient.sex,
            weight=patient.weight,
            allergies=patient.allergies,
            symptoms=patient.symptoms,
            diagnosis=result.diagnosis,
            confidence=result.confidence,
            is_emergency=result.is_emergency,
            needs_referral=result.needs_referral,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(db_diagnosis)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_diagnosis)
        return db_diagnosis
