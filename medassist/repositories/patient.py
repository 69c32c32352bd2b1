from datetime import datetime, timezone

from sqlalchemy.orm import Session
from ..models.patient import Patient
from ..schemas.patient import PatientCreate, PatientUpdate


class PatientRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, patient_id: int) -> Patient | None:
        return self.db.query(Patient).filter(Patient.id == patient_id).first()

    def get_all(self) -> list[Patient]:
        """All patients, newest first."""
        return (
            self.db.query(Patient)
            .order_by(Patient.created_at.desc(), Patient.id.desc())
            .all()
        )

    def create(self, patient: PatientCreate) -> Patient:
        db_patient = Patient(
            full_name=patient.full_name,
            age=patient.age,
            sex=patient.sex,
            weight=patient.weight,
            allergies=patient.allergies,
            contact_info=patient.contact_info,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(db_patient)
        self.db.commit()
        self.db.refresh(db_patient)
        return db_patient

    def update(self, patient_id: int, changes: PatientUpdate) -> Patient | None:
        """Apply the fields present in ``changes``; returns None if not found."""
        db_patient = self.get(patient_id)
        if db_patient is None:
            return None
        for field, value in changes.model_dump(exclude_unset=True).items():
            setattr(db_patient, field, value)
        db_patient.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(db_patient)
        return db_patient

    def delete(self, patient_id: int) -> bool:
        """Delete a patient by ID. Returns False if no such patient exists."""
        deleted = self.db.query(Patient).filter(Patient.id == patient_id).delete()
        self.db.commit()
        return deleted > 0
