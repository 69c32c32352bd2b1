from sqlalchemy import Boolean, Column, Integer, String, Float, Text, DateTime
from sqlalchemy.sql import func
from .base import Base


class Diagnosis(Base):
    __tablename__ = "diagnoses"

    id = Column(Integer, primary_key=True, index=True)
    patient_name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False)
    sex = Column(String(32), nullable=False)
    weight = Column(Float, nullable=False)
    allergies = Column(Text, nullable=True)
    symptoms = Column(Text, nullable=False)
    diagnosis = Column(Text, nullable=False)  # raw model reply
    confidence = Column(Integer, nullable=False, default=0)
    is_emergency = Column(Boolean, nullable=False, default=False)
    needs_referral = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
