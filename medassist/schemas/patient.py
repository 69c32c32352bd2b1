from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

# Blank strings count as missing
RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Age = Annotated[int, Field(ge=0, le=120)]
Weight = Annotated[float, Field(ge=0.5, le=500)]


class CamelModel(BaseModel):
    """Request model accepting camelCase keys as well as field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _normalize_sex(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _normalize_allergies(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PatientBase(CamelModel):
    full_name: RequiredStr
    age: Age
    sex: RequiredStr
    weight: Weight
    allergies: Optional[str] = None

    @field_validator("sex")
    @classmethod
    def lower_sex(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_sex(v)

    @field_validator("allergies")
    @classmethod
    def blank_allergies_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_allergies(v)

    @classmethod
    def required_fields(cls) -> List[str]:
        """Public (camelCase) names of the required fields."""
        return [
            field.alias or name
            for name, field in cls.model_fields.items()
            if field.is_required()
        ]


class PatientCreate(PatientBase):
    contact_info: Optional[Any] = None


class PatientUpdate(CamelModel):
    """Partial update; only the fields present in the body are changed."""

    full_name: Optional[RequiredStr] = None
    age: Optional[Age] = None
    sex: Optional[RequiredStr] = None
    weight: Optional[Weight] = None
    allergies: Optional[str] = None
    contact_info: Optional[Any] = None

    @field_validator("full_name", "age", "sex", "weight", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Omit a field to leave it unchanged; these columns are NOT NULL
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("sex")
    @classmethod
    def lower_sex(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_sex(v)

    @field_validator("allergies")
    @classmethod
    def blank_allergies_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_allergies(v)


class Patient(BaseModel):
    id: int
    full_name: str
    age: int
    sex: str
    weight: float
    allergies: Optional[str] = None
    contact_info: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PatientResponse(BaseModel):
    success: bool = True
    patient: Patient


class PatientListResponse(BaseModel):
    success: bool = True
    patients: List[Patient]


class PatientDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Patient deleted successfully"
