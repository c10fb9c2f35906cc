"""Consultation submission by the signed-in patient."""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from ..core.session import require_patient
from ..models.base import get_db
from ..models.patient import Patient
from ..services.consultation_ledger import consultation_ledger

router = APIRouter(tags=["consultations"])


class ConsultationIntake(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_illness: Optional[str] = None
    recent_surgery: Optional[str] = None
    surgery_timespan: Optional[str] = None
    diabetes_history: Optional[str] = None
    allergies: Optional[str] = None
    others: Optional[str] = None
    transaction_id: Optional[str] = None


class SubmitConsultationResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    consultation_id: int


@router.post("/submitConsultation/{doctor_id}", response_model=SubmitConsultationResponse)
def submit_consultation(
    doctor_id: int,
    intake: Optional[ConsultationIntake] = None,
    patient: Patient = Depends(require_patient),
    db: Session = Depends(get_db),
):
    intake = intake or ConsultationIntake()
    consultation = consultation_ledger.create_consultation(
        db, patient, doctor_id, intake.model_dump()
    )
    return SubmitConsultationResponse(success=True, consultation_id=consultation.id)
