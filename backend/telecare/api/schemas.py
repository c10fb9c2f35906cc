"""Response schemas shared by the routers. Keys are camelCase on the wire."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class DoctorOut(CamelModel):
    id: int
    name: str
    email: str
    phone: str
    specialty: Optional[str]
    years_of_experience: Optional[float]
    profile_picture: Optional[str]
    created_at: datetime


class PatientOut(CamelModel):
    id: int
    name: str
    email: str
    age: Optional[int]
    phone: str
    profile_picture: Optional[str]
    surgery_history: List[str] = []
    illness_history: List[str] = []
    created_at: datetime


class AttachmentOut(CamelModel):
    filename: str
    original_name: Optional[str]
    uploaded_at: datetime
    notes: str = ""


class PrescriptionOut(CamelModel):
    care_to_be_taken: str
    medicines: str = ""
    prescribed_at: datetime
    prescribed_by: str
    pdf_file: Optional[str]
    sent_to_patient: bool = False
    sent_at: Optional[datetime]
    custom_pdfs: List[AttachmentOut] = Field(default_factory=list, alias="customPDFs")


class ConsultationOut(CamelModel):
    id: int
    patient_id: int
    doctor_id: int
    patient_name: Optional[str]
    patient_email: Optional[str]
    patient_age: Optional[int]
    patient_phone: Optional[str]
    doctor_name: Optional[str]
    doctor_specialty: Optional[str]
    current_illness: Optional[str]
    recent_surgery: Optional[str]
    surgery_timespan: Optional[str]
    diabetes_history: Optional[str]
    allergies: Optional[str]
    others: Optional[str]
    transaction_id: Optional[str]
    submitted_at: datetime
    prescription: Optional[PrescriptionOut]


# ── View contexts ────────────────────────────────────────────────────────────

class View(BaseModel):
    view: str


class DoctorView(View):
    doctor: Optional[DoctorOut] = None


class PatientView(View):
    patient: Optional[PatientOut] = None


class DoctorListView(View):
    doctors: List[DoctorOut]


class DoctorConsultationsView(View):
    doctor: DoctorOut
    consultations: List[ConsultationOut]


class PatientConsultationsView(View):
    patient: PatientOut
    consultations: List[ConsultationOut]
