"""Patient endpoints: sign-up/sign-in flows, doctor directory, consultation form, appointments."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..core.errors import NotFound
from ..core.session import (
    clear_patient,
    get_current_patient,
    patient_page,
    set_current_patient,
)
from ..models.base import get_db
from ..models.patient import Patient
from ..services.consultation_ledger import consultation_ledger
from ..services.identity_store import AccountKind, identity_store
from .schemas import DoctorListView, DoctorView, PatientConsultationsView, PatientView, View

router = APIRouter(tags=["patients"])

DASHBOARD_URL = "/patientDashboard"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=302)


def split_history(value: Optional[str]) -> List[str]:
    """``"Appendix, , Knee"`` -> ``["Appendix", "Knee"]``"""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@router.get("/patientSignCheck", response_model=View)
def patient_sign_check(request: Request, db: Session = Depends(get_db)):
    if get_current_patient(request, db):
        return _redirect(DASHBOARD_URL)
    return {"view": "patientSignup"}


@router.get("/patientSignIn", response_model=View)
def patient_sign_in_page():
    return {"view": "patientSignin"}


@router.post("/patientSignUp")
def patient_sign_up(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    phone: str = Form(...),
    age: Optional[int] = Form(None),
    surgery_history: Optional[str] = Form(None, alias="surgeryHistory"),
    illness_history: Optional[str] = Form(None, alias="illnessHistory"),
    profile_picture: Optional[str] = Form(None, alias="profilePicture"),
    db: Session = Depends(get_db),
):
    patient = identity_store.signup(
        db,
        AccountKind.PATIENT,
        name=name,
        email=email,
        password=password,
        phone=phone,
        age=age,
        surgery_history=split_history(surgery_history),
        illness_history=split_history(illness_history),
        profile_picture=profile_picture or None,
    )
    set_current_patient(request, patient)
    return _redirect(DASHBOARD_URL)


@router.post("/patientSignIn")
def patient_sign_in(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    patient = identity_store.signin(db, AccountKind.PATIENT, email, password)
    set_current_patient(request, patient)
    return _redirect(DASHBOARD_URL)


@router.get("/patient", response_model=PatientView)
def patient_home(request: Request, db: Session = Depends(get_db)):
    return {"view": "patient", "patient": get_current_patient(request, db)}


@router.get("/patientDashboard", response_model=PatientView)
def patient_dashboard(patient: Patient = Depends(patient_page)):
    return {"view": "patientDashboard", "patient": patient}


@router.get("/findDoctors", response_model=DoctorListView)
def find_doctors(_patient: Patient = Depends(patient_page), db: Session = Depends(get_db)):
    return {"view": "doctorsList", "doctors": identity_store.list_doctors(db)}


@router.get("/consultation/{doctor_id}", response_model=DoctorView)
def consultation_form(
    doctor_id: int,
    _patient: Patient = Depends(patient_page),
    db: Session = Depends(get_db),
):
    """Intake form context for one doctor."""
    doctor = identity_store.find_by_id(db, AccountKind.DOCTOR, doctor_id)
    if not doctor:
        raise NotFound("Doctor not found")
    return {"view": "consultationForm", "doctor": doctor}


@router.get("/patientAppointments", response_model=PatientConsultationsView)
def patient_appointments(patient: Patient = Depends(patient_page), db: Session = Depends(get_db)):
    return {
        "view": "patientAppointments",
        "patient": patient,
        "consultations": consultation_ledger.list_by_patient(db, patient.id),
    }


@router.get("/patientLogout")
def patient_logout(request: Request):
    clear_patient(request)
    return _redirect("/")
