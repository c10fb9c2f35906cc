"""Doctor endpoints: sign-up/sign-in flows, dashboard views, appointment lists, logout."""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..core.session import (
    clear_doctor,
    doctor_page,
    get_current_doctor,
    set_current_doctor,
)
from ..models.base import get_db
from ..models.doctor import Doctor
from ..services.consultation_ledger import consultation_ledger
from ..services.identity_store import AccountKind, identity_store
from .schemas import DoctorConsultationsView, DoctorView, View

router = APIRouter(tags=["doctors"])

DASHBOARD_URL = "/doctorDashboard"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=302)


@router.get("/doctorSignCheck", response_model=View)
def doctor_sign_check(request: Request, db: Session = Depends(get_db)):
    if get_current_doctor(request, db):
        return _redirect(DASHBOARD_URL)
    return {"view": "doctorSignup"}


@router.get("/doctorSignIn", response_model=View)
def doctor_sign_in_page():
    return {"view": "doctorSignin"}


@router.post("/doctorSignUp")
def doctor_sign_up(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    phone: str = Form(...),
    specialty: Optional[str] = Form(None),
    years_of_experience: Optional[float] = Form(None, alias="yearsOfExperience"),
    profile_picture: Optional[str] = Form(None, alias="profilePicture"),
    db: Session = Depends(get_db),
):
    doctor = identity_store.signup(
        db,
        AccountKind.DOCTOR,
        name=name,
        email=email,
        password=password,
        phone=phone,
        specialty=specialty,
        years_of_experience=years_of_experience,
        profile_picture=profile_picture or None,
    )
    set_current_doctor(request, doctor)
    return _redirect(DASHBOARD_URL)


@router.post("/doctorSignIn")
def doctor_sign_in(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    doctor = identity_store.signin(db, AccountKind.DOCTOR, email, password)
    set_current_doctor(request, doctor)
    return _redirect(DASHBOARD_URL)


@router.get("/doctor", response_model=DoctorView)
def doctor_home(request: Request, db: Session = Depends(get_db)):
    return {"view": "doctor", "doctor": get_current_doctor(request, db)}


@router.get("/doctorDashboard", response_model=DoctorView)
def doctor_dashboard(doctor: Doctor = Depends(doctor_page)):
    return {"view": "doctorDashboard", "doctor": doctor}


@router.get("/doctorProfile", response_model=DoctorView)
def doctor_profile(doctor: Doctor = Depends(doctor_page)):
    return {"view": "doctorProfile", "doctor": doctor}


@router.get("/prescriptionPage", response_model=DoctorConsultationsView)
def prescription_page(doctor: Doctor = Depends(doctor_page), db: Session = Depends(get_db)):
    """Consultations assigned to the signed-in doctor, ready for prescribing."""
    return {
        "view": "prescriptionPage",
        "doctor": doctor,
        "consultations": consultation_ledger.list_by_doctor(db, doctor.id),
    }


@router.get("/doctorAppointments", response_model=DoctorConsultationsView)
def doctor_appointments(doctor: Doctor = Depends(doctor_page), db: Session = Depends(get_db)):
    return {
        "view": "doctorAppointments",
        "doctor": doctor,
        "consultations": consultation_ledger.list_by_doctor(db, doctor.id),
    }


@router.get("/doctorLogout")
def doctor_logout(request: Request):
    clear_doctor(request)
    return _redirect("/")
