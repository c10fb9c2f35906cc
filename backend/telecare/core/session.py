"""
Current doctor / current patient for the calling client.

The pointers live in the client's signed session cookie (Starlette
``SessionMiddleware``), so each browser has its own signed-in doctor and
patient. Records are re-read from the Identity Store on every request.
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ..models.base import get_db
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..services.identity_store import AccountKind, identity_store
from .errors import SignInRequired, Unauthenticated

DOCTOR_KEY = "doctor_id"
PATIENT_KEY = "patient_id"

DOCTOR_SIGN_CHECK_URL = "/doctorSignCheck"
PATIENT_SIGN_CHECK_URL = "/patientSignCheck"


def set_current_doctor(request: Request, doctor: Doctor) -> None:
    request.session[DOCTOR_KEY] = doctor.id


def set_current_patient(request: Request, patient: Patient) -> None:
    request.session[PATIENT_KEY] = patient.id


def clear_doctor(request: Request) -> None:
    request.session.pop(DOCTOR_KEY, None)


def clear_patient(request: Request) -> None:
    request.session.pop(PATIENT_KEY, None)


def get_current_doctor(request: Request, db: Session) -> Optional[Doctor]:
    return identity_store.find_by_id(db, AccountKind.DOCTOR, request.session.get(DOCTOR_KEY))


def get_current_patient(request: Request, db: Session) -> Optional[Patient]:
    return identity_store.find_by_id(db, AccountKind.PATIENT, request.session.get(PATIENT_KEY))


# ── FastAPI dependencies ─────────────────────────────────────────────────────

def require_doctor(request: Request, db: Session = Depends(get_db)) -> Doctor:
    """Action endpoints: 401 when no doctor is signed in."""
    doctor = get_current_doctor(request, db)
    if doctor is None:
        raise Unauthenticated()
    return doctor


def require_patient(request: Request, db: Session = Depends(get_db)) -> Patient:
    patient = get_current_patient(request, db)
    if patient is None:
        raise Unauthenticated()
    return patient


def doctor_page(request: Request, db: Session = Depends(get_db)) -> Doctor:
    """Page endpoints: send the browser to the doctor sign-in flow."""
    doctor = get_current_doctor(request, db)
    if doctor is None:
        raise SignInRequired(DOCTOR_SIGN_CHECK_URL)
    return doctor


def patient_page(request: Request, db: Session = Depends(get_db)) -> Patient:
    patient = get_current_patient(request, db)
    if patient is None:
        raise SignInRequired(PATIENT_SIGN_CHECK_URL)
    return patient
