"""
Demo data seeder for Telecare.

Doctors and patients come from the ``DOCTORS_JSON`` / ``PATIENTS_JSON``
settings (JSON arrays of account objects with plain-text passwords, which are
hashed on the way in). Any "id" in a record is ignored: accounts are numbered in
list order like regular signups. When doctor 1 and patient 1 exist and the ledger is
empty, one demo consultation is added so the prescription flow can be walked
through immediately.

This seeder is idempotent and runs on every startup.
"""
import json
import logging
from datetime import datetime
from typing import List

from .core.config import settings
from .core.security import get_password_hash
from .models.base import Base, SessionLocal, engine
from .models.consultation import Consultation
from .models.doctor import Doctor
from .models.patient import Patient

logger = logging.getLogger(__name__)

DEMO_CONSULTATION = {
    "current_illness": "I have chest pain and difficulty breathing for the past 2 days",
    "recent_surgery": "None",
    "surgery_timespan": "",
    "diabetes_history": "non-diabetic",
    "allergies": "Penicillin allergy",
    "others": "Family history of high blood pressure",
    "transaction_id": "TXN1234567890",
    "submitted_at": datetime(2024, 1, 20),
}

DOCTOR_FIELDS = ("name", "email", "phone", "specialty", "years_of_experience", "profile_picture")
PATIENT_FIELDS = ("name", "email", "phone", "age", "profile_picture", "surgery_history", "illness_history")

CAMEL_KEYS = {
    "yearsOfExperience": "years_of_experience",
    "profilePicture": "profile_picture",
    "surgeryHistory": "surgery_history",
    "illnessHistory": "illness_history",
    "createdAt": "created_at",
}


def load_seed_records(raw: str, label: str) -> List[dict]:
    """Parse a JSON array of records; anything else yields an empty list."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning("Invalid %s. Using empty %s list.", label, label.split("_")[0].lower())
        return []
    if not isinstance(parsed, list):
        logger.warning("%s is not a JSON array. Ignoring it.", label)
        return []
    return [_normalise_keys(r) for r in parsed if isinstance(r, dict)]


def seed_demo_data() -> None:
    """Create seeded accounts and the demo consultation if they do not already exist."""
    # Ensure tables exist (no-op when already created by main.py)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        _seed_accounts(db, Doctor, load_seed_records(settings.DOCTORS_JSON, "DOCTORS_JSON"), DOCTOR_FIELDS)
        _seed_accounts(db, Patient, load_seed_records(settings.PATIENTS_JSON, "PATIENTS_JSON"), PATIENT_FIELDS)
        if settings.SEED_DEMO_CONSULTATION:
            _seed_consultation(db)
    finally:
        db.close()


# ── helpers ──────────────────────────────────────────────────────────────────

def _normalise_keys(record: dict) -> dict:
    return {CAMEL_KEYS.get(k, k): v for k, v in record.items()}


def _parse_created_at(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _seed_accounts(db, model, records: List[dict], fields) -> None:
    for record in records:
        if not record.get("email") or not record.get("password"):
            logger.warning("Skipping seed %s without email or password", model.__tablename__)
            continue
        if db.query(model).filter(model.email == record["email"]).first():
            continue
        if db.query(model).filter(model.phone == record.get("phone")).first():
            logger.warning("Skipping seed %s %s: phone already in use", model.__tablename__, record["email"])
            continue

        account = model(
            hashed_password=get_password_hash(str(record["password"])),
            **{f: record[f] for f in fields if f in record},
        )
        created_at = _parse_created_at(record.get("created_at"))
        if created_at:
            account.created_at = created_at
        db.add(account)
        db.commit()
        logger.info("[seed] Created %s: %s", model.__tablename__[:-1], account.email)


def _seed_consultation(db) -> None:
    if db.query(Consultation).first():
        return
    doctor = db.query(Doctor).filter(Doctor.id == 1).first()
    patient = db.query(Patient).filter(Patient.id == 1).first()
    if not doctor or not patient:
        return

    consultation = Consultation(
        patient_id=patient.id,
        doctor_id=doctor.id,
        patient_name=patient.name,
        patient_email=patient.email,
        patient_age=patient.age,
        patient_phone=patient.phone,
        doctor_name=doctor.name,
        doctor_specialty=doctor.specialty,
        **DEMO_CONSULTATION,
    )
    db.add(consultation)
    db.commit()
    logger.info("[seed] Created demo consultation: %s -> %s", patient.name, doctor.name)
