"""
Consultation Ledger.
Consultations submitted by patients, the prescription a doctor attaches to each,
and the PDFs doctors upload against them.
"""
import logging
import time
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.errors import Forbidden, NoPrescription, NotFound, ValidationError
from ..models.base import utcnow, write_lock
from ..models.consultation import Consultation, Prescription, PrescriptionAttachment
from ..models.doctor import Doctor
from ..models.patient import Patient

logger = logging.getLogger(__name__)

INTAKE_FIELDS = (
    "current_illness",
    "recent_surgery",
    "surgery_timespan",
    "diabetes_history",
    "allergies",
    "others",
    "transaction_id",
)

PLACEHOLDER_CARE = "Please refer to the attached prescription."


def prescription_file_name(consultation_id: int) -> str:
    return f"prescription_{consultation_id}_{int(time.time() * 1000)}.pdf"


class ConsultationLedger:

    def create_consultation(
        self,
        db: Session,
        patient: Patient,
        doctor_id: int,
        intake: Optional[Dict] = None,
    ) -> Consultation:
        """Append a consultation with a frozen snapshot of patient and doctor."""
        intake = intake or {}
        with write_lock:
            doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
            if not doctor:
                raise NotFound("Doctor not found")

            consultation = Consultation(
                patient_id=patient.id,
                doctor_id=doctor.id,
                patient_name=patient.name,
                patient_email=patient.email,
                patient_age=patient.age,
                patient_phone=patient.phone,
                doctor_name=doctor.name,
                doctor_specialty=doctor.specialty,
                submitted_at=utcnow(),
                **{k: intake.get(k) for k in INTAKE_FIELDS},
            )
            db.add(consultation)
            db.commit()
            db.refresh(consultation)

        logger.info("Consultation saved from %s to %s (id=%s)", patient.name, doctor.name, consultation.id)
        return consultation

    def get(self, db: Session, consultation_id: int) -> Consultation:
        consultation = db.query(Consultation).filter(Consultation.id == consultation_id).first()
        if not consultation:
            raise NotFound("Consultation not found")
        return consultation

    def list_by_doctor(self, db: Session, doctor_id: int) -> List[Consultation]:
        return (
            db.query(Consultation)
            .filter(Consultation.doctor_id == doctor_id)
            .order_by(Consultation.id)
            .all()
        )

    def list_by_patient(self, db: Session, patient_id: int) -> List[Consultation]:
        return (
            db.query(Consultation)
            .filter(Consultation.patient_id == patient_id)
            .order_by(Consultation.id)
            .all()
        )

    def ensure_owner(self, db: Session, consultation_id: int, doctor_id: int) -> Consultation:
        """Return the consultation if ``doctor_id`` owns it."""
        consultation = self.get(db, consultation_id)
        if consultation.doctor_id != doctor_id:
            raise Forbidden()
        return consultation

    def attach_prescription(
        self,
        db: Session,
        consultation_id: int,
        doctor: Doctor,
        care_to_be_taken: Optional[str],
        medicines: Optional[str] = None,
    ) -> Prescription:
        """
        Create or replace the consultation's prescription.

        Only the file name is reserved here; the PDF itself is produced on
        demand by the renderer. Uploaded attachments survive a replacement.
        """
        with write_lock:
            consultation = self.ensure_owner(db, consultation_id, doctor.id)
            if not care_to_be_taken or not care_to_be_taken.strip():
                raise ValidationError("Care to be taken is required")

            prescription = consultation.prescription
            if prescription is None:
                prescription = Prescription(consultation=consultation)
                db.add(prescription)

            prescription.care_to_be_taken = care_to_be_taken
            prescription.medicines = medicines or ""
            prescription.prescribed_at = utcnow()
            prescription.prescribed_by = doctor.name
            prescription.pdf_file = prescription_file_name(consultation.id)
            prescription.sent_to_patient = False
            prescription.sent_at = None
            db.commit()
            db.refresh(prescription)

        logger.info("Prescription %s attached to consultation %s by %s",
                    prescription.pdf_file, consultation_id, doctor.name)
        return prescription

    def mark_sent(self, db: Session, consultation_id: int, doctor_id: int) -> Consultation:
        """Flag the prescription as sent; calling again refreshes ``sent_at``."""
        with write_lock:
            consultation = self.ensure_owner(db, consultation_id, doctor_id)
            if consultation.prescription is None:
                raise NoPrescription()
            consultation.prescription.sent_to_patient = True
            consultation.prescription.sent_at = utcnow()
            db.commit()
            db.refresh(consultation)
        return consultation

    def attach_uploaded_pdf(
        self,
        db: Session,
        consultation_id: int,
        doctor: Doctor,
        file_meta: Dict,
        notes: Optional[str] = None,
    ) -> PrescriptionAttachment:
        """
        Append an uploaded PDF to the consultation's prescription.

        ``file_meta`` holds ``filename``, ``original_name`` and optionally
        ``file_hash``. A placeholder prescription is created first when the
        doctor has not written one yet.
        """
        with write_lock:
            consultation = self.ensure_owner(db, consultation_id, doctor.id)
            prescription = consultation.prescription
            if prescription is None:
                prescription = Prescription(
                    consultation=consultation,
                    care_to_be_taken=notes or PLACEHOLDER_CARE,
                    medicines="",
                    prescribed_at=utcnow(),
                    prescribed_by=doctor.name,
                )
                db.add(prescription)

            attachment = PrescriptionAttachment(
                filename=file_meta["filename"],
                original_name=file_meta.get("original_name"),
                file_hash=file_meta.get("file_hash"),
                uploaded_at=utcnow(),
                notes=notes or "",
            )
            prescription.custom_pdfs.append(attachment)
            db.commit()
            db.refresh(attachment)

        logger.info("Uploaded PDF %s attached to consultation %s", attachment.filename, consultation_id)
        return attachment


consultation_ledger = ConsultationLedger()
