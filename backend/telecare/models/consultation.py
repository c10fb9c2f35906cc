from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, utcnow


class Consultation(Base):
    __tablename__ = "consultations"

    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)

    # Snapshot taken at submission time, not kept in sync with the identity records
    patient_name = Column(String(200))
    patient_email = Column(String(255))
    patient_age = Column(Integer, nullable=True)
    patient_phone = Column(String(50))
    doctor_name = Column(String(200))
    doctor_specialty = Column(String(200), nullable=True)

    # Intake form
    current_illness = Column(Text, nullable=True)
    recent_surgery = Column(Text, nullable=True)
    surgery_timespan = Column(String(200), nullable=True)
    diabetes_history = Column(String(200), nullable=True)
    allergies = Column(Text, nullable=True)
    others = Column(Text, nullable=True)
    transaction_id = Column(String(100), nullable=True)
    submitted_at = Column(DateTime, default=utcnow, nullable=False)

    prescription = relationship(
        "Prescription",
        back_populates="consultation",
        uselist=False,
        cascade="all, delete-orphan",
    )


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True)
    consultation_id = Column(Integer, ForeignKey("consultations.id"), unique=True, nullable=False)
    care_to_be_taken = Column(Text, nullable=False)
    medicines = Column(Text, nullable=False, default="")
    prescribed_at = Column(DateTime, default=utcnow, nullable=False)
    prescribed_by = Column(String(200), nullable=False)
    pdf_file = Column(String(255), nullable=True)  # None for placeholders created by an upload
    sent_to_patient = Column(Boolean, default=False, nullable=False)
    sent_at = Column(DateTime, nullable=True)

    consultation = relationship("Consultation", back_populates="prescription")
    custom_pdfs = relationship(
        "PrescriptionAttachment",
        back_populates="prescription",
        order_by="PrescriptionAttachment.id",
        cascade="all, delete-orphan",
    )


class PrescriptionAttachment(Base):
    """A doctor-uploaded PDF stored alongside a prescription."""
    __tablename__ = "prescription_attachments"

    id = Column(Integer, primary_key=True)
    prescription_id = Column(Integer, ForeignKey("prescriptions.id"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=True)
    uploaded_at = Column(DateTime, default=utcnow, nullable=False)
    notes = Column(Text, nullable=False, default="")
    file_hash = Column(String(64), nullable=True)

    prescription = relationship("Prescription", back_populates="custom_pdfs")
