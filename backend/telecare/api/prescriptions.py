"""Prescription endpoints: write, render, send, upload and download prescription PDFs."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import NotFound, NoPrescription, ValidationError
from ..core.session import require_doctor
from ..models.base import get_db
from ..models.doctor import Doctor
from ..services.consultation_ledger import consultation_ledger
from ..services.pdf_storage import pdf_storage
from ..services.prescription_renderer import prescription_renderer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["prescriptions"])

PDF_MEDIA_TYPE = "application/pdf"


class PrescriptionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    care_to_be_taken: Optional[str] = None
    medicines: Optional[str] = None


class PrescriptionResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    pdf_file: str


class MessageResponse(BaseModel):
    success: bool
    message: str
    filename: Optional[str] = None


@router.post("/submitPrescription/{consultation_id}", response_model=PrescriptionResponse)
def submit_prescription(
    consultation_id: int,
    req: PrescriptionRequest,
    doctor: Doctor = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    prescription = consultation_ledger.attach_prescription(
        db, consultation_id, doctor, req.care_to_be_taken, req.medicines
    )
    return PrescriptionResponse(success=True, pdf_file=prescription.pdf_file)


@router.get("/generatePrescriptionPDF/{consultation_id}")
def generate_prescription_pdf(
    consultation_id: int,
    _doctor: Doctor = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    """
    Render the prescription PDF, save it to the prescriptions directory and
    return it as a download. The ledger is not touched, so a failed write can
    simply be retried.
    """
    try:
        consultation = consultation_ledger.get(db, consultation_id)
    except NotFound:
        raise NoPrescription() from None
    pdf_bytes = prescription_renderer.render(consultation)
    file_name = prescription_renderer.file_name(consultation)
    pdf_storage.save(file_name, pdf_bytes)

    return Response(
        content=pdf_bytes,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.post("/sendPrescriptionToPatient/{consultation_id}", response_model=MessageResponse,
             response_model_exclude_none=True)
def send_prescription_to_patient(
    consultation_id: int,
    doctor: Doctor = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    consultation = consultation_ledger.mark_sent(db, consultation_id, doctor.id)
    return MessageResponse(
        success=True,
        message=f"Prescription sent to {consultation.patient_name} at {consultation.patient_email}",
    )


@router.post("/uploadPrescriptionPDF/{consultation_id}", response_model=MessageResponse)
def upload_prescription_pdf(
    consultation_id: int,
    pdf_file: Optional[UploadFile] = File(None, alias="pdfFile"),
    notes: Optional[str] = Form(None),
    doctor: Doctor = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    """
    Attach a doctor-supplied PDF. The file is validated before the ledger is
    consulted and written to disk before it is recorded; a file the ledger
    refuses is removed again.
    """
    if pdf_file is None or not pdf_file.filename:
        raise ValidationError("No file uploaded")
    if pdf_file.content_type != PDF_MEDIA_TYPE:
        raise ValidationError("Only PDF files are allowed!")

    data = pdf_file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError("File too large")

    consultation_ledger.ensure_owner(db, consultation_id, doctor.id)
    stored = pdf_storage.save_upload(data, pdf_file.filename)
    try:
        attachment = consultation_ledger.attach_uploaded_pdf(db, consultation_id, doctor, stored, notes)
    except Exception:
        pdf_storage.delete(stored["filename"])
        raise

    return MessageResponse(
        success=True,
        message="PDF uploaded successfully",
        filename=attachment.filename,
    )


@router.get("/downloadPDF/{filename}")
def download_pdf(filename: str):
    path = pdf_storage.resolve(filename)
    if path is None:
        raise NotFound("File not found")
    return FileResponse(path, media_type=PDF_MEDIA_TYPE, filename=filename)
