"""
Prescription PDF renderer.

Turns a consultation and its prescription into a one-document PDF with a fixed
section order: title, doctor, patient, medical history, prescription, signature.
The layout is first built as a list of text lines so that the content can be
inspected independently of the PDF bytes.
"""
import io
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from ..core.errors import NoPrescription
from ..models.consultation import Consultation

MARGIN = 50
SIGNATURE_LINE = "_" * 60


@dataclass(frozen=True)
class Line:
    style: str
    text: str
    space_before: float = 0


def _style(name, size, color, align=TA_LEFT):
    return ParagraphStyle(
        name,
        fontName="Helvetica",
        fontSize=size,
        leading=size * 1.2,
        textColor=colors.HexColor(color),
        alignment=align,
    )


STYLES: Dict[str, ParagraphStyle] = {
    "title": _style("title", 20, "#333333", TA_CENTER),
    "subtitle": _style("subtitle", 10, "#666666", TA_CENTER),
    "heading": _style("heading", 14, "#000000"),
    "body": _style("body", 11, "#000000"),
    "label": _style("label", 12, "#cc0000"),
    "text": _style("text", 11, "#000000", TA_JUSTIFY),
    "transaction": _style("transaction", 9, "#888888", TA_RIGHT),
    "signature_line": _style("signature_line", 10, "#666666", TA_CENTER),
    "signature_name": _style("signature_name", 9, "#666666", TA_CENTER),
    "signature_caption": _style("signature_caption", 8, "#888888", TA_CENTER),
}


def format_date(value: datetime) -> str:
    """``20 January 2024``"""
    return f"{value.day} {value.strftime('%B %Y')}"


class PrescriptionRenderer:

    def file_name(self, consultation: Consultation) -> str:
        prescription = consultation.prescription
        if prescription is not None and prescription.pdf_file:
            return prescription.pdf_file
        return f"prescription_{consultation.id}.pdf"

    def layout(self, consultation: Consultation) -> List[Line]:
        prescription = consultation.prescription
        if prescription is None:
            raise NoPrescription()

        lines = [
            Line("title", "MEDICAL PRESCRIPTION"),
            Line("subtitle", "This is an official medical prescription", space_before=6),
        ]

        lines += [
            Line("heading", "Doctor Information", space_before=24),
            Line("body", f"Name: {consultation.doctor_name}", space_before=7),
            Line("body", f"Specialty: {consultation.doctor_specialty}"),
            Line("body", f"Date: {format_date(prescription.prescribed_at)}"),
        ]

        lines += [
            Line("heading", "Patient Information", space_before=20),
            Line("body", f"Name: {consultation.patient_name}", space_before=7),
            Line("body", f"Age: {consultation.patient_age} years"),
            Line("body", f"Phone: {consultation.patient_phone}"),
            Line("body", f"Email: {consultation.patient_email}"),
        ]

        lines += [
            Line("heading", "Medical History", space_before=20),
            Line("body", f"Current Illness: {consultation.current_illness or ''}", space_before=7),
        ]
        if consultation.recent_surgery and consultation.recent_surgery != "None":
            lines.append(Line("body", f"Recent Surgery: {consultation.recent_surgery}"))
            if consultation.surgery_timespan:
                lines.append(Line("body", f"Time Since Surgery: {consultation.surgery_timespan}"))
        lines.append(Line("body", f"Diabetes History: {consultation.diabetes_history or 'Not specified'}"))
        if consultation.allergies:
            lines.append(Line("body", f"Allergies: {consultation.allergies}"))

        lines += [
            Line("heading", "PRESCRIPTION", space_before=20),
            Line("label", "Care to be Taken:", space_before=7),
            Line("text", prescription.care_to_be_taken, space_before=4),
        ]
        if prescription.medicines:
            lines += [
                Line("label", "Medicines:", space_before=13),
                Line("text", prescription.medicines, space_before=4),
            ]

        footer_gap = 26
        if consultation.transaction_id:
            lines.append(Line("transaction", f"Transaction ID: {consultation.transaction_id}", space_before=footer_gap))
            footer_gap = 0
        lines += [
            Line("signature_line", SIGNATURE_LINE, space_before=footer_gap + 12),
            Line("signature_name", f"Dr. {consultation.doctor_name}"),
            Line("signature_caption", "Digital Signature"),
        ]
        return lines

    def document_text(self, consultation: Consultation) -> str:
        return "\n".join(line.text for line in self.layout(consultation))

    def render(self, consultation: Consultation) -> bytes:
        """Build the PDF in memory. Equal input gives byte-identical output."""
        lines = self.layout(consultation)

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=LETTER,
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title="Medical Prescription",
            author=f"Dr. {consultation.doctor_name}",
            invariant=1,
        )

        story = []
        for line in lines:
            if line.space_before:
                story.append(Spacer(1, line.space_before))
            text = escape(line.text).replace("\n", "<br/>")
            if line.style == "heading":
                text = f"<u>{text}</u>"
            story.append(Paragraph(text, STYLES[line.style]))

        doc.build(story)
        return buffer.getvalue()


prescription_renderer = PrescriptionRenderer()
