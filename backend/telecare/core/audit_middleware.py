"""
Audit logging middleware.
Logs every request to the clinical endpoints (consultations, prescriptions, PDFs).
"""
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .session import DOCTOR_KEY, PATIENT_KEY

logger = logging.getLogger(__name__)

# Paths that expose consultation or prescription data
CLINICAL_PATH_PREFIXES = (
    "/submitConsultation",
    "/prescriptionPage",
    "/doctorAppointments",
    "/patientAppointments",
    "/submitPrescription",
    "/generatePrescriptionPDF",
    "/sendPrescriptionToPatient",
    "/uploadPrescriptionPDF",
    "/downloadPDF",
)

ACTION_MAP = {
    "GET": "view",
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}


class AuditMiddleware(BaseHTTPMiddleware):
    """Must sit inside SessionMiddleware so the session is readable."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        path = request.url.path
        if not any(path.startswith(prefix) for prefix in CLINICAL_PATH_PREFIXES):
            return response

        parts = [p for p in path.split("/") if p]
        resource_type = parts[0] if parts else "unknown"
        resource_id = parts[1] if len(parts) > 1 else "-"

        session = request.scope.get("session") or {}
        ip_address = request.client.host if request.client else None

        logger.info(
            "audit action=%s resource=%s id=%s status=%s doctor=%s patient=%s ip=%s",
            ACTION_MAP.get(request.method, request.method.lower()),
            resource_type,
            resource_id,
            response.status_code,
            session.get(DOCTOR_KEY, "-"),
            session.get(PATIENT_KEY, "-"),
            ip_address,
        )
        return response
