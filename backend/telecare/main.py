"""
Telecare - telemedicine demo API.
Doctors and patients sign up, patients request consultations, doctors issue prescriptions as PDFs.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from .api import consultations, doctors, patients, prescriptions
from .core.audit_middleware import AuditMiddleware
from .core.config import settings
from .core.errors import SignInRequired, TelecareError
from .models import consultation, doctor, patient  # noqa: F401 - register tables
from .models.base import Base, engine
from .seed_demo import seed_demo_data

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    # Seed doctors/patients from the environment and the demo consultation (idempotent)
    seed_demo_data()
    logger.info("%s %s started", settings.APP_NAME, settings.VERSION)
    yield


app = FastAPI(
    title="Telecare API",
    description="Telemedicine demo: consultations and PDF prescriptions.",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Added innermost first: the audit log reads the session set up around it.
app.add_middleware(AuditMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    https_only=settings.SESSION_HTTPS_ONLY,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TelecareError)
async def telecare_error_handler(request: Request, exc: TelecareError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(SignInRequired)
async def sign_in_required_handler(request: Request, exc: SignInRequired):
    return RedirectResponse(exc.redirect_url, status_code=302)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "body"
        message = f"Invalid {field}: {first.get('msg', 'invalid value')}"
    return JSONResponse(status_code=400, content={"error": message})


app.include_router(doctors.router)
app.include_router(patients.router)
app.include_router(consultations.router)
app.include_router(prescriptions.router)


@app.get("/")
def index():
    return RedirectResponse("/patientSignCheck", status_code=302)


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": settings.APP_NAME, "version": settings.VERSION}
