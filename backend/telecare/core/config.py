from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    APP_NAME: str = "Telecare"
    VERSION: str = "1.0.0"
    SECRET_KEY: str = "change-me-in-production-use-strong-random-key"

    # Per-client session cookie
    SESSION_COOKIE: str = "telecare_session"
    SESSION_MAX_AGE: int = 14 * 24 * 60 * 60
    SESSION_HTTPS_ONLY: bool = False

    DATABASE_URL: str = "sqlite:///./telecare.db"

    # Storage settings
    PRESCRIPTIONS_DIR: str = "public/prescriptions"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    CORS_ORIGIN: str = ""

    # Seed data, JSON arrays of doctor / patient objects
    DOCTORS_JSON: Optional[str] = None
    PATIENTS_JSON: Optional[str] = None
    SEED_DEMO_CONSULTATION: bool = True

    BCRYPT_ROUNDS: int = 12
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGIN.split(",") if o.strip()]


settings = Settings()
