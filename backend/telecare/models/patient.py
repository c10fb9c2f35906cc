from sqlalchemy import Column, Integer, String, JSON
from .base import Base, TimestampMixin


class Patient(Base, TimestampMixin):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    age = Column(Integer, nullable=True)
    phone = Column(String(50), unique=True, nullable=False, index=True)
    profile_picture = Column(String(500), nullable=True)
    surgery_history = Column(JSON, nullable=False, default=list)  # ordered free-text entries
    illness_history = Column(JSON, nullable=False, default=list)
