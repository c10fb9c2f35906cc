from sqlalchemy import Column, Integer, String, Float
from .base import Base, TimestampMixin


class Doctor(Base, TimestampMixin):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(50), unique=True, nullable=False, index=True)
    specialty = Column(String(200), nullable=True)
    years_of_experience = Column(Float, nullable=True)
    profile_picture = Column(String(500), nullable=True)
