"""
Identity Store.
Doctor and patient accounts: signup with email/phone uniqueness, signin, lookups.
"""
import logging
from enum import Enum
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from ..core.errors import DuplicateEmail, DuplicatePhone, InvalidCredentials
from ..core.security import get_password_hash, verify_password
from ..models.base import write_lock
from ..models.doctor import Doctor
from ..models.patient import Patient

logger = logging.getLogger(__name__)

Account = Union[Doctor, Patient]


class AccountKind(str, Enum):
    DOCTOR = "doctor"
    PATIENT = "patient"


_MODELS = {
    AccountKind.DOCTOR: Doctor,
    AccountKind.PATIENT: Patient,
}


class IdentityStore:
    """Accounts are never updated or deleted once created."""

    def signup(self, db: Session, kind: AccountKind, **fields) -> Account:
        """
        Create an account of ``kind``.

        ``fields`` carries the model columns plus a plain ``password`` which is
        hashed before insert. Email is checked before phone; either collision
        rejects the signup and nothing is written.
        """
        model = _MODELS[AccountKind(kind)]
        # Hashed outside the writer lock
        hashed_password = get_password_hash(fields.pop("password"))
        with write_lock:
            if self.find_by_email(db, kind, fields.get("email")):
                raise DuplicateEmail()
            if db.query(model).filter(model.phone == fields.get("phone")).first():
                raise DuplicatePhone()

            record = model(hashed_password=hashed_password, **fields)
            db.add(record)
            db.commit()
            db.refresh(record)

        logger.info("New %s signed up: id=%s email=%s", kind.value, record.id, record.email)
        return record

    def signin(self, db: Session, kind: AccountKind, email: str, password: str) -> Account:
        record = self.find_by_email(db, kind, email)
        if not record or not verify_password(password, record.hashed_password):
            raise InvalidCredentials()
        return record

    def find_by_id(self, db: Session, kind: AccountKind, record_id) -> Optional[Account]:
        if record_id is None:
            return None
        model = _MODELS[AccountKind(kind)]
        return db.query(model).filter(model.id == record_id).first()

    def find_by_email(self, db: Session, kind: AccountKind, email: Optional[str]) -> Optional[Account]:
        if not email:
            return None
        model = _MODELS[AccountKind(kind)]
        return db.query(model).filter(model.email == email).first()

    def list_doctors(self, db: Session) -> List[Doctor]:
        return db.query(Doctor).order_by(Doctor.id).all()


identity_store = IdentityStore()
