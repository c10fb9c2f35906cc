"""Tests for doctor/patient signup, signin and lookups."""
import threading

import pytest

from telecare.core.errors import DuplicateEmail, DuplicatePhone, InvalidCredentials
from telecare.core.security import get_password_hash
from telecare.models.base import write_lock
from telecare.models.doctor import Doctor
from telecare.models.patient import Patient
from telecare.services.identity_store import AccountKind, IdentityStore


def _doctor_fields(**overrides):
    fields = {
        "name": "Dr. Aayush Mali",
        "email": "aayush@demo.com",
        "password": "secret",
        "phone": "+911111111111",
        "specialty": "Cardiologist",
        "years_of_experience": 12.5,
    }
    fields.update(overrides)
    return fields


def _patient_fields(**overrides):
    fields = {
        "name": "Shreya Jain",
        "email": "shreya@demo.com",
        "password": "secret",
        "phone": "+919988776655",
        "age": 28,
        "surgery_history": ["Appendectomy"],
        "illness_history": [],
    }
    fields.update(overrides)
    return fields


class TestSignup:
    def setup_method(self):
        self.store = IdentityStore()

    def test_ids_are_sequential(self, db):
        first = self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields())
        second = self.store.signup(
            db, AccountKind.DOCTOR, **_doctor_fields(email="b@demo.com", phone="+912222222222")
        )
        assert (first.id, second.id) == (1, 2)

    def test_password_is_hashed(self, db):
        doctor = self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields())
        assert doctor.hashed_password != "secret"
        assert doctor.hashed_password.startswith("$2")

    def test_patient_history_lists_are_kept_in_order(self, db):
        patient = self.store.signup(
            db, AccountKind.PATIENT,
            **_patient_fields(surgery_history=["Knee", "Appendix"], illness_history=["Asthma"]),
        )
        assert patient.surgery_history == ["Knee", "Appendix"]
        assert patient.illness_history == ["Asthma"]

    def test_duplicate_email_rejected(self, db):
        self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields())
        with pytest.raises(DuplicateEmail):
            self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields(phone="+913333333333"))
        assert db.query(Doctor).count() == 1

    def test_duplicate_phone_rejected(self, db):
        self.store.signup(db, AccountKind.PATIENT, **_patient_fields())
        with pytest.raises(DuplicatePhone):
            self.store.signup(db, AccountKind.PATIENT, **_patient_fields(email="other@demo.com"))
        assert db.query(Patient).count() == 1

    def test_email_checked_before_phone(self, db):
        self.store.signup(db, AccountKind.PATIENT, **_patient_fields())
        with pytest.raises(DuplicateEmail):
            self.store.signup(db, AccountKind.PATIENT, **_patient_fields())

    def test_doctor_and_patient_lists_are_independent(self, db):
        """The same email may be used once as a doctor and once as a patient."""
        self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields(email="same@demo.com"))
        patient = self.store.signup(db, AccountKind.PATIENT, **_patient_fields(email="same@demo.com"))
        assert patient.id == 1

    def test_no_two_records_share_email_or_phone(self, db):
        attempts = [
            ("a@x.com", "1"), ("b@x.com", "2"), ("a@x.com", "3"),
            ("c@x.com", "2"), ("d@x.com", "4"), ("d@x.com", "4"),
        ]
        for email, phone in attempts:
            try:
                self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields(email=email, phone=phone))
            except (DuplicateEmail, DuplicatePhone):
                pass
        doctors = db.query(Doctor).all()
        assert len({d.email for d in doctors}) == len(doctors) == 3
        assert len({d.phone for d in doctors}) == len(doctors)


class TestSignin:
    def setup_method(self):
        self.store = IdentityStore()

    def test_signin_with_correct_password(self, db):
        created = self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields())
        found = self.store.signin(db, AccountKind.DOCTOR, "aayush@demo.com", "secret")
        assert found.id == created.id

    def test_wrong_password(self, db):
        self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields())
        with pytest.raises(InvalidCredentials):
            self.store.signin(db, AccountKind.DOCTOR, "aayush@demo.com", "nope")

    def test_unknown_email(self, db):
        with pytest.raises(InvalidCredentials):
            self.store.signin(db, AccountKind.PATIENT, "ghost@demo.com", "secret")

    def test_doctor_cannot_sign_in_as_patient(self, db):
        self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields())
        with pytest.raises(InvalidCredentials):
            self.store.signin(db, AccountKind.PATIENT, "aayush@demo.com", "secret")


class TestLookups:
    def setup_method(self):
        self.store = IdentityStore()

    def test_find_by_id_and_email(self, db):
        patient = self.store.signup(db, AccountKind.PATIENT, **_patient_fields())
        assert self.store.find_by_id(db, AccountKind.PATIENT, patient.id).email == "shreya@demo.com"
        assert self.store.find_by_email(db, AccountKind.PATIENT, "shreya@demo.com").id == patient.id

    def test_missing_lookups_return_none(self, db):
        assert self.store.find_by_id(db, AccountKind.DOCTOR, 42) is None
        assert self.store.find_by_id(db, AccountKind.DOCTOR, None) is None
        assert self.store.find_by_email(db, AccountKind.DOCTOR, "") is None

    def test_list_doctors_in_id_order(self, db):
        for i in range(3):
            self.store.signup(db, AccountKind.DOCTOR, **_doctor_fields(email=f"d{i}@x.com", phone=str(i)))
        assert [d.email for d in self.store.list_doctors(db)] == ["d0@x.com", "d1@x.com", "d2@x.com"]


def _lock_free_for_other_threads():
    result = []

    def try_lock():
        acquired = write_lock.acquire(blocking=False)
        if acquired:
            write_lock.release()
        result.append(acquired)

    worker = threading.Thread(target=try_lock)
    worker.start()
    worker.join()
    return result[0]


class TestWriteLock:
    def test_password_hashed_outside_write_lock(self, db, monkeypatch):
        lock_free = []

        def recording_hash(password):
            lock_free.append(_lock_free_for_other_threads())
            return get_password_hash(password)

        monkeypatch.setattr("telecare.services.identity_store.get_password_hash", recording_hash)
        IdentityStore().signup(db, AccountKind.DOCTOR, **_doctor_fields())
        assert lock_free == [True]
