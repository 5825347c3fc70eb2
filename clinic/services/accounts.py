"""
Account creation and login.

Public registration always produces a patient: the account role is fixed
here and a matching patient record is created in the same transaction.
Doctor accounts are created by administrators through
:func:`create_doctor`.
"""
from __future__ import annotations

from datetime import date

import structlog
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from clinic.exceptions import InvalidCredentials
from clinic.models import Doctor, Patient, User
from clinic.tokens import hash_password, issue_token, verify_password

logger = structlog.get_logger(__name__)

DEFAULT_PATIENT_AGE_YEARS = 30


def split_name(name: str) -> tuple[str, str]:
    """Split a display name into first and last name.

    A single word is used for both, so the patient record never has an
    empty last name.
    """
    parts = name.split()
    first = parts[0]
    last = ' '.join(parts[1:]) or first
    return first, last


def _default_birth_date() -> date:
    today = timezone.localdate()
    try:
        return today.replace(year=today.year - DEFAULT_PATIENT_AGE_YEARS)
    except ValueError:
        # 29 February
        return today.replace(year=today.year - DEFAULT_PATIENT_AGE_YEARS, day=28)


def _ensure_account_free(username: str, email: str) -> None:
    if User.objects.filter(username=username).exists():
        raise ValidationError({'detail': 'Username already exists'})
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError({'detail': 'Email already exists'})


def _create_user(*, username, password, role, name, email, phone=None) -> User:
    user = User(username=username, role=role, name=name, email=email, phone=phone or None)
    user.password = hash_password(password)
    user.save()
    return user


def token_for(user: User) -> str:
    return issue_token(user.id, user.username, user.role)


@transaction.atomic
def register_patient(data: dict) -> tuple[User, str]:
    _ensure_account_free(data['username'], data['email'])
    user = _create_user(
        username=data['username'],
        password=data['password'],
        role=User.Role.PATIENT,
        name=data['name'],
        email=data['email'],
        phone=data.get('phone'),
    )
    first_name, last_name = split_name(data['name'])
    Patient.objects.create(
        user=user,
        first_name=first_name,
        last_name=last_name,
        date_of_birth=data.get('date_of_birth') or _default_birth_date(),
        gender=data.get('gender') or Patient.Gender.OTHER,
        phone=data.get('phone') or '',
        email=data['email'],
        address=data.get('address'),
        blood_group=data.get('blood_group'),
        emergency_contact_name=data.get('emergency_contact_name'),
        emergency_contact_phone=data.get('emergency_contact_phone'),
    )
    logger.info('patient_registered', user_id=str(user.id), username=user.username)
    return user, token_for(user)


def login(username: str, password: str) -> tuple[User, str]:
    user = User.objects.filter(username=username).first()
    if user is None or not verify_password(password, user.password):
        logger.warning('login_failed', username=username)
        raise InvalidCredentials()
    logger.info('login_succeeded', user_id=str(user.id), role=user.role)
    return user, token_for(user)


def current_user(user_id) -> User:
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound('User not found')
    return user


@transaction.atomic
def create_doctor(data: dict) -> Doctor:
    _ensure_account_free(data['username'], data['email'])
    user = _create_user(
        username=data['username'],
        password=data['password'],
        role=User.Role.DOCTOR,
        name=data['name'],
        email=data['email'],
        phone=data.get('phone'),
    )
    doctor = Doctor.objects.create(
        user=user,
        department=data.get('department'),
        specialization=data['specialization'],
        license_number=data['license_number'],
        years_of_experience=data.get('years_of_experience'),
    )
    logger.info('doctor_created', doctor_id=str(doctor.id), username=user.username)
    return doctor
