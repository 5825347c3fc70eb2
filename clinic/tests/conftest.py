import datetime

import pytest
from rest_framework.test import APIClient

from clinic.models import Department, Doctor, Patient, User
from clinic.tokens import issue_token

PASSWORD = 'P@ssw0rd1'


def make_user(username, role, **extra):
    return User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password=PASSWORD,
        role=role,
        name=extra.pop('name', username.title()),
        **extra,
    )


def make_doctor(username='drsmith', name='John Smith', department=None):
    user = make_user(username, 'doctor', name=name)
    return Doctor.objects.create(
        user=user,
        department=department,
        specialization='Cardiology',
        license_number=f'LIC-{username}',
        years_of_experience=10,
    )


def make_patient(username='jdoe', first_name='Jane', last_name='Doe', with_account=True):
    user = make_user(username, 'patient', name=f'{first_name} {last_name}') if with_account else None
    return Patient.objects.create(
        user=user,
        first_name=first_name,
        last_name=last_name,
        date_of_birth=datetime.date(1990, 5, 17),
        gender='female',
        phone='555-0100',
    )


def client_for(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user.id, user.username, user.role)}')
    return client


@pytest.fixture
def admin_account(db):
    return make_user('admin1', 'admin', name='Ada Admin')


@pytest.fixture
def department(db):
    return Department.objects.create(name='Cardiology', floor=2)


@pytest.fixture
def doctor(db, department):
    return make_doctor(department=department)


@pytest.fixture
def patient(db):
    return make_patient()


@pytest.fixture
def admin_client(admin_account):
    return client_for(admin_account)


@pytest.fixture
def doctor_client(doctor):
    return client_for(doctor.user)


@pytest.fixture
def patient_client(patient):
    return client_for(patient.user)
