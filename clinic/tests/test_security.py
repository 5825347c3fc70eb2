from datetime import timedelta

import pytest
from django.urls import reverse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.test import APIClient, APIRequestFactory

from clinic.models import Patient, User
from clinic.permissions import ROUTE_ROLES, allowed_roles, require_role
from clinic.routers import urlpatterns
from clinic.tokens import issue_token, verify_token

from .conftest import PASSWORD, client_for, make_user

pytestmark = pytest.mark.django_db


def test_request_without_token_gets_401_and_view_does_not_run():
    client = APIClient()
    r = client.post(reverse('patient-list'), {
        'firstName': 'Eve', 'lastName': 'Intruder', 'dateOfBirth': '1990-01-01',
        'gender': 'female', 'phone': '555',
    }, format='json')
    assert r.status_code == 401
    assert r.json() == {'message': 'No token provided'}
    assert Patient.objects.count() == 0


def test_bearer_keyword_without_token_counts_as_missing():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer')
    r = client.get(reverse('auth-me'))
    assert r.status_code == 401
    assert r.json()['message'] == 'No token provided'


def test_tampered_token_gets_401(admin_account):
    client = APIClient()
    token = issue_token(admin_account.id, admin_account.username, admin_account.role)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}x')
    r = client.get(reverse('bill-list'))
    assert r.status_code == 401
    assert r.json() == {'message': 'Invalid or expired token'}


def test_expired_token_gets_401(admin_account):
    client = APIClient()
    token = issue_token(admin_account.id, admin_account.username, admin_account.role,
                        lifetime=timedelta(seconds=-1))
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    r = client.get(reverse('bill-list'))
    assert r.status_code == 401


def test_doctor_cannot_read_bills(doctor_client):
    r = doctor_client.get(reverse('bill-list'))
    assert r.status_code == 403
    assert r.json() == {'message': 'Insufficient permissions'}


def test_admin_can_read_bills(admin_client):
    r = admin_client.get(reverse('bill-list'))
    assert r.status_code == 200
    assert r.json() == []


def test_patient_cannot_list_patients(patient_client):
    r = patient_client.get(reverse('patient-list'))
    assert r.status_code == 403


def test_roles_differ_per_method_on_same_route(doctor_client):
    assert doctor_client.get(reverse('department-list')).status_code == 200
    r = doctor_client.post(reverse('department-list'), {'name': 'Neurology'}, format='json')
    assert r.status_code == 403


def test_only_admin_may_delete_patients(doctor_client, admin_client, patient):
    url = reverse('patient-detail', args=[patient.id])
    assert doctor_client.delete(url).status_code == 403
    assert admin_client.delete(url).status_code == 204
    assert not Patient.objects.filter(pk=patient.id).exists()


def test_route_table_treats_head_as_get():
    assert allowed_roles('bill-list', 'HEAD') == ROUTE_ROLES['bill-list']['GET']
    assert allowed_roles('unknown-route', 'GET') is None


def test_require_role_rejects_doctor_and_admits_admin():
    @api_view(['GET'])
    @permission_classes([IsAuthenticated, require_role('admin')])
    def admin_only(request):
        return Response({'ok': True})

    factory = APIRequestFactory()
    doctor = make_user('doc', 'doctor')
    admin = make_user('boss', 'admin')

    denied = admin_only(factory.get('/admin-only', HTTP_AUTHORIZATION=f'Bearer {issue_token(doctor.id, doctor.username, "doctor")}'))
    assert denied.status_code == 403
    assert denied.data == {'message': 'Insufficient permissions'}

    allowed = admin_only(factory.get('/admin-only', HTTP_AUTHORIZATION=f'Bearer {issue_token(admin.id, admin.username, "admin")}'))
    assert allowed.status_code == 200


def test_register_always_creates_patient():
    client = APIClient()
    r = client.post(reverse('auth-register'), {
        'username': 'mallory',
        'password': 'secret123',
        'name': 'Mallory Q Public',
        'email': 'mallory@example.com',
        'role': 'admin',
    }, format='json')
    assert r.status_code == 201
    body = r.json()
    assert body['user']['role'] == 'patient'
    assert 'password' not in body['user']
    assert verify_token(body['token']).role == 'patient'

    user = User.objects.get(username='mallory')
    assert user.role == 'patient'
    patient = Patient.objects.get(user=user)
    assert (patient.first_name, patient.last_name) == ('Mallory', 'Q Public')
    assert patient.gender == 'other'


def test_register_single_word_name_repeats_it_as_last_name():
    client = APIClient()
    r = client.post(reverse('auth-register'), {
        'username': 'cher', 'password': 'secret123', 'name': 'Cher', 'email': 'cher@example.com',
    }, format='json')
    assert r.status_code == 201
    patient = Patient.objects.get(user__username='cher')
    assert patient.first_name == patient.last_name == 'Cher'


def test_register_rejects_duplicate_username():
    make_user('taken', 'patient')
    r = APIClient().post(reverse('auth-register'), {
        'username': 'taken', 'password': 'secret123', 'name': 'Someone', 'email': 'new@example.com',
    }, format='json')
    assert r.status_code == 400
    assert r.json() == {'message': 'Username already exists'}


def test_register_reports_first_invalid_field():
    r = APIClient().post(reverse('auth-register'), {
        'username': 'nomail', 'password': 'secret123', 'name': 'No Mail',
    }, format='json')
    assert r.status_code == 400
    assert r.json()['message'].startswith('email:')


def test_login_with_wrong_password_is_401():
    make_user('u1', 'patient')
    r = APIClient().post(reverse('auth-login'), {'username': 'u1', 'password': 'nope'}, format='json')
    assert r.status_code == 401
    assert r.json() == {'message': 'Invalid credentials'}


def test_login_ignores_role_in_body_and_returns_token():
    make_user('u2', 'doctor')
    r = APIClient().post(reverse('auth-login'), {'username': 'u2', 'password': PASSWORD, 'role': 'admin'},
                         format='json')
    assert r.status_code == 200
    body = r.json()
    assert body['user']['role'] == 'doctor'
    assert verify_token(body['token']).role == 'doctor'


def test_me_returns_current_user_without_password(doctor):
    r = client_for(doctor.user).get(reverse('auth-me'))
    assert r.status_code == 200
    body = r.json()
    assert body['username'] == doctor.user.username
    assert body['id'] == str(doctor.user.id)
    assert 'password' not in body


def test_me_for_deleted_user_is_404():
    user = make_user('ghost', 'patient')
    client = client_for(user)
    user.delete()
    r = client.get(reverse('auth-me'))
    assert r.status_code == 404
    assert r.json() == {'message': 'User not found'}


def test_every_protected_route_declares_roles_for_each_method():
    for pattern in urlpatterns:
        view_class = getattr(pattern.callback, 'cls', None)
        if view_class is None:
            # plain Django view such as the health check
            continue
        if AllowAny in view_class.permission_classes:
            continue
        methods = {m.upper() for m in view_class.http_method_names} - {'OPTIONS'}
        assert pattern.name in ROUTE_ROLES, pattern.name
        assert set(ROUTE_ROLES[pattern.name]) == methods, pattern.name


def test_route_missing_from_role_table_is_refused(admin_account):
    @api_view(['GET'])
    def unlisted(request):
        return Response({'ok': True})

    factory = APIRequestFactory()
    token = issue_token(admin_account.id, admin_account.username, admin_account.role)
    r = unlisted(factory.get('/unlisted', HTTP_AUTHORIZATION=f'Bearer {token}'))
    assert r.status_code == 403
    assert r.data == {'message': 'Insufficient permissions'}
