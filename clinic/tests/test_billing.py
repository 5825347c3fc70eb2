import datetime
from decimal import Decimal

import pytest
from django.contrib import admin
from django.urls import reverse
from rest_framework.exceptions import NotFound

from clinic.exceptions import BillCancelled, PaymentExceedsBalance
from clinic.models import Bill, PatientEvent, Payment, User
from clinic.services import billing, events

pytestmark = pytest.mark.django_db


@pytest.fixture
def bill(patient):
    return Bill.objects.create(patient=patient, total_amount=Decimal('1000.00'))


def pay(client, bill_id, amount):
    return client.post(reverse('payment-list'), {
        'billId': str(bill_id), 'amount': amount, 'paymentMethod': 'card',
    }, format='json')


def test_payment_over_remaining_balance_is_rejected(bill):
    billing.create_payment(bill.id, Decimal('600.00'), 'cash')

    with pytest.raises(PaymentExceedsBalance):
        billing.create_payment(bill.id, Decimal('500.00'), 'cash')

    assert Payment.objects.filter(bill=bill).count() == 1
    assert billing.paid_total(bill.id) == Decimal('600.00')


def test_payments_never_exceed_bill_total(bill):
    for amount in ('250.00', '300.00', '500.00', '449.99', '0.01', '0.01'):
        try:
            billing.create_payment(bill.id, Decimal(amount), 'cash')
        except PaymentExceedsBalance:
            pass
        assert billing.paid_total(bill.id) <= bill.total_amount

    assert billing.paid_total(bill.id) == Decimal('1000.00')
    assert Bill.objects.get(pk=bill.id).status == Bill.Status.PAID


def test_payment_on_cancelled_bill_is_rejected(bill):
    billing.cancel_bill(bill.id)
    with pytest.raises(BillCancelled):
        billing.create_payment(bill.id, Decimal('10.00'), 'cash')
    assert not Payment.objects.exists()


def test_payment_for_unknown_bill_is_not_found():
    with pytest.raises(NotFound):
        billing.create_payment('00000000-0000-0000-0000-000000000000', Decimal('10.00'), 'cash')


def test_payment_records_timeline_event(bill, admin_account):
    payment = billing.create_payment(bill.id, Decimal('125.50'), 'insurance', actor=admin_account)
    event = PatientEvent.objects.get(event_type=events.PAYMENT_RECEIVED)
    assert event.patient_id == bill.patient_id
    assert event.related_id == str(payment.id)
    assert event.actor == admin_account


def test_api_rejects_overpayment_with_message(admin_client, bill):
    first = pay(admin_client, bill.id, '600.00')
    assert first.status_code == 201
    assert first.json()['billId'] == str(bill.id)

    second = pay(admin_client, bill.id, '500.00')
    assert second.status_code == 400
    assert second.json() == {'message': 'Payment amount exceeds bill total'}
    assert Payment.objects.count() == 1


def test_api_paying_exact_balance_marks_bill_paid(admin_client, bill):
    assert pay(admin_client, bill.id, '400.00').status_code == 201
    assert pay(admin_client, bill.id, '600.00').status_code == 201

    listed = admin_client.get(reverse('bill-list')).json()
    assert listed[0]['status'] == 'paid'
    assert listed[0]['balance'] == '0.00'


def test_api_rejects_payment_on_cancelled_bill(admin_client, bill):
    cancelled = admin_client.post(reverse('bill-cancel', args=[bill.id]))
    assert cancelled.status_code == 200
    assert cancelled.json()['status'] == 'cancelled'

    r = pay(admin_client, bill.id, '10.00')
    assert r.status_code == 400
    assert r.json() == {'message': 'Bill is cancelled'}


def test_api_unknown_bill_is_404(admin_client):
    r = pay(admin_client, '00000000-0000-0000-0000-000000000000', '10.00')
    assert r.status_code == 404
    assert r.json() == {'message': 'Bill not found'}


@pytest.mark.parametrize('amount', ['0', '-5.00'])
def test_api_rejects_non_positive_amount(admin_client, bill, amount):
    r = pay(admin_client, bill.id, amount)
    assert r.status_code == 400
    assert r.json()['message'].startswith('amount:')
    assert not Payment.objects.exists()


def test_bill_listing_derives_paid_amount_and_status(admin_client, bill):
    billing.create_payment(bill.id, Decimal('600.00'), 'cash')

    r = admin_client.get(reverse('bill-list'))
    assert r.status_code == 200
    row = r.json()[0]
    assert row['paidAmount'] == '600.00'
    assert row['balance'] == '400.00'
    assert row['status'] == 'pending'
    assert row['patientName'] == 'Jane Doe'


def test_unpaid_bill_past_due_is_overdue(patient):
    bill = Bill.objects.create(
        patient=patient,
        total_amount=Decimal('80.00'),
        due_date=datetime.date.today() - datetime.timedelta(days=3),
    )
    assert bill.status == Bill.Status.OVERDUE


def test_client_cannot_set_derived_fields(admin_client, patient):
    r = admin_client.post(reverse('bill-list'), {
        'patientId': str(patient.id), 'totalAmount': '300.00', 'paidAmount': '300.00', 'status': 'paid',
    }, format='json')
    assert r.status_code == 201
    body = r.json()
    assert body['paidAmount'] == '0.00'
    assert body['status'] == 'pending'
    assert PatientEvent.objects.filter(event_type=events.BILL_GENERATED).count() == 1


def test_payments_listing_requires_bill_id(admin_client, bill):
    billing.create_payment(bill.id, Decimal('20.00'), 'cash')
    assert admin_client.get(reverse('payment-list')).status_code == 400

    r = admin_client.get(reverse('payment-list'), {'billId': str(bill.id)})
    assert r.status_code == 200
    assert [p['amount'] for p in r.json()] == ['20.00']


def test_admin_cannot_edit_total_of_existing_bill(bill, rf):
    billing.create_payment(bill.id, Decimal('900.00'), 'cash')
    superuser = User.objects.create_superuser('root', 'root@example.com', 'P@ssw0rd1', name='Root')
    request = rf.get('/admin/')
    request.user = superuser
    bill_admin = admin.site._registry[Bill]

    change_form = bill_admin.get_form(request, obj=bill)
    assert 'total_amount' not in change_form.base_fields
    assert 'total_amount' in bill_admin.get_form(request).base_fields

    form = change_form(data={'patient': str(bill.patient_id), 'total_amount': '100.00',
                             'bill_date_0': '2026-01-01', 'bill_date_1': '00:00:00'}, instance=bill)
    assert form.is_valid(), form.errors
    form.save()
    bill.refresh_from_db()
    assert bill.total_amount == Decimal('1000.00')
    assert billing.paid_total(bill.id) <= bill.total_amount


def test_admin_cannot_add_change_or_delete_payments(bill, rf):
    payment = billing.create_payment(bill.id, Decimal('10.00'), 'cash')
    superuser = User.objects.create_superuser('root', 'root@example.com', 'P@ssw0rd1', name='Root')
    request = rf.get('/admin/')
    request.user = superuser
    payment_admin = admin.site._registry[Payment]

    assert not payment_admin.has_add_permission(request)
    assert not payment_admin.has_change_permission(request, payment)
    assert not payment_admin.has_delete_permission(request, payment)
