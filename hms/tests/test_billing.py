from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone

from hms.models import PatientBilling

pytestmark = pytest.mark.django_db


@pytest.fixture
def bills(make_patient):
    alice, bob = make_patient(first_name='Alice'), make_patient(first_name='Bob')
    return [
        PatientBilling.objects.create(patient=alice, description='Consultation - Dr. John Smith',
                                      charge_type=PatientBilling.CHARGE_APPOINTMENT, amount=Decimal('500.00')),
        PatientBilling.objects.create(patient=alice, description='Pharmacy - Paracetamol (4x)',
                                      charge_type=PatientBilling.CHARGE_PHARMACY, amount=Decimal('10.00'),
                                      is_paid=True, paid_at=timezone.now()),
        PatientBilling.objects.create(patient=bob, description='Ward Admission - ICU (Bed I01) - 2 day(s)',
                                      charge_type=PatientBilling.CHARGE_ADMISSION, amount=Decimal('4000.00')),
    ]


def test_list_filters(client_for, bills):
    client = client_for('accountant')
    r = client.get(reverse('billing'))
    assert r.status_code == 200
    assert len(r.data['data']) == 3
    assert r.data['data'][0]['id'] == bills[2].id

    r = client.get(reverse('billing'), {'isPaid': 'false'})
    assert {b['id'] for b in r.data['data']} == {bills[0].id, bills[2].id}
    r = client.get(reverse('billing'), {'isPaid': 'true'})
    assert [b['id'] for b in r.data['data']] == [bills[1].id]

    r = client.get(reverse('billing'), {'patientId': bills[0].patient_id, 'chargeType': 'PHARMACY'})
    assert [b['description'] for b in r.data['data']] == ['Pharmacy - Paracetamol (4x)']
    assert r.data['data'][0]['patient']['firstName'] == 'Alice'

    assert client.get(reverse('billing'), {'chargeType': 'LAB'}).status_code == 400


def test_billing_closed_to_other_roles(client_for, bills):
    assert client_for('receptionist').get(reverse('billing')).status_code == 403
    assert client_for('pharmacist').get(reverse('billing_stats')).status_code == 403


def test_summary_per_patient(client_for, bills):
    r = client_for('nurse').get(reverse('billing_summary'))
    assert r.status_code == 200
    by_name = {e['patient']['firstName']: e for e in r.data['data']}
    alice = by_name['Alice']
    assert alice['totalCharges'] == Decimal('510.00')
    assert alice['paidAmount'] == Decimal('10.00')
    assert alice['dueAmount'] == Decimal('500.00')
    assert alice['unpaidCount'] == 1
    assert len(alice['records']) == 2
    assert 'patient' not in alice['records'][0]
    assert by_name['Bob']['dueAmount'] == Decimal('4000.00')


def test_mark_paid_only_touches_unpaid(client_for, bills):
    already_paid_at = bills[1].paid_at
    r = client_for('nurse').post(reverse('billing_mark_paid'), {'ids': [b.id for b in bills]}, format='json')
    assert r.status_code == 200
    assert r.data == {'ok': True, 'updated': 2}
    assert PatientBilling.objects.filter(is_paid=False).count() == 0
    bills[1].refresh_from_db()
    assert bills[1].paid_at == already_paid_at
    bills[0].refresh_from_db()
    assert bills[0].paid_at is not None


def test_mark_paid_roles_and_validation(client_for, bills):
    accountant = client_for('accountant')
    assert accountant.post(reverse('billing_mark_paid'), {'ids': [bills[0].id]}, format='json').status_code == 403
    admin = client_for('admin')
    assert admin.post(reverse('billing_mark_paid'), {'ids': []}, format='json').status_code == 400
    r = admin.post(reverse('billing_mark_paid'), {'ids': [999]}, format='json')
    assert r.data['updated'] == 0


def test_statistics(client_for, bills):
    stats = client_for('accountant').get(reverse('billing_stats')).data['data']
    assert stats['totalRevenue'] == Decimal('10.00')
    assert stats['totalOutstanding'] == Decimal('4500.00')
    assert stats['todayRevenue'] == Decimal('10.00')
    assert stats['pendingCount'] == 2
