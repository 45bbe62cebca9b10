from decimal import Decimal

import pytest
from django.urls import reverse

from hms.models import Drug, PatientBilling, PharmacyDispense

pytestmark = pytest.mark.django_db


def drug_payload(**overrides):
    data = {'name': 'Ibuprofen', 'genericName': 'Ibuprofen', 'manufacturer': 'Pain Relief Ltd',
            'dosageForm': 'TABLET', 'strength': '400mg', 'price': '5.00', 'currentStock': 800}
    data.update(overrides)
    return data


@pytest.fixture
def pharmacist(client_for):
    return client_for('pharmacist')


def test_create_update_and_search_drugs(pharmacist, drug):
    r = pharmacist.post(reverse('drugs'), drug_payload(), format='json')
    assert r.status_code == 201
    assert pharmacist.post(reverse('drugs'), drug_payload(), format='json').status_code == 409
    assert pharmacist.post(reverse('drugs'), drug_payload(name='Free', price='0'), format='json').status_code == 400

    r = pharmacist.put(reverse('drug_detail', args=[drug.id]), {'price': '3.00'}, format='json')
    assert r.status_code == 200
    drug.refresh_from_db()
    assert drug.price == Decimal('3.00')
    assert drug.name == 'Paracetamol'

    r = pharmacist.get(reverse('drugs'), {'q': 'acetamin'})
    assert [d['name'] for d in r.data['data']] == ['Paracetamol']
    r = pharmacist.get(reverse('drugs'), {'q': 'tablet'})
    assert [d['name'] for d in r.data['data']] == ['Ibuprofen', 'Paracetamol']


def test_delete_drug_admin_only_and_protected(client_for, pharmacist, drug, make_patient):
    assert pharmacist.delete(reverse('drug_detail', args=[drug.id])).status_code == 403
    admin = client_for('admin')
    pharmacist.post(reverse('dispense'), {'drugId': drug.id, 'patientId': make_patient().id, 'quantity': 1},
                    format='json')
    r = admin.delete(reverse('drug_detail', args=[drug.id]))
    assert r.status_code == 409
    unused = Drug.objects.create(name='Unused', generic_name='Unused', manufacturer='X Pharma', dosage_form='TABLET',
                                 strength='1mg', price=Decimal('1.00'))
    assert admin.delete(reverse('drug_detail', args=[unused.id])).status_code == 204
    assert not Drug.objects.filter(id=unused.id).exists()


def test_stock_update_clamps_at_zero(pharmacist, drug):
    url = reverse('drug_stock', args=[drug.id])
    r = pharmacist.post(url, {'quantity': 50, 'operation': 'add'}, format='json')
    assert r.data['data']['currentStock'] == 150
    r = pharmacist.post(url, {'quantity': 500, 'operation': 'subtract'}, format='json')
    assert r.data['data']['currentStock'] == 0
    assert pharmacist.post(url, {'quantity': 1, 'operation': 'remove'}, format='json').status_code == 400


def test_low_stock_and_statistics(pharmacist, drug):
    Drug.objects.create(name='Rare', generic_name='Rare', manufacturer='X Pharma', dosage_form='TABLET',
                        strength='1mg', price=Decimal('1.00'), current_stock=0, min_stock=5)
    Drug.objects.create(name='Low', generic_name='Low', manufacturer='X Pharma', dosage_form='TABLET',
                        strength='1mg', price=Decimal('1.00'), current_stock=3, min_stock=5)
    r = pharmacist.get(reverse('drugs_low_stock'))
    assert [d['name'] for d in r.data['data']] == ['Rare', 'Low']
    stats = pharmacist.get(reverse('pharmacy_stats')).data['data']
    assert stats == {'totalDrugs': 3, 'lowStockDrugs': 2, 'totalItems': 103, 'outOfStock': 1}


def test_dispense_decrements_stock_and_bills(pharmacist, drug, make_patient):
    patient = make_patient()
    r = pharmacist.post(reverse('dispense'), {'drugId': drug.id, 'patientId': patient.id, 'quantity': 4},
                        format='json')
    assert r.status_code == 201, r.data
    drug.refresh_from_db()
    assert drug.current_stock == 96
    dispense = PharmacyDispense.objects.get()
    assert dispense.total_price == Decimal('10.00')
    assert dispense.dispensed_by == pharmacist.user
    bill = PatientBilling.objects.get()
    assert bill.description == 'Pharmacy - Paracetamol (4x)'
    assert bill.amount == Decimal('10.00')
    assert bill.related_id == str(dispense.id)


def test_dispense_insufficient_stock(pharmacist, drug, make_patient):
    r = pharmacist.post(reverse('dispense'), {'drugId': drug.id, 'patientId': make_patient().id, 'quantity': 101},
                        format='json')
    assert r.status_code == 400
    assert r.data['error']['message'] == 'Insufficient stock. Available: 100'
    assert not PharmacyDispense.objects.exists()
    r = pharmacist.post(reverse('dispense'), {'drugId': 999, 'patientId': make_patient().id, 'quantity': 1},
                        format='json')
    assert r.status_code == 404


def test_nurse_cannot_dispense(client_for, drug, make_patient):
    r = client_for('nurse').post(reverse('dispense'), {'drugId': drug.id, 'patientId': make_patient().id,
                                                       'quantity': 1}, format='json')
    assert r.status_code == 403


def test_dispense_multiple_single_bill(pharmacist, drug, make_patient):
    other = Drug.objects.create(name='Amoxicillin', generic_name='Amoxicillin', manufacturer='Antibiotic Co',
                                dosage_form='CAPSULE', strength='250mg', price=Decimal('8.50'), current_stock=10)
    patient = make_patient()
    r = pharmacist.post(reverse('dispense_multiple'), {'patientId': patient.id, 'items': [
        {'drugId': drug.id, 'quantity': 2}, {'drugId': other.id, 'quantity': 1},
    ]}, format='json')
    assert r.status_code == 201, r.data
    assert PharmacyDispense.objects.count() == 2
    bill = PatientBilling.objects.get()
    assert bill.amount == Decimal('13.50')
    assert bill.description == 'Pharmacy - 2 drug(s) dispensed'
    other.refresh_from_db()
    assert other.current_stock == 9


def test_dispense_multiple_sums_quantities_per_drug(pharmacist, drug, make_patient):
    r = pharmacist.post(reverse('dispense_multiple'), {'patientId': make_patient().id, 'items': [
        {'drugId': drug.id, 'quantity': 60}, {'drugId': drug.id, 'quantity': 60},
    ]}, format='json')
    assert r.status_code == 400
    assert r.data['error']['message'] == 'Insufficient stock for Paracetamol. Available: 100'
    drug.refresh_from_db()
    assert drug.current_stock == 100


def test_dispense_multiple_missing_drug(pharmacist, drug, make_patient):
    r = pharmacist.post(reverse('dispense_multiple'), {'patientId': make_patient().id, 'items': [
        {'drugId': drug.id, 'quantity': 1}, {'drugId': 999, 'quantity': 1},
    ]}, format='json')
    assert r.status_code == 404
    assert r.data['error']['message'] == 'One or more drugs not found'
    assert not PatientBilling.objects.exists()


def test_dispense_history_filters(pharmacist, drug, make_patient):
    a, b = make_patient(), make_patient()
    for p in (a, b, a):
        pharmacist.post(reverse('dispense'), {'drugId': drug.id, 'patientId': p.id, 'quantity': 1}, format='json')
    r = pharmacist.get(reverse('dispense_history'), {'patientId': a.id})
    assert len(r.data['data']) == 2
    ids = [d['id'] for d in pharmacist.get(reverse('dispense_history')).data['data']]
    assert ids == sorted(ids, reverse=True)
