from decimal import Decimal

import pytest
from django.urls import reverse

from hms.models import Admission, Bed, PatientBilling, Ward

pytestmark = pytest.mark.django_db


def test_list_wards_with_occupancy(client_for, ward, bed):
    Bed.objects.create(ward=ward, bed_number='G02', bed_type='GENERAL', is_occupied=True)
    Bed.objects.create(ward=ward, bed_number='G03', bed_type='GENERAL', is_active=False)
    Ward.objects.create(name='Closed Ward', ward_type='GENERAL', is_active=False)
    r = client_for('nurse').get(reverse('wards'))
    assert r.status_code == 200
    [w] = r.data['data']
    assert [b['bedNumber'] for b in w['beds']] == ['G01', 'G02']
    assert w['occupiedBeds'] == 1
    assert w['availableBeds'] == 1


def test_ward_create_and_update_admin_only(client_for, admin_client, ward):
    data = {'name': 'ICU', 'wardType': 'ICU', 'totalBeds': 10}
    assert client_for('nurse').post(reverse('wards'), data, format='json').status_code == 403
    r = admin_client.post(reverse('wards'), data, format='json')
    assert r.status_code == 201
    assert admin_client.post(reverse('wards'), data, format='json').status_code == 409

    r = admin_client.put(reverse('ward_detail', args=[ward.id]), {'totalBeds': 30}, format='json')
    assert r.status_code == 200
    ward.refresh_from_db()
    assert ward.total_beds == 30
    assert ward.name == 'General Ward'
    assert client_for('doctor').put(reverse('ward_detail', args=[ward.id]), {'totalBeds': 1},
                                    format='json').status_code == 403


def test_create_bed_defaults_price(client_for, ward, settings):
    settings.DEFAULT_BED_PRICE_PER_DAY = '750.00'
    client = client_for('nurse')
    r = client.post(reverse('beds'), {'wardId': ward.id, 'bedNumber': 'G09', 'bedType': 'GENERAL'}, format='json')
    assert r.status_code == 201
    assert Bed.objects.get(bed_number='G09').price_per_day == Decimal('750.00')


def test_duplicate_bed_number(admin_client, bed):
    r = admin_client.post(reverse('beds'), {'wardId': bed.ward_id, 'bedNumber': 'G01', 'bedType': 'GENERAL'},
                          format='json')
    assert r.status_code == 409
    assert r.data['error']['message'] == 'Bed number already exists in this ward'


def test_doctor_cannot_create_bed_but_can_update_status(client_for, bed):
    client = client_for('doctor')
    r = client.post(reverse('beds'), {'wardId': bed.ward_id, 'bedNumber': 'G05', 'bedType': 'GENERAL'},
                    format='json')
    assert r.status_code == 403
    r = client.post(reverse('bed_status', args=[bed.id]), {'isOccupied': True}, format='json')
    assert r.status_code == 200
    bed.refresh_from_db()
    assert bed.is_occupied is True


def test_admission_bills_and_occupies_bed(client_for, make_patient, bed):
    patient = make_patient()
    r = client_for('nurse').post(reverse('admissions'), {
        'patientId': patient.id, 'bedId': bed.id, 'reason': 'Observation', 'expectedDays': 3,
    }, format='json')
    assert r.status_code == 201, r.data
    admission = Admission.objects.get()
    assert admission.total_bed_charges == Decimal('1500.00')
    assert admission.expected_discharge_date is not None
    bed.refresh_from_db()
    assert bed.is_occupied
    bill = PatientBilling.objects.get()
    assert bill.charge_type == 'ADMISSION'
    assert bill.description == 'Ward Admission - General Ward (Bed G01) - 3 day(s)'
    assert bill.related_id == str(admission.id)


def test_admission_without_expected_days_is_not_billed(admin_client, make_patient, bed):
    r = admin_client.post(reverse('admissions'), {'patientId': make_patient().id, 'bedId': bed.id,
                                                  'reason': 'Observation'}, format='json')
    assert r.status_code == 201
    assert Admission.objects.get().total_bed_charges == 0
    assert not PatientBilling.objects.exists()


def test_occupied_bed_is_not_available(admin_client, make_patient, bed):
    bed.is_occupied = True
    bed.save()
    r = admin_client.post(reverse('admissions'), {'patientId': make_patient().id, 'bedId': bed.id,
                                                  'reason': 'Observation'}, format='json')
    assert r.status_code == 400
    assert r.data['error']['message'] == 'Bed is not available'
    r = admin_client.post(reverse('admissions'), {'patientId': make_patient().id, 'bedId': 999,
                                                  'reason': 'Observation'}, format='json')
    assert r.status_code == 400


def test_discharge_frees_bed(client_for, make_patient, bed):
    admin = client_for('admin')
    admission_id = admin.post(reverse('admissions'), {'patientId': make_patient().id, 'bedId': bed.id,
                                                      'reason': 'Observation'}, format='json').data['data']['id']
    url = reverse('admission_discharge', args=[admission_id])
    assert client_for('nurse').post(url).status_code == 403
    r = client_for('doctor').post(url)
    assert r.status_code == 200
    assert r.data['data']['status'] == 'DISCHARGED'
    bed.refresh_from_db()
    assert bed.is_occupied is False
    assert client_for('doctor').post(url).status_code == 400
    assert client_for('doctor').post(reverse('admission_discharge', args=[999])).status_code == 404


def test_list_beds_shows_current_admission(client_for, make_patient, ward, bed):
    patient = make_patient()
    client = client_for('nurse')
    client.post(reverse('admissions'), {'patientId': patient.id, 'bedId': bed.id, 'reason': 'Observation'},
                format='json')
    Bed.objects.create(ward=ward, bed_number='G02', bed_type='GENERAL')
    r = client.get(reverse('beds'), {'wardId': ward.id})
    first, second = r.data['data']
    assert first['currentAdmission']['patient']['mrn'] == patient.mrn
    assert second['currentAdmission'] is None


def test_list_admissions_by_status(admin_client, make_patient, bed):
    admin_client.post(reverse('admissions'), {'patientId': make_patient().id, 'bedId': bed.id,
                                              'reason': 'Observation'}, format='json')
    assert len(admin_client.get(reverse('admissions'), {'status': 'ADMITTED'}).data['data']) == 1
    assert admin_client.get(reverse('admissions'), {'status': 'DISCHARGED'}).data['data'] == []
