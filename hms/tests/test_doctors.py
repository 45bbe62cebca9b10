import pytest
from django.urls import reverse

from hms.models import Doctor, DoctorSchedule, User

pytestmark = pytest.mark.django_db


def payload(**overrides):
    data = {
        'name': 'Gregory House',
        'email': 'house@hospital.com',
        'password': 'secret1',
        'licenseNumber': 'LIC12345',
        'specialization': 'Diagnostics',
        'qualification': 'MD',
        'experience': 15,
        'consultationFee': '750.00',
        'availableFrom': '09:00',
        'availableTo': '13:00',
        'department': 'Medicine',
        'maxPatientsPerDay': 12,
        'workingDays': [1, 3, 5],
    }
    data.update(overrides)
    return data


def test_admin_creates_doctor_with_user_and_schedules(admin_client):
    r = admin_client.post(reverse('doctors'), payload(), format='json')
    assert r.status_code == 201, r.data
    doctor = Doctor.objects.get(license_number='LIC12345')
    assert doctor.user.role == User.ROLE_DOCTOR
    assert doctor.user.check_password('secret1')
    assert doctor.user.first_name == 'Gregory'
    assert sorted(doctor.schedules.values_list('day_of_week', flat=True)) == [1, 3, 5]
    assert [s['startTime'] for s in r.data['data']['schedules']] == ['09:00'] * 3


def test_only_admin_creates_doctors(client_for):
    r = client_for('doctor').post(reverse('doctors'), payload(), format='json')
    assert r.status_code == 403


def test_duplicate_email_and_license(admin_client, doctor):
    r = admin_client.post(reverse('doctors'), payload(email='dr.smith@hospital.com'), format='json')
    assert r.status_code == 409
    assert r.data['error']['message'] == 'Email already exists'
    r = admin_client.post(reverse('doctors'), payload(licenseNumber='MD001'), format='json')
    assert r.status_code == 409
    assert not User.objects.filter(email='house@hospital.com').exists()


@pytest.mark.parametrize('overrides', [
    {'availableFrom': '14:00', 'availableTo': '10:00'},
    {'workingDays': [7]},
    {'password': '123'},
    {'licenseNumber': 'AB1'},
    {'maxPatientsPerDay': 0},
    {'consultationFee': '-1'},
])
def test_invalid_doctor_payload(admin_client, overrides):
    r = admin_client.post(reverse('doctors'), payload(**overrides), format='json')
    assert r.status_code == 400


def test_password_required_on_create(admin_client):
    data = payload()
    del data['password']
    r = admin_client.post(reverse('doctors'), data, format='json')
    assert r.status_code == 400


def test_update_keeps_password_and_replaces_schedules(admin_client, doctor):
    data = payload(email='dr.smith@hospital.com', licenseNumber='MD001', workingDays=[0, 6])
    del data['password']
    r = admin_client.put(reverse('doctor_detail', args=[doctor.id]), data, format='json')
    assert r.status_code == 200, r.data
    doctor.refresh_from_db()
    assert doctor.user.check_password('P@ssw0rd1')
    assert doctor.specialization == 'Diagnostics'
    assert list(DoctorSchedule.objects.filter(doctor=doctor).values_list('day_of_week', flat=True)) == [0, 6]


def test_update_without_working_days_keeps_schedules(admin_client, doctor):
    data = payload(email='dr.smith@hospital.com', licenseNumber='MD001', password='newpass1')
    del data['workingDays']
    r = admin_client.put(reverse('doctor_detail', args=[doctor.id]), data, format='json')
    assert r.status_code == 200
    assert doctor.schedules.count() == 5
    doctor.user.refresh_from_db()
    assert doctor.user.check_password('newpass1')


def test_update_missing_doctor(admin_client):
    r = admin_client.put(reverse('doctor_detail', args=[404]), payload(), format='json')
    assert r.status_code == 404


def test_list_and_available_filter(client_for, doctor):
    other = User.objects.create_user(username='x@h.com', email='x@h.com', role='doctor', first_name='Ann')
    Doctor.objects.create(user=other, license_number='MD002', specialization='Cardiology', qualification='MD',
                          available_from='08:00', available_to='12:00', department='Heart', is_available=False)
    client = client_for('receptionist')
    r = client.get(reverse('doctors'))
    assert [d['specialization'] for d in r.data['data']] == ['Cardiology', 'General Medicine']
    r = client.get(reverse('doctors'), {'available': '1'})
    assert [d['id'] for d in r.data['data']] == [doctor.id]
    assert len(r.data['data'][0]['schedules']) == 5


def test_doctor_detail(client_for, doctor):
    r = client_for('nurse').get(reverse('doctor_detail', args=[doctor.id]))
    assert r.status_code == 200
    assert r.data['data']['name'] == 'John Smith'
    assert client_for('nurse').get(reverse('doctor_detail', args=[999])).status_code == 404


def test_email_taken_as_username_conflicts(admin_client, make_user):
    make_user('nurse', username='house@hospital.com', email='nurse.house@hospital.com')
    r = admin_client.post(reverse('doctors'), payload(), format='json')
    assert r.status_code == 409
    assert r.data['error']['message'] == 'Email already exists'
