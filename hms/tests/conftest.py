import datetime
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from hms.models import Bed, Doctor, DoctorSchedule, Drug, Patient, User, Ward


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttling counters and the dashboard payload live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(role='admin', username=None, password='P@ssw0rd1', **extra):
        username = username or f'{role}_{User.objects.count() + 1}'
        return User.objects.create_user(username=username, password=password, role=role, **extra)
    return _make


@pytest.fixture
def client_for(make_user):
    """APIClient authenticated as a fresh user with the given role."""
    def _client(role='admin', **extra):
        client = APIClient()
        user = make_user(role, **extra)
        client.force_authenticate(user=user)
        client.user = user
        return client
    return _client


@pytest.fixture
def admin_client(client_for):
    return client_for('admin')


@pytest.fixture
def make_patient(db):
    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        n = counter['n']
        data = {
            'mrn': f'MRN{n:03d}',
            'first_name': 'John',
            'last_name': f'Doe{n}',
            'date_of_birth': datetime.date(1990, 5, 15),
            'gender': 'MALE',
            'phone_number': f'+12345678{n:02d}',
            'email': f'john{n}@example.com',
            'address': '123 Main St, City',
            'emergency_contact': 'Jane Doe',
            'emergency_phone': '+1234567899',
        }
        data.update(overrides)
        return Patient.objects.create(**data)
    return _make


@pytest.fixture
def doctor(make_user):
    user = make_user('doctor', username='dr.smith@hospital.com', first_name='John', last_name='Smith',
                     email='dr.smith@hospital.com')
    doc = Doctor.objects.create(
        user=user, license_number='MD001', specialization='General Medicine', qualification='MBBS, MD',
        experience=10, consultation_fee=Decimal('500.00'), available_from=datetime.time(9, 0),
        available_to=datetime.time(17, 0), department='General Medicine',
    )
    # Monday to Friday, Sunday = 0
    for day in range(1, 6):
        DoctorSchedule.objects.create(doctor=doc, day_of_week=day, start_time=datetime.time(9, 0),
                                      end_time=datetime.time(17, 0))
    return doc


@pytest.fixture
def next_monday():
    today = timezone.localdate()
    return today + datetime.timedelta(days=7 - today.weekday())


@pytest.fixture
def ward(db):
    return Ward.objects.create(name='General Ward', ward_type='GENERAL', total_beds=2)


@pytest.fixture
def bed(ward):
    return Bed.objects.create(ward=ward, bed_number='G01', bed_type='GENERAL', price_per_day=Decimal('500.00'))


@pytest.fixture
def drug(db):
    return Drug.objects.create(name='Paracetamol', generic_name='Acetaminophen', manufacturer='Generic Pharma',
                               dosage_form='TABLET', strength='500mg', price=Decimal('2.50'), current_stock=100)
