import logging
import re

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import NotFound

from hms.exceptions import Conflict
from hms.models import Patient
from hms.services.audit import log_activity
from hms.services.revalidate import revalidate

logger = logging.getLogger(__name__)

DUPLICATE_PATIENT = 'Patient with this phone number or email already exists'
DUPLICATE_OTHER_PATIENT = 'Another patient with this phone number or email already exists'
SEARCH_LIMIT = 50

FIELD_MAP = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'dateOfBirth': 'date_of_birth',
    'gender': 'gender',
    'phoneNumber': 'phone_number',
    'email': 'email',
    'address': 'address',
    'emergencyContact': 'emergency_contact',
    'emergencyPhone': 'emergency_phone',
    'bloodGroup': 'blood_group',
    'allergies': 'allergies',
}


def next_mrn() -> str:
    """Return the MRN following the most recently created patient's."""
    prefix = settings.MRN_PREFIX
    digits = settings.MRN_MIN_DIGITS
    last = Patient.objects.order_by('-id').values_list('mrn', flat=True).first()
    number = 0
    if last:
        m = re.search(r'(\d+)$', last)
        if m:
            number = int(m.group(1))
    candidate = number + 1
    # a manually assigned MRN may already hold the next number
    while Patient.objects.filter(mrn=f'{prefix}{candidate:0{digits}d}').exists():
        candidate += 1
    return f'{prefix}{candidate:0{digits}d}'


def _ensure_unique_contact(phone: str, email, exclude_id=None, message=DUPLICATE_PATIENT):
    cond = Q(phone_number=phone)
    if email:
        cond |= Q(email__iexact=email)
    qs = Patient.objects.filter(cond, is_active=True)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        raise Conflict(message)


def create_patient(user, data: dict) -> Patient:
    _ensure_unique_contact(data['phoneNumber'], data.get('email'))
    with transaction.atomic():
        fields = {FIELD_MAP[k]: v for k, v in data.items() if k in FIELD_MAP}
        patient = Patient.objects.create(mrn=next_mrn(), **fields)
        log_activity(user=user, action='CREATE', module='PATIENT', record_id=patient.id,
                     description=f'Registered patient {patient.full_name} ({patient.mrn})')
        revalidate('patients', 'dashboard')
    logger.info('patient %s created by %s', patient.mrn, getattr(user, 'username', None))
    return patient


def get_patient_or_404(patient_id) -> Patient:
    patient = Patient.objects.filter(id=patient_id).first()
    if not patient:
        raise NotFound('Patient not found')
    return patient


def update_patient(user, patient_id, data: dict) -> Patient:
    patient = get_patient_or_404(patient_id)
    _ensure_unique_contact(data['phoneNumber'], data.get('email'), exclude_id=patient.id,
                           message=DUPLICATE_OTHER_PATIENT)
    with transaction.atomic():
        for key, value in data.items():
            if key in FIELD_MAP:
                setattr(patient, FIELD_MAP[key], value)
        patient.save()
        log_activity(user=user, action='UPDATE', module='PATIENT', record_id=patient.id,
                     description=f'Updated patient {patient.full_name} ({patient.mrn})')
        revalidate('patients', 'dashboard')
    return patient


def search_patients(query: str, search_type: str = 'name'):
    query = query.strip()
    qs = Patient.objects.filter(is_active=True)
    if search_type == 'mrn':
        qs = qs.filter(mrn__icontains=query)
    elif search_type == 'phone':
        qs = qs.filter(phone_number__icontains=query)
    elif search_type == 'email':
        qs = qs.filter(email__icontains=query)
    else:
        qs = qs.filter(Q(first_name__icontains=query) | Q(last_name__icontains=query))
    return list(qs.order_by('-created_at', '-id')[:SEARCH_LIMIT])


def list_patients(page: int | None = None, page_size: int | None = None):
    qs = Patient.objects.filter(is_active=True).order_by('-created_at', '-id')
    total = qs.count()
    if page and page_size:
        start = (page - 1) * page_size
        qs = qs[start:start + page_size]
    return list(qs), total


def patient_detail(patient_id):
    """Patient with recent appointments, admissions and billing records."""
    patient = get_patient_or_404(patient_id)
    appointments = list(
        patient.appointments.select_related('doctor__user').order_by('-appointment_date', '-appointment_time')[:10]
    )
    admissions = list(patient.admissions.select_related('bed__ward').order_by('-admission_date')[:5])
    billing = list(patient.billing_records.order_by('-created_at', '-id')[:5])
    return patient, appointments, admissions, billing
