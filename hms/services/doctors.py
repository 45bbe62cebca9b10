import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import NotFound

from hms.exceptions import Conflict
from hms.models import Doctor, DoctorSchedule, User
from hms.services.audit import log_activity
from hms.services.revalidate import revalidate

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {
    'licenseNumber': 'license_number',
    'specialization': 'specialization',
    'qualification': 'qualification',
    'experience': 'experience',
    'consultationFee': 'consultation_fee',
    'availableFrom': 'available_from',
    'availableTo': 'available_to',
    'department': 'department',
    'maxPatientsPerDay': 'max_patients_per_day',
    'phone': 'phone',
    'doctorEmail': 'email',
    'isAvailable': 'is_available',
}


def _split_name(name: str) -> tuple[str, str]:
    first, _, last = name.strip().partition(' ')
    return first, last.strip()


def _replace_schedules(doctor: Doctor, days: list[int]) -> None:
    doctor.schedules.all().delete()
    DoctorSchedule.objects.bulk_create([
        DoctorSchedule(doctor=doctor, day_of_week=day, start_time=doctor.available_from,
                       end_time=doctor.available_to, is_active=True)
        for day in days
    ])


def _check_unique(email: str, license_number: str, *, exclude: Optional[Doctor] = None) -> None:
    users = User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email))
    licences = Doctor.objects.filter(license_number=license_number)
    if exclude is not None:
        users = users.exclude(id=exclude.user_id)
        licences = licences.exclude(id=exclude.id)
    if users.exists():
        raise Conflict('Email already exists')
    if licences.exists():
        raise Conflict('License number already exists')


def create_doctor(actor, data: dict) -> Doctor:
    """Create the login account, the doctor profile and weekly schedules."""
    _check_unique(data['email'], data['licenseNumber'])
    first, last = _split_name(data['name'])
    with transaction.atomic():
        user = User.objects.create_user(
            username=data['email'], email=data['email'], password=data['password'],
            first_name=first, last_name=last, role=User.ROLE_DOCTOR,
        )
        fields = {PROFILE_FIELDS[k]: v for k, v in data.items() if k in PROFILE_FIELDS}
        doctor = Doctor.objects.create(user=user, **fields)
        _replace_schedules(doctor, data.get('workingDays') or [])
        log_activity(user=actor, action='CREATE', module='DOCTOR', record_id=doctor.id,
                     description=f'Created doctor {user.display_name} ({doctor.specialization})')
        revalidate('doctors', 'appointments')
    logger.info('doctor %s created', doctor.id)
    return doctor


def get_doctor_or_404(doctor_id) -> Doctor:
    doctor = Doctor.objects.select_related('user').prefetch_related('schedules').filter(id=doctor_id).first()
    if not doctor:
        raise NotFound('Doctor not found')
    return doctor


def update_doctor(actor, doctor_id, data: dict) -> Doctor:
    doctor = get_doctor_or_404(doctor_id)
    _check_unique(data['email'], data['licenseNumber'], exclude=doctor)
    with transaction.atomic():
        user = doctor.user
        user.first_name, user.last_name = _split_name(data['name'])
        user.email = data['email']
        user.username = data['email']
        if data.get('password'):
            user.set_password(data['password'])
        user.save()
        for key, value in data.items():
            if key in PROFILE_FIELDS:
                setattr(doctor, PROFILE_FIELDS[key], value)
        doctor.save()
        if 'workingDays' in data:
            _replace_schedules(doctor, data['workingDays'])
        log_activity(user=actor, action='UPDATE', module='DOCTOR', record_id=doctor.id,
                     description=f'Updated doctor {user.display_name}')
        revalidate('doctors', 'appointments')
    return get_doctor_or_404(doctor.id)


def list_doctors(*, available_only: bool = False):
    qs = Doctor.objects.select_related('user').prefetch_related('schedules')
    if available_only:
        qs = qs.filter(is_available=True)
    return list(qs.order_by('specialization', 'user__first_name', 'id'))
