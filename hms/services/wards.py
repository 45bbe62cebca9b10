import datetime
import logging
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from hms.exceptions import Conflict
from hms.models import Admission, Bed, Doctor, Patient, PatientBilling, Ward
from hms.services.audit import log_activity
from hms.services.revalidate import revalidate

logger = logging.getLogger(__name__)

WARD_FIELDS = {'name': 'name', 'wardType': 'ward_type', 'totalBeds': 'total_beds', 'isActive': 'is_active'}


def list_wards():
    """Active wards with their active beds."""
    beds = Bed.objects.filter(is_active=True).order_by('bed_number')
    wards = Ward.objects.filter(is_active=True).prefetch_related(Prefetch('beds', queryset=beds, to_attr='active_beds'))
    return list(wards.order_by('name'))


def get_ward_or_404(ward_id) -> Ward:
    ward = Ward.objects.filter(id=ward_id).first()
    if not ward:
        raise NotFound('Ward not found')
    return ward


def create_ward(user, data: dict) -> Ward:
    if Ward.objects.filter(name__iexact=data['name']).exists():
        raise Conflict('Ward with this name already exists')
    ward = Ward.objects.create(**{WARD_FIELDS[k]: v for k, v in data.items() if k in WARD_FIELDS})
    log_activity(user=user, action='CREATE', module='WARD', record_id=ward.id, description=f'Created ward {ward.name}')
    revalidate('wards', 'dashboard')
    return ward


def update_ward(user, ward_id, data: dict) -> Ward:
    ward = get_ward_or_404(ward_id)
    if 'name' in data and Ward.objects.filter(name__iexact=data['name']).exclude(id=ward.id).exists():
        raise Conflict('Ward with this name already exists')
    for key, value in data.items():
        if key in WARD_FIELDS:
            setattr(ward, WARD_FIELDS[key], value)
    ward.save()
    log_activity(user=user, action='UPDATE', module='WARD', record_id=ward.id, description=f'Updated ward {ward.name}')
    revalidate('wards', 'dashboard')
    return ward


def list_beds(ward_id=None):
    """Active beds with their current admission, if any, keyed by bed id."""
    qs = Bed.objects.filter(is_active=True).select_related('ward')
    if ward_id:
        qs = qs.filter(ward_id=ward_id)
    beds = list(qs.order_by('ward__name', 'bed_number'))
    current = {
        a.bed_id: a for a in Admission.objects.filter(
            bed__in=beds, status=Admission.STATUS_ADMITTED,
        ).select_related('patient', 'bed__ward').order_by('admission_date')
    }
    return beds, current


def create_bed(user, data: dict) -> Bed:
    ward = get_ward_or_404(data['wardId'])
    if Bed.objects.filter(ward=ward, bed_number=data['bedNumber']).exists():
        raise Conflict('Bed number already exists in this ward')
    price = data.get('pricePerDay')
    if price is None:
        price = Decimal(str(settings.DEFAULT_BED_PRICE_PER_DAY))
    try:
        with transaction.atomic():
            bed = Bed.objects.create(ward=ward, bed_number=data['bedNumber'], bed_type=data['bedType'],
                                     price_per_day=price)
    except IntegrityError:
        raise Conflict('Bed number already exists in this ward')
    log_activity(user=user, action='CREATE', module='BED', record_id=bed.id,
                 description=f'Added bed {bed.bed_number} to {ward.name}')
    revalidate('wards', 'dashboard')
    return bed


def update_bed_status(user, bed_id, is_occupied: bool) -> Bed:
    bed = Bed.objects.select_related('ward').filter(id=bed_id).first()
    if not bed:
        raise NotFound('Bed not found')
    bed.is_occupied = is_occupied
    bed.save(update_fields=['is_occupied', 'updated_at'])
    log_activity(user=user, action='UPDATE', module='BED', record_id=bed.id,
                 description=f'Bed {bed.bed_number} marked {"occupied" if is_occupied else "available"}')
    revalidate('wards', 'dashboard')
    return bed


def create_admission(user, data: dict) -> Admission:
    patient = Patient.objects.filter(id=data['patientId']).first()
    if not patient:
        raise NotFound('Patient not found')
    doctor = None
    if data.get('admittingDoctorId'):
        doctor = Doctor.objects.filter(id=data['admittingDoctorId']).first()
        if not doctor:
            raise NotFound('Doctor not found')
    days = data.get('expectedDays') or 0

    with transaction.atomic():
        bed = Bed.objects.select_for_update().select_related('ward').filter(id=data['bedId'], is_active=True).first()
        if bed is None or bed.is_occupied:
            raise ValidationError('Bed is not available')
        charges = bed.price_per_day * days
        admission = Admission.objects.create(
            patient=patient, bed=bed, admitting_doctor=doctor, reason=data['reason'],
            expected_discharge_date=timezone.now() + datetime.timedelta(days=days) if days else None,
            total_bed_charges=charges, status=Admission.STATUS_ADMITTED, notes=data.get('notes') or None,
        )
        bed.is_occupied = True
        bed.save(update_fields=['is_occupied', 'updated_at'])
        if charges > 0:
            PatientBilling.objects.create(
                patient=patient, charge_type=PatientBilling.CHARGE_ADMISSION, amount=charges,
                description=f'Ward Admission - {bed.ward.name} (Bed {bed.bed_number}) - {days} day(s)',
                related_id=str(admission.id),
            )
        log_activity(user=user, action='CREATE', module='ADMISSION', record_id=admission.id,
                     description=f'Admitted {patient.full_name} to {bed.ward.name} bed {bed.bed_number}')
        revalidate('wards', 'dashboard', 'billing')
    logger.info('admission %s: patient %s -> bed %s', admission.id, patient.id, bed.id)
    return admission


def discharge_patient(user, admission_id) -> Admission:
    with transaction.atomic():
        admission = Admission.objects.select_for_update().select_related('patient', 'bed__ward').filter(
            id=admission_id).first()
        if not admission:
            raise NotFound('Admission not found')
        if admission.status == Admission.STATUS_DISCHARGED:
            raise ValidationError('Patient is already discharged')
        admission.status = Admission.STATUS_DISCHARGED
        admission.discharge_date = timezone.now()
        admission.save(update_fields=['status', 'discharge_date'])
        Bed.objects.filter(id=admission.bed_id).update(is_occupied=False, updated_at=timezone.now())
        admission.bed.is_occupied = False
        log_activity(user=user, action='UPDATE', module='ADMISSION', record_id=admission.id,
                     description=f'Discharged {admission.patient.full_name}')
        revalidate('wards', 'dashboard')
    return admission


def list_admissions(status=None):
    qs = Admission.objects.select_related('patient', 'bed__ward')
    if status:
        qs = qs.filter(status=status)
    return list(qs.order_by('-admission_date', '-id'))
