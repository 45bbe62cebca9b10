"""
Appointment scheduling.

A doctor works on the weekdays listed in ``DoctorSchedule`` (Sunday = 0).
A booking must fit inside that day's working hours and must not overlap
any non-cancelled appointment of the same doctor on the same date.
Intervals are half-open, so back-to-back bookings are allowed.
"""
import datetime
import logging
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from hms.exceptions import Conflict
from hms.models import Appointment, Doctor, DoctorSchedule, Patient, PatientBilling
from hms.services.audit import log_activity
from hms.services.revalidate import revalidate

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50
UPCOMING_STATUSES = (Appointment.STATUS_SCHEDULED, Appointment.STATUS_CONFIRMED)
CLOSED_STATUSES = (Appointment.STATUS_CANCELLED, Appointment.STATUS_COMPLETED)


def day_of_week(date: datetime.date) -> int:
    """Day index counted from Sunday (0) to Saturday (6)."""
    return (date.weekday() + 1) % 7


def _minutes(t: datetime.time) -> int:
    return t.hour * 60 + t.minute


def _hhmm(minutes: int) -> str:
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


def doctor_schedule_for(doctor_id, date: datetime.date) -> Optional[DoctorSchedule]:
    return DoctorSchedule.objects.filter(
        doctor_id=doctor_id, day_of_week=day_of_week(date), is_active=True,
    ).first()


def _busy_intervals(doctor_id, date, exclude_id=None) -> list[tuple[int, int]]:
    qs = Appointment.objects.filter(doctor_id=doctor_id, appointment_date=date).exclude(
        status=Appointment.STATUS_CANCELLED
    )
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return [(_minutes(t), _minutes(t) + d) for t, d in qs.values_list('appointment_time', 'duration')]


def has_time_conflict(doctor_id, date, time: datetime.time, duration: int, exclude_id=None) -> bool:
    start = _minutes(time)
    end = start + duration
    return any(start < e_end and end > e_start for e_start, e_end in _busy_intervals(doctor_id, date, exclude_id))


def _check_working_hours(doctor_id, date, time, duration) -> None:
    schedule = doctor_schedule_for(doctor_id, date)
    if schedule is None:
        raise ValidationError('Doctor is not available on this day')
    start = _minutes(time)
    if start < _minutes(schedule.start_time) or start + duration > _minutes(schedule.end_time):
        raise ValidationError(
            f'Appointment time must be between {schedule.start_time:%H:%M} and {schedule.end_time:%H:%M}'
        )


def get_appointment_or_404(appointment_id) -> Appointment:
    appt = Appointment.objects.select_related('patient', 'doctor__user').filter(id=appointment_id).first()
    if not appt:
        raise NotFound('Appointment not found')
    return appt


def _lock_doctor(doctor_id) -> Doctor:
    doctor = Doctor.objects.select_for_update().select_related('user').filter(id=doctor_id).first()
    if not doctor:
        raise NotFound('Doctor not found')
    return doctor


def create_appointment(user, data: dict) -> Appointment:
    patient = Patient.objects.filter(id=data['patientId']).first()
    if not patient:
        raise NotFound('Patient not found')
    date, time = data['appointmentDate'], data['appointmentTime']
    duration = data.get('duration') or 30

    with transaction.atomic():
        # the doctor row lock serialises bookings for that doctor
        doctor = _lock_doctor(data['doctorId'])
        _check_working_hours(doctor.id, date, time, duration)
        if has_time_conflict(doctor.id, date, time, duration):
            raise Conflict('This time slot conflicts with another appointment')
        fee = doctor.consultation_fee
        appt = Appointment.objects.create(
            patient=patient, doctor=doctor, appointment_date=date, appointment_time=time,
            duration=duration, reason=data['reason'], notes=data.get('notes') or None,
            fee=fee, status=Appointment.STATUS_SCHEDULED,
        )
        if fee > 0:
            PatientBilling.objects.create(
                patient=patient, description=f'Consultation - Dr. {doctor.user.display_name}',
                charge_type=PatientBilling.CHARGE_APPOINTMENT, amount=fee, is_paid=False,
                related_id=str(appt.id),
            )
        log_activity(user=user, action='CREATE', module='APPOINTMENT', record_id=appt.id,
                     description=f'Booked {patient.full_name} with Dr. {doctor.user.display_name} '
                                 f'on {date:%Y-%m-%d} at {time:%H:%M}')
        revalidate('appointments', 'dashboard', 'billing')
    logger.info('appointment %s booked for doctor %s on %s', appt.id, doctor.id, date)
    return appt


def update_appointment_status(user, appointment_id, status: str) -> Appointment:
    appt = get_appointment_or_404(appointment_id)
    previous = appt.status
    appt.status = status
    appt.save(update_fields=['status', 'updated_at'])
    log_activity(user=user, action='UPDATE', module='APPOINTMENT', record_id=appt.id,
                 description=f'Status {previous} -> {status} for {appt.patient.full_name}')
    revalidate('appointments', 'dashboard')
    return appt


def reschedule_appointment(user, appointment_id, data: dict) -> Appointment:
    appt = get_appointment_or_404(appointment_id)
    if appt.status in CLOSED_STATUSES:
        raise ValidationError('Cancelled or completed appointments cannot be rescheduled')

    date, time = data['newDate'], data['newTime']
    duration = data.get('duration') or appt.duration

    with transaction.atomic():
        doctor = _lock_doctor(data.get('doctorId') or appt.doctor_id)
        _check_working_hours(doctor.id, date, time, duration)
        if has_time_conflict(doctor.id, date, time, duration, exclude_id=appt.id):
            raise Conflict('The new time slot conflicts with another appointment')
        appt.doctor = doctor
        appt.appointment_date = date
        appt.appointment_time = time
        appt.duration = duration
        if data.get('reason'):
            appt.reason = data['reason']
        appt.save()
        log_activity(user=user, action='UPDATE', module='APPOINTMENT', record_id=appt.id,
                     description=f'Rescheduled appointment for {appt.patient.full_name} '
                                 f'to {date:%Y-%m-%d} at {time:%H:%M}')
        revalidate('appointments', 'dashboard')
    return appt


def available_time_slots(doctor_id, date) -> list[dict]:
    if not Doctor.objects.filter(id=doctor_id).exists():
        raise NotFound('Doctor not found')
    schedule = doctor_schedule_for(doctor_id, date)
    if schedule is None:
        raise ValidationError('Doctor is not available on this day')
    step = settings.APPOINTMENT_SLOT_MINUTES
    busy = _busy_intervals(doctor_id, date)
    slots = []
    current, work_end = _minutes(schedule.start_time), _minutes(schedule.end_time)
    while current < work_end:
        slot_end = current + step
        taken = any(current < e_end and slot_end > e_start for e_start, e_end in busy)
        slots.append({'time': _hhmm(current), 'available': not taken})
        current = slot_end
    return slots


def _base_qs():
    return Appointment.objects.select_related('patient', 'doctor__user')


def today_appointments():
    return list(_base_qs().filter(appointment_date=timezone.localdate()).order_by('appointment_time'))


def appointments_by_date_range(start, end):
    return list(_base_qs().filter(appointment_date__range=(start, end)).order_by('appointment_date', 'appointment_time'))


def list_appointments(limit: int = 200):
    return list(_base_qs().order_by('-appointment_date', '-appointment_time')[:limit])


def search_appointments(q: str):
    q = q.strip()
    cond = (Q(patient__first_name__icontains=q) | Q(patient__last_name__icontains=q)
            | Q(patient__mrn__icontains=q) | Q(reason__icontains=q))
    return list(_base_qs().filter(cond).order_by('-appointment_date', '-appointment_time')[:SEARCH_LIMIT])


def appointment_statistics() -> dict:
    today = timezone.localdate()
    todays = Appointment.objects.filter(appointment_date=today)
    return {
        'totalToday': todays.count(),
        'scheduledToday': todays.filter(status=Appointment.STATUS_SCHEDULED).count(),
        'completedToday': todays.filter(status=Appointment.STATUS_COMPLETED).count(),
        'cancelledToday': todays.filter(status=Appointment.STATUS_CANCELLED).count(),
        'total': Appointment.objects.count(),
        'thisMonth': Appointment.objects.filter(appointment_date__year=today.year,
                                                appointment_date__month=today.month).count(),
        'upcoming': Appointment.objects.filter(appointment_date__gte=today,
                                               status__in=UPCOMING_STATUSES).count(),
    }


def appointment_form_options() -> dict:
    patients = Patient.objects.filter(is_active=True).order_by('last_name', 'first_name')
    doctors = Doctor.objects.select_related('user').filter(is_available=True).order_by(
        'user__first_name', 'user__last_name')
    return {
        'patients': [{'id': p.id, 'mrn': p.mrn, 'name': p.full_name} for p in patients],
        'doctors': [
            {'id': d.id, 'name': d.user.display_name, 'specialization': d.specialization,
             'consultationFee': d.consultation_fee}
            for d in doctors
        ],
    }
