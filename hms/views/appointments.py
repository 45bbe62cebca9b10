"""
Appointment booking endpoints.

Bookings are validated against the doctor's weekly schedule and existing
appointments in ``hms.services.appointments``; these views only parse
input and shape the responses.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from hms.serializers.appointment import (
    AppointmentListQuerySerializer,
    AppointmentSerializer,
    AppointmentStatusSerializer,
    RescheduleSerializer,
    SlotQuerySerializer,
)
from hms.services import appointments as svc
from hms.services.formatting import format_appointment


def _many(appointments):
    return Response({'ok': True, 'data': [format_appointment(a) for a in appointments]})


@api_view(['GET', 'POST'])
def appointments_list(request):
    """GET filters: ``startDate``+``endDate`` for a range or ``q`` for search."""
    if request.method == 'GET':
        q = AppointmentListQuerySerializer(data=request.query_params.dict())
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        if vd.get('startDate'):
            return _many(svc.appointments_by_date_range(vd['startDate'], vd.get('endDate') or vd['startDate']))
        if (vd.get('q') or '').strip():
            return _many(svc.search_appointments(vd['q']))
        return _many(svc.list_appointments())
    s = AppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = svc.create_appointment(request.user, s.validated_data)
    return Response({'ok': True, 'data': format_appointment(appt)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def appointments_today(request):
    return _many(svc.today_appointments())


@api_view(['GET'])
def appointment_stats(request):
    return Response({'ok': True, 'data': svc.appointment_statistics()})


@api_view(['GET'])
def appointment_form_options(request):
    return Response({'ok': True, 'data': svc.appointment_form_options()})


@api_view(['GET'])
def appointment_slots(request):
    q = SlotQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    slots = svc.available_time_slots(q.validated_data['doctorId'], q.validated_data['date'])
    return Response({'ok': True, 'data': slots})


@api_view(['GET'])
def appointment_detail(request, pk: int):
    return Response({'ok': True, 'data': format_appointment(svc.get_appointment_or_404(pk))})


@api_view(['POST'])
def appointment_status(request, pk: int):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = svc.update_appointment_status(request.user, pk, s.validated_data['status'])
    return Response({'ok': True, 'data': format_appointment(appt)})


@api_view(['POST'])
def appointment_reschedule(request, pk: int):
    s = RescheduleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = svc.reschedule_appointment(request.user, pk, s.validated_data)
    return Response({'ok': True, 'data': format_appointment(appt)})
