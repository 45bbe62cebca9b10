from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from hms.permissions import IsAdminRole, require
from hms.serializers.doctor import DoctorSerializer
from hms.services import doctors as svc
from hms.services.formatting import format_doctor


@api_view(['GET', 'POST'])
def doctors_list(request):
    """List doctors (``?available=1`` for bookable ones) or create one."""
    if request.method == 'GET':
        available_only = (request.query_params.get('available') or '0') in ('1', 'true', 'True')
        doctors = svc.list_doctors(available_only=available_only)
        return Response({'ok': True, 'data': [format_doctor(d) for d in doctors]})
    require(request, IsAdminRole)
    s = DoctorSerializer(data=request.data, context={'creating': True})
    s.is_valid(raise_exception=True)
    doctor = svc.create_doctor(request.user, s.validated_data)
    return Response({'ok': True, 'data': format_doctor(svc.get_doctor_or_404(doctor.id))},
                    status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT'])
def doctor_detail(request, pk: int):
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_doctor(svc.get_doctor_or_404(pk))})
    require(request, IsAdminRole)
    s = DoctorSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    doctor = svc.update_doctor(request.user, pk, s.validated_data)
    return Response({'ok': True, 'data': format_doctor(doctor)})
