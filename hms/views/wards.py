"""
Ward, bed and admission endpoints.

The route guard admits administrators, doctors and nurses; ward changes
are admin only, bed creation is for admins and nurses, and discharge is
for admins and doctors.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from hms.permissions import (
    CanAdmit, CanDischarge, CanManageBeds, CanUpdateBedStatus, IsAdminRole, STAFF_PERMISSIONS, require,
)
from hms.serializers.ward import (
    AdmissionListQuerySerializer, AdmissionSerializer, BedSerializer, BedStatusSerializer, WardSerializer,
)
from hms.services import wards as svc
from hms.services.formatting import format_admission, format_bed, format_ward


@api_view(['GET', 'POST'])
def wards_list(request):
    if request.method == 'GET':
        wards = svc.list_wards()
        return Response({'ok': True, 'data': [format_ward(w, w.active_beds) for w in wards]})
    require(request, IsAdminRole)
    s = WardSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ward = svc.create_ward(request.user, s.validated_data)
    return Response({'ok': True, 'data': format_ward(ward)}, status=status.HTTP_201_CREATED)


@api_view(['PUT'])
@permission_classes(STAFF_PERMISSIONS + [IsAdminRole])
def ward_detail(request, pk: int):
    s = WardSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    ward = svc.update_ward(request.user, pk, s.validated_data)
    return Response({'ok': True, 'data': format_ward(ward)})


@api_view(['GET', 'POST'])
def beds_list(request):
    if request.method == 'GET':
        ward_id = request.query_params.get('wardId')
        beds, current = svc.list_beds(int(ward_id) if ward_id and ward_id.isdigit() else None)
        return Response({'ok': True, 'data': [format_bed(b, current.get(b.id)) for b in beds]})
    require(request, CanManageBeds)
    s = BedSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bed = svc.create_bed(request.user, s.validated_data)
    return Response({'ok': True, 'data': format_bed(bed)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(STAFF_PERMISSIONS + [CanUpdateBedStatus])
def bed_status(request, pk: int):
    s = BedStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bed = svc.update_bed_status(request.user, pk, s.validated_data['isOccupied'])
    return Response({'ok': True, 'data': format_bed(bed)})


@api_view(['GET', 'POST'])
def admissions_list(request):
    if request.method == 'GET':
        q = AdmissionListQuerySerializer(data=request.query_params.dict())
        q.is_valid(raise_exception=True)
        admissions = svc.list_admissions(q.validated_data.get('status'))
        return Response({'ok': True, 'data': [format_admission(a) for a in admissions]})
    require(request, CanAdmit)
    s = AdmissionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    admission = svc.create_admission(request.user, s.validated_data)
    return Response({'ok': True, 'data': format_admission(admission)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(STAFF_PERMISSIONS + [CanDischarge])
def admission_discharge(request, pk: int):
    admission = svc.discharge_patient(request.user, pk)
    return Response({'ok': True, 'data': format_admission(admission)})
