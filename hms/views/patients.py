"""
Patient registration and lookup.

Any clinical or front-desk role may read patients; registration and
updates are limited by the route guard to doctors, nurses, receptionists
and administrators.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from hms.serializers.common import PageQuerySerializer
from hms.serializers.patient import PatientSearchSerializer, PatientSerializer
from hms.services import patients as svc
from hms.services.formatting import format_admission, format_appointment, format_billing, format_patient


@api_view(['GET', 'POST'])
def patients_list(request):
    if request.method == 'GET':
        q = PageQuerySerializer(data=request.query_params.dict())
        q.is_valid(raise_exception=True)
        page = q.validated_data.get('page') or 1
        page_size = q.validated_data.get('pageSize')
        patients, total = svc.list_patients(page, page_size)
        return Response({
            'ok': True,
            'data': [format_patient(p) for p in patients],
            'pagination': {'total': total, 'page': page, 'pageSize': page_size or total},
        })
    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = svc.create_patient(request.user, s.validated_data)
    return Response({'ok': True, 'data': format_patient(patient)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def patients_search(request):
    q = PatientSearchSerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    patients = svc.search_patients(q.validated_data['query'], q.validated_data['searchType'])
    return Response({'ok': True, 'data': [format_patient(p) for p in patients]})


@api_view(['GET', 'PUT'])
def patient_detail(request, pk: int):
    if request.method == 'GET':
        patient, appointments, admissions, billing = svc.patient_detail(pk)
        data = format_patient(patient)
        data['appointments'] = [format_appointment(a) for a in appointments]
        data['admissions'] = [format_admission(a, with_patient=False) for a in admissions]
        data['billingRecords'] = [format_billing(b, with_patient=False) for b in billing]
        return Response({'ok': True, 'data': data})
    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = svc.update_patient(request.user, pk, s.validated_data)
    return Response({'ok': True, 'data': format_patient(patient)})
