"""
Drug catalogue and dispensing.

Only administrators and pharmacists reach these endpoints. Deleting a
drug is admin only and is refused once the drug has been dispensed.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from hms.permissions import CanManageDrugs, IsAdminRole, STAFF_PERMISSIONS, require
from hms.serializers.pharmacy import (
    DispenseHistoryQuerySerializer, DispenseSerializer, DrugSerializer, MultiDispenseSerializer,
    StockUpdateSerializer,
)
from hms.services import pharmacy as svc
from hms.services.formatting import format_dispense, format_drug


@api_view(['GET', 'POST'])
def drugs_list(request):
    if request.method == 'GET':
        q = (request.query_params.get('q') or '').strip()
        drugs = svc.search_drugs(q) if q else svc.list_drugs()
        return Response({'ok': True, 'data': [format_drug(d) for d in drugs]})
    require(request, CanManageDrugs)
    s = DrugSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    drug = svc.create_drug(request.user, s.validated_data)
    return Response({'ok': True, 'data': format_drug(drug)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def drugs_low_stock(request):
    return Response({'ok': True, 'data': [format_drug(d) for d in svc.low_stock_drugs()]})


@api_view(['GET'])
def pharmacy_stats(request):
    return Response({'ok': True, 'data': svc.pharmacy_statistics()})


@api_view(['GET', 'PUT', 'DELETE'])
def drug_detail(request, pk: int):
    if request.method == 'GET':
        return Response({'ok': True, 'data': format_drug(svc.get_drug_or_404(pk))})
    if request.method == 'PUT':
        require(request, CanManageDrugs)
        s = DrugSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        drug = svc.update_drug(request.user, pk, s.validated_data)
        return Response({'ok': True, 'data': format_drug(drug)})
    # DELETE
    require(request, IsAdminRole)
    svc.delete_drug(request.user, pk)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes(STAFF_PERMISSIONS + [CanManageDrugs])
def drug_stock(request, pk: int):
    s = StockUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    drug = svc.update_drug_stock(request.user, pk, s.validated_data['quantity'], s.validated_data['operation'])
    return Response({'ok': True, 'data': format_drug(drug)})


@api_view(['POST'])
@permission_classes(STAFF_PERMISSIONS + [CanManageDrugs])
def dispense(request):
    s = DispenseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = svc.dispense_drug(request.user, s.validated_data)
    return Response({'ok': True, 'data': format_dispense(record)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(STAFF_PERMISSIONS + [CanManageDrugs])
def dispense_multiple(request):
    s = MultiDispenseSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    records = svc.dispense_multiple_drugs(request.user, s.validated_data)
    return Response({'ok': True, 'data': [format_dispense(r) for r in records]}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def dispense_history(request):
    q = DispenseHistoryQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    records = svc.dispense_history(patient_id=vd.get('patientId'), drug_id=vd.get('drugId'),
                                   start=vd.get('startDate'), end=vd.get('endDate'))
    return Response({'ok': True, 'data': [format_dispense(r) for r in records]})
