from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from hms.permissions import CanProcessPayments, STAFF_PERMISSIONS
from hms.serializers.billing import BillingListQuerySerializer, MarkPaidSerializer
from hms.services import billing as svc
from hms.services.formatting import format_billing, format_patient_summary


@api_view(['GET'])
def billing_list(request):
    q = BillingListQuerySerializer(data=request.query_params.dict())
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    records = svc.list_billing(patient_id=vd.get('patientId'), is_paid=vd.get('isPaid'),
                               charge_type=vd.get('chargeType'))
    return Response({'ok': True, 'data': [format_billing(b) for b in records]})


@api_view(['GET'])
def billing_summary(request):
    data = []
    for entry in svc.billing_summary():
        data.append({
            'patient': format_patient_summary(entry['patient']),
            'totalCharges': entry['totalCharges'],
            'paidAmount': entry['paidAmount'],
            'dueAmount': entry['dueAmount'],
            'unpaidCount': entry['unpaidCount'],
            'records': [format_billing(b, with_patient=False) for b in entry['records']],
        })
    return Response({'ok': True, 'data': data})


@api_view(['GET'])
def billing_stats(request):
    return Response({'ok': True, 'data': svc.billing_statistics()})


@api_view(['POST'])
@permission_classes(STAFF_PERMISSIONS + [CanProcessPayments])
def billing_mark_paid(request):
    s = MarkPaidSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    updated = svc.mark_billing_paid(request.user, s.validated_data['ids'])
    return Response({'ok': True, 'updated': updated})
