import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from hms.models import PatientBilling
from hms.services.audit import log_activity
from hms.services.revalidate import revalidate

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def list_billing(*, patient_id=None, is_paid=None, charge_type=None):
    qs = PatientBilling.objects.select_related('patient')
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if is_paid is not None:
        qs = qs.filter(is_paid=is_paid)
    if charge_type:
        qs = qs.filter(charge_type=charge_type)
    return list(qs.order_by('-created_at', '-id'))


def billing_summary() -> list[dict]:
    """Totals per patient that has at least one billing record."""
    summaries: dict[int, dict] = {}
    for rec in PatientBilling.objects.select_related('patient').order_by('-created_at', '-id'):
        entry = summaries.get(rec.patient_id)
        if entry is None:
            entry = summaries[rec.patient_id] = {
                'patient': rec.patient,
                'totalCharges': ZERO,
                'paidAmount': ZERO,
                'dueAmount': ZERO,
                'unpaidCount': 0,
                'records': [],
            }
        entry['totalCharges'] += rec.amount
        if rec.is_paid:
            entry['paidAmount'] += rec.amount
        else:
            entry['dueAmount'] += rec.amount
            entry['unpaidCount'] += 1
        entry['records'].append(rec)
    return list(summaries.values())


def mark_billing_paid(user, ids: list[int]) -> int:
    """Mark unpaid rows paid. Rows already paid keep their ``paid_at``."""
    with transaction.atomic():
        updated = PatientBilling.objects.filter(id__in=ids, is_paid=False).update(
            is_paid=True, paid_at=timezone.now()
        )
        if updated:
            log_activity(user=user, action='UPDATE', module='BILLING', record_id=','.join(str(i) for i in ids)[:64],
                         description=f'Marked {updated} billing record(s) as paid')
            revalidate('billing', 'dashboard')
    logger.info('%s billing record(s) marked paid', updated)
    return updated


def billing_statistics() -> dict:
    today = timezone.localdate()
    paid = PatientBilling.objects.filter(is_paid=True)
    unpaid = PatientBilling.objects.filter(is_paid=False)
    return {
        'totalRevenue': paid.aggregate(s=Sum('amount'))['s'] or ZERO,
        'totalOutstanding': unpaid.aggregate(s=Sum('amount'))['s'] or ZERO,
        'todayRevenue': paid.filter(paid_at__date=today).aggregate(s=Sum('amount'))['s'] or ZERO,
        'pendingCount': unpaid.count(),
    }
