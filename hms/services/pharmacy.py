import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F, Q, ProtectedError, Sum
from rest_framework.exceptions import NotFound, ValidationError

from hms.exceptions import Conflict
from hms.models import Drug, Patient, PatientBilling, PharmacyDispense
from hms.services.audit import log_activity
from hms.services.revalidate import revalidate

logger = logging.getLogger(__name__)

DRUG_FIELDS = {
    'name': 'name',
    'genericName': 'generic_name',
    'manufacturer': 'manufacturer',
    'dosageForm': 'dosage_form',
    'strength': 'strength',
    'price': 'price',
    'currentStock': 'current_stock',
    'minStock': 'min_stock',
    'maxStock': 'max_stock',
    'expiryDate': 'expiry_date',
    'isActive': 'is_active',
}


def list_drugs():
    return list(Drug.objects.order_by('name'))


def get_drug_or_404(drug_id) -> Drug:
    drug = Drug.objects.filter(id=drug_id).first()
    if not drug:
        raise NotFound('Drug not found')
    return drug


def search_drugs(q: str):
    q = q.strip()
    cond = (Q(name__icontains=q) | Q(generic_name__icontains=q)
            | Q(manufacturer__icontains=q) | Q(dosage_form__icontains=q))
    return list(Drug.objects.filter(cond).order_by('name')[:50])


def create_drug(user, data: dict) -> Drug:
    if Drug.objects.filter(name__iexact=data['name']).exists():
        raise Conflict('Drug with this name already exists')
    drug = Drug.objects.create(**{DRUG_FIELDS[k]: v for k, v in data.items() if k in DRUG_FIELDS})
    log_activity(user=user, action='CREATE', module='PHARMACY', record_id=drug.id, description=f'Added drug {drug.name}')
    revalidate('pharmacy', 'dashboard')
    return drug


def update_drug(user, drug_id, data: dict) -> Drug:
    drug = get_drug_or_404(drug_id)
    if 'name' in data and Drug.objects.filter(name__iexact=data['name']).exclude(id=drug.id).exists():
        raise Conflict('Drug with this name already exists')
    for key, value in data.items():
        if key in DRUG_FIELDS:
            setattr(drug, DRUG_FIELDS[key], value)
    drug.save()
    log_activity(user=user, action='UPDATE', module='PHARMACY', record_id=drug.id, description=f'Updated drug {drug.name}')
    revalidate('pharmacy', 'dashboard')
    return drug


def delete_drug(user, drug_id) -> None:
    drug = get_drug_or_404(drug_id)
    name = drug.name
    try:
        drug.delete()
    except ProtectedError:
        raise Conflict('Drug has dispense history and cannot be deleted')
    log_activity(user=user, action='DELETE', module='PHARMACY', record_id=drug_id, description=f'Deleted drug {name}')
    revalidate('pharmacy', 'dashboard')


def update_drug_stock(user, drug_id, quantity: int, operation: str) -> Drug:
    with transaction.atomic():
        drug = Drug.objects.select_for_update().filter(id=drug_id).first()
        if not drug:
            raise NotFound('Drug not found')
        if operation == 'add':
            drug.current_stock += quantity
        else:
            drug.current_stock = max(0, drug.current_stock - quantity)
        drug.save(update_fields=['current_stock', 'updated_at'])
        log_activity(user=user, action='UPDATE', module='PHARMACY', record_id=drug.id,
                     description=f'Stock {operation} {quantity} for {drug.name}, now {drug.current_stock}')
        revalidate('pharmacy', 'dashboard')
    return drug


def low_stock_drugs():
    return list(Drug.objects.filter(current_stock__lte=F('min_stock')).order_by('current_stock', 'name'))


def pharmacy_statistics() -> dict:
    return {
        'totalDrugs': Drug.objects.count(),
        'lowStockDrugs': Drug.objects.filter(current_stock__lte=F('min_stock')).count(),
        'totalItems': Drug.objects.aggregate(total=Sum('current_stock'))['total'] or 0,
        'outOfStock': Drug.objects.filter(current_stock=0).count(),
    }


def _get_patient(patient_id) -> Patient:
    patient = Patient.objects.filter(id=patient_id).first()
    if not patient:
        raise NotFound('Patient not found')
    return patient


def dispense_drug(user, data: dict) -> PharmacyDispense:
    patient = _get_patient(data['patientId'])
    quantity = data['quantity']
    with transaction.atomic():
        drug = Drug.objects.select_for_update().filter(id=data['drugId']).first()
        if not drug:
            raise NotFound('Drug not found')
        if drug.current_stock < quantity:
            raise ValidationError(f'Insufficient stock. Available: {drug.current_stock}')
        total = drug.price * quantity
        dispense = PharmacyDispense.objects.create(
            drug=drug, patient=patient, quantity=quantity, unit_price=drug.price, total_price=total,
            dispensed_by=user, notes=data.get('notes') or None,
        )
        drug.current_stock -= quantity
        drug.save(update_fields=['current_stock', 'updated_at'])
        PatientBilling.objects.create(
            patient=patient, charge_type=PatientBilling.CHARGE_PHARMACY, amount=total,
            description=f'Pharmacy - {drug.name} ({quantity}x)', related_id=str(dispense.id),
        )
        log_activity(user=user, action='CREATE', module='PHARMACY', record_id=dispense.id,
                     description=f'Dispensed {quantity}x {drug.name} to {patient.full_name}')
        revalidate('pharmacy', 'dashboard', 'billing')
    logger.info('dispensed %sx drug %s to patient %s', quantity, drug.id, patient.id)
    return dispense


def dispense_multiple_drugs(user, data: dict) -> list[PharmacyDispense]:
    """Dispense several drugs to one patient and bill them as one charge."""
    patient = _get_patient(data['patientId'])
    wanted: dict[int, int] = {}
    for item in data['items']:
        wanted[item['drugId']] = wanted.get(item['drugId'], 0) + item['quantity']

    with transaction.atomic():
        drugs = {d.id: d for d in Drug.objects.select_for_update().filter(id__in=list(wanted))}
        if len(drugs) != len(wanted):
            raise NotFound('One or more drugs not found')
        for drug_id, qty in wanted.items():
            drug = drugs[drug_id]
            if drug.current_stock < qty:
                raise ValidationError(f'Insufficient stock for {drug.name}. Available: {drug.current_stock}')

        dispenses = []
        total = Decimal('0.00')
        for item in data['items']:
            drug = drugs[item['drugId']]
            line_total = drug.price * item['quantity']
            total += line_total
            dispenses.append(PharmacyDispense.objects.create(
                drug=drug, patient=patient, quantity=item['quantity'], unit_price=drug.price,
                total_price=line_total, dispensed_by=user, notes=data.get('notes') or None,
            ))
        for drug_id, qty in wanted.items():
            drug = drugs[drug_id]
            drug.current_stock -= qty
            drug.save(update_fields=['current_stock', 'updated_at'])
        PatientBilling.objects.create(
            patient=patient, charge_type=PatientBilling.CHARGE_PHARMACY, amount=total,
            description=f'Pharmacy - {len(dispenses)} drug(s) dispensed',
            related_id=str(dispenses[0].id),
        )
        log_activity(user=user, action='CREATE', module='PHARMACY', record_id=dispenses[0].id,
                     description=f'Dispensed {len(dispenses)} drug(s) to {patient.full_name}')
        revalidate('pharmacy', 'dashboard', 'billing')
    return dispenses


def dispense_history(*, patient_id=None, drug_id=None, start=None, end=None):
    qs = PharmacyDispense.objects.select_related('drug', 'patient', 'dispensed_by')
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if drug_id:
        qs = qs.filter(drug_id=drug_id)
    if start:
        qs = qs.filter(dispensed_at__date__gte=start)
    if end:
        qs = qs.filter(dispensed_at__date__lte=end)
    return list(qs.order_by('-dispensed_at', '-id'))
