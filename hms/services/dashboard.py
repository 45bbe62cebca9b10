from django.conf import settings
from django.core.cache import cache
from django.db.models import F
from django.utils import timezone

from hms.models import ActivityLog, Appointment, Bed, Doctor, Drug, Patient, PatientBilling, User
from hms.services.revalidate import DASHBOARD_CACHE_KEY


def compute_dashboard_stats() -> dict:
    total_beds = Bed.objects.filter(is_active=True).count()
    occupied = Bed.objects.filter(is_active=True, is_occupied=True).count()
    return {
        'totalPatients': Patient.objects.filter(is_active=True).count(),
        'todayAppointments': Appointment.objects.filter(appointment_date=timezone.localdate()).count(),
        'lowStockDrugs': Drug.objects.filter(is_active=True, current_stock__lte=F('min_stock')).count(),
        'totalBeds': total_beds,
        'occupiedBeds': occupied,
        'unpaidBills': PatientBilling.objects.filter(is_paid=False).count(),
        'bedOccupancyRate': round(occupied * 100 / total_beds) if total_beds else 0,
    }


def dashboard_stats(*, refresh: bool = False) -> dict:
    """Dashboard counters, cached until the next revalidation or timeout."""
    if not refresh:
        cached = cache.get(DASHBOARD_CACHE_KEY)
        if cached is not None:
            return cached
    stats = compute_dashboard_stats()
    cache.set(DASHBOARD_CACHE_KEY, stats, settings.DASHBOARD_CACHE_SECONDS)
    return stats


def settings_overview() -> dict:
    return {
        'totalUsers': User.objects.count(),
        'activeUsers': User.objects.filter(is_active=True).count(),
        'totalPatients': Patient.objects.count(),
        'totalDoctors': Doctor.objects.count(),
    }


def recent_activity(module=None, limit: int = 50):
    qs = ActivityLog.objects.select_related('user')
    if module:
        qs = qs.filter(module__iexact=module)
    return list(qs.order_by('-created_at', '-id')[:limit])
