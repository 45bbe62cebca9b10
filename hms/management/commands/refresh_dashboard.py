from django.core.management.base import BaseCommand
from django.utils import timezone

from hms.services.dashboard import dashboard_stats
from hms.services.revalidate import DASHBOARD_CACHE_KEY, broadcast


class Command(BaseCommand):
    help = "Recompute the dashboard cache and broadcast a WebSocket refresh event."

    def handle(self, *args, **options):
        now = timezone.now()
        stats = dashboard_stats(refresh=True)
        broadcast(['dashboard'])
        self.stdout.write(self.style.SUCCESS(
            f"Refreshed {DASHBOARD_CACHE_KEY} at {now}: {stats['totalPatients']} patients, "
            f"{stats['occupiedBeds']}/{stats['totalBeds']} beds occupied"
        ))
