from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand

from hms.models import User

STAFF_SET = [
    ("admin@hospital.com", "admin", "System", "Admin"),
    ("doctor@hospital.com", "doctor", "John", "Smith"),
    ("nurse@hospital.com", "nurse", "Mary", "Sister"),
    ("pharmacy@hospital.com", "pharmacist", "John", "Pharmacist"),
    ("reception@hospital.com", "receptionist", "Front", "Desk"),
    ("accounts@hospital.com", "accountant", "Account", "Office"),
]


class Command(BaseCommand):
    help = "Ensure demo staff users exist with the demo password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="admin123")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for email, role, first, last in STAFF_SET:
            u, created = User.objects.get_or_create(
                username=email,
                defaults={"email": email, "role": role, "first_name": first, "last_name": last,
                          "password": password, "is_active": True, "is_staff": role == "admin",
                          "is_superuser": role == "admin"},
            )
            if not created:
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All staff users ensured."))
