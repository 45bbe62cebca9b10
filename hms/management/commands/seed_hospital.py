"""
Management command to populate the database with a working hospital.
"""
import datetime
from decimal import Decimal

from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction

from hms.models import Bed, Doctor, DoctorSchedule, Drug, Patient, User, Ward

WARDS = [
    ("General Ward", "GENERAL", 20, Decimal("500.00")),
    ("ICU", "ICU", 10, Decimal("2000.00")),
    ("Private Ward", "PRIVATE", 15, Decimal("1500.00")),
]

DRUGS = [
    ("Paracetamol", "Acetaminophen", "500mg", "TABLET", "Generic Pharma", Decimal("2.50"), 1000),
    ("Amoxicillin", "Amoxicillin", "250mg", "CAPSULE", "Antibiotic Co.", Decimal("8.50"), 500),
    ("Ibuprofen", "Ibuprofen", "400mg", "TABLET", "Pain Relief Ltd", Decimal("5.00"), 800),
    ("Omeprazole", "Omeprazole", "20mg", "CAPSULE", "Gastro Pharma", Decimal("12.00"), 300),
    ("Metformin", "Metformin HCl", "500mg", "TABLET", "Diabetes Care", Decimal("3.50"), 600),
]


class Command(BaseCommand):
    help = "Seed staff users, a doctor with schedule, wards, beds, drugs and a sample patient."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding hospital data...")
        call_command("ensure_staff_users", stdout=self.stdout)
        self.create_doctor()
        beds = self.create_wards()
        drugs = self.create_drugs()
        self.create_patient()
        self.stdout.write(self.style.SUCCESS(f"Seed completed: {beds} beds, {drugs} drugs."))

    def create_doctor(self):
        user = User.objects.get(username="doctor@hospital.com")
        doctor, _ = Doctor.objects.get_or_create(
            user=user,
            defaults={
                "license_number": "MD001",
                "specialization": "General Medicine",
                "qualification": "MBBS, MD",
                "experience": 10,
                "consultation_fee": Decimal("500.00"),
                "available_from": datetime.time(9, 0),
                "available_to": datetime.time(17, 0),
                "department": "General Medicine",
                "max_patients_per_day": 25,
                "phone": "+1234567890",
                "email": "dr.smith@hospital.com",
            },
        )
        # Monday to Friday
        for day in range(1, 6):
            DoctorSchedule.objects.get_or_create(
                doctor=doctor, day_of_week=day,
                defaults={"start_time": datetime.time(9, 0), "end_time": datetime.time(17, 0)},
            )
        return doctor

    def create_wards(self) -> int:
        count = 0
        for name, ward_type, total, price in WARDS:
            ward, _ = Ward.objects.get_or_create(name=name, defaults={"ward_type": ward_type, "total_beds": total})
            for i in range(1, ward.total_beds + 1):
                Bed.objects.get_or_create(
                    ward=ward, bed_number=f"{name[0]}{i:02d}",
                    defaults={"bed_type": ward_type, "price_per_day": price},
                )
                count += 1
        return count

    def create_drugs(self) -> int:
        for name, generic, strength, form, maker, price, stock in DRUGS:
            Drug.objects.get_or_create(
                name=name,
                defaults={"generic_name": generic, "strength": strength, "dosage_form": form,
                          "manufacturer": maker, "price": price, "current_stock": stock},
            )
        return len(DRUGS)

    def create_patient(self):
        Patient.objects.get_or_create(
            mrn="MRN001",
            defaults={
                "first_name": "John",
                "last_name": "Doe",
                "date_of_birth": datetime.date(1990, 5, 15),
                "gender": "MALE",
                "phone_number": "+1234567890",
                "email": "john.doe@email.com",
                "address": "123 Main St, City, State",
                "emergency_contact": "Jane Doe",
                "emergency_phone": "+1234567891",
                "blood_group": "O+",
                "allergies": "None known",
            },
        )
