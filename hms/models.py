"""
Database models for the hospital management backend.

The data model covers staff accounts and roles, patients, doctors and
their weekly schedules, appointments, inpatient capacity (wards, beds and
admissions), the pharmacy catalogue with its dispense history, the
per-patient billing ledger and an activity log used for auditing.
"""
from __future__ import annotations

from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class User(AbstractUser):
    """Staff account with a single role.

    The role decides which API sections a user may read or write (see
    ``ROLE_ROUTES`` in the settings) and which actions inside a section
    are permitted (see :mod:`hms.permissions`).
    """
    ROLE_ADMIN = 'admin'
    ROLE_DOCTOR = 'doctor'
    ROLE_NURSE = 'nurse'
    ROLE_LAB_TECHNICIAN = 'lab_technician'
    ROLE_RADIOLOGIST = 'radiologist'
    ROLE_PHARMACIST = 'pharmacist'
    ROLE_RECEPTIONIST = 'receptionist'
    ROLE_ACCOUNTANT = 'accountant'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_NURSE, 'Nurse'),
        (ROLE_LAB_TECHNICIAN, 'Lab technician'),
        (ROLE_RADIOLOGIST, 'Radiologist'),
        (ROLE_PHARMACIST, 'Pharmacist'),
        (ROLE_RECEPTIONIST, 'Receptionist'),
        (ROLE_ACCOUNTANT, 'Accountant'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_RECEPTIONIST, db_index=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username


class Patient(models.Model):
    GENDER_CHOICES = [
        ('MALE', 'Male'),
        ('FEMALE', 'Female'),
        ('OTHER', 'Other'),
    ]
    mrn = models.CharField(max_length=32, unique=True, help_text="Medical record number, e.g. 'MRN001'")
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    phone_number = models.CharField(max_length=32, db_index=True)
    email = models.EmailField(blank=True, null=True)
    address = models.TextField()
    emergency_contact = models.CharField(max_length=200)
    emergency_phone = models.CharField(max_length=32)
    blood_group = models.CharField(max_length=8, blank=True, null=True)
    allergies = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["last_name", "first_name"], name="patient_name_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.full_name} ({self.mrn})"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Doctor(models.Model):
    """Clinical profile attached to a user with the ``doctor`` role."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor_profile')
    license_number = models.CharField(max_length=64, unique=True)
    specialization = models.CharField(max_length=120)
    qualification = models.CharField(max_length=200)
    experience = models.PositiveIntegerField(default=0, help_text="Years of experience")
    consultation_fee = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    available_from = models.TimeField()
    available_to = models.TimeField()
    department = models.CharField(max_length=120)
    max_patients_per_day = models.PositiveIntegerField(default=20)
    phone = models.CharField(max_length=32, blank=True, null=True)
    email = models.EmailField(blank=True, null=True, help_text="Contact email shown to patients")
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Dr. {self.user.display_name} ({self.specialization})"


class DoctorSchedule(models.Model):
    """Weekly working hours of a doctor.

    ``day_of_week`` counts from Sunday (0) to Saturday (6).
    """
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='schedules')
    day_of_week = models.PositiveSmallIntegerField(validators=[MaxValueValidator(6)])
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_active = models.BooleanField(default=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['doctor', 'day_of_week'], name='uq_doctor_schedule_day'),
        ]
        ordering = ['day_of_week']

    def __str__(self) -> str:
        return f"{self.doctor_id}@{self.day_of_week} {self.start_time:%H:%M}-{self.end_time:%H:%M}"


class Appointment(models.Model):
    STATUS_SCHEDULED = 'SCHEDULED'
    STATUS_CONFIRMED = 'CONFIRMED'
    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_NO_SHOW = 'NO_SHOW'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No show'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='appointments')
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='appointments')
    appointment_date = models.DateField()
    appointment_time = models.TimeField()
    duration = models.PositiveIntegerField(default=30, help_text="Length in minutes")
    reason = models.TextField()
    notes = models.TextField(blank=True, null=True)
    fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["doctor", "appointment_date"], name="appt_doctor_date_idx"),
            models.Index(fields=["appointment_date", "status"], name="appt_date_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Appt {self.id}: {self.patient_id} with {self.doctor_id} on {self.appointment_date} {self.appointment_time:%H:%M}"


class Ward(models.Model):
    name = models.CharField(max_length=120, unique=True)
    ward_type = models.CharField(max_length=40)
    total_beds = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.ward_type})"


class Bed(models.Model):
    ward = models.ForeignKey(Ward, on_delete=models.CASCADE, related_name='beds')
    bed_number = models.CharField(max_length=32)
    bed_type = models.CharField(max_length=40)
    price_per_day = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    is_occupied = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['ward', 'bed_number'], name='uq_bed_number_per_ward'),
        ]
        indexes = [
            models.Index(fields=["ward", "is_occupied"], name="bed_ward_occupied_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.ward.name} - {self.bed_number}"


class Admission(models.Model):
    STATUS_ADMITTED = 'ADMITTED'
    STATUS_DISCHARGED = 'DISCHARGED'
    STATUS_CHOICES = [
        (STATUS_ADMITTED, 'Admitted'),
        (STATUS_DISCHARGED, 'Discharged'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='admissions')
    bed = models.ForeignKey(Bed, on_delete=models.PROTECT, related_name='admissions')
    admitting_doctor = models.ForeignKey(
        Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='admissions'
    )
    reason = models.TextField()
    admission_date = models.DateTimeField(auto_now_add=True)
    expected_discharge_date = models.DateTimeField(null=True, blank=True)
    discharge_date = models.DateTimeField(null=True, blank=True)
    total_bed_charges = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ADMITTED, db_index=True)
    notes = models.TextField(blank=True, null=True)

    def __str__(self) -> str:
        return f"Admission {self.id}: {self.patient_id} in bed {self.bed_id} ({self.status})"


class Drug(models.Model):
    name = models.CharField(max_length=200, unique=True)
    generic_name = models.CharField(max_length=200)
    manufacturer = models.CharField(max_length=200)
    dosage_form = models.CharField(max_length=60)
    strength = models.CharField(max_length=60)
    price = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    current_stock = models.PositiveIntegerField(default=0)
    min_stock = models.PositiveIntegerField(default=10)
    max_stock = models.PositiveIntegerField(default=1000)
    expiry_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} {self.strength}"

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock


class PharmacyDispense(models.Model):
    drug = models.ForeignKey(Drug, on_delete=models.PROTECT, related_name='dispenses')
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='dispenses')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    dispensed_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='dispenses'
    )
    notes = models.TextField(blank=True, null=True)
    dispensed_at = models.DateTimeField(auto_now_add=True, db_index=True)

    def __str__(self) -> str:
        return f"Dispense {self.id}: {self.quantity}x {self.drug_id} -> {self.patient_id}"


class PatientBilling(models.Model):
    """One chargeable event on a patient's account."""
    CHARGE_APPOINTMENT = 'APPOINTMENT'
    CHARGE_ADMISSION = 'ADMISSION'
    CHARGE_PHARMACY = 'PHARMACY'
    CHARGE_OTHER = 'OTHER'
    CHARGE_TYPE_CHOICES = [
        (CHARGE_APPOINTMENT, 'Appointment'),
        (CHARGE_ADMISSION, 'Admission'),
        (CHARGE_PHARMACY, 'Pharmacy'),
        (CHARGE_OTHER, 'Other'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='billing_records')
    description = models.CharField(max_length=255)
    charge_type = models.CharField(max_length=16, choices=CHARGE_TYPE_CHOICES, db_index=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    is_paid = models.BooleanField(default=False, db_index=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    related_id = models.CharField(max_length=64, blank=True, null=True, help_text="Id of the source record")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["patient", "is_paid"], name="billing_patient_paid_idx"),
            models.Index(fields=["charge_type", "related_id"], name="billing_charge_related_idx"),
        ]

    def __str__(self) -> str:
        state = 'paid' if self.is_paid else 'unpaid'
        return f"{self.charge_type} {self.amount} for {self.patient_id} ({state})"


class ActivityLog(models.Model):
    ACTION_CHOICES = (
        ("CREATE", "create"),
        ("UPDATE", "update"),
        ("DELETE", "delete"),
        ("LOGIN", "login"),
    )
    user = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='activity')
    action = models.CharField(max_length=16, choices=ACTION_CHOICES)
    module = models.CharField(max_length=32)
    record_id = models.CharField(max_length=64, blank=True, null=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["module", "created_at"], name="activity_module_created_idx"),
        ]

    def __str__(self):
        return f"{self.module}:{self.action}:{self.user_id}@{self.created_at:%F %T}"
