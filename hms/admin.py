"""
Django admin registrations for the hospital models.

Lets superusers inspect and correct data through ``/admin/``.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    ActivityLog,
    Admission,
    Appointment,
    Bed,
    Doctor,
    DoctorSchedule,
    Drug,
    Patient,
    PatientBilling,
    PharmacyDispense,
    User,
    Ward,
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'role', 'is_active', 'is_staff')
    list_filter = ('role', 'is_active', 'is_staff')
    fieldsets = BaseUserAdmin.fieldsets + (('Hospital', {'fields': ('role',)}),)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('mrn', 'first_name', 'last_name', 'gender', 'phone_number', 'is_active', 'created_at')
    list_filter = ('gender', 'is_active')
    search_fields = ('mrn', 'first_name', 'last_name', 'phone_number', 'email')


class DoctorScheduleInline(admin.TabularInline):
    model = DoctorSchedule
    extra = 0


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'license_number', 'specialization', 'department', 'is_available')
    list_filter = ('specialization', 'department', 'is_available')
    search_fields = ('license_number', 'user__first_name', 'user__last_name', 'user__email')
    inlines = [DoctorScheduleInline]


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment_date', 'appointment_time', 'duration', 'status')
    list_filter = ('status', 'appointment_date')
    search_fields = ('patient__mrn', 'patient__last_name', 'reason')


@admin.register(Ward)
class WardAdmin(admin.ModelAdmin):
    list_display = ('name', 'ward_type', 'total_beds', 'is_active')


@admin.register(Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ('bed_number', 'ward', 'bed_type', 'price_per_day', 'is_occupied', 'is_active')
    list_filter = ('ward', 'is_occupied', 'is_active')


@admin.register(Admission)
class AdmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'bed', 'status', 'admission_date', 'discharge_date', 'total_bed_charges')
    list_filter = ('status',)


@admin.register(Drug)
class DrugAdmin(admin.ModelAdmin):
    list_display = ('name', 'generic_name', 'strength', 'price', 'current_stock', 'min_stock', 'is_active')
    list_filter = ('dosage_form', 'is_active')
    search_fields = ('name', 'generic_name', 'manufacturer')


@admin.register(PharmacyDispense)
class PharmacyDispenseAdmin(admin.ModelAdmin):
    list_display = ('id', 'drug', 'patient', 'quantity', 'total_price', 'dispensed_by', 'dispensed_at')


@admin.register(PatientBilling)
class PatientBillingAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'charge_type', 'amount', 'is_paid', 'paid_at', 'created_at')
    list_filter = ('charge_type', 'is_paid')
    search_fields = ('patient__mrn', 'description', 'related_id')


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'user', 'action', 'module', 'record_id')
    list_filter = ('action', 'module')
    search_fields = ('description', 'record_id')
