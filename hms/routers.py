"""
URL mappings for the hospital management API.

Paths carry no trailing slash. Section prefixes (``/api/patients``,
``/api/beds`` ...) are what ``settings.ROLE_ROUTES`` matches against, so
every endpoint of a section must live under its prefix.
"""
from django.urls import path, include

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view, user_profile
from .views import admin_panel, appointments, billing, dashboard, doctors, health, patients, pharmacy, wards

urlpatterns = [
    path('', include('django_prometheus.urls')),  # serves /metrics
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    path('api/user/profile', user_profile, name='user_profile'),
    # Dashboard
    path('api/dashboard', dashboard.dashboard, name='dashboard'),
    # Patients
    path('api/patients', patients.patients_list, name='patients'),
    path('api/patients/search', patients.patients_search, name='patients_search'),
    path('api/patients/<int:pk>', patients.patient_detail, name='patient_detail'),
    # Doctors
    path('api/doctors', doctors.doctors_list, name='doctors'),
    path('api/doctors/<int:pk>', doctors.doctor_detail, name='doctor_detail'),
    # Appointments
    path('api/appointments', appointments.appointments_list, name='appointments'),
    path('api/appointments/today', appointments.appointments_today, name='appointments_today'),
    path('api/appointments/stats', appointments.appointment_stats, name='appointment_stats'),
    path('api/appointments/form-options', appointments.appointment_form_options, name='appointment_form_options'),
    path('api/appointments/slots', appointments.appointment_slots, name='appointment_slots'),
    path('api/appointments/<int:pk>', appointments.appointment_detail, name='appointment_detail'),
    path('api/appointments/<int:pk>/status', appointments.appointment_status, name='appointment_status'),
    path('api/appointments/<int:pk>/reschedule', appointments.appointment_reschedule,
         name='appointment_reschedule'),
    # Wards, beds, admissions
    path('api/wards', wards.wards_list, name='wards'),
    path('api/wards/<int:pk>', wards.ward_detail, name='ward_detail'),
    path('api/beds', wards.beds_list, name='beds'),
    path('api/beds/<int:pk>/status', wards.bed_status, name='bed_status'),
    path('api/admissions', wards.admissions_list, name='admissions'),
    path('api/admissions/<int:pk>/discharge', wards.admission_discharge, name='admission_discharge'),
    # Pharmacy
    path('api/drugs', pharmacy.drugs_list, name='drugs'),
    path('api/drugs/low-stock', pharmacy.drugs_low_stock, name='drugs_low_stock'),
    path('api/drugs/<int:pk>', pharmacy.drug_detail, name='drug_detail'),
    path('api/drugs/<int:pk>/stock', pharmacy.drug_stock, name='drug_stock'),
    path('api/pharmacy/stats', pharmacy.pharmacy_stats, name='pharmacy_stats'),
    path('api/pharmacy/dispense', pharmacy.dispense, name='dispense'),
    path('api/pharmacy/dispense-multiple', pharmacy.dispense_multiple, name='dispense_multiple'),
    path('api/pharmacy/history', pharmacy.dispense_history, name='dispense_history'),
    # Billing
    path('api/billing', billing.billing_list, name='billing'),
    path('api/billing/summary', billing.billing_summary, name='billing_summary'),
    path('api/billing/stats', billing.billing_stats, name='billing_stats'),
    path('api/billing/mark-paid', billing.billing_mark_paid, name='billing_mark_paid'),
    # Administration
    path('api/admin/overview', admin_panel.admin_overview, name='admin_overview'),
    path('api/admin/activity', admin_panel.admin_activity, name='admin_activity'),
]
