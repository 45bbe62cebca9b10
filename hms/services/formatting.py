"""
Response shapes shared by the API views.

Keys are camelCase to match what the front-end consumes; dates are ISO
strings and times ``HH:MM``. Decimal amounts are rendered as numbers by
the JSON renderer.
"""
from hms.models import (
    Admission, Appointment, Bed, Doctor, DoctorSchedule, Drug,
    Patient, PatientBilling, PharmacyDispense, User, Ward,
)


def _iso(value):
    return value.isoformat() if value else None


def _hhmm(value):
    return value.strftime('%H:%M') if value else None


def format_user(user: User) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'name': user.display_name,
        'email': user.email,
        'role': user.role,
    }


def format_patient_summary(p: Patient) -> dict:
    return {
        'id': p.id,
        'mrn': p.mrn,
        'firstName': p.first_name,
        'lastName': p.last_name,
        'fullName': p.full_name,
        'phoneNumber': p.phone_number,
    }


def format_patient(p: Patient) -> dict:
    return {
        **format_patient_summary(p),
        'dateOfBirth': _iso(p.date_of_birth),
        'gender': p.gender,
        'email': p.email,
        'address': p.address,
        'emergencyContact': p.emergency_contact,
        'emergencyPhone': p.emergency_phone,
        'bloodGroup': p.blood_group,
        'allergies': p.allergies,
        'isActive': p.is_active,
        'createdAt': _iso(p.created_at),
        'updatedAt': _iso(p.updated_at),
    }


def format_schedule(s: DoctorSchedule) -> dict:
    return {
        'id': s.id,
        'dayOfWeek': s.day_of_week,
        'startTime': _hhmm(s.start_time),
        'endTime': _hhmm(s.end_time),
        'isActive': s.is_active,
    }


def format_doctor_summary(d: Doctor) -> dict:
    return {
        'id': d.id,
        'name': d.user.display_name,
        'specialization': d.specialization,
        'department': d.department,
        'consultationFee': d.consultation_fee,
    }


def format_doctor(d: Doctor, *, with_schedules: bool = True) -> dict:
    data = {
        **format_doctor_summary(d),
        'userId': d.user_id,
        'email': d.user.email,
        'licenseNumber': d.license_number,
        'qualification': d.qualification,
        'experience': d.experience,
        'availableFrom': _hhmm(d.available_from),
        'availableTo': _hhmm(d.available_to),
        'maxPatientsPerDay': d.max_patients_per_day,
        'phone': d.phone,
        'doctorEmail': d.email,
        'isAvailable': d.is_available,
    }
    if with_schedules:
        data['schedules'] = [format_schedule(s) for s in d.schedules.all()]
    return data


def format_appointment(a: Appointment) -> dict:
    return {
        'id': a.id,
        'patientId': a.patient_id,
        'doctorId': a.doctor_id,
        'patient': format_patient_summary(a.patient),
        'doctor': format_doctor_summary(a.doctor),
        'appointmentDate': _iso(a.appointment_date),
        'appointmentTime': _hhmm(a.appointment_time),
        'duration': a.duration,
        'reason': a.reason,
        'notes': a.notes,
        'fee': a.fee,
        'status': a.status,
        'createdAt': _iso(a.created_at),
        'updatedAt': _iso(a.updated_at),
    }


def format_admission(a: Admission, *, with_patient: bool = True) -> dict:
    data = {
        'id': a.id,
        'patientId': a.patient_id,
        'bedId': a.bed_id,
        'bedNumber': a.bed.bed_number,
        'wardName': a.bed.ward.name,
        'admittingDoctorId': a.admitting_doctor_id,
        'reason': a.reason,
        'admissionDate': _iso(a.admission_date),
        'expectedDischargeDate': _iso(a.expected_discharge_date),
        'dischargeDate': _iso(a.discharge_date),
        'totalBedCharges': a.total_bed_charges,
        'status': a.status,
        'notes': a.notes,
    }
    if with_patient:
        data['patient'] = format_patient_summary(a.patient)
    return data


def format_bed(b: Bed, current: Admission | None = None) -> dict:
    return {
        'id': b.id,
        'wardId': b.ward_id,
        'wardName': b.ward.name,
        'bedNumber': b.bed_number,
        'bedType': b.bed_type,
        'pricePerDay': b.price_per_day,
        'isOccupied': b.is_occupied,
        'isActive': b.is_active,
        'currentAdmission': format_admission(current) if current else None,
    }


def format_ward(w: Ward, beds: list | None = None) -> dict:
    data = {
        'id': w.id,
        'name': w.name,
        'wardType': w.ward_type,
        'totalBeds': w.total_beds,
        'isActive': w.is_active,
    }
    if beds is not None:
        data['beds'] = [
            {'id': b.id, 'bedNumber': b.bed_number, 'bedType': b.bed_type,
             'pricePerDay': b.price_per_day, 'isOccupied': b.is_occupied}
            for b in beds
        ]
        data['occupiedBeds'] = sum(1 for b in beds if b.is_occupied)
        data['availableBeds'] = len(beds) - data['occupiedBeds']
    return data


def format_drug(d: Drug) -> dict:
    return {
        'id': d.id,
        'name': d.name,
        'genericName': d.generic_name,
        'manufacturer': d.manufacturer,
        'dosageForm': d.dosage_form,
        'strength': d.strength,
        'price': d.price,
        'currentStock': d.current_stock,
        'minStock': d.min_stock,
        'maxStock': d.max_stock,
        'expiryDate': _iso(d.expiry_date),
        'isActive': d.is_active,
        'isLowStock': d.is_low_stock,
    }


def format_dispense(x: PharmacyDispense) -> dict:
    return {
        'id': x.id,
        'drugId': x.drug_id,
        'drugName': x.drug.name,
        'patient': format_patient_summary(x.patient),
        'quantity': x.quantity,
        'unitPrice': x.unit_price,
        'totalPrice': x.total_price,
        'dispensedBy': x.dispensed_by.display_name if x.dispensed_by else None,
        'notes': x.notes,
        'dispensedAt': _iso(x.dispensed_at),
    }


def format_billing(b: PatientBilling, *, with_patient: bool = True) -> dict:
    data = {
        'id': b.id,
        'patientId': b.patient_id,
        'description': b.description,
        'chargeType': b.charge_type,
        'amount': b.amount,
        'isPaid': b.is_paid,
        'paidAt': _iso(b.paid_at),
        'relatedId': b.related_id,
        'createdAt': _iso(b.created_at),
    }
    if with_patient:
        data['patient'] = format_patient_summary(b.patient)
    return data
