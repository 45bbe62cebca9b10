"""
End-to-end flows through the real authentication headers.

The other test modules use ``force_authenticate``; these log in with
username and password and then call the API with the returned legacy
token or JWT, the way the front end does.
"""
import datetime
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from hms.models import Doctor, DoctorSchedule, PatientBilling, User


class HospitalAPITests(APITestCase):
    def setUp(self) -> None:
        self.password = 'P@ssw0rd1'
        for role in ('receptionist', 'nurse', 'pharmacist'):
            User.objects.create_user(username=role, password=self.password, role=role)
        doctor_user = User.objects.create_user(username='dr.smith@hospital.com', password=self.password,
                                               role='doctor', first_name='John', last_name='Smith')
        self.doctor = Doctor.objects.create(
            user=doctor_user, license_number='MD001', specialization='General Medicine',
            qualification='MBBS, MD', experience=10, consultation_fee=Decimal('500.00'),
            available_from=datetime.time(9, 0), available_to=datetime.time(17, 0), department='General Medicine',
        )
        for day in range(1, 6):
            DoctorSchedule.objects.create(doctor=self.doctor, day_of_week=day, start_time=datetime.time(9, 0),
                                          end_time=datetime.time(17, 0))
        today = timezone.localdate()
        self.monday = today + datetime.timedelta(days=7 - today.weekday())

    def login(self, username: str, use_jwt: bool = False) -> APIClient:
        client = APIClient()
        resp = client.post(reverse('login_view'), {'username': username, 'password': self.password}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        if use_jwt:
            client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['jwt_access']}")
        else:
            client.credentials(HTTP_AUTHORIZATION=f"Token {resp.data['token']}")
        return client

    def test_anonymous_requests_are_rejected(self) -> None:
        resp = APIClient().get(reverse('patients'))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data['ok'])
        self.assertEqual(APIClient().get(reverse('healthz')).status_code, status.HTTP_200_OK)

    def test_registration_booking_and_payment_flow(self) -> None:
        reception = self.login('receptionist')
        resp = reception.post(reverse('patients'), {
            'firstName': 'Jane', 'lastName': 'Roe', 'dateOfBirth': '1985-01-01', 'gender': 'FEMALE',
            'phoneNumber': '+15550001111', 'address': '1 High Street', 'emergencyContact': 'John Roe',
            'emergencyPhone': '+15550002222', 'allergies': '<b>Penicillin</b>',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)
        patient = resp.data['data']
        self.assertEqual(patient['mrn'], 'MRN001')
        self.assertEqual(patient['allergies'], 'Penicillin')

        resp = reception.post(reverse('appointments'), {
            'patientId': patient['id'], 'doctorId': self.doctor.id, 'appointmentDate': self.monday.isoformat(),
            'appointmentTime': '10:00', 'reason': 'Checkup',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.data)

        # front desk has no billing access
        self.assertEqual(reception.get(reverse('billing')).status_code, status.HTTP_403_FORBIDDEN)

        nurse = self.login('nurse', use_jwt=True)
        resp = nurse.get(reverse('billing'), {'isPaid': 'false'})
        self.assertEqual(len(resp.data['data']), 1)
        bill = resp.data['data'][0]
        self.assertEqual(bill['description'], 'Consultation - Dr. John Smith')
        resp = nurse.post(reverse('billing_mark_paid'), {'ids': [bill['id']]}, format='json')
        self.assertEqual(resp.data['updated'], 1)
        self.assertTrue(PatientBilling.objects.get(id=bill['id']).is_paid)

    def test_pharmacist_cannot_register_patients(self) -> None:
        pharmacist = self.login('pharmacist')
        self.assertEqual(pharmacist.get(reverse('patients')).status_code, status.HTTP_200_OK)
        resp = pharmacist.post(reverse('patients'), {}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(pharmacist.get(reverse('appointments')).status_code, status.HTTP_403_FORBIDDEN)

    def test_doctor_profile_carries_doctor_id(self) -> None:
        doctor = self.login('dr.smith@hospital.com', use_jwt=True)
        resp = doctor.get(reverse('user_profile'))
        self.assertEqual(resp.data['user']['doctorId'], self.doctor.id)
