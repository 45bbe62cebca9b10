from django.utils import timezone
from rest_framework import serializers

from hms.models import Patient
from .common import CleanCharField, blank_to_none


class PatientSerializer(serializers.Serializer):
    firstName = CleanCharField(min_length=2, max_length=100)
    lastName = CleanCharField(min_length=2, max_length=100)
    dateOfBirth = serializers.DateField()
    gender = serializers.ChoiceField(choices=[c[0] for c in Patient.GENDER_CHOICES])
    phoneNumber = CleanCharField(min_length=10, max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    address = CleanCharField(min_length=5)
    emergencyContact = CleanCharField(min_length=2, max_length=200)
    emergencyPhone = CleanCharField(min_length=10, max_length=32)
    bloodGroup = CleanCharField(required=False, allow_blank=True, allow_null=True, max_length=8)
    allergies = CleanCharField(required=False, allow_blank=True, allow_null=True)

    def validate_dateOfBirth(self, v):
        if v > timezone.localdate():
            raise serializers.ValidationError('Date of birth cannot be in the future')
        return v

    def validate(self, attrs):
        return blank_to_none(attrs, 'email', 'bloodGroup', 'allergies')


class PatientSearchSerializer(serializers.Serializer):
    query = serializers.CharField(min_length=1, max_length=100)
    searchType = serializers.ChoiceField(choices=['name', 'mrn', 'phone', 'email'], required=False, default='name')
