from decimal import Decimal

from rest_framework import serializers

from hms.models import Admission
from .common import CleanCharField


class WardSerializer(serializers.Serializer):
    name = CleanCharField(min_length=2, max_length=120)
    wardType = CleanCharField(min_length=2, max_length=40)
    totalBeds = serializers.IntegerField(min_value=0, required=False, default=0)
    isActive = serializers.BooleanField(required=False, default=True)


class BedSerializer(serializers.Serializer):
    wardId = serializers.IntegerField(min_value=1)
    bedNumber = CleanCharField(min_length=1, max_length=32)
    bedType = CleanCharField(min_length=2, max_length=40)
    pricePerDay = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'),
                                           required=False, allow_null=True)


class BedStatusSerializer(serializers.Serializer):
    isOccupied = serializers.BooleanField()


class AdmissionSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    bedId = serializers.IntegerField(min_value=1)
    admittingDoctorId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    reason = CleanCharField(min_length=2)
    expectedDays = serializers.IntegerField(min_value=1, max_value=365, required=False, allow_null=True)
    notes = CleanCharField(required=False, allow_blank=True, allow_null=True)


class AdmissionListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Admission.STATUS_CHOICES], required=False)
