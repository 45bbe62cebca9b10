from decimal import Decimal

from rest_framework import serializers

from .common import CleanCharField

TIME_FORMATS = ['%H:%M', '%H:%M:%S']


class DoctorSerializer(serializers.Serializer):
    """Create/update payload. ``password`` is required on create only."""
    name = CleanCharField(min_length=2, max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, required=False, allow_blank=True, write_only=True,
                                     trim_whitespace=False)
    licenseNumber = CleanCharField(min_length=5, max_length=64)
    specialization = CleanCharField(min_length=2, max_length=120)
    qualification = CleanCharField(min_length=2, max_length=200)
    experience = serializers.IntegerField(min_value=0)
    consultationFee = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    availableFrom = serializers.TimeField(input_formats=TIME_FORMATS)
    availableTo = serializers.TimeField(input_formats=TIME_FORMATS)
    department = CleanCharField(min_length=2, max_length=120)
    maxPatientsPerDay = serializers.IntegerField(min_value=1, required=False)
    phone = CleanCharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    doctorEmail = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    isAvailable = serializers.BooleanField(required=False)
    workingDays = serializers.ListField(
        child=serializers.IntegerField(min_value=0, max_value=6), required=False, allow_empty=True,
    )

    def validate(self, attrs):
        if attrs['availableFrom'] >= attrs['availableTo']:
            raise serializers.ValidationError({'availableTo': ['End time must be after start time']})
        if self.context.get('creating') and not attrs.get('password'):
            raise serializers.ValidationError({'password': ['Password is required']})
        if 'workingDays' in attrs:
            attrs['workingDays'] = sorted(set(attrs['workingDays']))
        for key in ('phone', 'doctorEmail'):
            if attrs.get(key) == '':
                attrs[key] = None
        return attrs
