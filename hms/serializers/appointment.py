from rest_framework import serializers

from hms.models import Appointment
from .common import CleanCharField

TIME_FORMATS = ['%H:%M', '%H:%M:%S']


class AppointmentSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    doctorId = serializers.IntegerField(min_value=1)
    appointmentDate = serializers.DateField()
    appointmentTime = serializers.TimeField(input_formats=TIME_FORMATS)
    duration = serializers.IntegerField(min_value=15, max_value=240, required=False, default=30)
    reason = CleanCharField(min_length=1)
    notes = CleanCharField(required=False, allow_blank=True, allow_null=True)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Appointment.STATUS_CHOICES])


class RescheduleSerializer(serializers.Serializer):
    newDate = serializers.DateField()
    newTime = serializers.TimeField(input_formats=TIME_FORMATS)
    doctorId = serializers.IntegerField(min_value=1, required=False)
    duration = serializers.IntegerField(min_value=15, max_value=240, required=False)
    reason = CleanCharField(required=False, allow_blank=True)


class SlotQuerySerializer(serializers.Serializer):
    doctorId = serializers.IntegerField(min_value=1)
    date = serializers.DateField()


class AppointmentListQuerySerializer(serializers.Serializer):
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
    q = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def validate(self, attrs):
        start, end = attrs.get('startDate'), attrs.get('endDate')
        if (start is None) != (end is None):
            raise serializers.ValidationError('startDate and endDate must be given together')
        if start and end and start > end:
            raise serializers.ValidationError('startDate must not be after endDate')
        return attrs
