from rest_framework import serializers

from hms.models import PatientBilling


class BillingListQuerySerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, required=False)
    isPaid = serializers.BooleanField(required=False, allow_null=True, default=None)
    chargeType = serializers.ChoiceField(choices=[c[0] for c in PatientBilling.CHARGE_TYPE_CHOICES], required=False)


class MarkPaidSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
