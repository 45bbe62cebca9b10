from decimal import Decimal

from rest_framework import serializers

from .common import CleanCharField


class DrugSerializer(serializers.Serializer):
    name = CleanCharField(min_length=2, max_length=200)
    genericName = CleanCharField(min_length=2, max_length=200)
    manufacturer = CleanCharField(min_length=2, max_length=200)
    dosageForm = CleanCharField(min_length=2, max_length=60)
    strength = CleanCharField(min_length=1, max_length=60)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    currentStock = serializers.IntegerField(min_value=0, required=False, default=0)
    minStock = serializers.IntegerField(min_value=0, required=False, default=10)
    maxStock = serializers.IntegerField(min_value=0, required=False, default=1000)
    expiryDate = serializers.DateField(required=False, allow_null=True)
    isActive = serializers.BooleanField(required=False, default=True)


class StockUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    operation = serializers.ChoiceField(choices=['add', 'subtract'])


class DispenseSerializer(serializers.Serializer):
    drugId = serializers.IntegerField(min_value=1)
    patientId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)
    notes = CleanCharField(required=False, allow_blank=True, allow_null=True)


class DispenseItemSerializer(serializers.Serializer):
    drugId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class MultiDispenseSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    items = DispenseItemSerializer(many=True, allow_empty=False)
    notes = CleanCharField(required=False, allow_blank=True, allow_null=True)


class DispenseHistoryQuerySerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1, required=False)
    drugId = serializers.IntegerField(min_value=1, required=False)
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)
