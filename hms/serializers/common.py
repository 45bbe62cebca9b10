import bleach
from rest_framework import serializers


def clean_text(value):
    """Strip every HTML tag from user supplied text."""
    if value is None:
        return None
    return bleach.clean(str(value), tags=set(), strip=True).strip()


class CleanCharField(serializers.CharField):
    """CharField whose value is sanitised before validators run."""

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


def blank_to_none(data: dict, *keys: str) -> dict:
    for key in keys:
        if key in data and data[key] in ('', None):
            data[key] = None
    return data


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)
