"""Field patterns shared by the staff and customer records."""

from datetime import date

from django.core.validators import RegexValidator
from django.utils import timezone
from rest_framework import serializers

KATAKANA_PATTERN = r'^[ァ-ヶー　]+$'
PHONE_PATTERN = r'^(0[0-9]{1,4}-?[0-9]{1,4}-?[0-9]{3,4}|0[0-9]{9,10})$'
TABLE_NAME_PATTERN = r'^[A-Za-z0-9-]+$'
TIME_PATTERN = r'^([01][0-9]|2[0-3]):[0-5][0-9]$'

katakana_validator = RegexValidator(KATAKANA_PATTERN, 'Must be written in full-width katakana.')
phone_validator = RegexValidator(PHONE_PATTERN, 'Enter a valid Japanese phone number.')


def validate_not_future(value: date):
    if value > timezone.localdate():
        raise serializers.ValidationError('Date cannot be in the future.')
    return value


def validate_not_past(value: date):
    if value < timezone.localdate():
        raise serializers.ValidationError('Date cannot be in the past.')
    return value


def validate_birthday(value: date):
    validate_not_future(value)
    if value.year < 1900:
        raise serializers.ValidationError('Birthday must be after 1900.')
    return value
