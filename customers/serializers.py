from rest_framework import serializers

from pharmacy_pos.serializers import AliasedFieldsMixin
from .models import Customer


class CustomerSerializer(AliasedFieldsMixin, serializers.ModelSerializer):
    name = serializers.CharField(max_length=255)
    doctor_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = Customer
        fields = ('id', 'name', 'mobile', 'doctor_name', 'created_at')
        read_only_fields = ('id', 'created_at')
        # Duplicate mobiles are handled by the views
        extra_kwargs = {'mobile': {'validators': []}}

    def validate_mobile(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Mobile is required.')
        return value

    def validate_doctor_name(self, value):
        return value or ''
