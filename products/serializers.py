from django.core.validators import RegexValidator
from rest_framework import serializers

from pharmacy_pos.serializers import MAX_QUANTITY, AliasedFieldsMixin
from .models import Product, StockAdjustment, inclusive_rate

EXPIRY_VALIDATOR = RegexValidator(
    r'^(\d{4}-(0[1-9]|1[0-2]))?$', 'Expiry must be in YYYY-MM format.'
)


class ProductSerializer(AliasedFieldsMixin, serializers.ModelSerializer):
    expiry = serializers.CharField(
        max_length=7, required=False, allow_blank=True, allow_null=True, validators=[EXPIRY_VALIDATOR]
    )
    sale_rate_inclusive = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    quantity = serializers.IntegerField(required=False, max_value=MAX_QUANTITY)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'hsn', 'batch', 'packaging', 'quantity', 'mrp', 'purchase_rate',
            'sale_rate', 'sale_rate_inclusive', 'expiry', 'cgst', 'sgst', 'created_at',
        ]
        read_only_fields = ['id', 'created_at']
        # (name, batch) uniqueness is checked in validate() with a readable message
        validators = []

    def validate_quantity(self, value):
        # Stock never goes negative
        return max(0, value)

    def validate_expiry(self, value):
        return value or ''

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        batch = attrs.get('batch', getattr(self.instance, 'batch', ''))
        if name is not None:
            clash = Product.objects.filter(name=name, batch=batch or '')
            if self.instance is not None:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise serializers.ValidationError('Product with same name & batch already exists')

        if attrs.get('sale_rate_inclusive') is None:
            attrs.pop('sale_rate_inclusive', None)
            if self.instance is None or {'sale_rate', 'cgst', 'sgst'} & set(attrs):
                attrs['sale_rate_inclusive'] = inclusive_rate(
                    attrs.get('sale_rate', getattr(self.instance, 'sale_rate', 0)),
                    attrs.get('cgst', getattr(self.instance, 'cgst', 0)),
                    attrs.get('sgst', getattr(self.instance, 'sgst', 0)),
                )
        return attrs


class StockAdjustmentSerializer(AliasedFieldsMixin, serializers.ModelSerializer):
    product_id = serializers.PrimaryKeyRelatedField(source='product', queryset=Product.objects.all())

    class Meta:
        model = StockAdjustment
        fields = ['id', 'product_id', 'product_name', 'quantity_adjusted', 'reason', 'notes', 'created_at']
        read_only_fields = ['id', 'product_name', 'created_at']
        extra_kwargs = {'quantity_adjusted': {'min_value': -MAX_QUANTITY, 'max_value': MAX_QUANTITY}}

    def validate_quantity_adjusted(self, value):
        if value == 0:
            raise serializers.ValidationError('Adjustment quantity cannot be zero.')
        return value

    def create(self, validated_data):
        validated_data['product_name'] = validated_data['product'].name
        return super().create(validated_data)
