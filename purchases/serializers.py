from rest_framework import serializers

from billing.calculator import calculate_purchase_totals
from pharmacy_pos.serializers import MAX_AMOUNT, MAX_QUANTITY, MAX_RATE, AliasedFieldsMixin
from products.serializers import EXPIRY_VALIDATOR
from .models import PurchaseBill, PurchaseBillItem, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ('id', 'name', 'created_at')


class PurchaseBillItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseBillItem
        fields = (
            'id', 'product_id', 'product_name', 'hsn', 'batch', 'packaging', 'quantity', 'free_quantity',
            'mrp', 'purchase_rate', 'sale_rate', 'sale_rate_inclusive', 'discount', 'expiry',
            'cgst', 'sgst', 'igst', 'amount',
        )


class PurchaseBillSerializer(serializers.ModelSerializer):
    items = PurchaseBillItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseBill
        fields = (
            'id', 'supplier_id', 'supplier_name', 'bill_number', 'bill_date', 'tax_type',
            'total_pre_tax', 'overall_discount_percent', 'overall_discount_amount', 'taxable_amount',
            'total_gst_amount', 'rounding', 'grand_total', 'created_at', 'items',
        )


class PurchaseItemInputSerializer(AliasedFieldsMixin, serializers.Serializer):
    product_name = serializers.CharField(max_length=255)
    hsn = serializers.CharField(required=False, allow_blank=True, max_length=20, default='')
    batch = serializers.CharField(required=False, allow_blank=True, max_length=100, default='')
    packaging = serializers.CharField(required=False, allow_blank=True, max_length=50, default='')
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY)
    free_quantity = serializers.IntegerField(required=False, min_value=0, max_value=MAX_QUANTITY, default=0)
    mrp = serializers.FloatField(required=False, min_value=0, max_value=MAX_RATE, default=0)
    purchase_rate = serializers.FloatField(required=False, min_value=0, max_value=MAX_RATE, default=0)
    sale_rate = serializers.FloatField(required=False, min_value=0, max_value=MAX_RATE, default=0)
    sale_rate_inclusive = serializers.FloatField(required=False, min_value=0, max_value=MAX_RATE, allow_null=True)
    discount = serializers.FloatField(required=False, min_value=0, max_value=100, default=0)
    expiry = serializers.CharField(
        required=False, allow_blank=True, max_length=7, default='', validators=[EXPIRY_VALIDATOR]
    )
    cgst = serializers.FloatField(required=False, min_value=0, max_value=100, default=0)
    sgst = serializers.FloatField(required=False, min_value=0, max_value=100, default=0)
    igst = serializers.FloatField(required=False, min_value=0, max_value=100, default=0)

    def validate_product_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Product name is required.')
        return value


class PurchaseInputSerializer(AliasedFieldsMixin, serializers.Serializer):
    supplier_name = serializers.CharField(max_length=255)
    bill_number = serializers.CharField(required=False, allow_blank=True, max_length=100, default='')
    bill_date = serializers.DateField(required=False, allow_null=True)
    tax_type = serializers.CharField(required=False, allow_blank=True, max_length=20)
    overall_discount_percent = serializers.FloatField(required=False, min_value=0, max_value=100, default=0)
    items = PurchaseItemInputSerializer(many=True, allow_empty=False)

    def validate_supplier_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Supplier name is required.')
        return value

    def validate(self, attrs):
        totals = calculate_purchase_totals(attrs['items'], attrs.get('overall_discount_percent'))
        if max(totals.total_pre_tax, totals.grand_total) > MAX_AMOUNT:
            raise serializers.ValidationError('Purchase total is too large')
        for item in attrs['items']:
            if item['quantity'] + item.get('free_quantity', 0) > MAX_QUANTITY:
                raise serializers.ValidationError('Received quantity is too large')
        return attrs
