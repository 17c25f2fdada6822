from rest_framework import serializers

from pharmacy_pos.serializers import MAX_AMOUNT, MAX_QUANTITY, MAX_RATE, AliasedFieldsMixin
from products.models import Product
from products.stock import quantities_by_product
from .calculator import calculate_totals
from .models import Bill, BillItem


class BillItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillItem
        fields = (
            'id', 'product_id', 'product_name', 'batch', 'mrp', 'rate', 'quantity',
            'expiry', 'discount', 'cgst', 'sgst',
        )


class BillSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Bill
        fields = (
            'id', 'bill_number', 'bill_date', 'patient_name', 'patient_mobile', 'doctor_name',
            'customer_id', 'status', 'subtotal', 'total_discount', 'total_cgst', 'total_sgst',
            'overall_discount_percent', 'grand_total', 'created_at', 'updated_at',
        )


class BillSerializer(BillSummarySerializer):
    items = BillItemSerializer(many=True, read_only=True)

    class Meta(BillSummarySerializer.Meta):
        fields = BillSummarySerializer.Meta.fields + ('items',)


class BillItemInputSerializer(AliasedFieldsMixin, serializers.Serializer):
    product_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    product_name = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')
    batch = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100, default='')
    mrp = serializers.FloatField(required=False, min_value=0, max_value=MAX_RATE, default=0)
    rate = serializers.FloatField(required=False, min_value=0, max_value=MAX_RATE, default=0)
    quantity = serializers.IntegerField(required=False, min_value=0, max_value=MAX_QUANTITY, default=0)
    expiry = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20, default='')
    discount = serializers.FloatField(required=False, min_value=0, max_value=100, default=0)
    cgst = serializers.FloatField(required=False, min_value=0, max_value=100, default=0)
    sgst = serializers.FloatField(required=False, min_value=0, max_value=100, default=0)


class BillInputSerializer(AliasedFieldsMixin, serializers.Serializer):
    patient_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    patient_mobile = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=15)
    doctor_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    bill_date = serializers.DateField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Bill.STATUS_CHOICES, required=False)
    overall_discount_percent = serializers.FloatField(required=False, min_value=0, max_value=100)
    items = BillItemInputSerializer(many=True, required=False)

    def validate_items(self, items):
        product_ids = {item['product_id'] for item in items if item.get('product_id')}
        known = set(Product.objects.filter(pk__in=product_ids).values_list('pk', flat=True))
        missing = sorted(product_ids - known)
        if missing:
            raise serializers.ValidationError(f'Unknown product id(s): {", ".join(map(str, missing))}')
        if any(quantity > MAX_QUANTITY for quantity in quantities_by_product(items).values()):
            raise serializers.ValidationError('Quantity per product is too large')
        return items

    def validate(self, attrs):
        if 'items' in attrs:
            totals = calculate_totals(attrs['items'], attrs.get('overall_discount_percent'))
            if max(totals.subtotal, totals.grand_total) > MAX_AMOUNT:
                raise serializers.ValidationError('Bill total is too large')
        return attrs
