from django.db import models
from products.models import Product


class Supplier(models.Model):
    name = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class PurchaseBill(models.Model):
    """A supplier invoice as keyed in at the counter."""
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, related_name='purchase_bills')
    supplier_name = models.CharField(max_length=255)
    bill_number = models.CharField(max_length=100, blank=True, default='', help_text="Supplier's invoice number")
    bill_date = models.DateField()
    tax_type = models.CharField(max_length=20, blank=True, default='Intra-State')
    total_pre_tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    overall_discount_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    overall_discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    taxable_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_gst_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    rounding = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    grand_total = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Purchase {self.bill_number or self.id} from {self.supplier_name} on {self.bill_date}"


class PurchaseBillItem(models.Model):
    purchase_bill = models.ForeignKey(PurchaseBill, on_delete=models.CASCADE, related_name='items')
    # The catalog row this line created or replenished
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_items')
    product_name = models.CharField(max_length=255)
    hsn = models.CharField(max_length=20, blank=True, default='')
    batch = models.CharField(max_length=100, blank=True, default='')
    packaging = models.CharField(max_length=50, blank=True, default='')
    quantity = models.PositiveIntegerField(default=0)
    free_quantity = models.PositiveIntegerField(default=0)
    mrp = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    purchase_rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    sale_rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    sale_rate_inclusive = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    expiry = models.CharField(max_length=7, blank=True, default='')
    cgst = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    sgst = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    igst = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    def __str__(self):
        return f"{self.quantity}+{self.free_quantity} x {self.product_name}"
