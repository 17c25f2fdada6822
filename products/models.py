from decimal import Decimal

from django.db import models


def inclusive_rate(sale_rate, cgst, sgst):
    """Sale rate with CGST and SGST folded in."""
    rate = Decimal(str(sale_rate or 0))
    gst = Decimal(str(cgst or 0)) + Decimal(str(sgst or 0))
    return (rate + rate * gst / Decimal('100')).quantize(Decimal('0.01'))


class Product(models.Model):
    name = models.CharField(max_length=255)
    hsn = models.CharField(max_length=20, blank=True, default='')
    batch = models.CharField(max_length=100, blank=True, default='')
    packaging = models.CharField(max_length=50, blank=True, default='', help_text='e.g. 10x10, 100ml')
    quantity = models.PositiveIntegerField(default=0)
    mrp = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    purchase_rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    sale_rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    sale_rate_inclusive = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    expiry = models.CharField(max_length=7, blank=True, default='', help_text='Year-month, e.g. 2027-03')
    cgst = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    sgst = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['name', 'batch'], name='unique_product_name_batch'),
        ]

    def __str__(self):
        if self.batch:
            return f"{self.name} ({self.batch})"
        return self.name


class StockAdjustment(models.Model):
    """
    Append-only log of manual stock corrections. Negative quantities remove stock.
    Rows keep the product id and name they were written with, even after the
    product is deleted.
    """
    product = models.ForeignKey(
        Product, on_delete=models.DO_NOTHING, db_constraint=False, null=True, related_name='adjustments'
    )
    product_name = models.CharField(max_length=255, blank=True, default='')
    quantity_adjusted = models.IntegerField()
    reason = models.CharField(max_length=100)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.quantity_adjusted:+d} x {self.product_id} ({self.reason})"
