from django.db import models
from customers.models import Customer
from products.models import Product


class Bill(models.Model):
    COMPLETED = 'Completed'
    HELD = 'Held'
    STATUS_CHOICES = (
        (COMPLETED, 'Completed'),
        (HELD, 'Held'),
    )
    bill_number = models.CharField(max_length=40, unique=True)
    bill_date = models.DateField()
    patient_name = models.CharField(max_length=255, blank=True, default='')
    patient_mobile = models.CharField(max_length=15, blank=True, default='')
    doctor_name = models.CharField(max_length=255, blank=True, default='')
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='bills')
    # Only Completed bills hold stock; Held bills are parked carts
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=COMPLETED)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_cgst = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_sgst = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    overall_discount_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    grand_total = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.bill_number

    @property
    def is_completed(self):
        return self.status == self.COMPLETED

    def assign_bill_number(self):
        """INV-<year>-<id>; needs the row id, so only valid after the first save."""
        self.bill_number = f'INV-{self.bill_date.year}-{str(self.id).zfill(4)}'


class BillItem(models.Model):
    """Snapshot of a sold line. Later product edits do not touch it."""
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name='bill_items')
    product_name = models.CharField(max_length=255, blank=True, default='')
    batch = models.CharField(max_length=100, blank=True, default='')
    mrp = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    quantity = models.PositiveIntegerField(default=0)
    expiry = models.CharField(max_length=20, blank=True, default='')
    discount = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    cgst = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    sgst = models.DecimalField(max_digits=5, decimal_places=2, default=0)

    def __str__(self):
        return f"{self.product_name} x {self.quantity} ({self.bill.bill_number})"
