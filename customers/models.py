from django.db import models


class CustomerManager(models.Manager):

    def resolve(self, mobile, name='', doctor_name=''):
        """
        Customer for a sale: found by mobile and refreshed in place, or created.
        Returns None when no mobile was given (walk-in sale).
        """
        mobile = (mobile or '').strip()
        if not mobile:
            return None
        customer = self.select_for_update().filter(mobile=mobile).first()
        if customer is None:
            return self.create(mobile=mobile, name=name or '', doctor_name=doctor_name or '')
        changed = []
        if name and customer.name != name:
            customer.name = name
            changed.append('name')
        if doctor_name and customer.doctor_name != doctor_name:
            customer.doctor_name = doctor_name
            changed.append('doctor_name')
        if changed:
            customer.save(update_fields=changed)
        return customer


class Customer(models.Model):
    name = models.CharField(max_length=255, blank=True, default='')
    mobile = models.CharField(max_length=15, unique=True)
    doctor_name = models.CharField(max_length=255, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    objects = CustomerManager()

    def __str__(self):
        return f"{self.name} ({self.mobile})"
