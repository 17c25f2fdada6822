from django.contrib import admin
from .models import Bill, BillItem


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('bill_number', 'bill_date', 'patient_name', 'status', 'grand_total')
    list_filter = ('status', 'bill_date')
    search_fields = ('bill_number', 'patient_name', 'patient_mobile')
    inlines = [BillItemInline]
