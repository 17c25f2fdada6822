from django.contrib import admin
from .models import PurchaseBill, PurchaseBillItem, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


class PurchaseBillItemInline(admin.TabularInline):
    model = PurchaseBillItem
    extra = 0


@admin.register(PurchaseBill)
class PurchaseBillAdmin(admin.ModelAdmin):
    list_display = ['supplier_name', 'bill_number', 'bill_date', 'grand_total', 'created_at']
    list_filter = ['bill_date']
    search_fields = ['supplier_name', 'bill_number']
    inlines = [PurchaseBillItemInline]
