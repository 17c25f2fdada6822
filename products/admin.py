from django.contrib import admin
from .models import Product, StockAdjustment


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'batch', 'hsn', 'quantity', 'sale_rate', 'expiry']
    search_fields = ['name', 'batch', 'hsn']


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(admin.ModelAdmin):
    list_display = ['product_name', 'product_id', 'quantity_adjusted', 'reason', 'created_at']
    list_filter = ['reason']

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
