from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'mobile', 'doctor_name', 'created_at']
    search_fields = ['name', 'mobile']
