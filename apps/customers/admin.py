from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'name_kana', 'phone_number', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['name', 'name_kana', 'phone_number', 'line_id']
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']
