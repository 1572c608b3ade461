from django.contrib import admin

from .models import Staff


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'role', 'hire_date', 'is_active', 'user']
    list_filter = ['role', 'is_active']
    search_fields = ['full_name', 'full_name_kana', 'user__email']
    raw_id_fields = ['user']
