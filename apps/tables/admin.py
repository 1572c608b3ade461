from django.contrib import admin

from .models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ['table_name', 'capacity', 'location', 'is_vip', 'is_active', 'current_status']
    list_filter = ['current_status', 'is_vip', 'is_active']
    search_fields = ['table_name', 'location']
