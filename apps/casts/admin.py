from django.contrib import admin

from .models import CastProfile, CastPerformance


@admin.register(CastProfile)
class CastProfileAdmin(admin.ModelAdmin):
    list_display = ['stage_name', 'staff', 'hourly_rate', 'back_percentage', 'is_active']
    list_filter = ['is_active']
    search_fields = ['stage_name', 'staff__full_name']


@admin.register(CastPerformance)
class CastPerformanceAdmin(admin.ModelAdmin):
    list_display = ['cast', 'date', 'shimei_count', 'dohan_count', 'sales_amount', 'drink_count']
    list_filter = ['date']
    date_hierarchy = 'date'
