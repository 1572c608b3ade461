from django.contrib import admin

from .models import BottleKeep, BottleKeepUsage, BottleKeepMovement


class BottleKeepUsageInline(admin.TabularInline):
    model = BottleKeepUsage
    extra = 0
    readonly_fields = ['created_at']


@admin.register(BottleKeep)
class BottleKeepAdmin(admin.ModelAdmin):
    list_display = ['bottle_number', 'customer', 'product', 'remaining_percentage', 'expiry_date', 'status']
    list_filter = ['status', 'storage_location']
    search_fields = ['bottle_number', 'customer__name', 'product__name']
    raw_id_fields = ['customer', 'product', 'host_staff']
    inlines = [BottleKeepUsageInline]


@admin.register(BottleKeepMovement)
class BottleKeepMovementAdmin(admin.ModelAdmin):
    list_display = ['bottle_keep', 'from_location', 'to_location', 'created_at']
