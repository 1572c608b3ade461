from django.contrib import admin

from .models import Product, InventoryMovement


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'stock_quantity', 'low_stock_threshold', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['name']


@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    list_display = ['product', 'movement_type', 'quantity', 'reason', 'created_at']
    list_filter = ['movement_type']
    search_fields = ['product__name', 'reference_id']
    readonly_fields = ['created_at']
