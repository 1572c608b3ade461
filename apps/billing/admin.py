from django.contrib import admin

from .models import OrderItem, GuestOrder, DailyClosing


class GuestOrderInline(admin.TabularInline):
    model = GuestOrder
    extra = 0
    raw_id_fields = ['guest']


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ['visit', 'product', 'quantity', 'unit_price', 'total_price', 'cast', 'created_at']
    search_fields = ['visit__session_code', 'product__name']
    raw_id_fields = ['visit', 'product', 'cast']
    inlines = [GuestOrderInline]


@admin.register(DailyClosing)
class DailyClosingAdmin(admin.ModelAdmin):
    list_display = ['closing_date', 'total_visits', 'total_sales', 'total_cash', 'total_card', 'closed_by']
    readonly_fields = ['closed_at']
