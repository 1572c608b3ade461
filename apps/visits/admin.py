from django.contrib import admin

from .models import Visit, TableSegment, Nomination, VisitGuest


class TableSegmentInline(admin.TabularInline):
    model = TableSegment
    extra = 0


class VisitGuestInline(admin.TabularInline):
    model = VisitGuest
    extra = 0
    raw_id_fields = ['customer']


class NominationInline(admin.TabularInline):
    model = Nomination
    extra = 0
    raw_id_fields = ['cast']


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ['session_code', 'customer', 'table', 'num_guests', 'status', 'total_amount', 'check_in_at']
    list_filter = ['status', 'payment_status']
    search_fields = ['session_code', 'customer__name']
    raw_id_fields = ['customer', 'table']
    inlines = [TableSegmentInline, VisitGuestInline, NominationInline]
