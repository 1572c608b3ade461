from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ['customer', 'reservation_date', 'reservation_time', 'number_of_guests', 'table', 'status']
    list_filter = ['status', 'reservation_date']
    search_fields = ['customer__name', 'customer__phone_number']
    raw_id_fields = ['customer', 'table', 'assigned_cast']
    date_hierarchy = 'reservation_date'
