from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'reservations'

router = DefaultRouter()
router.register(r'', views.ReservationViewSet, basename='reservation')

urlpatterns = [
    # GET    /api/reservations/                    - Search reservations
    # POST   /api/reservations/                    - Book
    # PATCH  /api/reservations/{id}/               - Edit (pending/confirmed)
    # POST   /api/reservations/{id}/confirm/       - Confirm
    # POST   /api/reservations/{id}/check_in/      - Check in at a table
    # POST   /api/reservations/{id}/complete/      - Complete
    # POST   /api/reservations/{id}/cancel/        - Cancel with reason
    # POST   /api/reservations/{id}/no_show/       - Mark no-show
    # GET    /api/reservations/availability/       - Slot availability
    # GET    /api/reservations/today/              - Today's bookings
    path('', include(router.urls)),
]
