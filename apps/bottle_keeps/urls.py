from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'bottle_keeps'

router = DefaultRouter()
router.register(r'', views.BottleKeepViewSet, basename='bottle-keep')

urlpatterns = [
    # GET    /api/bottle-keeps/                     - Search bottles
    # POST   /api/bottle-keeps/                     - Register bottle
    # GET    /api/bottle-keeps/{id}/                - Detail with usage and moves
    # POST   /api/bottle-keeps/{id}/serve/          - Pour from bottle
    # POST   /api/bottle-keeps/{id}/move/           - Change storage location
    # GET    /api/bottle-keeps/stats/               - Statistics
    # GET    /api/bottle-keeps/alerts/              - Expiry and low-amount alerts
    # GET    /api/bottle-keeps/expiry/              - Expiry buckets
    # GET    /api/bottle-keeps/locations/           - Storage locations
    # GET    /api/bottle-keeps/by-location/         - Active bottles per location
    # GET    /api/bottle-keeps/customer-summary/    - One customer's bottles
    # POST   /api/bottle-keeps/update-expired/      - Expire overdue bottles
    path('', include(router.urls)),
]
